"""
Shared fixtures: small reference tables and seeded generators.
"""

import numpy as np
import pytest

from t20_predictor.data.reference import ReferenceData, Venue, Player
from t20_predictor.models.engine_config import EngineConfig
from t20_predictor.models.prediction import PredictionEngine


@pytest.fixture
def fixture_reference() -> ReferenceData:
    """Teams without rostered players, so form is exactly 1.0."""
    return ReferenceData(
        team_strengths={
            'Strong': 9.2,
            'Weak': 7.0,
            'EvenA': 8.0,
            'EvenB': 8.0,
        },
        venues=[
            Venue('Flat Deck Oval', 'Runtown', 1.1),
            Venue('Green Top Park', 'Seamville', 0.9),
            Venue('Middle Ground', 'Evenham', 1.0),
        ],
        players=[],
        default_strength=7.0,
    )


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def engine(fixture_reference, config) -> PredictionEngine:
    return PredictionEngine(reference=fixture_reference, config=config, seed=42)


@pytest.fixture
def squad_reference() -> ReferenceData:
    """A team with a rostered squad for form-multiplier tests."""
    return ReferenceData(
        team_strengths={'Formed': 8.0, 'Unformed': 8.0},
        venues=[],
        players=[
            Player('a', 'Opener', 'Formed', 'Batter', 1.4, 0.0, 0.8),
            Player('b', 'Quick', 'Formed', 'Bowler', 0.0, 0.07, 0.6),
        ],
    )
