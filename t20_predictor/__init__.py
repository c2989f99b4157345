"""
T20 win-probability engine.

Monte Carlo simulation of limited-overs innings as a stochastic process,
reduced to win probabilities, expected totals and upset risk.
"""

from t20_predictor.data.reference import ReferenceData, Venue, Player
from t20_predictor.models.engine_config import EngineConfig, UpsetRisk, UpsetRiskPolicy
from t20_predictor.models.simulator import MatchState, simulate_innings, step
from t20_predictor.models.prediction import PredictionEngine, PredictionResult, predict
from t20_predictor.models.tournament import TournamentSimulator, TournamentResult

__version__ = "0.1.0"

__all__ = [
    "ReferenceData", "Venue", "Player",
    "EngineConfig", "UpsetRisk", "UpsetRiskPolicy",
    "MatchState", "simulate_innings", "step",
    "PredictionEngine", "PredictionResult", "predict",
    "TournamentSimulator", "TournamentResult",
]
