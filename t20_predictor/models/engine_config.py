"""
Tunable constants for the innings simulator and the Monte Carlo aggregator.

All numeric knobs of the engine live here so that alternative calibrations
are configuration, not code. Defaults come from config.SIMULATION_CONFIG and
config.UPSET_RISK_CONFIG.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, Optional


class UpsetRisk(IntEnum):
    """Ordered upset-risk category: LOW < MEDIUM < HIGH."""
    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class UpsetRiskPolicy:
    """
    Classify how likely the lower-rated side is to win.

    Thresholds:
        strength_gap: Rating gap above which an upset is meaningful at all.
            At or below the gap the match is an even contest -> LOW.
        high_underdog_prob: Underdog paired-trial win rate above this -> HIGH.
        medium_underdog_prob: Underdog win rate above this -> MEDIUM, else LOW.
    """
    strength_gap: float = 1.2
    high_underdog_prob: float = 0.40
    medium_underdog_prob: float = 0.30

    def __post_init__(self):
        if self.strength_gap < 0:
            raise ValueError(f"strength_gap must be non-negative, got {self.strength_gap}")
        if not 0.0 <= self.medium_underdog_prob <= self.high_underdog_prob <= 1.0:
            raise ValueError(
                "Upset thresholds must satisfy 0 <= medium_underdog_prob <= high_underdog_prob <= 1, "
                f"got {self.medium_underdog_prob} / {self.high_underdog_prob}"
            )

    def classify(self, strength_a: float, strength_b: float, team_a_win_prob: float) -> UpsetRisk:
        """
        Args:
            strength_a: Baseline rating of team A
            strength_b: Baseline rating of team B
            team_a_win_prob: Fraction of paired trials won by team A
        """
        if abs(strength_a - strength_b) <= self.strength_gap:
            return UpsetRisk.LOW

        underdog_prob = team_a_win_prob if strength_a < strength_b else 1.0 - team_a_win_prob

        if underdog_prob > self.high_underdog_prob:
            return UpsetRisk.HIGH
        elif underdog_prob > self.medium_underdog_prob:
            return UpsetRisk.MEDIUM
        return UpsetRisk.LOW


@dataclass(frozen=True)
class EngineConfig:
    """
    Constants of the discretised score process and the aggregator.

    The innings is stepped one legal delivery at a time (step = 1/balls_per_over
    of an over). Per step:
        P(wicket) = wicket_base_rate * (1 + overs_elapsed / max_overs)
        runs     += max(0, drift / balls_per_over * (max_wickets - wickets) / max_wickets
                           + (U - 0.5) * volatility)
    """
    num_simulations: int = 1000
    max_overs: int = 20
    balls_per_over: int = 6
    max_wickets: int = 10
    volatility: float = 0.7
    wicket_base_rate: float = 0.025
    toss_bias: float = 1.05
    form_floor: float = 0.95
    form_span: float = 0.1
    curve_points: int = 21
    curve_noise: float = 0.1
    venue_base_score: int = 160
    strength_reference: float = 8.0
    upset_policy: UpsetRiskPolicy = field(default_factory=UpsetRiskPolicy)

    def __post_init__(self):
        for name in ('num_simulations', 'max_overs', 'balls_per_over', 'max_wickets', 'curve_points'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        for name in ('toss_bias', 'form_floor', 'strength_reference'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.volatility < 0 or self.curve_noise < 0 or self.form_span < 0:
            raise ValueError("volatility, curve_noise and form_span must be non-negative")
        # Ramp doubles the base rate by the final ball
        if not 0.0 <= self.wicket_base_rate <= 0.5:
            raise ValueError(f"wicket_base_rate must be in [0, 0.5], got {self.wicket_base_rate}")

    @property
    def max_balls(self) -> int:
        return self.max_overs * self.balls_per_over

    @property
    def step_size(self) -> float:
        """Length of one step in overs."""
        return 1.0 / self.balls_per_over

    def wicket_probability(self, overs_elapsed: float) -> float:
        """Per-delivery wicket probability; non-decreasing in overs_elapsed."""
        return self.wicket_base_rate * (1.0 + overs_elapsed / self.max_overs)

    def with_overrides(self, **overrides) -> 'EngineConfig':
        return replace(self, **overrides)

    @classmethod
    def from_settings(
        cls,
        simulation: Optional[Dict] = None,
        upset_risk: Optional[Dict] = None
    ) -> 'EngineConfig':
        """
        Build from the project settings dictionaries.

        Unknown keys (e.g. random_seed) are ignored; they
        belong to other components.
        """
        if simulation is None or upset_risk is None:
            from config import SIMULATION_CONFIG, UPSET_RISK_CONFIG
            simulation = SIMULATION_CONFIG if simulation is None else simulation
            upset_risk = UPSET_RISK_CONFIG if upset_risk is None else upset_risk

        known = set(cls.__dataclass_fields__) - {'upset_policy'}
        kwargs = {k: v for k, v in simulation.items() if k in known}
        return cls(upset_policy=UpsetRiskPolicy(**upset_risk), **kwargs)
