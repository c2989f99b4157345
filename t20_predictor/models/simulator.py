"""
Stochastic Innings Simulator.

Models a T20 innings as a discretised stochastic differential equation,
stepped one legal delivery at a time:
- Drift: expected scoring rate (team drift) damped by wickets in hand
- Diffusion: zero-mean uniform noise scaled by a volatility constant
- Jumps: wickets drawn with a probability that ramps up over the innings

Trials are vectorised: an InningsState carries one row per independent
trial, so a batch of 1000 innings advances in 120 numpy steps. Every draw
comes from an explicitly passed numpy Generator.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from t20_predictor.models.engine_config import EngineConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchState:
    """
    Snapshot of an innings in progress (all zero for a fresh innings).

    Signs and integrality are checked on construction. Upper bounds depend on
    the innings length, so they are checked against an EngineConfig by
    `validate` before any simulation starts.
    `target` is carried for context only and does not end the innings early.
    """
    overs: float = 0.0
    runs: int = 0
    wickets: int = 0
    target: Optional[int] = None

    def __post_init__(self):
        if self.overs < 0:
            raise ValueError(f"overs must be non-negative, got {self.overs}")
        if self.runs < 0 or self.runs != int(self.runs):
            raise ValueError(f"runs must be a non-negative integer, got {self.runs}")
        if self.wickets < 0 or self.wickets != int(self.wickets):
            raise ValueError(f"wickets must be a non-negative integer, got {self.wickets}")
        if self.target is not None and self.target < 0:
            raise ValueError(f"target must be non-negative, got {self.target}")

    def validate(self, config: EngineConfig) -> 'MatchState':
        """Check the snapshot fits an innings of config.max_overs / max_wickets."""
        if self.overs > config.max_overs:
            raise ValueError(f"overs must be in [0, {config.max_overs}], got {self.overs}")
        if self.wickets > config.max_wickets:
            raise ValueError(f"wickets must be in [0, {config.max_wickets}], got {self.wickets}")
        return self

    def completed_balls(self, balls_per_over: int) -> int:
        """
        Deliveries fully bowled. A snapshot between deliveries (19.95 overs)
        still has the current delivery to come.
        """
        return int(math.floor(self.overs * balls_per_over + 1e-9))

    @property
    def is_fresh(self) -> bool:
        return self.overs == 0 and self.runs == 0 and self.wickets == 0


@dataclass
class InningsState:
    """Current state of a batch of independent innings trials."""
    runs: np.ndarray      # float, one entry per trial
    wickets: np.ndarray   # int, one entry per trial
    balls: int = 0        # Deliveries bowled; the clock is shared by all trials
    balls_per_over: int = 6

    @classmethod
    def from_match_state(
        cls,
        state: MatchState,
        n_trials: int,
        config: EngineConfig
    ) -> 'InningsState':
        """Give each trial its own copy of the starting snapshot."""
        state.validate(config)
        return cls(
            runs=np.full(n_trials, float(state.runs)),
            wickets=np.full(n_trials, int(state.wickets), dtype=np.int64),
            balls=state.completed_balls(config.balls_per_over),
            balls_per_over=config.balls_per_over,
        )

    @property
    def n_trials(self) -> int:
        return self.runs.shape[0]

    @property
    def overs(self) -> float:
        """Overs elapsed as a real number (10.5 = ten and a half overs)."""
        return self.balls / self.balls_per_over

    def is_terminal(self, config: EngineConfig) -> bool:
        """True once the overs are exhausted or every trial is all out."""
        if self.balls >= config.max_balls:
            return True
        return bool(np.all(self.wickets >= config.max_wickets))


def step(
    state: InningsState,
    drift: float,
    config: EngineConfig,
    rng: np.random.Generator
) -> InningsState:
    """
    Advance every trial by one delivery.

    A wicket step adds no runs. Trials already all out are left untouched.
    Returns a new state; the input is not modified.
    """
    if state.is_terminal(config):
        return state

    n = state.n_trials
    active = state.wickets < config.max_wickets

    # Draw both deviates for every trial so the stream does not depend on outcomes
    wicket_draws = rng.random(n)
    noise = (rng.random(n) - 0.5) * config.volatility

    is_wicket = active & (wicket_draws < config.wicket_probability(state.overs))

    pressure = (config.max_wickets - state.wickets) / config.max_wickets
    accrued = np.maximum(0.0, drift / config.balls_per_over * pressure + noise)
    scoring = active & ~is_wicket

    return InningsState(
        runs=np.where(scoring, state.runs + accrued, state.runs),
        wickets=state.wickets + is_wicket.astype(np.int64),
        balls=state.balls + 1,
        balls_per_over=state.balls_per_over,
    )


@dataclass
class InningsPath:
    """
    Recorded (over, runs, wickets) samples, starting with the initial state.

    Shapes: overs (n_samples,), runs and wickets (n_samples, n_trials).
    """
    overs: np.ndarray
    runs: np.ndarray
    wickets: np.ndarray

    def samples(self, trial: int = 0) -> List[Tuple[float, float, int]]:
        """Path of a single trial as (overs, runs, wickets) tuples."""
        return [
            (float(o), float(r), int(w))
            for o, r, w in zip(self.overs, self.runs[:, trial], self.wickets[:, trial])
        ]

    def mean_runs(self) -> np.ndarray:
        """Average runs across trials at each sample, for charting a projection."""
        return self.runs.mean(axis=1)


@dataclass
class InningsSimulation:
    """Outcome of simulating a batch of innings to completion."""
    totals: np.ndarray          # Final run totals (floored), one per trial
    wickets: np.ndarray         # Final wickets, one per trial
    final_balls: int
    steps: int
    path: Optional[InningsPath] = field(default=None)

    @property
    def mean_total(self) -> float:
        return float(np.mean(self.totals))


def simulate_innings(
    start: MatchState,
    drift: float,
    config: EngineConfig,
    rng: np.random.Generator,
    n_trials: int = 1,
    record_path: bool = False
) -> InningsSimulation:
    """
    Simulate `n_trials` independent innings from `start` to completion.

    Terminates when all overs are bowled or every trial is all out, so at
    most config.max_balls steps are taken. A start that is already terminal
    returns the starting total unchanged.

    Args:
        start: Starting snapshot (fresh or live)
        drift: Resolved team drift in runs per over
        config: Engine constants
        rng: Random generator; all draws come from here
        n_trials: Number of independent trials
        record_path: Keep every intermediate (over, runs, wickets) sample

    Returns:
        InningsSimulation with per-trial totals and optional path
    """
    if drift < 0:
        raise ValueError(f"drift must be non-negative, got {drift}")
    if n_trials < 1:
        raise ValueError(f"n_trials must be at least 1, got {n_trials}")

    state = InningsState.from_match_state(start, n_trials, config)

    overs_log, runs_log, wickets_log = [], [], []
    if record_path:
        overs_log.append(state.overs)
        runs_log.append(state.runs)
        wickets_log.append(state.wickets)

    steps = 0
    while not state.is_terminal(config):
        state = step(state, drift, config, rng)
        steps += 1
        if record_path:
            overs_log.append(state.overs)
            runs_log.append(state.runs)
            wickets_log.append(state.wickets)

    path = None
    if record_path:
        path = InningsPath(
            overs=np.array(overs_log),
            runs=np.vstack(runs_log),
            wickets=np.vstack(wickets_log),
        )

    return InningsSimulation(
        totals=np.floor(state.runs).astype(np.int64),
        wickets=state.wickets,
        final_balls=state.balls,
        steps=steps,
        path=path,
    )
