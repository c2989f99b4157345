"""
Monte Carlo Match Prediction.

Runs the innings simulator many times per side and reduces the paired
trials into a single PredictionResult:
- Expected totals (mean of final scores) and score spread
- Win probability from paired trials (trial i of A vs trial i of B)
- Upset risk from the rating gap and the underdog's win rate
- A display-only win-probability curve

Supports both a from-scratch prediction and a live projection from an
in-progress MatchState, with optional multi-process execution.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

import numpy as np

from t20_predictor.data.reference import ReferenceData
from t20_predictor.features.team_context import StrengthResolver, TeamContext, venue_impact
from t20_predictor.models.engine_config import EngineConfig, UpsetRisk
from t20_predictor.models.simulator import MatchState, InningsSimulation, simulate_innings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinProbabilityPoint:
    """
    One sample of the display curve.

    The curve is the final estimate plus noise, not a per-over recomputation.
    """
    overs: float
    team_a_wp: float
    team_b_wp: float


@dataclass(frozen=True)
class FactorBreakdown:
    """Multiplicative factors behind team A's projection."""
    venue_base: int
    team_strength_mod: float
    toss_advantage: float


@dataclass(frozen=True)
class PredictionResult:
    """Outcome of one prediction request."""
    team_a: str
    team_b: str
    winner: str
    win_probability: float       # Always >= 0.5, for the winner
    team_a_win_prob: float       # Fraction of paired trials won by team A
    expected_total: float        # Team A mean final total
    live_projected_score: int
    team_b_expected_total: float
    team_a_score_std: float
    team_a_score_range: Tuple[float, float]  # 5th-95th percentile
    upset_risk: UpsetRisk
    venue_impact: str
    wp_curve: Tuple[WinProbabilityPoint, ...]
    breakdown: FactorBreakdown
    n_simulations: int

    @property
    def loser(self) -> str:
        return self.team_b if self.winner == self.team_a else self.team_a

    def to_dict(self) -> Dict:
        """Convert to plain Python types for a presentation layer."""
        d = asdict(self)
        d['upset_risk'] = self.upset_risk.label
        d['team_a_score_range'] = list(self.team_a_score_range)
        d['wp_curve'] = [asdict(p) for p in self.wp_curve]
        return d


def _simulate_chunk(args) -> np.ndarray:
    """Worker entry point: simulate one chunk of trials in a child process."""
    start, drift, config, n_trials, rng = args
    return simulate_innings(start, drift, config, rng, n_trials=n_trials).totals


class PredictionEngine:
    """
    Monte Carlo win-probability engine.

    Features:
    - Injectable reference tables and engine constants
    - Seeded numpy Generator threaded through every trial
    - Live projection from an in-progress innings
    - Optional ProcessPoolExecutor fan-out for large trial counts
    """

    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        n_workers: int = 1,
        min_trials_per_worker: int = 250
    ):
        """
        Args:
            reference: Team/venue/roster tables (built-in defaults if None)
            config: Engine constants (project settings if None)
            seed: Seed for the engine's generator; None for fresh entropy
            n_workers: Worker processes; 1 runs everything in-process
            min_trials_per_worker: Smallest chunk worth sending to a worker
        """
        if min_trials_per_worker < 1:
            raise ValueError(f"min_trials_per_worker must be at least 1, got {min_trials_per_worker}")
        self.config = config or EngineConfig.from_settings()
        self.resolver = StrengthResolver(reference, self.config)
        self.rng = np.random.default_rng(seed)
        self.n_workers = max(1, n_workers)
        self.min_trials_per_worker = min_trials_per_worker

    @property
    def reference(self) -> ReferenceData:
        return self.resolver.reference

    def simulate_side(
        self,
        context: TeamContext,
        start: MatchState,
        n_simulations: int,
        rng: np.random.Generator
    ) -> np.ndarray:
        """Final totals of `n_simulations` independent innings for one side."""
        n_chunks = min(self.n_workers, n_simulations // self.min_trials_per_worker)
        if n_chunks <= 1:
            return simulate_innings(start, context.drift, self.config, rng, n_trials=n_simulations).totals

        # Split work across workers, each with its own child generator
        chunk_size = n_simulations // n_chunks
        remainder = n_simulations % n_chunks
        child_rngs = rng.spawn(n_chunks)
        worker_args = [
            (start, context.drift, self.config, chunk_size + (1 if i < remainder else 0), child_rngs[i])
            for i in range(n_chunks)
        ]

        logger.debug(f"Simulating {n_simulations} innings for {context.team} across {n_chunks} workers")
        with ProcessPoolExecutor(max_workers=n_chunks) as executor:
            chunks = list(executor.map(_simulate_chunk, worker_args))
        return np.concatenate(chunks)

    def project_innings(
        self,
        team: str,
        venue: Optional[str] = None,
        toss_winner: Optional[str] = None,
        live_state: Optional[MatchState] = None,
        n_simulations: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> InningsSimulation:
        """
        Simulate one side's innings with path recording, e.g. for charting a
        live projection.
        """
        rng = rng if rng is not None else self.rng
        n = n_simulations if n_simulations is not None else self.config.num_simulations
        context = self.resolver.resolve(team, venue, toss_winner)
        return simulate_innings(
            live_state or MatchState(), context.drift, self.config, rng,
            n_trials=n, record_path=True
        )

    def predict(
        self,
        team_a: str,
        team_b: str,
        venue: Optional[str] = None,
        toss_winner: Optional[str] = None,
        live_state: Optional[MatchState] = None,
        n_simulations: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> PredictionResult:
        """
        Predict a match between team_a and team_b.

        With only the two team names this is a from-scratch prediction on a
        neutral venue with no toss information. Passing `live_state` projects
        team A forward from an in-progress innings; team B always starts fresh.

        Args:
            team_a: First team (its live state, expected total and breakdown are reported)
            team_b: Second team
            venue: Venue name or city, matched against the venue table
            toss_winner: Team that won the toss, if known
            live_state: Team A's in-progress innings (fresh if None)
            n_simulations: Trials per side (config default if None)
            rng: Generator to draw from (the engine's own if None)
        """
        rng = rng if rng is not None else self.rng
        n = n_simulations if n_simulations is not None else self.config.num_simulations
        if n < 1:
            raise ValueError(f"n_simulations must be at least 1, got {n}")
        live_state = (live_state or MatchState()).validate(self.config)

        context_a = self.resolver.resolve(team_a, venue, toss_winner)
        context_b = self.resolver.resolve(team_b, venue, toss_winner)

        totals_a = self.simulate_side(context_a, live_state, n, rng)
        totals_b = self.simulate_side(context_b, MatchState(), n, rng)

        result = self._aggregate(context_a, context_b, totals_a, totals_b, rng)
        logger.info(
            f"{team_a} vs {team_b}: {result.winner} {result.win_probability:.1%} "
            f"(xT {result.expected_total:.1f}, upset risk {result.upset_risk.label}, n={n})"
        )
        return result

    def _aggregate(
        self,
        context_a: TeamContext,
        context_b: TeamContext,
        totals_a: np.ndarray,
        totals_b: np.ndarray,
        rng: np.random.Generator
    ) -> PredictionResult:
        """Reduce paired trial totals into a PredictionResult."""
        n = len(totals_a)
        expected_a = float(np.mean(totals_a))
        team_a_win_prob = float(np.mean(totals_a > totals_b))

        if team_a_win_prob > 0.5:
            winner, win_probability = context_a.team, team_a_win_prob
        else:
            winner, win_probability = context_b.team, 1.0 - team_a_win_prob

        return PredictionResult(
            team_a=context_a.team,
            team_b=context_b.team,
            winner=winner,
            win_probability=win_probability,
            team_a_win_prob=team_a_win_prob,
            expected_total=expected_a,
            live_projected_score=int(np.floor(expected_a)),
            team_b_expected_total=float(np.mean(totals_b)),
            team_a_score_std=float(np.std(totals_a)),
            team_a_score_range=(float(np.percentile(totals_a, 5)), float(np.percentile(totals_a, 95))),
            upset_risk=self.config.upset_policy.classify(
                context_a.strength, context_b.strength, team_a_win_prob
            ),
            venue_impact=venue_impact(context_a.venue_modifier),
            wp_curve=self.build_wp_curve(team_a_win_prob, rng),
            breakdown=FactorBreakdown(
                venue_base=int(np.floor(self.config.venue_base_score * context_a.venue_modifier)),
                team_strength_mod=round(context_a.strength / self.config.strength_reference, 2),
                toss_advantage=context_a.toss_bias,
            ),
            n_simulations=n,
        )

    def build_wp_curve(
        self,
        team_a_win_prob: float,
        rng: np.random.Generator
    ) -> Tuple[WinProbabilityPoint, ...]:
        """
        Display curve: the final estimate jittered by symmetric noise and
        clamped to [0, 1] at each sample point.
        """
        n_points = self.config.curve_points
        overs = np.linspace(0, self.config.max_overs, n_points)
        jitter = (rng.random(n_points) - 0.5) * self.config.curve_noise
        wp = np.clip(team_a_win_prob + jitter, 0.0, 1.0)
        return tuple(
            WinProbabilityPoint(overs=float(o), team_a_wp=float(p), team_b_wp=float(1.0 - p))
            for o, p in zip(overs, wp)
        )


def predict(
    team_a: str,
    team_b: str,
    venue: Optional[str] = None,
    toss_winner: Optional[str] = None,
    live_state: Optional[MatchState] = None,
    seed: Optional[int] = None,
    reference: Optional[ReferenceData] = None,
    config: Optional[EngineConfig] = None
) -> PredictionResult:
    """
    Predict a match with a fresh engine.

    predict('India', 'USA') is the from-scratch form; add venue, toss_winner
    and live_state for a context-aware or live prediction.
    """
    engine = PredictionEngine(reference=reference, config=config, seed=seed)
    return engine.predict(team_a, team_b, venue=venue, toss_winner=toss_winner, live_state=live_state)
