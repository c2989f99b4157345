#!/usr/bin/env python3
"""
Predict a single T20 match with the Monte Carlo engine.

Examples:
    python scripts/predict_match.py India Australia
    python scripts/predict_match.py India Australia --venue Mumbai --toss India
    python scripts/predict_match.py India Pakistan --overs 10 --runs 90 --wickets 2
"""

import sys
import argparse
import logging
import logging.config
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import LOGGING_CONFIG, SIMULATION_CONFIG, PARALLELISM_CONFIG
from t20_predictor.data.reference import get_reference_data
from t20_predictor.models.engine_config import EngineConfig
from t20_predictor.models.prediction import PredictionEngine, PredictionResult
from t20_predictor.models.simulator import MatchState

logger = logging.getLogger(__name__)


def print_prediction(result: PredictionResult, live_state: MatchState):
    print("=" * 70)
    print(f"{result.team_a} vs {result.team_b}")
    print("=" * 70)
    if not live_state.is_fresh:
        print(f"\nLive: {result.team_a} {live_state.runs}/{live_state.wickets} after {live_state.overs} overs")
    print(f"\nPredicted Winner:   {result.winner} ({result.win_probability:.1%})")
    print(f"Expected Total:     {result.expected_total:.1f} (+/- {result.team_a_score_std:.1f})")
    print(f"90% Score Range:    {result.team_a_score_range[0]:.0f} - {result.team_a_score_range[1]:.0f}")
    print(f"{result.team_b} Expected: {result.team_b_expected_total:.1f}")
    print(f"Upset Risk:         {result.upset_risk.label}")
    print(f"Venue Impact:       {result.venue_impact}")
    print("\nBreakdown:")
    print(f"  Venue base score:  {result.breakdown.venue_base}")
    print(f"  Strength modifier: {result.breakdown.team_strength_mod}")
    print(f"  Toss advantage:    {result.breakdown.toss_advantage}")
    print(f"\nWin probability trend ({result.team_a}):")
    for point in result.wp_curve[::5]:
        print(f"  Over {point.overs:4.1f}: {point.team_a_wp:.1%}")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Predict a T20 match')
    parser.add_argument('team_a', type=str, help='First team (live state applies to this side)')
    parser.add_argument('team_b', type=str, help='Second team')
    parser.add_argument('--venue', type=str, default=None, help='Venue name or city')
    parser.add_argument('--toss', type=str, default=None, help='Toss winner')
    parser.add_argument('--overs', type=float, default=0.0, help='Overs bowled in team A innings')
    parser.add_argument('--runs', type=int, default=0, help='Runs scored by team A')
    parser.add_argument('--wickets', type=int, default=0, help='Wickets lost by team A')
    parser.add_argument('--simulations', type=int, default=SIMULATION_CONFIG['num_simulations'],
                        help='Trials per side')
    parser.add_argument('--seed', type=int, default=SIMULATION_CONFIG['random_seed'], help='Random seed')
    parser.add_argument('--workers', type=int, default=1,
                        help=f"Worker processes (up to {PARALLELISM_CONFIG['n_workers']} recommended)")
    parser.add_argument('--reference', type=str, default=None, help='Reference data JSON file')

    args = parser.parse_args(argv)

    live_state = MatchState(overs=args.overs, runs=args.runs, wickets=args.wickets)
    engine = PredictionEngine(
        reference=get_reference_data(args.reference),
        config=EngineConfig.from_settings(),
        seed=args.seed,
        n_workers=args.workers,
        min_trials_per_worker=PARALLELISM_CONFIG['min_trials_per_worker'],
    )

    logger.info(f"Predicting {args.team_a} vs {args.team_b} ({args.simulations} sims/side)")
    result = engine.predict(
        args.team_a,
        args.team_b,
        venue=args.venue,
        toss_winner=args.toss,
        live_state=live_state,
        n_simulations=args.simulations,
    )

    print_prediction(result, live_state)
    return result


if __name__ == '__main__':
    logging.config.dictConfig(LOGGING_CONFIG)
    main()
