#!/usr/bin/env python3
"""
Simulate a T20 World Cup and print stage-by-stage odds for every team.

Groups are snake-seeded from the reference strength table.
"""

import sys
import argparse
import logging
import logging.config
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import LOGGING_CONFIG, SIMULATION_CONFIG, TOURNAMENT_CONFIG
from t20_predictor.data.reference import get_reference_data
from t20_predictor.models.engine_config import EngineConfig
from t20_predictor.models.prediction import PredictionEngine
from t20_predictor.models.tournament import TournamentSimulator

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Simulate a T20 tournament')
    parser.add_argument('--tournaments', type=int, default=TOURNAMENT_CONFIG['num_tournaments'],
                        help='Number of tournaments to simulate')
    parser.add_argument('--h2h-simulations', type=int, default=TOURNAMENT_CONFIG['head_to_head_simulations'],
                        help='Trials per side for each head-to-head pairing')
    parser.add_argument('--groups', type=int, default=TOURNAMENT_CONFIG['n_groups'], help='Number of groups')
    parser.add_argument('--venue', type=str, default=None, help='Venue for every fixture')
    parser.add_argument('--seed', type=int, default=SIMULATION_CONFIG['random_seed'], help='Random seed')
    parser.add_argument('--reference', type=str, default=None, help='Reference data JSON file')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')

    args = parser.parse_args(argv)

    engine = PredictionEngine(
        reference=get_reference_data(args.reference),
        config=EngineConfig.from_settings(),
        seed=args.seed,
    )
    simulator = TournamentSimulator(
        engine,
        venue=args.venue,
        n_groups=args.groups,
        qualifiers_per_group=TOURNAMENT_CONFIG['qualifiers_per_group'],
        head_to_head_simulations=args.h2h_simulations,
    )

    for name, group in zip('ABCDEFGH', simulator.groups):
        logger.info(f"Group {name}: {', '.join(group)}")

    result = simulator.simulate(args.tournaments, show_progress=not args.no_progress)
    df = result.to_dataframe()

    print("=" * 70)
    print(f"TOURNAMENT ODDS ({result.n_tournaments:,} simulations)")
    print("=" * 70)
    print(df.to_string(
        index=False,
        formatters={col: '{:.1%}'.format for col in ('super8', 'semi', 'final', 'win')}
    ))
    return result


if __name__ == '__main__':
    logging.config.dictConfig(LOGGING_CONFIG)
    main()
