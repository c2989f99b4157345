"""
Toss simulation.
"""

from typing import Tuple

import numpy as np


def simulate_toss(team_a: str, team_b: str, rng: np.random.Generator) -> Tuple[str, str]:
    """
    Simulate a 50/50 toss.

    Returns:
        (toss_winner, toss_loser)
    """
    if rng.random() < 0.5:
        return team_a, team_b
    return team_b, team_a
