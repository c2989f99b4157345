"""
Tournament Simulation.

Estimates each team's odds of reaching the Super 8, the semi-finals, the
final, and of lifting the trophy.

Two stages:
1. Head-to-head matrix: for every ordered pair the Monte Carlo engine
   estimates P(team i beats team j | team i won the toss).
2. Bracket Monte Carlo: groups -> Super 8 -> semi-finals -> final, with a
   simulated toss and a Bernoulli draw from the matrix for each fixture.
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from itertools import combinations
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from t20_predictor.features.toss import simulate_toss
from t20_predictor.models.prediction import PredictionEngine
from t20_predictor.models.simulator import MatchState

logger = logging.getLogger(__name__)


class MatchStage(Enum):
    """Stages of a T20 World Cup, keyed by the TournamentProbabilities field."""
    SUPER8 = "super8"
    SEMIFINAL = "semi"
    FINAL = "final"
    WINNER = "win"


@dataclass(frozen=True)
class TournamentProbabilities:
    """Probability of a team reaching each stage."""
    team: str
    super8: float
    semi: float
    final: float
    win: float


@dataclass
class TournamentResult:
    """Aggregated outcome of many simulated tournaments."""
    probabilities: List[TournamentProbabilities]
    n_tournaments: int

    def for_team(self, team: str) -> TournamentProbabilities:
        for p in self.probabilities:
            if p.team == team:
                return p
        raise KeyError(f"Team '{team}' did not take part in the tournament")

    def to_dataframe(self) -> pd.DataFrame:
        """Table of stage probabilities, title favourites first."""
        df = pd.DataFrame([asdict(p) for p in self.probabilities])
        return df.sort_values(['win', 'final', 'semi', 'super8'], ascending=False).reset_index(drop=True)


def snake_groups(teams: Sequence[str], n_groups: int) -> List[List[str]]:
    """
    Seed teams (strongest first) into groups in snake order:
    A B C D D C B A A B C D ...
    """
    if n_groups < 1:
        raise ValueError(f"n_groups must be at least 1, got {n_groups}")
    groups = [[] for _ in range(n_groups)]
    for i, team in enumerate(teams):
        row, col = divmod(i, n_groups)
        idx = col if row % 2 == 0 else n_groups - 1 - col
        groups[idx].append(team)
    return groups


class TournamentSimulator:
    """
    Monte Carlo tournament simulator on top of the prediction engine.

    Format: round-robin groups, top two of each go through to two Super 8
    groups (A1/B2/C1/D2 and B1/A2/D1/C2 for four groups), the top two of each
    Super 8 group meet in cross-over semi-finals, winners meet in the final.
    """

    def __init__(
        self,
        engine: PredictionEngine,
        groups: Optional[List[List[str]]] = None,
        venue: Optional[str] = None,
        n_groups: int = 4,
        qualifiers_per_group: int = 2,
        head_to_head_simulations: int = 500
    ):
        """
        Args:
            engine: Prediction engine used for head-to-head estimates
            groups: Explicit group composition (snake-seeded from the
                reference strength table if None)
            venue: Venue applied to every fixture (neutral if None)
            n_groups: Number of groups when seeding automatically
            qualifiers_per_group: Teams advancing from each group (must be 2)
            head_to_head_simulations: Trials per side for each pairing
        """
        self.engine = engine
        self.venue = venue
        self.head_to_head_simulations = head_to_head_simulations
        self.qualifiers_per_group = qualifiers_per_group
        self.groups = groups or snake_groups(engine.reference.teams, n_groups)
        self._validate()

        self.teams = [t for g in self.groups for t in g]
        self.team_index = {t: i for i, t in enumerate(self.teams)}
        self.win_matrix: Optional[np.ndarray] = None

    def _validate(self):
        if self.qualifiers_per_group != 2:
            raise ValueError("Super 8 seeding requires exactly 2 qualifiers per group")
        if len(self.groups) < 2 or len(self.groups) % 2 != 0:
            raise ValueError(f"Need an even number of groups (at least 2), got {len(self.groups)}")
        for g in self.groups:
            if len(g) < self.qualifiers_per_group:
                raise ValueError(f"Group {g} has fewer than {self.qualifiers_per_group} teams")
        all_teams = [t for g in self.groups for t in g]
        if len(set(all_teams)) != len(all_teams):
            raise ValueError("A team appears in more than one group slot")

    def build_win_matrix(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """
        matrix[i, j] = P(team i beats team j | team i won the toss).

        Tied trials count as half a win each (decided by a super over).
        """
        rng = rng if rng is not None else self.engine.rng
        resolver = self.engine.resolver
        n = self.head_to_head_simulations
        matrix = np.full((len(self.teams), len(self.teams)), 0.5)

        for a, b in combinations(self.teams, 2):
            for toss_winner in (a, b):
                context_a = resolver.resolve(a, self.venue, toss_winner)
                context_b = resolver.resolve(b, self.venue, toss_winner)
                totals_a = self.engine.simulate_side(context_a, MatchState(), n, rng)
                totals_b = self.engine.simulate_side(context_b, MatchState(), n, rng)
                p_a = float(np.mean(totals_a > totals_b) + 0.5 * np.mean(totals_a == totals_b))

                i, j = self.team_index[a], self.team_index[b]
                if toss_winner == a:
                    matrix[i, j] = p_a
                else:
                    matrix[j, i] = 1.0 - p_a

        logger.info(f"Built head-to-head matrix for {len(self.teams)} teams ({n} trials per side)")
        self.win_matrix = matrix
        return matrix

    def play_match(self, team_a: str, team_b: str, rng: np.random.Generator) -> str:
        """Simulate toss and result of one fixture, returning the winner."""
        toss_winner, toss_loser = simulate_toss(team_a, team_b, rng)
        p = self.win_matrix[self.team_index[toss_winner], self.team_index[toss_loser]]
        return toss_winner if rng.random() < p else toss_loser

    def play_round_robin(self, group: List[str], rng: np.random.Generator) -> List[str]:
        """Play every pairing once; return the group ordered by wins (random tie-break)."""
        wins = {t: 0 for t in group}
        for a, b in combinations(group, 2):
            wins[self.play_match(a, b, rng)] += 1
        tiebreak = dict(zip(group, rng.random(len(group))))
        return sorted(group, key=lambda t: (-wins[t], tiebreak[t]))

    def simulate_once(self, rng: np.random.Generator) -> Dict[MatchStage, List[str]]:
        """Run one tournament; return the teams reaching each stage beyond the groups."""
        standings = [self.play_round_robin(g, rng) for g in self.groups]

        super8_groups = []
        for g in range(0, len(standings), 2):
            first, second = standings[g], standings[g + 1]
            super8_groups.append([first[0], second[1]])
            super8_groups.append([second[0], first[1]])
        # Four groups -> two Super 8 groups of four
        if len(super8_groups) > 2:
            merged = [[], []]
            for k, pair in enumerate(super8_groups):
                merged[k % 2].extend(pair)
            super8_groups = merged

        super8_teams = [t for g in super8_groups for t in g]
        x, y = (self.play_round_robin(g, rng) for g in super8_groups)
        semi_teams = [x[0], x[1], y[0], y[1]]

        finalists = [self.play_match(x[0], y[1], rng), self.play_match(y[0], x[1], rng)]
        champion = self.play_match(finalists[0], finalists[1], rng)

        return {
            MatchStage.SUPER8: super8_teams,
            MatchStage.SEMIFINAL: semi_teams,
            MatchStage.FINAL: finalists,
            MatchStage.WINNER: [champion],
        }

    def simulate(
        self,
        n_tournaments: int = 10000,
        rng: Optional[np.random.Generator] = None,
        show_progress: bool = False
    ) -> TournamentResult:
        """
        Run `n_tournaments` simulated tournaments.

        The head-to-head matrix is built first if it has not been already.
        """
        if n_tournaments < 1:
            raise ValueError(f"n_tournaments must be at least 1, got {n_tournaments}")
        rng = rng if rng is not None else self.engine.rng
        if self.win_matrix is None:
            self.build_win_matrix(rng)

        counts = {stage: dict.fromkeys(self.teams, 0) for stage in MatchStage}
        for _ in tqdm(range(n_tournaments), desc="Simulating tournaments", disable=not show_progress):
            for stage, teams in self.simulate_once(rng).items():
                for team in teams:
                    counts[stage][team] += 1

        probabilities = [
            TournamentProbabilities(
                team=team,
                **{stage.value: counts[stage][team] / n_tournaments for stage in MatchStage}
            )
            for team in self.teams
        ]
        logger.info(f"Simulated {n_tournaments} tournaments across {len(self.groups)} groups")
        return TournamentResult(probabilities=probabilities, n_tournaments=n_tournaments)
