"""
Strength/Context Resolver.

Maps a team name plus match context to the scalar drift rate used by the
innings simulator:

    drift = baseline_strength * venue_modifier * form_multiplier * toss_bias

Unknown teams and venues never raise; they fall back to neutral defaults
(default strength, form 1.0, venue 1.0).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from t20_predictor.data.reference import ReferenceData
from t20_predictor.models.engine_config import EngineConfig

logger = logging.getLogger(__name__)

NEUTRAL_VENUE_MODIFIER = 1.0

BATTING_FRIENDLY = 'Batting Friendly'
BOWLING_FRIENDLY = 'Bowling Friendly'
NEUTRAL = 'Neutral'


def venue_impact(venue_modifier: float) -> str:
    """Label a venue modifier as batting friendly, bowling friendly or neutral."""
    if venue_modifier > NEUTRAL_VENUE_MODIFIER:
        return BATTING_FRIENDLY
    elif venue_modifier < NEUTRAL_VENUE_MODIFIER:
        return BOWLING_FRIENDLY
    return NEUTRAL


def won_toss(team: str, toss_winner: Optional[str]) -> bool:
    """Only a confirmed toss winner counts; an unknown toss favours nobody."""
    return toss_winner is not None and toss_winner == team


@dataclass(frozen=True)
class TeamContext:
    """A team's resolved multipliers for one match."""
    team: str
    strength: float
    form_multiplier: float = 1.0
    venue_modifier: float = NEUTRAL_VENUE_MODIFIER
    won_toss: bool = False
    toss_bias: float = 1.0

    @property
    def drift(self) -> float:
        """Expected scoring rate in runs per over before wicket pressure."""
        return self.strength * self.venue_modifier * self.form_multiplier * self.toss_bias


class StrengthResolver:
    """
    Resolve team strength and match context against injected reference tables.
    """

    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        config: Optional[EngineConfig] = None
    ):
        self.reference = reference or ReferenceData()
        self.config = config or EngineConfig()

    def get_strength(self, team: str) -> float:
        """Baseline rating, or the default rating for unknown teams."""
        strength = self.reference.team_strengths.get(team)
        if strength is None:
            logger.debug(f"No strength rating for '{team}', using default {self.reference.default_strength}")
            return self.reference.default_strength
        return strength

    def get_form_multiplier(self, team: str) -> float:
        """
        Rescale the squad's average form index into a narrow band around 1.0.

        Teams without any rostered players get exactly 1.0.
        """
        players = self.reference.players_for(team)
        if not players:
            return 1.0
        avg_form = sum(p.form_index for p in players) / len(players)
        return self.config.form_floor + avg_form * self.config.form_span

    def find_venue_modifier(self, venue_name: Optional[str]) -> float:
        """
        Case-insensitive substring match on venue name or city; first match wins.
        """
        if not venue_name:
            return NEUTRAL_VENUE_MODIFIER
        for venue in self.reference.venues:
            if venue.matches(venue_name):
                return venue.xr_modifier
        logger.debug(f"Venue '{venue_name}' not recognised, treating as neutral")
        return NEUTRAL_VENUE_MODIFIER

    def get_toss_bias(self, team: str, toss_winner: Optional[str]) -> float:
        return self.config.toss_bias if won_toss(team, toss_winner) else 1.0

    def resolve(
        self,
        team: str,
        venue_name: Optional[str] = None,
        toss_winner: Optional[str] = None
    ) -> TeamContext:
        """Resolve all multipliers for `team` in the given match context."""
        return TeamContext(
            team=team,
            strength=self.get_strength(team),
            form_multiplier=self.get_form_multiplier(team),
            venue_modifier=self.find_venue_modifier(venue_name),
            won_toss=won_toss(team, toss_winner),
            toss_bias=self.get_toss_bias(team, toss_winner),
        )
