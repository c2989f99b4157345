"""
Reference Tables for the Win-Probability Engine.

Holds the read-only lookup data the resolver consumes:
- Team baseline strength ratings (with a fallback for unknown teams)
- Venue batting modifiers, matched by stadium name or city
- Player roster with form indices (drives the team form multiplier)

Tables are plain data passed into the resolver, so tests can inject
fixtures and production can load real data from a JSON file.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)


DEFAULT_TEAM_STRENGTHS = {
    'India': 9.2, 'Australia': 8.9, 'England': 8.6, 'South Africa': 8.4,
    'Pakistan': 8.0, 'New Zealand': 8.2, 'West Indies': 7.8, 'Afghanistan': 7.5,
    'Sri Lanka': 7.7, 'Bangladesh': 7.0, 'USA': 6.0, 'Netherlands': 6.5,
}

DEFAULT_STRENGTH = 7.0

PLAYER_ROLES = ('Batter', 'Bowler', 'All-rounder')


@dataclass(frozen=True)
class Venue:
    """A ground and its batting-friendliness modifier."""
    name: str
    city: str
    xr_modifier: float = 1.0

    def __post_init__(self):
        if self.xr_modifier <= 0:
            raise ValueError(f"Venue modifier must be positive, got {self.xr_modifier} for {self.name}")

    def matches(self, query: str) -> bool:
        """True if the query mentions this venue's name or city (case-insensitive)."""
        q = query.lower()
        return self.name.lower() in q or self.city.lower() in q


@dataclass(frozen=True)
class Player:
    """
    Represents a squad player with per-ball rate statistics.

    Only form_index feeds the engine (via the squad form multiplier); xR and
    xW are roster data kept for presentation and round-tripped through JSON.
    """
    player_id: str
    name: str
    team: str
    role: str = 'Batter'
    expected_runs_per_ball: float = 0.0     # xR
    expected_wickets_per_ball: float = 0.0  # xW
    form_index: float = 0.5                 # 0-1

    def __post_init__(self):
        if not 0.0 <= self.form_index <= 1.0:
            raise ValueError(f"Form index must be in [0, 1], got {self.form_index} for {self.name}")
        if self.role not in PLAYER_ROLES:
            raise ValueError(f"Unknown role '{self.role}' for {self.name}")


DEFAULT_VENUES = [
    Venue('Wankhede Stadium', 'Mumbai', 1.1),
    Venue('R. Premadasa Stadium', 'Colombo', 0.9),
    Venue('Narendra Modi Stadium', 'Ahmedabad', 1.05),
    Venue('Pallekele International', 'Kandy', 0.95),
]

DEFAULT_PLAYERS = [
    Player('1', 'Virat Kohli', 'India', 'Batter', 1.45, 0.0, 0.92),
    Player('2', 'Jasprit Bumrah', 'India', 'Bowler', 0.0, 0.08, 0.98),
    Player('3', 'Travis Head', 'Australia', 'Batter', 1.62, 0.02, 0.88),
    Player('4', 'Rashid Khan', 'Afghanistan', 'All-rounder', 1.2, 0.07, 0.95),
]


@dataclass(frozen=True)
class ReferenceData:
    """
    Lookup tables consumed by the strength/context resolver.

    Attributes:
        team_strengths: Team name -> baseline rating (roughly 6.0-9.2)
        venues: Ordered venue table; the first match wins
        players: Roster used for the form multiplier
        default_strength: Rating used for teams not in team_strengths
    """
    team_strengths: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TEAM_STRENGTHS))
    venues: List[Venue] = field(default_factory=lambda: list(DEFAULT_VENUES))
    players: List[Player] = field(default_factory=lambda: list(DEFAULT_PLAYERS))
    default_strength: float = DEFAULT_STRENGTH

    def __post_init__(self):
        if self.default_strength <= 0:
            raise ValueError(f"Default strength must be positive, got {self.default_strength}")
        for team, rating in self.team_strengths.items():
            if rating <= 0:
                raise ValueError(f"Strength for {team} must be positive, got {rating}")

    @property
    def teams(self) -> List[str]:
        """Teams with a known strength rating, strongest first."""
        return sorted(self.team_strengths, key=lambda t: -self.team_strengths[t])

    def players_for(self, team: str) -> List[Player]:
        return [p for p in self.players if p.team == team]

    def to_dict(self) -> Dict:
        """Convert to a JSON-serialisable dictionary."""
        return {
            'default_strength': self.default_strength,
            'team_strengths': dict(self.team_strengths),
            'venues': [asdict(v) for v in self.venues],
            'players': [asdict(p) for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ReferenceData':
        """Build from a dictionary as produced by to_dict()."""
        return cls(
            team_strengths={k: float(v) for k, v in data['team_strengths'].items()},
            venues=[Venue(**v) for v in data.get('venues', [])],
            players=[Player(**p) for p in data.get('players', [])],
            default_strength=float(data.get('default_strength', DEFAULT_STRENGTH)),
        )

    def save(self, path: Union[str, Path]):
        """Save reference tables to a JSON file."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved reference data to {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ReferenceData':
        """Load reference tables from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        reference = cls.from_dict(data)
        logger.info(
            f"Loaded reference data from {path}: {len(reference.team_strengths)} teams, "
            f"{len(reference.venues)} venues, {len(reference.players)} players"
        )
        return reference


def get_reference_data(path: Optional[Union[str, Path]] = None) -> ReferenceData:
    """
    Get reference tables from `path`, the configured file, or the built-in defaults.
    """
    if path is None:
        from config import REFERENCE_DATA_PATH
        path = REFERENCE_DATA_PATH
    if path:
        return ReferenceData.load(path)
    return ReferenceData()
