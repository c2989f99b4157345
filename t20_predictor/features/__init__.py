"""
Match context: team strength, form, venue and toss.
"""

from .team_context import StrengthResolver, TeamContext, venue_impact
from .toss import simulate_toss

__all__ = ["StrengthResolver", "TeamContext", "venue_impact", "simulate_toss"]
