"""
Reference data (team strengths, venues, rosters).
"""

from .reference import ReferenceData, Venue, Player, get_reference_data

__all__ = ["ReferenceData", "Venue", "Player", "get_reference_data"]
