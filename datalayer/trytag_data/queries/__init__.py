"""Query helpers for the TryTag data layer.

All functions return dictionaries including a 'found' boolean.
"""

from .divisions import get_division_fixtures, get_division_standings, team_form

__all__ = ["get_division_fixtures", "get_division_standings", "team_form"]
