"""Spawtz league site fetch helpers."""

from .client import FetchClient, FetchError
from .endpoints import (
    division_params,
    get_fixtures,
    get_league_list,
    get_standings,
    get_statistics,
    get_team_profile,
)
from .limiter import RateLimiter

__all__ = [
    "FetchClient",
    "FetchError",
    "RateLimiter",
    "division_params",
    "get_fixtures",
    "get_league_list",
    "get_standings",
    "get_statistics",
    "get_team_profile",
]
