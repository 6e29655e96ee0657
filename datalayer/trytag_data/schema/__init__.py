"""Schema models and table definitions."""

from .models import (
    Division,
    Fixture,
    HistoricalSeasonLink,
    League,
    Player,
    PlayerAward,
    Region,
    ScrapedFixture,
    ScrapedLeagueListItem,
    ScrapedPlayerAward,
    ScrapedStandingRow,
    Season,
    Standing,
    Team,
    TeamPositionHistory,
    TeamPreviousSeason,
    TeamProfile,
    TeamSeasonStats,
    derive_status,
)
from .tables import metadata

__all__ = [
    "Division",
    "Fixture",
    "HistoricalSeasonLink",
    "League",
    "Player",
    "PlayerAward",
    "Region",
    "ScrapedFixture",
    "ScrapedLeagueListItem",
    "ScrapedPlayerAward",
    "ScrapedStandingRow",
    "Season",
    "Standing",
    "Team",
    "TeamPositionHistory",
    "TeamPreviousSeason",
    "TeamProfile",
    "TeamSeasonStats",
    "derive_status",
    "metadata",
]
