"""Record models for the TryTag data layer.

``Scraped*`` models validate parser output before it reaches the store.
The dataclasses below them are the canonical rows the store hands back,
each carrying the internal ``id`` assigned on first insert.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"


def derive_status(home_score: Optional[int], away_score: Optional[int]) -> str:
    return "completed" if home_score is not None and away_score is not None else "scheduled"


class ScrapedLeagueListItem(BaseModel):
    """One (league, season, division) entry on the league list page."""

    league_id: int = Field(gt=0)
    season_id: int = Field(gt=0)
    division_id: int = Field(gt=0)
    league_name: str = Field(min_length=3)
    season_name: str = Field(min_length=1)
    division_name: str = Field(min_length=1)
    region: str = Field(min_length=1)


class ScrapedStandingRow(BaseModel):
    position: int = Field(ge=1)
    team_id: int = Field(gt=0)
    team_name: str = Field(min_length=1)
    played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    forfeits_for: int = 0
    forfeits_against: int = 0
    points_for: int = 0
    points_against: int = 0
    point_difference: int = 0
    bonus_points: int = 0
    total_points: int = 0


class ScrapedFixture(BaseModel):
    """A fixture as read from a page.

    ``status`` is derived from the scores. ``verified`` is False when the
    home/away orientation is an assumption rather than stated by the page.
    """

    model_config = ConfigDict(frozen=True)

    fixture_id: Optional[int] = None
    date: str = Field(pattern=ISO_DATE_PATTERN)
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    pitch: Optional[str] = None
    round: Optional[int] = None
    home_team_id: int = Field(gt=0)
    home_team_name: str = Field(min_length=1)
    away_team_id: int = Field(gt=0)
    away_team_name: str = Field(min_length=1)
    home_score: Optional[int] = Field(default=None, ge=0)
    away_score: Optional[int] = Field(default=None, ge=0)
    verified: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> str:
        return derive_status(self.home_score, self.away_score)


class ScrapedPlayerAward(BaseModel):
    player_name: str = Field(min_length=1)
    team_name: str = Field(min_length=1)
    team_id: Optional[int] = Field(default=None, gt=0)
    award_count: int = Field(default=1, ge=1)
    award_type: str = "player_of_match"


class TeamPositionHistory(BaseModel):
    week: int
    position: int


class TeamSeasonStats(BaseModel):
    period: Literal["last3", "season", "allTime"]
    avg_scored: float = 0.0
    avg_conceded: float = 0.0
    avg_points: float = 0.0
    biggest_win: Optional[str] = None
    biggest_loss: Optional[str] = None


class TeamPreviousSeason(BaseModel):
    league_name: str
    season_name: str
    division_name: str
    league_id: Optional[int] = None
    season_id: Optional[int] = None
    division_id: Optional[int] = None


class HistoricalSeasonLink(BaseModel):
    season_id: int
    season_name: str
    division_id: int


class TeamProfile(BaseModel):
    team_id: int
    team_name: str
    current_position: Optional[int] = None
    played: Optional[int] = None
    wins: Optional[int] = None
    losses: Optional[int] = None
    draws: Optional[int] = None
    fixture_history: list[ScrapedFixture] = Field(default_factory=list)
    upcoming_fixtures: list[ScrapedFixture] = Field(default_factory=list)
    player_awards: list[ScrapedPlayerAward] = Field(default_factory=list)
    historical_seasons: list[HistoricalSeasonLink] = Field(default_factory=list)
    position_history: list[TeamPositionHistory] = Field(default_factory=list)
    season_stats: list[TeamSeasonStats] = Field(default_factory=list)
    previous_seasons: list[TeamPreviousSeason] = Field(default_factory=list)


class RowMixin:
    """Maps stored rows onto record dataclasses."""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        names = cls.__dataclass_fields__.keys()  # type: ignore[attr-defined]
        return cls(**{name: row[name] for name in names if name in row})


@dataclass(frozen=True)
class Region(RowMixin):
    id: int
    name: str
    slug: str


@dataclass(frozen=True)
class Season(RowMixin):
    id: int
    external_season_id: int
    name: str
    is_current: bool = False


@dataclass(frozen=True)
class League(RowMixin):
    id: int
    external_league_id: int
    name: str
    region_id: Optional[int] = None


@dataclass(frozen=True)
class Division(RowMixin):
    id: int
    external_division_id: int
    league_id: int
    season_id: int
    name: str
    tier: Optional[int] = None
    last_scraped_at: Optional[str] = None


@dataclass(frozen=True)
class Team(RowMixin):
    id: int
    external_team_id: Optional[int]
    name: str


@dataclass(frozen=True)
class Standing(RowMixin):
    id: int
    team_id: int
    division_id: int
    position: int
    played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    forfeits_for: int = 0
    forfeits_against: int = 0
    points_for: int = 0
    points_against: int = 0
    point_difference: int = 0
    bonus_points: int = 0
    total_points: int = 0


@dataclass(frozen=True)
class Fixture(RowMixin):
    id: int
    division_id: int
    home_team_id: int
    away_team_id: int
    fixture_date: str
    external_fixture_id: Optional[int] = None
    fixture_time: Optional[str] = None
    pitch: Optional[str] = None
    round_number: Optional[int] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    status: str = "scheduled"
    is_forfeit: bool = False
    is_verified: bool = True


@dataclass(frozen=True)
class Player(RowMixin):
    id: int
    name: str
    external_player_id: Optional[int] = None


@dataclass(frozen=True)
class PlayerAward(RowMixin):
    id: int
    player_id: int
    team_id: int
    division_id: int
    award_type: str
    award_count: int = 1
    fixture_id: Optional[int] = None
