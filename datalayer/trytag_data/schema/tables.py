"""SQLAlchemy Core table definitions for the TryTag data layer."""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

regions = Table(
    "regions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("slug", Text, nullable=False, unique=True),
    Column("created_at", Text),
    Column("updated_at", Text),
)

leagues = Table(
    "leagues",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_league_id", Integer, nullable=False, unique=True),
    Column("name", Text, nullable=False),
    Column("region_id", Integer, ForeignKey("regions.id")),
    Column("created_at", Text),
    Column("updated_at", Text),
    Index("idx_leagues_region", "region_id"),
)

seasons = Table(
    "seasons",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_season_id", Integer, nullable=False, unique=True),
    Column("name", Text, nullable=False),
    Column("is_current", Boolean, nullable=False, default=False),
    Column("created_at", Text),
    Column("updated_at", Text),
)

divisions = Table(
    "divisions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_division_id", Integer, nullable=False),
    Column("league_id", Integer, ForeignKey("leagues.id"), nullable=False),
    Column("season_id", Integer, ForeignKey("seasons.id"), nullable=False),
    Column("name", Text, nullable=False),
    Column("tier", Integer),
    Column("last_scraped_at", Text),
    Column("created_at", Text),
    Column("updated_at", Text),
    UniqueConstraint("external_division_id", "league_id", "season_id"),
    Index("idx_divisions_league", "league_id"),
    Index("idx_divisions_season", "season_id"),
)

teams = Table(
    "teams",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_team_id", Integer, unique=True),
    Column("name", Text, nullable=False),
    Column("created_at", Text),
    Column("updated_at", Text),
    Index("idx_teams_name", "name"),
)

team_divisions = Table(
    "team_divisions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("division_id", Integer, ForeignKey("divisions.id"), nullable=False),
    UniqueConstraint("team_id", "division_id"),
)

standings = Table(
    "standings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("division_id", Integer, ForeignKey("divisions.id"), nullable=False),
    Column("position", Integer, nullable=False),
    Column("played", Integer, nullable=False, default=0),
    Column("wins", Integer, nullable=False, default=0),
    Column("losses", Integer, nullable=False, default=0),
    Column("draws", Integer, nullable=False, default=0),
    Column("forfeits_for", Integer, nullable=False, default=0),
    Column("forfeits_against", Integer, nullable=False, default=0),
    Column("points_for", Integer, nullable=False, default=0),
    Column("points_against", Integer, nullable=False, default=0),
    Column("point_difference", Integer, nullable=False, default=0),
    Column("bonus_points", Integer, nullable=False, default=0),
    Column("total_points", Integer, nullable=False, default=0),
    Column("updated_at", Text),
    UniqueConstraint("team_id", "division_id"),
    Index("idx_standings_division", "division_id"),
    Index("idx_standings_team", "team_id"),
)

fixtures = Table(
    "fixtures",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_fixture_id", Integer),
    Column("division_id", Integer, ForeignKey("divisions.id"), nullable=False),
    Column("home_team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("away_team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("fixture_date", Text, nullable=False),
    Column("fixture_time", Text),
    Column("pitch", Text),
    Column("round_number", Integer),
    Column("home_score", Integer),
    Column("away_score", Integer),
    Column("status", Text, nullable=False, default="scheduled"),
    Column("is_forfeit", Boolean, nullable=False, default=False),
    Column("is_verified", Boolean, nullable=False, default=True),
    Column("created_at", Text),
    Column("updated_at", Text),
    UniqueConstraint("division_id", "home_team_id", "away_team_id", "fixture_date"),
    Index("idx_fixtures_division", "division_id"),
    Index("idx_fixtures_date", "fixture_date"),
    Index("idx_fixtures_home_team", "home_team_id"),
    Index("idx_fixtures_away_team", "away_team_id"),
)

players = Table(
    "players",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_player_id", Integer),
    Column("name", Text, nullable=False),
    Column("created_at", Text),
    Column("updated_at", Text),
    Index("idx_players_name", "name"),
)

player_teams = Table(
    "player_teams",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("player_id", Integer, ForeignKey("players.id"), nullable=False),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("division_id", Integer, ForeignKey("divisions.id"), nullable=False),
    UniqueConstraint("player_id", "team_id", "division_id"),
)

player_awards = Table(
    "player_awards",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("player_id", Integer, ForeignKey("players.id"), nullable=False),
    Column("team_id", Integer, ForeignKey("teams.id"), nullable=False),
    Column("division_id", Integer, ForeignKey("divisions.id"), nullable=False),
    Column("fixture_id", Integer, ForeignKey("fixtures.id")),
    Column("award_type", Text, nullable=False),
    Column("award_count", Integer, nullable=False, default=1),
    Column("updated_at", Text),
    UniqueConstraint("player_id", "division_id", "award_type"),
    Index("idx_player_awards_player", "player_id"),
    Index("idx_player_awards_division", "division_id"),
)
