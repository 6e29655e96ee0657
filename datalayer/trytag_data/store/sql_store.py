"""SQLAlchemy Core store for TryTag records.

Every upsert is keyed on the record's natural key and returns the stored
row as a frozen dataclass. Internal ids never change once assigned.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import Any, Iterator, Optional, Type, TypeVar, Union

from sqlalchemy import and_, create_engine, delete, insert, or_, select, update
from sqlalchemy.engine import Connection, Engine, make_url

from ..config import TryTagConfig
from ..parsers.league_list import clean_league_name
from ..schema.models import (
    Division,
    Fixture,
    League,
    Player,
    PlayerAward,
    Region,
    RowMixin,
    Season,
    Standing,
    Team,
    derive_status,
)
from ..schema.tables import (
    divisions,
    fixtures,
    leagues,
    metadata,
    player_awards,
    player_teams,
    players,
    regions,
    seasons,
    standings,
    team_divisions,
    teams,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=RowMixin)

STANDING_FIELDS = (
    "position",
    "played",
    "wins",
    "losses",
    "draws",
    "forfeits_for",
    "forfeits_against",
    "points_for",
    "points_against",
    "point_difference",
    "bonus_points",
    "total_points",
)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqlStore:
    """Persistence for regions, leagues, seasons, divisions and their data."""

    def __init__(self, engine: Union[Engine, str]):
        self.engine = create_engine(engine) if isinstance(engine, str) else engine
        self._conn: Optional[Connection] = None

    @classmethod
    def from_config(cls, config: TryTagConfig) -> "SqlStore":
        """Open the configured database, creating a SQLite file's directory and tables."""
        url = make_url(config.database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        store = cls(config.database_url)
        store.create_tables()
        return store

    def create_tables(self) -> None:
        logger.debug("Creating tables on %s", self.engine.url)
        metadata.create_all(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Run the enclosed calls atomically.

        Nested calls join the outermost transaction.
        """
        if self._conn is not None:
            yield self._conn
            return
        with self.engine.begin() as conn:
            self._conn = conn
            try:
                yield conn
            finally:
                self._conn = None

    def _one(self, model: Type[R], stmt) -> Optional[R]:
        with self.transaction() as conn:
            row = conn.execute(stmt).first()
        return model.from_row(row._mapping) if row is not None else None

    def _upsert(self, model: Type[R], table, where, values: dict[str, Any]) -> R:
        now = utc_now()
        with self.transaction() as conn:
            existing = conn.execute(select(table.c.id).where(where)).first()
            changes = dict(values)
            if "updated_at" in table.c:
                changes["updated_at"] = now
            if existing is None:
                if "created_at" in table.c:
                    changes["created_at"] = now
                conn.execute(insert(table).values(**changes))
            else:
                conn.execute(update(table).where(table.c.id == existing.id).values(**changes))
            row = conn.execute(select(table).where(where)).first()
        return model.from_row(row._mapping)

    # Regions

    def upsert_region(self, name: str, slug: str) -> Region:
        return self._upsert(Region, regions, regions.c.slug == slug, {"name": name, "slug": slug})

    def find_region_by_slug(self, slug: str) -> Optional[Region]:
        return self._one(Region, select(regions).where(regions.c.slug == slug))

    # Seasons

    def upsert_season(
        self, external_season_id: int, name: str, is_current: Optional[bool] = None
    ) -> Season:
        values: dict[str, Any] = {"external_season_id": external_season_id, "name": name}
        with self.transaction():
            if is_current:
                self._clear_current_season()
            if is_current is not None:
                values["is_current"] = is_current
            return self._upsert(
                Season, seasons, seasons.c.external_season_id == external_season_id, values
            )

    def _clear_current_season(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                update(seasons).where(seasons.c.is_current.is_(True)).values(is_current=False)
            )

    def set_current_season(self, season_id: int) -> Season:
        with self.transaction() as conn:
            self._clear_current_season()
            conn.execute(
                update(seasons)
                .where(seasons.c.id == season_id)
                .values(is_current=True, updated_at=utc_now())
            )
        season = self.find_season_by_id(season_id)
        if season is None:
            raise LookupError(f"Season {season_id} not found.")
        return season

    def find_season_by_id(self, season_id: int) -> Optional[Season]:
        return self._one(Season, select(seasons).where(seasons.c.id == season_id))

    def find_season_by_external_id(self, external_season_id: int) -> Optional[Season]:
        return self._one(
            Season, select(seasons).where(seasons.c.external_season_id == external_season_id)
        )

    def current_season(self) -> Optional[Season]:
        return self._one(Season, select(seasons).where(seasons.c.is_current.is_(True)))

    # Leagues

    def upsert_league(
        self, external_league_id: int, name: str, region_id: Optional[int] = None
    ) -> League:
        return self._upsert(
            League,
            leagues,
            leagues.c.external_league_id == external_league_id,
            {
                "external_league_id": external_league_id,
                "name": clean_league_name(name),
                "region_id": region_id,
            },
        )

    def find_league_by_external_id(self, external_league_id: int) -> Optional[League]:
        return self._one(
            League, select(leagues).where(leagues.c.external_league_id == external_league_id)
        )

    # Divisions

    def upsert_division(
        self,
        external_division_id: int,
        league_id: int,
        season_id: int,
        name: str,
        tier: Optional[int] = None,
    ) -> Division:
        values: dict[str, Any] = {
            "external_division_id": external_division_id,
            "league_id": league_id,
            "season_id": season_id,
            "name": name,
        }
        if tier is not None:
            values["tier"] = tier
        return self._upsert(
            Division,
            divisions,
            and_(
                divisions.c.external_division_id == external_division_id,
                divisions.c.league_id == league_id,
                divisions.c.season_id == season_id,
            ),
            values,
        )

    def find_division_by_external_id(
        self, external_division_id: int, league_id: int, season_id: int
    ) -> Optional[Division]:
        return self._one(
            Division,
            select(divisions).where(
                divisions.c.external_division_id == external_division_id,
                divisions.c.league_id == league_id,
                divisions.c.season_id == season_id,
            ),
        )

    def find_division_by_id(self, division_id: int) -> Optional[Division]:
        return self._one(Division, select(divisions).where(divisions.c.id == division_id))

    def update_last_scraped(self, division_id: int) -> None:
        now = utc_now()
        with self.transaction() as conn:
            conn.execute(
                update(divisions)
                .where(divisions.c.id == division_id)
                .values(last_scraped_at=now, updated_at=now)
            )

    # Teams

    def upsert_team(self, external_team_id: Optional[int], name: str) -> Team:
        """Upsert by external id, falling back to the name when there is none.

        A team first stored by name alone adopts the external id once one
        is seen for it.
        """
        with self.transaction():
            if external_team_id is not None and self.find_team_by_external_id(external_team_id):
                return self._upsert(
                    Team,
                    teams,
                    teams.c.external_team_id == external_team_id,
                    {"external_team_id": external_team_id, "name": name},
                )
            by_name = self._one(
                Team,
                select(teams)
                .where(teams.c.name == name, teams.c.external_team_id.is_(None))
                .order_by(teams.c.id),
            )
            if by_name is None and external_team_id is None:
                existing = self.find_team_by_name(name)
                if existing is not None:
                    return existing
            if by_name is not None:
                return self._upsert(
                    Team,
                    teams,
                    teams.c.id == by_name.id,
                    {"external_team_id": external_team_id, "name": name},
                )
            if external_team_id is None:
                where = and_(teams.c.name == name, teams.c.external_team_id.is_(None))
            else:
                where = teams.c.external_team_id == external_team_id
            return self._upsert(
                Team, teams, where, {"external_team_id": external_team_id, "name": name}
            )

    def find_team_by_name(self, name: str) -> Optional[Team]:
        return self._one(Team, select(teams).where(teams.c.name == name).order_by(teams.c.id))

    def find_team_by_external_id(self, external_team_id: int) -> Optional[Team]:
        return self._one(Team, select(teams).where(teams.c.external_team_id == external_team_id))

    def link_team_to_division(self, team_id: int, division_id: int) -> None:
        with self.transaction() as conn:
            exists = conn.execute(
                select(team_divisions.c.id).where(
                    team_divisions.c.team_id == team_id,
                    team_divisions.c.division_id == division_id,
                )
            ).first()
            if exists is None:
                conn.execute(
                    insert(team_divisions).values(team_id=team_id, division_id=division_id)
                )

    # Standings

    def upsert_standing(self, team_id: int, division_id: int, **stats: int) -> Standing:
        unknown = set(stats) - set(STANDING_FIELDS)
        if unknown:
            raise ValueError(f"Unknown standing fields: {sorted(unknown)}")
        values: dict[str, Any] = {"team_id": team_id, "division_id": division_id, **stats}
        return self._upsert(
            Standing,
            standings,
            and_(standings.c.team_id == team_id, standings.c.division_id == division_id),
            values,
        )

    def delete_standings_by_division(self, division_id: int) -> int:
        with self.transaction() as conn:
            result = conn.execute(delete(standings).where(standings.c.division_id == division_id))
            return result.rowcount or 0

    def list_standings(self, division_id: int) -> list[Standing]:
        with self.transaction() as conn:
            rows = conn.execute(
                select(standings)
                .where(standings.c.division_id == division_id)
                .order_by(standings.c.position)
            ).all()
        return [Standing.from_row(row._mapping) for row in rows]

    # Fixtures

    def upsert_fixture(
        self,
        division_id: int,
        home_team_id: int,
        away_team_id: int,
        fixture_date: str,
        *,
        external_fixture_id: Optional[int] = None,
        fixture_time: Optional[str] = None,
        pitch: Optional[str] = None,
        round_number: Optional[int] = None,
        home_score: Optional[int] = None,
        away_score: Optional[int] = None,
        is_forfeit: bool = False,
        is_verified: bool = True,
    ) -> Fixture:
        """Insert or refresh a fixture; ``status`` always follows the scores."""
        return self._upsert(
            Fixture,
            fixtures,
            and_(
                fixtures.c.division_id == division_id,
                fixtures.c.home_team_id == home_team_id,
                fixtures.c.away_team_id == away_team_id,
                fixtures.c.fixture_date == fixture_date,
            ),
            {
                "division_id": division_id,
                "home_team_id": home_team_id,
                "away_team_id": away_team_id,
                "fixture_date": fixture_date,
                "external_fixture_id": external_fixture_id,
                "fixture_time": fixture_time,
                "pitch": pitch,
                "round_number": round_number,
                "home_score": home_score,
                "away_score": away_score,
                "status": derive_status(home_score, away_score),
                "is_forfeit": is_forfeit,
                "is_verified": is_verified,
            },
        )

    def find_fixture_between(
        self,
        team_a_id: int,
        team_b_id: int,
        fixture_date: str,
        division_id: Optional[int] = None,
    ) -> Optional[Fixture]:
        """Find a fixture between two teams on a date, in either orientation."""
        stmt = select(fixtures).where(
            fixtures.c.fixture_date == fixture_date,
            or_(
                and_(fixtures.c.home_team_id == team_a_id, fixtures.c.away_team_id == team_b_id),
                and_(fixtures.c.home_team_id == team_b_id, fixtures.c.away_team_id == team_a_id),
            ),
        )
        if division_id is not None:
            stmt = stmt.where(fixtures.c.division_id == division_id)
        return self._one(Fixture, stmt.order_by(fixtures.c.id))

    def mark_fixture_verified(
        self,
        fixture_id: int,
        home_score: Optional[int],
        away_score: Optional[int],
    ) -> Fixture:
        with self.transaction() as conn:
            conn.execute(
                update(fixtures)
                .where(fixtures.c.id == fixture_id)
                .values(
                    home_score=home_score,
                    away_score=away_score,
                    status=derive_status(home_score, away_score),
                    is_verified=True,
                    updated_at=utc_now(),
                )
            )
        fixture = self._one(Fixture, select(fixtures).where(fixtures.c.id == fixture_id))
        if fixture is None:
            raise LookupError(f"Fixture {fixture_id} not found.")
        return fixture

    def list_fixtures(self, division_id: int) -> list[Fixture]:
        with self.transaction() as conn:
            rows = conn.execute(
                select(fixtures)
                .where(fixtures.c.division_id == division_id)
                .order_by(
                    fixtures.c.fixture_date,
                    fixtures.c.fixture_time.is_(None),
                    fixtures.c.fixture_time,
                    fixtures.c.id,
                )
            ).all()
        return [Fixture.from_row(row._mapping) for row in rows]

    # Players

    def upsert_player(self, name: str, external_player_id: Optional[int] = None) -> Player:
        """Match by external id first, then by name, else insert."""
        with self.transaction() as conn:
            if external_player_id is not None:
                row = conn.execute(
                    select(players).where(players.c.external_player_id == external_player_id)
                ).first()
                if row is not None:
                    return self._refresh_player(conn, row.id, name=name)
            row = conn.execute(
                select(players).where(players.c.name == name).order_by(players.c.id)
            ).first()
            if row is not None:
                if external_player_id is not None and row.external_player_id is None:
                    return self._refresh_player(
                        conn, row.id, external_player_id=external_player_id
                    )
                return Player.from_row(row._mapping)
            now = utc_now()
            result = conn.execute(
                insert(players).values(
                    name=name,
                    external_player_id=external_player_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            player_id = result.inserted_primary_key[0]
            row = conn.execute(select(players).where(players.c.id == player_id)).first()
        return Player.from_row(row._mapping)

    def _refresh_player(self, conn: Connection, player_id: int, **changes: Any) -> Player:
        conn.execute(
            update(players).where(players.c.id == player_id).values(updated_at=utc_now(), **changes)
        )
        row = conn.execute(select(players).where(players.c.id == player_id)).first()
        return Player.from_row(row._mapping)

    def link_player_to_team(self, player_id: int, team_id: int, division_id: int) -> None:
        with self.transaction() as conn:
            exists = conn.execute(
                select(player_teams.c.id).where(
                    player_teams.c.player_id == player_id,
                    player_teams.c.team_id == team_id,
                    player_teams.c.division_id == division_id,
                )
            ).first()
            if exists is None:
                conn.execute(
                    insert(player_teams).values(
                        player_id=player_id, team_id=team_id, division_id=division_id
                    )
                )

    def upsert_player_award(
        self,
        player_id: int,
        team_id: int,
        division_id: int,
        award_type: str,
        award_count: int = 1,
        fixture_id: Optional[int] = None,
    ) -> PlayerAward:
        return self._upsert(
            PlayerAward,
            player_awards,
            and_(
                player_awards.c.player_id == player_id,
                player_awards.c.division_id == division_id,
                player_awards.c.award_type == award_type,
            ),
            {
                "player_id": player_id,
                "team_id": team_id,
                "division_id": division_id,
                "award_type": award_type,
                "award_count": award_count,
                "fixture_id": fixture_id,
            },
        )

    def list_player_awards(self, division_id: int) -> list[PlayerAward]:
        with self.transaction() as conn:
            rows = conn.execute(
                select(player_awards)
                .where(player_awards.c.division_id == division_id)
                .order_by(player_awards.c.award_count.desc(), player_awards.c.id)
            ).all()
        return [PlayerAward.from_row(row._mapping) for row in rows]
