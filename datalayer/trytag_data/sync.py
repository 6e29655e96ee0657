"""Sync orchestration: league list -> divisions -> standings, fixtures, awards.

A full sync never raises for an operational failure. Each stage is isolated
and its failure is recorded on the returned ``SyncResult``. A single-division
sync is operator driven and raises instead.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
import re
import time
from typing import Any, Optional

from .config import TryTagConfig
from .parsers import (
    parse_fixtures,
    parse_league_list,
    parse_standings,
    parse_statistics,
    parse_team_profile,
)
from .schema.models import Fixture, ScrapedFixture, TeamProfile
from .spawtz_api import (
    FetchClient,
    get_fixtures,
    get_league_list,
    get_standings,
    get_statistics,
    get_team_profile,
)
from .store.sql_store import SqlStore

logger = logging.getLogger(__name__)

ITEM_KINDS = (
    "regions",
    "leagues",
    "seasons",
    "divisions",
    "teams",
    "standings",
    "fixtures",
    "player_awards",
)


class DivisionNotFoundError(LookupError):
    """Raised when a single-division sync names an unknown division."""


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _empty_counts() -> dict[str, int]:
    return {kind: 0 for kind in ITEM_KINDS}


@dataclass
class SyncResult:
    success: bool = True
    duration: float = 0.0
    items_processed: dict[str, int] = field(default_factory=_empty_counts)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DivisionRef:
    """Internal division id plus the external ids used to fetch its pages."""

    division_id: int
    league_id: int
    season_id: int
    external_division_id: int

    def describe(self) -> str:
        return (
            f"division {self.external_division_id} "
            f"(league {self.league_id}, season {self.season_id})"
        )


class SyncOrchestrator:
    def __init__(
        self,
        client: FetchClient,
        store: SqlStore,
        config: Optional[TryTagConfig] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.config = config or TryTagConfig()
        self.errors: list[str] = []

    @classmethod
    def from_config(cls, config: TryTagConfig) -> "SyncOrchestrator":
        return cls(FetchClient.from_config(config), SqlStore.from_config(config), config)

    def _log_error(self, message: str, exc: BaseException) -> None:
        logger.error("%s: %s", message, exc)
        self.errors.append(f"{message}: {exc}")

    def run_full_sync(self) -> SyncResult:
        started = time.monotonic()
        self.errors = []
        result = SyncResult()
        counts = result.items_processed

        logger.info("Starting full sync")
        try:
            league_list = parse_league_list(get_league_list(self.client))
        except Exception as exc:
            self._log_error("Full sync failed", exc)
            result.success = False
            result.errors = list(self.errors)
            result.duration = time.monotonic() - started
            return result
        logger.info("Parsed league list with %d items", len(league_list.items))

        for region_name in league_list.regions:
            try:
                self.store.upsert_region(region_name, slugify(region_name))
                counts["regions"] += 1
            except Exception as exc:
                self._log_error(f"Failed to save region {region_name}", exc)

        for external_season_id, season_name in league_list.seasons.items():
            try:
                self.store.upsert_season(
                    external_season_id,
                    season_name,
                    is_current=self.config.is_current_season(season_name),
                )
                counts["seasons"] += 1
            except Exception as exc:
                self._log_error(f"Failed to save season {season_name}", exc)

        synced: set[tuple[int, int, int]] = set()
        for item in league_list.items:
            try:
                region = self.store.find_region_by_slug(slugify(item.region))
                league = self.store.upsert_league(
                    item.league_id,
                    item.league_name,
                    region.id if region is not None else None,
                )
                counts["leagues"] += 1

                season = self.store.find_season_by_external_id(item.season_id)
                if season is None:
                    season = self.store.upsert_season(item.season_id, item.season_name)
                    counts["seasons"] += 1

                division = self.store.upsert_division(
                    item.division_id, league.id, season.id, item.division_name
                )
                counts["divisions"] += 1

                key = (item.league_id, item.season_id, item.division_id)
                if key in synced:
                    continue
                synced.add(key)

                self.sync_division_data(
                    DivisionRef(division.id, item.league_id, item.season_id, item.division_id),
                    result,
                )
            except Exception as exc:
                self._log_error(f"Failed to process league item {item.league_name}", exc)

        result.errors = list(self.errors)
        result.success = not result.errors
        result.duration = time.monotonic() - started
        logger.info(
            "Full sync completed in %.1fs: success=%s counts=%s errors=%d",
            result.duration,
            result.success,
            counts,
            len(result.errors),
        )
        return result

    def sync_division_data(
        self,
        ref: DivisionRef,
        result: SyncResult,
        *,
        strict: bool = False,
    ) -> None:
        """Refresh standings, fixtures and player awards for one division.

        Each stage commits in its own transaction. With ``strict`` the first
        failing stage is raised after being recorded.
        """
        for stage in (self._sync_standings, self._sync_fixtures, self._sync_statistics):
            try:
                stage(ref, result)
            except Exception as exc:
                name = stage.__name__.removeprefix("_sync_")
                self._log_error(f"Failed to sync {name} for {ref.describe()}", exc)
                if strict:
                    raise

        try:
            self.store.update_last_scraped(ref.division_id)
        except Exception as exc:
            logger.warning("Could not stamp last scrape for %s: %s", ref.describe(), exc)

    def _sync_standings(self, ref: DivisionRef, result: SyncResult) -> None:
        logger.debug("Fetching standings for %s", ref.describe())
        page = parse_standings(
            get_standings(self.client, ref.league_id, ref.season_id, ref.external_division_id)
        )
        counts = result.items_processed
        with self.store.transaction():
            self.store.delete_standings_by_division(ref.division_id)
            for row in page.standings:
                team = self.store.upsert_team(row.team_id, row.team_name)
                self.store.link_team_to_division(team.id, ref.division_id)
                counts["teams"] += 1
                self.store.upsert_standing(
                    team.id,
                    ref.division_id,
                    **row.model_dump(exclude={"team_id", "team_name"}),
                )
                counts["standings"] += 1
        logger.info("Saved %d standings for %s", len(page.standings), ref.describe())

    def _sync_fixtures(self, ref: DivisionRef, result: SyncResult) -> None:
        logger.debug("Fetching fixtures for %s", ref.describe())
        fixtures = parse_fixtures(
            get_fixtures(self.client, ref.league_id, ref.season_id, ref.external_division_id)
        )
        saved: set[int] = set()
        with self.store.transaction():
            for fixture in fixtures:
                saved.add(self._save_fixture(ref.division_id, fixture).id)
        # A fixture listed twice on the page is one stored row.
        result.items_processed["fixtures"] += len(saved)
        logger.info("Saved %d fixtures for %s", len(saved), ref.describe())

    def _save_fixture(self, division_id: int, fixture: ScrapedFixture) -> Fixture:
        home = self.store.upsert_team(fixture.home_team_id, fixture.home_team_name)
        away = self.store.upsert_team(fixture.away_team_id, fixture.away_team_name)
        return self.store.upsert_fixture(
            division_id,
            home.id,
            away.id,
            fixture.date,
            external_fixture_id=fixture.fixture_id,
            fixture_time=fixture.time,
            pitch=fixture.pitch,
            round_number=fixture.round,
            home_score=fixture.home_score,
            away_score=fixture.away_score,
            is_verified=fixture.verified,
        )

    def _sync_statistics(self, ref: DivisionRef, result: SyncResult) -> None:
        logger.debug("Fetching statistics for %s", ref.describe())
        page = parse_statistics(
            get_statistics(self.client, ref.league_id, ref.season_id, ref.external_division_id)
        )
        saved = 0
        with self.store.transaction():
            for award in page.player_awards:
                if award.team_id is not None:
                    team = self.store.upsert_team(award.team_id, award.team_name)
                else:
                    team = self.store.find_team_by_name(award.team_name)
                    if team is None:
                        logger.warning(
                            "Skipping award for %s: team %r not found",
                            award.player_name,
                            award.team_name,
                        )
                        continue

                player = self.store.upsert_player(award.player_name)
                self.store.link_player_to_team(player.id, team.id, ref.division_id)
                self.store.upsert_player_award(
                    player.id,
                    team.id,
                    ref.division_id,
                    award.award_type,
                    award.award_count,
                )
                saved += 1
        result.items_processed["player_awards"] += saved
        logger.info("Saved %d player awards for %s", saved, ref.describe())

    def sync_single_division(
        self, external_league_id: int, external_season_id: int, external_division_id: int
    ) -> SyncResult:
        """Resync one known division, raising on any failure."""
        league = self.store.find_league_by_external_id(external_league_id)
        if league is None:
            raise DivisionNotFoundError(f"League not found: {external_league_id}")
        season = self.store.find_season_by_external_id(external_season_id)
        if season is None:
            raise DivisionNotFoundError(f"Season not found: {external_season_id}")
        division = self.store.find_division_by_external_id(
            external_division_id, league.id, season.id
        )
        if division is None:
            raise DivisionNotFoundError(f"Division not found: {external_division_id}")

        started = time.monotonic()
        self.errors = []
        result = SyncResult()
        self.sync_division_data(
            DivisionRef(division.id, external_league_id, external_season_id, external_division_id),
            result,
            strict=True,
        )
        result.duration = time.monotonic() - started
        return result

    def fetch_team_profile(
        self,
        external_team_id: int,
        *,
        league_id: Optional[int] = None,
        season_id: Optional[int] = None,
        division_id: Optional[int] = None,
    ) -> Optional[TeamProfile]:
        """Fetch and parse a team's profile page; None when it cannot be read."""
        try:
            html = get_team_profile(
                self.client,
                external_team_id,
                league_id=league_id,
                season_id=season_id,
                division_id=division_id,
            )
            profile = parse_team_profile(html, external_team_id)
        except Exception as exc:
            self._log_error(f"Failed to fetch team profile for {external_team_id}", exc)
            return None
        logger.info(
            "Fetched team profile %s: %d positions, %d stats, %d previous seasons",
            external_team_id,
            len(profile.position_history),
            len(profile.season_stats),
            len(profile.previous_seasons),
        )
        return profile

    def reconcile_team_fixtures(self, profile: TeamProfile, division_id: int) -> TeamProfile:
        """Correct the home/away orientation of profile fixtures.

        A profile fixture that matches a stored fixture in the division takes
        the stored orientation, gets its scores swapped to match, and is marked
        verified. The stored fixture picks up the profile's scores when it has
        none. Unmatched fixtures keep the profile team as home, unverified.
        """
        return profile.model_copy(
            update={
                "fixture_history": [
                    self._reconcile_fixture(f, division_id) for f in profile.fixture_history
                ],
                "upcoming_fixtures": [
                    self._reconcile_fixture(f, division_id) for f in profile.upcoming_fixtures
                ],
            }
        )

    def _reconcile_fixture(self, fixture: ScrapedFixture, division_id: int) -> ScrapedFixture:
        subject = self.store.find_team_by_external_id(fixture.home_team_id)
        opponent = self.store.find_team_by_external_id(fixture.away_team_id)
        stored = None
        if subject is not None and opponent is not None:
            stored = self.store.find_fixture_between(
                subject.id, opponent.id, fixture.date, division_id
            )
        if stored is None:
            return fixture.model_copy(update={"verified": False})

        if stored.home_team_id == subject.id:
            corrected = fixture.model_copy(update={"verified": True})
        else:
            corrected = fixture.model_copy(
                update={
                    "home_team_id": fixture.away_team_id,
                    "home_team_name": fixture.away_team_name,
                    "away_team_id": fixture.home_team_id,
                    "away_team_name": fixture.home_team_name,
                    "home_score": fixture.away_score,
                    "away_score": fixture.home_score,
                    "verified": True,
                }
            )

        if stored.status != "completed" and corrected.status == "completed":
            self.store.mark_fixture_verified(
                stored.id, corrected.home_score, corrected.away_score
            )
        return corrected
