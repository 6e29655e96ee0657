from pathlib import Path

import pytest

from datalayer.trytag_data.config import TryTagConfig
from datalayer.trytag_data.spawtz_api import FetchError
from datalayer.trytag_data.spawtz_api.endpoints import (
    FIXTURES,
    LEAGUE_LIST,
    STANDINGS,
    STATISTICS,
    TEAM_PROFILE,
)
from datalayer.trytag_data.store.sql_store import SqlStore


@pytest.fixture
def trytag_fixture_dir() -> Path:
    return Path(__file__).parent / "fixtures" / "trytag"


@pytest.fixture
def load_html(trytag_fixture_dir: Path):
    def _load(name: str) -> str:
        return (trytag_fixture_dir / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def trytag_pages(load_html):
    return {
        LEAGUE_LIST: load_html("league_list.html"),
        STANDINGS: load_html("standings.html"),
        FIXTURES: load_html("fixtures.html"),
        STATISTICS: load_html("statistics.html"),
        TEAM_PROFILE: load_html("team_profile.html"),
    }


@pytest.fixture
def trytag_config() -> TryTagConfig:
    return TryTagConfig(
        base_url="https://example.test",
        database_url="sqlite://",
        current_season_labels=("winter 2025", "spring 2026"),
    )


@pytest.fixture
def store() -> SqlStore:
    sql_store = SqlStore("sqlite://")
    sql_store.create_tables()
    return sql_store


class FakeFetchClient:
    """Serves canned pages by endpoint; failures are keyed by (endpoint, DivisionId)."""

    def __init__(self, pages, failures=None):
        self.pages = dict(pages)
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, dict]] = []

    def _serve(self, endpoint: str, division_id=None) -> str:
        failure = self.failures.get((endpoint, division_id))
        if failure is not None:
            raise failure
        return self.pages[endpoint]

    def fetch(self, url: str, **kwargs) -> str:
        self.calls.append((url, {}))
        return self._serve(url)

    def fetch_with_params(self, endpoint: str, params, **kwargs) -> str:
        self.calls.append((endpoint, dict(params)))
        return self._serve(endpoint, params.get("DivisionId"))


@pytest.fixture
def fake_client_factory(trytag_pages):
    def _make(failures=None, pages=None) -> FakeFetchClient:
        return FakeFetchClient(pages or trytag_pages, failures)

    return _make


@pytest.fixture
def server_error():
    def _make(url: str = "https://example.test/Leagues/Standings") -> FetchError:
        return FetchError(f"HTTP 500 for {url}", url=url, status=500, attempts=3)

    return _make
