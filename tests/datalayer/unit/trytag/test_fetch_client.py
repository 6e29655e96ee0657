import pytest
import requests

from datalayer.trytag_data.config import TryTagConfig
from datalayer.trytag_data.spawtz_api.client import (
    FetchClient,
    FetchError,
    USER_AGENT,
    backoff_delay,
)
from datalayer.trytag_data.spawtz_api.endpoints import STANDINGS, get_standings


def _response(status: int, body: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.url = "https://example.test"
    return response


class ScriptedSession:
    def __init__(self, outcomes):
        self.headers: dict[str, str] = {}
        self.outcomes = list(outcomes)
        self.requests: list[tuple[str, float]] = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(session, sleeps):
    return FetchClient(
        "https://example.test",
        session=session,
        sleep=sleeps.append,
        timeout_seconds=2.0,
    )


def test_retries_server_errors_then_returns_body():
    session = ScriptedSession([_response(500), _response(500), _response(200, "<html>ok</html>")])
    sleeps: list[float] = []

    html = _client(session, sleeps).fetch("/Leagues/Standings")

    assert html == "<html>ok</html>"
    assert len(session.requests) == 3
    assert sleeps == [1.0, 2.0]
    assert session.requests[0] == ("https://example.test/Leagues/Standings", 2.0)


def test_client_error_is_not_retried():
    session = ScriptedSession([_response(404), _response(200, "never")])
    sleeps: list[float] = []

    with pytest.raises(FetchError) as excinfo:
        _client(session, sleeps).fetch("/Leagues/Missing")

    assert len(session.requests) == 1
    assert sleeps == []
    assert excinfo.value.status == 404
    assert excinfo.value.attempts == 1


def test_rate_limited_response_is_retried():
    session = ScriptedSession([_response(429), _response(200, "fine")])
    sleeps: list[float] = []

    assert _client(session, sleeps).fetch("/x") == "fine"
    assert sleeps == [1.0]


def test_gives_up_after_max_retries():
    session = ScriptedSession(
        [requests.ConnectionError("down"), _response(503), requests.Timeout("slow")]
    )
    sleeps: list[float] = []

    with pytest.raises(FetchError) as excinfo:
        _client(session, sleeps).fetch("/x")

    assert excinfo.value.attempts == 3
    assert excinfo.value.status is None
    assert sleeps == [1.0, 2.0]


def test_backoff_is_capped():
    assert [backoff_delay(n) for n in (1, 2, 3, 4, 5, 6)] == [1.0, 2.0, 4.0, 8.0, 10.0, 10.0]


def test_fetch_with_params_builds_query_string():
    session = ScriptedSession([_response(200, "table")])
    client = _client(session, [])

    assert get_standings(client, 1, 10, 101) == "table"
    url = session.requests[0][0]
    assert url == (
        f"https://example.test{STANDINGS}?VenueId=0&LeagueId=1&SeasonId=10&DivisionId=101"
    )


def test_from_config_applies_settings():
    session = ScriptedSession([])
    config = TryTagConfig(base_url="https://league.example", rate_limit=4, timeout_seconds=5.0)

    client = FetchClient.from_config(config, session=session)

    assert client.base_url == "https://league.example"
    assert client.timeout_seconds == 5.0
    assert client.limiter.min_interval == 0.25
    assert session.headers["User-Agent"] == USER_AGENT
