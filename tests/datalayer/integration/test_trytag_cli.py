import json

import pytest

import datalayer.cli.main as cli
from datalayer.trytag_data.spawtz_api.endpoints import STANDINGS
from datalayer.trytag_data.sync import SyncOrchestrator


@pytest.fixture
def run_cli(monkeypatch, capsys, store, trytag_config):
    def _run(argv, client):
        orchestrator = SyncOrchestrator(client, store, trytag_config)

        class DummyOrchestrator:
            @staticmethod
            def from_config(config):
                return orchestrator

        monkeypatch.setattr(cli, "SyncOrchestrator", DummyOrchestrator)
        monkeypatch.setattr(cli, "load_config", lambda: trytag_config)
        exit_code = cli.main(argv)
        return exit_code, capsys.readouterr().out

    return _run


def test_sync_prints_result(run_cli, fake_client_factory):
    exit_code, out = run_cli(["sync"], fake_client_factory())

    assert exit_code == 0
    payload = json.loads(out)
    assert payload["success"] is True
    assert payload["items_processed"]["divisions"] == 5


def test_sync_with_errors_exits_nonzero(run_cli, fake_client_factory, server_error):
    client = fake_client_factory(failures={(STANDINGS, 201): server_error()})

    exit_code, out = run_cli(["--log-level", "ERROR", "sync"], client)

    assert exit_code == 1
    assert len(json.loads(out)["errors"]) == 1


def test_sync_division_unknown(run_cli, fake_client_factory):
    exit_code, out = run_cli(
        ["sync-division", "--league-id", "1", "--season-id", "10", "--division-id", "101"],
        fake_client_factory(),
    )

    assert exit_code == 1
    assert out.startswith("Error: League not found: 1")


def test_standings_after_sync(run_cli, fake_client_factory, store):
    run_cli(["sync"], fake_client_factory())
    league = store.find_league_by_external_id(1)
    season = store.find_season_by_external_id(10)
    division = store.find_division_by_external_id(101, league.id, season.id)

    exit_code, out = run_cli(["standings", "--division-id", str(division.id)], fake_client_factory())

    assert exit_code == 0
    payload = json.loads(out)
    assert [row["team_name"] for row in payload["standings"]] == [
        "Try Hards",
        "Tag Team",
        "Side Steppers",
    ]


def test_team_profile_command(run_cli, fake_client_factory):
    exit_code, out = run_cli(["team-profile", "--team-id", "11"], fake_client_factory())

    assert exit_code == 0
    payload = json.loads(out)
    assert payload["team_name"] == "Try Hards"
    assert payload["upcoming_fixtures"][0]["verified"] is False
