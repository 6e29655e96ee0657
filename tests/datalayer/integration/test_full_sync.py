from datalayer.trytag_data.spawtz_api.endpoints import FIXTURES, LEAGUE_LIST, STANDINGS
from datalayer.trytag_data.sync import SyncOrchestrator, slugify


def _division(store, league_id, season_id, division_id):
    league = store.find_league_by_external_id(league_id)
    season = store.find_season_by_external_id(season_id)
    return store.find_division_by_external_id(division_id, league.id, season.id)


def test_full_sync_persists_everything(fake_client_factory, store, trytag_config):
    orchestrator = SyncOrchestrator(fake_client_factory(), store, trytag_config)

    result = orchestrator.run_full_sync()

    assert result.success is True
    assert result.errors == []
    assert result.items_processed == {
        "regions": 3,
        "leagues": 5,
        "seasons": 2,
        "divisions": 5,
        "teams": 15,
        "standings": 15,
        "fixtures": 15,
        "player_awards": 10,
    }
    assert store.find_region_by_slug("london").name == "London"
    assert store.find_league_by_external_id(2).name == "Manchester Tuesday"

    division = _division(store, 1, 10, 101)
    assert [s.position for s in store.list_standings(division.id)] == [1, 2, 3]
    assert len(store.list_fixtures(division.id)) == 3
    assert division.last_scraped_at is not None


def test_one_current_season_after_sync(fake_client_factory, store, trytag_config):
    SyncOrchestrator(fake_client_factory(), store, trytag_config).run_full_sync()

    assert store.current_season().external_season_id == 11
    assert store.find_season_by_external_id(10).is_current is False


def test_standings_failure_is_isolated(fake_client_factory, store, trytag_config, server_error):
    client = fake_client_factory(failures={(STANDINGS, 201): server_error()})
    orchestrator = SyncOrchestrator(client, store, trytag_config)

    result = orchestrator.run_full_sync()

    assert result.success is False
    assert len(result.errors) == 1
    assert "standings" in result.errors[0]
    assert "division 201" in result.errors[0]

    assert store.list_standings(_division(store, 2, 10, 201).id) == []
    assert len(store.list_fixtures(_division(store, 2, 10, 201).id)) == 3
    assert len(store.list_standings(_division(store, 2, 10, 202).id)) == 3
    assert len(store.list_standings(_division(store, 3, 11, 301).id)) == 3
    assert result.items_processed["standings"] == 12


def test_failed_fixtures_keep_standings(fake_client_factory, store, trytag_config, server_error):
    client = fake_client_factory(failures={(FIXTURES, 101): server_error()})

    result = SyncOrchestrator(client, store, trytag_config).run_full_sync()

    division = _division(store, 1, 10, 101)
    assert len(result.errors) == 1
    assert len(store.list_standings(division.id)) == 3
    assert store.list_fixtures(division.id) == []


def test_league_list_failure_returns_unsuccessful_result(
    fake_client_factory, store, trytag_config, server_error
):
    client = fake_client_factory(failures={(LEAGUE_LIST, None): server_error()})

    result = SyncOrchestrator(client, store, trytag_config).run_full_sync()

    assert result.success is False
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Full sync failed")
    assert result.items_processed["divisions"] == 0


def test_resync_replaces_standings_and_keeps_ids(fake_client_factory, store, trytag_config):
    orchestrator = SyncOrchestrator(fake_client_factory(), store, trytag_config)
    orchestrator.run_full_sync()
    division = _division(store, 1, 10, 101)
    before = store.list_standings(division.id)
    team_ids = {s.team_id for s in before}

    orchestrator.run_full_sync()
    after = store.list_standings(division.id)

    assert _division(store, 1, 10, 101).id == division.id
    assert {s.team_id for s in after} == team_ids
    assert len(after) == 3


def test_each_division_fetched_once(fake_client_factory, store, trytag_config):
    client = fake_client_factory()
    SyncOrchestrator(client, store, trytag_config).run_full_sync()

    standings_calls = [params["DivisionId"] for endpoint, params in client.calls if endpoint == STANDINGS]
    assert standings_calls == [101, 102, 201, 202, 301]


def test_slugify():
    assert slugify("Newcastle & Gateshead!") == "newcastle-gateshead"
    assert slugify("  London ") == "london"
