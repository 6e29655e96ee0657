from datalayer.trytag_data.queries import get_division_fixtures, get_division_standings, team_form


def _seed(store):
    league = store.upsert_league(1, "Clapham Common Monday")
    season = store.upsert_season(10, "Winter 2025")
    division = store.upsert_division(101, league.id, season.id, "Division 1")
    alpha = store.upsert_team(11, "Try Hards")
    beta = store.upsert_team(12, "Tag Team")
    store.upsert_standing(alpha.id, division.id, position=1, played=3, wins=2, draws=1, total_points=10)
    store.upsert_standing(beta.id, division.id, position=2, played=3, losses=2, draws=1, total_points=4)

    store.upsert_fixture(division.id, alpha.id, beta.id, "2026-01-05", home_score=10, away_score=4)
    store.upsert_fixture(division.id, beta.id, alpha.id, "2026-01-12", home_score=6, away_score=6)
    store.upsert_fixture(
        division.id, beta.id, alpha.id, "2026-01-19", fixture_time="19:15", home_score=2, away_score=9
    )
    store.upsert_fixture(division.id, alpha.id, beta.id, "2026-01-26")
    store.upsert_fixture(division.id, beta.id, alpha.id, "2026-01-26", fixture_time="18:30")
    return division, alpha, beta


def test_division_standings_with_form(store):
    division, _, _ = _seed(store)

    payload = get_division_standings(store, division.id)

    assert payload["found"] is True
    assert payload["division"]["league_name"] == "Clapham Common Monday"
    assert [(row["team_name"], row["form"]) for row in payload["standings"]] == [
        ("Try Hards", "WDW"),
        ("Tag Team", "LDL"),
    ]


def test_division_fixtures_ordered_by_date_then_time(store):
    division, _, _ = _seed(store)

    fixtures = get_division_fixtures(store, division.id)["fixtures"]

    assert [(f["fixture_date"], f["fixture_time"]) for f in fixtures] == [
        ("2026-01-05", None),
        ("2026-01-12", None),
        ("2026-01-19", "19:15"),
        ("2026-01-26", "18:30"),
        ("2026-01-26", None),
    ]
    assert fixtures[0]["home_team"] == "Try Hards"
    assert fixtures[0]["is_verified"] is True


def test_unknown_division(store):
    assert get_division_standings(store, 404) == {"found": False, "division_id": 404}
    assert get_division_fixtures(store, 404)["found"] is False


def test_team_form_keeps_last_five():
    fixtures = [
        {"home_team_id": 1, "away_team_id": 2, "home_score": n, "away_score": 0}
        for n in range(1, 8)
    ]
    assert team_form(fixtures, 1) == "WWWWW"
    assert team_form(fixtures, 2) == "LLLLL"
