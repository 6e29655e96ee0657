from datalayer.trytag_data.parsers.fixtures import parse_fixtures


def test_table_fixtures_carry_date_headers(load_html):
    fixtures = parse_fixtures(load_html("fixtures.html"))

    assert [(f.home_team_name, f.away_team_name, f.date) for f in fixtures] == [
        ("Try Hards", "Tag Team", "2026-01-19"),
        ("Side Steppers", "Try Hards", "2026-01-19"),
        ("Tag Team", "Side Steppers", "2026-01-26"),
    ]


def test_table_fixture_details(load_html):
    played, pending, later = parse_fixtures(load_html("fixtures.html"))

    assert played.fixture_id == 9001
    assert (played.home_score, played.away_score) == (12, 8)
    assert played.status == "completed"
    assert played.time == "18:30"
    assert played.pitch == "Pitch 1"
    assert played.verified is True

    assert pending.status == "scheduled"
    assert pending.home_score is None
    assert later.time == "09:05"


def test_rows_without_a_date_are_dropped():
    html = """
    <table>
      <tr><td><a href="?TeamId=1">A</a></td><td>3 - 1</td><td><a href="?TeamId=2">B</a></td></tr>
    </table>
    """
    assert parse_fixtures(html) == []


def test_div_blocks_used_when_tables_are_empty():
    html = """
    <div class="day">
      <h4>Monday 19 Jan 2026</h4>
      <div class="fixture">
        <div class="home"><a href="?TeamId=21">Alpha</a></div>
        <span data-home-score-for-fixture="10" data-away-score-for-fixture="7"></span>
        <div class="away"><a href="?TeamId=22">Beta</a></div>
        <span>18:30 Round 4</span>
      </div>
      <div class="fixture">
        <div class="home"><a href="?TeamId=23">Gamma</a></div>
        <div class="away"><a href="?TeamId=21">Alpha</a></div>
        <span>19:15</span>
      </div>
    </div>
    """
    first, second = parse_fixtures(html)

    assert (first.home_team_id, first.away_team_id) == (21, 22)
    assert first.date == "2026-01-19"
    assert (first.home_score, first.away_score) == (10, 7)
    assert first.round == 4
    assert (second.home_team_name, second.away_team_name) == ("Gamma", "Alpha")
    assert second.status == "scheduled"


def test_date_header_rows_are_not_fixtures():
    html = """
    <table>
      <tr><td>Monday 19 Jan 2026</td><td><a href="?TeamId=11">A</a></td><td><a href="?TeamId=14">D</a></td></tr>
      <tr><td><a href="?TeamId=11">A</a></td><td>v</td><td><a href="?TeamId=12">B</a></td></tr>
    </table>
    """
    fixtures = parse_fixtures(html)

    assert [(f.home_team_id, f.away_team_id, f.date) for f in fixtures] == [(11, 12, "2026-01-19")]


def test_layout_table_around_fixtures_adds_no_matches():
    html = """
    <table class="layout">
      <tr><td>
        <table class="FixtureTable">
          <tr><td colspan="3">Monday 19 Jan 2026</td></tr>
          <tr><td><a href="?TeamId=11">A</a></td><td>12 - 8</td><td><a href="?TeamId=12">B</a></td></tr>
          <tr><td><a href="?TeamId=13">C</a></td><td>v</td><td><a href="?TeamId=14">D</a></td></tr>
        </table>
      </td></tr>
    </table>
    """
    fixtures = parse_fixtures(html)

    assert [(f.home_team_id, f.away_team_id, f.home_score, f.away_score) for f in fixtures] == [
        (11, 12, 12, 8),
        (13, 14, None, None),
    ]
    assert [f.status for f in fixtures] == ["completed", "scheduled"]
