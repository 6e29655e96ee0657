from datalayer.trytag_data.parsers.statistics import parse_statistics


def test_awards_with_and_without_team_links(load_html):
    page = parse_statistics(load_html("statistics.html"))

    assert page.level == "division"
    assert [(a.player_name, a.team_name, a.team_id, a.award_count) for a in page.player_awards] == [
        ("Jane Smith", "Try Hards", 11, 3),
        ("Sam Jones", "Tag Team", None, 1),
        ("Alex Unknown", "Mystery XV", None, 2),
    ]
    assert {a.award_type for a in page.player_awards} == {"player_of_match"}


def test_tables_without_award_headers_are_skipped():
    html = """
    <table>
      <tr><th>Player</th><th>Team</th><th>Tries</th></tr>
      <tr><td>Jane</td><td>Try Hards</td><td>4</td></tr>
    </table>
    """
    assert parse_statistics(html, level="season").player_awards == []


def test_first_row_header_without_th_cells():
    html = """
    <table>
      <tr><td>Player</td><td>Team</td><td>POM Awards</td></tr>
      <tr><td>Jane Smith</td><td><a href="?TeamId=11">Try Hards</a></td><td>2</td></tr>
    </table>
    """
    page = parse_statistics(html)

    assert [(a.player_name, a.team_id, a.award_count) for a in page.player_awards] == [
        ("Jane Smith", 11, 2)
    ]
