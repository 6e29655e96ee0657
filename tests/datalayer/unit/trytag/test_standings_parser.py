from datalayer.trytag_data.parsers.standings import parse_standings


def test_positions_follow_row_order_and_skip_unlinked_rows(load_html):
    page = parse_standings(load_html("standings.html"))

    assert page.division_name == "Division 1"
    assert [(row.position, row.team_name) for row in page.standings] == [
        (1, "Try Hards"),
        (2, "Tag Team"),
        (3, "Side Steppers"),
    ]


def test_columns_are_mapped_from_header(load_html):
    page = parse_standings(load_html("standings.html"))
    top = page.standings[0]

    assert top.team_id == 11
    assert (top.played, top.wins, top.losses, top.draws) == (5, 4, 1, 0)
    assert (top.points_for, top.points_against, top.point_difference) == (40, 20, 20)
    assert (top.bonus_points, top.total_points) == (2, 18)
    assert page.standings[2].point_difference == -18


def test_synonym_headers_in_a_different_order():
    html = """
    <table>
      <tr><th>Pts</th><th>Team</th><th>Won</th><th>Lost</th><th>Pld</th></tr>
      <tr><td>9</td><td><a href="?TeamId=5">Alpha</a></td><td>3</td><td>0</td><td>3</td></tr>
    </table>
    """
    row = parse_standings(html).standings[0]

    assert row.team_name == "Alpha"
    assert (row.total_points, row.wins, row.losses, row.played) == (9, 3, 0, 3)


def test_tables_without_points_header_are_ignored():
    html = """
    <table>
      <tr><th>Team</th><th>Venue</th></tr>
      <tr><td><a href="?TeamId=5">Alpha</a></td><td>Park</td><td>x</td></tr>
    </table>
    """
    page = parse_standings(html)

    assert page.standings == []
    assert page.division_name == "Unknown Division"
