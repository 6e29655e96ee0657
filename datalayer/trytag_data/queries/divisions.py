"""Division-level query functions."""

from __future__ import annotations

from typing import Any

from ._helpers import fetch_all, fetch_one, fixture_result

FORM_LENGTH = 5


def _division_header(conn, division_id: int) -> dict[str, Any] | None:
    return fetch_one(
        conn,
        """
        SELECT d.id AS division_id, d.name AS division_name, d.last_scraped_at,
               l.name AS league_name, s.name AS season_name
        FROM divisions d
        JOIN leagues l ON l.id = d.league_id
        JOIN seasons s ON s.id = d.season_id
        WHERE d.id = :division_id
        """,
        {"division_id": division_id},
    )


def _completed_fixtures(conn, division_id: int) -> list[dict[str, Any]]:
    return fetch_all(
        conn,
        """
        SELECT home_team_id, away_team_id, home_score, away_score, fixture_date
        FROM fixtures
        WHERE division_id = :division_id AND status = 'completed'
        ORDER BY fixture_date, fixture_time IS NULL, fixture_time, id
        """,
        {"division_id": division_id},
    )


def team_form(fixtures: list[dict[str, Any]], team_id: int, length: int = FORM_LENGTH) -> str:
    """Recent results for one team, oldest first, e.g. "WWLDW"."""
    results = [
        fixture_result(fixture, team_id)
        for fixture in fixtures
        if team_id in (fixture["home_team_id"], fixture["away_team_id"])
    ]
    return "".join(result for result in results if result)[-length:]


def get_division_standings(store, division_id: int) -> dict[str, Any]:
    """Get the standings table for a division.

    Returns:
        {
            "found": True,
            "division": {"division_id", "division_name", "league_name",
                         "season_name", "last_scraped_at"},
            "standings": [
                {"position": int, "team_name": str, "played": int, "wins": int,
                 "losses": int, "draws": int, "points_for": int,
                 "points_against": int, "point_difference": int,
                 "bonus_points": int, "total_points": int,
                 "form": str},  # last five results, most recent last
                ...
            ]
        }

        Returns {"found": False, "division_id": ...} if the division is unknown.
    """
    with store.transaction() as conn:
        division = _division_header(conn, division_id)
        if division is None:
            return {"found": False, "division_id": division_id}

        rows = fetch_all(
            conn,
            """
            SELECT st.team_id, t.name AS team_name, st.position, st.played, st.wins,
                   st.losses, st.draws, st.forfeits_for, st.forfeits_against,
                   st.points_for, st.points_against, st.point_difference,
                   st.bonus_points, st.total_points
            FROM standings st
            JOIN teams t ON t.id = st.team_id
            WHERE st.division_id = :division_id
            ORDER BY st.position
            """,
            {"division_id": division_id},
        )
        completed = _completed_fixtures(conn, division_id)

    for row in rows:
        row["form"] = team_form(completed, row["team_id"])
    return {"found": True, "division": division, "standings": rows}


def get_division_fixtures(store, division_id: int) -> dict[str, Any]:
    """Get every fixture in a division ordered by date, then kick-off time.

    Fixtures without a time sort after timed fixtures on the same date.
    """
    with store.transaction() as conn:
        division = _division_header(conn, division_id)
        if division is None:
            return {"found": False, "division_id": division_id}

        rows = fetch_all(
            conn,
            """
            SELECT f.id AS fixture_id, f.fixture_date, f.fixture_time, f.pitch,
                   f.round_number, f.home_score, f.away_score, f.status,
                   f.is_forfeit, f.is_verified,
                   ht.name AS home_team, at.name AS away_team
            FROM fixtures f
            JOIN teams ht ON ht.id = f.home_team_id
            JOIN teams at ON at.id = f.away_team_id
            WHERE f.division_id = :division_id
            ORDER BY f.fixture_date, f.fixture_time IS NULL, f.fixture_time, f.id
            """,
            {"division_id": division_id},
        )

    for row in rows:
        row["is_forfeit"] = bool(row["is_forfeit"])
        row["is_verified"] = bool(row["is_verified"])
    return {"found": True, "division": division, "fixtures": rows}
