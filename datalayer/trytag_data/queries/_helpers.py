"""Shared utility functions for query modules."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import text


def fetch_all(conn, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
    """Execute SQL and return all rows as list of dicts."""
    result = conn.execute(text(sql), dict(params or {}))
    return [dict(row._mapping) for row in result]


def fetch_one(conn, sql: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
    """Execute SQL and return first row as dict, or None."""
    row = conn.execute(text(sql), dict(params or {})).first()
    return dict(row._mapping) if row is not None else None


def fixture_result(fixture: Mapping[str, Any], team_id: int) -> str | None:
    """Return "W", "L" or "D" for a completed fixture from one team's side."""
    home, away = fixture["home_score"], fixture["away_score"]
    if home is None or away is None:
        return None
    if home == away:
        return "D"
    won = home > away if fixture["home_team_id"] == team_id else away > home
    return "W" if won else "L"
