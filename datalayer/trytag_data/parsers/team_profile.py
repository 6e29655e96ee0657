"""Parse a single team's profile page.

The page lists the team's fixtures without saying which side was at home.
Every fixture read here records the profile team as home and is marked
unverified; ``SyncOrchestrator.reconcile_team_fixtures`` corrects the
orientation against stored fixtures where it can.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..schema.models import (
    HistoricalSeasonLink,
    ScrapedFixture,
    ScrapedPlayerAward,
    TeamPositionHistory,
    TeamPreviousSeason,
    TeamProfile,
    TeamSeasonStats,
)
from ._common import (
    extract_param,
    extract_score,
    extract_team_id,
    make_soup,
    node_text,
    parse_date,
    parse_int,
    parse_pitch,
    parse_time,
    team_links,
    validate,
)

logger = logging.getLogger(__name__)

_CHART_DATA = re.compile(r"arrayToDataTable\s*\(\s*\[([\s\S]*?)\]\s*\)")
_CHART_ROW = re.compile(r"\[\s*['\"](\d+)['\"]\s*,\s*(\d+)\s*\]")
_PROFILE_DATE = re.compile(r"\d{1,2}\s+[A-Za-z]{3,9}\s+\d{4}|\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}")

_SUMMARY_PATTERNS = {
    "current_position": re.compile(r"position[:\s]+(\d+)", re.IGNORECASE),
    "played": re.compile(r"played[:\s]+(\d+)", re.IGNORECASE),
    "wins": re.compile(r"won[:\s]+(\d+)", re.IGNORECASE),
    "losses": re.compile(r"lost[:\s]+(\d+)", re.IGNORECASE),
    "draws": re.compile(r"drawn?[:\s]+(\d+)", re.IGNORECASE),
}

STAT_PERIODS = ("last3", "season", "allTime")
_STAT_LABELS = {
    "average scored": "avg_scored",
    "average conceded": "avg_conceded",
    "average points": "avg_points",
    "biggest win": "biggest_win",
    "biggest loss": "biggest_loss",
}


def parse_position_history(html: str) -> list[TeamPositionHistory]:
    """Read week/position pairs from the embedded chart data."""
    match = _CHART_DATA.search(html)
    if not match:
        return []
    return [
        TeamPositionHistory(week=int(week), position=int(position))
        for week, position in _CHART_ROW.findall(match.group(1))
    ]


def _float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def parse_season_stats(soup: BeautifulSoup) -> list[TeamSeasonStats]:
    stats: list[TeamSeasonStats] = []
    for table in soup.find_all("table"):
        text = node_text(table)
        if "Average Scored" not in text and "Average Conceded" not in text:
            continue

        rows: dict[str, list[str]] = {}
        for tr in table.find_all("tr"):
            cells = tr.find_all(["td", "th"])
            if len(cells) < 2:
                continue
            label = node_text(cells[0]).lower().rstrip(" :")
            if label:
                rows[label] = [node_text(cell) for cell in cells[1:]]

        for idx, period in enumerate(STAT_PERIODS):
            values: dict[str, object] = {"period": period}
            for label, cells in rows.items():
                field_name = next(
                    (name for key, name in _STAT_LABELS.items() if key in label), None
                )
                if field_name is None or idx >= len(cells) or not cells[idx]:
                    continue
                value = cells[idx]
                if field_name.startswith("biggest"):
                    values[field_name] = value if value != "-" else None
                else:
                    values[field_name] = _float(value)
            stats.append(TeamSeasonStats(**values))
    return stats


def parse_previous_seasons(soup: BeautifulSoup) -> list[TeamPreviousSeason]:
    if "Previous Seasons" not in soup.get_text(" "):
        return []

    seasons: list[TeamPreviousSeason] = []
    seen: set[tuple[str, str, str]] = set()
    for link in soup.find_all("a", href=re.compile("Standings")):
        href = link["href"]
        if "LeagueId" not in href or "SeasonId" not in href:
            continue
        parts = node_text(link).split(" - ")
        if len(parts) < 2:
            continue
        if len(parts) >= 3:
            league_name = " - ".join(parts[:-2])
            season_name, division_name = parts[-2], parts[-1]
        else:
            league_name, season_name, division_name = parts[0], parts[1], ""

        key = (league_name, season_name, division_name)
        if key in seen:
            continue
        seen.add(key)
        seasons.append(
            TeamPreviousSeason(
                league_name=league_name,
                season_name=season_name,
                division_name=division_name,
                league_id=extract_param(href, "LeagueId"),
                season_id=extract_param(href, "SeasonId"),
                division_id=extract_param(href, "DivisionId"),
            )
        )
    return seasons


def parse_profile_awards(
    soup: BeautifulSoup, team_name: str, team_id: int
) -> list[ScrapedPlayerAward]:
    awards: list[ScrapedPlayerAward] = []
    for table in soup.find_all("table"):
        first_row = table.find("tr")
        header_text = " ".join(
            node_text(cell).lower()
            for cell in table.find_all("th") + (first_row.find_all("td") if first_row else [])
        )
        if "player" not in header_text or ("award" not in header_text and "match" not in header_text):
            continue

        for tr in table.find_all("tr"):
            cells = tr.find_all("td")
            if len(cells) < 2 or node_text(cells[0]).lower() == "player":
                continue
            count = parse_int(node_text(cells[-1]), default=1) or 1
            award = validate(
                ScrapedPlayerAward,
                {
                    "player_name": node_text(cells[0]),
                    "team_name": team_name,
                    "team_id": team_id,
                    "award_count": count,
                },
                "player award",
            )
            if award is not None:
                awards.append(award)
    return awards


def _is_fixture_table(table: Tag) -> bool:
    headers = table.find_all("th")
    if not headers:
        first_row = table.find("tr")
        headers = first_row.find_all("td") if first_row is not None else []
    text = " ".join(node_text(cell).lower() for cell in headers)
    return "date" in text and ("opposition" in text or "result" in text)


def _opposition_link(row: Tag, team_id: int) -> Optional[Tag]:
    for link in team_links(row):
        if extract_team_id(link["href"]) != team_id:
            return link
    return None


def parse_profile_fixtures(
    soup: BeautifulSoup, team_id: int, team_name: str
) -> list[ScrapedFixture]:
    fixtures: list[ScrapedFixture] = []
    for table in soup.find_all("table"):
        if not _is_fixture_table(table):
            continue
        for row in table.find_all("tr"):
            if row.find("th") is not None or row.find_parent("table") is not table:
                continue
            text = node_text(row)
            if "bye" in text.lower():
                continue
            date_match = _PROFILE_DATE.search(text)
            fixture_date = parse_date(date_match.group(0)) if date_match else None
            if fixture_date is None:
                continue
            opposition = _opposition_link(row, team_id)
            if opposition is None or not node_text(opposition):
                continue

            home_score, away_score = extract_score(row, text)
            fixture = validate(
                ScrapedFixture,
                {
                    "date": fixture_date,
                    "time": parse_time(text),
                    "pitch": parse_pitch(text),
                    "home_team_id": team_id,
                    "home_team_name": team_name,
                    "away_team_id": extract_team_id(opposition["href"]),
                    "away_team_name": node_text(opposition),
                    "home_score": home_score,
                    "away_score": away_score,
                    "verified": False,
                },
                "team profile fixture",
            )
            if fixture is not None:
                fixtures.append(fixture)
    return fixtures


def parse_historical_seasons(soup: BeautifulSoup) -> list[HistoricalSeasonLink]:
    links: list[HistoricalSeasonLink] = []
    seen: set[tuple[int, int]] = set()
    for anchor in soup.find_all("a", href=re.compile("SeasonId")):
        season_id = extract_param(anchor["href"], "SeasonId")
        division_id = extract_param(anchor["href"], "DivisionId")
        name = node_text(anchor)
        if not season_id or not division_id or not name:
            continue
        if (season_id, division_id) in seen:
            continue
        seen.add((season_id, division_id))
        links.append(
            HistoricalSeasonLink(season_id=season_id, season_name=name, division_id=division_id)
        )
    return links


def parse_team_profile(html: str, team_id: int) -> TeamProfile:
    soup = make_soup(html)
    heading = soup.select_one("h1, h2, .team-name")
    team_name = (node_text(heading) if heading is not None else "") or f"Team {team_id}"

    body_text = node_text(soup.body or soup)
    summary = {}
    for name, pattern in _SUMMARY_PATTERNS.items():
        match = pattern.search(body_text)
        if match:
            summary[name] = int(match.group(1))

    fixtures = parse_profile_fixtures(soup, team_id, team_name)
    profile = TeamProfile(
        team_id=team_id,
        team_name=team_name,
        **summary,
        fixture_history=[f for f in fixtures if f.status == "completed"],
        upcoming_fixtures=[f for f in fixtures if f.status != "completed"],
        player_awards=parse_profile_awards(soup, team_name, team_id),
        historical_seasons=parse_historical_seasons(soup),
        position_history=parse_position_history(html),
        season_stats=parse_season_stats(soup),
        previous_seasons=parse_previous_seasons(soup),
    )

    logger.info(
        "Parsed team profile %s: %d played, %d upcoming, %d awards",
        team_name,
        len(profile.fixture_history),
        len(profile.upcoming_fixtures),
        len(profile.player_awards),
    )
    return profile
