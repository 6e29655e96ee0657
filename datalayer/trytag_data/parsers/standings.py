"""Parse a division standings page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import Tag

from ..schema.models import ScrapedStandingRow
from ._common import (
    STANDINGS_HEADER_SYNONYMS,
    extract_team_id,
    find_header_row,
    header_cells,
    make_soup,
    map_headers,
    node_text,
    parse_int,
    team_links,
    validate,
)

logger = logging.getLogger(__name__)

# Column positions used when a header is missing or unrecognised.
DEFAULT_COLUMNS: dict[str, int] = {
    "team": 0,
    "played": 1,
    "wins": 2,
    "losses": 3,
    "draws": 4,
    "forfeits_for": 5,
    "forfeits_against": 6,
    "points_for": 7,
    "points_against": 8,
    "point_difference": 9,
    "bonus_points": 10,
    "total_points": 11,
}
STAT_FIELDS = tuple(name for name in DEFAULT_COLUMNS if name != "team")


@dataclass
class StandingsPage:
    division_name: str
    standings: list[ScrapedStandingRow] = field(default_factory=list)


def _division_name(soup) -> str:
    heading = soup.select_one("h1, h2, .title, .heading")
    if heading is not None and node_text(heading):
        return node_text(heading)
    if soup.title is not None:
        prefix = soup.title.get_text().split("-")[0].strip()
        if prefix:
            return prefix
    return "Unknown Division"


def _is_standings_table(header_text: str) -> bool:
    return "team" in header_text and ("pts" in header_text or "points" in header_text)


def _parse_table(table: Tag, header_row: Tag) -> list[ScrapedStandingRow]:
    columns = {**DEFAULT_COLUMNS, **map_headers(header_cells(header_row), STANDINGS_HEADER_SYNONYMS)}
    rows: list[ScrapedStandingRow] = []
    position = 0

    for tr in table.find_all("tr"):
        if tr is header_row or tr.find_parent("table") is not table:
            continue
        cells = tr.find_all("td", recursive=False) or tr.find_all("td")
        if len(cells) < 3:
            continue

        team_idx = columns["team"]
        team_cell = cells[team_idx] if team_idx < len(cells) else cells[0]
        links = team_links(team_cell)
        if not links:
            logger.debug("Skipping standings row without a team link: %s", node_text(tr))
            continue
        team_id = extract_team_id(links[0]["href"])
        team_name = node_text(links[0])
        if not team_id or not team_name:
            continue

        candidate: dict[str, object] = {
            "position": position + 1,
            "team_id": team_id,
            "team_name": team_name,
        }
        for name in STAT_FIELDS:
            idx = columns[name]
            candidate[name] = parse_int(node_text(cells[idx])) if idx < len(cells) else 0

        row = validate(ScrapedStandingRow, candidate, "standing row")
        if row is not None:
            position += 1
            rows.append(row)
    return rows


def parse_standings(html: str) -> StandingsPage:
    soup = make_soup(html)
    page = StandingsPage(division_name=_division_name(soup))

    for table in soup.find_all("table"):
        header_row = find_header_row(table)
        if header_row is None:
            continue
        header_text = " ".join(node_text(cell).lower() for cell in header_cells(header_row))
        if not _is_standings_table(header_text):
            continue
        page.standings.extend(_parse_table(table, header_row))

    logger.info(
        "Parsed standings for %s: %d rows", page.division_name, len(page.standings)
    )
    return page
