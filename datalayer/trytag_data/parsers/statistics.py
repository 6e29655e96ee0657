"""Parse a statistics page into player award counts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

from bs4 import Tag

from ..schema.models import ScrapedPlayerAward
from ._common import (
    STATISTICS_HEADER_KEYWORDS,
    STATISTICS_HEADER_SYNONYMS,
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

StatisticsLevel = Literal["division", "season"]

DEFAULT_COLUMNS = {"player": 0, "team": 1, "awards": 2}
AWARD_TYPE = "player_of_match"


@dataclass
class StatisticsPage:
    level: StatisticsLevel
    player_awards: list[ScrapedPlayerAward] = field(default_factory=list)


def _header_row(table: Tag) -> Optional[Tag]:
    row = find_header_row(table)
    # Award tables always name a player column in their header.
    if row is None or "player" not in node_text(row).lower():
        return None
    return row


def _is_awards_table(header_text: str) -> bool:
    return "player" in header_text and any(
        keyword in header_text for keyword in STATISTICS_HEADER_KEYWORDS
    )


def _is_data_row(row: Tag, header_row: Tag) -> bool:
    if row is header_row or row.find("th") is not None:
        return False
    if "STHeaderRow" in (row.get("class") or []):
        return False
    first = row.find("td")
    return first is not None and node_text(first).lower() not in {"player", "team"}


def _award_count(text: str) -> int:
    count = parse_int(text, default=1)
    return count if count > 0 else 1


def parse_statistics(html: str, level: StatisticsLevel = "division") -> StatisticsPage:
    soup = make_soup(html)
    page = StatisticsPage(level=level)

    for table in soup.find_all("table"):
        header_row = _header_row(table)
        if header_row is None:
            continue
        cells = header_cells(header_row)
        if not _is_awards_table(" ".join(node_text(cell).lower() for cell in cells)):
            continue
        columns = {
            **DEFAULT_COLUMNS,
            **map_headers(cells, STATISTICS_HEADER_SYNONYMS, STATISTICS_HEADER_KEYWORDS),
        }

        for row in table.find_all("tr"):
            if row.find_parent("table") is not table or not _is_data_row(row, header_row):
                continue
            tds = row.find_all("td")
            if len(tds) < 2:
                continue

            player_name = node_text(tds[columns["player"]]) if columns["player"] < len(tds) else ""
            if not player_name:
                continue

            team_cell = tds[columns["team"]] if columns["team"] < len(tds) else None
            if team_cell is None:
                continue
            links = team_links(team_cell)
            if links:
                team_name = node_text(links[0])
                team_id = extract_team_id(links[0]["href"])
            else:
                team_name = node_text(team_cell)
                team_id = None

            awards_idx = columns["awards"]
            award_text = node_text(tds[awards_idx]) if awards_idx < len(tds) else ""

            award = validate(
                ScrapedPlayerAward,
                {
                    "player_name": player_name,
                    "team_name": team_name,
                    "team_id": team_id,
                    "award_count": _award_count(award_text),
                    "award_type": AWARD_TYPE,
                },
                "player award",
            )
            if award is not None:
                page.player_awards.append(award)

    logger.info("Parsed %s statistics: %d awards", level, len(page.player_awards))
    return page
