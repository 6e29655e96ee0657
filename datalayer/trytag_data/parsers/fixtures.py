"""Parse a division fixtures page.

Tables are scanned first. Only when they yield nothing are div-based
fixture blocks scanned instead.
"""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import Tag

from ..schema.models import ScrapedFixture
from ._common import (
    DATE_HEADER_PATTERN,
    extract_param,
    extract_score,
    extract_team_id,
    make_soup,
    node_text,
    parse_date,
    parse_pitch,
    parse_round,
    parse_time,
    team_links,
    validate,
)

logger = logging.getLogger(__name__)


def _fixture_id(node: Tag) -> Optional[int]:
    for anchor in node.find_all("a", href=True):
        fixture_id = extract_param(anchor["href"], "FixtureId")
        if fixture_id:
            return fixture_id
    return None


def _build_fixture(
    row: Tag,
    text: str,
    home: Tag,
    away: Tag,
    fixture_date: Optional[str],
) -> Optional[ScrapedFixture]:
    home_score, away_score = extract_score(row, text)
    return validate(
        ScrapedFixture,
        {
            "fixture_id": _fixture_id(row),
            "date": fixture_date,
            "time": parse_time(text),
            "pitch": parse_pitch(text),
            "round": parse_round(text),
            "home_team_id": extract_team_id(home["href"]),
            "home_team_name": node_text(home),
            "away_team_id": extract_team_id(away["href"]),
            "away_team_name": node_text(away),
            "home_score": home_score,
            "away_score": away_score,
        },
        "fixture",
    )


def _distinct_teams(home: Tag, away: Tag) -> bool:
    home_id = extract_team_id(home["href"])
    away_id = extract_team_id(away["href"])
    return bool(home_id and away_id and home_id != away_id)


def _from_tables(soup) -> list[ScrapedFixture]:
    fixtures: list[ScrapedFixture] = []
    for table in soup.find_all("table"):
        current_date: Optional[str] = None
        for row in table.find_all("tr"):
            # Rows wrapping a nested table belong to that table's own pass.
            if row.find_parent("table") is not table or row.find("table") is not None:
                continue
            text = node_text(row)

            header = DATE_HEADER_PATTERN.search(text)
            if header:
                current_date = parse_date(header.group(0)) or current_date
                continue
            links = team_links(row)
            if len(links) < 2:
                continue
            home, away = links[0], links[-1]
            if not _distinct_teams(home, away):
                continue

            fixture = _build_fixture(row, text, home, away, current_date)
            if fixture is not None:
                fixtures.append(fixture)
    return fixtures


def _block_date(block: Tag, link: Tag) -> Optional[str]:
    header = DATE_HEADER_PATTERN.search(node_text(block))
    if header:
        return parse_date(header.group(0))
    previous = link.find_previous(string=DATE_HEADER_PATTERN)
    if previous is not None:
        return parse_date(str(previous))
    return None


def _from_blocks(soup) -> list[ScrapedFixture]:
    fixtures: list[ScrapedFixture] = []
    links = team_links(soup)
    seen_pairs: set[tuple[int, int, Optional[str]]] = set()
    idx = 0

    while idx + 1 < len(links):
        home, away = links[idx], links[idx + 1]
        if not node_text(home) or not node_text(away) or not _distinct_teams(home, away):
            idx += 1
            continue

        inner = home.find_parent("div")
        block = inner.parent if inner is not None and inner.parent is not None else home.parent
        text = node_text(block)
        fixture_date = _block_date(block, home)

        pair = (extract_team_id(home["href"]), extract_team_id(away["href"]), fixture_date)
        if pair not in seen_pairs:
            seen_pairs.add(pair)
            fixture = _build_fixture(block, text, home, away, fixture_date)
            if fixture is not None:
                fixtures.append(fixture)
        idx += 2
    return fixtures


def parse_fixtures(html: str) -> list[ScrapedFixture]:
    soup = make_soup(html)
    fixtures = _from_tables(soup)
    if not fixtures:
        fixtures = _from_blocks(soup)
    logger.info("Parsed %d fixtures", len(fixtures))
    return fixtures
