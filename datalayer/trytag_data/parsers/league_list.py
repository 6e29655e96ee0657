"""Parse the league list page into (league, season, division) entries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit

from ..schema.models import ScrapedLeagueListItem
from ._common import clean_text, make_soup, node_text, validate

logger = logging.getLogger(__name__)

# Region -> keywords looked for in the league name, checked in order.
REGION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "London": (
        "Acton", "Battersea", "Brixton", "Camberwell", "Clapham", "Finsbury",
        "Hackney", "Hammersmith", "Highbury", "Islington", "Kennington",
        "Mile End", "Paddington", "Putney", "Regent", "Shoreditch",
        "Southwark", "Stockwell", "Stratford", "Tower", "Wandsworth",
        "Wembley", "Westminster", "Wimbledon", "London",
    ),
    "Manchester": ("Manchester", "Salford", "Trafford"),
    "Leeds": ("Leeds", "Headingley"),
    "Newcastle": ("Newcastle", "Gateshead"),
    "Edinburgh": ("Edinburgh", "Murrayfield"),
    "Glasgow": ("Glasgow",),
    "Bristol": ("Bristol",),
    "Birmingham": ("Birmingham", "Solihull"),
    "Cardiff": ("Cardiff",),
    "Liverpool": ("Liverpool",),
    "Sheffield": ("Sheffield",),
    "Nottingham": ("Nottingham",),
    "Brighton": ("Brighton",),
    "Southampton": ("Southampton",),
    "Oxford": ("Oxford",),
    "Cambridge": ("Cambridge",),
}
DEFAULT_REGION = "Other"

SEASON_PATTERN = re.compile(r"(Winter|Spring|Summer|Autumn)\s+\d{4}(?:/\d{2})?", re.IGNORECASE)
DIVISION_PATTERN = re.compile(
    r"(Division\s+\d+|Open\s+Grade|\b[A-Z]-Grade|Pool\s+[A-Z]\b|\bPlate\b|\bCup\b)",
    re.IGNORECASE,
)
_PAGE_WORDS = re.compile(r"\b(Fixtures|Standings)\b", re.IGNORECASE)
_EDGE_SEPARATORS = re.compile(r"^[\s\-–—|:,]+|[\s\-–—|:,]+$")


@dataclass
class LeagueList:
    items: list[ScrapedLeagueListItem] = field(default_factory=list)
    regions: list[str] = field(default_factory=list)
    seasons: dict[int, str] = field(default_factory=dict)


def infer_region(league_name: str) -> str:
    lowered = league_name.lower()
    for region, keywords in REGION_KEYWORDS.items():
        if any(keyword.lower() in lowered for keyword in keywords):
            return region
    return DEFAULT_REGION


def clean_league_name(name: str) -> str:
    """Collapse whitespace and strip stray separators from both ends."""
    return _EDGE_SEPARATORS.sub("", clean_text(name))


def _int_params(href: str) -> dict[str, int]:
    params: dict[str, int] = {}
    for key, value in parse_qsl(urlsplit(href).query):
        if value.isdigit():
            params[key] = int(value)
    return params


def parse_league_list(html: str) -> LeagueList:
    soup = make_soup(html)
    result = LeagueList()
    seen: set[tuple[int, int, int]] = set()

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if "Fixtures" not in href and "Standings" not in href:
            continue
        if not all(key in href for key in ("LeagueId=", "SeasonId=", "DivisionId=")):
            continue

        params = _int_params(href)
        league_id = params.get("LeagueId")
        season_id = params.get("SeasonId")
        division_id = params.get("DivisionId")
        if not league_id or not season_id or not division_id:
            continue

        container = anchor.find_parent(["tr", "div", "li"]) or anchor
        context = node_text(container)

        season_match = SEASON_PATTERN.search(context)
        season_name = season_match.group(0) if season_match else ""
        if season_name:
            result.seasons[season_id] = season_name

        division_match = DIVISION_PATTERN.search(context)
        division_name = division_match.group(0) if division_match else ""

        league_name = ""
        heading = container.find_previous_sibling(["h2", "h3", "h4", "strong"])
        if heading is not None:
            league_name = node_text(heading)
        if not league_name:
            league_name = context
            for fragment in (season_name, division_name):
                if fragment:
                    league_name = league_name.replace(fragment, "")
            league_name = _PAGE_WORDS.sub("", league_name)
        league_name = clean_league_name(league_name)

        if len(league_name) < 3:
            continue

        key = (league_id, season_id, division_id)
        if key in seen:
            continue

        region = infer_region(league_name)
        item = validate(
            ScrapedLeagueListItem,
            {
                "league_id": league_id,
                "season_id": season_id,
                "division_id": division_id,
                "league_name": league_name,
                "season_name": season_name or f"Season {season_id}",
                "division_name": division_name or "Division",
                "region": region,
            },
            "league list item",
        )
        if item is None:
            continue

        seen.add(key)
        result.items.append(item)
        if region not in result.regions:
            result.regions.append(region)

    logger.info(
        "Parsed league list: %d items across %d regions",
        len(result.items),
        len(result.regions),
    )
    return result
