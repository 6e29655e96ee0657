"""Shared heuristics for the page parsers."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Type, TypeVar

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_NAMES = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_WEEKDAYS = r"(?:Mon(?:day)?|Tue(?:s(?:day)?)?|Wed(?:nesday)?|Thu(?:rs(?:day)?)?|Fri(?:day)?|Sat(?:urday)?|Sun(?:day)?)"

# "Monday 19 Jan 2026" style row headers that open a block of fixtures.
DATE_HEADER_PATTERN = re.compile(
    rf"\b{_WEEKDAYS},?\s+\d{{1,2}}\s+{_MONTH_NAMES}\s+\d{{4}}\b", re.IGNORECASE
)
_DAY_MONTH_YEAR = re.compile(rf"\b(\d{{1,2}})\s+({_MONTH_NAMES})\s+(\d{{4}})\b", re.IGNORECASE)
_NUMERIC_DATE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4})\b")
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")

TIME_PATTERN = re.compile(r"\b(\d{1,2}):(\d{2})(?!\d)")
PITCH_PATTERN = re.compile(r"\bPitch\s+[A-Z0-9]+\b", re.IGNORECASE)
ROUND_PATTERN = re.compile(r"\bRound\s+(\d+)\b", re.IGNORECASE)
# Neighbouring digits, slashes, colons and dashes belong to dates and times.
SCORE_PATTERN = re.compile(r"(?<![\d/:\-])(\d{1,3})\s*[-–—]\s*(\d{1,3})(?![\d/:\-])")

HOME_SCORE_ATTR = "data-home-score-for-fixture"
AWAY_SCORE_ATTR = "data-away-score-for-fixture"

TEAM_LINK = re.compile(r"TeamId=\d+")

# Header cell text -> canonical standings field.
STANDINGS_HEADER_SYNONYMS: dict[str, str] = {
    "team": "team",
    "name": "team",
    "pld": "played",
    "p": "played",
    "played": "played",
    "w": "wins",
    "won": "wins",
    "wins": "wins",
    "l": "losses",
    "lost": "losses",
    "losses": "losses",
    "d": "draws",
    "drawn": "draws",
    "draws": "draws",
    "ff": "forfeits_for",
    "fa": "forfeits_against",
    "f": "points_for",
    "for": "points_for",
    "pf": "points_for",
    "a": "points_against",
    "against": "points_against",
    "pa": "points_against",
    "dif": "point_difference",
    "diff": "point_difference",
    "pd": "point_difference",
    "b": "bonus_points",
    "bonus": "bonus_points",
    "bp": "bonus_points",
    "pts": "total_points",
    "points": "total_points",
    "total": "total_points",
}

STATISTICS_HEADER_SYNONYMS: dict[str, str] = {
    "player": "player",
    "name": "player",
    "team": "team",
}

# Substring fallbacks, checked only when the exact lookup misses.
STATISTICS_HEADER_KEYWORDS: dict[str, str] = {
    "award": "awards",
    "pom": "awards",
    "match": "awards",
}


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def node_text(node: Tag) -> str:
    return clean_text(node.get_text(" "))


def extract_param(href: str, param: str) -> Optional[int]:
    match = re.search(rf"{param}=(\d+)", href or "")
    return int(match.group(1)) if match else None


def extract_team_id(href: str) -> Optional[int]:
    return extract_param(href, "TeamId")


def team_links(node: Tag) -> list[Tag]:
    return node.find_all("a", href=TEAM_LINK)


def parse_int(text: str, default: int = 0) -> int:
    match = re.match(r"\s*([+-]?\d+)", text or "")
    return int(match.group(1)) if match else default


def _iso(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(text: str) -> Optional[str]:
    """Normalise a date string to ``YYYY-MM-DD``.

    Accepts "Monday 19 Jan 2026", "19/01/2026" (day first) and ISO input.
    Returns None for anything else, including impossible calendar dates.
    """
    if not text:
        return None
    match = _DAY_MONTH_YEAR.search(text)
    if match:
        month = MONTHS[match.group(2)[:3].lower()]
        return _iso(int(match.group(3)), month, int(match.group(1)))
    match = _ISO_DATE.search(text)
    if match:
        return _iso(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    match = _NUMERIC_DATE.search(text)
    if match:
        return _iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))
    return None


def parse_time(text: str) -> Optional[str]:
    match = TIME_PATTERN.search(text or "")
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def parse_pitch(text: str) -> Optional[str]:
    match = PITCH_PATTERN.search(text or "")
    return match.group(0) if match else None


def parse_round(text: str) -> Optional[int]:
    match = ROUND_PATTERN.search(text or "")
    return int(match.group(1)) if match else None


def _attr_score(node: Tag, attr: str) -> Optional[int]:
    element = node if node.has_attr(attr) else node.find(attrs={attr: True})
    if element is None:
        return None
    value = str(element.get(attr, "")).strip()
    return int(value) if value.isdigit() else None


def extract_score(node: Tag, text: Optional[str] = None) -> tuple[Optional[int], Optional[int]]:
    """Return (home, away) scores, or (None, None) when unplayed."""
    home = _attr_score(node, HOME_SCORE_ATTR)
    away = _attr_score(node, AWAY_SCORE_ATTR)
    if home is not None and away is not None:
        return home, away

    match = SCORE_PATTERN.search(text if text is not None else node_text(node))
    if match:
        return int(match.group(1)), int(match.group(2))
    return None, None


def find_header_row(table: Tag) -> Optional[Tag]:
    thead = table.find("thead")
    if thead is not None:
        row = thead.find("tr")
        if row is not None:
            return row
    row = table.find("tr", class_="STHeaderRow")
    if row is not None:
        return row
    for row in table.find_all("tr"):
        if row.find("th") is not None:
            return row
    return table.find("tr")


def header_cells(row: Optional[Tag]) -> list[Tag]:
    if row is None:
        return []
    return row.find_all(["th", "td"])


def map_headers(
    cells: Iterable[Tag],
    synonyms: Mapping[str, str],
    keywords: Optional[Mapping[str, str]] = None,
) -> dict[str, int]:
    """Build a field -> column index map from header cells.

    The first column claiming a field wins.
    """
    mapping: dict[str, int] = {}
    for idx, cell in enumerate(cells):
        text = node_text(cell).lower().rstrip(":")
        field = synonyms.get(text)
        if field is None and keywords:
            field = next((f for key, f in keywords.items() if key in text), None)
        if field is not None and field not in mapping:
            mapping[field] = idx
    return mapping


def validate(model: Type[M], data: Mapping[str, Any], kind: str) -> Optional[M]:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Dropping invalid %s %s: %s",
            kind,
            dict(data),
            "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            ),
        )
        return None
