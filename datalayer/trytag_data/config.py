"""Configuration helpers for the TryTag data layer."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://trytagrugby.spawtz.com"
DEFAULT_DATABASE_URL = "sqlite:///data/trytag.db"
DEFAULT_CURRENT_SEASONS = ("winter 2025", "spring 2026")


@dataclass(frozen=True)
class TryTagConfig:
    base_url: str = DEFAULT_BASE_URL
    rate_limit: int = 5
    timeout_seconds: float = 30.0
    max_concurrent: int = 2
    max_retries: int = 3
    database_url: str = DEFAULT_DATABASE_URL
    current_season_labels: tuple[str, ...] = field(default=DEFAULT_CURRENT_SEASONS)

    def is_current_season(self, season_name: str) -> bool:
        lowered = season_name.lower()
        return any(label and label in lowered for label in self.current_season_labels)


def _int_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}.")
    return value


def load_config() -> TryTagConfig:
    load_dotenv()

    timeout_ms = _int_env("SCRAPER_TIMEOUT", 30000, minimum=1)

    seasons_raw = os.getenv("TRYTAG_CURRENT_SEASONS")
    if seasons_raw is None:
        current_seasons = DEFAULT_CURRENT_SEASONS
    else:
        current_seasons = tuple(
            part.strip().lower() for part in seasons_raw.split(",") if part.strip()
        )

    return TryTagConfig(
        base_url=os.getenv("SCRAPER_BASE_URL") or DEFAULT_BASE_URL,
        rate_limit=_int_env("SCRAPER_RATE_LIMIT", 5, minimum=1),
        timeout_seconds=timeout_ms / 1000.0,
        max_concurrent=_int_env("SCRAPER_MAX_CONCURRENT", 2, minimum=1),
        max_retries=_int_env("SCRAPER_MAX_RETRIES", 3, minimum=1),
        database_url=os.getenv("TRYTAG_DATABASE_URL") or DEFAULT_DATABASE_URL,
        current_season_labels=current_seasons,
    )
