"""Rate-limited HTML client for the Spawtz league site."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

import requests

from ..config import TryTagConfig
from .limiter import RateLimiter

logger = logging.getLogger(__name__)

USER_AGENT = "TryTagStats/1.0 (Statistics aggregator)"
BACKOFF_BASE_SECONDS = 1.0
BACKOFF_CAP_SECONDS = 10.0


class FetchError(RuntimeError):
    """Raised when a page cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status: Optional[int] = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.attempts = attempts


def backoff_delay(attempt: int) -> float:
    return min(BACKOFF_BASE_SECONDS * 2 ** (attempt - 1), BACKOFF_CAP_SECONDS)


def _is_retryable(status: Optional[int]) -> bool:
    if status is None:
        return True
    return not (400 <= status < 500 and status != 429)


class FetchClient:
    def __init__(
        self,
        base_url: str,
        *,
        limiter: Optional[RateLimiter] = None,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url
        self.limiter = limiter or RateLimiter()
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-GB,en;q=0.9",
            }
        )
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: TryTagConfig, **kwargs: Any) -> "FetchClient":
        limiter = RateLimiter.per_second(config.rate_limit, config.max_concurrent)
        logger.info(
            "Fetch client initialised for %s at %s req/s", config.base_url, config.rate_limit
        )
        return cls(
            config.base_url,
            limiter=limiter,
            timeout_seconds=config.timeout_seconds,
            max_retries=config.max_retries,
            **kwargs,
        )

    def _absolute(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"

    def fetch(
        self,
        url: str,
        *,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> str:
        return self.limiter.schedule(
            self._fetch_with_retries,
            self._absolute(url),
            max_retries if max_retries is not None else self.max_retries,
            timeout if timeout is not None else self.timeout_seconds,
        )

    def fetch_with_params(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        **kwargs: Any,
    ) -> str:
        query = urlencode([(key, str(value)) for key, value in params.items()])
        return self.fetch(f"{endpoint}?{query}", **kwargs)

    def _fetch_with_retries(self, url: str, max_retries: int, timeout: float) -> str:
        last_error: Optional[Exception] = None
        last_status: Optional[int] = None

        for attempt in range(1, max_retries + 1):
            logger.debug("Fetching %s (attempt %d)", url, attempt)
            status: Optional[int] = None
            try:
                response = self.session.get(url, timeout=timeout)
                status = response.status_code
                response.raise_for_status()
            except requests.RequestException as exc:
                last_error = exc
                last_status = status
                if not _is_retryable(status):
                    logger.error("Client error %s for %s, not retrying", status, url)
                    raise FetchError(
                        f"HTTP {status} for {url}", url=url, status=status, attempts=attempt
                    ) from exc
                if attempt < max_retries:
                    delay = backoff_delay(attempt)
                    logger.warning(
                        "Fetch of %s failed (%s), retrying in %.1fs", url, exc, delay
                    )
                    self._sleep(delay)
                continue

            logger.debug("Fetched %s (%s)", url, status)
            return response.text

        logger.error("All %d attempts failed for %s: %s", max_retries, url, last_error)
        raise FetchError(
            f"Failed to fetch {url} after {max_retries} attempts: {last_error}",
            url=url,
            status=last_status,
            attempts=max_retries,
        ) from last_error
