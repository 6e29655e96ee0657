"""Dispatch limiter shared by every request a FetchClient issues."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class RateLimiter:
    """Bounds in-flight calls and spaces out their dispatch.

    ``schedule`` blocks until one of ``max_concurrent`` slots is free, then
    waits until at least ``min_interval`` seconds have passed since the
    previous dispatch. The slot is held for the whole call, so any retry
    loop running inside ``fn`` reuses it instead of taking a new one.
    """

    def __init__(
        self,
        max_concurrent: int = 2,
        min_interval: float = 0.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1.")
        if min_interval < 0:
            raise ValueError("min_interval must not be negative.")
        self.max_concurrent = max_concurrent
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._slots = threading.BoundedSemaphore(max_concurrent)
        self._lock = threading.Lock()
        self._next_dispatch: float | None = None

    @classmethod
    def per_second(cls, requests_per_second: int, max_concurrent: int = 2) -> "RateLimiter":
        # Round the interval up to whole milliseconds.
        interval_ms = -(-1000 // max(requests_per_second, 1))
        return cls(max_concurrent=max_concurrent, min_interval=interval_ms / 1000.0)

    def schedule(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        with self._slots:
            self._wait_for_turn()
            return fn(*args, **kwargs)

    def _wait_for_turn(self) -> None:
        with self._lock:
            now = self._clock()
            dispatch_at = now if self._next_dispatch is None else max(now, self._next_dispatch)
            self._next_dispatch = dispatch_at + self.min_interval
        delay = dispatch_at - now
        if delay > 0:
            self._sleep(delay)
