import threading
import time

import pytest

from datalayer.trytag_data.spawtz_api.limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def test_dispatches_are_spaced_by_min_interval():
    clock = FakeClock()
    limiter = RateLimiter(max_concurrent=2, min_interval=0.2, clock=clock, sleep=clock.sleep)
    dispatched: list[float] = []

    for _ in range(5):
        limiter.schedule(lambda: dispatched.append(clock()))

    assert dispatched == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8])
    gaps = [b - a for a, b in zip(dispatched, dispatched[1:])]
    assert all(gap >= 0.2 - 1e-9 for gap in gaps)


def test_no_wait_after_idle_period():
    clock = FakeClock()
    limiter = RateLimiter(min_interval=0.2, clock=clock, sleep=clock.sleep)

    limiter.schedule(lambda: None)
    clock.now = 5.0
    limiter.schedule(lambda: None)

    assert clock.now == 5.0


def test_per_second_rounds_interval_up_to_milliseconds():
    assert RateLimiter.per_second(5).min_interval == 0.2
    assert RateLimiter.per_second(3).min_interval == 0.334
    assert RateLimiter.per_second(3, max_concurrent=4).max_concurrent == 4


def test_concurrency_never_exceeds_slots():
    limiter = RateLimiter(max_concurrent=2)
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}

    def work():
        with lock:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.02)
        with lock:
            state["active"] -= 1

    threads = [threading.Thread(target=limiter.schedule, args=(work,)) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert state["peak"] <= 2


def test_schedule_returns_result_and_propagates_errors():
    limiter = RateLimiter()

    assert limiter.schedule(lambda x, y=1: x + y, 2, y=3) == 5
    with pytest.raises(KeyError):
        limiter.schedule(lambda: {}["missing"])


def test_rejects_invalid_settings():
    with pytest.raises(ValueError):
        RateLimiter(max_concurrent=0)
    with pytest.raises(ValueError):
        RateLimiter(min_interval=-1)
