from __future__ import annotations

import threading

import pytest

from agriauth.shared.middleware.rate_limit import InMemoryRateLimitStore, RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def test_requests_beyond_limit_are_rejected(clock: FakeClock) -> None:
    limiter = RateLimiter(5, 900, clock=clock)

    results = [limiter.allow("auth:10.0.0.1") for _ in range(6)]

    assert results == [True] * 5 + [False]


def test_decision_reports_remaining_and_reset(clock: FakeClock) -> None:
    limiter = RateLimiter(5, 900, clock=clock)

    first = limiter.check("auth:10.0.0.1")
    clock.now += 100
    second = limiter.check("auth:10.0.0.1")

    assert (first.remaining, first.reset_after) == (4, 900)
    assert (second.remaining, second.reset_after) == (3, 800)
    assert second.headers() == {
        "RateLimit-Limit": "5",
        "RateLimit-Remaining": "3",
        "RateLimit-Reset": "800",
    }


def test_window_resets_after_expiry(clock: FakeClock) -> None:
    limiter = RateLimiter(5, 900, clock=clock)
    for _ in range(6):
        limiter.allow("auth:10.0.0.1")

    clock.now += 901

    assert limiter.allow("auth:10.0.0.1") is True


def test_keys_are_counted_independently(clock: FakeClock) -> None:
    limiter = RateLimiter(1, 900, clock=clock)

    assert limiter.allow("auth:10.0.0.1") is True
    assert limiter.allow("auth:10.0.0.2") is True
    assert limiter.allow("general:10.0.0.1") is True
    assert limiter.allow("auth:10.0.0.1") is False


def test_reset_clears_counters(clock: FakeClock) -> None:
    store = InMemoryRateLimitStore()
    limiter = RateLimiter(1, 900, store=store, clock=clock)
    limiter.allow("a")
    limiter.allow("b")

    limiter.reset("a")
    assert limiter.allow("a") is True
    assert len(store) == 2

    limiter.reset()
    assert len(store) == 0


def test_concurrent_hits_are_not_undercounted() -> None:
    limiter = RateLimiter(100, 900)
    allowed: list[bool] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            result = limiter.allow("general:10.0.0.1")
            with lock:
                allowed.append(result)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(allowed) == 400
    assert allowed.count(True) == 100
