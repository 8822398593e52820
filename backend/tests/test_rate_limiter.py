# backend/tests/test_rate_limiter.py

import asyncio

from roadtrip.utils.rate_limiter import RateLimiter, default_rate_limiters


class FakeClock:

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_back_to_back_calls_get_successive_slots():
    clock = FakeClock()
    limiter = RateLimiter("overpass", 2.0, clock=clock)

    assert limiter.reserve() == 0
    assert limiter.reserve() == 2.0
    assert limiter.reserve() == 4.0


def test_no_wait_once_interval_has_passed():
    clock = FakeClock()
    limiter = RateLimiter("nominatim", 1.0, clock=clock)

    limiter.reserve()
    clock.now += 5
    assert limiter.reserve() == 0
    clock.now += 0.25
    assert limiter.reserve() == 0.75


def test_limiters_are_independent():
    clock = FakeClock()
    a = RateLimiter("a", 2.0, clock=clock)
    b = RateLimiter("b", 2.0, clock=clock)

    a.reserve()
    assert b.reserve() == 0


def test_zero_interval_never_waits():
    limiter = RateLimiter("free", 0)
    asyncio.run(limiter.wait())
    assert limiter.reserve() == 0


def test_default_limiters_are_fresh_per_call():
    first, second = default_rate_limiters(), default_rate_limiters()
    assert set(first) == {"overpass", "wikipedia", "nominatim"}
    assert first["overpass"] is not second["overpass"]
    assert first["overpass"].min_interval == 2.0
