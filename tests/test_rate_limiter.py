"""Tests for the sliding-window rate limiter."""
import asyncio

import pytest

from factories import FakeClock
from infrastructure.api import RateLimiter


class TestRateLimiter:
    def test_default_interval_derived_from_quota(self):
        assert RateLimiter(10).min_interval == pytest.approx(6.0)
        assert RateLimiter(9).min_interval == pytest.approx(60 / 9)

    def test_rejects_zero_quota(self):
        with pytest.raises(ValueError):
            RateLimiter(0)

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self):
        clock = FakeClock()
        limiter = RateLimiter(10, min_interval=8.0, clock=clock, sleep=clock.sleep)

        await limiter.acquire()
        assert clock.sleeps == []
        assert limiter.last_request_at == clock.now

    @pytest.mark.asyncio
    async def test_back_to_back_acquires_are_spaced(self):
        clock = FakeClock()
        limiter = RateLimiter(10, min_interval=8.0, clock=clock, sleep=clock.sleep)

        stamps = []
        for _ in range(3):
            await limiter.acquire()
            stamps.append(clock.now)

        gaps = [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 8.0 for gap in gaps)

    @pytest.mark.asyncio
    async def test_window_never_exceeds_quota(self):
        clock = FakeClock()
        limiter = RateLimiter(3, min_interval=0.0, clock=clock, sleep=clock.sleep)

        stamps = []
        for _ in range(7):
            await limiter.acquire()
            stamps.append(clock.now)

        for i, t in enumerate(stamps):
            in_window = [s for s in stamps if t <= s < t + 60]
            assert len(in_window) <= 3, f"window starting at request {i} holds {len(in_window)}"
        # the fourth request had to wait for the first to leave the window
        assert stamps[3] - stamps[0] >= 60

    @pytest.mark.asyncio
    async def test_concurrent_waiters_are_serialized(self):
        clock = FakeClock()
        limiter = RateLimiter(10, min_interval=6.0, clock=clock, sleep=clock.sleep)
        order = []

        async def worker(n):
            await limiter.acquire()
            order.append((n, clock.now))

        await asyncio.gather(*(worker(n) for n in range(4)))

        assert [n for n, _ in order] == [0, 1, 2, 3]
        times = [t for _, t in order]
        assert all(b - a >= 6.0 for a, b in zip(times, times[1:]))

    def test_widen_interval_only_raises(self):
        limiter = RateLimiter(10, min_interval=6.0)
        limiter.widen_interval(15.0)
        assert limiter.min_interval == 15.0
        limiter.widen_interval(5.0)
        assert limiter.min_interval == 15.0

    @pytest.mark.asyncio
    async def test_status_and_reset(self):
        clock = FakeClock()
        limiter = RateLimiter(5, min_interval=0.0, clock=clock, sleep=clock.sleep)
        await limiter.acquire()
        await limiter.acquire()
        limiter.widen_interval(20.0)

        used, quota, interval = limiter.get_status()
        assert (used, quota, interval) == (2, 5, 20.0)

        await limiter.reset()
        assert limiter.get_status() == (0, 5, 0.0)
        assert limiter.last_request_at is None
