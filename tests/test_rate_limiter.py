"""Tests for the sliding window rate limiter."""

import asyncio

import pytest

from src.core.rate_limiter import RateLimiter


@pytest.fixture
def clock(monkeypatch):
    now = {"value": 1000.0}
    monkeypatch.setattr("src.core.rate_limiter.time.time", lambda: now["value"])
    return now


class TestRateLimiter:
    def test_blocks_after_max_requests(self, clock):
        limiter = RateLimiter(max_requests=2, window_seconds=60)

        results = [asyncio.run(limiter.is_allowed("10.0.0.1")) for _ in range(3)]

        assert results == [True, True, False]

    def test_clients_are_independent(self, clock):
        limiter = RateLimiter(max_requests=1, window_seconds=60)

        assert asyncio.run(limiter.is_allowed("10.0.0.1"))
        assert asyncio.run(limiter.is_allowed("10.0.0.2"))
        assert not asyncio.run(limiter.is_allowed("10.0.0.1"))

    def test_window_expiry_allows_again(self, clock):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        asyncio.run(limiter.is_allowed("10.0.0.1"))

        clock["value"] += 61

        assert asyncio.run(limiter.is_allowed("10.0.0.1"))

    def test_idle_clients_are_dropped_without_cleanup(self, clock):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        for index in range(5):
            asyncio.run(limiter.is_allowed(f"10.0.0.{index}"))
        assert limiter.tracked_clients == 5

        clock["value"] += 61
        asyncio.run(limiter.is_allowed("10.0.1.1"))

        assert limiter.tracked_clients == 1

    def test_cleanup_reports_removed_clients(self, clock):
        limiter = RateLimiter(max_requests=3, window_seconds=60)
        asyncio.run(limiter.is_allowed("10.0.0.1"))
        clock["value"] += 30
        asyncio.run(limiter.is_allowed("10.0.0.2"))

        clock["value"] += 40

        assert asyncio.run(limiter.cleanup()) == 1
        assert limiter.tracked_clients == 1
