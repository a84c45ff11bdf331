"""
Tests unitaires pour SlidingWindowRateLimiter.
"""

import asyncio

import pytest

from src.adapters.notifications.rate_limiter import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


async def _ok() -> str:
    return "sent"


class TestSlidingWindowRateLimiter:
    """Tests du quota par fenetre glissante."""

    @pytest.mark.asyncio
    async def test_quota_reached(self) -> None:
        limiter = SlidingWindowRateLimiter(max_events=2, window_seconds=60, clock=FakeClock())

        assert await limiter.run(_ok) == "sent"
        assert await limiter.run(_ok) == "sent"
        assert await limiter.run(_ok) is None
        assert limiter.used == 2

    @pytest.mark.asyncio
    async def test_window_slides(self) -> None:
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_events=1, window_seconds=60, clock=clock)

        await limiter.run(_ok)
        clock.now = 59.0
        assert await limiter.run(_ok) is None
        clock.now = 60.0
        assert await limiter.run(_ok) == "sent"

    @pytest.mark.asyncio
    async def test_failed_action_does_not_consume_quota(self) -> None:
        limiter = SlidingWindowRateLimiter(max_events=1, window_seconds=60, clock=FakeClock())

        async def failing() -> None:
            raise OSError("smtp down")

        with pytest.raises(OSError):
            await limiter.run(failing)

        assert limiter.used == 0
        assert await limiter.run(_ok) == "sent"

    @pytest.mark.asyncio
    async def test_zero_quota_refuses_everything(self) -> None:
        limiter = SlidingWindowRateLimiter(max_events=0)
        assert await limiter.run(_ok) is None

    @pytest.mark.asyncio
    async def test_concurrent_senders_respect_quota(self) -> None:
        limiter = SlidingWindowRateLimiter(max_events=3, window_seconds=60, clock=FakeClock())

        async def slow() -> str:
            await asyncio.sleep(0)
            return "sent"

        results = await asyncio.gather(*(limiter.run(slow) for _ in range(10)))

        assert results.count("sent") == 3
        assert results.count(None) == 7
