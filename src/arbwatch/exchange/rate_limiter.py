"""
Request budget for public order book endpoints.

Each adapter polls one exchange several times per tick (one request per
currency pair); the limiter keeps that inside the exchange's public
rate limit even when ticks run back to back after a slow one.
"""

import asyncio
from collections.abc import Callable

from arbwatch.utils.time import monotonic


class TokenBucket:
    """
    Token bucket refilled continuously at a fixed rate.

    Starts full, so a tick's burst of requests goes out immediately.
    """

    def __init__(
        self,
        capacity: int,
        refill_rate: float,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        """
        Initialize bucket.

        Args:
            capacity: Maximum stored tokens (burst size).
            refill_rate: Tokens added per second.
            clock: Monotonic clock in seconds.
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_rate <= 0:
            raise ValueError("refill_rate must be positive")

        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self._tokens = float(capacity)
        self._updated_at = clock()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        current = self._clock()
        self._tokens = min(
            float(self.capacity),
            self._tokens + (current - self._updated_at) * self.refill_rate,
        )
        self._updated_at = current

    def wait_time(self, tokens: int = 1) -> float:
        """Seconds until `tokens` are available (0 if available now)."""
        self._refill()
        missing = tokens - self._tokens
        return missing / self.refill_rate if missing > 0 else 0.0

    async def take(self, tokens: int = 1) -> None:
        """Take tokens, sleeping until they are available."""
        async with self._lock:
            while (delay := self.wait_time(tokens)) > 0:
                await asyncio.sleep(delay)
            self._tokens -= tokens


class RateLimiter:
    """
    Per-exchange request limiter.

    Burst capacity is twice the steady rate, with a minimum of one request.
    """

    def __init__(
        self,
        requests_per_second: float,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")

        self._bucket = TokenBucket(
            capacity=max(1, int(requests_per_second * 2)),
            refill_rate=requests_per_second,
            clock=clock,
        )

    async def acquire(self) -> None:
        """Wait for permission to send one request."""
        await self._bucket.take()
