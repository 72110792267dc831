"""Token bucket that paces text generation calls across concurrent runs."""

from __future__ import annotations

import asyncio
import time


class TokenBucketRateLimiter:
    """Reservation-style token bucket.

    A caller takes its token immediately, driving the balance negative when
    the bucket is empty, and then sleeps off its own debt outside the lock.
    Waiters are therefore served in arrival order without holding the lock
    while they sleep.
    """

    def __init__(self, rate: float, capacity: int) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        self._rate = rate  # tokens per second
        self._capacity = capacity
        self._balance = float(capacity)
        self._updated_at = time.monotonic()
        self._lock = asyncio.Lock()

    @classmethod
    def per_minute(cls, calls_per_minute: int) -> TokenBucketRateLimiter:
        """Bucket refilling at ``calls_per_minute`` with a burst of a tenth of that."""
        return cls(rate=calls_per_minute / 60.0, capacity=max(1, calls_per_minute // 10))

    async def _reserve(self) -> float:
        """Take one token; return how long the caller must wait before using it."""
        async with self._lock:
            now = time.monotonic()
            self._balance = min(self._capacity, self._balance + (now - self._updated_at) * self._rate)
            self._updated_at = now
            self._balance -= 1.0
            return max(0.0, -self._balance / self._rate)

    async def acquire(self) -> None:
        wait = await self._reserve()
        if wait > 0:
            await asyncio.sleep(wait)
