"""Token-bucket rate limiters for client-side request pacing.

:class:`TokenBucket` is thread-safe and blocks; :class:`AsyncTokenBucket`
is asyncio-safe and awaits.  Both refill at ``rate_rps`` tokens per second
up to a ``burst`` ceiling and report how long the caller had to wait.
"""

from __future__ import annotations

import asyncio
import threading
import time


class _BucketState:
    """Refill arithmetic shared by the sync and async buckets."""

    __slots__ = ("burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        self.last_refill: float = time.monotonic()

    def take(self, tokens: int) -> float:
        """Consume *tokens* and return the wait required for them (seconds)."""
        now = time.monotonic()
        self.tokens = min(self.burst, self.tokens + (now - self.last_refill) * self.rate)
        self.last_refill = now

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        wait = (tokens - self.tokens) / self.rate
        self.tokens = 0.0
        return wait


class TokenBucket:
    """Thread-safe token bucket for synchronous rate limiting."""

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        self._state = _BucketState(rate_rps, burst)
        self._lock = threading.Lock()

    def acquire(self, tokens: int = 1) -> float:
        """Acquire *tokens*, sleeping if necessary; return the time waited."""
        with self._lock:
            wait = self._state.take(tokens)
        if wait > 0:
            # Sleep outside the lock so other threads can refill-check.
            time.sleep(wait)
        return wait


class AsyncTokenBucket:
    """Asyncio-safe token bucket for asynchronous rate limiting."""

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        self._state = _BucketState(rate_rps, burst)
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: int = 1) -> float:
        """Acquire *tokens*, awaiting if necessary; return the time waited."""
        async with self._lock:
            wait = self._state.take(tokens)
        if wait > 0:
            await asyncio.sleep(wait)
        return wait
