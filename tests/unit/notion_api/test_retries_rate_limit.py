"""Unit tests for retries.py and rate_limit.py.

Targets:
  - retries.py:    should_retry, compute_backoff
  - rate_limit.py: TokenBucket, AsyncTokenBucket
"""
from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from dreamdocs.notion_api.rate_limit import AsyncTokenBucket, TokenBucket
from dreamdocs.notion_api.retries import compute_backoff, should_retry

# ---------------------------------------------------------------------------
# should_retry
# ---------------------------------------------------------------------------


class TestShouldRetry:
    def test_false_on_last_attempt(self):
        # attempt=2, max_attempts=3 → attempt+1 == max_attempts → False
        assert should_retry(500, None, attempt=2, max_attempts=3) is False

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_statuses(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 501])
    def test_non_retryable_statuses(self, status):
        assert should_retry(status, None, attempt=0, max_attempts=3) is False

    def test_timeout_is_retryable(self):
        exc = httpx.ReadTimeout("timed out")
        assert should_retry(None, exc, attempt=0, max_attempts=3) is True

    def test_connect_error_is_retryable(self):
        exc = httpx.ConnectError("connection refused")
        assert should_retry(None, exc, attempt=0, max_attempts=3) is True

    def test_other_exception_is_not_retryable(self):
        assert should_retry(None, RuntimeError("boom"), attempt=0, max_attempts=3) is False

    def test_nothing_to_go_on(self):
        assert should_retry(None, None, attempt=0, max_attempts=3) is False


# ---------------------------------------------------------------------------
# compute_backoff
# ---------------------------------------------------------------------------


class TestComputeBackoff:
    def test_exponential_without_jitter(self):
        delays = [compute_backoff(a, base=1.0, maximum=60.0, jitter=False) for a in range(4)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_maximum(self):
        assert compute_backoff(10, base=1.0, maximum=5.0, jitter=False) == 5.0

    def test_retry_after_wins(self):
        assert compute_backoff(3, base=1.0, maximum=60.0, jitter=False, retry_after=7.0) == 7.0

    def test_jitter_scales_between_half_and_full(self):
        with patch("dreamdocs.notion_api.retries.random.random", return_value=0.0):
            assert compute_backoff(1, base=1.0, jitter=True) == 1.0
        with patch("dreamdocs.notion_api.retries.random.random", return_value=1.0):
            assert compute_backoff(1, base=1.0, jitter=True) == 2.0


# ---------------------------------------------------------------------------
# TokenBucket
# ---------------------------------------------------------------------------


class TestTokenBucket:
    def test_burst_is_free(self):
        bucket = TokenBucket(rate_rps=1.0, burst=3)
        assert [bucket.acquire() for _ in range(3)] == [0.0, 0.0, 0.0]

    def test_waits_when_empty(self):
        bucket = TokenBucket(rate_rps=10.0, burst=1)
        bucket.acquire()
        with patch("dreamdocs.notion_api.rate_limit.time.sleep") as mock_sleep:
            wait = bucket.acquire()
        assert wait == pytest.approx(0.1, abs=0.02)
        mock_sleep.assert_called_once_with(wait)

    @pytest.mark.parametrize(("rate", "burst"), [(0, 1), (-1.0, 1), (1.0, 0)])
    def test_invalid_parameters(self, rate, burst):
        with pytest.raises(ValueError):
            TokenBucket(rate_rps=rate, burst=burst)


class TestAsyncTokenBucket:
    @pytest.mark.asyncio
    async def test_burst_is_free(self):
        bucket = AsyncTokenBucket(rate_rps=1.0, burst=2)
        assert await bucket.acquire() == 0.0
        assert await bucket.acquire() == 0.0

    @pytest.mark.asyncio
    async def test_waits_when_empty(self):
        bucket = AsyncTokenBucket(rate_rps=10.0, burst=1)
        await bucket.acquire()
        with patch(
            "dreamdocs.notion_api.rate_limit.asyncio.sleep", new_callable=AsyncMock,
        ) as mock_sleep:
            wait = await bucket.acquire()
        assert wait == pytest.approx(0.1, abs=0.02)
        mock_sleep.assert_awaited_once_with(wait)
