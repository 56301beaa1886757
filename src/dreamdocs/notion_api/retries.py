"""When the Notion transport repeats a request, and how long it waits first."""

from __future__ import annotations

import random

import httpx

# 429 is Notion's rate-limit answer; the 5xx set covers its transient outages.
RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def is_transient(status_code: int | None, exception: Exception | None) -> bool:
    """Whether a failed attempt is worth repeating at all."""
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether attempt number *attempt* (0-indexed) gets a successor.

    Parameters
    ----------
    status_code:
        HTTP status of the response, or ``None`` when no response arrived.
    exception:
        The exception raised by the attempt, or ``None``.
    attempt:
        The attempt that just failed.
    max_attempts:
        Budget of attempts for the request, the first one included.
    """
    attempts_left = max_attempts - (attempt + 1)
    return attempts_left > 0 and is_transient(status_code, exception)


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before repeating a failed attempt.

    ``Retry-After`` from the server is honoured as given; otherwise the wait
    doubles per attempt from *base* and is capped at *maximum*.  Jitter
    scales the result into the upper half of that range.
    """
    ceiling = retry_after if retry_after is not None else min(base * 2 ** attempt, maximum)
    if not jitter:
        return ceiling
    return ceiling * (0.5 + 0.5 * random.random())
