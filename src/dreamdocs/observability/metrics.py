"""Metrics hook protocol and no-op default implementation.

dreamdocs emits counters and timings at key points of a conversion.  By
default a :class:`NoopMetricsHook` is used.  Callers can pass any object
satisfying :class:`MetricsHook` as ``DreamDocsConfig.metrics`` to route the
data points to their own backend.

Emitted metric names:

* ``dreamdocs.requests_total``            -- counter
* ``dreamdocs.retries_total``             -- counter
* ``dreamdocs.rate_limited_total``        -- counter
* ``dreamdocs.request_duration_ms``       -- timing
* ``dreamdocs.rate_limit_wait_ms``        -- timing
* ``dreamdocs.blocks_fetched_total``      -- counter
* ``dreamdocs.page_export_duration_ms``   -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: object | None) -> MetricsHook:
    """Return *hook*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else NoopMetricsHook()  # type: ignore[return-value]
