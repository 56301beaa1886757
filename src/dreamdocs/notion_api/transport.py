"""Sync and async HTTP transports for the Notion API.

Each transport runs the same request lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the HTTP request with auth and version headers.
3. On ``2xx`` -- return the parsed JSON response.
4. On ``429`` -- honour ``Retry-After``, sleep, and retry.
5. On ``5xx`` / network error -- exponential backoff and retry.
6. On non-retryable ``4xx`` -- raise the matching typed error immediately.
7. On max attempts exceeded -- raise :class:`DreamDocsRetryExhaustedError`.

The response handling is shared; the two classes differ only in how they
send and sleep.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from typing import Any

import httpx

from dreamdocs.config import DreamDocsConfig
from dreamdocs.errors import (
    DreamDocsAuthError,
    DreamDocsNetworkError,
    DreamDocsNotFoundError,
    DreamDocsPermissionError,
    DreamDocsRetryExhaustedError,
    DreamDocsValidationError,
)
from dreamdocs.observability import MetricsHook, get_logger, resolve_metrics

from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("dreamdocs.transport")

_BURST = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a 4xx response that must not be retried.

    The Notion ``message`` is kept in the error text because callers match
    on phrases such as ``"Could not find"``.
    """
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")
    context: dict[str, Any] = {"status_code": status, "notion_code": notion_code}

    if status == 401:
        raise DreamDocsAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context=context,
        )
    if status == 403:
        raise DreamDocsPermissionError(
            message=f"Permission denied on {method} {path}: {notion_message}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise DreamDocsNotFoundError(
            message=f"Resource not found on {method} {path}: {notion_message}",
            context={**context, "path": path},
        )
    raise DreamDocsValidationError(
        message=f"Client error {status} on {method} {path}: {notion_message}",
        context={**context, "body": body},
    )


def _dump_payload(
    method: str,
    url: str,
    params: dict | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from dreamdocs.utils.redact import redact

    dump: dict[str, Any] = {"method": method, "url": url}
    if params is not None:
        dump["params"] = params
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str),
        file=sys.stderr,
    )


def _client_kwargs(config: DreamDocsConfig) -> dict[str, Any]:
    """Keyword arguments shared by ``httpx.Client`` and ``httpx.AsyncClient``."""
    return {
        "base_url": config.base_url,
        "headers": {
            "Authorization": f"Bearer {config.token}",
            "Notion-Version": config.notion_version,
            "Content-Type": "application/json",
        },
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Shared request lifecycle
# ---------------------------------------------------------------------------

class _RequestLifecycle:
    """Response and error handling common to both transports."""

    def __init__(self, config: DreamDocsConfig) -> None:
        self._config = config
        self._metrics: MetricsHook = resolve_metrics(config.metrics)

    def _record_wait(self, wait: float, method: str, path: str) -> None:
        if wait > 0:
            self._metrics.timing(
                "dreamdocs.rate_limit_wait_ms",
                wait * 1000,
                tags={"method": method, "path": path},
            )

    def _on_network_error(
        self, method: str, path: str, exc: Exception, attempt: int,
    ) -> float:
        """Return the backoff delay for a retryable network failure.

        Raises :class:`DreamDocsNetworkError` when no attempts remain.
        """
        self._metrics.increment(
            "dreamdocs.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(None, exc, attempt, self._config.retry_max_attempts):
            raise DreamDocsNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "dreamdocs.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
        )

    def _on_response(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        attempt: int,
        elapsed_ms: float,
        params: dict | None,
    ) -> tuple[dict | None, float | None]:
        """Process one response.

        Returns ``(body, None)`` on success, ``(None, delay)`` when the
        request should be retried after *delay* seconds, and ``(None, None)``
        when a retryable failure has used up every attempt.
        """
        status = response.status_code
        tags = {"method": method, "path": path, "status": str(status)}
        self._metrics.increment("dreamdocs.requests_total", tags=tags)
        self._metrics.timing("dreamdocs.request_duration_ms", elapsed_ms, tags=tags)

        if self._config.debug_dump_payload:
            try:
                resp_body: Any = response.json()
            except ValueError:
                resp_body = response.text[:1000]
            _dump_payload(
                method, str(response.url), params, status, resp_body,
                token=self._config.token,
            )

        if 200 <= status < 300:
            if status == 204 or not response.content:
                return {}, None
            return response.json(), None

        if status not in RETRYABLE_STATUSES:
            _raise_for_status(response, method, path)

        if not should_retry(status, None, attempt, self._config.retry_max_attempts):
            return None, None

        retry_after: float | None = None
        reason = "server_error"
        if status == 429:
            retry_after = _parse_retry_after(response)
            reason = "rate_limited"
            self._metrics.increment(
                "dreamdocs.rate_limited_total",
                tags={"method": method, "path": path},
            )
            log.warning(
                "Rate limited by Notion API",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "retry_after": retry_after,
                        "attempt": attempt + 1,
                    }
                },
            )

        self._metrics.increment(
            "dreamdocs.retries_total",
            tags={"method": method, "path": path, "reason": reason},
        )
        delay = compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )
        return None, delay

    def _exhausted(
        self,
        method: str,
        path: str,
        last_status: int | None,
        last_exception: Exception | None,
    ) -> DreamDocsRetryExhaustedError:
        attempts = self._config.retry_max_attempts
        ctx: dict[str, Any] = {"attempts": attempts, "last_status_code": last_status}
        detail = (
            f"last error: {last_exception}"
            if last_exception is not None
            else f"last status: {last_status}"
        )
        return DreamDocsRetryExhaustedError(
            message=f"All {attempts} attempts exhausted for {method} {path} ({detail})",
            context=ctx,
            cause=last_exception,
        )


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class NotionTransport(_RequestLifecycle):
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`DreamDocsConfig` controlling all transport behaviour.
    """

    def __init__(self, config: DreamDocsConfig) -> None:
        super().__init__(config)
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=_BURST)
        self._client = httpx.Client(**_client_kwargs(config))

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method.
        path:
            API path relative to ``base_url`` (e.g. ``/pages/{id}``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``params=``,
            ``json=``, ``headers=``).

        Returns
        -------
        dict
            Parsed JSON response body.

        Raises
        ------
        DreamDocsAuthError
            On 401 responses.
        DreamDocsPermissionError
            On 403 responses.
        DreamDocsNotFoundError
            On 404 responses.
        DreamDocsValidationError
            On 400 and other non-retryable 4xx responses.
        DreamDocsRetryExhaustedError
            When all retry attempts have been exhausted.
        DreamDocsNetworkError
            On transport-level failures after exhausting retries.
        """
        last_exception: Exception | None = None
        last_status: int | None = None

        for attempt in range(self._config.retry_max_attempts):
            self._record_wait(self._bucket.acquire(), method, path)

            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exception, last_status = exc, None
                time.sleep(self._on_network_error(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_exception, last_status = None, response.status_code
            body, delay = self._on_response(
                method, path, response, attempt, elapsed_ms, kwargs.get("params"),
            )
            if body is not None:
                return body
            if delay is None:
                break
            time.sleep(delay)

        raise self._exhausted(method, path, last_status, last_exception)

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport(_RequestLifecycle):
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Mirrors :class:`NotionTransport` on top of ``httpx.AsyncClient``.
    """

    def __init__(self, config: DreamDocsConfig) -> None:
        super().__init__(config)
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=_BURST)
        self._client = httpx.AsyncClient(**_client_kwargs(config))

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API (async).

        See :meth:`NotionTransport.request`.
        """
        last_exception: Exception | None = None
        last_status: int | None = None

        for attempt in range(self._config.retry_max_attempts):
            self._record_wait(await self._bucket.acquire(), method, path)

            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exception, last_status = exc, None
                await asyncio.sleep(self._on_network_error(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_exception, last_status = None, response.status_code
            body, delay = self._on_response(
                method, path, response, attempt, elapsed_ms, kwargs.get("params"),
            )
            if body is not None:
                return body
            if delay is None:
                break
            await asyncio.sleep(delay)

        raise self._exhausted(method, path, last_status, last_exception)

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
