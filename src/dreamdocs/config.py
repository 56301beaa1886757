"""Configuration for dreamdocs.

:class:`DreamDocsConfig` is a plain dataclass that captures every tuneable
knob of the conversion core.  Instances are passed to both
:class:`DreamDocsClient` and :class:`AsyncDreamDocsClient`.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any

NOTION_TOKEN_ENV = "NOTION_API_KEY"
"""Environment variable read by :meth:`DreamDocsConfig.from_env`."""

MAX_PAGE_SIZE = 100
"""Largest ``page_size`` the Notion children endpoint accepts."""


@dataclass
class DreamDocsConfig:
    """Complete configuration for a dreamdocs client.

    Every parameter has a default.  Without a ``token`` the Markdown side of
    the pipeline still works; only Notion retrieval is unavailable.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    page_size:
        Number of children requested per page when listing block children.
    max_depth:
        Deepest nesting level whose children are fetched.  ``None`` means the
        whole tree is expanded.
    default_theme_id:
        Theme identifier handed to the document assembler when the caller
        does not pick one.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Add random jitter to backoff intervals.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    debug_dump_payload:
        Write the (redacted) Notion API request/response to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Tree retrieval ──────────────────────────────────────────────────
    page_size: int = MAX_PAGE_SIZE

    max_depth: int | None = None

    # ── Documents ───────────────────────────────────────────────────────
    default_theme_id: str = "default"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0 or None, got {self.max_depth}")
        if self.retry_max_attempts < 0:
            raise ValueError(f"retry_max_attempts must be >= 0, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @classmethod
    def from_env(cls, **overrides: Any) -> DreamDocsConfig:
        """Build a config whose token comes from ``NOTION_API_KEY``.

        Explicit keyword arguments win over the environment.
        """
        overrides.setdefault("token", os.environ.get(NOTION_TOKEN_ENV, ""))
        return cls(**overrides)

    @property
    def notion_available(self) -> bool:
        """``True`` when a Notion token is configured."""
        return bool(self.token)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"DreamDocsConfig({', '.join(parts)})"
