"""Scrub credentials from request/response dumps before they reach stderr."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "<redacted>"

# Header and field names whose values are credentials.
_SENSITIVE_KEY_RE = re.compile(
    r"token|secret|password|credential|authorization|cookie|api[_-]?key",
    re.IGNORECASE,
)
_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _token_placeholder(token: str) -> str:
    placeholder = f"<redacted:...{token[-4:]}>" if len(token) >= 4 else REDACTED
    return REDACTED if token in placeholder else placeholder


def _scrub_text(text: str, token: str | None) -> str:
    if token and token in text:
        text = text.replace(token, _token_placeholder(token))
    return _BEARER_RE.sub(lambda m: m.group(1) + REDACTED, text)


def _scrub(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        cleaned: dict[Any, Any] = {}
        for key, item in value.items():
            if isinstance(key, str) and _SENSITIVE_KEY_RE.search(key):
                cleaned[key] = _scrub_secret(item, token)
            else:
                cleaned[key] = _scrub(item, token)
        return cleaned
    if isinstance(value, (list, tuple)):
        return [_scrub(item, token) for item in value]
    if isinstance(value, str):
        return _scrub_text(value, token)
    return value


def _scrub_secret(value: Any, token: str | None) -> Any:
    # Keep the auth scheme visible ("Bearer <redacted>"); hide everything else.
    if isinstance(value, str):
        scrubbed = _scrub_text(value, token)
        return scrubbed if scrubbed != value else REDACTED
    return REDACTED


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a scrubbed copy of *payload*; the input is never mutated.

    Values under credential-like keys are masked, ``Bearer`` credentials are
    masked wherever they appear, and every occurrence of *token* is replaced
    by a placeholder that keeps only its last four characters.

    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _scrub(payload, token)
