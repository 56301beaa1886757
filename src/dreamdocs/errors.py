"""Error hierarchy for dreamdocs.

Every public error class inherits from :class:`DreamDocsError`.  Each carries
a machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

The module also provides :func:`describe_fetch_error`, which classifies a
remote-fetch failure for user-facing messaging.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PAGE_ID = "INVALID_PAGE_ID"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class DreamDocsError(Exception):
    """Base exception for all dreamdocs errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(DreamDocsError):
    """Intermediate base whose ``code`` is fixed by the subclass."""

    default_code: str = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self.default_code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Input / configuration errors
# ---------------------------------------------------------------------------

class DreamDocsValidationError(_CodedError):
    """The request was invalid (empty content, bad payload, 400 response).

    Context keys: ``field``, ``value``, ``status_code``.
    """

    default_code = ErrorCode.VALIDATION_ERROR


class DreamDocsInvalidPageIdError(DreamDocsValidationError):
    """No well-formed Notion page identifier was found in the input.

    Context keys: ``value``.
    """

    default_code = ErrorCode.INVALID_PAGE_ID


class DreamDocsNotConfiguredError(_CodedError):
    """Notion retrieval was requested but no integration token is set."""

    default_code = ErrorCode.NOT_CONFIGURED


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class DreamDocsAuthError(_CodedError):
    """Notion API returned 401: the integration token is invalid or expired."""

    default_code = ErrorCode.AUTH_ERROR


class DreamDocsPermissionError(_CodedError):
    """Notion API returned 403: the integration lacks access to the resource.

    Context keys: ``operation``.
    """

    default_code = ErrorCode.PERMISSION_ERROR


class DreamDocsNotFoundError(_CodedError):
    """Notion API returned 404: the page is missing or not shared.

    Context keys: ``path``.
    """

    default_code = ErrorCode.NOT_FOUND


class DreamDocsRetryExhaustedError(_CodedError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    default_code = ErrorCode.RETRY_EXHAUSTED


class DreamDocsNetworkError(_CodedError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    default_code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------

class DreamDocsConversionError(_CodedError):
    """The block tree could not be linearized.

    Raised when a block that reports nested children reaches the renderer
    without having been expanded.  Context keys: ``block_id``, ``block_type``.
    """

    default_code = ErrorCode.CONVERSION_ERROR


# ---------------------------------------------------------------------------
# Fetch error classification
# ---------------------------------------------------------------------------

FETCH_NOT_FOUND = "not_found"
FETCH_UNAUTHORIZED = "unauthorized"
FETCH_ERROR = "error"

_USER_MESSAGES: dict[str, str] = {
    FETCH_NOT_FOUND: "Page not found. Make sure the page is shared with your integration.",
    FETCH_UNAUTHORIZED: "Access denied. Make sure the page is shared with your integration.",
    FETCH_ERROR: "Failed to fetch the Notion page.",
}


def describe_fetch_error(exc: BaseException) -> str:
    """Classify a remote fetch failure for user messaging.

    Returns :data:`FETCH_NOT_FOUND`, :data:`FETCH_UNAUTHORIZED` or
    :data:`FETCH_ERROR`.  Typed errors are matched by class first; anything
    else is matched on its message, the way Notion phrases these failures.
    """
    if isinstance(exc, DreamDocsNotFoundError):
        return FETCH_NOT_FOUND
    if isinstance(exc, (DreamDocsAuthError, DreamDocsPermissionError)):
        return FETCH_UNAUTHORIZED

    message = str(exc)
    if "Could not find" in message:
        return FETCH_NOT_FOUND
    if "unauthorized" in message.lower():
        return FETCH_UNAUTHORIZED
    return FETCH_ERROR


def user_message(kind: str) -> str:
    """Return the user-facing text for a :func:`describe_fetch_error` result."""
    return _USER_MESSAGES.get(kind, _USER_MESSAGES[FETCH_ERROR])
