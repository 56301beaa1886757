"""dreamdocs: Notion pages and Markdown to styled, print-ready HTML.

Public re-exports
-----------------

* **Clients:** :class:`DreamDocsClient`, :class:`AsyncDreamDocsClient`
* **Configuration:** :class:`DreamDocsConfig`
* **Errors:** Every :class:`DreamDocsError` subclass and :class:`ErrorCode`
* **Models:** Block tree, Markdown and conversion result types
* **Pipeline:** :func:`parse_markdown`, :func:`render_toc_html`,
  :func:`build_document`, :func:`slugify`

Usage::

    from dreamdocs import DreamDocsClient

    client = DreamDocsClient()
    result = client.convert_markdown("# Report\\n\\n## Summary\\n\\nAll good.")
    result.title   # "Report"
"""

from __future__ import annotations

from dreamdocs.async_client import AsyncDreamDocsClient

# ── Clients ────────────────────────────────────────────────────────────
from dreamdocs.client import DreamDocsClient

# ── Configuration ───────────────────────────────────────────────────────
from dreamdocs.config import NOTION_TOKEN_ENV, DreamDocsConfig

# ── Pipeline ────────────────────────────────────────────────────────────
from dreamdocs.converter import (
    MarkdownParser,
    NotionToMarkdownRenderer,
    compose_rich_text,
    count_words,
    linearize,
    linearize_sync,
    parse_markdown,
    render_toc_html,
)
from dreamdocs.document import build_document

# ── Errors ──────────────────────────────────────────────────────────────
from dreamdocs.errors import (
    DreamDocsAuthError,
    DreamDocsConversionError,
    DreamDocsError,
    DreamDocsInvalidPageIdError,
    DreamDocsNetworkError,
    DreamDocsNotConfiguredError,
    DreamDocsNotFoundError,
    DreamDocsPermissionError,
    DreamDocsRetryExhaustedError,
    DreamDocsValidationError,
    ErrorCode,
    describe_fetch_error,
    user_message,
)

# ── Models ──────────────────────────────────────────────────────────────
from dreamdocs.models import (
    Block,
    BlockKind,
    ChildrenPage,
    ConversionMetadata,
    ConversionOptions,
    ConversionResult,
    MarkdownResult,
    NotionPage,
    RichTextSpan,
    TocEntry,
)
from dreamdocs.notion_api.page_id import extract_page_id
from dreamdocs.utils import slugify

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "DreamDocsClient",
    "AsyncDreamDocsClient",
    # Configuration
    "DreamDocsConfig",
    "NOTION_TOKEN_ENV",
    # Error base + code enum
    "DreamDocsError",
    "ErrorCode",
    # Request errors
    "DreamDocsValidationError",
    "DreamDocsInvalidPageIdError",
    "DreamDocsNotConfiguredError",
    # API / transport errors
    "DreamDocsAuthError",
    "DreamDocsPermissionError",
    "DreamDocsNotFoundError",
    "DreamDocsRetryExhaustedError",
    "DreamDocsNetworkError",
    # Conversion errors
    "DreamDocsConversionError",
    "describe_fetch_error",
    "user_message",
    # Models: block tree
    "Block",
    "BlockKind",
    "ChildrenPage",
    "RichTextSpan",
    # Models: results
    "MarkdownResult",
    "TocEntry",
    "NotionPage",
    "ConversionOptions",
    "ConversionMetadata",
    "ConversionResult",
    # Pipeline
    "MarkdownParser",
    "NotionToMarkdownRenderer",
    "build_document",
    "compose_rich_text",
    "count_words",
    "extract_page_id",
    "linearize",
    "linearize_sync",
    "parse_markdown",
    "render_toc_html",
    "slugify",
]
