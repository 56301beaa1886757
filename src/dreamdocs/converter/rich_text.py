"""Rich-text composition: Notion rich_text runs to Markdown strings.

Each span is formatted independently and the results are concatenated in
their original order.  Annotation nesting, innermost first::

    code -> strikethrough -> italic -> bold -> link

so a bold, italic, linked span becomes ``[***text***](url)``.  Span text is
emitted as-is; no Markdown escaping is applied.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from dreamdocs.models import RichTextSpan


def parse_rich_text(segments: Iterable[dict[str, Any]] | None) -> list[RichTextSpan]:
    """Convert a Notion ``rich_text`` array into spans.  ``None`` yields ``[]``."""
    if not segments:
        return []
    return [RichTextSpan.from_notion(seg) for seg in segments if isinstance(seg, dict)]


def format_span(span: RichTextSpan) -> str:
    """Render one span with its annotations and optional link."""
    text = span.text
    if span.code:
        text = f"`{text}`"
    if span.strikethrough:
        text = f"~~{text}~~"
    if span.italic:
        text = f"*{text}*"
    if span.bold:
        text = f"**{text}**"
    if span.link:
        text = f"[{text}]({span.link})"
    return text


def compose_rich_text(spans: Sequence[RichTextSpan] | None) -> str:
    """Render a run of spans to Markdown.

    Parameters
    ----------
    spans:
        Ordered spans.  Adjacent spans are never merged, even when their
        annotations match.

    Returns
    -------
    str
        The concatenated Markdown; ``""`` for an empty or missing run.
    """
    if not spans:
        return ""
    return "".join(format_span(span) for span in spans)


def plain_text(spans: Sequence[RichTextSpan] | None) -> str:
    """Concatenate span text without any formatting."""
    if not spans:
        return ""
    return "".join(span.text for span in spans)


def render_rich_text(segments: Iterable[dict[str, Any]] | None) -> str:
    """Shortcut: :func:`compose_rich_text` over a raw Notion ``rich_text`` array."""
    return compose_rich_text(parse_rich_text(segments))
