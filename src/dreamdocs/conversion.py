"""Markdown-to-document conversion shared by both clients.

Everything here is CPU-bound and synchronous; :class:`AsyncDreamDocsClient`
calls it directly from its coroutines.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from dreamdocs.converter.markdown import MarkdownParser, count_words, render_toc_html
from dreamdocs.document import build_document
from dreamdocs.errors import DreamDocsValidationError
from dreamdocs.models import ConversionMetadata, ConversionOptions, ConversionResult

DEFAULT_TITLE = "Document"

StylesLoader = Callable[[str], str | None]


def resolve_title(
    options: ConversionOptions,
    extracted: str | None,
    fallback: str | None = None,
) -> str:
    """Pick the document title.

    Order: explicit ``options.title``, the first level-1 heading, *fallback*
    (the Notion page title), then ``"Document"``.
    """
    return options.title or extracted or fallback or DEFAULT_TITLE


def convert_markdown(
    content: str,
    options: ConversionOptions | None,
    *,
    parser: MarkdownParser,
    default_theme_id: str,
    styles_loader: StylesLoader | None = None,
    fallback_title: str | None = None,
) -> ConversionResult:
    """Parse *content* and assemble the final HTML document.

    Parameters
    ----------
    content:
        Markdown source.  Must be non-empty.
    options:
        Conversion options; ``None`` uses the defaults.
    parser:
        The :class:`MarkdownParser` to use.
    default_theme_id:
        Theme used when ``options.theme_id`` is not set.
    styles_loader:
        Optional callable returning the CSS for a theme id.  ``None`` or a
        ``None`` result means no theme styles.
    fallback_title:
        Title used when neither the options nor the content provide one.

    Raises
    ------
    DreamDocsValidationError
        If *content* is empty.
    """
    if not content:
        raise DreamDocsValidationError(
            message="Content is required",
            context={"field": "content"},
        )

    options = options or ConversionOptions()
    parsed = parser.parse(content)
    title = resolve_title(options, parsed.title, fallback_title)
    theme_id = options.theme_id or default_theme_id
    toc_html = render_toc_html(parsed.toc) if options.generate_toc else ""
    styles = (styles_loader(theme_id) if styles_loader is not None else None) or ""

    html = build_document(
        title=title,
        content=parsed.html,
        toc=toc_html,
        theme_id=theme_id,
        show_toc=options.generate_toc,
        styles=styles,
    )
    metadata = ConversionMetadata(
        title=title,
        generated_at=datetime.now(timezone.utc).isoformat(),
        theme_id=theme_id,
        toc_entries=len(parsed.toc),
        word_count=count_words(content),
    )
    return ConversionResult(html=html, title=title, toc=parsed.toc, metadata=metadata)
