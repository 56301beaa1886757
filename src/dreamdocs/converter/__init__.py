"""Notion → Markdown → HTML conversion pipeline.

Public API:

- :func:`compose_rich_text`: rich-text spans → inline Markdown.
- :class:`NotionToMarkdownRenderer`: expanded block tree → Markdown.
- :func:`linearize` / :func:`linearize_sync`: load and render a page.
- :class:`MarkdownParser`: Markdown → HTML + table of contents + title.
- :func:`render_toc_html`: table of contents → ``<nav>`` markup.
"""

from dreamdocs.converter.linearize import linearize, linearize_sync
from dreamdocs.converter.markdown import (
    MarkdownParser,
    count_words,
    default_parser,
    parse_markdown,
    render_toc_html,
)
from dreamdocs.converter.notion_to_md import NotionToMarkdownRenderer
from dreamdocs.converter.rich_text import compose_rich_text, parse_rich_text, plain_text

__all__ = [
    "MarkdownParser",
    "NotionToMarkdownRenderer",
    "compose_rich_text",
    "count_words",
    "default_parser",
    "linearize",
    "linearize_sync",
    "parse_markdown",
    "parse_rich_text",
    "plain_text",
    "render_toc_html",
]
