"""Markdown to HTML conversion with table-of-contents extraction.

Wraps a mistune v3 :class:`~mistune.Markdown` instance configured with the
``strikethrough``, ``table``, ``task_lists`` and ``url`` plugins, bare
``www.`` autolinks, raw HTML pass-through, typographic substitutions (see
:mod:`.typography`) and Pygments syntax highlighting for fenced code.

Each call to :meth:`MarkdownParser.parse` parses its input exactly once.
A before-render hook gives every heading an ``id`` from
:func:`~dreamdocs.utils.slugify` and records the heading's inline source.
After rendering, the same token stream is scanned twice: once for the
table of contents (levels 2 and 3) and once for the title (first level 1).

Usage::

    from dreamdocs.converter.markdown import default_parser

    result = default_parser().parse("# Title\\n\\n## Intro\\n")
    result.title   # "Title"
    result.toc     # [TocEntry(id="intro", text="Intro", level=2)]
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterator, MutableMapping
from typing import Any, cast

import mistune
from mistune.core import BlockState, InlineState
from mistune.plugins import import_plugin
from mistune.util import escape_url, safe_entity
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from dreamdocs.models import MarkdownResult, TocEntry
from dreamdocs.observability import get_logger
from dreamdocs.utils import escape_html, slugify

from .typography import smarten_tokens

log = get_logger("dreamdocs.markdown")

_PLUGINS: tuple[str, ...] = ("strikethrough", "table", "task_lists", "url")

TOC_LEVELS: frozenset[int] = frozenset({2, 3})
TITLE_LEVEL = 1

# Token key holding a heading's inline Markdown source.
_SOURCE_KEY = "source"

_HIGHLIGHT_FORMATTER = HtmlFormatter(nowrap=True)

_WORD_STRIP_RE = re.compile(r"[#*`\[\]()]")


# ---------------------------------------------------------------------------
# Syntax highlighting
# ---------------------------------------------------------------------------

def highlight_code(code: str, language: str) -> str | None:
    """Highlight *code* as *language* with Pygments.

    Returns
    -------
    str | None
        HTML spans (no wrapping ``<pre>``), or ``None`` when the language is
        unknown to Pygments or highlighting fails.
    """
    try:
        lexer = get_lexer_by_name(language, stripnl=False)
    except ClassNotFound:
        return None

    try:
        return highlight(code, lexer, _HIGHLIGHT_FORMATTER)
    except Exception:
        log.debug(
            "Highlighting failed, falling back to plain code",
            exc_info=True,
            extra={"extra_fields": {"language": language}},
        )
        return None


def highlight_styles(selector: str = "pre code") -> str:
    """CSS rules for the token classes :func:`highlight_code` emits."""
    return _HIGHLIGHT_FORMATTER.get_style_defs(selector)


# ---------------------------------------------------------------------------
# mistune extensions
# ---------------------------------------------------------------------------

class DocumentRenderer(mistune.HTMLRenderer):
    """HTML renderer that highlights fenced code with a known language."""

    def block_code(self, code: str, info: str | None = None) -> str:
        if info is not None:
            info = safe_entity(info.strip())
        if info:
            language = info.split(None, 1)[0]
            highlighted = highlight_code(code, language)
            if highlighted is not None:
                return (
                    f'<pre><code class="language-{language}">'
                    f"{highlighted}</code></pre>\n"
                )
        return super().block_code(code, info)


# Bare "www." hosts, linked with an http:// scheme.  Scheme URLs are
# handled by mistune's ``url`` plugin.  The pattern opens with a literal
# "w" (the word-boundary check follows it) so mistune's fast text scan
# still applies.
_WWW_LINK_PATTERN = r"""w(?<![\w/.@-]w)ww\.[^\s<]*[^<.,:;"')\]\s]"""


def _parse_www_link(inline: mistune.InlineParser, m: re.Match[str], state: InlineState) -> int:
    text = m.group(0)
    if state.in_link:
        inline.process_text(text, state)
        return m.end()
    state.append_token(
        {
            "type": "link",
            "children": [{"type": "text", "raw": text}],
            "attrs": {"url": escape_url("http://" + text)},
        }
    )
    return m.end()


def www_links(md: mistune.Markdown) -> None:
    """mistune plugin: autolink bare ``www.`` host names."""
    md.inline.register("www_link", _WWW_LINK_PATTERN, _parse_www_link)


class TypographicInlineParser(mistune.InlineParser):
    """Inline parser that applies typographic substitutions to text tokens."""

    def __call__(self, s: str, env: MutableMapping[str, Any]) -> list[dict[str, Any]]:
        return smarten_tokens(super().__call__(s, env))


def iter_tokens(tokens: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    """Yield every token of a nested token list in document order."""
    stack = list(reversed(tokens))
    while stack:
        token = stack.pop()
        yield token
        children = token.get("children")
        if children:
            stack.extend(reversed(children))


def anchor_headings(md: mistune.Markdown, state: BlockState) -> None:
    """Before-render hook: give each heading a slug ``id``.

    The heading's inline source is stored on the token under ``source``
    because rendering replaces it with parsed inline children.
    """
    for token in iter_tokens(state.tokens):
        if token["type"] != "heading":
            continue
        source = token.get("text", "").strip()
        token[_SOURCE_KEY] = source
        token["attrs"]["id"] = slugify(source)


# ---------------------------------------------------------------------------
# Token scans
# ---------------------------------------------------------------------------

def _headings(tokens: list[dict[str, Any]]) -> Iterator[tuple[int, str, str]]:
    for token in iter_tokens(tokens):
        if token["type"] == "heading":
            attrs = token["attrs"]
            yield attrs["level"], attrs.get("id", ""), token.get(_SOURCE_KEY, "")


def extract_toc(tokens: list[dict[str, Any]]) -> list[TocEntry]:
    """Collect level-2 and level-3 headings in document order."""
    return [
        TocEntry(id=anchor, text=source, level=level)
        for level, anchor, source in _headings(tokens)
        if level in TOC_LEVELS
    ]


def extract_title(tokens: list[dict[str, Any]]) -> str | None:
    """Return the inline source of the first level-1 heading, if any."""
    for level, _anchor, source in _headings(tokens):
        if level == TITLE_LEVEL:
            return source
    return None


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class MarkdownParser:
    """Parse Markdown into HTML, a table of contents, and a title.

    Instances hold no per-call state; one parser may serve concurrent
    callers.
    """

    def __init__(self) -> None:
        self._markdown = mistune.Markdown(
            renderer=DocumentRenderer(escape=False),
            inline=TypographicInlineParser(),
            plugins=[*(import_plugin(name) for name in _PLUGINS), www_links],
        )
        self._markdown.before_render_hooks.append(anchor_headings)

    def parse(self, text: str) -> MarkdownResult:
        """Parse *text* once and derive HTML, TOC and title from it.

        Parameters
        ----------
        text:
            Markdown source.  Raw HTML blocks are passed through.

        Returns
        -------
        MarkdownResult
        """
        html, state = self._markdown.parse(text)
        return MarkdownResult(
            html=cast(str, html),
            toc=extract_toc(state.tokens),
            title=extract_title(state.tokens),
        )

    def render(self, text: str) -> str:
        """Return only the HTML for *text*."""
        return self.parse(text).html


@functools.lru_cache(maxsize=1)
def default_parser() -> MarkdownParser:
    """Return the process-wide :class:`MarkdownParser`."""
    return MarkdownParser()


def parse_markdown(text: str) -> MarkdownResult:
    """Parse *text* with :func:`default_parser`."""
    return default_parser().parse(text)


# ---------------------------------------------------------------------------
# Table of contents markup and statistics
# ---------------------------------------------------------------------------

def render_toc_html(entries: list[TocEntry]) -> str:
    """Render TOC entries as a ``<nav class="document-toc">`` block.

    Level-3 entries carry the ``toc-indent`` class.  An empty list renders
    as ``""``.
    """
    if not entries:
        return ""

    items = []
    for entry in entries:
        classes = "toc-item toc-indent" if entry.level == 3 else "toc-item"
        items.append(
            f'    <li class="{classes}"><a href="#{escape_html(entry.id)}">'
            f"{escape_html(entry.text)}</a></li>"
        )

    return (
        '<nav class="document-toc" aria-label="Table of Contents">\n'
        '  <h2 class="toc-title">Contents</h2>\n'
        '  <ul class="toc-list">\n'
        + "\n".join(items)
        + "\n  </ul>\n</nav>\n"
    )


def count_words(text: str) -> int:
    """Count whitespace-separated words after dropping ``#*`[]()``."""
    return len(_WORD_STRIP_RE.sub("", text).split())
