"""Typographic substitutions for parsed inline Markdown tokens.

Applied to the ``text`` tokens of an inline token list after mistune has
parsed it:

* ``(c)`` ``(r)`` ``(tm)`` ``+-`` become the matching symbols.
* ``...`` becomes an ellipsis; ``---`` an em dash; ``--`` an en dash.
* Straight single and double quotes become curly quotes.

Code spans, raw inline HTML and autolinked URLs are never modified, but
they still count as context when deciding whether a neighbouring quote
opens or closes.
"""

from __future__ import annotations

import re
from typing import Any

from mistune.util import escape_url

_REPLACEMENTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\(c\)", re.IGNORECASE), "\u00a9"),
    (re.compile(r"\(r\)", re.IGNORECASE), "\u00ae"),
    (re.compile(r"\(tm\)", re.IGNORECASE), "\u2122"),
    (re.compile(r"\+-"), "\u00b1"),
    (re.compile(r"\.\.\."), "\u2026"),
    (re.compile(r"(^|[^-])---(?=[^-]|$)", re.MULTILINE), "\\1\u2014"),
    (re.compile(r"(^|\s)--(?=\s|$)", re.MULTILINE), "\\1\u2013"),
    (re.compile(r"(^|[^-\s])--(?=[^-\s]|$)", re.MULTILINE), "\\1\u2013"),
)

# (opening, closing)
_QUOTES: dict[str, tuple[str, str]] = {
    '"': ("\u201c", "\u201d"),
    "'": ("\u2018", "\u2019"),
}

# Characters after which a quote opens rather than closes.
_OPENERS = frozenset("([{<-\u2013\u2014\u201c\u2018")

# Inline token types that produce no visible text of their own.
_BREAKS = frozenset({"softbreak", "linebreak"})


def replace_symbols(text: str) -> str:
    """Apply the symbol, ellipsis and dash substitutions to *text*."""
    for pattern, replacement in _REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text


def _is_opening(before: str | None, after: str | None) -> bool:
    if after is None or after.isspace():
        return False
    return before is None or before.isspace() or before in _OPENERS


def smarten_quotes(text: str, before: str | None = None, after: str | None = None) -> str:
    """Replace straight quotes in *text* with curly ones.

    Parameters
    ----------
    text:
        The text to convert.
    before:
        Character immediately preceding *text* in the rendered line, or
        ``None`` at the start of the line.
    after:
        Character immediately following *text*, or ``None`` at the end.
    """
    out: list[str] = []
    for index, char in enumerate(text):
        pair = _QUOTES.get(char)
        if pair is not None:
            prev = out[-1] if out else before
            nxt = text[index + 1] if index + 1 < len(text) else after
            char = pair[0] if _is_opening(prev, nxt) else pair[1]
        out.append(char)
    return "".join(out)


def _is_autolink(token: dict[str, Any]) -> bool:
    """``True`` for links whose visible text is their own URL."""
    children = token.get("children") or []
    if len(children) != 1 or children[0].get("type") != "text":
        return False
    raw = children[0].get("raw", "")
    url = (token.get("attrs") or {}).get("url")
    return url in (escape_url(raw), escape_url("mailto:" + raw), escape_url("http://" + raw))


def _collect(tokens: list[dict[str, Any]], segments: list[list[Any]]) -> None:
    """Flatten *tokens* into ``[token_or_None, text]`` segments, in order.

    Segments with a token are editable; ``None`` marks read-only context.
    """
    for token in tokens:
        kind = token.get("type")
        if kind == "text":
            segments.append([token, token.get("raw", "")])
        elif kind == "link" and _is_autolink(token):
            segments.append([None, token["children"][0].get("raw", "")])
        elif "children" in token:
            _collect(token["children"], segments)
        elif "raw" in token:
            segments.append([None, token["raw"]])
        elif kind in _BREAKS:
            segments.append([None, " "])


def smarten_tokens(tokens: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Apply all typographic substitutions to *tokens* in place.

    Returns the same list for convenience.
    """
    segments: list[list[Any]] = []
    _collect(tokens, segments)

    for segment in segments:
        if segment[0] is not None:
            segment[1] = replace_symbols(segment[1])

    before: str | None = None
    for index, (token, text) in enumerate(segments):
        if token is not None and text:
            after = next((s[1][0] for s in segments[index + 1:] if s[1]), None)
            text = smarten_quotes(text, before, after)
            token["raw"] = text
        if text:
            before = text[-1]
    return tokens
