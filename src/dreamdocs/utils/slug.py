"""Heading slug generation.

:func:`slugify` is the single source of heading anchor ids.  The Markdown
renderer uses it to put ``id`` attributes on headings and the table of
contents uses it to build ``#`` link targets, so both always agree.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^\w-]")


def slugify(text: str) -> str:
    """Convert heading text to a URL-safe anchor id.

    Lowercases and trims *text*, collapses each whitespace run to ``-`` and
    strips every character that is neither a word character nor ``-``.
    The transform is idempotent.

    >>> slugify("Getting Started!")
    'getting-started'
    """
    text = text.lower().strip()
    text = _WHITESPACE_RE.sub("-", text)
    return _NON_SLUG_RE.sub("", text)
