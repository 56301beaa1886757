"""HTML escaping for generated markup."""

from __future__ import annotations

_ESCAPE_TABLE = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` so *text* is safe in element and attribute content."""
    return text.translate(_ESCAPE_TABLE)
