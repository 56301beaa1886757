"""Notion page identifier extraction."""

from __future__ import annotations

import re

_BARE_ID_RE = re.compile(r"^[a-f0-9]{32}$", re.IGNORECASE)
# A 32-hex id that ends the path or is followed by the query string.
_URL_ID_RE = re.compile(r"([a-f0-9]{32})(?:\?|$)", re.IGNORECASE)
# The canonical dashed form (8-4-4-4-12) in the same position.
_DASHED_ID_RE = re.compile(r"([a-f0-9-]{36})(?:\?|$)", re.IGNORECASE)


def extract_page_id(url_or_id: str) -> str | None:
    """Extract a 32-character page id from a raw id or a Notion URL.

    Accepted inputs:

    * a bare id, with or without dashes (``abc...`` or ``8-4-4-4-12``);
    * a URL whose last path segment ends with the id, e.g.
      ``https://www.notion.so/team/Page-Title-<id>?pvs=4``;
    * a URL ending with the dashed id.

    Returns ``None`` when no identifier is found; never raises.
    """
    if not url_or_id:
        return None

    clean = url_or_id.strip().replace("-", "")
    if _BARE_ID_RE.match(clean):
        return clean

    match = _URL_ID_RE.search(url_or_id)
    if match:
        return match.group(1)

    match = _DASHED_ID_RE.search(url_or_id)
    if match:
        candidate = match.group(1).replace("-", "")
        if len(candidate) == 32:
            return candidate

    return None
