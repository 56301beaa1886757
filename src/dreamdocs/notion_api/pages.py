"""Page retrieval and page-metadata helpers.

:class:`PageAPI` (sync) and :class:`AsyncPageAPI` (async) wrap
``GET /pages/{id}``.  The ``extract_*`` functions read the title, icon and
cover from a retrieved page object.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport

UNTITLED = "Untitled"


class PageAPI:
    """Synchronous wrapper for the Notion Pages API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object by its ID (with or without hyphens)."""
        return self._transport.request("GET", f"/pages/{page_id}")


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object by its ID (async)."""
        return await self._transport.request("GET", f"/pages/{page_id}")


# ---------------------------------------------------------------------------
# Metadata extraction
# ---------------------------------------------------------------------------

def _first_plain_text(prop: Any) -> str:
    if not isinstance(prop, dict):
        return ""
    segments = prop.get("title") or []
    if not segments:
        return ""
    return segments[0].get("plain_text", "") or ""


def extract_page_title(page: dict[str, Any]) -> str:
    """Return the page title, or ``"Untitled"``.

    Looks at the ``title`` property, then ``Name`` (the default title column
    of database rows), then any property of type ``title``.
    """
    properties = page.get("properties") or {}

    for key in ("title", "Name"):
        text = _first_plain_text(properties.get(key))
        if text:
            return text

    for prop in properties.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            text = _first_plain_text(prop)
            if text:
                return text

    return UNTITLED


def extract_icon(page: dict[str, Any]) -> str | None:
    """Return the page icon as an emoji or external URL, if any."""
    icon = page.get("icon") or {}
    if icon.get("type") == "emoji":
        return icon.get("emoji")
    if icon.get("type") == "external":
        return (icon.get("external") or {}).get("url")
    return None


def extract_cover(page: dict[str, Any]) -> str | None:
    """Return the page cover image URL, if any."""
    cover = page.get("cover") or {}
    cover_type = cover.get("type")
    if cover_type in ("external", "file"):
        return (cover.get(cover_type) or {}).get("url")
    return None
