"""Block-children API wrappers for the Notion API.

:class:`BlockAPI` (sync) and :class:`AsyncBlockAPI` (async) expose the
``GET /blocks/{id}/children`` endpoint one page at a time.  Following the
cursors is the job of :mod:`dreamdocs.notion_api.tree`, which receives
:meth:`BlockAPI.list_children` as its children provider.
"""

from __future__ import annotations

from typing import Any

from dreamdocs.config import MAX_PAGE_SIZE
from dreamdocs.models import ChildrenPage

from .transport import AsyncNotionTransport, NotionTransport


def _children_params(cursor: str | None, page_size: int) -> dict[str, Any]:
    params: dict[str, Any] = {"page_size": page_size}
    if cursor is not None:
        params["start_cursor"] = cursor
    return params


class BlockAPI:
    """Synchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    page_size:
        Children requested per page (at most 100).
    """

    def __init__(self, transport: NotionTransport, page_size: int = MAX_PAGE_SIZE) -> None:
        self._transport = transport
        self._page_size = page_size

    def list_children(self, block_id: str, cursor: str | None = None) -> ChildrenPage:
        """Fetch one page of a block's children.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page).
        cursor:
            ``next_cursor`` of the previous page, or ``None`` for the first.
        """
        data = self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            params=_children_params(cursor, self._page_size),
        )
        return ChildrenPage.from_response(data)


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Mirrors :class:`BlockAPI` but all methods are coroutines.
    """

    def __init__(
        self, transport: AsyncNotionTransport, page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._transport = transport
        self._page_size = page_size

    async def list_children(
        self, block_id: str, cursor: str | None = None,
    ) -> ChildrenPage:
        """Fetch one page of a block's children (async)."""
        data = await self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            params=_children_params(cursor, self._page_size),
        )
        return ChildrenPage.from_response(data)
