"""Block-tree loading: paginated, depth-first expansion of a Notion page.

A *children provider* is any callable ``provider(block_id, cursor)`` that
returns one :class:`~dreamdocs.models.ChildrenPage`.  :meth:`BlockAPI.list_children`
is the production provider; tests pass plain functions.

Loading rules:

* All pages of one node's children are fetched, in order, before any of
  those children is expanded.
* Expansion is depth-first pre-order: a child's whole subtree is loaded
  before its next sibling's.
* The walk uses an explicit stack of ``(block, depth)`` work items so deep
  trees never exhaust the interpreter's recursion limit.
* Fetching is sequential.  A provider error propagates unchanged and no
  partial tree is returned.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from dreamdocs.models import Block, ChildrenPage
from dreamdocs.observability import MetricsHook, get_logger, resolve_metrics

log = get_logger("dreamdocs.tree")

ChildrenProvider = Callable[[str, str | None], ChildrenPage]
AsyncChildrenProvider = Callable[[str, str | None], Awaitable[ChildrenPage]]


def _push_expandable(
    stack: list[tuple[Block, int]],
    children: list[Block],
    depth: int,
    max_depth: int | None,
) -> None:
    """Queue children that need fetching so they pop in document order."""
    if max_depth is not None and depth > max_depth:
        for child in children:
            if child.needs_expansion:
                child.children = []
        return
    for child in reversed(children):
        if child.needs_expansion:
            stack.append((child, depth))


def _log_loaded(block_id: str, count: int, pages: int) -> None:
    log.debug(
        "Children loaded",
        extra={
            "extra_fields": {
                "op": "load_children",
                "block_id": block_id,
                "children": count,
                "pages": pages,
            }
        },
    )


class BlockTreeLoader:
    """Load a complete block tree through a synchronous provider.

    Parameters
    ----------
    provider:
        Callable returning one page of children for ``(block_id, cursor)``.
    max_depth:
        Deepest level whose children are fetched (the root's children are
        level 0).  ``None`` loads everything.
    metrics:
        Optional :class:`MetricsHook`.
    """

    def __init__(
        self,
        provider: ChildrenProvider,
        max_depth: int | None = None,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._provider = provider
        self._max_depth = max_depth
        self._metrics = resolve_metrics(metrics)

    def fetch_children(self, block_id: str) -> list[Block]:
        """Fetch every page of *block_id*'s direct children, in order."""
        raw: list[dict] = []
        cursor: str | None = None
        pages = 0
        while True:
            page = self._provider(block_id, cursor)
            pages += 1
            raw.extend(page.results)
            cursor = page.next_cursor if page.has_more else None
            if not cursor:
                break
        self._metrics.increment("dreamdocs.blocks_fetched_total", len(raw))
        _log_loaded(block_id, len(raw), pages)
        return [Block.from_notion(obj) for obj in raw]

    def load(self, root_id: str) -> list[Block]:
        """Return the fully expanded children of *root_id*."""
        roots = self.fetch_children(root_id)
        stack: list[tuple[Block, int]] = []
        _push_expandable(stack, roots, 0, self._max_depth)

        while stack:
            block, depth = stack.pop()
            block.children = self.fetch_children(block.id)
            _push_expandable(stack, block.children, depth + 1, self._max_depth)

        return roots


class AsyncBlockTreeLoader:
    """Load a complete block tree through an asynchronous provider.

    Mirrors :class:`BlockTreeLoader`; each page fetch is awaited in turn.
    """

    def __init__(
        self,
        provider: AsyncChildrenProvider,
        max_depth: int | None = None,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._provider = provider
        self._max_depth = max_depth
        self._metrics = resolve_metrics(metrics)

    async def fetch_children(self, block_id: str) -> list[Block]:
        """Fetch every page of *block_id*'s direct children, in order."""
        raw: list[dict] = []
        cursor: str | None = None
        pages = 0
        while True:
            page = await self._provider(block_id, cursor)
            pages += 1
            raw.extend(page.results)
            cursor = page.next_cursor if page.has_more else None
            if not cursor:
                break
        self._metrics.increment("dreamdocs.blocks_fetched_total", len(raw))
        _log_loaded(block_id, len(raw), pages)
        return [Block.from_notion(obj) for obj in raw]

    async def load(self, root_id: str) -> list[Block]:
        """Return the fully expanded children of *root_id*."""
        roots = await self.fetch_children(root_id)
        stack: list[tuple[Block, int]] = []
        _push_expandable(stack, roots, 0, self._max_depth)

        while stack:
            block, depth = stack.pop()
            block.children = await self.fetch_children(block.id)
            _push_expandable(stack, block.children, depth + 1, self._max_depth)

        return roots
