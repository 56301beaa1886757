"""Block tree linearization: load a page's block tree and render it to Markdown.

Both entry points take a *children provider* (see
:mod:`dreamdocs.notion_api.tree`), load the complete tree below *root_id*,
and hand it to :class:`NotionToMarkdownRenderer`.  Loading finishes before
rendering starts, so a provider error propagates unchanged and never yields
partial output.
"""

from __future__ import annotations

from dreamdocs.notion_api.tree import (
    AsyncBlockTreeLoader,
    AsyncChildrenProvider,
    BlockTreeLoader,
    ChildrenProvider,
)
from dreamdocs.observability import MetricsHook

from .notion_to_md import NotionToMarkdownRenderer

_RENDERER = NotionToMarkdownRenderer()


async def linearize(
    provider: AsyncChildrenProvider,
    root_id: str,
    depth: int = 0,
    *,
    max_depth: int | None = None,
    metrics: MetricsHook | None = None,
) -> str:
    """Fetch and linearize every block below *root_id*.

    Parameters
    ----------
    provider:
        Coroutine function returning one page of children for
        ``(block_id, cursor)``.
    root_id:
        Page or block whose children form the document.
    depth:
        List nesting depth assigned to the top-level blocks.
    max_depth:
        Deepest level whose children are fetched; ``None`` is unlimited.
    metrics:
        Optional metrics hook forwarded to the loader.

    Returns
    -------
    str
        The Markdown document, ``""`` for a page without content.
    """
    loader = AsyncBlockTreeLoader(provider, max_depth=max_depth, metrics=metrics)
    blocks = await loader.load(root_id)
    return _RENDERER.render_blocks(blocks, depth)


def linearize_sync(
    provider: ChildrenProvider,
    root_id: str,
    depth: int = 0,
    *,
    max_depth: int | None = None,
    metrics: MetricsHook | None = None,
) -> str:
    """Synchronous counterpart of :func:`linearize`."""
    loader = BlockTreeLoader(provider, max_depth=max_depth, metrics=metrics)
    blocks = loader.load(root_id)
    return _RENDERER.render_blocks(blocks, depth)
