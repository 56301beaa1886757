"""Notion block tree to Markdown renderer.

Converts a list of expanded :class:`~dreamdocs.models.Block` objects into a
single Markdown string.  Sibling fragments are joined with one blank line;
blocks that render to an empty fragment are dropped and leave no blank line
behind.

Usage::

    from dreamdocs.converter.notion_to_md import NotionToMarkdownRenderer

    renderer = NotionToMarkdownRenderer()
    md = renderer.render_blocks(blocks)

Every block handed to the renderer must already be expanded (see
:mod:`dreamdocs.notion_api.tree`).  A block that reports children which were
never fetched raises :class:`~dreamdocs.errors.DreamDocsConversionError`.

The walk is post-order over an explicit stack, so arbitrarily deep trees
render without touching Python's recursion limit.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from dreamdocs.errors import DreamDocsConversionError
from dreamdocs.models import Block, BlockKind

from .rich_text import parse_rich_text, plain_text, render_rich_text

DEFAULT_CALLOUT_ICON = "\U0001f4a1"
DEFAULT_IMAGE_ALT = "Image"
BLOCK_SEPARATOR = "\n\n"

# Kinds whose children are rendered into the parent's fragment, mapped to
# the depth increment applied to those children.
_CONTAINER_DEPTH: dict[BlockKind, int] = {
    BlockKind.BULLETED_LIST_ITEM: 1,
    BlockKind.NUMBERED_LIST_ITEM: 1,
    BlockKind.TOGGLE: 0,
    BlockKind.COLUMN_LIST: 0,
    BlockKind.COLUMN: 0,
}


@dataclass
class _Frame:
    """A container whose children are still being rendered."""

    block: Block | None
    depth: int
    child_depth: int
    pending: Iterator[Block]
    fragments: list[str] = field(default_factory=list)


def _join(fragments: list[str]) -> str:
    return BLOCK_SEPARATOR.join(fragment for fragment in fragments if fragment)


class NotionToMarkdownRenderer:
    """Stateless renderer that converts expanded Notion blocks to Markdown.

    One instance may be shared freely; nothing is stored between calls.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_blocks(self, blocks: list[Block], depth: int = 0) -> str:
        """Render an ordered list of sibling blocks.

        Parameters
        ----------
        blocks:
            Expanded blocks, in document order.
        depth:
            Current list nesting depth.  Top-level blocks are depth 0.

        Returns
        -------
        str
            Non-empty fragments joined by a blank line.

        Raises
        ------
        DreamDocsConversionError
            If any block has children that were never loaded.
        """
        top = _Frame(block=None, depth=depth, child_depth=depth, pending=iter(blocks))
        stack = [top]
        while stack:
            frame = stack[-1]
            block = next(frame.pending, None)

            if block is None:
                stack.pop()
                if frame.block is not None:
                    fragment = self._render_one(frame.block, frame.depth, _join(frame.fragments))
                    stack[-1].fragments.append(fragment)
                continue

            _check_expanded(block)
            offset = _CONTAINER_DEPTH.get(block.kind)
            if offset is not None and block.children:
                stack.append(
                    _Frame(
                        block=block,
                        depth=frame.child_depth,
                        child_depth=frame.child_depth + offset,
                        pending=iter(block.children),
                    )
                )
            else:
                frame.fragments.append(self._render_one(block, frame.child_depth, ""))

        return _join(top.fragments)

    def render_block(self, block: Block, depth: int = 0) -> str:
        """Render a single block (and its subtree) to a Markdown fragment."""
        return self.render_blocks([block], depth)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _render_one(self, block: Block, depth: int, children: str) -> str:
        renderer = _BLOCK_RENDERERS.get(block.kind, NotionToMarkdownRenderer._render_unknown)
        return renderer(self, block, depth, children)

    @staticmethod
    def _text(block: Block) -> str:
        return render_rich_text(block.payload.get("rich_text"))

    # ------------------------------------------------------------------
    # Block type renderers
    #
    # Each receives the block, its list depth and the already rendered
    # Markdown of its children ("" for leaf kinds).
    # ------------------------------------------------------------------

    def _render_paragraph(self, block: Block, depth: int, children: str) -> str:
        return self._text(block)

    def _render_heading(self, block: Block, level: int) -> str:
        return f"{'#' * level} {self._text(block)}"

    def _render_heading_1(self, block: Block, depth: int, children: str) -> str:
        return self._render_heading(block, 1)

    def _render_heading_2(self, block: Block, depth: int, children: str) -> str:
        return self._render_heading(block, 2)

    def _render_heading_3(self, block: Block, depth: int, children: str) -> str:
        return self._render_heading(block, 3)

    def _render_list_item(self, block: Block, depth: int, children: str, marker: str) -> str:
        result = f"{'  ' * depth}{marker} {self._text(block)}"
        if children:
            result += "\n" + children
        return result

    def _render_bulleted_list_item(self, block: Block, depth: int, children: str) -> str:
        return self._render_list_item(block, depth, children, "-")

    def _render_numbered_list_item(self, block: Block, depth: int, children: str) -> str:
        # Markdown renumbers ordered lists, so every item is emitted as "1.".
        return self._render_list_item(block, depth, children, "1.")

    def _render_to_do(self, block: Block, depth: int, children: str) -> str:
        checkbox = "[x]" if block.payload.get("checked") else "[ ]"
        return f"- {checkbox} {self._text(block)}"

    def _render_toggle(self, block: Block, depth: int, children: str) -> str:
        # The closing tag sits after a blank line so it cannot be absorbed by
        # a list or quote that ends the body.
        opening = f"<details>\n<summary>{self._text(block)}</summary>"
        if not children:
            return f"{opening}\n\n</details>"
        return f"{opening}\n\n{children}\n\n</details>"

    def _render_code(self, block: Block, depth: int, children: str) -> str:
        language = block.payload.get("language") or ""
        code = plain_text(parse_rich_text(block.payload.get("rich_text")))
        return f"```{language}\n{code}\n```"

    def _render_quote(self, block: Block, depth: int, children: str) -> str:
        return f"> {self._text(block)}"

    def _render_callout(self, block: Block, depth: int, children: str) -> str:
        icon = block.payload.get("icon") or {}
        emoji = icon.get("emoji") if isinstance(icon, dict) else None
        return f"> {emoji or DEFAULT_CALLOUT_ICON} {self._text(block)}"

    def _render_divider(self, block: Block, depth: int, children: str) -> str:
        return "---"

    def _render_image(self, block: Block, depth: int, children: str) -> str:
        url = _file_url(block.payload)
        if not url:
            return ""
        caption = render_rich_text(block.payload.get("caption"))
        if caption:
            return f"![{caption}]({url})\n*{caption}*"
        return f"![{DEFAULT_IMAGE_ALT}]({url})"

    def _render_link(self, block: Block, depth: int, children: str) -> str:
        url = block.payload.get("url") or ""
        return f"[{url}]({url})" if url else ""

    def _render_table(self, block: Block, depth: int, children: str) -> str:
        rows = [child for child in block.children or [] if child.kind is BlockKind.TABLE_ROW]
        return table_to_markdown(rows)

    def _render_table_row(self, block: Block, depth: int, children: str) -> str:
        # Rows are rendered by their parent table.
        return ""

    def _render_passthrough(self, block: Block, depth: int, children: str) -> str:
        """Render layout wrappers (columns) as their children, same depth."""
        return children

    def _render_unknown(self, block: Block, depth: int, children: str) -> str:
        return self._text(block)


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["NotionToMarkdownRenderer", Block, int, str], str]

_BLOCK_RENDERERS: dict[BlockKind, _BlockRenderer] = {
    BlockKind.PARAGRAPH: NotionToMarkdownRenderer._render_paragraph,
    BlockKind.HEADING_1: NotionToMarkdownRenderer._render_heading_1,
    BlockKind.HEADING_2: NotionToMarkdownRenderer._render_heading_2,
    BlockKind.HEADING_3: NotionToMarkdownRenderer._render_heading_3,
    BlockKind.BULLETED_LIST_ITEM: NotionToMarkdownRenderer._render_bulleted_list_item,
    BlockKind.NUMBERED_LIST_ITEM: NotionToMarkdownRenderer._render_numbered_list_item,
    BlockKind.TO_DO: NotionToMarkdownRenderer._render_to_do,
    BlockKind.TOGGLE: NotionToMarkdownRenderer._render_toggle,
    BlockKind.CODE: NotionToMarkdownRenderer._render_code,
    BlockKind.QUOTE: NotionToMarkdownRenderer._render_quote,
    BlockKind.CALLOUT: NotionToMarkdownRenderer._render_callout,
    BlockKind.DIVIDER: NotionToMarkdownRenderer._render_divider,
    BlockKind.IMAGE: NotionToMarkdownRenderer._render_image,
    BlockKind.BOOKMARK: NotionToMarkdownRenderer._render_link,
    BlockKind.LINK_PREVIEW: NotionToMarkdownRenderer._render_link,
    BlockKind.TABLE: NotionToMarkdownRenderer._render_table,
    BlockKind.TABLE_ROW: NotionToMarkdownRenderer._render_table_row,
    BlockKind.COLUMN_LIST: NotionToMarkdownRenderer._render_passthrough,
    BlockKind.COLUMN: NotionToMarkdownRenderer._render_passthrough,
    BlockKind.UNKNOWN: NotionToMarkdownRenderer._render_unknown,
}

# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _check_expanded(block: Block) -> None:
    if block.needs_expansion:
        raise DreamDocsConversionError(
            message=f"Block {block.id} has unloaded children",
            context={"block_id": block.id, "block_type": block.type},
        )


def _file_url(payload: dict[str, Any]) -> str:
    """Return the URL of an external or Notion-hosted file object."""
    if payload.get("type") == "external":
        source = payload.get("external") or {}
    else:
        source = payload.get("file") or {}
    return source.get("url") or ""


def table_to_markdown(rows: list[Block]) -> str:
    """Render ``table_row`` blocks as a pipe table.

    The first row is the header.  The separator line carries one ``---``
    per cell of the first row.  Returns ``""`` when there are no rows.
    """
    if not rows:
        return ""

    lines: list[str] = []
    for index, row in enumerate(rows):
        cells = row.payload.get("cells") or []
        texts = [render_rich_text(cell) for cell in cells]
        lines.append(f"| {' | '.join(texts)} |")
        if index == 0:
            lines.append(f"| {' | '.join('---' for _ in cells)} |")
    return "\n".join(lines)
