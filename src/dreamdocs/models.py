"""Public data models for dreamdocs.

This module contains the block-tree variant types, rich-text spans, the
Markdown parse result, and the request/result types used by the clients.
All types are plain dataclasses with no behaviour beyond construction from
Notion API objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Block tree
# ---------------------------------------------------------------------------

class BlockKind(str, Enum):
    """Closed set of block variants the linearizer knows how to render.

    Values are the Notion API ``type`` strings.  Anything else maps to
    :attr:`UNKNOWN` through :meth:`from_type`.
    """

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    IMAGE = "image"
    BOOKMARK = "bookmark"
    LINK_PREVIEW = "link_preview"
    TABLE = "table"
    TABLE_ROW = "table_row"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, block_type: str | None) -> BlockKind:
        """Map a raw API type string to a kind, defaulting to :attr:`UNKNOWN`."""
        try:
            return cls(block_type)
        except ValueError:
            return cls.UNKNOWN


@dataclass
class Block:
    """One node of a Notion page's content tree.

    Attributes
    ----------
    id:
        Block UUID.
    kind:
        The variant used for rendering.
    type:
        The raw API ``type`` string.  Differs from ``kind.value`` only for
        unknown blocks.
    payload:
        Variant-specific data (``block[type]`` in the API shape).
    children:
        Expanded child blocks, or ``None`` while the block is unexpanded.
    has_children:
        Whether the API reported nested children for this block.
    """

    id: str
    kind: BlockKind
    type: str
    payload: dict[str, Any] = field(default_factory=dict)
    children: list[Block] | None = None
    has_children: bool = False

    @classmethod
    def from_notion(cls, obj: dict[str, Any]) -> Block:
        """Build a block from a Notion API block object.

        A ``children`` list already present on the object (top-level or
        inside the type-specific payload) is converted recursively and marks
        the block as expanded.
        """
        block_type = obj.get("type") or ""
        payload = obj.get(block_type)
        if not isinstance(payload, dict):
            payload = {}

        raw_children = obj.get("children")
        if raw_children is None:
            raw_children = payload.get("children")

        children = None
        if raw_children is not None:
            children = [cls.from_notion(child) for child in raw_children]

        return cls(
            id=obj.get("id", ""),
            kind=BlockKind.from_type(block_type),
            type=block_type,
            payload=payload,
            children=children,
            has_children=bool(obj.get("has_children", False)) or bool(children),
        )

    @property
    def needs_expansion(self) -> bool:
        """``True`` when nested children exist but have not been fetched."""
        return self.has_children and self.children is None


@dataclass
class ChildrenPage:
    """One page of a block-children listing."""

    results: list[dict[str, Any]]
    has_more: bool = False
    next_cursor: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> ChildrenPage:
        """Build a page from a ``GET /blocks/{id}/children`` response."""
        has_more = bool(data.get("has_more", False))
        return cls(
            results=list(data.get("results", [])),
            has_more=has_more,
            next_cursor=data.get("next_cursor") if has_more else None,
        )


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass
class RichTextSpan:
    """A run of text carrying independent formatting annotations."""

    text: str = ""
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False
    link: str | None = None

    @classmethod
    def from_notion(cls, segment: dict[str, Any]) -> RichTextSpan:
        """Build a span from a Notion rich_text object.

        API responses carry ``plain_text``; locally-built objects only carry
        ``text.content``.
        """
        text_obj = segment.get("text") or {}
        annotations = segment.get("annotations") or {}
        return cls(
            text=segment.get("plain_text") or text_obj.get("content", "") or "",
            bold=bool(annotations.get("bold", False)),
            italic=bool(annotations.get("italic", False)),
            strikethrough=bool(annotations.get("strikethrough", False)),
            code=bool(annotations.get("code", False)),
            link=segment.get("href") or None,
        )


# ---------------------------------------------------------------------------
# Markdown parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TocEntry:
    """A table-of-contents entry for a level-2 or level-3 heading."""

    id: str
    text: str
    level: int


@dataclass
class MarkdownResult:
    """Output of a single Markdown parse."""

    html: str
    toc: list[TocEntry] = field(default_factory=list)
    title: str | None = None


# ---------------------------------------------------------------------------
# Notion pages
# ---------------------------------------------------------------------------

@dataclass
class NotionPage:
    """A Notion page linearized to Markdown.

    Attributes
    ----------
    page_id:
        The 32-character page identifier.
    title:
        Page title from its properties (``"Untitled"`` when absent).
    markdown:
        The linearized page content.
    icon:
        Emoji or external icon URL, if the page has one.
    cover:
        Cover image URL, if the page has one.
    """

    page_id: str
    title: str
    markdown: str
    icon: str | None = None
    cover: str | None = None


# ---------------------------------------------------------------------------
# Conversion requests and results
# ---------------------------------------------------------------------------

@dataclass
class ConversionOptions:
    """Caller-selected options for a document conversion.

    ``theme_id=None`` means the configured default theme.  ``page_numbers``
    is passed through untouched for the external renderer.
    """

    theme_id: str | None = None
    generate_toc: bool = True
    page_numbers: bool = True
    title: str | None = None


@dataclass
class ConversionMetadata:
    """Summary information about a finished conversion."""

    title: str
    generated_at: str
    theme_id: str
    toc_entries: int
    word_count: int


@dataclass
class ConversionResult:
    """An assembled HTML document plus the data it was built from."""

    html: str
    title: str
    toc: list[TocEntry]
    metadata: ConversionMetadata
