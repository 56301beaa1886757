"""Tests for the block-tree and rich-text models."""

from __future__ import annotations

from dreamdocs.models import Block, BlockKind, ChildrenPage, RichTextSpan


class TestBlockKind:
    def test_known_type(self):
        assert BlockKind.from_type("heading_2") is BlockKind.HEADING_2

    def test_unknown_type(self):
        assert BlockKind.from_type("synced_block") is BlockKind.UNKNOWN
        assert BlockKind.from_type(None) is BlockKind.UNKNOWN


class TestBlockFromNotion:
    def test_leaf(self):
        block = Block.from_notion({
            "id": "b1",
            "type": "paragraph",
            "has_children": False,
            "paragraph": {"rich_text": []},
        })
        assert block.kind is BlockKind.PARAGRAPH
        assert block.payload == {"rich_text": []}
        assert block.children is None
        assert block.needs_expansion is False

    def test_unexpanded(self):
        block = Block.from_notion({"id": "t", "type": "toggle", "has_children": True, "toggle": {}})
        assert block.needs_expansion is True

    def test_inline_children_mark_expanded(self):
        block = Block.from_notion({
            "id": "p",
            "type": "bulleted_list_item",
            "bulleted_list_item": {
                "rich_text": [],
                "children": [{"id": "c", "type": "paragraph", "paragraph": {}}],
            },
        })
        assert block.has_children is True
        assert block.needs_expansion is False
        assert [child.id for child in block.children] == ["c"]

    def test_unknown_keeps_raw_type(self):
        block = Block.from_notion({"id": "x", "type": "embed", "embed": {"url": "u"}})
        assert block.kind is BlockKind.UNKNOWN
        assert block.type == "embed"

    def test_missing_payload(self):
        block = Block.from_notion({"id": "d", "type": "divider"})
        assert block.payload == {}


class TestChildrenPage:
    def test_from_response(self):
        page = ChildrenPage.from_response(
            {"results": [{"id": "a"}], "has_more": True, "next_cursor": "c1"},
        )
        assert page == ChildrenPage(results=[{"id": "a"}], has_more=True, next_cursor="c1")

    def test_empty_response(self):
        assert ChildrenPage.from_response({}) == ChildrenPage(results=[])


class TestRichTextSpan:
    def test_from_notion(self):
        span = RichTextSpan.from_notion({
            "plain_text": "x",
            "annotations": {"bold": True, "code": True},
            "href": "https://x.io",
        })
        assert span == RichTextSpan(text="x", bold=True, code=True, link="https://x.io")

    def test_empty_href_is_none(self):
        assert RichTextSpan.from_notion({"plain_text": "x", "href": ""}).link is None
