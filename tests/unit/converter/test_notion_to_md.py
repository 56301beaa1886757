"""Tests for NotionToMarkdownRenderer.

Blocks are built as Notion API dicts and converted with
``Block.from_notion``; a ``children`` list marks a block as expanded.
"""

from __future__ import annotations

import pytest

from dreamdocs.converter.notion_to_md import NotionToMarkdownRenderer, table_to_markdown
from dreamdocs.errors import DreamDocsConversionError
from dreamdocs.models import Block, BlockKind


def _make_text_segment(content, **annotations):
    return {
        "type": "text",
        "text": {"content": content},
        "plain_text": content,
        "annotations": annotations,
        "href": None,
    }


def make_block(block_type, text=None, children=None, block_id="blk", **payload):
    data = dict(payload)
    if text is not None:
        data["rich_text"] = [_make_text_segment(text)]
    obj = {"id": block_id, "type": block_type, block_type: data}
    if children is not None:
        obj["children"] = children
        obj["has_children"] = bool(children)
    return obj


def make_table(*rows):
    return make_block(
        "table",
        table_width=len(rows[0]),
        children=[
            make_block("table_row", cells=[[_make_text_segment(c)] for c in row])
            for row in rows
        ],
    )


def render(*objs, depth=0):
    blocks = [Block.from_notion(obj) for obj in objs]
    return NotionToMarkdownRenderer().render_blocks(blocks, depth)


class TestTextBlocks:
    def test_paragraph(self):
        assert render(make_block("paragraph", "Hello")) == "Hello"

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_headings(self, level):
        assert render(make_block(f"heading_{level}", "Title")) == "#" * level + " Title"

    def test_quote(self):
        assert render(make_block("quote", "Wise words")) == "> Wise words"

    def test_divider(self):
        assert render(make_block("divider")) == "---"

    def test_siblings_joined_by_blank_line(self):
        md = render(make_block("heading_1", "T"), make_block("paragraph", "Body"))
        assert md == "# T\n\nBody"

    def test_empty_fragments_leave_no_gap(self):
        md = render(
            make_block("paragraph", "a"),
            make_block("paragraph", ""),
            make_block("paragraph", "b"),
        )
        assert md == "a\n\nb"

    def test_no_blocks(self):
        assert render() == ""

    def test_annotations_flow_through(self):
        obj = make_block("paragraph")
        obj["paragraph"]["rich_text"] = [
            _make_text_segment("bold", bold=True),
            _make_text_segment(" and "),
            _make_text_segment("code", code=True),
        ]
        assert render(obj) == "**bold** and `code`"


class TestLists:
    def test_bulleted(self):
        assert render(make_block("bulleted_list_item", "A")) == "- A"

    def test_numbered_items_all_use_one(self):
        md = render(
            make_block("numbered_list_item", "one"),
            make_block("numbered_list_item", "two"),
        )
        assert md == "1. one\n\n1. two"

    def test_nested_children_indent_two_spaces(self):
        obj = make_block(
            "bulleted_list_item", "A",
            children=[
                make_block("bulleted_list_item", "B"),
                make_block("bulleted_list_item", "C"),
            ],
        )
        assert render(obj) == "- A\n  - B\n\n  - C"

    def test_three_levels(self):
        obj = make_block(
            "bulleted_list_item", "A",
            children=[make_block(
                "numbered_list_item", "B",
                children=[make_block("bulleted_list_item", "C")],
            )],
        )
        assert render(obj) == "- A\n  1. B\n    - C"

    def test_depth_argument_indents_top_level(self):
        assert render(make_block("bulleted_list_item", "A"), depth=2) == "    - A"

    def test_to_do_checked_and_unchecked(self):
        md = render(
            make_block("to_do", "done", checked=True),
            make_block("to_do", "open", checked=False),
        )
        assert md == "- [x] done\n\n- [ ] open"


class TestContainers:
    def test_toggle_wraps_children_in_details(self):
        obj = make_block("toggle", "More", children=[make_block("paragraph", "Inner")])
        assert render(obj) == "<details>\n<summary>More</summary>\n\nInner\n\n</details>"

    def test_toggle_without_children(self):
        obj = make_block("toggle", "Empty")
        assert render(obj) == "<details>\n<summary>Empty</summary>\n\n</details>"

    def test_callout_with_emoji(self):
        obj = make_block("callout", "Note", icon={"type": "emoji", "emoji": "⚠️"})
        assert render(obj) == "> ⚠️ Note"

    def test_callout_default_icon(self):
        assert render(make_block("callout", "Tip")) == "> \U0001f4a1 Tip"

    def test_callout_external_icon_uses_default(self):
        obj = make_block(
            "callout", "Tip",
            icon={"type": "external", "external": {"url": "https://x.io/i.png"}},
        )
        assert render(obj) == "> \U0001f4a1 Tip"

    def test_columns_render_children_in_place(self):
        obj = make_block(
            "column_list",
            children=[
                make_block("column", children=[make_block("paragraph", "left")]),
                make_block("column", children=[make_block("paragraph", "right")]),
            ],
        )
        assert render(obj) == "left\n\nright"


class TestCode:
    def test_fenced_with_language(self):
        obj = make_block("code", "print(1)", language="python")
        assert render(obj) == "```python\nprint(1)\n```"

    def test_code_uses_plain_text(self):
        obj = make_block("code", language="js")
        obj["code"]["rich_text"] = [_make_text_segment("a**b", bold=True)]
        assert render(obj) == "```js\na**b\n```"

    def test_missing_language(self):
        assert render(make_block("code", "x")) == "```\nx\n```"


class TestMedia:
    def test_external_image_default_alt(self):
        obj = make_block("image", type="external", external={"url": "https://x.io/a.png"})
        assert render(obj) == "![Image](https://x.io/a.png)"

    def test_hosted_image_with_caption(self):
        obj = make_block(
            "image",
            type="file",
            file={"url": "https://s3/a.png"},
            caption=[_make_text_segment("Fig 1")],
        )
        assert render(obj) == "![Fig 1](https://s3/a.png)\n*Fig 1*"

    def test_image_without_url_renders_nothing(self):
        assert render(make_block("image", type="external", external={})) == ""

    def test_bookmark(self):
        obj = make_block("bookmark", url="https://example.com")
        assert render(obj) == "[https://example.com](https://example.com)"

    def test_link_preview(self):
        obj = make_block("link_preview", url="https://github.com/a/b")
        assert render(obj) == "[https://github.com/a/b](https://github.com/a/b)"

    def test_bookmark_without_url(self):
        assert render(make_block("bookmark")) == ""


class TestTables:
    def test_header_separator_and_rows(self):
        md = render(make_table(["Name", "Age"], ["Ann", "30"]))
        assert md == "| Name | Age |\n| --- | --- |\n| Ann | 30 |"

    def test_header_only(self):
        assert render(make_table(["A"])) == "| A |\n| --- |"

    def test_table_without_rows(self):
        assert render(make_block("table", children=[])) == ""

    def test_table_to_markdown_empty(self):
        assert table_to_markdown([]) == ""

    def test_stray_table_row_renders_nothing(self):
        obj = make_block("table_row", cells=[[_make_text_segment("x")]])
        assert render(obj) == ""

    def test_separator_follows_first_row_width(self):
        md = render(make_table(["A", "B"], ["1", "2", "3"]))
        assert md.splitlines()[1] == "| --- | --- |"
        assert md.splitlines()[2] == "| 1 | 2 | 3 |"


class TestUnknownAndErrors:
    def test_unknown_type_renders_rich_text(self):
        obj = make_block("synced_block", "Shared text")
        block = Block.from_notion(obj)
        assert block.kind is BlockKind.UNKNOWN
        assert render(obj) == "Shared text"

    def test_unknown_type_without_text(self):
        assert render(make_block("embed", url="https://x.io")) == ""

    def test_unexpanded_children_raise(self):
        obj = make_block("toggle", "T", block_id="t1")
        obj["has_children"] = True
        with pytest.raises(DreamDocsConversionError) as exc_info:
            render(obj)
        assert exc_info.value.context == {"block_id": "t1", "block_type": "toggle"}

    def test_renderer_is_reusable(self, renderer):
        blocks = [Block.from_notion(make_block("paragraph", "x"))]
        assert renderer.render_blocks(blocks) == renderer.render_blocks(blocks)
