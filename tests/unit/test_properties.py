"""Property-based tests for dreamdocs using Hypothesis.

These tests verify invariant properties of the slug, rich-text, Markdown
and tree-loading functions over a wide range of generated inputs.
"""

from __future__ import annotations

import re

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from dreamdocs.converter.markdown import default_parser
from dreamdocs.converter.rich_text import compose_rich_text, plain_text
from dreamdocs.models import ChildrenPage, RichTextSpan
from dreamdocs.notion_api.retries import compute_backoff
from dreamdocs.notion_api.tree import BlockTreeLoader
from dreamdocs.utils import slugify

# ---------------------------------------------------------------------------
# Reusable strategies
# ---------------------------------------------------------------------------

# Span text without Markdown syntax characters.
_plain_st = st.text(
    alphabet=st.characters(
        whitelist_categories=("Lu", "Ll", "Nd", "Zs"),
        max_codepoint=0x2FF,
    ),
    max_size=20,
)

_span_st = st.builds(RichTextSpan, text=_plain_st)

_heading_text_st = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), max_codepoint=0x2FF),
    min_size=1,
    max_size=15,
)

_SLUG_RE = re.compile(r"^[\w-]*$")


# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------


@given(st.text())
def test_slugify_idempotent(text):
    once = slugify(text)
    assert slugify(once) == once


@given(st.text())
def test_slugify_output_is_url_safe(text):
    slug = slugify(text)
    assert _SLUG_RE.match(slug)
    assert slug == slug.lower()


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------


@given(st.lists(_span_st, max_size=8))
def test_unannotated_spans_concatenate(spans):
    assert compose_rich_text(spans) == "".join(span.text for span in spans)
    assert plain_text(spans) == compose_rich_text(spans)


@given(
    st.lists(
        st.builds(
            RichTextSpan,
            text=_plain_st,
            bold=st.booleans(),
            italic=st.booleans(),
            strikethrough=st.booleans(),
            code=st.booleans(),
        ),
        max_size=8,
    )
)
def test_compose_preserves_span_text_order(spans):
    composed = compose_rich_text(spans)
    position = 0
    for span in spans:
        index = composed.find(span.text, position)
        assert index >= 0
        position = index + len(span.text)


# ---------------------------------------------------------------------------
# Markdown: TOC ids always match heading ids
# ---------------------------------------------------------------------------


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=50)
@given(
    st.lists(
        st.tuples(st.sampled_from([1, 2, 3, 4]), _heading_text_st),
        min_size=1,
        max_size=8,
    )
)
def test_toc_ids_match_rendered_heading_ids(headings):
    source = "\n\n".join(f"{'#' * level} {text}" for level, text in headings)
    result = default_parser().parse(source)

    rendered_ids = re.findall(r'<h([1-6]) id="([^"]*)"', result.html)
    toc_pairs = [(str(entry.level), entry.id) for entry in result.toc]
    assert toc_pairs == [pair for pair in rendered_ids if pair[0] in ("2", "3")]
    for entry in result.toc:
        assert entry.id == slugify(entry.text)

    first_h1 = next((text for level, text in headings if level == 1), None)
    assert result.title == (first_h1.strip() if first_h1 is not None else None)


# ---------------------------------------------------------------------------
# Tree loading: pagination never changes the result
# ---------------------------------------------------------------------------


def _paged(children, page_size):
    def provider(block_id, cursor):
        start = int(cursor) if cursor else 0
        end = start + page_size
        has_more = end < len(children)
        return ChildrenPage(
            results=children[start:end],
            has_more=has_more,
            next_cursor=str(end) if has_more else None,
        )

    return provider


@given(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=100))
def test_pagination_is_transparent(count, page_size):
    children = [{"id": f"b{i}", "type": "paragraph", "paragraph": {}} for i in range(count)]
    blocks = BlockTreeLoader(_paged(children, page_size)).load("root")
    assert [block.id for block in blocks] == [f"b{i}" for i in range(count)]


# ---------------------------------------------------------------------------
# Backoff bounds
# ---------------------------------------------------------------------------


@given(
    st.integers(min_value=0, max_value=20),
    st.floats(min_value=0.0, max_value=10.0),
    st.floats(min_value=0.0, max_value=120.0),
)
def test_backoff_within_bounds(attempt, base, maximum):
    delay = compute_backoff(attempt, base=base, maximum=maximum, jitter=True)
    ceiling = min(base * 2 ** attempt, maximum)
    assert 0.0 <= delay <= ceiling
    assert delay >= ceiling * 0.5 - 1e-9
