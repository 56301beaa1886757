"""dreamdocs.notion_api -- Notion API transport, endpoints and tree loading.

* :mod:`.rate_limit` -- token bucket rate limiters (sync and async).
* :mod:`.retries` -- retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.pages` -- page retrieval and metadata extraction.
* :mod:`.blocks` -- paginated block-children listing.
* :mod:`.page_id` -- page identifier extraction from URLs.
* :mod:`.tree` -- depth-first block-tree loading.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, BlockAPI
from .page_id import extract_page_id
from .pages import (
    AsyncPageAPI,
    PageAPI,
    extract_cover,
    extract_icon,
    extract_page_title,
)
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport, NotionTransport
from .tree import AsyncBlockTreeLoader, BlockTreeLoader

__all__ = [
    "AsyncBlockAPI",
    "AsyncBlockTreeLoader",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncTokenBucket",
    "BlockAPI",
    "BlockTreeLoader",
    "NotionTransport",
    "PageAPI",
    "TokenBucket",
    "compute_backoff",
    "extract_cover",
    "extract_icon",
    "extract_page_id",
    "extract_page_title",
    "should_retry",
]
