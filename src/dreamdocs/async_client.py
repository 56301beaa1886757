"""Asynchronous dreamdocs client.

:class:`AsyncDreamDocsClient` mirrors :class:`DreamDocsClient` but every
Notion I/O method is an ``async def`` coroutine.  It uses the async variants
of the transport, API wrappers and tree loader.

Usage::

    import asyncio
    from dreamdocs import AsyncDreamDocsClient

    async def main():
        async with AsyncDreamDocsClient(token="secret_xxx") as client:
            result = await client.convert_notion_page(
                "https://www.notion.so/team/Roadmap-0123456789abcdef0123456789abcdef",
            )
            print(result.title, result.metadata.word_count)

    asyncio.run(main())
"""

from __future__ import annotations

import time
from typing import Any

from dreamdocs.client import _status_message, build_config, require_page_id
from dreamdocs.config import DreamDocsConfig
from dreamdocs.conversion import StylesLoader, convert_markdown
from dreamdocs.converter.linearize import linearize
from dreamdocs.converter.markdown import default_parser
from dreamdocs.models import ConversionOptions, ConversionResult, NotionPage
from dreamdocs.notion_api.blocks import AsyncBlockAPI
from dreamdocs.notion_api.page_id import extract_page_id
from dreamdocs.notion_api.pages import (
    AsyncPageAPI,
    extract_cover,
    extract_icon,
    extract_page_title,
)
from dreamdocs.notion_api.transport import AsyncNotionTransport
from dreamdocs.observability import get_logger, resolve_metrics

log = get_logger("dreamdocs.client")


class AsyncDreamDocsClient:
    """Asynchronous dreamdocs client.

    Parameters
    ----------
    token:
        Notion integration token.  Optional: without one, only
        :meth:`convert_markdown` is usable.
    config:
        A ready :class:`DreamDocsConfig`.  Mutually exclusive with *token*
        and config keyword arguments.
    styles_loader:
        Optional callable mapping a theme id to its CSS.
    **kwargs:
        Forwarded to :class:`DreamDocsConfig`.
    """

    def __init__(
        self,
        token: str = "",
        *,
        config: DreamDocsConfig | None = None,
        styles_loader: StylesLoader | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = build_config(token, config, kwargs)
        self._metrics = resolve_metrics(self._config.metrics)
        self._styles_loader = styles_loader
        self._parser = default_parser()
        self._transport = AsyncNotionTransport(self._config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport, page_size=self._config.page_size)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def config(self) -> DreamDocsConfig:
        return self._config

    @property
    def notion_available(self) -> bool:
        """``True`` when a Notion token is configured."""
        return self._config.notion_available

    def notion_status(self) -> dict[str, Any]:
        """Describe whether Notion retrieval is configured."""
        available = self.notion_available
        return {"available": available, "message": _status_message(available)}

    def validate_page_url(self, url: str) -> dict[str, Any]:
        """Check whether *url* contains a page id, without any request."""
        page_id = extract_page_id(url)
        return {
            "valid": page_id is not None,
            "page_id": page_id,
            "notion_available": self.notion_available,
        }

    # ------------------------------------------------------------------
    # Notion retrieval
    # ------------------------------------------------------------------

    async def fetch_page(self, url_or_id: str) -> NotionPage:
        """Fetch a Notion page and linearize its content to Markdown.

        Parameters
        ----------
        url_or_id:
            A Notion page URL or a bare (optionally dashed) page id.

        Returns
        -------
        NotionPage

        Raises
        ------
        DreamDocsNotConfiguredError
            If no token is configured.
        DreamDocsInvalidPageIdError
            If no page id can be found in *url_or_id*.
        """
        page_id = require_page_id(self._config, url_or_id)
        t0 = time.monotonic()

        page = await self._pages.retrieve(page_id)
        markdown = await linearize(
            self._blocks.list_children,
            page_id,
            max_depth=self._config.max_depth,
            metrics=self._metrics,
        )

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing("dreamdocs.page_export_duration_ms", elapsed_ms)
        log.info(
            "Page exported",
            extra={
                "extra_fields": {
                    "op": "fetch_page",
                    "page_id": page_id,
                    "markdown_chars": len(markdown),
                    "elapsed_ms": round(elapsed_ms, 1),
                }
            },
        )
        return NotionPage(
            page_id=page_id,
            title=extract_page_title(page),
            markdown=markdown,
            icon=extract_icon(page),
            cover=extract_cover(page),
        )

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    async def convert_markdown(
        self,
        content: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Convert Markdown to a complete HTML document.

        The title is ``options.title``, else the first level-1 heading,
        else ``"Document"``.

        Raises
        ------
        DreamDocsValidationError
            If *content* is empty.
        """
        return convert_markdown(
            content,
            options,
            parser=self._parser,
            default_theme_id=self._config.default_theme_id,
            styles_loader=self._styles_loader,
        )

    async def convert_notion_page(
        self,
        url_or_id: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Fetch a Notion page and convert it to an HTML document.

        When the page content has no level-1 heading the Notion page title
        is used.
        """
        page = await self.fetch_page(url_or_id)
        return convert_markdown(
            page.markdown,
            options,
            parser=self._parser,
            default_theme_id=self._config.default_theme_id,
            styles_loader=self._styles_loader,
            fallback_title=page.title,
        )

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncDreamDocsClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
