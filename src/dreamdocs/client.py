"""Synchronous dreamdocs client.

:class:`DreamDocsClient` ties the pipeline together: page id extraction,
Notion page and block retrieval, linearization to Markdown, Markdown
parsing, table-of-contents markup and document assembly.

Usage::

    from dreamdocs import DreamDocsClient, ConversionOptions

    with DreamDocsClient(token="secret_xxx") as client:
        page = client.fetch_page("0123456789abcdef0123456789abcdef")
        result = client.convert_markdown(
            page.markdown, ConversionOptions(theme_id="academic"),
        )
        print(result.html)
"""

from __future__ import annotations

import time
from typing import Any

from dreamdocs.config import DreamDocsConfig
from dreamdocs.conversion import StylesLoader, convert_markdown
from dreamdocs.converter.linearize import linearize_sync
from dreamdocs.converter.markdown import default_parser
from dreamdocs.errors import DreamDocsInvalidPageIdError, DreamDocsNotConfiguredError
from dreamdocs.models import ConversionOptions, ConversionResult, NotionPage
from dreamdocs.notion_api.blocks import BlockAPI
from dreamdocs.notion_api.page_id import extract_page_id
from dreamdocs.notion_api.pages import (
    PageAPI,
    extract_cover,
    extract_icon,
    extract_page_title,
)
from dreamdocs.notion_api.transport import NotionTransport
from dreamdocs.observability import get_logger, resolve_metrics

log = get_logger("dreamdocs.client")

NOT_CONFIGURED_MESSAGE = (
    "Notion integration is not configured. Set NOTION_API_KEY environment variable."
)
INVALID_PAGE_ID_MESSAGE = "Invalid Notion page URL or ID"


# ------------------------------------------------------------------
# Helpers shared with the async client
# ------------------------------------------------------------------


def build_config(
    token: str,
    config: DreamDocsConfig | None,
    kwargs: dict[str, Any],
) -> DreamDocsConfig:
    """Return *config*, or build one from *token* and config keyword arguments."""
    if config is not None:
        if token or kwargs:
            raise TypeError("Pass either config= or token/config keyword arguments, not both")
        return config
    return DreamDocsConfig(token=token, **kwargs)


def require_page_id(config: DreamDocsConfig, url_or_id: str) -> str:
    """Check Notion retrieval is possible and return the page id in *url_or_id*.

    Raises
    ------
    DreamDocsNotConfiguredError
        If no token is configured.
    DreamDocsInvalidPageIdError
        If *url_or_id* holds no page id.
    """
    if not config.notion_available:
        raise DreamDocsNotConfiguredError(message=NOT_CONFIGURED_MESSAGE)
    page_id = extract_page_id(url_or_id)
    if page_id is None:
        raise DreamDocsInvalidPageIdError(
            message=INVALID_PAGE_ID_MESSAGE,
            context={"input": url_or_id},
        )
    return page_id


def _status_message(available: bool) -> str:
    if available:
        return "Notion integration is configured"
    return "Set NOTION_API_KEY to enable Notion integration"


class DreamDocsClient:
    """Synchronous dreamdocs client.

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
        self._transport = NotionTransport(self._config)
        self._pages = PageAPI(self._transport)
        self._blocks = BlockAPI(self._transport, page_size=self._config.page_size)

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
        """Check whether *url* contains a page id, without any request.

        Returns
        -------
        dict
            ``{"valid": bool, "page_id": str | None, "notion_available": bool}``
        """
        page_id = extract_page_id(url)
        return {
            "valid": page_id is not None,
            "page_id": page_id,
            "notion_available": self.notion_available,
        }

    # ------------------------------------------------------------------
    # Notion retrieval
    # ------------------------------------------------------------------

    def fetch_page(self, url_or_id: str) -> NotionPage:
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

        page = self._pages.retrieve(page_id)
        markdown = linearize_sync(
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

    def convert_markdown(
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

    def convert_notion_page(
        self,
        url_or_id: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Fetch a Notion page and convert it to an HTML document.

        When the page content has no level-1 heading the Notion page title
        is used.
        """
        page = self.fetch_page(url_or_id)
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

    def close(self) -> None:
        """Close the HTTP transport."""
        self._transport.close()

    def __enter__(self) -> DreamDocsClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
