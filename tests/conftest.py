"""Shared test fixtures for the dreamdocs test suite."""

from __future__ import annotations

import pytest

from dreamdocs.config import DreamDocsConfig
from dreamdocs.converter.markdown import MarkdownParser
from dreamdocs.converter.notion_to_md import NotionToMarkdownRenderer


@pytest.fixture
def config() -> DreamDocsConfig:
    """Default test configuration with a dummy token."""
    return DreamDocsConfig(token="test-token-1234")


@pytest.fixture
def renderer() -> NotionToMarkdownRenderer:
    """Block tree to Markdown renderer."""
    return NotionToMarkdownRenderer()


@pytest.fixture
def parser() -> MarkdownParser:
    """A fresh Markdown parser."""
    return MarkdownParser()
