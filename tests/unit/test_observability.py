"""Tests for observability/logger.py and observability/metrics.py."""
import io
import json
import logging
import sys
from typing import Any

from dreamdocs.models import ChildrenPage
from dreamdocs.notion_api.tree import BlockTreeLoader
from dreamdocs.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
    resolve_metrics,
)


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        record = self._get_record("msg", extra_fields={"page_id": "abc", "blocks": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["page_id"] == "abc"
        assert result["blocks"] == 5

    def test_exception_info_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("err", exc_info=exc_info)))
        assert "ValueError" in result["exception"]


class TestGetLogger:
    def test_string_level(self):
        logger = get_logger("test.dreamdocs.level", level="WARNING")
        assert logger.level == logging.WARNING

    def test_idempotent_no_duplicate_handlers(self):
        name = "test.dreamdocs.idempotent"
        count = len(get_logger(name).handlers)
        assert len(get_logger(name).handlers) == count

    def test_custom_stream_receives_json_lines(self):
        stream = io.StringIO()
        logger = get_logger("test.dreamdocs.stream", stream=stream)
        logger.info("Page exported", extra={"extra_fields": {"op": "fetch_page"}})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "Page exported"
        assert entry["op"] == "fetch_page"

    def test_does_not_propagate(self):
        assert get_logger("test.dreamdocs.propagate").propagate is False


class TestMetrics:
    def test_noop_hook_discards(self):
        hook = NoopMetricsHook()
        assert hook.increment("dreamdocs.requests_total") is None
        assert hook.timing("dreamdocs.request_duration_ms", 1.5) is None

    def test_protocol_conformance(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)
        assert isinstance(RecordingMetricsHook(), MetricsHook)

    def test_resolve_metrics(self):
        hook = RecordingMetricsHook()
        assert resolve_metrics(hook) is hook
        assert isinstance(resolve_metrics(None), NoopMetricsHook)

    def test_tree_loader_counts_fetched_blocks(self):
        hook = RecordingMetricsHook()
        pages = {
            None: ChildrenPage(results=[{"id": "a"}, {"id": "b"}], has_more=True, next_cursor="c"),
            "c": ChildrenPage(results=[{"id": "c"}]),
        }
        BlockTreeLoader(lambda block_id, cursor: pages[cursor], metrics=hook).load("root")
        assert hook.increments == [
            {"name": "dreamdocs.blocks_fetched_total", "value": 3, "tags": None},
        ]
