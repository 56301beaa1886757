"""Single-line JSON logging for the dreamdocs loggers.

A conversion touches the transport, the tree loader, the Markdown parser and
the client; each logs under its own ``dreamdocs.*`` name.  Structured fields
travel in ``extra={"extra_fields": {...}}`` and land at the top level of the
emitted object::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "dreamdocs.tree", "message": "Children loaded",
     "op": "load_children", "block_id": "abc123", "children": 12, "pages": 1}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Marks handlers installed by get_logger so repeated calls reuse them.
_HANDLER_ATTR = "_dreamdocs_handler"


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Always present: ``ts`` (UTC, from the record's creation time),
    ``level``, ``logger`` and ``message``.  ``exception`` and ``stack_info``
    appear only when the record carries them.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return logging.getLevelName(level.upper())
    return level


def get_logger(
    name: str = "dreamdocs",
    *,
    level: int | str = logging.DEBUG,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Return the logger *name* with a JSON handler attached exactly once.

    Parameters
    ----------
    name:
        Logger name, ``"dreamdocs"`` or one of its dotted children.
    level:
        Minimum level, as an ``int`` or a case-insensitive name.  Only
        applied when the handler is first installed.
    stream:
        Handler output; ``sys.stderr`` when omitted.
    """
    logger = logging.getLogger(name)
    if any(getattr(h, _HANDLER_ATTR, False) for h in logger.handlers):
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    setattr(handler, _HANDLER_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False
    return logger
