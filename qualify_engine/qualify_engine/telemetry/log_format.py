"""Log formatting and logging setup.

With structured logging enabled (``SQLQ_STRUCTURED_LOGGING=true``) every
record is written as a single-line JSON object that log aggregators can
index without regex parsing::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "INFO",
        "logger": "qualify_engine.processor",
        "message": "Processed a.sql: 4 statement(s), 2 changed",
        "event": { ... },          // present when logged with extra={"event": ...}
        "exc_info": "Traceback ..."  // present only on exceptions
    }

Otherwise a plain ``LEVEL logger: message`` format is used.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import IO, Any

_TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        event = getattr(record, "event", None)
        if event is not None:
            payload["event"] = event

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    *,
    structured: bool = False,
    verbose: bool = False,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install a single stderr handler on the root logger.

    ``verbose`` lowers the level to DEBUG; otherwise only warnings and
    errors are shown.  Any handler previously installed by this function
    is replaced.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if structured else logging.Formatter(_TEXT_FORMAT))
    handler.set_name("sqlqualify")

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "sqlqualify":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return handler
