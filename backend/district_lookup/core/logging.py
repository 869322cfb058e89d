"""Root logger configuration for the lookup service.

Modules log through ``logging.getLogger(__name__)`` and attach lookup context
with ``extra=``: the layer involved, the query coordinate, and for matches the
resolved district and the precedence rule that produced it. Both output
formats carry that context, as trailing ``key=value`` pairs in text mode or
as top-level keys of a one-line JSON object.
"""

import datetime
import json
import logging
from typing import Any

CONTEXT_FIELDS = ("layer", "lat", "lng", "district", "rule", "polygon_count")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Lookup context attached to a record, in a fixed key order."""
    context = {}
    for field in CONTEXT_FIELDS:
        value = getattr(record, field, None)
        if value is not None:
            context[field] = value
    return context


class ContextTextFormatter(logging.Formatter):
    """Plain-text formatter that appends lookup context to the message."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line

        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, newline, trace = line.partition("\n")
        return f"{head} {pairs}{newline}{trace}"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(record.created, tz=datetime.UTC)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure the root logger.

    Existing root handlers are replaced so repeated application factory
    calls do not duplicate output. Uvicorn's per-request access log is
    limited to warnings.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_format: True for JSON lines, False for human-readable text.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else ContextTextFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
