"""JSON log lines with request context and PII scrubbing."""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from ..middlewares.request_id import request_id_ctx

# Customer contact details and gateway payment ids found in free text.
_SCRUBBERS = (
    (re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+", re.I), "***"),
    (re.compile(r"(?<!\d)(?:\+?91[\s-]?)?\d{10}(?!\d)"), "***"),
    (re.compile(r"\b(pay_|order_)[A-Za-z0-9]{8,}\b"), r"\1***"),
)

# Optional attributes passed via ``extra=`` that become JSON keys.
CONTEXT_FIELDS = ("req_id", "route", "status", "latency_ms", "order_ref")


def scrub(text: str) -> str:
    for pattern, repl in _SCRUBBERS:
        text = pattern.sub(repl, text)
    return text


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "req_id", None) is None:
            record.req_id = request_id_ctx.get(None)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
        }
        for name in CONTEXT_FIELDS:
            data[name] = getattr(record, name, None)
        data["msg"] = scrub(record.getMessage())
        if record.exc_info:
            data["exc"] = scrub(self.formatException(record.exc_info))
        return json.dumps(data, default=str)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send every record to stderr as JSON at ``level`` (name or number)."""

    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
