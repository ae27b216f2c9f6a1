"""JSON Lines formatter for machine-readable logs."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else on a record came from ``extra``
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}

DEFAULT_FIELDS = {"level": "levelname", "logger": "name", "message": "message"}


def _utc_timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps, ``extra`` fields flattened in.

    Example output::

        {"level": "INFO", "logger": "channel_explorer.features.channels.controller",
         "message": "Published page", "timestamp": "2025-01-01T00:00:00.123Z", "page": 2}

    Args:
        fmt_keys: Output key to LogRecord attribute mapping.
        static: Fields stamped on every line, e.g. ``{"service": "channel-explorer"}``.
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or DEFAULT_FIELDS
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        payload: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        payload["timestamp"] = _utc_timestamp(record.created)
        # json.dumps escapes embedded newlines, so tracebacks stay on one line
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_trace"] = self.formatStack(record.stack_info)
        payload.update(self.static)
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in payload
        )
        return json.dumps(payload, ensure_ascii=False, default=str)
