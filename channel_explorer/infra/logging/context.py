"""Context management for structured logging.

Fields bound here are injected into every record emitted from the same
asyncio task. The CLI group binds ``command`` and ``PageController`` binds
``generation`` at the start of each fetch.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

# Each asyncio task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(command="browse", sort="subscribers")
        logger.info("Fetching first page")  # record carries command and sort
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy contextvar fields onto each LogRecord.

    Attached to the root queue handler so every logger benefits. Existing
    record attributes are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
