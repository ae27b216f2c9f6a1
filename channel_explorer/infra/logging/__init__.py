"""Logging infrastructure.

Standard library logging with:
- JSONL or text output behind a QueueHandler + QueueListener
- Automatic contextvar injection (set_log_context)
- Lazy evaluation for expensive debug messages (get_lazy_logger)

Basic usage:
    import logging

    from channel_explorer.infra.logging import get_lazy_logger, set_log_context

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    set_log_context(command="browse")
    logger.info("Fetching page")
    lazy_logger.debug(lambda: f"Rows: {[row.id for row in rows]}")
"""

from channel_explorer.infra.logging.config import (
    configure_logging,
    setup_logging,
    shutdown,
)
from channel_explorer.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from channel_explorer.infra.logging.formatters import JSONFormatter
from channel_explorer.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
