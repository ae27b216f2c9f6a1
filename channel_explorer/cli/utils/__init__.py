"""CLI utilities."""

from channel_explorer.cli.utils.async_runner import coro
from channel_explorer.cli.utils.formatters import (
    channel_table,
    error,
    header,
    info,
    section,
    stats_summary,
    success,
    warning,
)

__all__ = [
    "channel_table",
    "coro",
    "error",
    "header",
    "info",
    "section",
    "stats_summary",
    "success",
    "warning",
]
