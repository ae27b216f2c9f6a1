"""Deferred message construction for debug traces.

The pagination engine traces whole pages and constraint lists at DEBUG.
Callers hand over lambdas instead of strings so that nothing is formatted
unless the level is enabled.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Adapter whose message and positional args may be zero-argument callables.

    ``LoggerAdapter.debug``/``info``/... all route through ``log``, so this
    is the only hook needed.

    Example:
        ```python
        lazy_logger = get_lazy_logger(__name__)
        lazy_logger.debug(lambda: f"constraints={describe(constraints)}")
        lazy_logger.debug("Fetched %s rows", lambda: len(rows))
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *map(_resolve, args), **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """``LazyLoggerAdapter`` over ``logging.getLogger(name)``; ``context`` becomes ``extra``."""
    return LazyLoggerAdapter(logging.getLogger(name), context)
