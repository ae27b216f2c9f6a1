"""Async retry decorator with exponential backoff.

Only calls to the external channel source are wrapped. Store page queries
are never retried; a failed fetch surfaces to the caller immediately.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from .exceptions import RetryError, RetryStatistics
from .strategies import RetryStrategy

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    jitter_range: tuple[float, float] = (0.5, 1.5),
    exceptions: tuple[type[Exception], ...] = (Exception,),
    retry_if: Callable[[Exception], bool] | None = None,
    stop_after_delay: float | None = None,
    on_retry: Callable[[Exception, int], None] | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable while its failures match the strategy.

    Failures the strategy rejects propagate unchanged. Once ``max_attempts``
    calls have failed, or ``stop_after_delay`` seconds have passed, a
    ``RetryError`` chained to the last failure is raised.

    Example:
        @retry(max_attempts=5, retry_if=is_retryable_http_error)
        async def fetch() -> list[dict]: ...
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter,
        jitter_range=jitter_range,
        exceptions=exceptions,
        retry_if=retry_if,
    )

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        name = func.__qualname__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            statistics = RetryStatistics()
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not strategy.should_retry(e):
                        logger.warning(
                            "%s failed with a non-retryable error: %s", name, e,
                            extra={"function": name, "exception_type": type(e).__name__},
                        )
                        raise

                    attempt += 1
                    out_of_time = stop_after_delay is not None and statistics.elapsed >= stop_after_delay
                    if attempt >= strategy.max_attempts or out_of_time:
                        logger.error(
                            "%s failed after %d attempts", name, attempt,
                            extra={
                                "function": name,
                                "attempts": attempt,
                                "total_delay": statistics.total_delay,
                                "last_exception": str(e),
                            },
                        )
                        raise RetryError(e, attempt, statistics.finish()) from e

                    delay = strategy.calculate_delay(attempt - 1)
                    statistics.record(e, delay)
                    logger.warning(
                        "Retrying %s in %.2fs (attempt %d/%d): %s",
                        name, delay, attempt, strategy.max_attempts, e,
                        extra={"function": name, "attempt": attempt, "delay": delay},
                    )
                    if on_retry is not None:
                        on_retry(e, attempt)
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
