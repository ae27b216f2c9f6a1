"""Backoff policy and retry predicates."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

import httpx

# Source API answers that are worth another attempt
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def is_retryable_http_error(exc: Exception) -> bool:
    """Transport failures and throttling/gateway responses from an HTTP API."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


@dataclass(frozen=True, slots=True)
class RetryStrategy:
    """Which failures to retry and how long to back off between attempts.

    The delay before retry ``n`` (0-based) is
    ``min(initial_delay * exponential_base ** n, max_delay)``, scaled by a
    random factor from ``jitter_range`` when ``jitter`` is on.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = True
    jitter_range: tuple[float, float] = (0.5, 1.5)
    exceptions: tuple[type[Exception], ...] = (Exception,)
    retry_if: Callable[[Exception], bool] | None = None

    def should_retry(self, exception: Exception) -> bool:
        if self.retry_if is not None:
            return self.retry_if(exception)
        return isinstance(exception, self.exceptions)

    def calculate_delay(self, attempt: int) -> float:
        delay = min(self.initial_delay * self.exponential_base**attempt, self.max_delay)
        if not self.jitter:
            return delay
        low, high = self.jitter_range
        return delay * random.uniform(low, high)
