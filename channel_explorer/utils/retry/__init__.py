"""Retry with exponential backoff for calls to external services."""

from __future__ import annotations

from channel_explorer.utils.retry.decorator import retry
from channel_explorer.utils.retry.exceptions import RetryError, RetryStatistics
from channel_explorer.utils.retry.strategies import (
    RETRYABLE_STATUS_CODES,
    RetryStrategy,
    is_retryable_http_error,
)

__all__ = [
    "RETRYABLE_STATUS_CODES",
    "RetryError",
    "RetryStatistics",
    "RetryStrategy",
    "is_retryable_http_error",
    "retry",
]
