"""Retry outcome types."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class RetryStatistics:
    """What happened across the attempts of one call."""

    attempts: int = 0
    total_delay: float = 0.0
    start_time: float = field(default_factory=time.monotonic)
    end_time: float = 0.0
    exceptions: list[str] = field(default_factory=list)

    def record(self, exc: Exception, delay: float) -> None:
        """Note a failed attempt that will be retried after ``delay`` seconds."""
        self.attempts += 1
        self.total_delay += delay
        self.exceptions.append(type(exc).__name__)

    def finish(self) -> RetryStatistics:
        self.end_time = time.monotonic()
        return self

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class RetryError(Exception):
    """The last permitted attempt failed; the final error is chained."""

    def __init__(
        self,
        last_exception: Exception,
        attempts: int,
        statistics: RetryStatistics | None = None,
    ) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        self.statistics = statistics
        super().__init__(f"Gave up after {attempts} attempts: {last_exception}")
