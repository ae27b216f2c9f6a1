"""Exception hierarchy for channel-explorer.

Errors carry a human-readable message plus a ``details`` mapping so that
log records and HTTP problem responses can include structured context
without string parsing.

Taxonomy:
    StoreFetchError      page query failed (network or query construction)
    InvalidFilterError   constraint list the store cannot execute
    ConfigurationError   store or source credentials missing at startup
    SyncError            ingestion run failed
"""

from __future__ import annotations

from typing import Any


class ChannelExplorerError(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class StoreFetchError(ChannelExplorerError):
    """A page query against the document store failed.

    Never retried. Callers keep whatever page they were already showing.
    The original exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Failed to fetch channels",
        *,
        collection: str | None = None,
        direction: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if collection:
            details["collection"] = collection
        if direction:
            details["direction"] = direction
        super().__init__(message, details=details)


class InvalidFilterError(ChannelExplorerError):
    """Constraint list is malformed for the store's query engine.

    Raised by store adapters, e.g. when more than one field carries a
    range operator.
    """

    def __init__(self, message: str, filter_name: str | None = None) -> None:
        details = {"filter": filter_name} if filter_name else {}
        super().__init__(message, details=details)


class ConfigurationError(ChannelExplorerError):
    """Required configuration is missing. Fatal at startup."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        details = {"missing": missing} if missing else {}
        super().__init__(message, details=details)


class SyncError(ChannelExplorerError):
    """Ingestion from the source API failed."""


__all__ = [
    "ChannelExplorerError",
    "ConfigurationError",
    "InvalidFilterError",
    "StoreFetchError",
    "SyncError",
]
