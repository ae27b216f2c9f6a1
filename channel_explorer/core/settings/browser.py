"""Browsing behaviour settings.

Environment variables use BROWSER_ prefix.
Example: BROWSER_DEBOUNCE_MS=500

Page size is deliberately not configurable; see
``channel_explorer.features.channels.constants.PAGE_SIZE``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserSettings(BaseSettings):
    """Settings for the interactive page controller."""

    debounce_ms: int = Field(
        default=300,
        ge=0,
        le=10_000,
        description="Quiescence window before a filter/sort change triggers a fetch",
    )
    category_sample_size: int = Field(
        default=500,
        ge=1,
        le=10_000,
        description="Records scanned when discovering category tags",
    )

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def debounce_seconds(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_ms / 1000
