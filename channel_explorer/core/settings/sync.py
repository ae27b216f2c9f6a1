"""Source API settings for the ingestion job.

Environment variables use SYNC_ prefix.
Example: SYNC_API_URL=https://api.example.com/channels, SYNC_API_TOKEN=...
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncSettings(BaseSettings):
    """Settings for pulling channel records from the source API."""

    api_url: str | None = Field(
        default=None,
        description="Full URL of the channel listing endpoint",
    )
    api_token: SecretStr | None = Field(
        default=None,
        description="Bearer token for the source API",
    )
    referer: str | None = Field(
        default=None,
        description="Origin/Referer the source API expects",
    )
    batch_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Records per store write batch",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="HTTP timeout in seconds",
    )
    max_retries: int = Field(default=3, ge=1, le=10)

    model_config = SettingsConfigDict(
        env_prefix="SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def missing(self) -> list[str]:
        """Names of required settings that are unset."""
        missing = []
        if not self.api_url:
            missing.append("SYNC_API_URL")
        if not self.api_token or not self.api_token.get_secret_value():
            missing.append("SYNC_API_TOKEN")
        return missing
