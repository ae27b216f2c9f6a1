"""Store bootstrap from settings."""

from __future__ import annotations

import logging

from channel_explorer.core.exceptions import ConfigurationError
from channel_explorer.core.settings import StoreSettings, get_store_settings
from channel_explorer.infra.store.base import ChannelStore
from channel_explorer.infra.store.memory import MemoryChannelStore
from channel_explorer.infra.store.sql import SQLChannelStore

logger = logging.getLogger(__name__)


async def create_channel_store(settings: StoreSettings | None = None) -> ChannelStore:
    """Build the configured store adapter.

    The SQL adapter creates its tables on first use.

    Raises:
        ConfigurationError: ``backend`` is ``sql`` but no database URL is set.
    """
    settings = settings or get_store_settings()

    if settings.backend == "memory":
        logger.info("Using in-memory channel store")
        return MemoryChannelStore()

    if not settings.is_configured:
        msg = "SQL store selected but STORE_DATABASE_URL is not set"
        raise ConfigurationError(msg, missing=["STORE_DATABASE_URL"])

    url = settings.database_url.get_secret_value()  # type: ignore[union-attr]
    store = SQLChannelStore.from_url(url, echo=settings.echo)
    await store.create_schema()
    logger.info("Using SQL channel store", extra={"dialect": store.engine.dialect.name})
    return store
