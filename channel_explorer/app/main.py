"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from channel_explorer.app.exception_handlers import configure_exception_handlers
from channel_explorer.core.settings import get_app_settings, get_logging_settings
from channel_explorer.features.channels.router import router as channels_router
from channel_explorer.infra.logging import setup_logging
from channel_explorer.infra.store import ChannelStore, create_channel_store

logger = logging.getLogger(__name__)


def create_app(store: ChannelStore | None = None) -> FastAPI:
    """Create and configure the application.

    Args:
        store: Store to serve from. When omitted the lifespan builds one from
            ``StoreSettings`` and closes it on shutdown.
    """
    app_settings = get_app_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(get_logging_settings())
        owned = store is None
        app.state.store = await create_channel_store() if owned else store
        logger.info("Application started", extra={"version": app_settings.version})
        try:
            yield
        finally:
            if owned:
                await app.state.store.close()
            logger.info("Application stopped")

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    # Usable without running the lifespan (e.g. ASGITransport in tests)
    if store is not None:
        app.state.store = store

    configure_exception_handlers(app)
    app.include_router(channels_router, prefix=app_settings.api_prefix)

    @app.get("/health", tags=["health"], include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
