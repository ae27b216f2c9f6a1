"""FastAPI dependencies shared by routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from channel_explorer.core.exceptions import ConfigurationError
from channel_explorer.core.settings import StoreSettings, get_store_settings
from channel_explorer.infra.store.base import ChannelStore


def get_channel_store(request: Request) -> ChannelStore:
    """Store created by the application lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ConfigurationError("Channel store is not initialized")
    return store


StoreDep = Annotated[ChannelStore, Depends(get_channel_store)]
StoreSettingsDep = Annotated[StoreSettings, Depends(get_store_settings)]
