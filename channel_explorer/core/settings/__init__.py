"""Modular Pydantic Settings v2 configuration.

Each concern owns a frozen settings model with its own environment prefix
(APP_, LOG_, STORE_, BROWSER_, SYNC_). Import settings via the cached loaders:

    from channel_explorer.core.settings import get_store_settings

    settings = get_store_settings()
"""

from __future__ import annotations

from .app import AppSettings
from .browser import BrowserSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_browser_settings,
    get_logging_settings,
    get_store_settings,
    get_sync_settings,
)
from .logs import LoggingSettings
from .store import StoreSettings
from .sync import SyncSettings

__all__ = [
    "AppSettings",
    "BrowserSettings",
    "LoggingSettings",
    "StoreSettings",
    "SyncSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_browser_settings",
    "get_logging_settings",
    "get_store_settings",
    "get_sync_settings",
]
