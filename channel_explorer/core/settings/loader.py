"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process.

Testing:
    In tests, clear the cache to force reload:
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .browser import BrowserSettings
from .logs import LoggingSettings
from .store import StoreSettings
from .sync import SyncSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_store_settings() -> StoreSettings:
    """Get cached document store settings.

    Returns:
        Validated and frozen StoreSettings instance.
    """
    return StoreSettings()


@lru_cache(maxsize=1)
def get_browser_settings() -> BrowserSettings:
    """Get cached browsing settings.

    Returns:
        Validated and frozen BrowserSettings instance.
    """
    return BrowserSettings()


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """Get cached ingestion settings.

    Returns:
        Validated and frozen SyncSettings instance.
    """
    return SyncSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    """
    get_app_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_store_settings.cache_clear()
    get_browser_settings.cache_clear()
    get_sync_settings.cache_clear()
