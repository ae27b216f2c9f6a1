"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings isolation
    - Record Fixtures: channel record factories
    - Store Fixtures: seeded memory and SQL stores
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

# Tests never read a developer's .env or reach real services
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("BROWSER_DEBOUNCE_MS", "10")

QUALITIES = ("high", "medium", "low")
CATEGORY_SETS = (
    ["Gaming"],
    ["Cooking", "Lifestyle"],
    ["Tech"],
    ["Gaming Tips", "Education"],
)


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reload settings for every test so monkeypatched env vars apply."""
    from channel_explorer.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Record Fixtures
# ============================================================================


def make_record(index: int, **overrides: Any) -> dict[str, Any]:
    """Store document for channel ``index``.

    Subscribers strictly decrease with the index, so a subscribers/desc sort
    returns records in index order.
    """
    record = {
        "id": f"ch-{index:03d}",
        "title": f"Channel {index}",
        "subscribers": 100_000 - index * 1_000,
        "avgMonthlyRevenue": 500.0 + index * 50,
        "totalViews": 1_000_000 + index * 10_000,
        "rpm": 2.0 + index / 10,
        "numOfUploads": 100 + index,
        "avgViewPerVideo": 5_000.0,
        "daysSinceStart": 365 + index,
        "outlierScore": float(index % 7),
        "quality": QUALITIES[index % 3],
        "isMonetized": index % 2 == 0,
        "isFaceless": index % 3 == 0,
        "hasShorts": index % 4 == 0,
        "categories": list(CATEGORY_SETS[index % 4]),
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factory() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def channel_records() -> list[dict[str, Any]]:
    """Forty records, enough for one full page plus a partial second page."""
    return [make_record(i) for i in range(40)]


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def memory_store(channel_records):
    from channel_explorer.infra.store import MemoryChannelStore

    return MemoryChannelStore({"channels": channel_records})


@pytest.fixture
async def sql_store(tmp_path, channel_records) -> AsyncGenerator:
    """SQL store on a throwaway SQLite file, seeded with ``channel_records``."""
    from channel_explorer.infra.store import SQLChannelStore

    store = SQLChannelStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'channels.db'}")
    await store.create_schema()
    await store.upsert_many("channels", channel_records)
    yield store
    await store.close()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(memory_store):
    """FastAPI application serving the seeded memory store."""
    from channel_explorer.app.main import create_app

    return create_app(store=memory_store)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app without a network socket."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
