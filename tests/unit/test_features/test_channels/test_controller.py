"""Unit tests for PageController.

Organization:
    - Store doubles: gated and flaky wrappers around the memory store
    - Paging: first page, advance, retreat, reset
    - Filter and sort changes: debounce, staleness, deferred refresh
    - Failures and listeners
"""
from __future__ import annotations

import asyncio

import pytest

from channel_explorer.core.exceptions import StoreFetchError
from channel_explorer.features.channels.controller import PageController
from channel_explorer.features.channels.schemas import ChannelFilters, PageState, SortDirection, SortField
from channel_explorer.infra.logging import clear_log_context, get_log_context


# ============================================================================
# Store doubles
# ============================================================================


class RecordingStore:
    """Delegates to a real store and counts page queries."""

    def __init__(self, inner):
        self.inner = inner
        self.page_calls = 0
        self.count_calls = 0
        self.fail = False

    async def query_page(self, *args, **kwargs):
        self.page_calls += 1
        if self.fail:
            raise RuntimeError("store unavailable")
        return await self.inner.query_page(*args, **kwargs)

    async def count_matching(self, *args, **kwargs):
        self.count_calls += 1
        return await self.inner.count_matching(*args, **kwargs)

    async def upsert_many(self, *args, **kwargs):
        return await self.inner.upsert_many(*args, **kwargs)

    async def sample(self, *args, **kwargs):
        return await self.inner.sample(*args, **kwargs)

    async def close(self):
        await self.inner.close()


class GatedStore(RecordingStore):
    """Page queries block until ``gate`` is set."""

    def __init__(self, inner):
        super().__init__(inner)
        self.gate = asyncio.Event()

    async def query_page(self, *args, **kwargs):
        await self.gate.wait()
        return await super().query_page(*args, **kwargs)


def _ids(controller: PageController) -> list[str]:
    return [channel.id for channel in controller.channels]


# ============================================================================
# Paging
# ============================================================================


@pytest.mark.unit
class TestPaging:
    """Navigation across the forty seeded records."""

    @pytest.mark.asyncio
    async def test_initial_load(self, memory_store):
        """Default filters show 25 records with a total of 40."""
        controller = PageController(memory_store)

        assert await controller.refresh() is True

        assert len(controller.channels) == 25
        assert controller.has_next is True
        assert controller.has_prev is False
        assert controller.total_count == 40
        assert controller.total_pages == 2
        assert controller.current_page == 1
        assert controller.loading is False
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_advance_to_last_page(self, memory_store):
        controller = PageController(memory_store)
        await controller.refresh()

        assert await controller.advance() is True

        assert len(controller.channels) == 15
        assert controller.has_next is False
        assert controller.has_prev is True
        assert controller.current_page == 2

    @pytest.mark.asyncio
    async def test_advance_at_end_is_noop(self, memory_store):
        controller = PageController(memory_store)
        await controller.refresh()
        await controller.advance()

        assert await controller.advance() is False
        assert controller.current_page == 2

    @pytest.mark.asyncio
    async def test_retreat_returns_to_first_page(self, memory_store):
        controller = PageController(memory_store)
        await controller.refresh()
        first_ids = _ids(controller)
        await controller.advance()

        assert await controller.retreat() is True

        assert _ids(controller) == first_ids
        assert controller.current_page == 1
        assert controller.has_prev is True
        assert controller.has_next is True

    @pytest.mark.asyncio
    async def test_retreat_past_first_page_shows_empty_page(self, memory_store):
        """A boundary always implies a previous page; the store has none before page 1."""
        controller = PageController(memory_store)
        await controller.refresh()
        await controller.advance()
        await controller.retreat()

        assert await controller.retreat() is True

        assert controller.channels == ()
        assert controller.current_page == 1
        assert await controller.retreat() is False
        assert await controller.advance() is False

        await controller.reset()
        assert _ids(controller)[0] == "ch-000"

    @pytest.mark.asyncio
    async def test_retreat_on_first_page_is_noop(self, memory_store):
        controller = PageController(memory_store)
        await controller.refresh()

        assert await controller.retreat() is False

    @pytest.mark.asyncio
    async def test_reset_is_idempotent(self, memory_store):
        controller = PageController(memory_store)
        await controller.refresh()
        await controller.advance()

        await controller.reset()
        once = controller.state
        await controller.reset()

        assert controller.state == once
        assert controller.current_page == 1
        assert _ids(controller)[0] == "ch-000"

    @pytest.mark.asyncio
    async def test_residual_page_can_be_short(self, memory_store):
        """Search removes rows after fetch but has_next still reflects the raw page."""
        controller = PageController(memory_store, filters=ChannelFilters(search="channel 1"))

        await controller.refresh()

        assert _ids(controller) == ["ch-001"] + [f"ch-{i:03d}" for i in range(10, 20)]
        assert controller.has_next is True
        assert controller.total_count == 40

    @pytest.mark.asyncio
    async def test_advance_while_busy_is_noop(self, memory_store):
        store = GatedStore(memory_store)
        controller = PageController(store)
        pending = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)

        assert controller.busy
        assert await controller.advance() is False
        assert await controller.retreat() is False

        store.gate.set()
        assert await pending is True
        assert store.page_calls == 1


# ============================================================================
# Filter and sort changes
# ============================================================================


@pytest.mark.unit
class TestSpecChanges:
    """Debounced refreshes after filter and sort changes."""

    @pytest.mark.asyncio
    async def test_filter_change_is_debounced(self, memory_store):
        store = RecordingStore(memory_store)
        controller = PageController(store, debounce_seconds=0.05)

        controller.set_filters(search="g")
        controller.set_filters(search="ga")
        controller.set_filters(search="gaming")
        assert store.page_calls == 0

        await controller.wait_until_idle()

        assert store.page_calls == 1
        assert controller.filters.search == "gaming"
        assert controller.generation == 3

    @pytest.mark.asyncio
    async def test_change_resets_to_first_page(self, memory_store):
        controller = PageController(memory_store, debounce_seconds=0)
        await controller.refresh()
        await controller.advance()

        controller.set_filters(quality=("high",))
        await controller.wait_until_idle()

        assert controller.current_page == 1
        assert controller.total_count == 14
        assert all(channel.quality == "high" for channel in controller.channels)

    @pytest.mark.asyncio
    async def test_identical_filters_do_not_refetch(self, memory_store):
        store = RecordingStore(memory_store)
        controller = PageController(store, debounce_seconds=0)

        controller.set_filters(search="")
        await controller.wait_until_idle()

        assert controller.generation == 0
        assert store.page_calls == 0

    @pytest.mark.asyncio
    async def test_set_sort_keeps_direction(self, memory_store):
        controller = PageController(memory_store, debounce_seconds=0)

        controller.set_sort("rpm")
        await controller.wait_until_idle()

        assert controller.sort.field is SortField.RPM
        assert controller.sort.direction is SortDirection.DESC
        assert _ids(controller)[0] == "ch-039"

    @pytest.mark.asyncio
    async def test_reset_filters(self, memory_store):
        controller = PageController(
            memory_store, filters=ChannelFilters(is_monetized=True), debounce_seconds=0
        )
        await controller.refresh()
        assert controller.total_count == 20

        controller.reset_filters()
        await controller.wait_until_idle()

        assert controller.filters.is_default
        assert controller.total_count == 40

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self, memory_store):
        """A change during an in-flight fetch wins; the old page is never shown."""
        store = GatedStore(memory_store)
        controller = PageController(store, debounce_seconds=0)
        shown: list[PageState] = []
        controller.subscribe(shown.append)

        first = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        controller.set_filters(quality=("high",))
        await asyncio.sleep(0.01)

        store.gate.set()
        assert await first is False
        await controller.wait_until_idle()

        assert controller.generation == 1
        assert controller.channels
        assert all(channel.quality == "high" for channel in controller.channels)
        settled = [state for state in shown if not state.loading and state.channels]
        assert all(state.generation == 1 for state in settled)

    @pytest.mark.asyncio
    async def test_aclose_cancels_pending_refresh(self, memory_store):
        controller = PageController(memory_store, debounce_seconds=0)
        controller.set_filters(has_shorts=True)
        await controller.aclose()

        assert controller.filters.has_shorts is True
        assert controller.channels == ()


# ============================================================================
# Failures and listeners
# ============================================================================


@pytest.mark.unit
class TestFailures:
    """Store failures keep the previous page."""

    @pytest.mark.asyncio
    async def test_failed_advance_keeps_page(self, memory_store):
        store = RecordingStore(memory_store)
        controller = PageController(store)
        await controller.refresh()
        before = _ids(controller)
        store.fail = True

        with pytest.raises(StoreFetchError):
            await controller.advance()

        assert _ids(controller) == before
        assert controller.current_page == 1
        assert controller.loading is False
        assert controller.busy is False
        assert isinstance(controller.error, StoreFetchError)
        assert controller.state.error is not None

    @pytest.mark.asyncio
    async def test_error_cleared_by_next_success(self, memory_store):
        store = RecordingStore(memory_store)
        controller = PageController(store)
        store.fail = True
        with pytest.raises(StoreFetchError):
            await controller.refresh()

        store.fail = False
        await controller.refresh()

        assert controller.error is None
        assert len(controller.channels) == 25

    @pytest.mark.asyncio
    async def test_debounced_failure_is_published(self, memory_store):
        store = RecordingStore(memory_store)
        store.fail = True
        controller = PageController(store, debounce_seconds=0)

        controller.set_filters(is_faceless=True)
        await controller.wait_until_idle()

        assert controller.error is not None
        assert controller.loading is False


@pytest.mark.unit
class TestListeners:
    """State snapshots published to subscribers."""

    @pytest.mark.asyncio
    async def test_loading_then_loaded(self, memory_store):
        controller = PageController(memory_store)
        states: list[PageState] = []
        controller.subscribe(states.append)

        await controller.refresh()

        assert [state.loading for state in states] == [True, False]
        assert len(states[-1].channels) == 25
        assert states[-1].total_pages == 2

    @pytest.mark.asyncio
    async def test_unsubscribe(self, memory_store):
        controller = PageController(memory_store)
        states: list[PageState] = []
        unsubscribe = controller.subscribe(states.append)

        unsubscribe()
        await controller.refresh()

        assert states == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_refresh(self, memory_store):
        controller = PageController(memory_store)

        def broken(state):
            raise ValueError("render failed")

        controller.subscribe(broken)

        assert await controller.refresh() is True
        assert len(controller.channels) == 25

    @pytest.mark.asyncio
    async def test_load_categories(self, memory_store):
        controller = PageController(memory_store)

        categories = await controller.load_categories()

        assert "Gaming" in categories
        assert controller.categories == categories


@pytest.mark.unit
class TestLogContext:
    """Fetches run with the controller generation bound for logging."""

    @pytest.mark.asyncio
    async def test_generation_bound_during_fetch(self, memory_store):
        seen: list[dict] = []

        class ContextRecordingStore(RecordingStore):
            async def query_page(self, *args, **kwargs):
                seen.append(get_log_context())
                return await super().query_page(*args, **kwargs)

        clear_log_context()
        controller = PageController(ContextRecordingStore(memory_store), debounce_seconds=0)
        await controller.refresh()
        controller.set_filters(quality=("high",))
        await controller.wait_until_idle()

        assert [context["generation"] for context in seen] == [0, 1]
