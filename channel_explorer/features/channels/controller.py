"""Page controller: filters and sort in, published page snapshots out.

Every filter or sort change bumps a generation counter, clears the cursors
and (re)starts a debounce timer. Only an uninterrupted timer triggers a fetch
of page 1 together with the total count. At most one page fetch runs at a
time: a refresh requested while one is in flight is deferred and replayed
when it settles, and any result whose generation is no longer current is
dropped instead of published.

Usage:
    controller = PageController(store)
    controller.subscribe(render)
    await controller.refresh()
    controller.set_filters(search="gaming")   # debounced
    await controller.wait_until_idle()
    await controller.advance()
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any

from channel_explorer.core.exceptions import StoreFetchError
from channel_explorer.core.pagination import CursorData, RawPage
from channel_explorer.core.settings import get_browser_settings
from channel_explorer.features.channels.catalog import list_categories
from channel_explorer.features.channels.constants import PAGE_SIZE
from channel_explorer.features.channels.count import CountEstimator
from channel_explorer.features.channels.cursors import CursorManager, Move
from channel_explorer.features.channels.executor import QueryExecutor
from channel_explorer.features.channels.planner import PlanResult, plan_filters
from channel_explorer.features.channels.residual import apply_residual_filters
from channel_explorer.features.channels.schemas import (
    DEFAULT_FILTERS,
    DEFAULT_SORT,
    Channel,
    ChannelFilters,
    PageState,
    SortDirection,
    SortField,
    SortSpec,
)
from channel_explorer.infra.logging import set_log_context
from channel_explorer.infra.store.base import BoundaryMode, ChannelStore

logger = logging.getLogger(__name__)

Listener = Callable[[PageState], Any]


class PageController:
    """Stateful browser over a channel store.

    Filter and sort mutators (``set_filters``, ``replace_filters``, ``reset_filters``,
    ``set_sort``) schedule work on the running event loop and must be
    called from within it.

    Args:
        store: Store adapter.
        collection: Collection holding channel records.
        filters: Initial filters, e.g. parsed from URL state.
        sort: Initial sort.
        debounce_seconds: Quiescence window; defaults to ``BROWSER_DEBOUNCE_MS``.
    """

    def __init__(
        self,
        store: ChannelStore,
        *,
        collection: str = "channels",
        filters: ChannelFilters | None = None,
        sort: SortSpec | None = None,
        debounce_seconds: float | None = None,
    ) -> None:
        settings = get_browser_settings()
        self.debounce_seconds = (
            settings.debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.category_sample_size = settings.category_sample_size
        self.store = store
        self.collection = collection
        self.executor = QueryExecutor(store, collection=collection)
        self.estimator = CountEstimator(store, collection=collection)

        self._filters = filters or DEFAULT_FILTERS
        self._sort = sort or DEFAULT_SORT
        self.cursors = CursorManager(self._filters, self._sort)

        self._channels: tuple[Channel, ...] = ()
        self._total_count = 0
        self._loading = False
        self._error: StoreFetchError | None = None
        self.categories: list[str] = []

        self._generation = 0
        self._busy = False
        self._pending_refresh = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._debounce_task: asyncio.Task[None] | None = None
        self._followup_task: asyncio.Task[None] | None = None
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def filters(self) -> ChannelFilters:
        return self._filters

    @property
    def sort(self) -> SortSpec:
        return self._sort

    @property
    def channels(self) -> tuple[Channel, ...]:
        return self._channels

    @property
    def has_next(self) -> bool:
        return self.cursors.has_next

    @property
    def has_prev(self) -> bool:
        return self.cursors.has_prev

    @property
    def current_page(self) -> int:
        return self.cursors.current_page

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def total_pages(self) -> int:
        return math.ceil(self._total_count / PAGE_SIZE)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> StoreFetchError | None:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def state(self) -> PageState:
        return PageState(
            channels=self._channels,
            filters=self._filters,
            sort=self._sort,
            has_next=self.has_next,
            has_prev=self.has_prev,
            current_page=self.current_page,
            total_count=self._total_count,
            total_pages=self.total_pages,
            loading=self._loading,
            error=str(self._error) if self._error else None,
            generation=self._generation,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Page state listener failed", extra={"listener": repr(listener)})

    # ------------------------------------------------------------------
    # Filter and sort changes
    # ------------------------------------------------------------------

    def set_filters(self, **overrides: Any) -> None:
        """Merge ``overrides`` into the current filters and schedule a refresh."""
        self.replace_filters(self._filters.merge(**overrides))

    def replace_filters(self, filters: ChannelFilters) -> None:
        self._change_specs(filters, self._sort)

    def reset_filters(self) -> None:
        self.replace_filters(DEFAULT_FILTERS)

    def set_sort(
        self,
        field: SortField | str,
        direction: SortDirection | str | None = None,
    ) -> None:
        """Switch sort; ``direction`` defaults to the current one."""
        sort = SortSpec(
            field=SortField(field),
            direction=SortDirection(direction) if direction else self._sort.direction,
        )
        self._change_specs(self._filters, sort)

    def _change_specs(self, filters: ChannelFilters, sort: SortSpec) -> None:
        if filters == self._filters and sort == self._sort:
            return
        self._filters = filters
        self._sort = sort
        self._generation += 1
        self.cursors.bind(filters, sort)
        logger.debug("Specs changed", extra={"generation": self._generation})
        self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_task = loop.create_task(self._debounced_refresh(self._generation))

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounced_refresh(self, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self._generation:
            return
        # Past the timer; a later filter or sort change must not cancel the fetch itself
        self._debounce_task = None
        try:
            await self.refresh()
        except StoreFetchError:
            # Published as state.error by refresh
            return

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Load page 1 and the total count for the current specs.

        Returns:
            True if a page was published, False if the fetch was deferred
            (another fetch in flight) or its result went stale.

        Raises:
            StoreFetchError: The page query failed. The previous page stays.
        """
        if self._busy:
            self._pending_refresh = True
            logger.debug("Fetch in flight, deferring refresh")
            return False

        generation = self._generation
        filters, sort = self._filters, self._sort
        plan = plan_filters(filters)

        self._begin(clear_error=True)
        try:
            page, total = await asyncio.gather(
                self.executor.fetch_page(
                    plan.constraints, sort, fingerprint=self.cursors.fingerprint
                ),
                self.estimator.count(filters),
            )
        except StoreFetchError as e:
            self._fail(generation, e)
            raise
        finally:
            self._settle()

        if generation != self._generation:
            logger.debug("Discarding stale first page", extra={"generation": generation})
            return False

        self._total_count = total
        self._show(page, filters, plan, move="first")
        return True

    async def reset(self) -> bool:
        """Drop the current position and reload page 1."""
        self._cancel_debounce()
        if self._busy:
            self._pending_refresh = True
            return False
        self.cursors.reset()
        return await self.refresh()

    async def advance(self) -> bool:
        """Load the next page. No-op (False) when busy or at the end.

        Raises:
            StoreFetchError: The page query failed. The current page stays.
        """
        if self._busy:
            return False
        cursor = self.cursors.next_cursor()
        if cursor is None:
            return False
        return await self._navigate(cursor, BoundaryMode.AFTER, "next")

    async def retreat(self) -> bool:
        """Load the previous page. No-op (False) when busy or at the start.

        Raises:
            StoreFetchError: The page query failed. The current page stays.
        """
        if self._busy:
            return False
        cursor = self.cursors.prev_cursor()
        if cursor is None:
            return False
        return await self._navigate(cursor, BoundaryMode.BEFORE, "prev")

    async def _navigate(self, cursor: CursorData, direction: BoundaryMode, move: Move) -> bool:
        generation = self._generation
        filters, sort = self._filters, self._sort
        plan = plan_filters(filters)

        self._begin(clear_error=False)
        try:
            page = await self.executor.fetch_page(
                plan.constraints,
                sort,
                cursor=cursor,
                direction=direction,
                fingerprint=self.cursors.fingerprint,
            )
        except StoreFetchError as e:
            self._fail(generation, e)
            raise
        finally:
            self._settle()

        if generation != self._generation:
            logger.debug("Discarding stale %s page", move, extra={"generation": generation})
            return False

        self._show(page, filters, plan, move=move)
        return True

    async def load_categories(self) -> list[str]:
        """Discover category tags for the filter form."""
        self.categories = await list_categories(
            self.store,
            collection=self.collection,
            sample_size=self.category_sample_size,
        )
        return self.categories

    def _begin(self, *, clear_error: bool) -> None:
        # Tags every record the fetch emits, store and executor included
        set_log_context(generation=self._generation)
        self._busy = True
        self._idle.clear()
        self._loading = True
        if clear_error:
            self._error = None
        self._publish()

    def _settle(self) -> None:
        self._busy = False
        self._idle.set()
        if self._pending_refresh:
            self._pending_refresh = False
            loop = asyncio.get_running_loop()
            self._followup_task = loop.create_task(self._run_followup())

    async def _run_followup(self) -> None:
        try:
            await self.refresh()
        except StoreFetchError:
            # Published as state.error by refresh
            return

    def _fail(self, generation: int, error: StoreFetchError) -> None:
        if generation != self._generation:
            logger.debug("Ignoring failure of stale fetch", extra={"generation": generation})
            return
        self._error = error
        self._loading = False
        self._publish()

    def _show(
        self,
        page: RawPage[Channel],
        filters: ChannelFilters,
        plan: PlanResult,
        *,
        move: Move,
    ) -> None:
        self.cursors.record(page, move)
        self._channels = tuple(apply_residual_filters(page.items, filters, plan))
        self._error = None
        self._loading = False
        logger.info(
            "Showing page %d: %d of %d fetched channels",
            self.current_page,
            len(self._channels),
            len(page.items),
            extra={"generation": self._generation, "total_count": self._total_count},
        )
        self._publish()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_until_idle(self) -> None:
        """Wait until no debounce timer, deferred refresh or fetch is outstanding."""
        while True:
            tasks = [
                task
                for task in (self._debounce_task, self._followup_task)
                if task is not None and not task.done()
            ]
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
                continue
            if not self._idle.is_set():
                await self._idle.wait()
                continue
            return

    async def aclose(self) -> None:
        """Cancel timers and deferred work."""
        self._cancel_debounce()
        if self._followup_task is not None and not self._followup_task.done():
            self._followup_task.cancel()
        self._followup_task = None


__all__ = ["Listener", "PageController"]
