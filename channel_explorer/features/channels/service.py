"""Stateless page access for request/response callers.

The interactive ``PageController`` keeps cursors between calls. HTTP clients
instead hand back the opaque ``start_cursor``/``end_cursor`` tokens they were
given; this service decodes them and runs the same planner, executor and
residual stages.
"""

from __future__ import annotations

import logging

from channel_explorer.core.pagination import CursorCodec, CursorData, compute_fingerprint
from channel_explorer.features.channels.catalog import DEFAULT_SAMPLE_SIZE, list_categories
from channel_explorer.features.channels.count import CountEstimator
from channel_explorer.features.channels.executor import QueryExecutor
from channel_explorer.features.channels.planner import plan_filters
from channel_explorer.features.channels.residual import apply_residual_filters
from channel_explorer.features.channels.schemas import ChannelFilters, ChannelPage, SortSpec
from channel_explorer.infra.store.base import BoundaryMode, ChannelStore

logger = logging.getLogger(__name__)


def _decode(token: str | None) -> CursorData | None:
    if not token:
        return None
    try:
        return CursorCodec.decode(token)
    except ValueError:
        # Invalid cursor, treat as first page
        logger.info("Ignoring undecodable cursor token")
        return None


class ChannelBrowseService:
    def __init__(self, store: ChannelStore, *, collection: str = "channels") -> None:
        self.store = store
        self.collection = collection
        self.executor = QueryExecutor(store, collection=collection)
        self.estimator = CountEstimator(store, collection=collection)

    async def get_page(
        self,
        filters: ChannelFilters,
        sort: SortSpec,
        *,
        after: str | None = None,
        before: str | None = None,
    ) -> ChannelPage:
        """One displayed page. ``before`` wins when both tokens are given.

        Raises:
            StoreFetchError: The page query failed.
        """
        plan = plan_filters(filters)
        fingerprint = compute_fingerprint(filters, sort)

        cursor = _decode(before)
        direction = BoundaryMode.BEFORE
        if cursor is None:
            cursor = _decode(after)
            direction = BoundaryMode.AFTER

        page = await self.executor.fetch_page(
            plan.constraints,
            sort,
            cursor=cursor,
            direction=direction,
            fingerprint=fingerprint,
        )
        return ChannelPage(
            channels=apply_residual_filters(page.items, filters, plan),
            has_next=page.has_next,
            has_prev=page.has_prev,
            first=page.first,
            last=page.last,
            raw_count=len(page.items),
        )

    async def count(self, filters: ChannelFilters) -> int:
        return await self.estimator.count(filters)

    async def categories(self, sample_size: int = DEFAULT_SAMPLE_SIZE) -> list[str]:
        return await list_categories(self.store, collection=self.collection, sample_size=sample_size)


__all__ = ["ChannelBrowseService"]
