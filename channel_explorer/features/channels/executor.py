"""Single page fetch with one-record over-fetch.

Forward pages ask the store for ``P + 1`` records after the boundary; the
extra record proves a next page exists and is dropped. Backward pages ask
for the last ``P + 1`` records before the boundary and drop the one farthest
from it, so the page stays adjacent to where the caller came from.

``has_prev`` is true whenever a boundary cursor was supplied, in either
direction. A backward page takes ``has_next`` from its boundary too, since
the boundary record itself follows it.

Store errors are never retried here. They surface as ``StoreFetchError``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from channel_explorer.core.exceptions import StoreFetchError
from channel_explorer.core.pagination import CursorCodec, CursorData, RawPage
from channel_explorer.features.channels.constants import PAGE_SIZE
from channel_explorer.features.channels.schemas import Channel, SortSpec
from channel_explorer.infra.logging import get_lazy_logger
from channel_explorer.infra.store.base import BoundaryMode, ChannelStore, Constraint

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class QueryExecutor:
    """Runs page queries against a ``ChannelStore``.

    Args:
        store: Store adapter.
        collection: Collection holding channel records.
        page_size: Records per page. Fixed for the lifetime of the executor.
    """

    def __init__(
        self,
        store: ChannelStore,
        *,
        collection: str = "channels",
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.store = store
        self.collection = collection
        self.page_size = page_size

    async def fetch_page(
        self,
        constraints: Sequence[Constraint],
        sort: SortSpec,
        *,
        cursor: CursorData | None = None,
        direction: BoundaryMode = BoundaryMode.AFTER,
        fingerprint: str = "",
    ) -> RawPage[Channel]:
        """Fetch one page.

        Args:
            constraints: Pushable constraints from the planner.
            sort: Active sort.
            cursor: Boundary record; ``None`` for the first page.
            direction: ``AFTER`` for the next page, ``BEFORE`` for the previous.
            fingerprint: Digest of the active specs. Cursors minted under other
                specs are ignored and the first page is returned instead.

        Returns:
            Raw (pre-residual) page with first/last cursors.

        Raises:
            StoreFetchError: The store query failed or could not be built.
        """
        if cursor is not None and fingerprint and not cursor.matches(fingerprint):
            logger.info(
                "Discarding cursor minted under different filters or sort",
                extra={"cursor_fingerprint": cursor.fingerprint, "fingerprint": fingerprint},
            )
            cursor = None
            direction = BoundaryMode.AFTER

        limit = self.page_size + 1
        lazy_logger.debug(
            lambda: f"Fetching {self.collection} {direction} "
            f"constraints=[{', '.join(str(c) for c in constraints)}] "
            f"sort={sort.field}/{sort.direction} cursor={cursor.record_id if cursor else None}"
        )

        try:
            rows = await self.store.query_page(
                self.collection,
                list(constraints),
                sort,
                limit,
                boundary=cursor,
                boundary_mode=direction,
            )
            full = len(rows) == limit
            if direction is BoundaryMode.BEFORE:
                rows = rows[1:] if full else rows
            else:
                rows = rows[: self.page_size]
            # Any boundary means navigation started past page 1; the previous
            # page is not re-checked for being non-empty
            has_prev = cursor is not None
            has_next = full if direction is BoundaryMode.AFTER else cursor is not None

            page = self._build_page(rows, sort, fingerprint, has_next=has_next, has_prev=has_prev)
        except Exception as e:
            logger.error(
                "Channel page query failed",
                extra={
                    "collection": self.collection,
                    "direction": str(direction),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise StoreFetchError(collection=self.collection, direction=str(direction)) from e

        logger.debug(
            "Fetched %d rows (has_next=%s, has_prev=%s)",
            len(page.items), page.has_next, page.has_prev,
        )
        return page

    def _build_page(
        self,
        rows: list[dict[str, Any]],
        sort: SortSpec,
        fingerprint: str,
        *,
        has_next: bool,
        has_prev: bool,
    ) -> RawPage[Channel]:
        field = str(sort.field)
        first = last = None
        if rows:
            first = CursorCodec.create_cursor(rows[0], field, "first", fingerprint)
            last = CursorCodec.create_cursor(rows[-1], field, "last", fingerprint)
        return RawPage[Channel](
            items=[Channel.model_validate(row) for row in rows],
            has_next=has_next,
            has_prev=has_prev,
            first=first,
            last=last,
        )


__all__ = ["QueryExecutor"]
