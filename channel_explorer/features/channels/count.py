"""Advisory total count for a set of filters.

Only the pushable constraints are counted, so the number overstates the
displayed total whenever search, category or a residual range is active.
"""

from __future__ import annotations

import logging

from channel_explorer.features.channels.planner import plan_filters
from channel_explorer.features.channels.schemas import ChannelFilters
from channel_explorer.infra.store.base import ChannelStore

logger = logging.getLogger(__name__)


class CountEstimator:
    def __init__(self, store: ChannelStore, *, collection: str = "channels") -> None:
        self.store = store
        self.collection = collection

    async def count(self, filters: ChannelFilters) -> int:
        """Store count for ``filters``; 0 if the count query fails."""
        plan = plan_filters(filters)
        try:
            return await self.store.count_matching(self.collection, list(plan.constraints))
        except Exception as e:
            logger.warning(
                "Channel count failed, reporting 0",
                extra={"collection": self.collection, "error": str(e)},
            )
            return 0


__all__ = ["CountEstimator"]
