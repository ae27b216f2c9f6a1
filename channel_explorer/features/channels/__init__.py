"""Channel browsing feature.

Filter planning, page fetching with over-fetch, residual filtering, cursor
bookkeeping and the debounced page controller.

Usage:
    from channel_explorer.features.channels import PageController

    controller = PageController(store)
    await controller.refresh()
    controller.set_filters(quality=("high",), min_revenue=1000)
    await controller.wait_until_idle()
    await controller.advance()
"""

from __future__ import annotations

from .constants import PAGE_SIZE
from .controller import PageController
from .count import CountEstimator
from .cursors import CursorManager
from .executor import QueryExecutor
from .planner import PlanResult, plan_filters
from .residual import apply_residual_filters
from .schemas import (
    Channel,
    ChannelFilters,
    ChannelPage,
    PageState,
    SortDirection,
    SortField,
    SortSpec,
)
from .url_state import parse_state, serialize_state

__all__ = [
    "PAGE_SIZE",
    "Channel",
    "ChannelFilters",
    "ChannelPage",
    "CountEstimator",
    "CursorManager",
    "PageController",
    "PageState",
    "PlanResult",
    "QueryExecutor",
    "SortDirection",
    "SortField",
    "SortSpec",
    "apply_residual_filters",
    "parse_state",
    "plan_filters",
    "serialize_state",
]
