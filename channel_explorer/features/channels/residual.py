"""Predicates the store cannot run, applied to an already fetched page."""

from __future__ import annotations

from collections.abc import Sequence

from channel_explorer.features.channels.planner import PlanResult
from channel_explorer.features.channels.schemas import Channel, ChannelFilters


def _matches_search(channel: Channel, needle: str) -> bool:
    if needle in channel.title.lower():
        return True
    return any(needle in tag.lower() for tag in channel.categories)


def _within(value: float, lower: float | None, upper: float | None) -> bool:
    if lower is not None and value < lower:
        return False
    return upper is None or value <= upper


def apply_residual_filters(
    channels: Sequence[Channel],
    filters: ChannelFilters,
    plan: PlanResult,
) -> list[Channel]:
    """Filter ``channels`` by search text, category tags and the unpushed range.

    Stages run in that order and each is skipped when its filter is unset.
    Input order is preserved.
    """
    result = list(channels)

    needle = filters.search.lower()
    if needle:
        result = [c for c in result if _matches_search(c, needle)]

    if filters.categories:
        wanted = set(filters.categories)
        result = [c for c in result if wanted.intersection(c.categories)]

    if plan.revenue_range_pushed and filters.has_subscriber_range:
        result = [
            c
            for c in result
            if _within(c.subscribers, filters.min_subscribers, filters.max_subscribers)
        ]

    return result


__all__ = ["apply_residual_filters"]
