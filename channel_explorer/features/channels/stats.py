"""Summary figures for the channels on screen."""

from __future__ import annotations

from collections.abc import Sequence

from channel_explorer.features.channels.schemas import Channel, ChannelStats


def compute_stats(channels: Sequence[Channel]) -> ChannelStats:
    """Totals and averages over ``channels``.

    Works on the displayed page only; there is no server-side aggregation.
    ``total_revenue`` sums monthly revenue across the page.
    """
    count = len(channels)
    if not count:
        return ChannelStats()

    total_subscribers = sum(c.subscribers for c in channels)
    total_revenue = sum(c.avg_monthly_revenue for c in channels)
    return ChannelStats(
        total_channels=count,
        total_subscribers=total_subscribers,
        avg_subscribers=total_subscribers / count,
        total_revenue=total_revenue,
        avg_monthly_revenue=total_revenue / count,
        avg_rpm=sum(c.rpm for c in channels) / count,
        total_views=sum(c.total_views for c in channels),
        monetized_count=sum(1 for c in channels if c.is_monetized),
        faceless_count=sum(1 for c in channels if c.is_faceless),
    )


__all__ = ["compute_stats"]
