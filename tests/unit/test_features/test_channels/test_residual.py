"""Unit tests for residual (post-fetch) filtering."""
from __future__ import annotations

import pytest

from channel_explorer.features.channels.planner import plan_filters
from channel_explorer.features.channels.residual import apply_residual_filters
from channel_explorer.features.channels.schemas import Channel, ChannelFilters


def _channel(id_: str, title: str, categories=(), subscribers: int = 0) -> Channel:
    return Channel(id=id_, title=title, categories=list(categories), subscribers=subscribers)


@pytest.mark.unit
class TestApplyResidualFilters:
    """Tests for apply_residual_filters."""

    def test_no_residual_filters_returns_input(self):
        channels = [_channel("1", "A"), _channel("2", "B")]
        filters = ChannelFilters()

        assert apply_residual_filters(channels, filters, plan_filters(filters)) == channels

    def test_search_matches_title_or_category_case_insensitively(self):
        """'gaming' keeps a title match and a category-only match."""
        channels = [
            _channel("1", "Pro Gaming Channel"),
            _channel("2", "Cooking Show", ["Gaming Tips"]),
            _channel("3", "Travel Diaries", ["Lifestyle"]),
        ]
        filters = ChannelFilters(search="gaming")

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["1", "2"]

    def test_search_uppercase_needle(self):
        channels = [_channel("1", "pro gaming channel")]
        filters = ChannelFilters(search="GAMING")

        assert len(apply_residual_filters(channels, filters, plan_filters(filters))) == 1

    def test_category_filter_is_or_across_tags(self):
        """An entity tagged {a, b} matches a filter selecting {b, c}."""
        channels = [
            _channel("1", "One", ["a", "b"]),
            _channel("2", "Two", ["d"]),
            _channel("3", "Three", ["c"]),
        ]
        filters = ChannelFilters(categories=("b", "c"))

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["1", "3"]

    def test_category_filter_is_exact_tag_match(self):
        channels = [_channel("1", "One", ["Gaming Tips"])]
        filters = ChannelFilters(categories=("Gaming",))

        assert apply_residual_filters(channels, filters, plan_filters(filters)) == []

    def test_subscriber_range_rechecked_when_revenue_pushed(self):
        """Revenue 1200 / subscribers 3000 is dropped under minRevenue=1000, minSubscribers=5000."""
        channels = [
            Channel(id="1", title="Small", avg_monthly_revenue=1200, subscribers=3000),
            Channel(id="2", title="Big", avg_monthly_revenue=1500, subscribers=8000),
        ]
        filters = ChannelFilters(min_revenue=1000, min_subscribers=5000)

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["2"]

    def test_subscriber_range_not_rechecked_when_pushed(self):
        """When the store applied the subscriber range, the page is trusted."""
        channels = [_channel("1", "Small", subscribers=10)]
        filters = ChannelFilters(min_subscribers=5000)

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["1"]

    def test_max_subscribers_rechecked(self):
        channels = [_channel("1", "A", subscribers=100), _channel("2", "B", subscribers=900)]
        filters = ChannelFilters(max_revenue=10_000, max_subscribers=500)

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["1"]

    def test_stages_combine_and_preserve_order(self):
        channels = [
            _channel("3", "Gaming Three", ["x"], subscribers=6000),
            _channel("1", "Gaming One", ["y"], subscribers=7000),
            _channel("2", "Gaming Two", ["x"], subscribers=100),
            _channel("4", "Other", ["x"], subscribers=9000),
        ]
        filters = ChannelFilters(
            search="gaming", categories=("x",), min_revenue=0, min_subscribers=5000
        )

        result = apply_residual_filters(channels, filters, plan_filters(filters))

        assert [c.id for c in result] == ["3"]
