"""Unit tests for URL state serialization."""
from __future__ import annotations

import pytest

from channel_explorer.features.channels.schemas import (
    DEFAULT_SORT,
    ChannelFilters,
    SortDirection,
    SortField,
    SortSpec,
)
from channel_explorer.features.channels.url_state import (
    from_query_string,
    parse_state,
    serialize_state,
    to_query_string,
)


@pytest.mark.unit
class TestSerializeState:
    """Tests for serialize_state."""

    def test_defaults_serialize_to_nothing(self):
        assert serialize_state(ChannelFilters(), DEFAULT_SORT) == {}

    def test_only_non_defaults_are_written(self):
        filters = ChannelFilters(
            search="gaming",
            categories=("Tech", "Gaming"),
            quality=("high",),
            is_monetized=True,
            has_shorts=False,
            min_subscribers=5000,
            max_revenue=1000.0,
        )
        sort = SortSpec(field=SortField.RPM, direction=SortDirection.ASC)

        assert serialize_state(filters, sort) == {
            "search": "gaming",
            "categories": "Tech,Gaming",
            "quality": "high",
            "monetized": "true",
            "shorts": "false",
            "minSubs": "5000",
            "maxRev": "1000",
            "sort": "rpm",
            "dir": "asc",
        }

    def test_fractional_revenue_kept(self):
        params = serialize_state(ChannelFilters(min_revenue=12.5), DEFAULT_SORT)

        assert params == {"minRev": "12.5"}

    def test_query_string(self):
        query = to_query_string(ChannelFilters(search="a b"), DEFAULT_SORT)

        assert query == "search=a+b"


@pytest.mark.unit
class TestParseState:
    """Tests for parse_state."""

    def test_empty_params_give_defaults(self):
        filters, sort = parse_state({})

        assert filters.is_default
        assert sort == DEFAULT_SORT

    def test_round_trip(self):
        filters = ChannelFilters(
            search="cooking",
            categories=("Cooking", "Lifestyle"),
            quality=("high", "medium"),
            is_faceless=False,
            min_subscribers=1000,
            max_subscribers=90000,
            min_revenue=250.75,
        )
        sort = SortSpec(field=SortField.TOTAL_VIEWS, direction=SortDirection.ASC)

        assert parse_state(serialize_state(filters, sort)) == (filters, sort)

    @pytest.mark.parametrize(
        ("params", "attr", "expected"),
        [
            ({"minSubs": "abc"}, "min_subscribers", None),
            ({"minSubs": "5000.7"}, "min_subscribers", 5000),
            ({"maxSubs": ""}, "max_subscribers", None),
            ({"minRev": "inf"}, "min_revenue", None),
            ({"minRev": "nan"}, "min_revenue", None),
            ({"maxRev": "12.5"}, "max_revenue", 12.5),
            ({"monetized": "yes"}, "is_monetized", None),
            ({"faceless": "false"}, "is_faceless", False),
            ({"categories": ",Tech,,"}, "categories", ("Tech",)),
        ],
    )
    def test_malformed_values_fall_back(self, params, attr, expected):
        filters, _ = parse_state(params)

        assert getattr(filters, attr) == expected

    def test_unknown_sort_falls_back(self):
        _, sort = parse_state({"sort": "likes", "dir": "sideways"})

        assert sort == DEFAULT_SORT

    def test_list_values_use_last(self):
        filters, sort = parse_state({"search": ["first", "second"], "sort": ["rpm"]})

        assert filters.search == "second"
        assert sort.field is SortField.RPM

    def test_unknown_keys_ignored(self):
        filters, _ = parse_state({"page": "3", "utm_source": "x"})

        assert filters.is_default

    def test_from_query_string(self):
        filters, sort = from_query_string("?quality=high,low&dir=asc&minRev=100")

        assert filters.quality == ("high", "low")
        assert filters.min_revenue == 100
        assert sort.direction is SortDirection.ASC
        assert sort.field is SortField.SUBSCRIBERS
