"""Shared click options for filter and sort input."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from channel_explorer.core.settings import get_store_settings
from channel_explorer.features.channels.schemas import (
    ChannelFilters,
    SortDirection,
    SortField,
    SortSpec,
)
from channel_explorer.features.channels.url_state import from_query_string
from channel_explorer.infra.store import ChannelStore, create_channel_store

FILTER_OPTIONS = (
    click.option("--query", "query", default=None, help="URL query string, e.g. 'quality=high&sort=rpm'"),
    click.option("--search", default=None, help="Title or category substring"),
    click.option("--category", "categories", multiple=True, help="Category tag (repeatable, OR)"),
    click.option("--quality", "quality", multiple=True, help="Quality tag (repeatable, OR)"),
    click.option("--monetized/--not-monetized", "is_monetized", default=None),
    click.option("--faceless/--not-faceless", "is_faceless", default=None),
    click.option("--shorts/--no-shorts", "has_shorts", default=None),
    click.option("--min-subs", "min_subscribers", type=int, default=None),
    click.option("--max-subs", "max_subscribers", type=int, default=None),
    click.option("--min-rev", "min_revenue", type=float, default=None),
    click.option("--max-rev", "max_revenue", type=float, default=None),
    click.option(
        "--data",
        "data_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="JSON file of channel records to load into the store first",
    ),
)

SORT_OPTIONS = (
    click.option("--sort", "sort_field", type=click.Choice([f.value for f in SortField]), default=None),
    click.option("--dir", "sort_dir", type=click.Choice([d.value for d in SortDirection]), default=None),
)


def filter_options(f: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(FILTER_OPTIONS):
        f = option(f)
    return f


def sort_options(f: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(SORT_OPTIONS):
        f = option(f)
    return f


def build_specs(
    query: str | None = None,
    sort_field: str | None = None,
    sort_dir: str | None = None,
    **filter_values: Any,
) -> tuple[ChannelFilters, SortSpec]:
    """Filters and sort from ``--query`` overlaid with explicit options."""
    filters, sort = from_query_string(query or "")
    overrides = {
        key: value
        for key, value in filter_values.items()
        if value is not None and value != ()
    }
    if overrides:
        filters = filters.merge(**overrides)
    if sort_field or sort_dir:
        sort = SortSpec(
            field=SortField(sort_field) if sort_field else sort.field,
            direction=SortDirection(sort_dir) if sort_dir else sort.direction,
        )
    return filters, sort


async def open_store(data_file: Path | None = None) -> ChannelStore:
    """Configured store, optionally seeded from a JSON records file."""
    store = await create_channel_store()
    if data_file is not None:
        records = json.loads(data_file.read_text(encoding="utf-8"))
        if isinstance(records, dict):
            records = records.get("data") or records.get("channels") or []
        await store.upsert_many(get_store_settings().collection, records)
    return store
