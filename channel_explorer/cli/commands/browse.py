"""Channel browsing commands."""

import math
import sys
from pathlib import Path

import click

from channel_explorer.cli.commands._options import build_specs, filter_options, open_store, sort_options
from channel_explorer.cli.utils import (
    channel_table,
    coro,
    error,
    header,
    info,
    section,
    stats_summary,
    warning,
)
from channel_explorer.core.exceptions import ChannelExplorerError, StoreFetchError
from channel_explorer.core.settings import get_browser_settings, get_store_settings
from channel_explorer.features.channels.constants import PAGE_SIZE
from channel_explorer.features.channels.controller import PageController
from channel_explorer.features.channels.service import ChannelBrowseService
from channel_explorer.features.channels.stats import compute_stats
from channel_explorer.features.channels.url_state import to_query_string


@click.command()
@filter_options
@sort_options
@click.option("--pages", default=1, type=click.IntRange(min=1), help="Pages to walk forward")
@coro
async def browse(pages: int, data_file: Path | None, **options) -> None:
    """Show pages of channels under the given filters and sort."""
    filters, sort = build_specs(**options)
    try:
        store = await open_store(data_file)
    except ChannelExplorerError as e:
        error(str(e))
        sys.exit(1)

    controller = PageController(
        store,
        collection=get_store_settings().collection,
        filters=filters,
        sort=sort,
        debounce_seconds=0,
    )
    query = to_query_string(filters, sort)
    info(f"Filters: {query or '(none)'}")

    try:
        await controller.refresh()
        for page_number in range(1, pages + 1):
            if page_number > 1 and not await controller.advance():
                warning("No more pages")
                break
            section(
                f"Page {controller.current_page} of {max(controller.total_pages, 1)} "
                f"(~{controller.total_count} matching)"
            )
            channel_table(controller.channels)
            header("Page stats")
            stats_summary(compute_stats(controller.channels))
    except StoreFetchError as e:
        error(f"Failed to fetch channels: {e}")
        sys.exit(1)
    finally:
        await controller.aclose()
        await store.close()


@click.command()
@filter_options
@coro
async def count(data_file: Path | None, **options) -> None:
    """Approximate number of matching channels (search and categories ignored)."""
    filters, _ = build_specs(**options)
    try:
        store = await open_store(data_file)
    except ChannelExplorerError as e:
        error(str(e))
        sys.exit(1)

    try:
        service = ChannelBrowseService(store, collection=get_store_settings().collection)
        total = await service.count(filters)
    finally:
        await store.close()

    click.echo(f"{total} channels ({math.ceil(total / PAGE_SIZE)} pages of {PAGE_SIZE})")


@click.command()
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file of channel records to load into the store first",
)
@coro
async def categories(data_file: Path | None) -> None:
    """List category tags found in the store."""
    try:
        store = await open_store(data_file)
    except ChannelExplorerError as e:
        error(str(e))
        sys.exit(1)

    try:
        service = ChannelBrowseService(store, collection=get_store_settings().collection)
        tags = await service.categories(get_browser_settings().category_sample_size)
    finally:
        await store.close()

    if not tags:
        warning("No categories found")
        return
    for tag in tags:
        click.echo(tag)
