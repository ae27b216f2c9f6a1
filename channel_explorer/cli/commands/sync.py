"""Source API ingestion command."""

import sys
import time

import click

from channel_explorer.cli.utils import coro, error, info, section, success
from channel_explorer.core.exceptions import ConfigurationError, SyncError
from channel_explorer.core.settings import get_store_settings
from channel_explorer.features.sync import ChannelSyncService
from channel_explorer.infra.store import create_channel_store
from channel_explorer.utils.formatting import format_duration


@click.command()
@coro
async def sync() -> None:
    """Pull channels from the source API and upsert them into the store."""
    info("Starting channel sync...")

    try:
        store = await create_channel_store()
    except ConfigurationError as e:
        error(str(e))
        sys.exit(1)

    try:
        service = ChannelSyncService(store, collection=get_store_settings().collection)
        started = time.monotonic()
        result = await service.run()
        elapsed = time.monotonic() - started
    except (ConfigurationError, SyncError) as e:
        error(f"Error during sync: {e}")
        sys.exit(1)
    finally:
        await store.close()

    section("Summary")
    click.echo(f"Channels fetched:   {result.fetched}")
    click.echo(f"Channels processed: {result.processed}")
    click.echo(f"Channels skipped:   {result.skipped}")
    click.echo(f"Batches committed:  {result.batches}")
    click.echo(f"Elapsed:            {format_duration(elapsed)}")
    success("Sync completed successfully!")
