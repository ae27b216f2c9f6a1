"""Main CLI entry point for channel-explorer."""

import click

from channel_explorer.cli.commands import browse, server, sync
from channel_explorer.infra.logging import set_log_context
from channel_explorer.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="channel-explorer")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Channel Explorer - browse, count and ingest channel records.

    \b
    Commands:
      browse      Show filtered, sorted pages of channels
      count       Approximate count for a filter set
      categories  List known category tags
      sync        Ingest channels from the source API
      serve       Run the HTTP API

    \b
    Quick Start:
      channel-explorer sync
      channel-explorer browse --quality high --min-rev 1000 --pages 2
      channel-explorer browse --query 'search=gaming&sort=rpm&dir=asc'
    """
    ctx.ensure_object(dict)
    if ctx.invoked_subcommand:
        set_log_context(command=ctx.invoked_subcommand)


cli.add_command(browse.browse)
cli.add_command(browse.count)
cli.add_command(browse.categories)
cli.add_command(sync.sync)
cli.add_command(server.serve)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
