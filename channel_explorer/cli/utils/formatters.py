"""Output formatting utilities for CLI commands."""

from collections.abc import Sequence

import click

from channel_explorer.features.channels.schemas import Channel, ChannelStats
from channel_explorer.utils.formatting import format_currency, format_number, format_percentage


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue")


def header(message: str) -> None:
    """Print a header message in cyan bold."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def section(title: str) -> None:
    """Print a section divider."""
    click.secho(f"\n{'=' * 60}", fg="white", dim=True)
    click.secho(title, fg="white", bold=True)
    click.secho("=" * 60, fg="white", dim=True)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def channel_table(channels: Sequence[Channel]) -> None:
    """Print channels as a fixed-width table."""
    if not channels:
        warning("No channels on this page")
        return

    click.echo(
        f"{'Title':<36} {'Subs':>9} {'Revenue/mo':>13} {'RPM':>8} {'Views':>9} {'Quality':<8} Categories"
    )
    click.echo("-" * 110)
    for channel in channels:
        click.echo(
            f"{_truncate(channel.title, 36):<36} "
            f"{format_number(channel.subscribers):>9} "
            f"{format_currency(channel.avg_monthly_revenue):>13} "
            f"{format_currency(channel.rpm):>8} "
            f"{format_number(channel.total_views):>9} "
            f"{(channel.quality or '-'):<8} "
            f"{_truncate(', '.join(channel.categories), 30)}"
        )


def _share(part: int, whole: int) -> str:
    return format_percentage(100 * part / whole if whole else 0)


def stats_summary(stats: ChannelStats) -> None:
    """Print page statistics on two lines."""
    click.echo(
        f"Channels: {format_number(stats.total_channels)}  "
        f"Subscribers: {format_number(stats.total_subscribers)} "
        f"(avg {format_number(round(stats.avg_subscribers))})  "
        f"Revenue: {format_currency(stats.total_revenue)} "
        f"(avg {format_currency(stats.avg_monthly_revenue)}/mo)"
    )
    total = stats.total_channels
    click.echo(
        f"Views: {format_number(stats.total_views)}  "
        f"Avg RPM: {format_currency(stats.avg_rpm)}  "
        f"Monetized: {stats.monetized_count}/{total} ({_share(stats.monetized_count, total)})  "
        f"Faceless: {stats.faceless_count}/{total} ({_share(stats.faceless_count, total)})"
    )
