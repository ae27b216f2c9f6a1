"""Human-readable number formatting for terminal output."""

from __future__ import annotations

_SUFFIXES = ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K"))


def format_number(value: float) -> str:
    """Abbreviate large numbers: 1234567 -> '1.23M'. Below 1000, use grouping."""
    for threshold, suffix in _SUFFIXES:
        if value >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


def format_currency(value: float) -> str:
    """USD with two decimals: 1234.5 -> '$1,234.50'."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def format_duration(seconds: float) -> str:
    """'1h 5m' above an hour, otherwise '4m 12s'."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {secs}s"


__all__ = ["format_currency", "format_duration", "format_number", "format_percentage"]
