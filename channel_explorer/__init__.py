"""Channel Explorer: filtered, cursor-paginated browsing of channel records."""

__version__ = "0.1.0"
