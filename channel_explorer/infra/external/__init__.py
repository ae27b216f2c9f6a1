"""External service clients.

All clients inherit from BaseHTTPClient.
"""

from channel_explorer.infra.external.base_client import BaseHTTPClient
from channel_explorer.infra.external.channel_source import ChannelSourceClient, extract_records

__all__ = [
    "BaseHTTPClient",
    "ChannelSourceClient",
    "extract_records",
]
