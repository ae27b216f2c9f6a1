"""Ingestion of channel records from the source API."""

from channel_explorer.features.sync.service import (
    ChannelSyncService,
    SyncResult,
    channel_id,
    clean_channel_record,
)

__all__ = ["ChannelSyncService", "SyncResult", "channel_id", "clean_channel_record"]
