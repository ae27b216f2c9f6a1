"""One-shot ingestion of channel records from the source API.

Records are cleaned through an explicit field-exclusion projection, stamped
with fetch times and merged into the store in batches keyed by channel id.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from channel_explorer.core.exceptions import ConfigurationError, SyncError
from channel_explorer.core.settings import SyncSettings, get_sync_settings
from channel_explorer.features.channels.constants import EXCLUDED_SOURCE_FIELDS
from channel_explorer.infra.external import ChannelSourceClient
from channel_explorer.infra.store.base import ChannelStore

logger = logging.getLogger(__name__)

ID_KEYS = ("id", "_id", "channelId")


@dataclass(frozen=True, slots=True)
class SyncResult:
    fetched: int = 0
    processed: int = 0
    skipped: int = 0
    batches: int = 0
    fetched_at: str = ""


def clean_channel_record(
    record: Mapping[str, Any],
    excluded: frozenset[str] = EXCLUDED_SOURCE_FIELDS,
) -> dict[str, Any]:
    """Copy of ``record`` without the excluded fields."""
    return {key: value for key, value in record.items() if key not in excluded}


def channel_id(record: Mapping[str, Any]) -> str | None:
    """First present identifier among ``id``, ``_id`` and ``channelId``."""
    for key in ID_KEYS:
        value = record.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class ChannelSyncService:
    """Pulls the source listing and upserts it into a store.

    Args:
        store: Destination store.
        settings: Source API settings; defaults to ``get_sync_settings()``.
        collection: Destination collection.
        client: Pre-built source client (tests); built from settings otherwise.
    """

    def __init__(
        self,
        store: ChannelStore,
        settings: SyncSettings | None = None,
        *,
        collection: str = "channels",
        client: ChannelSourceClient | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_sync_settings()
        self.collection = collection
        self._client = client

    def _build_client(self) -> ChannelSourceClient:
        missing = self.settings.missing
        if missing:
            raise ConfigurationError("Source API is not configured", missing=missing)
        return ChannelSourceClient(
            self.settings.api_url,  # type: ignore[arg-type]
            token=self.settings.api_token.get_secret_value(),  # type: ignore[union-attr]
            referer=self.settings.referer,
            timeout=self.settings.timeout,
        )

    async def fetch(self) -> list[dict[str, Any]]:
        """Raw records from the source API.

        Raises:
            ConfigurationError: API URL or token missing.
            SyncError: The request failed.
        """
        client = self._client or self._build_client()
        try:
            return await client.fetch_channels()
        except Exception as e:
            raise SyncError("Failed to fetch channels from source API", {"error": str(e)}) from e
        finally:
            if self._client is None:
                await client.close()

    async def push(self, records: Sequence[Mapping[str, Any]]) -> SyncResult:
        """Clean, stamp and upsert ``records`` in batches.

        Raises:
            SyncError: A batch write failed. Earlier batches stay written.
        """
        fetched_at = _utc_now()
        batch_size = self.settings.batch_size
        processed = skipped = 0
        batches = math.ceil(len(records) / batch_size)

        for index in range(batches):
            chunk = records[index * batch_size : (index + 1) * batch_size]
            documents = []
            for record in chunk:
                record_id = channel_id(record)
                if record_id is None:
                    logger.warning("Channel without ID found, skipping")
                    skipped += 1
                    continue
                document = clean_channel_record(record)
                document["id"] = record_id
                document["fetchedAt"] = fetched_at
                document["lastUpdated"] = _utc_now()
                documents.append(document)

            try:
                await self.store.upsert_many(self.collection, documents)
            except Exception as e:
                raise SyncError(
                    "Failed to write channel batch",
                    {"batch": index + 1, "error": str(e)},
                ) from e
            processed += len(documents)
            logger.info(
                "Committed batch %d (%d documents)", index + 1, len(chunk),
                extra={"collection": self.collection},
            )

        return SyncResult(
            fetched=len(records),
            processed=processed,
            skipped=skipped,
            batches=batches,
            fetched_at=fetched_at,
        )

    async def run(self) -> SyncResult:
        """Fetch then push. An empty listing is not an error."""
        logger.info("Starting channel sync")
        records = await self.fetch()
        if not records:
            logger.info("No channels found in API response")
            return SyncResult()
        logger.info("Fetched %d channels from API", len(records))
        result = await self.push(records)
        logger.info(
            "Sync completed",
            extra={"processed": result.processed, "skipped": result.skipped, "batches": result.batches},
        )
        return result


__all__ = ["ChannelSyncService", "SyncResult", "channel_id", "clean_channel_record"]
