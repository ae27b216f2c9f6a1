"""Category tag discovery."""

from __future__ import annotations

import logging

from channel_explorer.infra.store.base import ChannelStore

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 500


async def list_categories(
    store: ChannelStore,
    *,
    collection: str = "channels",
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> list[str]:
    """Sorted distinct category tags seen in the first ``sample_size`` records.

    A sample, not a full scan: tags that only appear further into the
    collection are not listed. Store errors yield an empty list.
    """
    try:
        records = await store.sample(collection, sample_size)
    except Exception as e:
        logger.warning(
            "Category discovery failed",
            extra={"collection": collection, "error": str(e)},
        )
        return []

    tags: set[str] = set()
    for record in records:
        tags.update(tag for tag in record.get("categories") or () if isinstance(tag, str) and tag)
    return sorted(tags)


__all__ = ["list_categories"]
