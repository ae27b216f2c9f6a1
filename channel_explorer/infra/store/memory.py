"""In-process store adapter.

Keeps each collection as an insertion-ordered dict of records. Queries are
evaluated with plain Python so the adapter doubles as the reference
behaviour for the store contract in tests and local development.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from channel_explorer.core.pagination import ID_FIELD
from channel_explorer.infra.store.base import (
    BoundaryMode,
    Constraint,
    ConstraintOp,
    validate_constraints,
)

if TYPE_CHECKING:
    from channel_explorer.core.pagination import CursorData
    from channel_explorer.features.channels.schemas import SortSpec

logger = logging.getLogger(__name__)


def _sort_value(record: Mapping[str, Any], field: str) -> Any:
    # Missing numeric sort values order as zero, matching the SQL column default
    value = record.get(field)
    return 0 if value is None else value


def _matches(record: Mapping[str, Any], constraint: Constraint) -> bool:
    value = record.get(constraint.field)
    match constraint.op:
        case ConstraintOp.EQ:
            return value == constraint.value
        case ConstraintOp.IN:
            return value in constraint.value
        case ConstraintOp.GTE:
            return value is not None and value >= constraint.value
        case ConstraintOp.LTE:
            return value is not None and value <= constraint.value
    return False


class MemoryChannelStore:
    """Dict-backed ``ChannelStore``.

    Example:
        store = MemoryChannelStore()
        await store.upsert_many("channels", [{"id": "1", "title": "A"}])
    """

    def __init__(self, data: Mapping[str, Sequence[Mapping[str, Any]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        for collection, records in (data or {}).items():
            bucket = self._collections.setdefault(collection, {})
            for record in records:
                bucket[str(record[ID_FIELD])] = dict(record)

    def _records(self, collection: str) -> list[dict[str, Any]]:
        return list(self._collections.get(collection, {}).values())

    def _filter(self, collection: str, constraints: Sequence[Constraint]) -> list[dict[str, Any]]:
        validate_constraints(constraints)
        return [r for r in self._records(collection) if all(_matches(r, c) for c in constraints)]

    async def query_page(
        self,
        collection: str,
        constraints: Sequence[Constraint],
        sort: SortSpec,
        limit: int,
        boundary: CursorData | None = None,
        boundary_mode: BoundaryMode = BoundaryMode.AFTER,
    ) -> list[dict[str, Any]]:
        field = str(sort.field)
        rows = self._filter(collection, constraints)
        rows.sort(
            key=lambda r: (_sort_value(r, field), str(r.get(ID_FIELD))),
            reverse=sort.descending,
        )

        if boundary is not None:
            key = (_sort_value(boundary.values, field), boundary.record_id or "")
            if sort.descending:
                after = [r for r in rows if (_sort_value(r, field), str(r.get(ID_FIELD))) < key]
                before = [r for r in rows if (_sort_value(r, field), str(r.get(ID_FIELD))) > key]
            else:
                after = [r for r in rows if (_sort_value(r, field), str(r.get(ID_FIELD))) > key]
                before = [r for r in rows if (_sort_value(r, field), str(r.get(ID_FIELD))) < key]
            if boundary_mode is BoundaryMode.BEFORE:
                rows = before[-limit:] if limit > 0 else []
            else:
                rows = after[:limit]
        elif boundary_mode is BoundaryMode.BEFORE:
            rows = rows[-limit:] if limit > 0 else []
        else:
            rows = rows[:limit]

        logger.debug(
            "Memory query on %s returned %d rows", collection, len(rows),
            extra={"collection": collection, "constraints": [str(c) for c in constraints]},
        )
        return copy.deepcopy(rows)

    async def count_matching(self, collection: str, constraints: Sequence[Constraint]) -> int:
        return len(self._filter(collection, constraints))

    async def upsert_many(self, collection: str, records: Sequence[Mapping[str, Any]]) -> int:
        async with self._lock:
            bucket = self._collections.setdefault(collection, {})
            for record in records:
                record_id = str(record[ID_FIELD])
                merged = bucket.get(record_id, {})
                merged.update(copy.deepcopy(dict(record)))
                merged[ID_FIELD] = record_id
                bucket[record_id] = merged
        return len(records)

    async def sample(self, collection: str, limit: int) -> list[dict[str, Any]]:
        return copy.deepcopy(self._records(collection)[:limit])

    async def close(self) -> None:
        return None


__all__ = ["MemoryChannelStore"]
