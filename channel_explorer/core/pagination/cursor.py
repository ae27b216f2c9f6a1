"""Cursor encoding and decoding for keyset pagination.

A cursor pins one record's position under one filter/sort combination. It
carries:

1. the record's value for the active sort field plus its id (tie-break),
2. which page boundary it marks (first or last record of the page),
3. a fingerprint of the FilterSpec/SortSpec that produced it.

Store adapters rebuild a native seek condition from (1); nothing here
depends on a store's own snapshot/handle types. The fingerprint lets callers
discard cursors that outlived a filter or sort change.

Wire format is URL-safe base64 JSON with short keys:
    {"v": {"subscribers": 125000, "id": "8812"}, "b": "last", "f": "3f9a0c1b2d4e5f60"}
"""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

BoundaryKind = Literal["first", "last"]

ID_FIELD = "id"
FINGERPRINT_LENGTH = 16


class CursorData(BaseModel):
    """Decoded cursor.

    Attributes:
        values: Sort field value and record id, keyed by store field name
        boundary: Which end of the page this record sits on
        fingerprint: Digest of the filters and sort the page was fetched under
    """

    values: dict[str, Any] = Field(description="Sort field value and id for seeking")
    boundary: BoundaryKind = Field(default="last", description="Page boundary")
    fingerprint: str = Field(default="", description="Digest of the originating filters and sort")

    model_config = {"frozen": True}

    @property
    def record_id(self) -> str | None:
        """Id of the record the cursor points at."""
        value = self.values.get(ID_FIELD)
        return None if value is None else str(value)

    def sort_value(self, field: str) -> Any:
        """Value of ``field`` on the anchored record."""
        return self.values.get(field)

    def matches(self, fingerprint: str) -> bool:
        """Whether this cursor was produced under the given filters and sort."""
        return self.fingerprint == fingerprint


def compute_fingerprint(*models: BaseModel) -> str:
    """Stable digest of one or more filter or sort models.

    Example:
        fingerprint = compute_fingerprint(filters, sort)
    """
    payload = [model.model_dump(mode="json") for model in models]
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:FINGERPRINT_LENGTH]


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        token = CursorCodec.encode(CursorData(values={"subscribers": 10, "id": "a"}))
        data = CursorCodec.decode(token)
    """

    @staticmethod
    def encode(data: CursorData) -> str:
        """Encode cursor data to an opaque URL-safe string."""
        serialized = {
            "v": CursorCodec._serialize_values(data.values),
            "b": data.boundary,
            "f": data.fingerprint,
        }
        json_str = json.dumps(serialized, separators=(",", ":"))
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(cursor: str) -> CursorData:
        """Decode a cursor string.

        Raises:
            ValueError: If cursor is invalid or corrupted
        """
        try:
            json_str = base64.urlsafe_b64decode(cursor.encode()).decode()
            payload = json.loads(json_str)
            return CursorData(
                values=payload["v"],
                boundary=payload.get("b", "last"),
                fingerprint=payload.get("f", ""),
            )
        except Exception as e:
            raise ValueError(f"Invalid cursor: {e}") from e

    @staticmethod
    def _serialize_values(values: dict[str, Any]) -> dict[str, Any]:
        """Convert datetimes and UUIDs to JSON-compatible strings."""
        result = {}
        for key, value in values.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, UUID):
                result[key] = str(value)
            else:
                result[key] = value
        return result

    @staticmethod
    def create_cursor(
        record: Mapping[str, Any] | Any,
        sort_field: str,
        boundary: BoundaryKind,
        fingerprint: str,
    ) -> CursorData:
        """Build a cursor anchored at ``record``.

        Args:
            record: Raw store record (mapping) or object with matching attributes
            sort_field: Store field name of the active sort
            boundary: Which end of the page ``record`` is
            fingerprint: Digest of the active filters and sort

        Example:
            cursor = CursorCodec.create_cursor(rows[-1], "subscribers", "last", fp)
        """
        if isinstance(record, Mapping):
            sort_value = record.get(sort_field)
            record_id = record.get(ID_FIELD)
        else:
            sort_value = getattr(record, sort_field, None)
            record_id = getattr(record, ID_FIELD, None)

        return CursorData(
            values={
                sort_field: sort_value,
                ID_FIELD: None if record_id is None else str(record_id),
            },
            boundary=boundary,
            fingerprint=fingerprint,
        )


__all__ = [
    "BoundaryKind",
    "CursorCodec",
    "CursorData",
    "ID_FIELD",
    "compute_fingerprint",
]
