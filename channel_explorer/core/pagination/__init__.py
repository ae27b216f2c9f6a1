"""Cursor-based (keyset) pagination primitives.

Pages are fetched with one extra record to learn whether another page
exists, and navigated with opaque cursors that pin a record's sort position.
Nothing here performs I/O; store adapters turn a ``CursorData`` into their
own seek condition.
"""

from channel_explorer.core.pagination.cursor import (
    ID_FIELD,
    BoundaryKind,
    CursorCodec,
    CursorData,
    compute_fingerprint,
)
from channel_explorer.core.pagination.schemas import PageInfo, RawPage

__all__ = [
    "ID_FIELD",
    "BoundaryKind",
    "CursorCodec",
    "CursorData",
    "PageInfo",
    "RawPage",
    "compute_fingerprint",
]
