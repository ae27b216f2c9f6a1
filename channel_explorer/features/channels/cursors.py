"""Cursor bookkeeping for the page being shown."""

from __future__ import annotations

import logging
from typing import Any, Literal

from channel_explorer.core.pagination import CursorData, RawPage, compute_fingerprint
from channel_explorer.features.channels.schemas import ChannelFilters, SortSpec

logger = logging.getLogger(__name__)

Move = Literal["first", "next", "prev"]


class CursorManager:
    """Holds first/last cursors of the current raw page and the page counter.

    Cursors are only valid for the specs they were minted under. ``bind``
    must be called on every filter or sort change; it clears both cursors
    and returns the counter to 1.
    """

    def __init__(self, filters: ChannelFilters | None = None, sort: SortSpec | None = None) -> None:
        self.first: CursorData | None = None
        self.last: CursorData | None = None
        self.has_next = False
        self.has_prev = False
        self.current_page = 1
        self.fingerprint = ""
        if filters is not None and sort is not None:
            self.bind(filters, sort)

    def bind(self, filters: ChannelFilters, sort: SortSpec) -> str:
        """Reset and tag future cursors with the digest of ``filters``/``sort``."""
        self.fingerprint = compute_fingerprint(filters, sort)
        self.reset()
        return self.fingerprint

    def reset(self) -> None:
        self.first = None
        self.last = None
        self.has_next = False
        self.has_prev = False
        self.current_page = 1

    def record(self, page: RawPage[Any], move: Move = "first") -> None:
        """Adopt the boundaries and flags of a freshly fetched raw page."""
        for cursor in (page.first, page.last):
            if cursor is not None and not cursor.matches(self.fingerprint):
                logger.warning(
                    "Ignoring page fetched under stale specs",
                    extra={"cursor_fingerprint": cursor.fingerprint, "fingerprint": self.fingerprint},
                )
                return

        self.first = page.first
        self.last = page.last
        self.has_next = page.has_next
        self.has_prev = page.has_prev

        if move == "next":
            self.current_page += 1
        elif move == "prev":
            self.current_page = max(1, self.current_page - 1)
        else:
            self.current_page = 1

    def next_cursor(self) -> CursorData | None:
        """Boundary for ``advance``; ``None`` when there is no next page."""
        if not self.has_next or self.last is None:
            return None
        return self.last

    def prev_cursor(self) -> CursorData | None:
        """Boundary for ``retreat``; ``None`` when there is no previous page."""
        if not self.has_prev or self.first is None:
            return None
        return self.first


__all__ = ["CursorManager", "Move"]
