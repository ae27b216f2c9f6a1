"""Page containers for cursor-based pagination.

``RawPage`` is what one store round trip yields after over-fetch trimming.
``PageInfo`` is the navigation metadata exposed to clients (Relay-style
naming so HTTP responses read like any other cursor API).
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from channel_explorer.core.pagination.cursor import CursorData

T = TypeVar("T")


class RawPage(BaseModel, Generic[T]):
    """One fetched page before residual filtering.

    Attributes:
        items: Records in sort order, at most one page long
        has_next: Whether records exist after this page
        has_prev: Whether records exist before this page
        first: Cursor anchored at the first raw record
        last: Cursor anchored at the last raw record
    """

    items: list[T] = Field(default_factory=list)
    has_next: bool = False
    has_prev: bool = False
    first: CursorData | None = None
    last: CursorData | None = None

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.items


class PageInfo(BaseModel):
    """Pagination metadata.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Encoded cursor of the first raw item in this page
        end_cursor: Encoded cursor of the last raw item in this page
        total_count: Approximate total (pushable constraints only)
    """

    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")
    total_count: int | None = Field(default=None, description="Approximate total count")


__all__ = ["PageInfo", "RawPage"]
