"""Pydantic schemas for the channels feature.

Store records use camelCase field names; Python code uses snake_case. Every
model here accepts both (``populate_by_name``) and dumps camelCase with
``by_alias=True``.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from channel_explorer.core.pagination import CursorData, PageInfo
from channel_explorer.features.channels.constants import PAGE_SIZE


class SortField(StrEnum):
    """Sortable numeric attributes, valued by their store field name."""

    SUBSCRIBERS = "subscribers"
    AVG_MONTHLY_REVENUE = "avgMonthlyRevenue"
    TOTAL_VIEWS = "totalViews"
    RPM = "rpm"
    NUM_OF_UPLOADS = "numOfUploads"
    AVG_VIEW_PER_VIDEO = "avgViewPerVideo"
    DAYS_SINCE_START = "daysSinceStart"
    OUTLIER_SCORE = "outlierScore"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class Channel(BaseModel):
    """A channel record as held for the current page.

    Only ``id`` is required. Ingested records are sparse, so null values
    fall back to the field default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str
    title: str = ""
    url: str | None = None
    thumbnail_url: str | None = None
    banner_url: str | None = None
    subscribers: int = 0
    avg_view_per_video: float = 0
    median_view_per_video: float = 0
    days_since_start: float = 0
    num_of_uploads: int = 0
    is_monetized: bool = False
    rpm: float = 0
    avg_monthly_revenue: float = 0
    categories: list[str] = Field(default_factory=list)
    category: str | None = None
    format: str | None = None
    is_faceless: bool = False
    quality: str | None = None
    avg_monthly_views: float = 0
    total_views: int = 0
    total_revenue_generated: float = 0
    days_since_last_upload: float = 0
    has_shorts: bool = False
    avg_video_length: float = 0
    outlier_score: float = 0
    avg_monthly_upload_frequency: float = 0
    created_at: str | None = None
    updated_at: str | None = None
    last_scraped_at: str | None = None
    fetched_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("subscribers", "num_of_uploads", "total_views", mode="before")
    @classmethod
    def round_counts(cls, v: Any) -> Any:
        """Scraped counts sometimes arrive as non-integral floats."""
        if isinstance(v, float) and math.isfinite(v):
            return round(v)
        return v

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Source ids arrive as ints; the store keys them as strings."""
        if isinstance(v, int):
            return str(v)
        return v


class ChannelFilters(BaseModel):
    """Filter criteria.

    All fields at their defaults means "no filter". Instances are immutable;
    use ``merge`` to derive new filters from overrides.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    search: str = ""
    categories: tuple[str, ...] = ()
    quality: tuple[str, ...] = ()
    is_monetized: bool | None = None
    is_faceless: bool | None = None
    has_shorts: bool | None = None
    min_subscribers: int | None = None
    max_subscribers: int | None = None
    min_revenue: float | None = None
    max_revenue: float | None = None

    @field_validator("categories", "quality", mode="before")
    @classmethod
    def drop_blank_tags(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        return tuple(tag for tag in v if tag)

    @property
    def is_default(self) -> bool:
        """True when no field differs from its default."""
        return self == DEFAULT_FILTERS

    @property
    def has_revenue_range(self) -> bool:
        return self.min_revenue is not None or self.max_revenue is not None

    @property
    def has_subscriber_range(self) -> bool:
        return self.min_subscribers is not None or self.max_subscribers is not None

    def merge(self, **overrides: Any) -> ChannelFilters:
        """Return new filters with ``overrides`` applied over this one."""
        return ChannelFilters.model_validate({**self.model_dump(), **overrides})


DEFAULT_FILTERS = ChannelFilters()


class SortSpec(BaseModel):
    """Active sort: exactly one field and one direction."""

    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.SUBSCRIBERS
    direction: SortDirection = SortDirection.DESC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


DEFAULT_SORT = SortSpec()


class ChannelPage(BaseModel):
    """A page as shown to the caller.

    ``channels`` is post-residual and may be shorter than the page size even
    when ``has_next`` is true. ``first``/``last`` anchor the raw page so that
    paging never revisits or skips records the residual stage removed.
    """

    model_config = ConfigDict(frozen=True)

    channels: list[Channel] = Field(default_factory=list)
    has_next: bool = False
    has_prev: bool = False
    first: CursorData | None = None
    last: CursorData | None = None
    raw_count: int = 0


class PageState(BaseModel):
    """Snapshot of a PageController published to subscribers."""

    model_config = ConfigDict(frozen=True)

    channels: tuple[Channel, ...] = ()
    filters: ChannelFilters = DEFAULT_FILTERS
    sort: SortSpec = DEFAULT_SORT
    has_next: bool = False
    has_prev: bool = False
    current_page: int = 1
    total_count: int = 0
    total_pages: int = 0
    page_size: int = PAGE_SIZE
    loading: bool = False
    error: str | None = None
    generation: int = 0


class ChannelStats(BaseModel):
    """Aggregates over a set of displayed channels."""

    total_channels: int = 0
    total_subscribers: int = 0
    avg_subscribers: float = 0
    total_revenue: float = 0
    avg_monthly_revenue: float = 0
    avg_rpm: float = 0
    total_views: int = 0
    monetized_count: int = 0
    faceless_count: int = 0


class ChannelPageResponse(BaseModel):
    """HTTP response for one page of channels."""

    items: list[Channel]
    page_info: PageInfo
    state: dict[str, str] = Field(
        default_factory=dict,
        description="Non-default filter and sort parameters that produced this page",
    )


class CategoryListResponse(BaseModel):
    categories: list[str]


class CountResponse(BaseModel):
    total_count: int
    total_pages: int


__all__ = [
    "DEFAULT_FILTERS",
    "DEFAULT_SORT",
    "CategoryListResponse",
    "Channel",
    "ChannelFilters",
    "ChannelPage",
    "ChannelPageResponse",
    "ChannelStats",
    "CountResponse",
    "PageState",
    "SortDirection",
    "SortField",
    "SortSpec",
]
