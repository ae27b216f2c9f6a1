"""SQLAlchemy model for stored channel records.

Filterable and sortable attributes are promoted to indexed columns so the
SQL adapter can push constraints and keyset seeks into the database. The
complete source document is kept in ``payload`` and is what queries return.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from channel_explorer.core.database import Base, TimestampMixin


class ChannelRecord(Base, TimestampMixin):
    __tablename__ = "channels"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    collection: Mapped[str] = mapped_column(String(64), primary_key=True, default="channels")
    title: Mapped[str] = mapped_column(String(500), default="")

    quality: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    is_monetized: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_faceless: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_shorts: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    subscribers: Mapped[int] = mapped_column(Integer, default=0, index=True)
    avg_monthly_revenue: Mapped[float] = mapped_column(Float, default=0, index=True)
    total_views: Mapped[int] = mapped_column(Integer, default=0)
    rpm: Mapped[float] = mapped_column(Float, default=0)
    num_of_uploads: Mapped[int] = mapped_column(Integer, default=0)
    avg_view_per_video: Mapped[float] = mapped_column(Float, default=0)
    days_since_start: Mapped[int] = mapped_column(Integer, default=0)
    outlier_score: Mapped[float] = mapped_column(Float, default=0)

    categories: Mapped[list[str]] = mapped_column(JSON, default=list)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    __table_args__ = (Index("ix_channels_collection_subscribers", "collection", "subscribers"),)

    def __repr__(self) -> str:
        return f"<ChannelRecord(id={self.id!r}, title={self.title!r})>"


# Store document field -> column attribute name
FIELD_COLUMNS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "quality": "quality",
    "isMonetized": "is_monetized",
    "isFaceless": "is_faceless",
    "hasShorts": "has_shorts",
    "subscribers": "subscribers",
    "avgMonthlyRevenue": "avg_monthly_revenue",
    "totalViews": "total_views",
    "rpm": "rpm",
    "numOfUploads": "num_of_uploads",
    "avgViewPerVideo": "avg_view_per_video",
    "daysSinceStart": "days_since_start",
    "outlierScore": "outlier_score",
    "categories": "categories",
}

NUMERIC_DEFAULTS = {
    "subscribers": 0,
    "avgMonthlyRevenue": 0.0,
    "totalViews": 0,
    "rpm": 0.0,
    "numOfUploads": 0,
    "avgViewPerVideo": 0.0,
    "daysSinceStart": 0,
    "outlierScore": 0.0,
}


def columns_from_document(document: dict[str, Any]) -> dict[str, Any]:
    """Column values for a merged source document."""
    values: dict[str, Any] = {}
    for field, attr in FIELD_COLUMNS.items():
        if field in NUMERIC_DEFAULTS:
            value = document.get(field)
            values[attr] = NUMERIC_DEFAULTS[field] if value is None else value
        elif field == "categories":
            values[attr] = list(document.get(field) or [])
        elif field == "title":
            values[attr] = document.get(field) or ""
        else:
            values[attr] = document.get(field)
    values["id"] = str(document["id"])
    return values


__all__ = ["FIELD_COLUMNS", "ChannelRecord", "columns_from_document"]
