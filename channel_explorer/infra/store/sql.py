"""SQLAlchemy async store adapter.

Constraints map onto promoted columns of ``ChannelRecord``; the keyset seek
follows the compound condition used for cursor pagination:

    (sort op v) OR (sort = v AND id op id_v)

Backward pages are read in reversed order with ``LIMIT`` and flipped back so
callers always receive records in sort order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from channel_explorer.core.database import Base
from channel_explorer.core.exceptions import InvalidFilterError
from channel_explorer.core.pagination import ID_FIELD
from channel_explorer.features.channels.models import (
    FIELD_COLUMNS,
    ChannelRecord,
    columns_from_document,
)
from channel_explorer.infra.store.base import (
    BoundaryMode,
    Constraint,
    ConstraintOp,
    validate_constraints,
)

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import InstrumentedAttribute

    from channel_explorer.core.pagination import CursorData
    from channel_explorer.features.channels.schemas import SortSpec

logger = logging.getLogger(__name__)


def _column(field: str) -> InstrumentedAttribute[Any]:
    try:
        return getattr(ChannelRecord, FIELD_COLUMNS[field])
    except KeyError:
        raise InvalidFilterError(f"Field is not queryable: {field}", filter_name=field) from None


def _condition(constraint: Constraint) -> Any:
    column = _column(constraint.field)
    match constraint.op:
        case ConstraintOp.EQ:
            return column == constraint.value
        case ConstraintOp.IN:
            return column.in_(list(constraint.value))
        case ConstraintOp.GTE:
            return column >= constraint.value
        case ConstraintOp.LTE:
            return column <= constraint.value
    raise InvalidFilterError(f"Unsupported operator: {constraint.op}", filter_name=constraint.field)


class SQLChannelStore:
    """``ChannelStore`` over a relational database.

    Args:
        engine: Async engine; the adapter owns it and disposes it on ``close``
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> SQLChannelStore:
        return cls(create_async_engine(url, echo=echo))

    async def create_schema(self) -> None:
        """Create tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    def _base_query(self, collection: str, constraints: Sequence[Constraint]) -> Select[Any]:
        validate_constraints(constraints)
        stmt = select(ChannelRecord).where(ChannelRecord.collection == collection)
        for constraint in constraints:
            stmt = stmt.where(_condition(constraint))
        return stmt

    @staticmethod
    def _seek(stmt: Select[Any], field: str, boundary: CursorData, *, less_than: bool) -> Select[Any]:
        sort_column = _column(field)
        value = boundary.sort_value(field)
        if value is None:
            value = 0
        record_id = boundary.record_id or ""
        if less_than:
            return stmt.where(
                or_(sort_column < value, and_(sort_column == value, ChannelRecord.id < record_id))
            )
        return stmt.where(
            or_(sort_column > value, and_(sort_column == value, ChannelRecord.id > record_id))
        )

    async def query_page(
        self,
        collection: str,
        constraints: Sequence[Constraint],
        sort: SortSpec,
        limit: int,
        boundary: CursorData | None = None,
        boundary_mode: BoundaryMode = BoundaryMode.AFTER,
    ) -> list[dict[str, Any]]:
        stmt = self._base_query(collection, constraints)
        sort_column = _column(str(sort.field))

        backward = boundary_mode is BoundaryMode.BEFORE
        # Read direction: reversed for backward pages, flipped back below
        descending = sort.descending != backward

        if boundary is not None:
            # "Less than" in storage terms is the next record when reading descending
            stmt = self._seek(stmt, str(sort.field), boundary, less_than=descending)

        if descending:
            stmt = stmt.order_by(sort_column.desc(), ChannelRecord.id.desc())
        else:
            stmt = stmt.order_by(sort_column.asc(), ChannelRecord.id.asc())
        stmt = stmt.limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = list(result.scalars().all())

        if backward:
            rows.reverse()

        logger.debug(
            "SQL query on %s returned %d rows", collection, len(rows),
            extra={"collection": collection, "boundary_mode": str(boundary_mode)},
        )
        return [self._document(row) for row in rows]

    async def count_matching(self, collection: str, constraints: Sequence[Constraint]) -> int:
        stmt = self._base_query(collection, constraints)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        async with self.session_factory() as session:
            result = await session.execute(count_stmt)
            return int(result.scalar_one())

    async def upsert_many(self, collection: str, records: Sequence[Mapping[str, Any]]) -> int:
        incoming: dict[str, dict[str, Any]] = {}
        for record in records:
            incoming.setdefault(str(record[ID_FIELD]), {}).update(record)

        async with self.session_factory() as session, session.begin():
            for record_id, record in incoming.items():
                existing = await session.get(ChannelRecord, (record_id, collection))
                document = dict(existing.payload) if existing is not None else {}
                document.update(record)
                document[ID_FIELD] = record_id
                values = columns_from_document(document)
                if existing is None:
                    session.add(ChannelRecord(collection=collection, payload=document, **values))
                else:
                    for attr, value in values.items():
                        setattr(existing, attr, value)
                    existing.payload = document
        return len(records)

    async def sample(self, collection: str, limit: int) -> list[dict[str, Any]]:
        stmt = select(ChannelRecord).where(ChannelRecord.collection == collection).limit(limit)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._document(row) for row in result.scalars().all()]

    @staticmethod
    def _document(row: ChannelRecord) -> dict[str, Any]:
        document = dict(row.payload or {})
        document[ID_FIELD] = row.id
        return document


__all__ = ["SQLChannelStore"]
