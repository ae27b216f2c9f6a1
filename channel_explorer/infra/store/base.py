"""Store query primitive consumed by the browsing engine.

The engine never talks to a concrete database. It hands a list of
``Constraint`` tuples, a sort, a limit and an optional boundary cursor to a
``ChannelStore`` and gets raw camelCase records back. Adapters must honour
the restricted query language the engine plans for:

- equality, set membership, and ``>=``/``<=`` on at most one field
- a single sort field, with ``id`` as implicit tie-break in the same direction
- ``BoundaryMode.BEFORE`` yields the *last* ``limit`` records preceding the
  boundary, still in sort order
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

from channel_explorer.core.exceptions import InvalidFilterError

if TYPE_CHECKING:
    from channel_explorer.core.pagination import CursorData
    from channel_explorer.features.channels.schemas import SortSpec


class ConstraintOp(StrEnum):
    EQ = "=="
    IN = "in"
    GTE = ">="
    LTE = "<="


RANGE_OPS = frozenset({ConstraintOp.GTE, ConstraintOp.LTE})


class BoundaryMode(StrEnum):
    AFTER = "after"
    BEFORE = "before"


class Constraint(NamedTuple):
    """One pushable predicate: ``field op value``."""

    field: str
    op: ConstraintOp
    value: Any

    def __str__(self) -> str:
        return f"{self.field} {self.op} {self.value!r}"


def range_fields(constraints: Iterable[Constraint]) -> set[str]:
    """Fields carrying a range operator."""
    return {c.field for c in constraints if c.op in RANGE_OPS}


def validate_constraints(constraints: Sequence[Constraint]) -> None:
    """Reject constraint lists the query engine cannot run.

    Raises:
        InvalidFilterError: More than one field uses a range operator, or an
            ``in`` constraint has an empty value list.
    """
    fields = range_fields(constraints)
    if len(fields) > 1:
        raise InvalidFilterError(
            f"Range constraints on more than one field: {', '.join(sorted(fields))}",
            filter_name=",".join(sorted(fields)),
        )
    for constraint in constraints:
        if constraint.op is ConstraintOp.IN and not constraint.value:
            raise InvalidFilterError(
                "Membership constraint requires at least one value",
                filter_name=constraint.field,
            )


@runtime_checkable
class ChannelStore(Protocol):
    """Async document store holding channel records."""

    async def query_page(
        self,
        collection: str,
        constraints: Sequence[Constraint],
        sort: SortSpec,
        limit: int,
        boundary: CursorData | None = None,
        boundary_mode: BoundaryMode = BoundaryMode.AFTER,
    ) -> list[dict[str, Any]]:
        """Ordered records matching ``constraints``, at most ``limit``."""
        ...

    async def count_matching(
        self,
        collection: str,
        constraints: Sequence[Constraint],
    ) -> int:
        """Count of records matching ``constraints``, ignoring paging."""
        ...

    async def upsert_many(
        self,
        collection: str,
        records: Sequence[Mapping[str, Any]],
    ) -> int:
        """Merge records into the collection keyed by ``id``."""
        ...

    async def sample(self, collection: str, limit: int) -> list[dict[str, Any]]:
        """First ``limit`` records in storage order."""
        ...

    async def close(self) -> None: ...


__all__ = [
    "RANGE_OPS",
    "BoundaryMode",
    "ChannelStore",
    "Constraint",
    "ConstraintOp",
    "range_fields",
    "validate_constraints",
]
