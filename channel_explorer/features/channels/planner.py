"""Filter planning: split a ChannelFilters into store constraints and residuals.

The store runs equality, membership and a single range field per query.
Everything else is left for ``residual.apply_residual_filters``.

Range priority is fixed: a revenue bound wins over subscriber bounds. When
both are set, only revenue is pushed and subscribers are re-checked locally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from channel_explorer.features.channels.constants import (
    FACELESS_FIELD,
    MONETIZED_FIELD,
    QUALITY_FIELD,
    REVENUE_FIELD,
    SHORTS_FIELD,
    SUBSCRIBERS_FIELD,
)
from channel_explorer.features.channels.schemas import ChannelFilters
from channel_explorer.infra.store.base import Constraint, ConstraintOp


@dataclass(frozen=True, slots=True)
class PlanResult:
    """Pushable constraints plus which numeric range made it into the query."""

    constraints: tuple[Constraint, ...] = field(default_factory=tuple)
    revenue_range_pushed: bool = False
    subscriber_range_pushed: bool = False

    @property
    def is_unconstrained(self) -> bool:
        return not self.constraints


def _range(field_name: str, lower: float | None, upper: float | None) -> list[Constraint]:
    constraints = []
    if lower is not None:
        constraints.append(Constraint(field_name, ConstraintOp.GTE, lower))
    if upper is not None:
        constraints.append(Constraint(field_name, ConstraintOp.LTE, upper))
    return constraints


def plan_filters(filters: ChannelFilters) -> PlanResult:
    """Plan the store query for ``filters``.

    Never raises; unset fields simply produce no constraint. Search and
    category tags are never pushed.

    Example:
        >>> plan = plan_filters(ChannelFilters(min_revenue=1000, min_subscribers=5000))
        >>> [str(c) for c in plan.constraints]
        ['avgMonthlyRevenue >= 1000.0']
    """
    if filters.is_default:
        return PlanResult()

    constraints: list[Constraint] = []

    if len(filters.quality) == 1:
        constraints.append(Constraint(QUALITY_FIELD, ConstraintOp.EQ, filters.quality[0]))
    elif filters.quality:
        constraints.append(Constraint(QUALITY_FIELD, ConstraintOp.IN, list(filters.quality)))

    for field_name, value in (
        (MONETIZED_FIELD, filters.is_monetized),
        (FACELESS_FIELD, filters.is_faceless),
        (SHORTS_FIELD, filters.has_shorts),
    ):
        if value is not None:
            constraints.append(Constraint(field_name, ConstraintOp.EQ, value))

    revenue_pushed = subscribers_pushed = False
    if filters.has_revenue_range:
        constraints += _range(REVENUE_FIELD, filters.min_revenue, filters.max_revenue)
        revenue_pushed = True
    elif filters.has_subscriber_range:
        constraints += _range(SUBSCRIBERS_FIELD, filters.min_subscribers, filters.max_subscribers)
        subscribers_pushed = True

    return PlanResult(
        constraints=tuple(constraints),
        revenue_range_pushed=revenue_pushed,
        subscriber_range_pushed=subscribers_pushed,
    )


__all__ = ["PlanResult", "plan_filters"]
