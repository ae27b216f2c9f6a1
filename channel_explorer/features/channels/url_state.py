"""Filter and sort state as flat query parameters.

Only non-default values are written, so the default view serializes to an
empty mapping. Parsing is total: a missing or malformed value falls back to
the default for that field rather than failing.

    >>> serialize_state(ChannelFilters(quality=("high",)), SortSpec(field=SortField.RPM))
    {'quality': 'high', 'sort': 'rpm'}
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode

from pydantic import ValidationError

from channel_explorer.features.channels.schemas import (
    DEFAULT_SORT,
    ChannelFilters,
    SortDirection,
    SortField,
    SortSpec,
)

logger = logging.getLogger(__name__)

# Query key -> ChannelFilters field
BOOL_KEYS = {"monetized": "is_monetized", "faceless": "is_faceless", "shorts": "has_shorts"}
INT_KEYS = {"minSubs": "min_subscribers", "maxSubs": "max_subscribers"}
FLOAT_KEYS = {"minRev": "min_revenue", "maxRev": "max_revenue"}
LIST_KEYS = {"categories": "categories", "quality": "quality"}


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def serialize_state(filters: ChannelFilters, sort: SortSpec) -> dict[str, str]:
    """Query parameters describing ``filters`` and ``sort``."""
    params: dict[str, str] = {}

    if filters.search:
        params["search"] = filters.search
    for key, attr in LIST_KEYS.items():
        values = getattr(filters, attr)
        if values:
            params[key] = ",".join(values)
    for key, attr in BOOL_KEYS.items():
        value = getattr(filters, attr)
        if value is not None:
            params[key] = "true" if value else "false"
    for key, attr in (INT_KEYS | FLOAT_KEYS).items():
        value = getattr(filters, attr)
        if value is not None:
            params[key] = _format_number(value)

    if sort.field is not DEFAULT_SORT.field:
        params["sort"] = str(sort.field)
    if sort.direction is not DEFAULT_SORT.direction:
        params["dir"] = str(sort.direction)
    return params


def _parse_bool(raw: str | None) -> bool | None:
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


def _parse_int(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        # Leading integer part of a decimal, e.g. "5000.7" -> 5000
        return int(float(raw))
    except (ValueError, OverflowError):
        return None


def _parse_float(raw: str | None) -> float | None:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part for part in raw.split(",") if part)


def parse_state(params: Mapping[str, Any]) -> tuple[ChannelFilters, SortSpec]:
    """Rebuild ``(filters, sort)`` from query parameters.

    Unknown keys are ignored. Unknown sort fields or directions fall back to
    ``subscribers``/``desc``.
    """

    def get(key: str) -> str | None:
        value = params.get(key)
        if isinstance(value, list | tuple):
            value = value[-1] if value else None
        return None if value is None else str(value)

    values: dict[str, Any] = {"search": get("search") or ""}
    for key, attr in LIST_KEYS.items():
        values[attr] = _parse_list(get(key))
    for key, attr in BOOL_KEYS.items():
        values[attr] = _parse_bool(get(key))
    for key, attr in INT_KEYS.items():
        values[attr] = _parse_int(get(key))
    for key, attr in FLOAT_KEYS.items():
        values[attr] = _parse_float(get(key))

    try:
        filters = ChannelFilters(**values)
    except ValidationError:
        logger.warning("Unparseable filter state, using defaults", extra={"params": dict(params)})
        filters = ChannelFilters()

    field = get("sort")
    direction = get("dir")
    sort = SortSpec(
        field=SortField(field) if field in SortField._value2member_map_ else DEFAULT_SORT.field,
        direction=(
            SortDirection(direction)
            if direction in SortDirection._value2member_map_
            else DEFAULT_SORT.direction
        ),
    )
    return filters, sort


def to_query_string(filters: ChannelFilters, sort: SortSpec) -> str:
    return urlencode(serialize_state(filters, sort))


def from_query_string(query: str) -> tuple[ChannelFilters, SortSpec]:
    return parse_state(dict(parse_qsl(query.lstrip("?"), keep_blank_values=True)))


__all__ = ["from_query_string", "parse_state", "serialize_state", "to_query_string"]
