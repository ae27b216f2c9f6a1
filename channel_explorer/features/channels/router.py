"""Channel browsing REST API endpoints.

Filters and sort are read from the same flat query parameters the URL state
helpers produce (``search``, ``categories``, ``quality``, ``monetized``,
``minSubs``, ``sort``, ``dir`` ...), so a browser URL can be replayed
against the API unchanged. Paging uses the opaque ``after``/``before``
tokens returned in ``page_info``.
"""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Query, Request

from channel_explorer.core.dependencies import StoreDep, StoreSettingsDep
from channel_explorer.core.pagination import CursorCodec, PageInfo
from channel_explorer.core.settings import get_browser_settings
from channel_explorer.features.channels.constants import PAGE_SIZE
from channel_explorer.features.channels.schemas import (
    CategoryListResponse,
    ChannelPageResponse,
    CountResponse,
)
from channel_explorer.features.channels.service import ChannelBrowseService
from channel_explorer.features.channels.url_state import parse_state, serialize_state

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get(
    "",
    response_model=ChannelPageResponse,
    summary="Browse channels",
    description="One page of channels under the given filters and sort.",
)
async def list_channels(
    request: Request,
    store: StoreDep,
    store_settings: StoreSettingsDep,
    after: Annotated[str | None, Query(description="end_cursor of the previous page")] = None,
    before: Annotated[str | None, Query(description="start_cursor of the next page")] = None,
    with_count: Annotated[bool, Query(description="Include the approximate total")] = False,
) -> ChannelPageResponse:
    filters, sort = parse_state(request.query_params)
    service = ChannelBrowseService(store, collection=store_settings.collection)

    page = await service.get_page(filters, sort, after=after, before=before)
    total = await service.count(filters) if with_count else None

    return ChannelPageResponse(
        items=page.channels,
        page_info=PageInfo(
            has_previous_page=page.has_prev,
            has_next_page=page.has_next,
            start_cursor=CursorCodec.encode(page.first) if page.first else None,
            end_cursor=CursorCodec.encode(page.last) if page.last else None,
            total_count=total,
        ),
        state=serialize_state(filters, sort),
    )


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Approximate channel count",
    description="Counts pushable filters only; search and category filters are not reflected.",
)
async def count_channels(
    request: Request,
    store: StoreDep,
    store_settings: StoreSettingsDep,
) -> CountResponse:
    filters, _ = parse_state(request.query_params)
    service = ChannelBrowseService(store, collection=store_settings.collection)
    total = await service.count(filters)
    return CountResponse(total_count=total, total_pages=math.ceil(total / PAGE_SIZE))


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    summary="Known category tags",
)
async def list_channel_categories(
    store: StoreDep,
    store_settings: StoreSettingsDep,
) -> CategoryListResponse:
    service = ChannelBrowseService(store, collection=store_settings.collection)
    categories = await service.categories(get_browser_settings().category_sample_size)
    return CategoryListResponse(categories=categories)
