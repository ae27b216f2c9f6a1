"""Client for the third-party channel listing API."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import httpx

from channel_explorer.infra.external.base_client import BaseHTTPClient

logger = logging.getLogger(__name__)


class ChannelSourceClient(BaseHTTPClient):
    """Fetches raw channel records from the source API.

    The endpoint is a single GET returning either a JSON array of records or
    an object wrapping the array under ``data`` or ``channels``.

    Usage:
        async with ChannelSourceClient(url, token=token) as client:
            records = await client.fetch_channels()
    """

    def __init__(
        self,
        api_url: str,
        *,
        token: str,
        referer: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "*/*",
            "Cache-Control": "no-cache",
            "Authorization": f"Bearer {token}",
        }
        if referer:
            headers["Origin"] = referer
            headers["Referer"] = f"{referer.rstrip('/')}/"
        url = httpx.URL(api_url)
        # Base is scheme and host; the listing path (with any query) is requested per call
        self.listing_path = url.raw_path.decode("ascii")
        super().__init__(
            base_url=f"{url.scheme}://{url.netloc.decode('ascii')}",
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def fetch_channels(self) -> list[dict[str, Any]]:
        """All records the endpoint returns, unwrapped to a list."""
        request_id = f"getNewestChannels-{int(time.time() * 1000)}-{uuid.uuid4().hex[:10]}"
        payload = await self.get(self.listing_path, headers={"X-Request-Id": request_id})
        return extract_records(payload)


def extract_records(payload: Any) -> list[dict[str, Any]]:
    """Unwrap the record list from an API response body.

    Anything without a recognisable list yields ``[]``.
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        records = payload.get("data") or payload.get("channels") or []
    else:
        records = []

    if not isinstance(records, list):
        logger.warning("Unexpected record container in API response", extra={"type": type(records).__name__})
        return []
    return [record for record in records if isinstance(record, dict)]


__all__ = ["ChannelSourceClient", "extract_records"]
