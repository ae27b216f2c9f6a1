"""Base HTTP client for external API integrations.

Wraps one pooled ``httpx.AsyncClient`` per integration. JSON requests are
retried with exponential backoff on transport failures and on throttling or
gateway responses; any other error status is raised to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from channel_explorer import __version__
from channel_explorer.utils.retry import is_retryable_http_error, retry

logger = logging.getLogger(__name__)

USER_AGENT = f"channel-explorer/{__version__}"


class BaseHTTPClient:
    """Pooled JSON client for one external API.

    Example:
        ```python
        class SourceClient(BaseHTTPClient):
            async def list_items(self) -> list[dict]:
                return await self.get("/items")
        ```

    Args:
        base_url: Scheme and host (plus optional path prefix) of the API.
        timeout: Per-request timeout in seconds.
        headers: Headers sent with every request.
        transport: Transport override, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = {"User-Agent": USER_AGENT, **(headers or {})}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=self.default_headers,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> BaseHTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @retry(
        max_attempts=3,
        initial_delay=1.0,
        max_delay=10.0,
        retry_if=is_retryable_http_error,
    )
    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and decode the JSON body.

        Raises:
            httpx.HTTPStatusError: Non-retryable 4xx/5xx response.
            RetryError: Retryable failures exhausted every attempt.
        """
        started = time.perf_counter()
        response = await self.client.request(method, path, params=params, headers=headers)
        logger.info(
            "%s %s%s -> %d", method, self.base_url, path, response.status_code,
            extra={
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        response.raise_for_status()
        return response.json()

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self.request_json("GET", path, params=params, headers=headers)
