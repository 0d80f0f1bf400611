"""Async HTTP client for the OpenAlex API."""

import asyncio
import logging
from typing import Any

import httpx

from ..config.loader import OpenAlexConfig
from ..errors import SourceUnavailable
from ..transport import Sleep, send_with_retry

logger = logging.getLogger(__name__)

SOURCE_NAME = "openalex"


class OpenAlexClient:
    """Async client for OpenAlex API."""

    def __init__(
        self,
        config: OpenAlexConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or OpenAlexConfig()
        self._transport = transport
        self._sleep = sleep
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "OpenAlexClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    async def search_works(self, query: str, per_page: int = 15) -> dict[str, Any]:
        """Search works with an abstract, most cited first.

        Raises:
            SourceUnavailable: on a final non-2xx status, a network error or
                a body that is not JSON
        """
        params: dict[str, Any] = {
            "search": query,
            "filter": "has_abstract:true",
            "per-page": min(per_page, 200),
            "sort": "cited_by_count:desc",
        }
        if self.config.mailto:
            params["mailto"] = self.config.mailto

        logger.info(f"Searching works: query='{query}', per_page={per_page}")
        request = self.client.build_request("GET", "/works", params=params)

        try:
            response = await send_with_retry(
                self.client, request, self.config.retry, sleep=self._sleep
            )
        except httpx.TransportError as e:
            raise SourceUnavailable(SOURCE_NAME, f"network error: {e!r}") from e

        if not response.is_success:
            raise SourceUnavailable(
                SOURCE_NAME,
                f"API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SourceUnavailable(SOURCE_NAME, f"malformed body: {e}") from e
