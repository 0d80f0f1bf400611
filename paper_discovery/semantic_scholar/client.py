"""Async HTTP client for the Semantic Scholar Graph API."""

import asyncio
import logging
from typing import Any

import httpx

from ..config.loader import SemanticScholarConfig
from ..errors import SourceUnavailable
from ..transport import RateLimiter, Sleep, send_with_retry

logger = logging.getLogger(__name__)

SOURCE_NAME = "semantic_scholar"

DEFAULT_SEARCH_FIELDS = [
    "title",
    "authors",
    "abstract",
    "year",
    "venue",
    "externalIds",
    "openAccessPdf",
    "referenceCount",
    "publicationTypes",
    "publicationDate",
]


class SemanticScholarClient:
    """Async client for Semantic Scholar API."""

    def __init__(
        self,
        config: SemanticScholarConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or SemanticScholarConfig()
        self._transport = transport
        self._sleep = sleep

        self.rate_limiter = (
            RateLimiter(self.config.requests_per_second)
            if self.config.requests_per_second
            else None
        )

        # Build headers
        self.headers: dict[str, str] = {"User-Agent": self.config.user_agent}
        if self.config.api_key:
            self.headers["x-api-key"] = self.config.api_key
            logger.info("Semantic Scholar client initialized with API key")
        else:
            logger.warning("No API key provided - shared rate limits apply")

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SemanticScholarClient":
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=self.headers,
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

    async def search_papers(
        self,
        query: str,
        limit: int = 20,
        fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """Search for papers using the /paper/search endpoint.

        Raises:
            SourceUnavailable: on a final non-2xx status, a network error or
                a body that is not JSON
        """
        params: dict[str, Any] = {
            "query": query,
            "limit": min(limit, 100),  # API max is 100 per request
            "fields": ",".join(fields or DEFAULT_SEARCH_FIELDS),
        }

        logger.info(f"Searching papers: query='{query}', limit={limit}")
        request = self.client.build_request("GET", "/paper/search", params=params)

        try:
            response = await send_with_retry(
                self.client,
                request,
                self.config.retry,
                sleep=self._sleep,
                rate_limiter=self.rate_limiter,
            )
        except httpx.TransportError as e:
            raise SourceUnavailable(SOURCE_NAME, f"network error: {e!r}") from e

        if not response.is_success:
            raise SourceUnavailable(
                SOURCE_NAME,
                f"API error: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailable(SOURCE_NAME, f"malformed body: {e}") from e

        if isinstance(data, dict):
            found = len(data.get("data") or [])
            logger.info(f"Search returned {found} papers (total available: {data.get('total', 0)})")
        return data
