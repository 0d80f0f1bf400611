"""Semantic Scholar implementation of the paper search protocol."""

import asyncio
import logging
from datetime import date

import httpx
from pydantic import ValidationError

from ..config.loader import SemanticScholarConfig
from ..errors import SourceUnavailable
from ..paper_sources.models import Candidate, PaperRecord
from ..paper_sources.protocols import PaperSearchProvider
from ..transport import Sleep
from .client import SOURCE_NAME, SemanticScholarClient
from .models import PaperSearchResult, SearchResponse

logger = logging.getLogger(__name__)

PAPER_PAGE_URL = "https://www.semanticscholar.org/paper/{paper_id}"


def to_candidate(
    paper: PaperSearchResult,
    position: int,
    default_venue: str,
) -> Candidate:
    """Map a Semantic Scholar search hit onto the canonical record."""
    venue = (paper.venue or "").strip()
    pdf_url = paper.pdf_url

    record = PaperRecord(
        title=(paper.title or "").strip(),
        authors=[a.name for a in paper.authors if a.name],
        abstract=paper.abstract or "",
        year=paper.year or date.today().year,
        venue=venue or default_venue,
        url=pdf_url or PAPER_PAGE_URL.format(paper_id=paper.paper_id),
        source_id=paper.paper_id,
        doi=paper.doi,
    )
    return Candidate(
        record=record,
        source=SOURCE_NAME,
        position=position,
        reported_venue=venue or None,
        reported_year=paper.year,
        has_direct_link=bool(pdf_url and pdf_url.startswith("http")),
        reference_count=paper.reference_count,
    )


class SemanticScholarAdapter(PaperSearchProvider):
    """
    Adapter for Semantic Scholar API (primary provider).

    Usage:
        async with SemanticScholarAdapter() as adapter:
            candidates = await adapter.search("quantum error correction")
    """

    name = SOURCE_NAME

    def __init__(
        self,
        config: SemanticScholarConfig | None = None,
        default_venue: str = "IEEE",
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the Semantic Scholar adapter.

        Args:
            config: Endpoint, key, limits and retry policy. Defaults read the
                SEMANTIC_SCHOLAR_* environment variables.
            default_venue: Venue placeholder for papers without one
            transport: Optional httpx transport (tests inject a MockTransport)
            sleep: Coroutine used between retries
        """
        self.config = config or SemanticScholarConfig()
        self._default_venue = default_venue
        self._client = SemanticScholarClient(self.config, transport=transport, sleep=sleep)
        self._entered = False

    async def __aenter__(self) -> "SemanticScholarAdapter":
        await self._client.__aenter__()
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)
        self._entered = False

    def _ensure_entered(self) -> None:
        if not self._entered:
            raise RuntimeError(
                "Adapter not initialized. Use 'async with' context manager."
            )

    def build_query(self, topic: str) -> str:
        suffix = self.config.query_suffix.strip()
        return f"{topic} {suffix}" if suffix else topic

    async def search(self, topic: str) -> list[Candidate]:
        """
        Search for papers about a topic.

        Uses Semantic Scholar /paper/search endpoint with a single page of
        ``candidate_limit`` results.
        """
        self._ensure_entered()

        response_data = await self._client.search_papers(
            query=self.build_query(topic),
            limit=self.config.candidate_limit,
        )

        try:
            response = SearchResponse.model_validate(response_data)
        except ValidationError as e:
            raise SourceUnavailable(SOURCE_NAME, f"unexpected response shape: {e}") from e

        candidates = [
            to_candidate(paper, position, self._default_venue)
            for position, paper in enumerate(response.data)
        ]
        logger.debug(f"Semantic Scholar normalized {len(candidates)} candidates")
        return candidates
