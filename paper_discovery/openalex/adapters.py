"""OpenAlex implementation of the paper search protocol."""

import asyncio
import logging
from datetime import date

import httpx
from pydantic import ValidationError

from ..config.loader import OpenAlexConfig
from ..errors import SourceUnavailable
from ..paper_sources.models import Candidate, PaperRecord
from ..paper_sources.protocols import PaperSearchProvider
from ..transport import Sleep
from .client import SOURCE_NAME, OpenAlexClient
from .models import Work, WorksResponse

logger = logging.getLogger(__name__)

DOI_PREFIXES = ("https://doi.org/", "http://doi.org/", "doi:")


def reconstruct_abstract(inverted_index: dict[str, list[int]] | None) -> str:
    """Rebuild plain text from an OpenAlex abstract inverted index.

    Every word is placed at each of its positions; positions nobody claims
    are skipped.

    Example:
        >>> reconstruct_abstract({"the": [0, 2], "fox": [1]})
        'the fox the'
    """
    if not inverted_index:
        return ""

    words: dict[int, str] = {}
    for word, positions in inverted_index.items():
        for position in positions:
            if position >= 0:
                words[position] = word

    return " ".join(words[position] for position in sorted(words))


def normalize_doi(doi: str | None) -> str | None:
    """Strip resolver prefixes, keeping the bare ``10.x/y`` form."""
    if not doi:
        return None
    doi = doi.strip()
    for prefix in DOI_PREFIXES:
        if doi.lower().startswith(prefix):
            doi = doi[len(prefix):]
            break
    return doi or None


def to_candidate(work: Work, position: int, default_venue: str) -> Candidate:
    """Map an OpenAlex work onto the canonical record."""
    venue = None
    if work.primary_location and work.primary_location.source:
        venue = (work.primary_location.source.display_name or "").strip() or None

    doi = normalize_doi(work.doi)
    oa_url = work.open_access.oa_url if work.open_access else None
    if oa_url:
        url = oa_url
    elif doi:
        url = f"https://doi.org/{doi}"
    else:
        url = work.id

    record = PaperRecord(
        title=(work.display_name or work.title or "").strip(),
        authors=[
            a.author.display_name
            for a in work.authorships
            if a.author and a.author.display_name
        ],
        abstract=reconstruct_abstract(work.abstract_inverted_index),
        year=work.publication_year or date.today().year,
        venue=venue or default_venue,
        url=url,
        source_id=work.id,
        doi=doi,
    )
    return Candidate(
        record=record,
        source=SOURCE_NAME,
        position=position,
        reported_venue=venue,
        reported_year=work.publication_year,
        # The work id is an OpenAlex landing page, not a link to the paper.
        has_direct_link=url.startswith("http") and url != work.id,
        reference_count=None,
    )


class OpenAlexAdapter(PaperSearchProvider):
    """
    Adapter for OpenAlex API (secondary provider, used for topping up).

    Usage:
        async with OpenAlexAdapter() as adapter:
            candidates = await adapter.search("quantum error correction")
    """

    name = SOURCE_NAME

    def __init__(
        self,
        config: OpenAlexConfig | None = None,
        default_venue: str = "IEEE",
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or OpenAlexConfig()
        self._default_venue = default_venue
        self._client = OpenAlexClient(self.config, transport=transport, sleep=sleep)
        self._entered = False

    async def __aenter__(self) -> "OpenAlexAdapter":
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
        """Search OpenAlex /works and normalize the results."""
        self._ensure_entered()

        response_data = await self._client.search_works(
            query=self.build_query(topic),
            per_page=self.config.candidate_limit,
        )

        try:
            response = WorksResponse.model_validate(response_data)
        except ValidationError as e:
            raise SourceUnavailable(SOURCE_NAME, f"unexpected response shape: {e}") from e

        candidates = [
            to_candidate(work, position, self._default_venue)
            for position, work in enumerate(response.results)
        ]
        logger.debug(f"OpenAlex normalized {len(candidates)} candidates")
        return candidates
