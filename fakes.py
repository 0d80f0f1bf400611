"""Fake HTTP transports and payload builders shared by the tests."""

import json
from typing import Any

import httpx

from paper_discovery.config.loader import (
    DiscoveryConfig,
    OpenAlexConfig,
    SemanticScholarConfig,
)
from paper_discovery.paper_sources import PaperDiscoveryService
from paper_discovery.config.factory import create_discovery_service
from paper_discovery.transport import RetryPolicy

LONG_ABSTRACT = (
    "We study how errors accumulate in large systems and propose a layered "
    "approach that detects, isolates and corrects faults before they spread. "
    "Our evaluation on three production workloads shows the technique cuts "
    "recovery time substantially while adding little overhead, and we discuss "
    "how the same ideas carry over to other settings with similar constraints."
)
MEDIUM_ABSTRACT = (
    "This paper presents a practical method for the problem at hand and "
    "evaluates it on a realistic benchmark with encouraging results overall."
)
SHORT_ABSTRACT = "Too short to cite."


async def no_sleep(_: float) -> None:
    """Sleep replacement so retries run instantly."""


class TrackedStream(httpx.AsyncByteStream):
    """Response body that remembers whether it was read and closed."""

    def __init__(self, body: bytes, error: Exception | None = None):
        self.body = body
        self.error = error
        self.consumed = False
        self.closed = False

    async def __aiter__(self):
        self.consumed = True
        if self.error is not None:
            raise self.error
        yield self.body

    async def aclose(self) -> None:
        self.closed = True


class ScriptedTransport(httpx.AsyncBaseTransport):
    """
    Replays a script of responses, one per request.

    Each step is ``(status_code, payload)`` or an exception to raise. The
    last step repeats once the script runs out. A payload that is a str is
    sent verbatim, an exception is raised while the body is read, anything
    else is sent as JSON.
    """

    def __init__(self, *steps: Any):
        if not steps:
            steps = ((200, {}),)
        self._steps = list(steps)
        self.requests: list[httpx.Request] = []
        self.streams: list[TrackedStream] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self._steps[min(len(self.requests), len(self._steps)) - 1]

        if isinstance(step, Exception):
            raise step

        status_code, payload = step
        if isinstance(payload, Exception):
            stream = TrackedStream(b"", error=payload)
        elif isinstance(payload, str):
            stream = TrackedStream(payload.encode())
        else:
            stream = TrackedStream(json.dumps(payload).encode())
        self.streams.append(stream)
        return httpx.Response(
            status_code,
            headers={"content-type": "application/json"},
            stream=stream,
            request=request,
        )


def ss_paper(
    paper_id: str,
    title: str | None,
    abstract: str | None = MEDIUM_ABSTRACT,
    venue: str | None = None,
    year: int | None = None,
    pdf_url: str | None = None,
    reference_count: int | None = None,
    authors: tuple[str, ...] = ("Ada Lovelace",),
    doi: str | None = None,
) -> dict[str, Any]:
    """A Semantic Scholar /paper/search hit."""
    return {
        "paperId": paper_id,
        "title": title,
        "abstract": abstract,
        "authors": [{"authorId": str(i), "name": name} for i, name in enumerate(authors)],
        "year": year,
        "venue": venue,
        "openAccessPdf": {"url": pdf_url, "status": "GREEN"} if pdf_url else None,
        "externalIds": {"DOI": doi} if doi else {},
        "referenceCount": reference_count,
    }


def ss_response(*papers: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    return 200, {"total": len(papers), "offset": 0, "data": list(papers)}


def inverted(text: str) -> dict[str, list[int]]:
    """Encode text the way OpenAlex stores abstracts."""
    index: dict[str, list[int]] = {}
    for position, word in enumerate(text.split()):
        index.setdefault(word, []).append(position)
    return index


def openalex_work(
    work_id: str,
    title: str | None,
    abstract: str | None = MEDIUM_ABSTRACT,
    venue: str | None = None,
    year: int | None = None,
    oa_url: str | None = None,
    doi: str | None = None,
    authors: tuple[str, ...] = ("Grace Hopper",),
) -> dict[str, Any]:
    """An OpenAlex /works result."""
    return {
        "id": f"https://openalex.org/{work_id}",
        "doi": f"https://doi.org/{doi}" if doi else None,
        "title": title,
        "display_name": title,
        "publication_year": year,
        "authorships": [{"author": {"display_name": name}} for name in authors],
        "primary_location": {"source": {"display_name": venue}} if venue else None,
        "open_access": {"is_oa": bool(oa_url), "oa_url": oa_url},
        "abstract_inverted_index": inverted(abstract) if abstract else None,
    }


def openalex_response(*works: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    return 200, {"meta": {"count": len(works)}, "results": list(works)}


def fake_config(**overrides: Any) -> DiscoveryConfig:
    """Config pointing at fake hosts with instant retries."""
    fast_retry = RetryPolicy(max_retries=3, base_delay_seconds=0, max_jitter_seconds=0)
    config = DiscoveryConfig(
        semantic_scholar=SemanticScholarConfig(
            base_url="https://s2.test/graph/v1", api_key=None, retry=fast_retry
        ),
        openalex=OpenAlexConfig(base_url="https://openalex.test", mailto=None),
    )
    return config.model_copy(update=overrides)


def make_service(
    primary: ScriptedTransport,
    secondary: ScriptedTransport,
    config: DiscoveryConfig | None = None,
) -> PaperDiscoveryService:
    """A discovery service wired to scripted transports."""
    return create_discovery_service(
        config or fake_config(),
        primary_transport=primary,
        secondary_transport=secondary,
        sleep=no_sleep,
    )
