"""Tests for the Semantic Scholar and OpenAlex adapters."""

import asyncio
from datetime import date

import httpx
import pytest

from fakes import (
    LONG_ABSTRACT,
    MEDIUM_ABSTRACT,
    ScriptedTransport,
    fake_config,
    no_sleep,
    openalex_response,
    openalex_work,
    ss_paper,
    ss_response,
)
from paper_discovery.errors import SourceUnavailable
from paper_discovery.openalex import OpenAlexAdapter, normalize_doi, reconstruct_abstract
from paper_discovery.semantic_scholar import SemanticScholarAdapter


def _search_ss(transport, topic="graph databases"):
    config = fake_config()

    async def run():
        async with SemanticScholarAdapter(
            config.semantic_scholar, transport=transport, sleep=no_sleep
        ) as adapter:
            return await adapter.search(topic)

    return asyncio.run(run())


def _search_openalex(transport, topic="graph databases"):
    config = fake_config()

    async def run():
        async with OpenAlexAdapter(config.openalex, transport=transport, sleep=no_sleep) as adapter:
            return await adapter.search(topic)

    return asyncio.run(run())


# --- Inverted index reconstruction ---


def test_reconstruct_abstract_places_repeated_words():
    assert reconstruct_abstract({"the": [0, 2], "fox": [1]}) == "the fox the"


def test_reconstruct_abstract_skips_gaps():
    assert reconstruct_abstract({"alpha": [0], "omega": [5]}) == "alpha omega"


def test_reconstruct_abstract_empty():
    assert reconstruct_abstract(None) == ""
    assert reconstruct_abstract({}) == ""


def test_normalize_doi():
    assert normalize_doi("https://doi.org/10.1145/123") == "10.1145/123"
    assert normalize_doi("10.1145/123") == "10.1145/123"
    assert normalize_doi(None) is None


# --- Semantic Scholar ---


def test_semantic_scholar_query_and_params():
    transport = ScriptedTransport(ss_response())

    _search_ss(transport, topic="quantum error correction")

    request = transport.requests[0]
    assert request.url.path == "/graph/v1/paper/search"
    assert request.url.params["query"] == "quantum error correction computing technology"
    assert request.url.params["limit"] == "20"
    assert "openAccessPdf" in request.url.params["fields"]
    assert "referenceCount" in request.url.params["fields"]


def test_semantic_scholar_normalization():
    transport = ScriptedTransport(
        ss_response(
            ss_paper(
                "abc",
                "  Consensus at Scale ",
                abstract=LONG_ABSTRACT,
                venue="USENIX ATC",
                year=2021,
                pdf_url="https://example.org/paper.pdf",
                reference_count=42,
                authors=("Leslie Lamport", "Barbara Liskov"),
                doi="10.5555/1",
            ),
            ss_paper("def", "No Venue Paper", venue=None, year=None),
        )
    )

    first, second = _search_ss(transport)

    assert first.record.title == "Consensus at Scale"
    assert first.record.authors == ["Leslie Lamport", "Barbara Liskov"]
    assert first.record.url == "https://example.org/paper.pdf"
    assert first.record.source_id == "abc"
    assert first.record.doi == "10.5555/1"
    assert first.has_direct_link
    assert first.reference_count == 42
    assert first.position == 0

    assert second.record.venue == "IEEE"
    assert second.reported_venue is None
    assert second.record.year == date.today().year
    assert second.reported_year is None
    assert second.record.url == "https://www.semanticscholar.org/paper/def"
    assert not second.has_direct_link


def test_semantic_scholar_sends_api_key():
    config = fake_config()
    config.semantic_scholar.api_key = "secret"
    transport = ScriptedTransport(ss_response())

    async def run():
        async with SemanticScholarAdapter(
            config.semantic_scholar, transport=transport, sleep=no_sleep
        ) as adapter:
            await adapter.search("x")

    asyncio.run(run())
    assert transport.requests[0].headers["x-api-key"] == "secret"


def test_semantic_scholar_unavailable_after_retries():
    transport = ScriptedTransport((429, {"message": "Too Many Requests"}))

    with pytest.raises(SourceUnavailable) as excinfo:
        _search_ss(transport)

    assert excinfo.value.source == "semantic_scholar"
    assert excinfo.value.status_code == 429
    assert transport.calls == 4


def test_semantic_scholar_malformed_body():
    transport = ScriptedTransport((200, "<html>not json</html>"))

    with pytest.raises(SourceUnavailable):
        _search_ss(transport)


def test_semantic_scholar_unexpected_shape():
    transport = ScriptedTransport((200, {"data": [{"title": "missing id"}]}))

    with pytest.raises(SourceUnavailable):
        _search_ss(transport)


def test_semantic_scholar_network_error():
    transport = ScriptedTransport(httpx.ConnectError("dns failure"))

    with pytest.raises(SourceUnavailable):
        _search_ss(transport)


def test_adapter_requires_context_manager():
    adapter = SemanticScholarAdapter(fake_config().semantic_scholar)

    with pytest.raises(RuntimeError):
        asyncio.run(adapter.search("x"))


# --- OpenAlex ---


def test_openalex_query_and_params():
    transport = ScriptedTransport(openalex_response())

    _search_openalex(transport, topic="quantum error correction")

    params = transport.requests[0].url.params
    assert transport.requests[0].url.path == "/works"
    assert params["search"] == "quantum error correction computing"
    assert params["filter"] == "has_abstract:true"
    assert params["per-page"] == "15"
    assert params["sort"] == "cited_by_count:desc"


def test_openalex_normalization():
    transport = ScriptedTransport(
        openalex_response(
            openalex_work(
                "W1",
                "Open Paper",
                abstract=MEDIUM_ABSTRACT,
                venue="ACM Computing Surveys",
                year=2020,
                oa_url="https://arxiv.org/pdf/1234.pdf",
                doi="10.1145/999",
                authors=("Grace Hopper", "Frances Allen"),
            ),
            openalex_work("W2", "DOI Only", doi="10.1000/abc"),
            openalex_work("W3", "Bare Work"),
        )
    )

    open_paper, doi_only, bare = _search_openalex(transport)

    assert open_paper.record.abstract == MEDIUM_ABSTRACT
    assert open_paper.record.authors == ["Grace Hopper", "Frances Allen"]
    assert open_paper.record.venue == "ACM Computing Surveys"
    assert open_paper.record.url == "https://arxiv.org/pdf/1234.pdf"
    assert open_paper.record.doi == "10.1145/999"
    assert open_paper.record.source_id == "https://openalex.org/W1"
    assert open_paper.has_direct_link
    assert open_paper.reference_count is None

    assert doi_only.record.url == "https://doi.org/10.1000/abc"
    assert doi_only.has_direct_link

    assert bare.record.url == "https://openalex.org/W3"
    assert not bare.has_direct_link
    assert bare.record.venue == "IEEE"
    assert bare.record.year == date.today().year


def test_openalex_does_not_retry_by_default():
    transport = ScriptedTransport((503, {}), openalex_response())

    with pytest.raises(SourceUnavailable) as excinfo:
        _search_openalex(transport)

    assert excinfo.value.status_code == 503
    assert transport.calls == 1
