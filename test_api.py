"""Tests for the HTTP edge endpoint."""

from fastapi.testclient import TestClient

from fakes import (
    ScriptedTransport,
    make_service,
    openalex_response,
    openalex_work,
    ss_paper,
    ss_response,
)
from paper_discovery.api import create_app

PAPER = {
    "title": "Raft: In Search of an Understandable Consensus Algorithm",
    "authors": ["Diego Ongaro", "John Ousterhout"],
    "abstract": "Raft is a consensus algorithm for managing a replicated log.",
    "year": 2014,
    "venue": "USENIX ATC",
    "url": "https://example.org/raft.pdf",
    "sourceId": "raft",
    "doi": None,
}


def client_for(primary, secondary):
    return TestClient(create_app(lambda: make_service(primary, secondary)))


def test_search_returns_papers():
    primary = ScriptedTransport(
        ss_response(ss_paper("p1", "Consensus Made Practical", venue="ACM", year=2020))
    )
    secondary = ScriptedTransport(openalex_response(openalex_work("W1", "Paxos Revisited")))

    with client_for(primary, secondary) as client:
        response = client.post("/search-papers", json={"topic": "consensus"})

    assert response.status_code == 200
    papers = response.json()["papers"]
    assert [p["title"] for p in papers] == ["Consensus Made Practical", "Paxos Revisited"]
    assert papers[0]["sourceId"] == "p1"


def test_empty_result_is_success():
    primary = ScriptedTransport(ss_response())
    secondary = ScriptedTransport(openalex_response())

    with client_for(primary, secondary) as client:
        response = client.post("/search-papers", json={"topic": "nothing here"})

    assert response.status_code == 200
    assert response.json() == {"papers": []}


def test_missing_or_blank_topic_is_400():
    primary = ScriptedTransport(ss_response())
    secondary = ScriptedTransport(openalex_response())

    with client_for(primary, secondary) as client:
        for body in ({}, {"topic": ""}, {"topic": "   "}):
            response = client.post("/search-papers", json=body)
            assert response.status_code == 400
            assert "error" in response.json()

    assert primary.calls == 0
    assert secondary.calls == 0


def test_malformed_body_is_400():
    primary = ScriptedTransport(ss_response())
    secondary = ScriptedTransport(openalex_response())

    with client_for(primary, secondary) as client:
        not_json = client.post(
            "/search-papers",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        wrong_type = client.post("/search-papers", json={"topic": ["a", "list"]})

    assert not_json.status_code == 400
    assert not_json.json() == {"error": "Malformed request body"}
    assert wrong_type.status_code == 400


def test_total_outage_is_503():
    primary = ScriptedTransport((500, {}))
    secondary = ScriptedTransport((500, {}))

    with client_for(primary, secondary) as client:
        response = client.post("/search-papers", json={"topic": "consensus"})

    assert response.status_code == 503
    assert response.json()["error"]


def test_export_ris():
    with client_for(ScriptedTransport(ss_response()), ScriptedTransport(openalex_response())) as client:
        response = client.post("/export/ris", json={"papers": [PAPER]})

    assert response.status_code == 200
    assert "references.ris" in response.headers["content-disposition"]
    assert response.text.startswith("TY  - JOUR\r\n")
    assert "AU  - Diego Ongaro" in response.text


def test_export_bibtex():
    with client_for(ScriptedTransport(ss_response()), ScriptedTransport(openalex_response())) as client:
        response = client.post("/export/bibtex", json={"papers": [PAPER, PAPER]})

    assert response.status_code == 200
    assert "references.bib" in response.headers["content-disposition"]
    assert "@article{ref1," in response.text
    assert "@article{ref2," in response.text


def test_health():
    with client_for(ScriptedTransport(ss_response()), ScriptedTransport(openalex_response())) as client:
        assert client.get("/health").json() == {"status": "ok"}
