"""Canonical paper models shared by every provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field


class PaperRecord(BaseModel):
    """A citable paper as returned to callers."""

    title: str
    authors: list[str] = Field(default_factory=list)
    abstract: str = ""
    year: int
    venue: str
    url: str
    source_id: str | None = Field(None, alias="sourceId")
    doi: str | None = None

    model_config = {"populate_by_name": True}

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict using the public field names."""
        return self.model_dump(by_alias=True)


@dataclass
class Candidate:
    """A normalized paper plus the ranking inputs that stay inside the service."""

    record: PaperRecord
    source: str
    position: int
    reported_venue: str | None = None
    reported_year: int | None = None
    has_direct_link: bool = False
    reference_count: int | None = None

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def abstract(self) -> str:
        return self.record.abstract


@dataclass
class DiscoveryResult:
    """Outcome of one discovery run."""

    topic: str
    papers: list[PaperRecord] = field(default_factory=list)
    primary_count: int = 0
    secondary_count: int = 0
    failures: list[str] = field(default_factory=list)
    max_results: int = 5

    @property
    def is_partial(self) -> bool:
        """Fewer papers than requested; a valid outcome, not an error."""
        return len(self.papers) < self.max_results

    def to_payload(self) -> dict[str, Any]:
        return {"papers": [paper.to_payload() for paper in self.papers]}
