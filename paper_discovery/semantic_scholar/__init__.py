"""Semantic Scholar API integration (primary paper provider)."""

from .models import (
    Author,
    OpenAccessPdf,
    PaperSearchResult,
    SearchResponse,
)
from .adapters import SemanticScholarAdapter, to_candidate
from .client import SemanticScholarClient

__all__ = [
    # Models
    "Author",
    "OpenAccessPdf",
    "PaperSearchResult",
    "SearchResponse",
    # Adapters
    "SemanticScholarAdapter",
    "to_candidate",
    # Low-level client
    "SemanticScholarClient",
]
