"""OpenAlex API integration (secondary paper provider).

OpenAlex is free and broad; it is queried only to top up results when
Semantic Scholar comes back short.

Usage:
    from paper_discovery.openalex import OpenAlexAdapter

    async with OpenAlexAdapter() as adapter:
        candidates = await adapter.search("graph neural networks")
"""

from .adapters import OpenAlexAdapter, normalize_doi, reconstruct_abstract, to_candidate
from .client import OpenAlexClient
from .models import Work, WorksResponse

__all__ = [
    "OpenAlexAdapter",
    "OpenAlexClient",
    "Work",
    "WorksResponse",
    "normalize_doi",
    "reconstruct_abstract",
    "to_candidate",
]
