"""Paper discovery service: ranked, deduplicated papers for a research topic."""

from .paper_sources import DiscoveryResult, PaperDiscoveryService, PaperRecord
from .search import discover_papers, search_papers

__all__ = [
    "DiscoveryResult",
    "PaperDiscoveryService",
    "PaperRecord",
    "discover_papers",
    "search_papers",
]
