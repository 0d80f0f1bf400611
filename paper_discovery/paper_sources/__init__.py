"""Paper sources module: multi-provider discovery with top-up.

Usage:
    from paper_discovery.paper_sources import PaperDiscoveryService
    from paper_discovery.semantic_scholar import SemanticScholarAdapter
    from paper_discovery.openalex import OpenAlexAdapter

    async with PaperDiscoveryService(
        primary=SemanticScholarAdapter(),
        secondary=OpenAlexAdapter(),
    ) as service:
        papers = await service.search_papers("federated learning")
"""

from .cache import TopicCache, normalize_topic
from .deduplication import filter_candidates, is_usable, normalize_title, take_unique
from .discovery import DiscoveryState, PaperDiscoveryService, validate_topic
from .models import Candidate, DiscoveryResult, PaperRecord
from .protocols import PaperSearchProvider
from .scoring import rank_candidates, score_candidate

__all__ = [
    # Models
    "Candidate",
    "DiscoveryResult",
    "PaperRecord",
    # Protocols
    "PaperSearchProvider",
    # Orchestration
    "DiscoveryState",
    "PaperDiscoveryService",
    "TopicCache",
    "validate_topic",
    # Ranking
    "filter_candidates",
    "is_usable",
    "normalize_title",
    "normalize_topic",
    "rank_candidates",
    "score_candidate",
    "take_unique",
]
