"""Convenience functions for one-off paper discovery.

These build a service from configuration, run a single discovery and close
the HTTP clients again. Long-running callers (the API) should keep one
PaperDiscoveryService open instead.
"""

from .config import create_discovery_service, load_config
from .config.loader import DiscoveryConfig
from .paper_sources import DiscoveryResult, PaperDiscoveryService, PaperRecord


async def discover_papers(
    topic: str,
    config: DiscoveryConfig | None = None,
    service: PaperDiscoveryService | None = None,
) -> DiscoveryResult:
    """
    Discover papers for a topic.

    Args:
        topic: Free-text research topic
        config: Optional configuration; defaults to the active profile
        service: Optional already-entered service to reuse

    Returns:
        DiscoveryResult with up to ``max_results`` ranked papers

    Example:
        result = await discover_papers("zero-knowledge proofs")
        for paper in result.papers:
            print(paper.title)
    """
    if service:
        return await service.discover(topic)

    async with create_discovery_service(config or load_config()) as owned:
        return await owned.discover(topic)


async def search_papers(
    topic: str,
    config: DiscoveryConfig | None = None,
    service: PaperDiscoveryService | None = None,
) -> list[PaperRecord]:
    """Discover papers and return just the records."""
    result = await discover_papers(topic, config=config, service=service)
    return result.papers
