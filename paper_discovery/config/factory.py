"""Factory functions to create the discovery service from configuration."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from ..openalex import OpenAlexAdapter
    from ..paper_sources import PaperDiscoveryService, TopicCache
    from ..semantic_scholar import SemanticScholarAdapter
    from ..transport import Sleep
    from .loader import CacheConfig, DiscoveryConfig


def create_semantic_scholar(
    config: DiscoveryConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> SemanticScholarAdapter:
    """Create the primary provider adapter."""
    from ..semantic_scholar import SemanticScholarAdapter

    return SemanticScholarAdapter(
        config.semantic_scholar,
        default_venue=config.default_venue,
        transport=transport,
        sleep=sleep,
    )


def create_openalex(
    config: DiscoveryConfig,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> OpenAlexAdapter:
    """Create the secondary provider adapter."""
    from ..openalex import OpenAlexAdapter

    return OpenAlexAdapter(
        config.openalex,
        default_venue=config.default_venue,
        transport=transport,
        sleep=sleep,
    )


def create_cache(config: CacheConfig) -> TopicCache | None:
    """Create the topic cache, or None when caching is disabled."""
    if not config.enabled:
        return None

    from ..paper_sources import TopicCache

    return TopicCache(ttl_seconds=config.ttl_seconds, max_entries=config.max_entries)


def create_discovery_service(
    config: DiscoveryConfig | None = None,
    primary_transport: httpx.AsyncBaseTransport | None = None,
    secondary_transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> PaperDiscoveryService:
    """Create the discovery service with both providers and optional cache.

    Args:
        config: Discovery configuration (defaults to environment-only config)
        primary_transport: Optional httpx transport for Semantic Scholar
        secondary_transport: Optional httpx transport for OpenAlex
        sleep: Coroutine used between retries

    Returns:
        PaperDiscoveryService, to be used as an async context manager
    """
    from ..paper_sources import PaperDiscoveryService
    from .loader import DiscoveryConfig

    config = config or DiscoveryConfig()

    return PaperDiscoveryService(
        primary=create_semantic_scholar(config, primary_transport, sleep),
        secondary=create_openalex(config, secondary_transport, sleep),
        config=config,
        cache=create_cache(config.cache),
    )
