"""Paper discovery: primary search with a secondary top-up."""

import dataclasses
import logging
from enum import Enum

from ..config.loader import DiscoveryConfig
from ..errors import ClientInputError, SourceUnavailable, TotalUnavailable
from .cache import TopicCache
from .deduplication import filter_candidates, take_unique
from .models import Candidate, DiscoveryResult, PaperRecord
from .protocols import PaperSearchProvider
from .scoring import rank_candidates

logger = logging.getLogger(__name__)


class DiscoveryState(Enum):
    """Stage of a single discovery run. Runs only move forward."""

    PRIMARY_ONLY = "primary_only"
    TOPPING_UP = "topping_up"
    DONE = "done"


def validate_topic(topic: object) -> str:
    """Return the trimmed topic or raise ClientInputError."""
    if not isinstance(topic, str) or not topic.strip():
        raise ClientInputError("Topic is required")
    return topic.strip()


class PaperDiscoveryService:
    """
    Finds up to ``max_results`` citable papers for a topic.

    The primary provider is always queried first. The secondary provider is
    queried once, and only when the primary leaves the result short. A
    provider failure counts as zero candidates; only a failure of every
    queried provider is an error.

    Usage:
        async with PaperDiscoveryService(
            primary=SemanticScholarAdapter(),
            secondary=OpenAlexAdapter(),
        ) as service:
            result = await service.discover("quantum error correction")
    """

    def __init__(
        self,
        primary: PaperSearchProvider,
        secondary: PaperSearchProvider,
        config: DiscoveryConfig | None = None,
        cache: TopicCache[DiscoveryResult] | None = None,
    ):
        self._primary = primary
        self._secondary = secondary
        self.config = config or DiscoveryConfig()
        self._cache = cache

    async def __aenter__(self) -> "PaperDiscoveryService":
        """Enter async context for both providers."""
        await self._primary.__aenter__()
        try:
            await self._secondary.__aenter__()
        except BaseException as e:
            await self._primary.__aexit__(type(e), e, e.__traceback__)
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context for both providers."""
        try:
            await self._secondary.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            await self._primary.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def primary(self) -> PaperSearchProvider:
        return self._primary

    @property
    def secondary(self) -> PaperSearchProvider:
        return self._secondary

    @property
    def cache(self) -> TopicCache[DiscoveryResult] | None:
        return self._cache

    async def search_papers(self, topic: str) -> list[PaperRecord]:
        """Convenience wrapper returning only the paper records."""
        result = await self.discover(topic)
        return result.papers

    async def discover(self, topic: str) -> DiscoveryResult:
        """
        Run one discovery for a topic.

        Raises:
            ClientInputError: topic missing or blank (no provider is called)
            TotalUnavailable: every queried provider failed
        """
        topic = validate_topic(topic)

        if self._cache is None:
            return await self._discover(topic)

        result = await self._cache.get_or_fetch(topic, lambda: self._discover(topic))
        # Hand each caller its own records so cached results stay intact.
        return dataclasses.replace(
            result,
            papers=[paper.model_copy(deep=True) for paper in result.papers],
            failures=list(result.failures),
        )

    async def _discover(self, topic: str) -> DiscoveryResult:
        max_results = self.config.max_results
        min_abstract = self.config.min_abstract_chars
        rules = self.config.scoring

        failures: list[SourceUnavailable] = []
        queried = 0
        seen_titles: set[str] = set()

        logger.info(f"Searching papers for: {topic}")
        state = DiscoveryState.PRIMARY_ONLY

        queried += 1
        primary_raw = await self._query(self._primary, topic, failures)
        primary_pool = filter_candidates(primary_raw, min_abstract)
        selected: list[Candidate] = take_unique(
            rank_candidates(primary_pool, rules), max_results, seen_titles
        )
        primary_count = len(selected)

        if len(selected) < max_results:
            state = self._advance(state, DiscoveryState.TOPPING_UP)
            logger.info(
                f"Only {len(selected)} papers from {self._primary.name}, "
                f"fetching from {self._secondary.name}"
            )

            queried += 1
            secondary_raw = await self._query(self._secondary, topic, failures)
            secondary_pool = filter_candidates(
                secondary_raw, min_abstract, exclude_titles=seen_titles
            )
            top_up = take_unique(
                rank_candidates(secondary_pool, rules),
                max_results - len(selected),
                seen_titles,
            )
            selected.extend(top_up)
            logger.info(f"After {self._secondary.name} top-up: {len(selected)} papers")

        state = self._advance(state, DiscoveryState.DONE)

        if failures and len(failures) == queried:
            logger.error(f"All paper sources failed for '{topic}'")
            raise TotalUnavailable(str(failures[-1]))

        papers = [candidate.record for candidate in selected]
        logger.info(f"Returning {len(papers)} papers")

        return DiscoveryResult(
            topic=topic,
            papers=papers,
            primary_count=primary_count,
            secondary_count=len(selected) - primary_count,
            failures=[failure.source for failure in failures],
            max_results=max_results,
        )

    async def _query(
        self,
        provider: PaperSearchProvider,
        topic: str,
        failures: list[SourceUnavailable],
    ) -> list[Candidate]:
        try:
            candidates = await provider.search(topic)
        except SourceUnavailable as e:
            logger.warning(f"{provider.name} failed: {e.message}")
            failures.append(e)
            return []

        logger.info(f"{provider.name} returned {len(candidates)} results")
        return candidates

    @staticmethod
    def _advance(current: DiscoveryState, target: DiscoveryState) -> DiscoveryState:
        logger.debug(f"Discovery state {current.value} -> {target.value}")
        return target
