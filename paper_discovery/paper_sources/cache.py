"""Topic-keyed result cache with request coalescing."""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_topic(topic: str) -> str:
    """Cache key for a topic: lower-cased, trimmed, single-spaced."""
    return " ".join(topic.lower().split())


class TopicCache(Generic[T]):
    """
    Short-lived cache of discovery results keyed by normalized topic.

    At most one fetch per key is in flight: concurrent callers for the same
    topic await the fetch that is already running instead of starting their
    own. Failed fetches are not cached.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, T]] = OrderedDict()
        self._inflight: dict[str, asyncio.Task[T]] = {}

        self.hits = 0
        self.misses = 0
        self.coalesced = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, topic: str) -> T | None:
        """Return a fresh cached value, dropping it if expired."""
        key = normalize_topic(topic)
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    def invalidate(self, topic: str | None = None) -> None:
        """Forget one topic, or everything when ``topic`` is None."""
        if topic is None:
            self._entries.clear()
        else:
            self._entries.pop(normalize_topic(topic), None)

    async def get_or_fetch(self, topic: str, fetch: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for ``topic`` or run ``fetch`` once for it."""
        cached = self.get(topic)
        if cached is not None:
            self.hits += 1
            logger.debug(f"Cache hit for topic '{topic}'")
            return cached

        key = normalize_topic(topic)
        task = self._inflight.get(key)
        if task is None:
            self.misses += 1
            task = asyncio.ensure_future(self._run(key, fetch))
            self._inflight[key] = task
        else:
            self.coalesced += 1
            logger.debug(f"Joining in-flight fetch for topic '{topic}'")

        # Shielded so one cancelled caller does not cancel the shared fetch.
        return await asyncio.shield(task)

    async def _run(self, key: str, fetch: Callable[[], Awaitable[T]]) -> T:
        try:
            value = await fetch()
        finally:
            self._inflight.pop(key, None)

        self._entries[key] = (self._clock() + self.ttl_seconds, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cached topic '{evicted}'")
        return value
