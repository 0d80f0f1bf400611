"""HTTP transport helpers: retry with exponential backoff and rate limiting."""

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable

import httpx
from pydantic import BaseModel, Field

from .settings import MAX_RETRIES, RETRY_BASE_DELAY_SECONDS, RETRY_MAX_JITTER_SECONDS

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_default_rng = random.Random()


class RetryPolicy(BaseModel):
    """How often and how patiently a request is retried.

    ``max_retries`` counts retries, so a request is sent at most
    ``max_retries + 1`` times.
    """

    max_retries: int = Field(MAX_RETRIES, ge=0)
    base_delay_seconds: float = Field(RETRY_BASE_DELAY_SECONDS, ge=0)
    max_jitter_seconds: float = Field(RETRY_MAX_JITTER_SECONDS, ge=0)
    retry_statuses: list[int] = Field(default_factory=lambda: [429])
    retry_server_errors: bool = True

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def should_retry(self, status_code: int) -> bool:
        """Whether a response with this status is worth another attempt."""
        if status_code in self.retry_statuses:
            return True
        return self.retry_server_errors and status_code >= 500

    def backoff(self, attempt: int, rng: random.Random | None = None) -> float:
        """Delay before the next attempt: 0.5s, 1s, 2s, ... plus jitter."""
        rng = rng or _default_rng
        jitter = rng.uniform(0, self.max_jitter_seconds) if self.max_jitter_seconds else 0.0
        return self.base_delay_seconds * (2 ** attempt) + jitter


class RateLimiter:
    """Enforces a minimum interval between requests."""

    def __init__(self, requests_per_second: float):
        self.requests_per_second = requests_per_second
        self.min_interval = 1.0 / requests_per_second
        self.last_request_time = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until we can make another request."""
        async with self._lock:
            now = time.monotonic()
            time_since_last = now - self.last_request_time
            if time_since_last < self.min_interval:
                await asyncio.sleep(self.min_interval - time_since_last)
            self.last_request_time = time.monotonic()


async def send_with_retry(
    client: httpx.AsyncClient,
    request: httpx.Request,
    policy: RetryPolicy,
    *,
    sleep: Sleep = asyncio.sleep,
    rng: random.Random | None = None,
    rate_limiter: RateLimiter | None = None,
) -> httpx.Response:
    """Send ``request``, retrying on 429 / 5xx and connection errors.

    Responses are always returned fully read. A response that is retried
    away is drained and closed first so its connection goes back to the
    pool. Once the budget is spent the last failed response is returned
    as-is; the caller decides what a non-2xx status means.

    Raises:
        httpx.TransportError: if the final attempt failed at the network level
    """
    last_exception: httpx.TransportError | None = None

    for attempt in range(policy.max_attempts):
        if rate_limiter:
            await rate_limiter.acquire()
        logger.debug(
            f"Request attempt {attempt + 1}/{policy.max_attempts}: "
            f"{request.method} {request.url}"
        )

        try:
            response = await client.send(request, stream=True)
        except httpx.TransportError as e:
            last_exception = e
            if attempt == policy.max_retries:
                break
            delay = policy.backoff(attempt, rng)
            logger.warning(f"Connection error: {e!r}, retrying in {delay:.2f}s")
            await sleep(delay)
            continue

        if policy.should_retry(response.status_code) and attempt < policy.max_retries:
            try:
                await response.aread()
            except httpx.TransportError as e:
                logger.debug(f"Could not drain retried response: {e!r}")
            finally:
                await response.aclose()
            delay = policy.backoff(attempt, rng)
            logger.warning(
                f"Retryable status ({response.status_code}), retrying in {delay:.2f}s "
                f"(attempt {attempt + 1}/{policy.max_retries})"
            )
            await sleep(delay)
            continue

        try:
            await response.aread()
        finally:
            await response.aclose()

        if policy.should_retry(response.status_code):
            logger.error(
                f"Giving up after {attempt + 1} attempts, last status {response.status_code}"
            )
        return response

    logger.error(f"Request failed after {policy.max_attempts} attempts")
    if last_exception:
        raise last_exception
    raise RuntimeError("Request failed after all retries")
