"""Candidate filtering and title-based deduplication."""

import logging
from collections.abc import Iterable

from .models import Candidate

logger = logging.getLogger(__name__)


def normalize_title(title: str | None) -> str:
    """Normalize title for comparison."""
    if not title:
        return ""
    return " ".join(title.lower().split())


def is_usable(candidate: Candidate, min_abstract_chars: int = 100) -> bool:
    """A candidate needs a title and a long enough abstract to be cited."""
    return bool(candidate.title.strip()) and len(candidate.abstract) >= min_abstract_chars


def filter_candidates(
    candidates: Iterable[Candidate],
    min_abstract_chars: int = 100,
    exclude_titles: set[str] | None = None,
) -> list[Candidate]:
    """Drop unusable candidates and those whose title is already taken."""
    exclude_titles = exclude_titles or set()
    kept: list[Candidate] = []
    dropped = 0

    for candidate in candidates:
        if not is_usable(candidate, min_abstract_chars):
            dropped += 1
            continue
        if normalize_title(candidate.title) in exclude_titles:
            dropped += 1
            continue
        kept.append(candidate)

    if dropped:
        logger.debug(f"Filtered out {dropped} candidates, {len(kept)} remain")
    return kept


def take_unique(
    ranked: Iterable[Candidate],
    limit: int,
    seen_titles: set[str],
) -> list[Candidate]:
    """Take up to ``limit`` candidates in order, skipping repeated titles.

    ``seen_titles`` is updated with every title taken.
    """
    taken: list[Candidate] = []
    if limit <= 0:
        return taken

    for candidate in ranked:
        key = normalize_title(candidate.title)
        if key in seen_titles:
            logger.debug(f"Skipping duplicate: {candidate.title[:50]}")
            continue
        seen_titles.add(key)
        taken.append(candidate)
        if len(taken) >= limit:
            break

    return taken
