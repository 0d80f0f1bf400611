"""Relevance scoring for paper candidates.

Scores are only used to order candidates within one request, so they are
plain additive integers with no normalization.
"""

from ..config.loader import ScoringConfig
from .models import Candidate

DEFAULT_RULES = ScoringConfig()


def score_candidate(candidate: Candidate, rules: ScoringConfig = DEFAULT_RULES) -> int:
    """Score a candidate; higher is more relevant.

    Uses what the provider actually reported, so placeholder venues and
    defaulted years earn nothing. This holds for OpenAlex too: a work with no
    source or year does not pick up the venue and recency points that its
    filled-in "IEEE" / current-year record would otherwise earn.
    """
    score = 0

    venue = (candidate.reported_venue or "").upper()
    if venue and any(v.upper() in venue for v in rules.preferred_venues):
        score += rules.venue_weight

    if candidate.reported_year is not None and candidate.reported_year >= rules.recent_year:
        score += rules.recency_weight

    if candidate.has_direct_link:
        score += rules.direct_link_weight

    if len(candidate.abstract) > rules.long_abstract_chars:
        score += rules.long_abstract_weight

    if candidate.reference_count is not None:
        low, high = rules.reference_count_range
        if low <= candidate.reference_count <= high:
            score += rules.reference_count_weight

    return score


def rank_candidates(
    candidates: list[Candidate],
    rules: ScoringConfig = DEFAULT_RULES,
) -> list[Candidate]:
    """Sort by descending score. Ties keep their incoming order."""
    return sorted(candidates, key=lambda c: -score_candidate(c, rules))
