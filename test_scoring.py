"""Tests for relevance scoring, filtering and deduplication."""

from fakes import LONG_ABSTRACT, MEDIUM_ABSTRACT, SHORT_ABSTRACT
from paper_discovery.config.loader import ScoringConfig
from paper_discovery.paper_sources import (
    Candidate,
    PaperRecord,
    filter_candidates,
    normalize_title,
    rank_candidates,
    score_candidate,
    take_unique,
)


def make_candidate(
    title="A Paper",
    abstract=MEDIUM_ABSTRACT,
    venue=None,
    year=None,
    direct=False,
    references=None,
    position=0,
):
    record = PaperRecord(
        title=title,
        authors=[],
        abstract=abstract,
        year=year or 2000,
        venue=venue or "IEEE",
        url="https://example.org/x",
        source_id=f"id-{position}",
    )
    return Candidate(
        record=record,
        source="test",
        position=position,
        reported_venue=venue,
        reported_year=year,
        has_direct_link=direct,
        reference_count=references,
    )


def test_plain_candidate_scores_zero():
    assert score_candidate(make_candidate()) == 0


def test_each_rule_contributes():
    assert score_candidate(make_candidate(venue="Proc. IEEE S&P")) == 10
    assert score_candidate(make_candidate(venue="proceedings of the acm on pl")) == 10
    assert score_candidate(make_candidate(year=2019)) == 5
    assert score_candidate(make_candidate(year=2018)) == 0
    assert score_candidate(make_candidate(direct=True)) == 3
    assert score_candidate(make_candidate(abstract=LONG_ABSTRACT)) == 2
    assert score_candidate(make_candidate(references=10)) == 2
    assert score_candidate(make_candidate(references=60)) == 2
    assert score_candidate(make_candidate(references=61)) == 0
    assert score_candidate(make_candidate(references=9)) == 0


def test_all_rules_add_up():
    candidate = make_candidate(
        venue="Springer LNCS",
        year=2023,
        direct=True,
        abstract=LONG_ABSTRACT,
        references=30,
    )
    assert score_candidate(candidate) == 10 + 5 + 3 + 2 + 2


def test_placeholder_venue_earns_nothing():
    """The record shows the placeholder, but only reported venues count."""
    candidate = make_candidate(venue=None)
    assert candidate.record.venue == "IEEE"
    assert score_candidate(candidate) == 0


def test_scoring_is_deterministic():
    candidate = make_candidate(venue="ACM", year=2020, direct=True, references=15)
    scores = {score_candidate(candidate) for _ in range(20)}
    assert scores == {20}


def test_thresholds_are_configurable():
    rules = ScoringConfig(reference_count_range=(1, 5), recent_year=2024)
    assert score_candidate(make_candidate(references=3), rules) == 2
    assert score_candidate(make_candidate(references=30), rules) == 0
    assert score_candidate(make_candidate(year=2023), rules) == 0


def test_ranking_is_stable_for_ties():
    candidates = [
        make_candidate(title="tie-a", position=0, year=2020),
        make_candidate(title="low", position=1),
        make_candidate(title="top", position=2, venue="IEEE", year=2020),
        make_candidate(title="tie-b", position=3, year=2021),
        make_candidate(title="tie-c", position=4, year=2022),
    ]

    ranked = rank_candidates(candidates)

    assert [c.title for c in ranked] == ["top", "tie-a", "tie-b", "tie-c", "low"]


def test_merged_lists_have_defined_order():
    first = [make_candidate(title=f"p{i}", position=i, year=2020) for i in range(3)]
    second = [make_candidate(title=f"s{i}", position=i, year=2020) for i in range(3)]

    ranked = rank_candidates(first + second)

    assert [c.title for c in ranked] == ["p0", "p1", "p2", "s0", "s1", "s2"]
    assert rank_candidates(first + second) == ranked


def test_filter_drops_missing_title_and_short_abstract():
    candidates = [
        make_candidate(title="ok"),
        make_candidate(title="   "),
        make_candidate(title="short", abstract=SHORT_ABSTRACT),
        make_candidate(title="exactly", abstract="x" * 100),
        make_candidate(title="one-under", abstract="x" * 99),
    ]

    kept = filter_candidates(candidates, min_abstract_chars=100)

    assert [c.title for c in kept] == ["ok", "exactly"]


def test_filter_excludes_taken_titles():
    candidates = [make_candidate(title="Deep Learning"), make_candidate(title="Other")]

    kept = filter_candidates(candidates, exclude_titles={"deep learning"})

    assert [c.title for c in kept] == ["Other"]


def test_normalize_title():
    assert normalize_title("  Deep   Learning ") == "deep learning"
    assert normalize_title(None) == ""


def test_take_unique_skips_duplicates_and_limits():
    seen: set[str] = set()
    ranked = [
        make_candidate(title="Alpha"),
        make_candidate(title="ALPHA "),
        make_candidate(title="Beta"),
        make_candidate(title="Gamma"),
    ]

    taken = take_unique(ranked, 2, seen)

    assert [c.title for c in taken] == ["Alpha", "Beta"]
    assert seen == {"alpha", "beta"}
    assert take_unique(ranked, 0, seen) == []
