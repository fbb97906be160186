"""Unit tests for near-duplicate removal."""

import pytest

from src.ranker.dedup import deduplicate_candidates, jaccard_similarity
from tests.helpers.factories import make_scored


class TestJaccardSimilarity:
    """Tests for jaccard_similarity."""

    def test_identical_titles(self) -> None:
        """Same tokens give 1.0."""
        assert jaccard_similarity("Fed raises rates", "fed RAISES rates") == 1.0

    def test_disjoint_titles(self) -> None:
        """No shared tokens give 0.0."""
        assert jaccard_similarity("Oil climbs", "Tech slumps") == 0.0

    def test_partial_overlap(self) -> None:
        """Overlap over union."""
        similarity = jaccard_similarity(
            "Fed raises rates by 25bps",
            "Federal Reserve raises rates 25 basis points",
        )
        assert similarity == pytest.approx(2 / 10)

    def test_both_empty(self) -> None:
        """Empty union is defined as 0.0."""
        assert jaccard_similarity("", "   ") == 0.0

    def test_symmetric(self) -> None:
        """Order of arguments does not matter."""
        a, b = "Stocks rally on jobs data", "Jobs data lifts stocks"
        assert jaccard_similarity(a, b) == jaccard_similarity(b, a)


class TestDeduplicateCandidates:
    """Tests for deduplicate_candidates."""

    def test_empty(self) -> None:
        """Empty input gives empty output."""
        assert deduplicate_candidates([]) == []

    def test_distinct_titles_all_kept(self) -> None:
        """Unrelated titles survive in order."""
        candidates = [
            make_scored("a", "Oil climbs on supply fears", score=0.9),
            make_scored("b", "Nvidia unveils new chips", score=0.8),
            make_scored("c", "Nasdaq closes at record", score=0.7),
        ]
        assert [c.id for c in deduplicate_candidates(candidates)] == ["a", "b", "c"]

    def test_near_duplicates_keep_higher_score(self) -> None:
        """Default threshold collapses heavy overlap to the better one."""
        candidates = [
            make_scored("first", "Fed raises rates by 25bps", score=0.6),
            make_scored("second", "Fed raises rates by 25bps as expected", score=0.9),
        ]
        result = deduplicate_candidates(candidates)
        assert [c.id for c in result] == ["second"]

    def test_equal_scores_keep_first_seen(self) -> None:
        """Ties keep the entry that was already kept."""
        candidates = [
            make_scored("first", "Fed raises rates by 25bps", score=0.7),
            make_scored("second", "Fed raises rates by 25bps today", score=0.7),
        ]
        assert [c.id for c in deduplicate_candidates(candidates)] == ["first"]

    def test_reworded_duplicates_with_lower_threshold(self) -> None:
        """Reworded Fed headlines merge once the threshold allows it."""
        candidates = [
            make_scored("short", "Fed raises rates by 25bps", score=0.72),
            make_scored(
                "long", "Federal Reserve raises rates 25 basis points", score=0.81
            ),
        ]
        assert len(deduplicate_candidates(candidates)) == 2

        result = deduplicate_candidates(candidates, threshold=0.2)
        assert [c.id for c in result] == ["long"]

    def test_survivors_are_pairwise_distinct(self) -> None:
        """No two survivors reach the threshold."""
        candidates = [
            make_scored("a", "alpha beta gamma delta", score=0.5),
            make_scored("b", "epsilon zeta eta theta", score=0.6),
            make_scored("c", "alpha beta zeta eta", score=0.9),
        ]
        result = deduplicate_candidates(candidates, threshold=0.3)
        for i, left in enumerate(result):
            for right in result[i + 1 :]:
                assert jaccard_similarity(left.title, right.title) < 0.3

    def test_bridging_newcomer_replaces_all_duplicates(self) -> None:
        """A better entry duplicating two kept ones replaces both."""
        candidates = [
            make_scored("a", "alpha beta gamma delta", score=0.5),
            make_scored("b", "epsilon zeta eta theta", score=0.6),
            make_scored("c", "alpha beta zeta eta", score=0.9),
        ]
        result = deduplicate_candidates(candidates, threshold=0.3)
        assert [c.id for c in result] == ["c"]

    def test_idempotent(self) -> None:
        """Deduplicating twice equals deduplicating once."""
        candidates = [
            make_scored("a", "Fed raises rates by 25bps", score=0.9),
            make_scored("b", "Fed raises rates by 25bps again", score=0.8),
            make_scored("c", "Oil climbs on supply fears", score=0.7),
            make_scored("d", "Oil climbs on supply fears today", score=0.95),
            make_scored("e", "Nasdaq closes at record", score=0.4),
        ]
        once = deduplicate_candidates(candidates)
        twice = deduplicate_candidates(once)
        assert [c.id for c in twice] == [c.id for c in once]
        assert [c.id for c in once] == ["a", "d", "e"]
