"""Unit tests for the deterministic fallback selection."""

from src.arbiter.fallback import fallback_rationale, fallback_selection
from src.config.schemas.base import TopicBucket
from src.ranker.models import UNKNOWN_SOURCE
from tests.helpers.factories import make_scored, make_shortlist


class TestFallbackRationale:
    """Tests for fallback_rationale."""

    def test_mentions_bucket_and_credibility(self) -> None:
        """Rationale names the topic and the credibility percentage."""
        candidate = make_scored(bucket=TopicBucket.MACRO_RATES, credibility=0.95)
        assert fallback_rationale(candidate) == (
            "Key macro rates development with 95% source credibility"
        )

    def test_percentage_is_rounded(self) -> None:
        """Credibility is shown as a whole percentage."""
        candidate = make_scored(
            bucket=TopicBucket.GEOPOLITICS_COMMODITIES, credibility=0.856
        )
        assert fallback_rationale(candidate).endswith("86% source credibility")


class TestFallbackSelection:
    """Tests for fallback_selection."""

    def test_takes_first_five_in_order(self) -> None:
        """The head of the shortlist is returned in order."""
        shortlist = make_shortlist(20)
        headlines = fallback_selection(shortlist)

        assert [h.title for h in headlines] == [c.title for c in shortlist[:5]]
        assert [h.article_index for h in headlines] == [0, 1, 2, 3, 4]

    def test_fields_come_from_candidates(self) -> None:
        """Every field is grounded in the shortlist entry."""
        candidate = make_scored(
            "x", "Oil spikes on supply cut", score=0.77, source_name="CNBC"
        )
        headline = fallback_selection([candidate])[0]

        assert headline.title == candidate.title
        assert headline.source == "CNBC"
        assert headline.url == candidate.url
        assert headline.published_at == candidate.published_at
        assert headline.confidence == 0.77
        assert headline.why_it_matters

    def test_blank_source_becomes_unknown(self) -> None:
        """Source and URL are never empty."""
        headline = fallback_selection([make_scored(source_name="  ")])[0]

        assert headline.source == UNKNOWN_SOURCE
        assert headline.url

    def test_confidence_clamped(self) -> None:
        """Boosted scores above 1.0 clamp to 1.0."""
        headline = fallback_selection([make_scored(score=1.25)])[0]
        assert headline.confidence == 1.0

    def test_short_shortlist(self) -> None:
        """Fewer than five entries return them all."""
        assert len(fallback_selection(make_shortlist(2))) == 2

    def test_never_empty_for_non_empty_input(self) -> None:
        """One candidate always gives one headline."""
        assert len(fallback_selection(make_shortlist(1))) == 1

    def test_empty_shortlist(self) -> None:
        """Nothing in, nothing out."""
        assert fallback_selection([]) == []

    def test_custom_limit(self) -> None:
        """The limit is honoured."""
        assert len(fallback_selection(make_shortlist(10), limit=3)) == 3

    def test_deterministic(self) -> None:
        """Same input, same output."""
        shortlist = make_shortlist(8)
        assert fallback_selection(shortlist) == fallback_selection(shortlist)
