"""Deterministic fallback selection used when arbitration fails."""

import structlog

from src.arbiter.models import FinalHeadline
from src.config.constants import MAX_HEADLINES
from src.ranker.models import ScoredCandidate


logger = structlog.get_logger()


def fallback_rationale(candidate: ScoredCandidate) -> str:
    """Synthesize a rationale from topic bucket and source credibility.

    Args:
        candidate: Scored candidate.

    Returns:
        e.g. ``Key macro rates development with 95% source credibility``.
    """
    credibility_pct = round(candidate.credibility_score * 100)
    return (
        f"Key {candidate.topic_bucket.label} development "
        f"with {credibility_pct}% source credibility"
    )


def fallback_selection(
    shortlist: list[ScoredCandidate],
    limit: int = MAX_HEADLINES,
) -> list[FinalHeadline]:
    """Convert the first ``limit`` shortlist entries into headlines.

    No external calls; the shortlist's existing order is kept. Confidence
    is the composite score clamped into [0, 1].

    Args:
        shortlist: Shortlist in the order given to the arbitrator.
        limit: Maximum number of headlines.

    Returns:
        Up to ``limit`` headlines; non-empty for any non-empty shortlist.
    """
    headlines = [
        FinalHeadline(
            title=candidate.title,
            source=candidate.source_label,
            url=candidate.url,
            published_at=candidate.published_at,
            why_it_matters=fallback_rationale(candidate),
            confidence=min(max(candidate.score, 0.0), 1.0),
            article_index=idx,
        )
        for idx, candidate in enumerate(shortlist[: max(limit, 0)])
    ]

    logger.info(
        "fallback_selection_complete",
        component="arbiter",
        subcomponent="fallback",
        shortlist_size=len(shortlist),
        selected=len(headlines),
    )

    return headlines
