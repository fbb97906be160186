"""Scoring engine for headline candidates."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from src.config.schemas.headlines import HeadlinesConfig
from src.ranker.models import Candidate, ScoredCandidate
from src.ranker.topic_classifier import MacroKeywordMatcher, TopicClassifier


logger = structlog.get_logger()

_SECONDS_PER_HOUR = 3600.0


def parse_published_at(value: str | None) -> datetime | None:
    """Parse an upstream publication timestamp.

    Naive timestamps are assumed to be UTC.

    Args:
        value: Raw ISO 8601 string.

    Returns:
        Timezone-aware datetime, or None if the value cannot be parsed.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class ScorerConfig:
    """Configuration bundle for CandidateScorer.

    Attributes:
        headlines_config: Scoring weights, tables and topic rules.
        now: Reference time for recency. Defaults to the wall clock, which
            makes scores time-relative: the same candidate scored at two
            different instants gets two different recency scores.
    """

    headlines_config: HeadlinesConfig = field(default_factory=HeadlinesConfig)
    now: datetime | None = None


class CandidateScorer:
    """Computes composite ranking scores for candidates.

    Scoring formula:
        score = (base_relevance * w_base
                 + recency_score * w_recency
                 + credibility_score * w_credibility) * (1 + macro_boost)

    Where:
        - base_relevance: upstream relevance, default 0.5
        - recency_score: exp(-hours_old / recency_decay_hours)
        - credibility_score: outlet lookup table, default 0.5
        - macro_boost: min(distinct macro keyword hits, cap) * step

    The boost multiplies the weighted sum, so scores are relative and may
    exceed 1.0.
    """

    def __init__(self, run_id: str, config: ScorerConfig | None = None) -> None:
        """Initialize the scorer.

        Args:
            run_id: Run identifier for logging.
            config: Scorer configuration bundle.
        """
        config = config or ScorerConfig()
        self._run_id = run_id
        self._config = config.headlines_config
        self._scoring = self._config.scoring
        now = config.now or datetime.now(UTC)
        self._now = now if now.tzinfo is not None else now.replace(tzinfo=UTC)
        self._credibility = dict(self._config.source_credibility)
        self._credibility_lower = [
            (name.lower(), value) for name, value in self._credibility.items()
        ]
        self._classifier = TopicClassifier(
            self._config.topic_rules, self._config.default_bucket
        )
        self._keywords = MacroKeywordMatcher(self._config.macro_keywords)
        self._log = logger.bind(
            component="ranker",
            subcomponent="scorer",
            run_id=run_id,
        )

    @property
    def now(self) -> datetime:
        """Reference time used for recency."""
        return self._now

    def score_candidate(self, candidate: Candidate) -> ScoredCandidate:
        """Compute the score breakdown for a single candidate.

        Args:
            candidate: Candidate to score.

        Returns:
            ScoredCandidate with computed components.
        """
        recency_score = self.compute_recency_score(candidate.published_at)
        credibility_score = self.compute_credibility_score(candidate.source_name)
        macro_boost = self.compute_macro_boost(candidate.text)
        topic_bucket = self._classifier.classify(candidate.text)

        base_relevance = (
            candidate.relevance_score
            if candidate.relevance_score is not None
            else self._scoring.default_relevance
        )
        weighted = (
            base_relevance * self._scoring.base_relevance_weight
            + recency_score * self._scoring.recency_weight
            + credibility_score * self._scoring.credibility_weight
        )

        return ScoredCandidate(
            candidate=candidate,
            recency_score=recency_score,
            credibility_score=credibility_score,
            macro_boost=macro_boost,
            topic_bucket=topic_bucket,
            score=weighted * (1 + macro_boost),
        )

    def score_candidates(self, candidates: list[Candidate]) -> list[ScoredCandidate]:
        """Score candidates and sort them by score descending.

        Ties are broken by publication time (newest first, unparseable
        last) and then by id, so ordering is stable for a fixed ``now``.

        Args:
            candidates: Candidates to score.

        Returns:
            Same-length list of ScoredCandidate, best first.
        """
        scored = [self.score_candidate(c) for c in candidates]
        scored.sort(key=_sort_key)

        self._log.info(
            "scoring_complete",
            candidates_scored=len(scored),
            min_score=min((s.score for s in scored), default=0.0),
            max_score=max((s.score for s in scored), default=0.0),
        )

        return scored

    def compute_recency_score(self, published_at: str | None) -> float:
        """Compute exponential recency decay.

        Future timestamps count as age zero. Ages are capped at
        ``max_age_hours``, which is also the age assumed for missing or
        unparseable timestamps, so the result stays in (0, 1].
        Recency is strictly decreasing only up to that cap; all older
        items share the same floor score.

        Args:
            published_at: Raw publication timestamp.

        Returns:
            Recency score in (0, 1].
        """
        max_age = self._scoring.max_age_hours
        published = parse_published_at(published_at)

        if published is None:
            self._log.debug("unparseable_published_at", published_at=published_at)
            hours_old = max_age
        else:
            hours_old = (self._now - published).total_seconds() / _SECONDS_PER_HOUR
            hours_old = min(max(hours_old, 0.0), max_age)

        return math.exp(-hours_old / self._scoring.recency_decay_hours)

    def compute_credibility_score(self, source_name: str) -> float:
        """Look up outlet credibility.

        Exact match first, then case-insensitive substring match in
        either direction, in table order.

        Args:
            source_name: Free-text outlet name.

        Returns:
            Credibility in [0, 1].
        """
        normalized = source_name.strip()
        if not normalized:
            return self._scoring.default_credibility

        if normalized in self._credibility:
            return self._credibility[normalized]

        lower = normalized.lower()
        for key, value in self._credibility_lower:
            if key in lower or lower in key:
                return value

        return self._scoring.default_credibility

    def compute_macro_boost(self, text: str) -> float:
        """Compute the macro keyword boost.

        Args:
            text: Title and summary text.

        Returns:
            min(distinct hits, cap) * step.
        """
        hits = min(self._keywords.count_matches(text), self._scoring.macro_keyword_cap)
        return round(hits * self._scoring.macro_boost_step, 10)


def _sort_key(scored: ScoredCandidate) -> tuple[float, float, str]:
    published = parse_published_at(scored.published_at)
    pub_key = -published.timestamp() if published is not None else float("inf")
    return (-scored.score, pub_key, scored.id)


def score_candidates_pure(
    candidates: list[Candidate],
    config: ScorerConfig | None = None,
    run_id: str = "pure",
) -> list[ScoredCandidate]:
    """Pure function API for scoring candidates.

    Args:
        candidates: Candidates to score.
        config: Scorer configuration bundle.
        run_id: Run identifier.

    Returns:
        Scored candidates sorted by score descending.
    """
    scorer = CandidateScorer(run_id=run_id, config=config)
    return scorer.score_candidates(candidates)
