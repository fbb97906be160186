"""Deterministic ranking stage for market headlines.

Scores candidates by recency, source credibility and macro keyword
signal, classifies them into topic buckets, collapses near-duplicates
and narrows the pool to a diverse shortlist.
"""

from src.ranker.dedup import deduplicate_candidates, jaccard_similarity
from src.ranker.diversity import select_diverse, top_k
from src.ranker.models import Candidate, ScoredCandidate, TopicBucket
from src.ranker.scorer import (
    CandidateScorer,
    ScorerConfig,
    parse_published_at,
    score_candidates_pure,
)
from src.ranker.topic_classifier import MacroKeywordMatcher, TopicClassifier


__all__ = [
    "Candidate",
    "CandidateScorer",
    "MacroKeywordMatcher",
    "ScoredCandidate",
    "ScorerConfig",
    "TopicBucket",
    "TopicClassifier",
    "deduplicate_candidates",
    "jaccard_similarity",
    "parse_published_at",
    "score_candidates_pure",
    "select_diverse",
    "top_k",
]
