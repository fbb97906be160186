"""Shortlisting and topic-diversity selection."""

import structlog

from src.config.constants import MAX_HEADLINES
from src.config.schemas.base import TopicBucket
from src.ranker.models import ScoredCandidate


logger = structlog.get_logger()


def top_k(candidates: list[ScoredCandidate], k: int) -> list[ScoredCandidate]:
    """Plain top-K truncation of an already score-sorted list.

    Args:
        candidates: Candidates sorted by score descending.
        k: Maximum number to keep.

    Returns:
        The first ``k`` candidates.
    """
    return candidates[: max(k, 0)]


def select_diverse(
    candidates: list[ScoredCandidate],
    limit: int = MAX_HEADLINES,
) -> list[ScoredCandidate]:
    """Select up to ``limit`` candidates with topic bucket coverage.

    First pass: for each bucket in priority order, take its best
    candidate, stopping once ``limit`` is reached. Second pass: fill the
    remaining slots in overall score order regardless of bucket.

    Because the first pass is prefix-stable, the first N entries for a
    larger ``limit`` equal the result for ``limit=N``.

    Args:
        candidates: Deduplicated candidates sorted by score descending.
        limit: Maximum output size.

    Returns:
        Selected candidates, bucket representatives first.
    """
    if limit <= 0:
        return []

    best_by_bucket: dict[TopicBucket, int] = {}
    for idx, candidate in enumerate(candidates):
        best_by_bucket.setdefault(candidate.topic_bucket, idx)

    chosen: list[int] = []
    for bucket in TopicBucket:
        if len(chosen) >= limit:
            break
        if bucket in best_by_bucket:
            chosen.append(best_by_bucket[bucket])

    taken = set(chosen)
    for idx in range(len(candidates)):
        if len(chosen) >= limit:
            break
        if idx not in taken:
            chosen.append(idx)
            taken.add(idx)

    selected = [candidates[idx] for idx in chosen]

    logger.debug(
        "diversity_selection_complete",
        component="ranker",
        subcomponent="diversity",
        input_count=len(candidates),
        selected_count=len(selected),
        buckets_covered=len({c.topic_bucket for c in selected}),
    )

    return selected
