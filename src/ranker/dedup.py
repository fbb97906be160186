"""Near-duplicate removal for scored candidates."""

import structlog

from src.config.constants import DEDUPE_SIMILARITY_THRESHOLD
from src.ranker.models import ScoredCandidate


logger = structlog.get_logger()


def _tokens(title: str) -> frozenset[str]:
    return frozenset(title.lower().split())


def _similarity(tokens1: frozenset[str], tokens2: frozenset[str]) -> float:
    union = tokens1 | tokens2
    if not union:
        return 0.0
    return len(tokens1 & tokens2) / len(union)


def jaccard_similarity(text1: str, text2: str) -> float:
    """Jaccard similarity of lower-cased whitespace token sets.

    Args:
        text1: First text.
        text2: Second text.

    Returns:
        |intersection| / |union|, or 0.0 when both texts have no tokens.
    """
    return _similarity(_tokens(text1), _tokens(text2))


def deduplicate_candidates(
    candidates: list[ScoredCandidate],
    threshold: float = DEDUPE_SIMILARITY_THRESHOLD,
) -> list[ScoredCandidate]:
    """Collapse near-duplicate titles, keeping the higher-scored one.

    Each candidate is compared with every already-kept entry. If it
    duplicates none (similarity < threshold), it is kept. If its score is
    strictly higher than every kept entry it duplicates, it takes the
    place of the first of them and the others are removed; otherwise it
    is dropped. No two survivors are duplicates of each other, so running
    the function on its own output changes nothing. O(n^2) in input size.

    Args:
        candidates: Scored candidates, normally sorted by score descending.
        threshold: Similarity at or above which titles are duplicates.

    Returns:
        Deduplicated list with survivors in their original relative order.
    """
    kept: list[tuple[ScoredCandidate, frozenset[str]]] = []
    dropped = 0

    for candidate in candidates:
        tokens = _tokens(candidate.title)
        duplicates = [
            idx
            for idx, (_, existing) in enumerate(kept)
            if _similarity(tokens, existing) >= threshold
        ]

        if not duplicates:
            kept.append((candidate, tokens))
            continue

        best_existing = max(kept[idx][0].score for idx in duplicates)
        if candidate.score > best_existing:
            first, *rest = duplicates
            kept[first] = (candidate, tokens)
            for idx in reversed(rest):
                del kept[idx]
            dropped += len(rest)
        dropped += 1

    logger.debug(
        "dedupe_complete",
        component="ranker",
        subcomponent="dedup",
        input_count=len(candidates),
        kept_count=len(kept),
        dropped_count=dropped,
    )

    return [candidate for candidate, _ in kept]
