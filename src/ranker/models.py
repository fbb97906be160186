"""Data models for candidate scoring and ranking."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import Field

from src.config.schemas.base import TopicBucket
from src.data_model import StrictBaseModel


# Shown wherever an outlet name is required but the record has none.
UNKNOWN_SOURCE = "Unknown"


class Candidate(StrictBaseModel):
    """One news item as supplied by the candidate source.

    ``published_at`` is kept as the raw upstream string. The scorer parses
    it and degrades unparseable values instead of rejecting the record.

    Attributes:
        id: Stable identifier.
        title: Headline text.
        summary: Optional short summary.
        url: Canonical article URL, required and free of whitespace.
        source_name: Free-text outlet name; may be blank.
        published_at: Publication timestamp, ISO 8601 expected.
        relevance_score: Upstream relevance in [0, 1], if known.
    """

    id: Annotated[str, Field(min_length=1)]
    title: Annotated[str, Field(min_length=1)]
    summary: str | None = None
    url: Annotated[str, Field(min_length=1, pattern=r"^\S+$")]
    source_name: str = ""
    published_at: str = ""
    relevance_score: Annotated[float | None, Field(ge=0.0, le=1.0)] = None

    @property
    def text(self) -> str:
        """Title and summary joined, used for keyword and topic matching."""
        return f"{self.title} {self.summary or ''}"


@dataclass(frozen=True)
class ScoredCandidate:
    """A Candidate with its computed score breakdown.

    Attributes:
        candidate: The original candidate.
        recency_score: Exponential recency decay in (0, 1].
        credibility_score: Source credibility in [0, 1].
        macro_boost: Multiplicative amplifier contribution.
        topic_bucket: Assigned topic bucket.
        score: Final composite ranking value (may exceed 1.0).
    """

    candidate: Candidate
    recency_score: float
    credibility_score: float
    macro_boost: float
    topic_bucket: TopicBucket
    score: float

    @property
    def id(self) -> str:
        """Candidate identifier."""
        return self.candidate.id

    @property
    def title(self) -> str:
        """Candidate title."""
        return self.candidate.title

    @property
    def summary(self) -> str | None:
        """Candidate summary."""
        return self.candidate.summary

    @property
    def url(self) -> str:
        """Candidate URL."""
        return self.candidate.url

    @property
    def source_name(self) -> str:
        """Candidate source name."""
        return self.candidate.source_name

    @property
    def source_label(self) -> str:
        """Outlet name for display, never blank."""
        return self.candidate.source_name.strip() or UNKNOWN_SOURCE

    @property
    def published_at(self) -> str:
        """Candidate raw publication timestamp."""
        return self.candidate.published_at

    def to_dict(self) -> dict[str, float | str]:
        """Convert the score breakdown to a dictionary.

        Returns:
            Dictionary of component name to value.
        """
        return {
            "id": self.id,
            "recency_score": self.recency_score,
            "credibility_score": self.credibility_score,
            "macro_boost": self.macro_boost,
            "topic_bucket": self.topic_bucket.value,
            "score": self.score,
        }
