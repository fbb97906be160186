"""Data models for pipeline results and the result cache."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import Field

from src.arbiter.models import FinalHeadline
from src.data_model import StrictBaseModel


class PipelineStatus(str, Enum):
    """Outcome category returned to the caller."""

    OK = "ok"
    NO_DATA = "no_data"


class PipelineMetadata(StrictBaseModel):
    """Counts and flags describing how a result was produced.

    Attributes:
        candidates_reviewed: Candidates supplied by the source.
        deduplicated: Candidates left after near-duplicate removal.
        top_scored: Size of the shortlist handed to the arbitrator.
        final_selected: Number of headlines returned.
        fallback_used: Whether the deterministic fallback produced them.
        fallback_reason: Arbitration failure reason when it did.
        reasoning: The model's overall selection rationale, if any.
        cached: Whether the result was served from the cache.
        cache_age_seconds: Age of the cached result when served.
        generated_at: When the pipeline run finished.
    """

    candidates_reviewed: Annotated[int, Field(ge=0)] = 0
    deduplicated: Annotated[int, Field(ge=0)] = 0
    top_scored: Annotated[int, Field(ge=0)] = 0
    final_selected: Annotated[int, Field(ge=0)] = 0
    fallback_used: bool = False
    fallback_reason: str | None = None
    reasoning: str | None = None
    cached: bool = False
    cache_age_seconds: Annotated[float | None, Field(ge=0.0)] = None
    generated_at: datetime | None = None


class PipelineResult(StrictBaseModel):
    """What the caller receives: headlines or an explicit no-data signal.

    Attributes:
        status: ``ok`` with headlines, or ``no_data``.
        headlines: Ordered final headlines (at most 5).
        metadata: Pipeline counts and cache information.
        message: Human-readable explanation for ``no_data``.
    """

    status: PipelineStatus
    headlines: list[FinalHeadline] = Field(default_factory=list)
    metadata: PipelineMetadata = Field(default_factory=PipelineMetadata)
    message: str | None = None

    @property
    def ok(self) -> bool:
        """Whether headlines were produced."""
        return self.status == PipelineStatus.OK

    @classmethod
    def no_data(
        cls, message: str, candidates_reviewed: int = 0
    ) -> "PipelineResult":
        """Build an explicit no-data result."""
        return cls(
            status=PipelineStatus.NO_DATA,
            message=message,
            metadata=PipelineMetadata(candidates_reviewed=candidates_reviewed),
        )


@dataclass(frozen=True)
class CacheEntry:
    """The most recently produced selection.

    Attributes:
        headlines: Ordered final headlines.
        metadata: Metadata of the run that produced them.
        created_at: When the entry was stored.
    """

    headlines: tuple[FinalHeadline, ...]
    metadata: PipelineMetadata
    created_at: datetime
