"""Data models for model arbitration and final headlines."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated

from pydantic import Field, field_validator

from src.data_model import StrictBaseModel, UntrustedPayloadModel


class FinalHeadline(StrictBaseModel):
    """Externally visible output unit.

    Attributes:
        title: Headline title.
        source: Outlet name.
        url: Article URL.
        published_at: Publication timestamp as supplied upstream.
        why_it_matters: Short grounded rationale.
        confidence: Confidence in [0, 1].
        article_index: Position of the originating entry in the shortlist
            handed to the arbitrator.
    """

    title: Annotated[str, Field(min_length=1)]
    source: Annotated[str, Field(min_length=1)]
    url: Annotated[str, Field(min_length=1)]
    published_at: str
    why_it_matters: Annotated[str, Field(min_length=1)]
    confidence: Annotated[float, Field(ge=0.0, le=1.0)]
    article_index: Annotated[int, Field(ge=0)]


class ModelSelection(UntrustedPayloadModel):
    """One selection as returned by the external model.

    Only ``article_index`` is required. Optional text fields that are
    missing or blank fall back to the cited shortlist entry.
    """

    article_index: int
    title: str | None = None
    source: str | None = None
    url: str | None = None
    published_at: str | None = None
    why_it_matters: str | None = None
    confidence: Annotated[float | None, Field(ge=0.0, le=1.0)] = None

    @field_validator("article_index", mode="before")
    @classmethod
    def reject_bool_index(cls, value: object) -> object:
        """Booleans are ints in Python; they are never a valid index."""
        if isinstance(value, bool):
            msg = "article_index must be an integer"
            raise ValueError(msg)
        return value


class ArbitrationEnvelope(UntrustedPayloadModel):
    """Top-level shape of the model response.

    Selections are kept unvalidated here and validated one by one, so a
    single malformed entry is dropped instead of voiding the response.
    """

    headlines: list[object]
    reasoning: str | None = None


class ArbitrationFailure(str, Enum):
    """Why arbitration produced no usable headlines."""

    EMPTY_SHORTLIST = "empty_shortlist"
    API_ERROR = "api_error"
    PARSE_ERROR = "parse_error"
    SCHEMA_ERROR = "schema_error"
    NO_VALID_SELECTIONS = "no_valid_selections"
    TIMEOUT = "timeout"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class ArbitrationOutcome:
    """Result of one arbitration attempt.

    Exactly one of ``headlines`` (non-empty) or ``failure`` is set.

    Attributes:
        headlines: Validated headlines in model order.
        reasoning: The model's overall selection rationale, if given.
        failure: Failure reason when no usable headlines were produced.
        dropped_selections: Selections rejected during validation.
        detail: Free-text detail for logs.
    """

    headlines: tuple[FinalHeadline, ...] = field(default_factory=tuple)
    reasoning: str | None = None
    failure: ArbitrationFailure | None = None
    dropped_selections: int = 0
    detail: str | None = None

    @property
    def ok(self) -> bool:
        """Whether arbitration produced usable headlines."""
        return self.failure is None and bool(self.headlines)

    @classmethod
    def success(
        cls,
        headlines: list[FinalHeadline],
        reasoning: str | None = None,
        dropped_selections: int = 0,
    ) -> "ArbitrationOutcome":
        """Build a successful outcome."""
        return cls(
            headlines=tuple(headlines),
            reasoning=reasoning,
            dropped_selections=dropped_selections,
        )

    @classmethod
    def failed(
        cls,
        failure: ArbitrationFailure,
        detail: str | None = None,
        dropped_selections: int = 0,
    ) -> "ArbitrationOutcome":
        """Build a failed outcome."""
        return cls(
            failure=failure,
            detail=detail,
            dropped_selections=dropped_selections,
        )
