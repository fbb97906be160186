"""Final headline selection: model arbitration and deterministic fallback."""

from src.arbiter.arbitrator import HeadlineArbitrator
from src.arbiter.fallback import fallback_rationale, fallback_selection
from src.arbiter.models import (
    ArbitrationFailure,
    ArbitrationOutcome,
    FinalHeadline,
    ModelSelection,
)


__all__ = [
    "ArbitrationFailure",
    "ArbitrationOutcome",
    "FinalHeadline",
    "HeadlineArbitrator",
    "ModelSelection",
    "fallback_rationale",
    "fallback_selection",
]
