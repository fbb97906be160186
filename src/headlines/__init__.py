"""Headline service: candidate sources, pipeline orchestration and cache."""

from src.headlines.cache import ResultCache
from src.headlines.errors import CandidateSourceError
from src.headlines.metrics import HeadlinesMetrics
from src.headlines.models import (
    CacheEntry,
    PipelineMetadata,
    PipelineResult,
    PipelineStatus,
)
from src.headlines.pipeline import HeadlinePipeline
from src.headlines.service import HeadlinesService, create_headlines_service
from src.headlines.source import (
    CandidateSource,
    JsonFileCandidateSource,
    StaticCandidateSource,
    parse_candidate_records,
)
from src.headlines.state_machine import (
    PipelineState,
    PipelineStateMachine,
    PipelineStateTransitionError,
)


__all__ = [
    "CacheEntry",
    "CandidateSource",
    "CandidateSourceError",
    "HeadlinePipeline",
    "HeadlinesMetrics",
    "HeadlinesService",
    "JsonFileCandidateSource",
    "PipelineMetadata",
    "PipelineResult",
    "PipelineState",
    "PipelineStateMachine",
    "PipelineStateTransitionError",
    "PipelineStatus",
    "ResultCache",
    "StaticCandidateSource",
    "create_headlines_service",
    "parse_candidate_records",
]
