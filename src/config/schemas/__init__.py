"""Configuration schemas."""

from src.config.schemas.base import TopicBucket
from src.config.schemas.headlines import (
    CacheConfig,
    DedupeConfig,
    HeadlinesConfig,
    ScoringConfig,
    SelectionConfig,
    TopicRuleConfig,
)


__all__ = [
    "CacheConfig",
    "DedupeConfig",
    "HeadlinesConfig",
    "ScoringConfig",
    "SelectionConfig",
    "TopicBucket",
    "TopicRuleConfig",
]
