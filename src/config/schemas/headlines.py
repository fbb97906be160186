"""Headlines configuration schema."""

import re
from typing import Annotated

from pydantic import Field, field_validator, model_validator

from src.config.constants import (
    BASE_RELEVANCE_WEIGHT,
    CACHE_FRESHNESS_MINUTES,
    CREDIBILITY_WEIGHT,
    DEDUPE_SIMILARITY_THRESHOLD,
    DEFAULT_CREDIBILITY,
    DEFAULT_MACRO_KEYWORDS,
    DEFAULT_RELEVANCE,
    DEFAULT_SOURCE_CREDIBILITY,
    DEFAULT_TOPIC_BUCKET,
    DEFAULT_TOPIC_RULES,
    MACRO_BOOST_STEP,
    MACRO_KEYWORD_CAP,
    MAX_AGE_HOURS,
    MAX_HEADLINES,
    RECENCY_DECAY_HOURS,
    RECENCY_WEIGHT,
    SHORTLIST_SIZE,
)
from src.config.schemas.base import TopicBucket
from src.data_model import StrictBaseModel


class ScoringConfig(StrictBaseModel):
    """Scoring weights configuration.

    Attributes:
        base_relevance_weight: Weight of the upstream relevance score.
        recency_weight: Weight of the recency decay score.
        credibility_weight: Weight of the source credibility score.
        default_relevance: Relevance used when a candidate carries none.
        default_credibility: Credibility for sources missing from the table.
        recency_decay_hours: Time constant of the exponential recency decay.
        max_age_hours: Age cap, also the age assumed for unparseable dates.
        macro_boost_step: Boost added per distinct macro keyword hit.
        macro_keyword_cap: Maximum number of keyword hits that count.
    """

    base_relevance_weight: Annotated[float, Field(ge=0.0, le=1.0)] = (
        BASE_RELEVANCE_WEIGHT
    )
    recency_weight: Annotated[float, Field(ge=0.0, le=1.0)] = RECENCY_WEIGHT
    credibility_weight: Annotated[float, Field(ge=0.0, le=1.0)] = CREDIBILITY_WEIGHT
    default_relevance: Annotated[float, Field(ge=0.0, le=1.0)] = DEFAULT_RELEVANCE
    default_credibility: Annotated[float, Field(ge=0.0, le=1.0)] = DEFAULT_CREDIBILITY
    recency_decay_hours: Annotated[float, Field(gt=0.0)] = RECENCY_DECAY_HOURS
    max_age_hours: Annotated[float, Field(gt=0.0, le=24.0 * 3650)] = MAX_AGE_HOURS
    macro_boost_step: Annotated[float, Field(ge=0.0, le=1.0)] = MACRO_BOOST_STEP
    macro_keyword_cap: Annotated[int, Field(ge=0, le=10)] = MACRO_KEYWORD_CAP

    @property
    def max_macro_boost(self) -> float:
        """Largest boost the configured step and cap can produce."""
        return self.macro_boost_step * self.macro_keyword_cap


class TopicRuleConfig(StrictBaseModel):
    """One classification rule: a bucket and the patterns that select it.

    Attributes:
        bucket: Bucket assigned when any pattern matches.
        patterns: Case-insensitive regular expressions (at least 1).
    """

    bucket: TopicBucket
    patterns: Annotated[list[str], Field(min_length=1)]

    @field_validator("patterns")
    @classmethod
    def validate_patterns_compile(cls, patterns: list[str]) -> list[str]:
        """Ensure every pattern is non-empty and a valid regex."""
        for pattern in patterns:
            if not pattern.strip():
                msg = "Topic patterns must be non-empty strings"
                raise ValueError(msg)
            try:
                re.compile(pattern)
            except re.error as exc:
                msg = f"Invalid topic pattern {pattern!r}: {exc}"
                raise ValueError(msg) from exc
        return patterns


def _default_topic_rules() -> list[TopicRuleConfig]:
    return [
        TopicRuleConfig(bucket=TopicBucket(bucket), patterns=patterns)
        for bucket, patterns in DEFAULT_TOPIC_RULES
    ]


class DedupeConfig(StrictBaseModel):
    """Near-duplicate detection configuration.

    Attributes:
        similarity_threshold: Jaccard similarity at or above which two
            titles are considered duplicates.
    """

    similarity_threshold: Annotated[float, Field(gt=0.0, le=1.0)] = (
        DEDUPE_SIMILARITY_THRESHOLD
    )


class SelectionConfig(StrictBaseModel):
    """Shortlist and output size configuration.

    Attributes:
        shortlist_size: Maximum candidates handed to the arbitrator.
        max_headlines: Maximum headlines returned to the caller.
    """

    shortlist_size: Annotated[int, Field(ge=1, le=SHORTLIST_SIZE)] = SHORTLIST_SIZE
    max_headlines: Annotated[int, Field(ge=1, le=MAX_HEADLINES)] = MAX_HEADLINES

    @model_validator(mode="after")
    def validate_shortlist_covers_output(self) -> "SelectionConfig":
        """Ensure the shortlist can fill the output."""
        if self.shortlist_size < self.max_headlines:
            msg = "shortlist_size must be >= max_headlines"
            raise ValueError(msg)
        return self


class CacheConfig(StrictBaseModel):
    """Result cache configuration.

    Attributes:
        freshness_minutes: How long a cached selection is served.
    """

    freshness_minutes: Annotated[int, Field(ge=0, le=24 * 60)] = (
        CACHE_FRESHNESS_MINUTES
    )


class HeadlinesConfig(StrictBaseModel):
    """Root configuration for headlines.yaml.

    Attributes:
        version: Schema version.
        scoring: Scoring weights configuration.
        source_credibility: Ordered outlet name to credibility table.
        macro_keywords: Phrases that amplify a candidate's score.
        topic_rules: Ordered topic classification rules.
        default_bucket: Bucket used when no rule matches.
        dedupe: Deduplication configuration.
        selection: Shortlist and output size configuration.
        cache: Result cache configuration.
    """

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    source_credibility: dict[str, Annotated[float, Field(ge=0.0, le=1.0)]] = Field(
        default_factory=lambda: dict(DEFAULT_SOURCE_CREDIBILITY)
    )
    macro_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MACRO_KEYWORDS)
    )
    topic_rules: list[TopicRuleConfig] = Field(default_factory=_default_topic_rules)
    default_bucket: TopicBucket = TopicBucket(DEFAULT_TOPIC_BUCKET)
    dedupe: DedupeConfig = Field(default_factory=DedupeConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("macro_keywords")
    @classmethod
    def validate_keywords_non_empty(cls, keywords: list[str]) -> list[str]:
        """Ensure keywords list contains non-empty strings."""
        for keyword in keywords:
            if not keyword.strip():
                msg = "Keywords must be non-empty strings"
                raise ValueError(msg)
        return keywords

    @model_validator(mode="after")
    def validate_unique_rule_buckets(self) -> "HeadlinesConfig":
        """Ensure each bucket appears in at most one topic rule."""
        seen: set[TopicBucket] = set()
        for rule in self.topic_rules:
            if rule.bucket in seen:
                msg = f"Duplicate topic rule for bucket '{rule.bucket.value}'"
                raise ValueError(msg)
            seen.add(rule.bucket)
        return self
