"""Metrics collection for the headlines service."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class HeadlinesMetrics:
    """Counters and timings for headline selection.

    Attributes:
        pipeline_runs: Pipeline runs started.
        cache_hits: Requests served from the cache.
        no_data_results: Requests answered with ``no_data``.
        arbitration_successes: Runs where the model selection was used.
        fallback_uses: Runs where the fallback selection was used.
        dropped_selections: Model selections rejected during validation.
        scoring_duration_ms: Duration of the last scoring stage.
        arbitration_duration_ms: Duration of the last arbitration stage.
    """

    pipeline_runs: int = 0
    cache_hits: int = 0
    no_data_results: int = 0
    arbitration_successes: int = 0
    fallback_uses: int = 0
    dropped_selections: int = 0
    scoring_duration_ms: float = 0.0
    arbitration_duration_ms: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["HeadlinesMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "HeadlinesMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_pipeline_run(self) -> None:
        """Record a pipeline run."""
        with self._lock:
            self.pipeline_runs += 1

    def record_cache_hit(self) -> None:
        """Record a response served from cache."""
        with self._lock:
            self.cache_hits += 1

    def record_no_data(self) -> None:
        """Record a no-data response."""
        with self._lock:
            self.no_data_results += 1

    def record_arbitration(self, *, used_fallback: bool, dropped: int) -> None:
        """Record how the final selection was produced.

        Args:
            used_fallback: Whether the fallback produced the headlines.
            dropped: Model selections dropped during validation.
        """
        with self._lock:
            if used_fallback:
                self.fallback_uses += 1
            else:
                self.arbitration_successes += 1
            self.dropped_selections += dropped

    def record_scoring_duration(self, duration_ms: float) -> None:
        """Record scoring duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.scoring_duration_ms = duration_ms

    def record_arbitration_duration(self, duration_ms: float) -> None:
        """Record arbitration duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.arbitration_duration_ms = duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "pipeline_runs": self.pipeline_runs,
            "cache_hits": self.cache_hits,
            "no_data_results": self.no_data_results,
            "arbitration_successes": self.arbitration_successes,
            "fallback_uses": self.fallback_uses,
            "dropped_selections": self.dropped_selections,
            "scoring_duration_ms": self.scoring_duration_ms,
            "arbitration_duration_ms": self.arbitration_duration_ms,
        }
