"""Unit tests for headlines metrics."""

from collections.abc import Iterator

import pytest

from src.headlines.metrics import HeadlinesMetrics


@pytest.fixture(autouse=True)
def _reset_metrics() -> Iterator[None]:
    HeadlinesMetrics.reset()
    yield
    HeadlinesMetrics.reset()


class TestHeadlinesMetrics:
    """Tests for HeadlinesMetrics."""

    def test_singleton(self) -> None:
        """get_instance returns the same object until reset."""
        first = HeadlinesMetrics.get_instance()
        assert HeadlinesMetrics.get_instance() is first
        HeadlinesMetrics.reset()
        assert HeadlinesMetrics.get_instance() is not first

    def test_counters(self) -> None:
        """Record methods increment their counters."""
        metrics = HeadlinesMetrics()
        metrics.record_pipeline_run()
        metrics.record_cache_hit()
        metrics.record_cache_hit()
        metrics.record_no_data()
        metrics.record_arbitration(used_fallback=False, dropped=1)
        metrics.record_arbitration(used_fallback=True, dropped=2)

        data = metrics.to_dict()
        assert data["pipeline_runs"] == 1
        assert data["cache_hits"] == 2
        assert data["no_data_results"] == 1
        assert data["arbitration_successes"] == 1
        assert data["fallback_uses"] == 1
        assert data["dropped_selections"] == 3

    def test_durations(self) -> None:
        """Durations keep the last recorded value."""
        metrics = HeadlinesMetrics()
        metrics.record_scoring_duration(12.5)
        metrics.record_arbitration_duration(250.0)
        metrics.record_scoring_duration(3.0)

        assert metrics.scoring_duration_ms == 3.0
        assert metrics.arbitration_duration_ms == 250.0
