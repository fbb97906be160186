"""Integration tests for the headlines service, end to end."""

import json
from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.arbiter.arbitrator import HeadlineArbitrator
from src.config.loader import ConfigLoader
from src.features.llm.gemini_client import GeminiApiKeyClient
from src.headlines.cache import ResultCache
from src.headlines.metrics import HeadlinesMetrics
from src.headlines.pipeline import HeadlinePipeline
from src.headlines.service import HeadlinesService, create_headlines_service
from src.headlines.source import JsonFileCandidateSource
from src.settings import AppSettings
from tests.helpers.time import FIXED_NOW


SAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "config" / "headlines.yaml"


@pytest.fixture(autouse=True)
def _reset_metrics() -> Iterator[None]:
    HeadlinesMetrics.reset()
    yield
    HeadlinesMetrics.reset()


def _record(
    candidate_id: str,
    title: str,
    source: str,
    hours_old: float = 1.0,
    summary: str | None = None,
) -> dict[str, object]:
    return {
        "id": candidate_id,
        "title": title,
        "summary": summary,
        "url": f"https://news.example.com/{candidate_id}",
        "source_name": source,
        "published_at": (FIXED_NOW - timedelta(hours=hours_old)).isoformat(),
    }


def _pool() -> list[dict[str, object]]:
    return [
        _record("fed-1", "Fed raises rates by 25bps", "Reuters", 1),
        _record("fed-2", "Fed raises rates by 25bps as expected", "Bloomberg", 1),
        _record("cpi", "Inflation cools as CPI slows in May", "WSJ", 12),
        _record("oil", "Oil jumps as Middle East tensions rise", "Reuters", 2),
        _record("nvda", "Nvidia unveils new AI chips", "CNBC", 4),
        _record("ndx", "Nasdaq closes at a record high", "MarketWatch", 5),
        _record("aapl", "Apple earnings beat estimates", "Yahoo Finance", 6),
        _record("sec", "SEC opens probe into broker", "Barron's", 8),
        _record("old", "Stocks drift in quiet trade", "Motley Fool", 200),
        {"id": "broken", "title": "", "url": "https://news.example.com/broken"},
    ]


def _gemini_response(payload: dict[str, object]) -> MagicMock:
    text = "```json\n" + json.dumps(payload) + "\n```"
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": text}]}}]
    }
    return response


def _service(tmp_path: Path) -> HeadlinesService:
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps(_pool()), encoding="utf-8")
    config = ConfigLoader(run_id="integration").load(SAMPLE_CONFIG)
    client = GeminiApiKeyClient(api_key="test-key")  # noqa: S106
    return HeadlinesService(
        source=JsonFileCandidateSource(path),
        pipeline=HeadlinePipeline(
            config=config,
            arbitrator=HeadlineArbitrator(client, config.selection.max_headlines),
        ),
        cache=ResultCache(clock=lambda: FIXED_NOW),
    )


class TestHeadlinesEndToEnd:
    """Full flow: source, scoring, dedupe, shortlist, model, cache."""

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_model_selection_flow(self, mock_post: MagicMock, tmp_path: Path) -> None:
        """Model picks are validated, mapped and cached."""
        mock_post.return_value = _gemini_response(
            {
                "headlines": [
                    {"article_index": 0, "why_it_matters": "Rates reset valuations"},
                    {"article_index": 99, "why_it_matters": "Invented"},
                    {"article_index": 1, "why_it_matters": "Energy shock risk"},
                ],
                "reasoning": "Macro and commodities lead",
            }
        )
        service = _service(tmp_path)

        result = service.get_headlines()

        assert result.ok
        assert not result.metadata.fallback_used
        assert result.metadata.candidates_reviewed == 9
        assert result.metadata.deduplicated == 8
        assert [h.title for h in result.headlines] == [
            "Fed raises rates by 25bps as expected",
            "Oil jumps as Middle East tensions rise",
        ]
        assert result.headlines[0].source == "Bloomberg"
        assert result.headlines[0].confidence == 0.8

        cached = service.get_headlines()
        assert cached.metadata.cached
        assert cached.headlines == result.headlines
        assert mock_post.call_count == 1

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_api_failure_falls_back(self, mock_post: MagicMock, tmp_path: Path) -> None:
        """A failing model still yields five diverse headlines."""
        response = MagicMock()
        response.status_code = 400
        mock_post.return_value = response
        service = _service(tmp_path)

        result = service.get_headlines()

        assert result.ok
        assert result.metadata.fallback_used
        assert result.metadata.fallback_reason == "api_error"
        assert [h.title for h in result.headlines] == [
            "Fed raises rates by 25bps as expected",
            "Oil jumps as Middle East tensions rise",
            "Nvidia unveils new AI chips",
            "Nasdaq closes at a record high",
            "Apple earnings beat estimates",
        ]
        assert all(0.0 <= h.confidence <= 1.0 for h in result.headlines)
        assert service.cache.peek() is not None

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_factory_wiring(self, mock_post: MagicMock, tmp_path: Path) -> None:
        """create_headlines_service builds a working model-backed service."""
        mock_post.return_value = _gemini_response(
            {"headlines": [{"article_index": 0}], "reasoning": "One pick"}
        )
        path = tmp_path / "candidates.json"
        path.write_text(json.dumps(_pool()), encoding="utf-8")
        config = ConfigLoader(run_id="integration").load(SAMPLE_CONFIG)
        settings = AppSettings(GEMINI_API_KEY="test-key")

        service = create_headlines_service(JsonFileCandidateSource(path), config, settings)
        result = service.get_headlines()

        assert not result.metadata.fallback_used
        assert len(result.headlines) == 1
        assert mock_post.call_count == 1
