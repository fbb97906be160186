"""Unit tests for the Gemini API key client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from src.features.llm.errors import LlmApiError, LlmTimeoutError
from src.features.llm.gemini_client import GeminiApiKeyClient


def _make_client(
    api_key: str = "test-api-key",  # noqa: S107
    model: str = "gemini-2.5-flash",
    max_retries: int = 1,
) -> GeminiApiKeyClient:
    """Create a test client."""
    return GeminiApiKeyClient(api_key=api_key, model=model, max_retries=max_retries)


def _ok_response(text: str = "ok") -> MagicMock:
    """Create a 200 response carrying one text part."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": text}]}}]
    }
    return response


def _status_response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


class TestGeminiApiKeyClientGenerateContent:
    """Tests for GeminiApiKeyClient.generate_content."""

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_success_returns_text(self, mock_post: MagicMock) -> None:
        """Should return text from model response."""
        mock_post.return_value = _ok_response('{"headlines": []}')

        result = _make_client().generate_content("Pick headlines")

        assert result == '{"headlines": []}'

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_joins_multiple_parts(self, mock_post: MagicMock) -> None:
        """Text split over several parts is concatenated."""
        response = _ok_response()
        response.json.return_value = {
            "candidates": [
                {"content": {"parts": [{"text": '{"head'}, {"text": 'lines": []}'}]}}
            ]
        }
        mock_post.return_value = response

        assert _make_client().generate_content("Test") == '{"headlines": []}'

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_sends_api_key_header(self, mock_post: MagicMock) -> None:
        """Should send x-goog-api-key header."""
        mock_post.return_value = _ok_response()

        _make_client(api_key="my-key-123").generate_content("Test")

        headers = mock_post.call_args[1]["headers"]
        assert headers["x-goog-api-key"] == "my-key-123"

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_uses_correct_endpoint(self, mock_post: MagicMock) -> None:
        """Should call the generativelanguage endpoint with model name."""
        mock_post.return_value = _ok_response()

        _make_client(model="gemini-2.5-flash").generate_content("Test")

        url = mock_post.call_args[0][0]
        assert "generativelanguage.googleapis.com" in url
        assert url.endswith("gemini-2.5-flash:generateContent")

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_requests_json_output_with_timeout(self, mock_post: MagicMock) -> None:
        """Body asks for JSON and every request carries a timeout."""
        mock_post.return_value = _ok_response()

        GeminiApiKeyClient(api_key="k", timeout=7.5).generate_content("Test")

        kwargs = mock_post.call_args[1]
        assert kwargs["timeout"] == 7.5
        config = kwargs["json"]["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["temperature"] == 0.3

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_sends_system_instruction(self, mock_post: MagicMock) -> None:
        """Should include systemInstruction when provided."""
        mock_post.return_value = _ok_response()

        _make_client().generate_content("Test", system_instruction="Be concise")

        body = mock_post.call_args[1]["json"]
        assert body["systemInstruction"]["parts"][0]["text"] == "Be concise"

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_omits_system_instruction_when_absent(self, mock_post: MagicMock) -> None:
        """No systemInstruction key without an instruction."""
        mock_post.return_value = _ok_response()

        _make_client().generate_content("Test")

        assert "systemInstruction" not in mock_post.call_args[1]["json"]

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_401_raises_api_error(self, mock_post: MagicMock) -> None:
        """Should raise LlmApiError with the status on 401."""
        mock_post.return_value = _status_response(401)

        with pytest.raises(LlmApiError, match="401") as exc_info:
            _make_client().generate_content("Test")

        assert exc_info.value.status_code == 401
        assert mock_post.call_count == 1

    @patch("src.features.llm.gemini_client.time.sleep")
    @patch("src.features.llm.gemini_client.httpx.post")
    def test_retries_retryable_status(
        self, mock_post: MagicMock, mock_sleep: MagicMock
    ) -> None:
        """A 503 is retried and a later success is returned."""
        mock_post.side_effect = [_status_response(503), _ok_response("done")]

        result = _make_client(max_retries=1).generate_content("Test")

        assert result == "done"
        assert mock_post.call_count == 2
        mock_sleep.assert_called_once()

    @patch("src.features.llm.gemini_client.time.sleep")
    @patch("src.features.llm.gemini_client.httpx.post")
    def test_retries_exhausted_raise(
        self, mock_post: MagicMock, mock_sleep: MagicMock
    ) -> None:
        """Persistent 429 raises after max_retries + 1 attempts."""
        mock_post.return_value = _status_response(429)

        with pytest.raises(LlmApiError, match="429"):
            _make_client(max_retries=2).generate_content("Test")

        assert mock_post.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_timeout_raises_timeout_error(self, mock_post: MagicMock) -> None:
        """Request timeouts surface as LlmTimeoutError."""
        mock_post.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(LlmTimeoutError, match="timed out"):
            _make_client().generate_content("Test")

        assert mock_post.call_count == 1

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_network_error_raises_api_error(self, mock_post: MagicMock) -> None:
        """Should raise LlmApiError on network failure."""
        mock_post.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(LlmApiError, match="request failed"):
            _make_client().generate_content("Test")

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_empty_candidates_raises_api_error(self, mock_post: MagicMock) -> None:
        """Should raise LlmApiError when response has no candidates."""
        response = _ok_response()
        response.json.return_value = {"candidates": []}
        mock_post.return_value = response

        with pytest.raises(LlmApiError, match="No candidates"):
            _make_client().generate_content("Test")

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_no_parts_raises_api_error(self, mock_post: MagicMock) -> None:
        """A candidate without parts is an error."""
        response = _ok_response()
        response.json.return_value = {"candidates": [{"content": {}}]}
        mock_post.return_value = response

        with pytest.raises(LlmApiError, match="No parts"):
            _make_client().generate_content("Test")

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_empty_text_raises_api_error(self, mock_post: MagicMock) -> None:
        """Parts without text are an error."""
        mock_post.return_value = _ok_response("")

        with pytest.raises(LlmApiError, match="Empty text"):
            _make_client().generate_content("Test")

    @patch("src.features.llm.gemini_client.httpx.post")
    def test_non_json_body_raises_api_error(self, mock_post: MagicMock) -> None:
        """A body that is not JSON is an error."""
        response = _ok_response()
        response.json.side_effect = ValueError("bad json")
        mock_post.return_value = response

        with pytest.raises(LlmApiError, match="non-JSON"):
            _make_client().generate_content("Test")

    def test_uses_injected_http_client(self) -> None:
        """A shared httpx client is used instead of module-level post."""
        http_client = MagicMock(spec=httpx.Client)
        http_client.post.return_value = _ok_response("shared")

        client = GeminiApiKeyClient(api_key="k", http_client=http_client)

        assert client.generate_content("Test") == "shared"
        http_client.post.assert_called_once()
