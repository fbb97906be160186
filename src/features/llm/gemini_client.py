"""Standard Gemini API client using API key authentication."""

import random
import time
from http import HTTPStatus

import httpx
import structlog

from src.features.llm.errors import LlmApiError, LlmTimeoutError


logger = structlog.get_logger()

_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

_RETRY_BASE_DELAY = 1.0
_RETRYABLE_STATUS_CODES = {
    HTTPStatus.TOO_MANY_REQUESTS,
    HTTPStatus.INTERNAL_SERVER_ERROR,
    HTTPStatus.SERVICE_UNAVAILABLE,
}


class GeminiApiKeyClient:
    """Client for the Gemini ``generateContent`` endpoint.

    Uses the ``generativelanguage.googleapis.com`` endpoint with an
    ``x-goog-api-key`` header and asks for a JSON response body. Every
    request carries a timeout; retryable statuses get a small number of
    jittered exponential-backoff retries.
    """

    def __init__(  # noqa: PLR0913
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 20.0,
        max_retries: int = 1,
        temperature: float = 0.3,
        json_response: bool = True,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key.
            model: Gemini model identifier.
            timeout: Per-request timeout in seconds.
            max_retries: Retries for 429/500/503 responses.
            temperature: Sampling temperature.
            json_response: Request ``application/json`` output.
            http_client: Optional shared httpx client.
        """
        self._api_key = api_key
        self.model = model
        self.timeout = timeout
        self._max_retries = max_retries
        self._temperature = temperature
        self._json_response = json_response
        self._http = http_client
        self._log = logger.bind(component="llm", subcomponent="gemini_api_key")

    def _post(self, url: str, body: dict[str, object]) -> httpx.Response:
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        if self._http is not None:
            return self._http.post(
                url, headers=headers, json=body, timeout=self.timeout
            )
        return httpx.post(url, headers=headers, json=body, timeout=self.timeout)

    def _build_body(
        self, prompt: str, system_instruction: str | None
    ) -> dict[str, object]:
        generation_config: dict[str, object] = {"temperature": self._temperature}
        if self._json_response:
            generation_config["responseMimeType"] = "application/json"

        body: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return body

    def generate_content(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> str:
        """Send a generate content request to the Gemini API.

        Args:
            prompt: User prompt text.
            system_instruction: Optional system instruction.

        Returns:
            Generated text from the model response.

        Raises:
            LlmApiError: On network error, timeout, non-2xx status after
                retries, or a response without text.
        """
        url = f"{_BASE_URL}/{self.model}:generateContent"
        body = self._build_body(prompt, system_instruction)

        for attempt in range(self._max_retries + 1):
            try:
                response = self._post(url, body)
            except httpx.TimeoutException as exc:
                msg = f"Gemini API request timed out after {self.timeout}s"
                raise LlmTimeoutError(msg) from exc
            except httpx.HTTPError as exc:
                msg = f"Gemini API request failed: {exc}"
                raise LlmApiError(msg) from exc

            if response.status_code == HTTPStatus.OK:
                break

            if (
                response.status_code in _RETRYABLE_STATUS_CODES
                and attempt < self._max_retries
            ):
                delay = _RETRY_BASE_DELAY * (2**attempt) + random.uniform(0, 0.5)  # noqa: S311
                self._log.warning(
                    "gemini_retryable_error",
                    status=response.status_code,
                    attempt=attempt + 1,
                    retry_delay=round(delay, 1),
                )
                time.sleep(delay)
                continue

            msg = f"Gemini API returned {response.status_code}"
            raise LlmApiError(msg, status_code=response.status_code)

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as exc:
            msg = "Gemini API returned a non-JSON body"
            raise LlmApiError(msg, status_code=response.status_code) from exc

        if not isinstance(data, dict):
            msg = "Gemini API returned an unexpected body"
            raise LlmApiError(msg)

        candidates = data.get("candidates") or []
        if not candidates:
            msg = "No candidates in Gemini API response"
            raise LlmApiError(msg)

        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            msg = "No parts in first candidate"
            raise LlmApiError(msg)

        text = "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        )
        if not text:
            msg = "Empty text in response"
            raise LlmApiError(msg)

        return text
