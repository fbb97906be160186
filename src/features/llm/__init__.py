"""Gemini client layer used by the headline arbitrator."""

from src.features.llm.errors import LlmApiError, LlmAuthError, LlmProcessingError
from src.features.llm.factory import create_llm_client, create_llm_client_from_settings
from src.features.llm.protocols import LlmClient


__all__ = [
    "LlmApiError",
    "LlmAuthError",
    "LlmClient",
    "LlmProcessingError",
    "create_llm_client",
    "create_llm_client_from_settings",
]
