"""Factory for creating LLM clients from settings."""

import structlog

from src.features.llm.errors import LlmAuthError
from src.features.llm.protocols import LlmClient
from src.settings import AppSettings


logger = structlog.get_logger()


def create_llm_client(
    *,
    api_key: str | None = None,
    model: str = "gemini-2.5-flash",
    timeout: float = 20.0,
    max_retries: int = 1,
) -> LlmClient:
    """Create a Gemini client.

    Args:
        api_key: Gemini API key.
        model: Gemini model identifier.
        timeout: Per-request timeout in seconds.
        max_retries: Retries for retryable HTTP statuses.

    Returns:
        An LlmClient implementation ready for use.

    Raises:
        LlmAuthError: If no API key is provided.
    """
    log = logger.bind(component="llm", subcomponent="factory")

    if not api_key:
        msg = "No Gemini credentials configured (need GEMINI_API_KEY)"
        raise LlmAuthError(msg)

    from src.features.llm.gemini_client import GeminiApiKeyClient

    log.info("llm_client_created", auth_method="api_key", model=model)
    return GeminiApiKeyClient(
        api_key=api_key,
        model=model,
        timeout=timeout,
        max_retries=max_retries,
    )


def create_llm_client_from_settings(settings: AppSettings) -> LlmClient | None:
    """Create a client from application settings, if credentials exist.

    The per-request timeout is capped at the pipeline deadline, so a
    request abandoned by the pipeline does not outlive the run by more
    than its retries.

    Args:
        settings: Application settings.

    Returns:
        A client, or None when no API key is configured (the pipeline
        then always uses the deterministic fallback).
    """
    if not settings.llm_enabled:
        logger.warning(
            "llm_client_unavailable",
            component="llm",
            subcomponent="factory",
            reason="missing_api_key",
        )
        return None

    try:
        return create_llm_client(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=min(
                settings.llm_timeout_seconds, settings.pipeline_deadline_seconds
            ),
            max_retries=settings.llm_max_retries,
        )
    except LlmAuthError:
        logger.warning(
            "llm_client_unavailable",
            component="llm",
            subcomponent="factory",
            reason="auth_error",
        )
        return None
