"""Structural type for text-generation clients."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LlmClient(Protocol):
    """Anything that turns a prompt into model text.

    ``GeminiApiKeyClient`` is the production implementation; tests pass
    scripted fakes with the same method.
    """

    def generate_content(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> str:
        """Return the model's raw text for a prompt.

        Raises:
            LlmApiError: If no usable response was obtained.
        """
        ...
