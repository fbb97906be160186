"""Errors raised by the Gemini client layer.

The arbitrator converts every one of these into a failed outcome; none
of them reaches the caller of the headlines service.
"""


class LlmAuthError(Exception):
    """No usable Gemini credentials were configured."""


class LlmApiError(Exception):
    """The Gemini request did not produce a usable text response.

    Covers network errors, non-2xx statuses after retries, and bodies
    without candidate text.

    Attributes:
        status_code: HTTP status of the last response, 0 if none arrived.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class LlmTimeoutError(LlmApiError):
    """The Gemini request exceeded its per-request timeout."""


class LlmProcessingError(Exception):
    """Model text could not be parsed into the selection schema."""
