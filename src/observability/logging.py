"""Structured logging for the headlines service.

Logs are structlog event dicts rendered as JSON (or console text for
local runs) on stderr, leaving stdout for command output. A redaction
processor runs before rendering so Gemini credentials never reach a log
line, even when an exception message or header dict carries them.
"""

import logging
import sys
from collections.abc import Iterable, MutableMapping
from typing import Any, TextIO

import structlog

from src.settings import AppSettings


# Event-dict keys whose values are always masked.
SENSITIVE_KEYS = frozenset(
    {
        "api_key",
        "gemini_api_key",
        "x-goog-api-key",
        "authorization",
    }
)

REDACTED_VALUE = "[REDACTED]"


class SecretRedactor:
    """structlog processor that masks credentials in event dicts.

    Values under ``SENSITIVE_KEYS`` are replaced outright; any known
    secret appearing inside another string value is substituted in
    place. Nested dicts (e.g. request headers) are handled one level
    deep.
    """

    def __init__(self, secrets: Iterable[str | None] = ()) -> None:
        self._secrets = tuple(s for s in secrets if s)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            for secret in self._secrets:
                value = value.replace(secret, REDACTED_VALUE)
            return value
        if isinstance(value, dict):
            return {
                k: REDACTED_VALUE if str(k).lower() in SENSITIVE_KEYS else self._scrub(v)
                for k, v in value.items()
            }
        return value

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        for key in list(event_dict):
            if key.lower() in SENSITIVE_KEYS:
                event_dict[key] = REDACTED_VALUE
            else:
                event_dict[key] = self._scrub(event_dict[key])
        return event_dict


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
    secrets: Iterable[str | None] = (),
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Level as a number or a name such as ``"DEBUG"``; unknown
            names fall back to INFO.
        output: Stream for rendered log lines.
        json_format: JSON lines when True, console rendering otherwise.
        secrets: Literal secret values to scrub from every log line.
    """
    numeric_level = _resolve_level(level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        SecretRedactor(secrets),
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=output.isatty()),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=numeric_level)


def configure_logging_from_settings(
    settings: AppSettings,
    json_format: bool | None = None,
    output: TextIO = sys.stderr,
) -> None:
    """Configure logging from environment settings.

    Args:
        settings: Application settings (level, format, API key).
        json_format: Overrides ``settings.log_json`` when not None.
        output: Stream for rendered log lines.
    """
    configure_logging(
        level=settings.log_level,
        output=output,
        json_format=settings.log_json if json_format is None else json_format,
        secrets=[settings.gemini_api_key],
    )


def bind_run_context(run_id: str, **fields: str) -> None:
    """Bind a run id, plus optional fields, to every later log line.

    Args:
        run_id: Unique run identifier.
        **fields: Extra context such as the CLI command name.
    """
    structlog.contextvars.bind_contextvars(run_id=run_id, **fields)


def clear_run_context(*fields: str) -> None:
    """Unbind the run id and any named extra fields.

    Args:
        *fields: Names of extra fields passed to ``bind_run_context``.
    """
    structlog.contextvars.unbind_contextvars("run_id", *fields)
