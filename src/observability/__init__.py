"""Observability module for structured logging."""

from src.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    configure_logging_from_settings,
)


__all__ = [
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "configure_logging_from_settings",
]
