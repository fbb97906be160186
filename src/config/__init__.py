"""Configuration loading and validation module."""

from src.config.loader import ConfigLoader, ConfigState, ConfigValidationError
from src.config.schemas import HeadlinesConfig


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "ConfigValidationError",
    "HeadlinesConfig",
]
