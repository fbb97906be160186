"""Environment-driven settings for the headlines service."""

from .app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
