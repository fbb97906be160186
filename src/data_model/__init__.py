"""Shared data model base classes."""

from src.data_model.base import StrictBaseModel, UntrustedPayloadModel


__all__ = ["StrictBaseModel", "UntrustedPayloadModel"]
