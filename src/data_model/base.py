"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class UntrustedPayloadModel(BaseModel):
    """Base model for payloads produced outside our control.

    Unknown keys are ignored rather than rejected so that a model adding
    an extra field does not invalidate an otherwise usable response.
    Known keys are still fully type-checked.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)
