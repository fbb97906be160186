"""Base schema types for configuration."""

from enum import Enum


class TopicBucket(str, Enum):
    """Topic bucket used to enforce headline diversity.

    Declaration order is the priority order used both for classification
    and for the first pass of diversity selection.
    """

    MACRO_RATES = "macro_rates"
    GEOPOLITICS_COMMODITIES = "geopolitics_commodities"
    TECH_AI = "tech_ai"
    MARKET_INDICES = "market_indices"
    EARNINGS_MICRO = "earnings_micro"
    REGULATORY = "regulatory"

    @property
    def label(self) -> str:
        """Human-readable bucket name, e.g. ``macro rates``."""
        return self.value.replace("_", " ")
