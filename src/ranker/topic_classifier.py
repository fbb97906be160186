"""Topic bucket classification and macro keyword matching.

Classification is table driven: an ordered list of (bucket, patterns)
rules evaluated in priority order, first match wins.
"""

import re
from dataclasses import dataclass, field

from src.config.schemas.base import TopicBucket
from src.config.schemas.headlines import TopicRuleConfig


# Keywords this short are prone to substring false positives
# (e.g. "AI" in "said", "Fed" in "fedex"), so they get \b guards.
_SHORT_KEYWORD_THRESHOLD = 4

_WORD_CHARS_ONLY = re.compile(r"^\w+$")


def _compile_keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a macro keyword into a regex pattern.

    Short all-word-character keywords (<= _SHORT_KEYWORD_THRESHOLD chars)
    get word-boundary anchors. Longer keywords or keywords containing
    non-word characters (like "S&P 500") use plain substring matching.
    So "Fed" does not match inside "Federal Reserve"; that phrase counts
    only through its own keyword.

    Args:
        keyword: Raw keyword string from config.

    Returns:
        Compiled regex pattern.
    """
    escaped = re.escape(keyword)
    if len(keyword) <= _SHORT_KEYWORD_THRESHOLD and _WORD_CHARS_ONLY.match(keyword):
        return re.compile(rf"\b{escaped}\b", re.IGNORECASE)
    return re.compile(escaped, re.IGNORECASE)


@dataclass(frozen=True)
class CompiledRule:
    """A topic rule with pre-compiled patterns.

    Attributes:
        bucket: Bucket assigned on match.
        patterns: Compiled case-insensitive patterns.
    """

    bucket: TopicBucket
    patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)

    def matches(self, text: str) -> bool:
        """Check whether any pattern of this rule occurs in text."""
        return any(pattern.search(text) for pattern in self.patterns)


class TopicClassifier:
    """Assigns exactly one topic bucket to a piece of text."""

    def __init__(
        self,
        rules: list[TopicRuleConfig],
        default_bucket: TopicBucket = TopicBucket.MARKET_INDICES,
    ) -> None:
        """Initialize the classifier.

        Args:
            rules: Ordered topic rules, highest priority first.
            default_bucket: Bucket used when no rule matches.
        """
        self._rules = [
            CompiledRule(
                bucket=rule.bucket,
                patterns=tuple(re.compile(p, re.IGNORECASE) for p in rule.patterns),
            )
            for rule in rules
        ]
        self._default_bucket = default_bucket

    @property
    def rules(self) -> list[CompiledRule]:
        """Compiled rules in evaluation order."""
        return list(self._rules)

    def classify(self, text: str) -> TopicBucket:
        """Classify text into a topic bucket.

        Args:
            text: Title and summary text.

        Returns:
            Bucket of the first matching rule, or the default bucket.
        """
        for rule in self._rules:
            if rule.matches(text):
                return rule.bucket
        return self._default_bucket


class MacroKeywordMatcher:
    """Counts distinct macro/market keyword hits in text."""

    def __init__(self, keywords: list[str]) -> None:
        """Initialize the matcher.

        Args:
            keywords: Keyword phrases; duplicates (case-insensitive) collapse.
        """
        unique: dict[str, re.Pattern[str]] = {}
        for keyword in keywords:
            unique.setdefault(keyword.lower(), _compile_keyword_pattern(keyword))
        self._patterns = unique

    @property
    def keyword_count(self) -> int:
        """Get number of distinct configured keywords."""
        return len(self._patterns)

    def matched_keywords(self, text: str) -> list[str]:
        """Return the distinct keywords that occur in text.

        Args:
            text: Text to search.

        Returns:
            Lower-cased matched keywords in configuration order.
        """
        return [kw for kw, pattern in self._patterns.items() if pattern.search(text)]

    def count_matches(self, text: str) -> int:
        """Count distinct keyword matches in text."""
        return len(self.matched_keywords(text))
