"""Default constants for headline scoring and selection.

These are the shipped defaults; every value here can be overridden from
the YAML configuration (see ``src.config.schemas.headlines``).
"""

# Outlet credibility, checked in order. Exact match first, then
# case-insensitive substring match in either direction.
DEFAULT_SOURCE_CREDIBILITY: dict[str, float] = {
    "Bloomberg": 1.00,
    "Reuters": 0.95,
    "Financial Times": 0.95,
    "WSJ": 0.90,
    "Wall Street Journal": 0.90,
    "The Economist": 0.90,
    "Barron's": 0.85,
    "CNBC": 0.80,
    "MarketWatch": 0.75,
    "Yahoo Finance": 0.70,
    "Motley Fool": 0.60,
}

DEFAULT_CREDIBILITY: float = 0.50

DEFAULT_MACRO_KEYWORDS: list[str] = [
    "Federal Reserve",
    "Fed",
    "interest rates",
    "inflation",
    "CPI",
    "PPI",
    "jobs report",
    "GDP",
    "Treasury",
    "bond yields",
    "oil",
    "energy",
    "geopolitics",
    "China",
    "Middle East",
    "AI",
    "artificial intelligence",
    "data center",
    "semiconductors",
    "earnings season",
    "guidance",
    "S&P 500",
    "Nasdaq",
    "Dow",
    "volatility",
    "VIX",
    "recession",
    "rate cut",
    "rate hike",
    "Powell",
    "FOMC",
    "tariffs",
    "trade war",
]

# Ordered (bucket, patterns) rules. First bucket with any matching
# pattern wins.
DEFAULT_TOPIC_RULES: list[tuple[str, list[str]]] = [
    (
        "macro_rates",
        [
            r"\bfederal reserve\b",
            r"\bfed\b",
            r"\binterest rates?\b",
            r"\binflation\b",
            r"\bcpi\b",
            r"\bppi\b",
            r"\bpowell\b",
            r"\bfomc\b",
            r"\btreasur(?:y|ies)\b",
            r"\bbonds?\b",
            r"\byields?\b",
        ],
    ),
    (
        "geopolitics_commodities",
        [
            r"\bchina\b",
            r"\brussia\b",
            r"\bmiddle east\b",
            r"\bgeopolit\w*",
            r"\bwars?\b",
            r"\btariffs?\b",
            r"\btrade\b",
            r"\boil\b",
            r"\benergy\b",
            r"\bcommodit\w*",
        ],
    ),
    (
        "tech_ai",
        [
            r"\bai\b",
            r"\bartificial intelligence\b",
            r"\bdata cent(?:er|re)s?\b",
            r"\bsemiconductors?\b",
            r"\bnvidia\b",
            r"\bchips?\b",
            r"\btech\w*",
        ],
    ),
    (
        "market_indices",
        [
            r"\bs&p 500\b",
            r"\bnasdaq\b",
            r"\bdow\b",
            r"\bmarkets?\b",
            r"\bind(?:ex|exes|ices)\b",
            r"\brall(?:y|ies|ied)\b",
            r"\bsell.?offs?\b",
            r"\bvolatility\b",
            r"\bvix\b",
        ],
    ),
    (
        "earnings_micro",
        [
            r"\bearnings\b",
            r"\bguidance\b",
            r"\bquarter\w*",
            r"\brevenues?\b",
            r"\bprofits?\b",
            r"\bforecasts?\b",
        ],
    ),
    (
        "regulatory",
        [
            r"\bsec\b",
            r"\bregulat\w*",
            r"\bantitrust\b",
            r"\blawsuits?\b",
            r"\binvestigations?\b",
        ],
    ),
]

DEFAULT_TOPIC_BUCKET: str = "market_indices"

# Scoring weights
BASE_RELEVANCE_WEIGHT: float = 0.3
RECENCY_WEIGHT: float = 0.3
CREDIBILITY_WEIGHT: float = 0.4
DEFAULT_RELEVANCE: float = 0.5

RECENCY_DECAY_HOURS: float = 24.0
# Ages are capped here so exp() never underflows to 0.0.
MAX_AGE_HOURS: float = 24.0 * 365

MACRO_BOOST_STEP: float = 0.1
MACRO_KEYWORD_CAP: int = 3

DEDUPE_SIMILARITY_THRESHOLD: float = 0.5

SHORTLIST_SIZE: int = 20
MAX_HEADLINES: int = 5

CACHE_FRESHNESS_MINUTES: int = 30
