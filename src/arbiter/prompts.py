"""Prompt templates for model arbitration of market headlines."""

from src.config.constants import MAX_HEADLINES
from src.ranker.models import ScoredCandidate


_SYSTEM_TEMPLATE = """You are a financial news curator for an institutional investor dashboard.

Your task: Select the TOP {max_headlines} most important market-wide headlines from the provided candidate articles.

CRITICAL RULES:
1. GROUNDING: Only use information explicitly stated in the candidate articles. Do NOT invent, infer, or add external knowledge.
2. DIVERSITY: Ensure topical diversity across macro/rates, geopolitics/commodities, tech/AI, market indices, earnings, and regulatory news.
3. RELEVANCE: Prioritize articles that matter to portfolio managers and institutional investors.
4. CITATION: Reference articles by their index number ({index_range}). Each headline must map to exactly ONE candidate article, and no article may be cited twice.
5. "WHY IT MATTERS": Write 1-2 sentences explaining market impact, grounded in the article's content.
6. NO MARKDOWN: Output pure JSON only, no code fences or formatting.
7. REFUSAL: If fewer than {max_headlines} quality articles exist, return fewer items. Do not fabricate.

OUTPUT SCHEMA (strict JSON):
{{
  "headlines": [
    {{
      "article_index": 0,
      "title": "exact or lightly edited title from the candidate",
      "source": "exact source from the candidate",
      "url": "exact url from the candidate",
      "published_at": "exact timestamp from the candidate",
      "why_it_matters": "1-2 sentence explanation grounded in the article",
      "confidence": 0.95
    }}
  ],
  "reasoning": "brief explanation of the overall selection"
}}"""

_CANDIDATE_TEMPLATE = """[{index}] Title: {title}
Source: {source}
Published: {published_at}
URL: {url}
Summary: {summary}
Score: {score:.3f} (recency: {recency:.2f}, credibility: {credibility:.2f}, macro boost: {macro_boost:.1f})
Topic: {topic}"""

_USER_TEMPLATE = """CANDIDATE ARTICLES ({count} total):

{candidates}

Select the TOP {max_headlines} headlines that provide the most comprehensive view of today's market. Prioritize:
- Federal Reserve / interest rates / inflation news
- Major geopolitical and commodity developments
- Significant tech/AI infrastructure moves
- Broad market index movements
- Systemic earnings/guidance stories

Output pure JSON following the schema. No markdown, no code fences."""


def build_system_instruction(
    shortlist_size: int,
    max_headlines: int = MAX_HEADLINES,
) -> str:
    """Build the system instruction for a shortlist of a given size.

    Args:
        shortlist_size: Number of enumerated candidates.
        max_headlines: Number of headlines to request.

    Returns:
        System instruction text.
    """
    index_range = "0" if shortlist_size <= 1 else f"0-{shortlist_size - 1}"
    return _SYSTEM_TEMPLATE.format(
        max_headlines=max_headlines,
        index_range=index_range,
    )


def format_candidate(index: int, candidate: ScoredCandidate) -> str:
    """Render one shortlist entry with its zero-based index.

    Args:
        index: Position in the shortlist.
        candidate: Scored candidate.

    Returns:
        Candidate block text.
    """
    return _CANDIDATE_TEMPLATE.format(
        index=index,
        title=candidate.title,
        source=candidate.source_label,
        published_at=candidate.published_at or "unknown",
        url=candidate.url,
        summary=candidate.summary or "N/A",
        score=candidate.score,
        recency=candidate.recency_score,
        credibility=candidate.credibility_score,
        macro_boost=candidate.macro_boost,
        topic=candidate.topic_bucket.value,
    )


def build_user_prompt(
    shortlist: list[ScoredCandidate],
    max_headlines: int = MAX_HEADLINES,
) -> str:
    """Build the user prompt enumerating the shortlist.

    Args:
        shortlist: Candidates in the order their indices refer to.
        max_headlines: Number of headlines to request.

    Returns:
        User prompt text.
    """
    blocks = [format_candidate(idx, c) for idx, c in enumerate(shortlist)]
    return _USER_TEMPLATE.format(
        count=len(shortlist),
        candidates="\n---\n".join(blocks),
        max_headlines=max_headlines,
    )
