"""Keyword-gated word-list sentiment and topical tag extraction (free, no API calls)."""

from dataclasses import dataclass, field

POSITIVE = "positive"
NEGATIVE = "negative"
MIXED = "mixed"
NEUTRAL = "neutral"

POSITIVE_WORDS = {
    "good", "great", "excellent", "amazing", "awesome",
    "love", "best", "perfect", "fantastic", "wonderful",
}

NEGATIVE_WORDS = {
    "bad", "terrible", "awful", "hate", "worst",
    "horrible", "sucks", "disappointing", "useless", "broken",
}

TOPIC_TAGS = {
    "customer service", "product quality", "pricing", "user experience", "support",
    "features", "performance", "reliability", "innovation", "design",
}


@dataclass
class SentimentResult:
    sentiment: str
    tags: list[str] = field(default_factory=list)


def score_sentiment(text: str, keyword: str) -> str:
    """Classify text as positive/negative/mixed/neutral with respect to keyword.

    Text that does not mention the keyword is neutral without scoring. Word
    hits are plain substring checks, so "greatest" counts as "great".
    """
    text_lower = text.lower()
    if keyword.lower() not in text_lower:
        return NEUTRAL

    positive_count = sum(1 for word in POSITIVE_WORDS if word in text_lower)
    negative_count = sum(1 for word in NEGATIVE_WORDS if word in text_lower)

    if positive_count > negative_count:
        return POSITIVE
    if negative_count > positive_count:
        return NEGATIVE
    if positive_count > 0:
        return MIXED
    return NEUTRAL


def extract_tags(text: str, keyword: str) -> list[str]:
    """The lowercased keyword plus any topic phrases found in the text."""
    text_lower = text.lower()
    tags = [keyword.lower()]
    for topic in sorted(TOPIC_TAGS):
        if topic in text_lower and topic not in tags:
            tags.append(topic)
    return tags


def classify(text: str, keyword: str) -> SentimentResult:
    return SentimentResult(
        sentiment=score_sentiment(text, keyword),
        tags=extract_tags(text, keyword),
    )
