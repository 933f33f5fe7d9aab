"""Headline sentiment classification."""

from collections.abc import Iterable

from stock_signal.data.models import NewsItem, RawNewsItem, Sentiment

# Checked in order; a title matching both sets is positive.
# "buy"/"sell" are deliberately absent so headlines do not echo the verdict.
POSITIVE_KEYWORDS = ("growth", "beat", "record", "up", "jump", "surge", "optimistic")
NEGATIVE_KEYWORDS = ("miss", "down", "fall", "risk", "drop", "plunge", "bearish")


def classify_title(title: str | None) -> Sentiment:
    """Keyword sentiment of a single headline (substring match, case-insensitive)."""
    text = (title or "").lower()
    if any(word in text for word in POSITIVE_KEYWORDS):
        return Sentiment.POSITIVE
    if any(word in text for word in NEGATIVE_KEYWORDS):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def classify_news(items: Iterable[RawNewsItem]) -> tuple[NewsItem, ...]:
    """
    Sort headlines by title and tag each with a sentiment.

    Sorting first makes the result independent of the order the provider
    returned the articles in.

    Args:
        items: Raw news items in provider order

    Returns:
        Classified items, ordered by title (case-sensitive)
    """
    ordered = sorted(items, key=lambda n: n.title or "")
    return tuple(
        NewsItem(
            title=n.title,
            link=n.link,
            publisher=n.publisher,
            sentiment=classify_title(n.title),
        )
        for n in ordered
    )
