"""Multi-factor scoring engine.

Turns a quote, fundamentals summary, classified news and an RSI value into a
single score and a categorical verdict. Components are computed
independently and summed without a final clamp:

    quality + analyst + technical + momentum + cycle + news

Where a component can be fed by more than one upstream field (analyst trend
vs recommendation key, trailing vs forward P/E, RSI vs 50-day average), the
candidates are listed in priority order and the first one whose presence
predicate holds is used. The name of the chosen source is recorded in
ScoreBreakdown.sources so callers can see why a score came out the way it
did.

Missing data never raises: an absent input degrades its component to the
documented fallback or to 0.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from stock_signal.data.models import (
    FundamentalsSummary,
    NewsItem,
    Quote,
    RecommendationTrend,
    ScoreBreakdown,
    Sentiment,
    Verdict,
)

T = TypeVar("T")

# Verdict thresholds, evaluated top-down; each bound is inclusive
VERDICT_THRESHOLDS: tuple[tuple[float, Verdict], ...] = (
    (45, Verdict.STRONG_BUY),
    (25, Verdict.BUY),
    (10, Verdict.ACCUMULATE),
    (-10, Verdict.HOLD),
    (-30, Verdict.REDUCE),
)

ANALYST_TREND_WEIGHTS = {
    "strong_buy": 2.5,
    "buy": 1.5,
    "hold": 0.0,
    "underperform": -1.5,
    "sell": -2.5,
}
ANALYST_TREND_SCALE = 8

RECOMMENDATION_KEY_SCORES = {
    "strong_buy": 25,
    "buy": 15,
    "overweight": 10,
    "hold": 0,
    "underweight": -10,
    "sell": -20,
    "strong_sell": -30,
}


@dataclass(frozen=True)
class Source(Generic[T]):
    """A named candidate input for a component, with its presence predicate."""

    name: str
    value: T | None
    present: Callable[[T | None], bool]


def _truthy_number(value: float | None) -> bool:
    """Present if not None, not NaN and non-zero (0 counts as missing upstream)."""
    return value is not None and not math.isnan(value) and value != 0


def _not_none(value: object) -> bool:
    return value is not None


def first_present(sources: Sequence[Source[T]]) -> Source[T] | None:
    """Return the first source whose predicate holds, or None."""
    for source in sources:
        if source.present(source.value):
            return source
    return None


def _or_zero(value: float | None) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return value


# ---------------------------------------------------------------------------
# Quality
# ---------------------------------------------------------------------------


def pe_sources(summary: FundamentalsSummary | None) -> list[Source[float]]:
    """P/E candidates: trailing first, forward as fallback."""
    trailing = summary.summary_detail.trailing_pe if summary and summary.summary_detail else None
    forward = summary.key_statistics.forward_pe if summary and summary.key_statistics else None
    return [
        Source("trailing_pe", trailing, _truthy_number),
        Source("forward_pe", forward, _truthy_number),
    ]


def quality_score(summary: FundamentalsSummary | None) -> tuple[float, str]:
    """
    Business quality: margins, return on equity, growth and valuation.

    The four factors are additive. Without financial data the whole
    component is 0, valuation included.

    Returns:
        Tuple of (score, pe_source_name)
    """
    fin = summary.financial_data if summary else None
    if fin is None:
        return 0.0, "none"

    score = 0.0

    margin = _or_zero(fin.profit_margins)
    if margin > 0.30:
        score += 12
    elif margin > 0.15:
        score += 7
    elif margin < 0.05:
        score -= 10

    roe = _or_zero(fin.return_on_equity)
    if roe > 0.25:
        score += 12
    elif roe > 0.15:
        score += 7
    elif roe < 0.05:
        score -= 5

    growth = _or_zero(fin.revenue_growth)
    if growth > 0.15:
        score += 6
    elif growth < 0:
        score -= 10

    pe_source = first_present(pe_sources(summary))
    pe = pe_source.value if pe_source else 0.0
    if pe > 60:
        score -= 15
    elif pe > 40:
        score -= 5
    elif 0 < pe < 15:
        score += 5

    return score, pe_source.name if pe_source else "none"


# ---------------------------------------------------------------------------
# Analyst consensus
# ---------------------------------------------------------------------------


def _trend_score(trend: RecommendationTrend) -> float:
    weighted = (
        trend.strong_buy * ANALYST_TREND_WEIGHTS["strong_buy"]
        + trend.buy * ANALYST_TREND_WEIGHTS["buy"]
        + trend.hold * ANALYST_TREND_WEIGHTS["hold"]
        + trend.underperform * ANALYST_TREND_WEIGHTS["underperform"]
        + trend.sell * ANALYST_TREND_WEIGHTS["sell"]
    )
    return weighted / trend.respondents * ANALYST_TREND_SCALE


def analyst_score(summary: FundamentalsSummary | None) -> tuple[float, str]:
    """
    Analyst consensus from the latest recommendation trend, else the key.

    Returns:
        Tuple of (score, source_name)
    """
    trend = summary.latest_trend if summary else None
    key = summary.financial_data.recommendation_key if summary and summary.financial_data else None

    source = first_present([
        Source("recommendation_trend", trend, lambda t: t is not None and t.respondents > 0),
        Source("recommendation_key", key, lambda k: bool(k)),
    ])
    if source is None:
        return 0.0, "none"
    if source.name == "recommendation_trend":
        return _trend_score(source.value), source.name
    # Unrecognised keys are neutral
    return float(RECOMMENDATION_KEY_SCORES.get(source.value, 0)), source.name


# ---------------------------------------------------------------------------
# Technicals, momentum and cycle
# ---------------------------------------------------------------------------


def _rsi_bucket(rsi: float) -> float:
    if rsi < 30:
        return 25  # deeply oversold
    if rsi < 45:
        return 8
    if rsi > 80:
        return -30
    if rsi > 70:
        return -20
    if rsi > 60:
        return -10
    return 0


def _ma50_bucket(quote: Quote) -> float:
    if not (_truthy_number(quote.fifty_day_average) and _truthy_number(quote.price)):
        return 0
    diff = (quote.price - quote.fifty_day_average) / quote.fifty_day_average
    if diff > 0.05:
        return 10
    if diff < -0.05:
        return -15
    return 0


def technical_score(quote: Quote, rsi: float | None) -> tuple[float, str]:
    """
    RSI bucket when the indicator is available, else price vs 50-day average.

    Returns:
        Tuple of (score, source_name)
    """
    source = first_present([
        Source("rsi", rsi, _not_none),
        Source("fifty_day_average", quote.fifty_day_average, _truthy_number),
    ])
    if source is None:
        return 0.0, "none"
    if source.name == "rsi":
        return float(_rsi_bucket(source.value)), source.name
    return float(_ma50_bucket(quote)), source.name


def momentum_adjustment(quote: Quote) -> float:
    """Today's move: sharp drops are penalised, strong gains rewarded."""
    change = _or_zero(quote.daily_change_percent)
    if change < -2:
        return -15
    if change < -1:
        return -5
    if change > 2:
        return 5
    return 0


def cycle_adjustment(quote: Quote, summary: FundamentalsSummary | None) -> float:
    """Penalty for trading near the 52-week high, doubled up when P/E is rich."""
    high = quote.fifty_two_week_high
    price = quote.price
    if not (_truthy_number(high) and _truthy_number(price)):
        return 0

    proximity = (high - price) / high
    if proximity < 0.02:
        adjustment = -15.0
        trailing_pe = summary.summary_detail.trailing_pe if summary and summary.summary_detail else None
        if _or_zero(trailing_pe) > 35:
            adjustment -= 10
        return adjustment
    if proximity < 0.05:
        return -5
    return 0


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------


def news_score(news: Sequence[NewsItem]) -> float:
    """
    Headline sentiment balance.

    Negative and positive counts are evaluated in that order and the positive
    assignment replaces the negative one whenever any positive headline exists.
    """
    negative = sum(1 for n in news if n.sentiment is Sentiment.NEGATIVE)
    positive = sum(1 for n in news if n.sentiment is Sentiment.POSITIVE)

    score = 0.0
    if negative >= 2:
        score = -25
    elif negative == 1:
        score = -10

    if positive >= 2:
        score = 15
    elif positive == 1:
        score = 5
    return score


# ---------------------------------------------------------------------------
# Verdict
# ---------------------------------------------------------------------------


def verdict_for_score(score: float) -> Verdict:
    """Bucket a total score into a verdict. NaN is treated as 0."""
    if math.isnan(score):
        score = 0.0
    for threshold, verdict in VERDICT_THRESHOLDS:
        if score >= threshold:
            return verdict
    return Verdict.SELL


def score_signal(
    quote: Quote,
    summary: FundamentalsSummary | None,
    news: Sequence[NewsItem] = (),
    rsi: float | None = None,
) -> ScoreBreakdown:
    """
    Combine every component into a total score and verdict.

    Args:
        quote: Current quote (price, change, 52-week high, 50-day average)
        summary: Fundamentals summary, or None if unavailable
        news: Classified news items
        rsi: RSI value, or None to fall back to the 50-day average

    Returns:
        ScoreBreakdown with each component, the total and the verdict
    """
    quality, pe_source = quality_score(summary)
    analyst, analyst_source = analyst_score(summary)
    technical, technical_source = technical_score(quote, rsi)
    momentum = momentum_adjustment(quote)
    cycle = cycle_adjustment(quote, summary)
    sentiment = news_score(news)

    total = quality + analyst + technical + momentum + cycle + sentiment
    if math.isnan(total):
        total = 0.0

    return ScoreBreakdown(
        quality=quality,
        analyst=analyst,
        technical=technical,
        momentum=momentum,
        cycle=cycle,
        news=sentiment,
        total=total,
        verdict=verdict_for_score(total),
        sources={
            "valuation": pe_source,
            "analyst": analyst_source,
            "technical": technical_source,
        },
    )
