"""Typed upstream payloads and the cached per-symbol bundle.

Every upstream module is decoded once, at the fetch boundary, into a frozen
dataclass. All fields are optional: missing or NaN numerics become None and
missing analyst counts become 0, so downstream scoring never has to guess
what shape a provider response had.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from stock_signal.utils.sanitize import sanitize_text

# Modules requested from the fundamentals/summary lookup
SUMMARY_MODULES: tuple[str, ...] = (
    "recommendationTrend",
    "financialData",
    "defaultKeyStatistics",
    "summaryDetail",
    "summaryProfile",
)


def _has_value(v: Any) -> bool:
    """
    Check if a value is truly present (not None, NaN, or empty string).

    yfinance often uses float("nan") for missing numerics, which passes
    `is not None` but should be treated as missing.
    """
    if v is None:
        return False
    if isinstance(v, float) and math.isnan(v):
        return False
    if isinstance(v, str) and v.strip() == "":
        return False
    return True


def _float(payload: dict[str, Any], key: str) -> float | None:
    value = payload.get(key)
    if not _has_value(value):
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    return None if math.isnan(result) else result


def _count(payload: dict[str, Any], key: str) -> int:
    value = _float(payload, key)
    return int(value) if value is not None else 0


def _text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if not _has_value(value):
        return None
    return str(value)


def _any_present(payload: dict[str, Any], keys: tuple[str, ...]) -> bool:
    return any(_has_value(payload.get(k)) for k in keys)


class Sentiment(str, Enum):
    """Headline sentiment derived by the news classifier."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Verdict(str, Enum):
    """Categorical output of the scoring engine, strongest first."""

    STRONG_BUY = "STRONG BUY"
    BUY = "BUY"
    ACCUMULATE = "ACCUMULATE"
    HOLD = "HOLD"
    REDUCE = "REDUCE"
    SELL = "SELL"


@dataclass(frozen=True)
class Quote:
    """Current quote snapshot."""

    symbol: str
    long_name: str | None = None
    short_name: str | None = None
    price: float | None = None
    change_percent: float | None = None
    currency: str | None = None
    fifty_two_week_high: float | None = None
    fifty_day_average: float | None = None

    @property
    def daily_change_percent(self) -> float | None:
        """Same upstream field as change_percent (regularMarketChangePercent)."""
        return self.change_percent

    @classmethod
    def from_payload(cls, symbol: str, payload: dict[str, Any]) -> "Quote":
        price = _float(payload, "regularMarketPrice")
        if price is None:
            price = _float(payload, "currentPrice")
        return cls(
            symbol=_text(payload, "symbol") or symbol,
            long_name=_text(payload, "longName"),
            short_name=_text(payload, "shortName"),
            price=price,
            change_percent=_float(payload, "regularMarketChangePercent"),
            currency=_text(payload, "currency"),
            fifty_two_week_high=_float(payload, "fiftyTwoWeekHigh"),
            fifty_day_average=_float(payload, "fiftyDayAverage"),
        )


@dataclass(frozen=True)
class RecommendationTrend:
    """Analyst rating counts for one period (most recent first upstream)."""

    period: str | None = None
    strong_buy: int = 0
    buy: int = 0
    hold: int = 0
    underperform: int = 0
    sell: int = 0
    strong_sell: int = 0

    @property
    def respondents(self) -> int:
        """Respondents across the five weighted buckets."""
        return self.strong_buy + self.buy + self.hold + self.underperform + self.sell

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RecommendationTrend":
        return cls(
            period=_text(payload, "period"),
            strong_buy=_count(payload, "strongBuy"),
            buy=_count(payload, "buy"),
            hold=_count(payload, "hold"),
            underperform=_count(payload, "underperform"),
            sell=_count(payload, "sell"),
            strong_sell=_count(payload, "strongSell"),
        )


@dataclass(frozen=True)
class FinancialData:
    profit_margins: float | None = None
    return_on_equity: float | None = None
    revenue_growth: float | None = None
    recommendation_key: str | None = None
    total_revenue: float | None = None
    gross_profits: float | None = None

    FIELDS = (
        "profitMargins",
        "returnOnEquity",
        "revenueGrowth",
        "recommendationKey",
        "totalRevenue",
        "grossProfits",
    )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "FinancialData | None":
        if not _any_present(payload, cls.FIELDS):
            return None
        return cls(
            profit_margins=_float(payload, "profitMargins"),
            return_on_equity=_float(payload, "returnOnEquity"),
            revenue_growth=_float(payload, "revenueGrowth"),
            recommendation_key=_text(payload, "recommendationKey"),
            total_revenue=_float(payload, "totalRevenue"),
            gross_profits=_float(payload, "grossProfits"),
        )


@dataclass(frozen=True)
class KeyStatistics:
    forward_pe: float | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "KeyStatistics | None":
        if not _any_present(payload, ("forwardPE",)):
            return None
        return cls(forward_pe=_float(payload, "forwardPE"))


@dataclass(frozen=True)
class SummaryDetail:
    trailing_pe: float | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SummaryDetail | None":
        if not _any_present(payload, ("trailingPE",)):
            return None
        return cls(trailing_pe=_float(payload, "trailingPE"))


@dataclass(frozen=True)
class SummaryProfile:
    sector: str | None = None
    industry: str | None = None
    long_business_summary: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SummaryProfile | None":
        if not _any_present(payload, ("sector", "industry", "longBusinessSummary")):
            return None
        return cls(
            sector=_text(payload, "sector"),
            industry=_text(payload, "industry"),
            long_business_summary=_text(payload, "longBusinessSummary"),
        )


@dataclass(frozen=True)
class FundamentalsSummary:
    """Scoped fundamentals lookup: one optional attribute per upstream module."""

    recommendation_trend: tuple[RecommendationTrend, ...] = ()
    financial_data: FinancialData | None = None
    key_statistics: KeyStatistics | None = None
    summary_detail: SummaryDetail | None = None
    summary_profile: SummaryProfile | None = None

    @property
    def latest_trend(self) -> RecommendationTrend | None:
        return self.recommendation_trend[0] if self.recommendation_trend else None

    @classmethod
    def from_payload(
        cls,
        info: dict[str, Any],
        trend_rows: list[dict[str, Any]] | None = None,
    ) -> "FundamentalsSummary":
        """
        Decode a flattened info payload plus recommendation-trend rows.

        Args:
            info: Flat dict carrying financialData, defaultKeyStatistics,
                summaryDetail and summaryProfile fields
            trend_rows: Recommendation-trend rows, most recent period first

        Returns:
            Decoded summary; absent modules are None
        """
        return cls(
            recommendation_trend=tuple(
                RecommendationTrend.from_payload(row) for row in (trend_rows or [])
            ),
            financial_data=FinancialData.from_payload(info),
            key_statistics=KeyStatistics.from_payload(info),
            summary_detail=SummaryDetail.from_payload(info),
            summary_profile=SummaryProfile.from_payload(info),
        )


@dataclass(frozen=True)
class PricePoint:
    date: date
    close: float


@dataclass(frozen=True)
class RawNewsItem:
    """News article as returned by the provider, before classification."""

    title: str | None
    link: str | None = None
    publisher: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RawNewsItem":
        return cls(
            title=sanitize_text(_text(payload, "title"), max_length=300),
            link=_text(payload, "link"),
            publisher=sanitize_text(_text(payload, "publisher"), max_length=50),
        )


@dataclass(frozen=True)
class NewsItem:
    title: str | None
    link: str | None
    publisher: str | None
    sentiment: Sentiment


@dataclass(frozen=True)
class SymbolMatch:
    symbol: str
    name: str
    exchange: str | None = None


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-component contributions behind a verdict."""

    quality: float
    analyst: float
    technical: float
    momentum: float
    cycle: float
    news: float
    total: float
    verdict: Verdict
    # Component name -> name of the data source that fed it (or "none")
    sources: dict[str, str] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class UnifiedBundle:
    """Everything fetched and derived for one symbol in one fetch round."""

    symbol: str
    quote: Quote
    summary: FundamentalsSummary
    news: tuple[NewsItem, ...]
    history: tuple[PricePoint, ...]
    rsi: float
    score: ScoreBreakdown

    @property
    def verdict(self) -> Verdict:
        return self.score.verdict
