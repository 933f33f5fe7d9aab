"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Sequence
from datetime import date, timedelta

import pandas as pd
import pytest

from stock_signal.data.cache import BundleCache
from stock_signal.data.models import (
    FinancialData,
    FundamentalsSummary,
    KeyStatistics,
    PricePoint,
    Quote,
    RawNewsItem,
    RecommendationTrend,
    SummaryDetail,
    SummaryProfile,
    SymbolMatch,
)
from stock_signal.data.provider import UpstreamDataError
from stock_signal.data.unified import UnifiedDataService


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """
    In-memory MarketDataProvider.

    Every facet call is counted per symbol. Symbols listed in `failing`
    raise on the history call, so the other three facets still succeed.
    """

    def __init__(
        self,
        quotes: dict[str, Quote] | None = None,
        failing: Sequence[str] = (),
        closes: Sequence[float] | None = None,
        news: Sequence[RawNewsItem] = (),
        summary: FundamentalsSummary | None = None,
        matches: Sequence[SymbolMatch] = (),
    ):
        self.quotes = quotes or {}
        self.failing = set(failing)
        self.closes = list(closes) if closes is not None else [100.0 + (i % 3) for i in range(22)]
        self.raw_news = list(news)
        self.fundamentals = summary or FundamentalsSummary()
        self.matches = list(matches)
        self.calls: dict[str, int] = {}
        self.search_calls = 0

    def _count(self, facet: str, symbol: str) -> None:
        key = f"{facet}:{symbol}"
        self.calls[key] = self.calls.get(key, 0) + 1

    def rounds(self, symbol: str) -> int:
        """Number of fetch rounds observed for symbol (one quote call per round)."""
        return self.calls.get(f"quote:{symbol}", 0)

    async def quote(self, symbol: str) -> Quote:
        self._count("quote", symbol)
        await asyncio.sleep(0)
        return self.quotes.get(
            symbol,
            Quote(symbol=symbol, short_name=f"{symbol} Inc", price=100.0, change_percent=0.5,
                  currency="USD", fifty_two_week_high=150.0, fifty_day_average=100.0),
        )

    async def summary(self, symbol: str, modules: Sequence[str]) -> FundamentalsSummary:
        self._count("summary", symbol)
        await asyncio.sleep(0)
        return self.fundamentals

    async def news(self, symbol: str, count: int) -> list[RawNewsItem]:
        self._count("news", symbol)
        await asyncio.sleep(0)
        return self.raw_news[:count]

    async def history(self, symbol: str, start: date, end: date) -> list[PricePoint]:
        self._count("history", symbol)
        await asyncio.sleep(0)
        if symbol in self.failing:
            raise UpstreamDataError(symbol, "history", "connection reset")
        return [
            PricePoint(date=start + timedelta(days=i), close=c)
            for i, c in enumerate(self.closes)
        ]

    async def search(self, query: str, limit: int) -> list[SymbolMatch]:
        self.search_calls += 1
        return self.matches[:limit]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> BundleCache:
    """Fresh cache per test with a 10 second window and a manual clock."""
    return BundleCache(ttl_seconds=10, clock=clock)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def service(provider: FakeProvider, cache: BundleCache) -> UnifiedDataService:
    return UnifiedDataService(provider=provider, cache=cache)


@pytest.fixture
def neutral_quote() -> Quote:
    """Quote that triggers no momentum, cycle or 50-day adjustments."""
    return Quote(
        symbol="TEST",
        long_name="Test Corp",
        short_name="Test",
        price=100.0,
        change_percent=0.0,
        currency="USD",
        fifty_two_week_high=200.0,
        fifty_day_average=100.0,
    )


@pytest.fixture
def neutral_summary() -> FundamentalsSummary:
    """Fundamentals that land every quality factor in its 0 band and carry no analyst data."""
    return FundamentalsSummary(
        financial_data=FinancialData(
            profit_margins=0.10,
            return_on_equity=0.10,
            revenue_growth=0.05,
            total_revenue=1_000_000.0,
            gross_profits=400_000.0,
        ),
        summary_detail=SummaryDetail(trailing_pe=20.0),
        key_statistics=KeyStatistics(forward_pe=18.0),
        summary_profile=SummaryProfile(
            sector="Technology",
            industry="Software",
            long_business_summary="Test Corp makes software. " * 20,
        ),
    )


@pytest.fixture
def bullish_trend() -> RecommendationTrend:
    return RecommendationTrend(period="0m", strong_buy=10, buy=10, hold=0, underperform=0, sell=0)


@pytest.fixture
def rising_closes() -> list[float]:
    """Fifteen strictly increasing closes (no losses)."""
    return [100.0 + i for i in range(15)]


@pytest.fixture
def sample_history_df() -> pd.DataFrame:
    """Daily Ticker.history() style frame."""
    return pd.DataFrame(
        {
            "Date": pd.date_range("2024-01-01", periods=5, freq="D"),
            "Open": [100.0, 101.0, 102.0, 101.5, 103.0],
            "High": [101.0, 102.5, 103.0, 102.5, 104.5],
            "Low": [99.5, 100.5, 101.0, 100.5, 102.0],
            "Close": [100.5, 102.0, 101.5, 102.0, 104.0],
            "Volume": [1000000] * 5,
        }
    ).set_index("Date")


@pytest.fixture
def make_provider() -> type[FakeProvider]:
    """FakeProvider class, for tests that need custom quotes, news or failures."""
    return FakeProvider
