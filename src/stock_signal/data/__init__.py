"""Data layer: typed upstream models, the bundle cache and the unified pipeline.

The yfinance provider lives in stock_signal.data.yfinance_client and is
imported explicitly by the server.
"""

from stock_signal.data.cache import BundleCache, CacheEntry
from stock_signal.data.models import (
    SUMMARY_MODULES,
    FundamentalsSummary,
    NewsItem,
    PricePoint,
    Quote,
    RawNewsItem,
    ScoreBreakdown,
    Sentiment,
    SymbolMatch,
    UnifiedBundle,
    Verdict,
)
from stock_signal.data.provider import MarketDataProvider, UpstreamDataError

__all__ = [
    # Cache
    "BundleCache",
    "CacheEntry",
    # Models
    "SUMMARY_MODULES",
    "FundamentalsSummary",
    "NewsItem",
    "PricePoint",
    "Quote",
    "RawNewsItem",
    "ScoreBreakdown",
    "Sentiment",
    "SymbolMatch",
    "UnifiedBundle",
    "Verdict",
    # Provider interface
    "MarketDataProvider",
    "UpstreamDataError",
]
