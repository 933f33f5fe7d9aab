"""Unified per-symbol data pipeline.

The overview and detail views of a symbol must agree, so both read the same
cached bundle: one fetch round (quote, fundamentals summary, news, daily
history), then news classification, RSI and scoring, stored as a single
immutable unit.
"""

import asyncio
import logging
from collections.abc import Iterable

from stock_signal.data.cache import BundleCache, CacheEntry
from stock_signal.data.models import SUMMARY_MODULES, SymbolMatch, UnifiedBundle
from stock_signal.data.provider import MarketDataProvider
from stock_signal.tools.news import classify_news
from stock_signal.tools.scoring import score_signal
from stock_signal.utils.indicators import RSI_WINDOW, calculate_rsi
from stock_signal.utils.validators import HISTORY_LOOKBACK_DAYS, HistoryRange

logger = logging.getLogger(__name__)

NEWS_COUNT = 5
MIN_SEARCH_QUERY_LENGTH = 2
SEARCH_LIMIT = 5


class UnifiedDataService:
    """
    Fetch-and-score pipeline backed by a BundleCache.

    Construct once per process with a provider and a cache; both are
    injected so tests can supply fakes and a fresh cache.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache: BundleCache | None = None,
        news_count: int = NEWS_COUNT,
        history_days: int = HISTORY_LOOKBACK_DAYS,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else BundleCache()
        self.news_count = news_count
        self.history_days = history_days

    async def fetch_bundle(self, symbol: str) -> UnifiedBundle | None:
        """
        Run one full fetch round for symbol, bypassing the cache.

        The four upstream calls run concurrently and are joined before any
        scoring, so a bundle never mixes facets from different rounds. Any
        failure aborts the round and yields None; partial results are
        discarded.
        """
        window = HistoryRange.trailing(symbol, days=self.history_days)
        try:
            quote, summary, raw_news, history = await asyncio.gather(
                self.provider.quote(window.symbol),
                self.provider.summary(window.symbol, SUMMARY_MODULES),
                self.provider.news(window.symbol, self.news_count),
                self.provider.history(window.symbol, window.start, window.end),
            )
        except Exception as e:
            logger.warning(f"bundle({window.symbol}): fetch failed ({type(e).__name__}: {e})")
            return None

        news = classify_news(raw_news)
        closes = [point.close for point in history]
        rsi = calculate_rsi(closes[-RSI_WINDOW:])
        score = score_signal(quote, summary, news, rsi)

        logger.debug(
            f"bundle({window.symbol}): score={score.total:.2f} verdict={score.verdict.value} "
            f"rsi={rsi:.1f} news={len(news)} history={len(history)}"
        )
        return UnifiedBundle(
            symbol=window.symbol,
            quote=quote,
            summary=summary,
            news=news,
            history=tuple(history),
            rsi=rsi,
            score=score,
        )

    async def get_bundle(self, symbol: str) -> UnifiedBundle | None:
        """Cached bundle for symbol; None if it could not be fetched."""
        return await self.cache.get_or_fetch(symbol, self.fetch_bundle)

    async def get_entry(self, symbol: str) -> CacheEntry | None:
        """Cache entry (bundle plus fetch time) for symbol; None if it could not be fetched."""
        return await self.cache.entry_or_fetch(symbol, self.fetch_bundle)

    async def overview(self, symbols: Iterable[str]) -> list[tuple[str, UnifiedBundle]]:
        """
        Bundles for many symbols, fetched concurrently.

        Symbols that fail are dropped; survivors keep input order and are
        paired with the symbol as the caller spelled it.
        """
        symbols = list(symbols)
        bundles = await asyncio.gather(*(self.get_bundle(s) for s in symbols))
        dropped = [s for s, b in zip(symbols, bundles) if b is None]
        if dropped:
            logger.info(f"overview: {len(dropped)}/{len(symbols)} symbols unavailable: {dropped}")
        return [(s, b) for s, b in zip(symbols, bundles) if b is not None]

    async def search(self, query: str) -> list[SymbolMatch]:
        """Symbol suggestions; empty for short queries or on provider errors."""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_QUERY_LENGTH:
            return []
        try:
            return await self.provider.search(query, SEARCH_LIMIT)
        except Exception as e:
            logger.warning(f"search({query!r}): failed ({type(e).__name__}: {e})")
            return []
