"""Async yfinance provider with bounded concurrency and singleflight info fetches."""

import asyncio
import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, TypeVar

import pandas as pd
import yfinance as yf

from stock_signal.data.models import (
    SUMMARY_MODULES,
    FundamentalsSummary,
    PricePoint,
    Quote,
    RawNewsItem,
    SymbolMatch,
)
from stock_signal.data.provider import UpstreamDataError
from stock_signal.utils.ohlcv import history_to_points
from stock_signal.utils.sanitize import sanitize_text
from stock_signal.utils.validators import HistoryRange, normalize_symbol

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_WORKERS = int(os.environ.get("YF_MAX_WORKERS", "4"))


class ServerShuttingDownError(Exception):
    """Raised when a fetch is attempted after shutdown."""

    pass


def _trend_rows(recommendations: Any) -> list[dict[str, Any]]:
    """Recommendation-trend rows from Ticker.recommendations, most recent first."""
    if recommendations is None:
        return []
    if isinstance(recommendations, pd.DataFrame):
        if recommendations.empty:
            return []
        return recommendations.reset_index(drop=True).to_dict("records")
    if isinstance(recommendations, list):
        return [row for row in recommendations if isinstance(row, dict)]
    return []


class YFinanceProvider:
    """
    Yahoo Finance provider backed by yfinance.

    yfinance is synchronous, so every call runs on a private thread pool and
    is gated by a semaphore of the same size. The quote and the fundamentals
    summary are both read from Ticker.info; concurrent info requests for one
    symbol share a single in-flight task.
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS):
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._semaphore = asyncio.Semaphore(max_workers)
        self._info_inflight: dict[str, asyncio.Task[dict[str, Any]]] = {}
        self._closed = False

    async def _run(self, operation_name: str, sync_func: Callable[[], T]) -> T:
        if self._closed:
            raise ServerShuttingDownError("Server is shutting down")
        async with self._semaphore:
            loop = asyncio.get_running_loop()
            logger.debug(f"{operation_name}: dispatching")
            return await loop.run_in_executor(self._executor, sync_func)

    async def _fetch_info_raw(self, symbol: str) -> dict[str, Any]:
        def _fetch() -> dict[str, Any]:
            info = yf.Ticker(symbol).info
            if not info:
                raise UpstreamDataError(symbol, "info", "empty response")
            return info

        return await self._run(f"fetch_info({symbol})", _fetch)

    async def _info(self, symbol: str) -> dict[str, Any]:
        """
        Fetch Ticker.info with singleflight deduplication.

        Joiners are shielded so a cancelled waiter does not cancel the
        shared fetch. The entry is removed only if it is still this task.
        """
        task = self._info_inflight.get(symbol)
        joined = task is not None
        if task is None:
            task = asyncio.create_task(self._fetch_info_raw(symbol))
            self._info_inflight[symbol] = task
        else:
            logger.debug(f"fetch_info({symbol}): joining existing singleflight")

        try:
            if joined:
                return await asyncio.shield(task)
            return await task
        finally:
            if task.done() and self._info_inflight.get(symbol) is task:
                self._info_inflight.pop(symbol, None)

    async def quote(self, symbol: str) -> Quote:
        symbol = normalize_symbol(symbol)
        info = await self._info(symbol)
        quote = Quote.from_payload(symbol, info)
        if quote.price is None and quote.long_name is None and quote.short_name is None:
            raise UpstreamDataError(symbol, "quote", "no price or name in response")
        return quote

    async def summary(
        self,
        symbol: str,
        modules: Sequence[str] = SUMMARY_MODULES,
    ) -> FundamentalsSummary:
        symbol = normalize_symbol(symbol)
        unknown = set(modules) - set(SUMMARY_MODULES)
        if unknown:
            raise ValueError(f"Unsupported summary modules: {sorted(unknown)}")

        def _recommendations() -> list[dict[str, Any]]:
            return _trend_rows(yf.Ticker(symbol).recommendations)

        if "recommendationTrend" in modules:
            info, trend = await asyncio.gather(
                self._info(symbol),
                self._run(f"fetch_recommendations({symbol})", _recommendations),
            )
        else:
            info, trend = await self._info(symbol), []

        # Info flattens every module; blank out the ones not requested
        decoded = FundamentalsSummary.from_payload(info, trend)
        return FundamentalsSummary(
            recommendation_trend=decoded.recommendation_trend,
            financial_data=decoded.financial_data if "financialData" in modules else None,
            key_statistics=decoded.key_statistics if "defaultKeyStatistics" in modules else None,
            summary_detail=decoded.summary_detail if "summaryDetail" in modules else None,
            summary_profile=decoded.summary_profile if "summaryProfile" in modules else None,
        )

    async def news(self, symbol: str, count: int = 5) -> list[RawNewsItem]:
        symbol = normalize_symbol(symbol)

        def _fetch() -> list[RawNewsItem]:
            search = yf.Search(symbol, max_results=0, news_count=count)
            items = search.news or []
            return [
                RawNewsItem.from_payload(item)
                for item in items[:count]
                if isinstance(item, dict)
            ]

        return await self._run(f"fetch_news({symbol})", _fetch)

    async def history(self, symbol: str, start: date, end: date) -> list[PricePoint]:
        window = HistoryRange(symbol=symbol, start=start, end=end)

        def _fetch() -> list[PricePoint]:
            df = yf.Ticker(window.symbol).history(**window.to_yf_kwargs())
            return history_to_points(df)

        return await self._run(f"fetch_history({window.symbol})", _fetch)

    async def search(self, query: str, limit: int = 5) -> list[SymbolMatch]:
        def _fetch() -> list[SymbolMatch]:
            search = yf.Search(query, max_results=limit, news_count=0)
            matches = []
            for quote in search.quotes[:limit]:
                # Drop non-Yahoo results (e.g. crypto aggregator entries)
                if not quote.get("isYahooFinance"):
                    continue
                symbol = quote.get("symbol")
                if not symbol:
                    continue
                matches.append(
                    SymbolMatch(
                        symbol=symbol,
                        name=sanitize_text(
                            quote.get("shortname") or quote.get("longname") or symbol
                        ),
                        exchange=quote.get("exchDisp"),
                    )
                )
            return matches

        return await self._run(f"search({query!r})", _fetch)

    async def shutdown(self) -> None:
        """Cleanup on server shutdown."""
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
