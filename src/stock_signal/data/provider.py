"""Interface the aggregation layer expects from an upstream data provider."""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from stock_signal.data.models import (
    FundamentalsSummary,
    PricePoint,
    Quote,
    RawNewsItem,
    SymbolMatch,
)


class UpstreamDataError(Exception):
    """Raised when a provider call fails or returns an unusable payload."""

    def __init__(self, symbol: str, facet: str, message: str):
        super().__init__(f"{facet}({symbol}): {message}")
        self.symbol = symbol
        self.facet = facet


class MarketDataProvider(Protocol):
    """
    Black-box financial data client, addressable by symbol.

    Implementations decode provider payloads into the typed models and raise
    on failure; they never retry.
    """

    async def quote(self, symbol: str) -> Quote: ...

    async def summary(self, symbol: str, modules: Sequence[str]) -> FundamentalsSummary: ...

    async def news(self, symbol: str, count: int) -> list[RawNewsItem]: ...

    async def history(self, symbol: str, start: date, end: date) -> list[PricePoint]: ...

    async def search(self, query: str, limit: int) -> list[SymbolMatch]: ...
