"""Multi-symbol market overview."""

import os
from collections.abc import Sequence
from time import perf_counter
from typing import TYPE_CHECKING, Any

from stock_signal.data.models import UnifiedBundle
from stock_signal.utils.provenance import build_meta
from stock_signal.utils.sanitize import sanitize_text

if TYPE_CHECKING:
    from stock_signal.data.unified import UnifiedDataService

DEFAULT_UNIVERSE: tuple[str, ...] = (
    # US tech
    "AAPL", "NVDA", "TSLA", "MSFT", "GOOGL", "AMZN", "META", "AMD", "AVGO", "NFLX",
    # Hong Kong
    "0700.HK", "9988.HK", "3690.HK", "1810.HK", "1024.HK", "9618.HK", "9888.HK", "0388.HK",
    "0941.HK", "1211.HK", "2318.HK", "1398.HK", "0939.HK", "3968.HK", "2269.HK", "0005.HK",
    # Mainland China A-shares
    "600519.SS", "300750.SZ", "000858.SZ", "601318.SS", "600036.SS", "002594.SZ",
    "600900.SS", "601012.SS", "000001.SZ", "601857.SS",
    # Global
    "V", "MA", "DIS", "NKE", "CRM", "ORCL", "ASML", "TSM",
)


def configured_universe() -> tuple[str, ...]:
    """Overview universe from SIGNAL_UNIVERSE (comma-separated), else the default."""
    raw = os.environ.get("SIGNAL_UNIVERSE", "")
    symbols = tuple(s.strip() for s in raw.split(",") if s.strip())
    return symbols or DEFAULT_UNIVERSE


def build_overview_entry(symbol: str, bundle: UnifiedBundle) -> dict[str, Any]:
    """Compact overview row: quote headline plus the verdict as strategy."""
    quote = bundle.quote
    return {
        "symbol": symbol,
        "name": sanitize_text(quote.short_name or quote.long_name or symbol),
        "price": quote.price,
        "change_percent": quote.change_percent,
        "currency": quote.currency,
        "strategy": bundle.verdict.value,
    }


async def market_overview(
    service: "UnifiedDataService",
    symbols: Sequence[str] | None = None,
) -> dict[str, Any]:
    """
    Overview rows for a symbol universe.

    Symbols that cannot be fetched are left out entirely; the remaining rows
    keep the order of the input universe.

    Args:
        service: Unified data service
        symbols: Universe to scan (default: configured universe)

    Returns:
        Dict with meta, requested/returned counts and the overview rows
    """
    start_time = perf_counter()
    universe = list(symbols) if symbols is not None else list(configured_universe())

    pairs = await service.overview(universe)
    rows = [build_overview_entry(symbol, bundle) for symbol, bundle in pairs]

    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("market_overview", duration_ms),
        "requested": len(universe),
        "returned": len(rows),
        "stocks": rows,
    }
