"""Symbol search tool."""

from time import perf_counter
from typing import TYPE_CHECKING, Any

from stock_signal.utils.provenance import build_meta
from stock_signal.utils.validators import normalize_symbol

if TYPE_CHECKING:
    from stock_signal.data.unified import UnifiedDataService


async def symbol_search(service: "UnifiedDataService", query: str) -> dict[str, Any]:
    """
    Search for stock symbols by company name or ticker.

    Queries shorter than two characters return no results.

    Args:
        service: Unified data service
        query: Search query (company name or ticker)

    Returns:
        Dict with search results and exact match info
    """
    start_time = perf_counter()

    matches = await service.search(query)
    results = [
        {"symbol": m.symbol, "name": m.name, "exchange": m.exchange}
        for m in matches
    ]

    # First result is not always the exact ticker
    normalized_query = normalize_symbol(query or "")
    exact_match = next(
        (r["symbol"] for r in results if r["symbol"] == normalized_query),
        None,
    )

    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("symbol_search", duration_ms),
        "query": query,
        "results": results,
        "exact_match": exact_match,
    }
