"""Response metadata and provenance blocks."""

from typing import Any

from stock_signal import SCHEMA_VERSION, SERVER_VERSION

DATA_SOURCE = "yfinance"


def build_meta(tool: str, duration_ms: float | None = None) -> dict[str, Any]:
    """Standard meta block: versions, tool name and elapsed time."""
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
    }
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    return meta


def bundle_provenance(cache_age: float | None, ttl: float) -> dict[str, Any]:
    """
    Provenance for a response served from the bundle cache.

    Args:
        cache_age: Seconds since the bundle was fetched, or None if unknown
        ttl: Freshness window of the cache in seconds

    Returns:
        Dict with the data source, the bundle age and the seconds left
        before it is refetched
    """
    if cache_age is None:
        return {"source": DATA_SOURCE, "cache_age_seconds": None, "expires_in_seconds": None}
    return {
        "source": DATA_SOURCE,
        "cache_age_seconds": round(cache_age, 3),
        "expires_in_seconds": round(max(ttl - cache_age, 0.0), 3),
    }


def build_error_response(error_type: str, message: str, symbol: str | None = None) -> dict[str, Any]:
    """
    Error dict returned in place of a view.

    The message is written by the caller; upstream exception text is never
    passed through.
    """
    response: dict[str, Any] = {
        "error": True,
        "error_type": error_type,
        "message": message,
        "meta": build_meta("error"),
    }
    if symbol is not None:
        response["symbol"] = symbol
    return response


def not_found_response(symbol: str) -> dict[str, Any]:
    """Error response for a symbol whose fetch round failed."""
    return build_error_response("not_found", f"No data available for {symbol}", symbol)
