"""Per-symbol detail view."""

from time import perf_counter
from typing import TYPE_CHECKING, Any

from stock_signal.data.models import UnifiedBundle
from stock_signal.utils.indicators import rsi_signal
from stock_signal.utils.provenance import build_meta, bundle_provenance, not_found_response
from stock_signal.utils.sanitize import excerpt, sanitize_text
from stock_signal.utils.validators import normalize_symbol

if TYPE_CHECKING:
    from stock_signal.data.unified import UnifiedDataService

DESCRIPTION_LENGTH = 150


def build_stock_detail(bundle: UnifiedBundle) -> dict[str, Any]:
    """
    Project a bundle onto the detail read shape.

    Args:
        bundle: Cached bundle for one symbol

    Returns:
        Dict with quote, industry, financials, news, market and verdict
    """
    quote = bundle.quote
    summary = bundle.summary
    profile = summary.summary_profile
    fin = summary.financial_data
    detail_pe = summary.summary_detail.trailing_pe if summary.summary_detail else None
    change = quote.change_percent or 0
    verdict = bundle.verdict.value

    sector = (profile.sector if profile else None) or "Unknown"
    industry = (profile.industry if profile else None) or "Unknown"

    return {
        "symbol": quote.symbol,
        "name": sanitize_text(quote.long_name or quote.short_name or bundle.symbol),
        "price": quote.price or 0,
        "change_percent": change,
        "currency": quote.currency,
        "industry": {
            "name": f"{sector} - {industry}",
            "description": excerpt(
                profile.long_business_summary if profile else None,
                DESCRIPTION_LENGTH,
            ),
            "trend": "up" if change > 0 else "down",
        },
        "financials": {
            "revenue": (fin.total_revenue if fin else None) or 0,
            "gross_profit": (fin.gross_profits if fin else None) or 0,
            "pe_ratio": detail_pe or 0,
            "recommendation": verdict,
        },
        "news": [
            {
                "title": n.title,
                "link": n.link,
                "publisher": n.publisher,
                "sentiment": n.sentiment.value,
            }
            for n in bundle.news
        ],
        "market": {
            "history": [
                {"date": p.date.isoformat(), "close": p.close} for p in bundle.history
            ],
            "signal": rsi_signal(bundle.rsi),
            "rsi": bundle.rsi,
        },
        "score": {
            "total": round(bundle.score.total, 2),
            "components": {
                "quality": bundle.score.quality,
                "analyst": round(bundle.score.analyst, 2),
                "technical": bundle.score.technical,
                "momentum": bundle.score.momentum,
                "cycle": bundle.score.cycle,
                "news": bundle.score.news,
            },
            "sources": dict(bundle.score.sources),
        },
        "verdict": verdict,
    }


async def stock_detail(service: "UnifiedDataService", symbol: str) -> dict[str, Any]:
    """
    Detail view for one symbol, served from the shared bundle cache.

    Args:
        service: Unified data service
        symbol: Stock ticker symbol

    Returns:
        Detail dict, or a not_found error response if the symbol could not
        be fetched
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol)

    entry = await service.get_entry(normalized_symbol)
    if entry is None:
        return not_found_response(normalized_symbol)

    bundle = entry.bundle
    cache_age = service.cache.age(entry)
    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("stock_detail", duration_ms),
        "data_provenance": {
            "bundle": bundle_provenance(cache_age, service.cache.ttl),
        },
        **build_stock_detail(bundle),
    }
