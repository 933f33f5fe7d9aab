"""Stock signal tools: classifiers, scoring and the read views."""

from stock_signal.tools.detail import build_stock_detail, stock_detail
from stock_signal.tools.news import classify_news, classify_title
from stock_signal.tools.overview import (
    DEFAULT_UNIVERSE,
    build_overview_entry,
    configured_universe,
    market_overview,
)
from stock_signal.tools.scoring import score_signal, verdict_for_score
from stock_signal.tools.symbol_search import symbol_search

__all__ = [
    "DEFAULT_UNIVERSE",
    "build_overview_entry",
    "build_stock_detail",
    "classify_news",
    "classify_title",
    "configured_universe",
    "market_overview",
    "score_signal",
    "stock_detail",
    "symbol_search",
    "verdict_for_score",
]
