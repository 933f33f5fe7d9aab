"""Utility modules."""

from stock_signal.utils.indicators import calculate_rsi, rsi_signal
from stock_signal.utils.provenance import build_meta, bundle_provenance, not_found_response
from stock_signal.utils.sanitize import excerpt, sanitize_text
from stock_signal.utils.validators import HistoryRange, normalize_symbol

__all__ = [
    "calculate_rsi",
    "rsi_signal",
    "build_meta",
    "bundle_provenance",
    "not_found_response",
    "excerpt",
    "sanitize_text",
    "HistoryRange",
    "normalize_symbol",
]
