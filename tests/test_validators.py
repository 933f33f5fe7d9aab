"""Tests for validators."""

from datetime import date

import pytest

from stock_signal.utils.validators import (
    HISTORY_LOOKBACK_DAYS,
    HistoryRange,
    normalize_symbol,
)


class TestNormalizeSymbol:
    """Tests for symbol normalization."""

    def test_uppercases_and_strips(self) -> None:
        assert normalize_symbol("  aapl ") == "AAPL"

    def test_keeps_exchange_suffix(self) -> None:
        assert normalize_symbol("0700.hk") == "0700.HK"


class TestHistoryRange:
    """Tests for HistoryRange."""

    def test_trailing_window_is_thirty_days(self) -> None:
        """Default window spans the 30-day look-back ending today."""
        window = HistoryRange.trailing("msft", today=date(2024, 3, 31))
        assert window.symbol == "MSFT"
        assert window.start == date(2024, 3, 1)
        assert window.end == date(2024, 3, 31)
        assert (window.end - window.start).days == HISTORY_LOOKBACK_DAYS

    def test_trailing_defaults_to_today(self) -> None:
        window = HistoryRange.trailing("AAPL")
        assert (window.end - window.start).days == HISTORY_LOOKBACK_DAYS

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid range"):
            HistoryRange(symbol="AAPL", start=date(2024, 2, 1), end=date(2024, 1, 1))

    def test_to_yf_kwargs(self) -> None:
        window = HistoryRange(symbol="AAPL", start=date(2024, 1, 1), end=date(2024, 1, 31))
        assert window.to_yf_kwargs() == {
            "start": "2024-01-01",
            "end": "2024-01-31",
            "interval": "1d",
        }

    def test_frozen(self) -> None:
        window = HistoryRange.trailing("AAPL")
        with pytest.raises(AttributeError):
            window.symbol = "MSFT"  # type: ignore[misc]
