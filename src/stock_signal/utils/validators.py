"""Validation utilities and parameter classes."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pytz

HISTORY_LOOKBACK_DAYS = 30


def normalize_symbol(symbol: str) -> str:
    """Canonical symbol form used for cache keys and upstream calls."""
    return symbol.upper().strip()


@dataclass(frozen=True)
class HistoryRange:
    """Immutable daily-history request window."""

    symbol: str
    start: date
    end: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", normalize_symbol(self.symbol))
        if self.start > self.end:
            raise ValueError(f"Invalid range {self.start} > {self.end}")

    @classmethod
    def trailing(
        cls,
        symbol: str,
        days: int = HISTORY_LOOKBACK_DAYS,
        today: date | None = None,
    ) -> "HistoryRange":
        """Window ending today (UTC calendar date) and starting `days` earlier."""
        if today is None:
            today = datetime.now(pytz.utc).date()
        return cls(symbol=symbol, start=today - timedelta(days=days), end=today)

    def to_yf_kwargs(self) -> dict[str, str]:
        """Kwargs for Ticker.history()."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "interval": "1d",
        }
