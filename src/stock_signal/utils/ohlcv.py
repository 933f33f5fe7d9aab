"""Daily close history standardization."""

import pandas as pd

from stock_signal.data.models import PricePoint


def history_to_points(df: pd.DataFrame) -> list[PricePoint]:
    """
    Convert a Ticker.history() frame into ascending (date, close) points.

    Rows without a close are dropped. Index may be tz-aware; only the
    calendar date is kept.

    Args:
        df: Raw DataFrame from yfinance with a DatetimeIndex and a Close column

    Returns:
        PricePoints ordered oldest first
    """
    if df is None or df.empty:
        return []

    df = df.copy()

    # Handle multi-index columns (yf.download style frames)
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)
    df.columns = [str(c).lower() for c in df.columns]
    if "close" not in df.columns:
        return []

    closes = pd.to_numeric(df["close"], errors="coerce").dropna().sort_index()
    dates = pd.DatetimeIndex(closes.index)

    return [
        PricePoint(date=ts.date(), close=float(close))
        for ts, close in zip(dates, closes.to_numpy())
    ]
