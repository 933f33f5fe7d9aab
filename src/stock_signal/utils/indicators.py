"""Technical indicator calculations."""

from collections.abc import Sequence

import pandas as pd

# Closes fed to the indicator: 15 closes -> 14 day-over-day intervals
RSI_WINDOW = 15
RSI_MIN_POINTS = 14
NEUTRAL_RSI = 50.0

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


def calculate_rsi(closes: Sequence[float]) -> float:
    """
    Calculate Relative Strength Index with simple averaging.

    Gains and losses are averaged over every interval supplied, not smoothed.
    Callers pass at most the last RSI_WINDOW closes.

    Args:
        closes: Closing prices, oldest first

    Returns:
        RSI on a 0-100 scale; NEUTRAL_RSI when fewer than RSI_MIN_POINTS
        closes are supplied
    """
    prices = pd.Series(list(closes), dtype="float64")
    if len(prices) < RSI_MIN_POINTS:
        return NEUTRAL_RSI

    delta = prices.diff().iloc[1:]
    intervals = len(delta)

    avg_gain = float(delta.clip(lower=0).sum()) / intervals
    avg_loss = float((-delta).clip(lower=0).sum()) / intervals

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi_signal(rsi: float) -> str:
    """Map RSI to buy (oversold), sell (overbought) or hold."""
    if rsi < RSI_OVERSOLD:
        return "buy"
    if rsi > RSI_OVERBOUGHT:
        return "sell"
    return "hold"
