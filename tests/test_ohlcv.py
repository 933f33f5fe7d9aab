"""Tests for daily history standardization."""

from datetime import date

import pandas as pd

from stock_signal.utils.ohlcv import history_to_points


class TestHistoryToPoints:
    """Tests for history_to_points function."""

    def test_basic(self, sample_history_df: pd.DataFrame) -> None:
        points = history_to_points(sample_history_df)
        assert len(points) == 5
        assert points[0].date == date(2024, 1, 1)
        assert points[0].close == 100.5
        assert points[-1].close == 104.0

    def test_ascending_order(self, sample_history_df: pd.DataFrame) -> None:
        """Points come out oldest first even if the frame is reversed."""
        points = history_to_points(sample_history_df.iloc[::-1])
        assert [p.date for p in points] == sorted(p.date for p in points)

    def test_drops_missing_closes(self, sample_history_df: pd.DataFrame) -> None:
        df = sample_history_df.copy()
        df.loc[df.index[2], "Close"] = float("nan")
        points = history_to_points(df)
        assert len(points) == 4
        assert date(2024, 1, 3) not in [p.date for p in points]

    def test_tz_aware_index_keeps_calendar_date(self) -> None:
        """yfinance returns exchange-local timestamps; only the date is kept."""
        index = pd.DatetimeIndex(
            ["2024-01-02 00:00:00", "2024-01-03 00:00:00"]
        ).tz_localize("America/New_York")
        df = pd.DataFrame({"Close": [10.0, 11.0]}, index=index)
        points = history_to_points(df)
        assert [p.date for p in points] == [date(2024, 1, 2), date(2024, 1, 3)]

    def test_handles_multi_index_columns(self) -> None:
        columns = pd.MultiIndex.from_tuples([("Close", "AAPL"), ("Volume", "AAPL")])
        df = pd.DataFrame(
            [[100.5, 1000]],
            index=pd.DatetimeIndex(["2024-01-01"]),
            columns=columns,
        )
        points = history_to_points(df)
        assert len(points) == 1
        assert points[0].close == 100.5

    def test_empty_frame(self) -> None:
        assert history_to_points(pd.DataFrame()) == []

    def test_missing_close_column(self) -> None:
        df = pd.DataFrame({"Open": [1.0]}, index=pd.DatetimeIndex(["2024-01-01"]))
        assert history_to_points(df) == []
