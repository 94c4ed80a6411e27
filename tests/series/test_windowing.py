"""Tests for series/windowing.py."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsframe import first_n, last_n, make_series
from tsframe.core.errors import EInvalidSelector


def _dates(series) -> list[str]:
    return [ts.strftime("%Y-%m-%d") for ts in series.index]


class TestCountWindows:
    """Integer window sizes."""

    def test_first_and_last(self, daily_series, daily_values):
        assert first_n(daily_series, 3).core_data().ravel().tolist() == daily_values[:3].tolist()
        assert last_n(daily_series, 2).core_data().ravel().tolist() == daily_values[-2:].tolist()

    def test_more_than_available(self, daily_series):
        assert len(first_n(daily_series, 100)) == 20
        assert len(last_n(daily_series, 100)) == 20

    def test_zero(self, daily_series):
        assert len(first_n(daily_series, 0)) == 0

    def test_negative_first_drops_head(self, daily_series):
        result = first_n(daily_series, -3)
        assert len(result) == 17
        assert result.start == daily_series.index[3]

    def test_negative_last_drops_tail(self, daily_series):
        result = last_n(daily_series, -3)
        assert len(result) == 17
        assert result.end == daily_series.index[16]

    def test_negative_beyond_length(self, daily_series):
        assert len(first_n(daily_series, -50)) == 0

    def test_bad_type(self, daily_series):
        with pytest.raises(EInvalidSelector):
            first_n(daily_series, 2.5)  # type: ignore[arg-type]


class TestDurationWindows:
    """Calendar-period window sizes."""

    def test_nested_windows(self, daily_series, daily_values):
        result = first_n(last_n(first_n(daily_series, "2 weeks"), "1 weeks"), "3 days")
        assert _dates(result) == ["1922-01-02", "1922-01-03", "1922-01-04"]
        np.testing.assert_array_equal(result.core_data().ravel(), daily_values[1:4])

    def test_weeks_run_monday_to_sunday(self, daily_series):
        # 1922-01-01 is a Sunday and closes its own week
        assert _dates(first_n(daily_series, "1 week")) == ["1922-01-01"]
        assert len(first_n(daily_series, "2 weeks")) == 8

    def test_last_days(self, daily_series):
        assert _dates(last_n(daily_series, "2 days")) == ["1922-01-19", "1922-01-20"]

    def test_months_are_calendar_months(self):
        index = pd.date_range("2024-01-15", "2024-04-10", freq="D")
        s = make_series(np.arange(len(index), dtype=float), index)
        result = last_n(s, "1 month")
        assert result.start == pd.Timestamp("2024-04-01", tz="UTC")
        assert len(result) == 10
        assert len(first_n(s, "1 month")) == 17

    def test_negative_duration(self, daily_series):
        result = first_n(daily_series, "-1 weeks")
        assert result.start == pd.Timestamp("1922-01-02", tz="UTC")
        assert len(result) == 19

    def test_hours(self):
        index = pd.date_range("2024-01-01 00:00", periods=6, freq="30min")
        s = make_series(np.arange(6, dtype=float), index)
        assert len(first_n(s, "1 hours")) == 2

    def test_duration_uses_local_calendar(self):
        index = pd.date_range("2024-01-01 20:00", periods=4, freq="2h", tz="UTC")
        s = make_series(np.arange(4, dtype=float), index).with_timezone("Asia/Tokyo")
        # 20:00 UTC is already the next day in Tokyo, so all four points share a day
        assert len(first_n(s, "1 day")) == 4

    def test_empty_series(self):
        s = make_series([], [])
        assert len(first_n(s, "3 days")) == 0

    def test_bad_duration(self, daily_series):
        with pytest.raises(EInvalidSelector):
            last_n(daily_series, "3 fortnights")
