"""Tests for tsframe.time parsing and canonicalisation."""

from __future__ import annotations

import datetime as dt

import pandas as pd
import pytest

from tsframe import TSFrameConfig, make_series
from tsframe.core.errors import EInvalidSelector
from tsframe.time import (
    ClockRange,
    TimeRange,
    parse_duration,
    parse_range,
    to_timepoint,
    to_timepoints,
)


class TestToTimepoint:
    """Heterogeneous calendar inputs map to one representation."""

    def test_date_and_datetime_agree(self):
        assert to_timepoint(dt.date(2016, 1, 1)) == to_timepoint(dt.datetime(2016, 1, 1))
        assert to_timepoint("2016-01-01") == to_timepoint(pd.Timestamp("2016-01-01"))

    def test_naive_is_localised(self):
        ts = to_timepoint("2016-01-01 09:30", tz="America/New_York")
        assert str(ts.tz) == "America/New_York"
        assert ts.hour == 9

    def test_aware_is_converted(self):
        ts = to_timepoint(pd.Timestamp("2016-01-01 12:00", tz="UTC"), tz="Asia/Tokyo")
        assert ts.hour == 21
        assert ts == pd.Timestamp("2016-01-01 12:00", tz="UTC")

    def test_garbage(self):
        with pytest.raises(EInvalidSelector):
            to_timepoint("not-a-date")

    def test_none(self):
        with pytest.raises(EInvalidSelector):
            to_timepoint(None)

    def test_sequence_mixed_types(self):
        points = to_timepoints([dt.date(2016, 1, 1), "2016-01-02", dt.datetime(2016, 1, 3, 12)])
        assert len(points) == 3
        assert str(points.tz) == "UTC"
        assert points[2].hour == 12

    def test_empty_sequence(self):
        assert len(to_timepoints([])) == 0

    def test_numbers_rejected(self):
        with pytest.raises(EInvalidSelector):
            to_timepoint(1.0)
        with pytest.raises(EInvalidSelector):
            to_timepoints([1.0, 2.0])


class TestAmbiguousWallTime:
    """Wall times repeated by a DST fall-back resolve the same way for every input type."""

    tz = "America/New_York"

    def test_index_matches_scalar(self):
        from_index = to_timepoints(pd.DatetimeIndex(["2021-11-07 01:30"]), tz=self.tz)
        from_list = to_timepoints([dt.datetime(2021, 11, 7, 1, 30)], tz=self.tz)
        assert from_index.equals(from_list)
        assert from_index[0] == pd.Timestamp("2021-11-07 05:30", tz="UTC")

    def test_make_series_from_index(self):
        config = TSFrameConfig(tz=self.tz)
        by_index = make_series([1.0], pd.DatetimeIndex(["2021-11-07 01:30"]), config=config)
        by_list = make_series([1.0], [dt.datetime(2021, 11, 7, 1, 30)], config=config)
        assert by_index.index == by_list.index
        assert by_index.start.utcoffset() == dt.timedelta(hours=-4)

    def test_nonexistent_shifts_forward(self):
        points = to_timepoints(pd.DatetimeIndex(["2021-03-14 02:30"]), tz=self.tz)
        assert points[0] == pd.Timestamp("2021-03-14 03:00", tz=self.tz)


class TestParseDuration:
    """Duration strings."""

    @pytest.mark.parametrize(
        ("text", "amount", "unit"),
        [
            ("2 weeks", 2, "weeks"),
            ("1 weeks", 1, "weeks"),
            ("3 days", 3, "days"),
            ("10 secs", 10, "seconds"),
            ("5 mins", 5, "minutes"),
            ("1 quarter", 1, "quarters"),
            ("-2 months", -2, "months"),
            ("4 Years", 4, "years"),
        ],
    )
    def test_valid(self, text, amount, unit):
        duration = parse_duration(text)
        assert duration.amount == amount
        assert duration.unit == unit

    @pytest.mark.parametrize("text", ["weeks", "2", "two weeks", "2 fortnights", ""])
    def test_invalid(self, text):
        with pytest.raises(EInvalidSelector):
            parse_duration(text)


class TestParseRange:
    """Range selector grammar and precision widening."""

    def test_year(self):
        rng = parse_range("2016")
        assert isinstance(rng, TimeRange)
        assert rng.start == pd.Timestamp("2016-01-01", tz="UTC")
        assert rng.stop == pd.Timestamp("2017-01-01", tz="UTC")

    def test_compact_range(self):
        rng = parse_range("20160101/20160315")
        assert rng.start == pd.Timestamp("2016-01-01", tz="UTC")
        assert rng.stop == pd.Timestamp("2016-03-16", tz="UTC")

    def test_open_start(self):
        rng = parse_range("/201601")
        assert rng.start is None
        assert rng.stop == pd.Timestamp("2016-02-01", tz="UTC")

    def test_open_end(self):
        rng = parse_range("2016-03/")
        assert rng.start == pd.Timestamp("2016-03-01", tz="UTC")
        assert rng.stop is None

    def test_dashed_day(self):
        rng = parse_range("2016-02-29")
        assert rng.stop == pd.Timestamp("2016-03-01", tz="UTC")

    def test_leap_february(self):
        rng = parse_range("2016-02")
        assert rng.stop - rng.start == pd.Timedelta(days=29)

    def test_quarter(self):
        rng = parse_range("2016Q4")
        assert rng.start == pd.Timestamp("2016-10-01", tz="UTC")
        assert rng.stop == pd.Timestamp("2017-01-01", tz="UTC")

    def test_minute_precision(self):
        rng = parse_range("2016-01-01 09:30")
        assert rng.stop - rng.start == pd.Timedelta(minutes=1)

    def test_endpoints_use_index_timezone(self):
        rng = parse_range("2016", tz="Asia/Tokyo")
        assert rng.start == pd.Timestamp("2016-01-01", tz="Asia/Tokyo")

    def test_clock_range(self):
        rng = parse_range("T09:00/T10:00")
        assert isinstance(rng, ClockRange)
        assert rng.start == pd.Timedelta(hours=9)
        assert rng.stop == pd.Timedelta(hours=10, minutes=1)

    def test_clock_range_open_end(self):
        rng = parse_range("T22:00/")
        assert rng.stop == pd.Timedelta(days=1)

    @pytest.mark.parametrize(
        "text",
        ["", "/", "16", "2016-13", "2016-02-30", "2017/2016", "T25:00/T26:00", "T09:00/2016", "yesterday"],
    )
    def test_invalid(self, text):
        with pytest.raises(EInvalidSelector):
            parse_range(text)
