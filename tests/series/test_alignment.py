"""Tests for series/alignment.py."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsframe import TSFrameConfig, make_series, merge_series
from tsframe.core.errors import EIncompatibleMerge
from tsframe.series import align_intersection, align_timezone


@pytest.fixture
def a():
    return make_series([1.0, 2.0, 3.0, 4.0], ["2024-01-01", "2024-01-02", "2024-01-04", "2024-01-05"], name="a")


@pytest.fixture
def b():
    return make_series([20.0, 30.0, 50.0], ["2024-01-02", "2024-01-03", "2024-01-05"], name="b")


@pytest.fixture
def c():
    return make_series([300.0, 600.0], ["2024-01-03", "2024-01-06"], name="c")


def _days(series) -> list[int]:
    return [ts.day for ts in series.index]


class TestAlignTimezone:
    """Tests for align_timezone function."""

    def test_unify_to_first(self, a):
        tokyo = a.with_timezone("Asia/Tokyo")
        aligned = align_timezone([tokyo, a])
        assert all(s.tz == "Asia/Tokyo" for s in aligned)

    def test_explicit_target(self, a, b):
        aligned = align_timezone([a, b], target_tz="US/Eastern")
        assert [s.tz for s in aligned] == ["US/Eastern", "US/Eastern"]
        assert aligned[0].index.equals(a.index)

    def test_empty(self):
        assert align_timezone([]) == []


class TestAlignIntersection:
    """Tests for align_intersection function."""

    def test_positions(self, a, b):
        common, left, right = align_intersection(a, b)
        assert _days(make_series(np.zeros(len(common)), common)) == [2, 5]
        assert left.tolist() == [1, 3]
        assert right.tolist() == [0, 2]

    def test_sum_matches_elementwise(self, a, b):
        total = a + b
        common, left, right = align_intersection(a, b)
        expected = a.core_data()[left] + b.core_data()[right]
        np.testing.assert_array_equal(total.core_data(), expected)
        assert len(total) == len(common)


class TestMergeSeries:
    """Tests for merge_series function."""

    def test_outer(self, a, b):
        merged = merge_series(a, b, join="outer")
        assert _days(merged) == [1, 2, 3, 4, 5]
        assert merged.columns == ("a.x", "b.x")
        data = merged.core_data()
        assert np.isnan(data[0, 1])
        assert np.isnan(data[2, 0])
        assert data[4].tolist() == [4.0, 50.0]

    def test_full_alias(self, a, b):
        assert merge_series(a, b, join="full").equals(merge_series(a, b, join="outer"))

    def test_inner(self, a, b, c):
        assert _days(merge_series(a, b, join="inner")) == [2, 5]
        assert len(merge_series(a, b, c, join="inner")) == 0

    def test_left_uses_first(self, a, b):
        merged = merge_series(a, b, join="left")
        assert merged.index.equals(a.index)

    def test_right_uses_last(self, a, b, c):
        merged = merge_series(a, b, c, join="right")
        assert merged.index.equals(c.index)
        assert merged.columns == ("a.x", "b.x", "c.x")

    def test_numeric_fill(self, a, b):
        merged = merge_series(a, b, join="outer", fill=0)
        assert not np.isnan(merged.core_data()).any()
        assert merged.core_data()[0, 1] == 0.0

    def test_fill_only_touches_join_gaps(self, b):
        holey = make_series([1.0, None], ["2024-01-02", "2024-01-04"], name="h")
        merged = merge_series(holey, b, join="outer", fill=-1)
        data = merged.core_data()
        # 2024-01-04 exists in holey but is missing there; it must stay missing
        assert _days(merged) == [2, 3, 4, 5]
        assert np.isnan(data[2, 0])
        assert data[1, 0] == -1.0
        assert data[2, 1] == -1.0

    def test_locf_fill(self, a, b):
        merged = merge_series(a, b, join="outer", fill="locf")
        data = merged.core_data()
        assert data[2, 0] == 2.0
        assert np.isnan(data[0, 1])

    def test_interpolate_fill(self, a, b):
        merged = merge_series(a, b, join="outer", fill="interpolate")
        assert merged.core_data()[2, 0] == pytest.approx(2.5, abs=1e-9)

    def test_nocb_fill(self, a, b):
        merged = merge_series(a, b, join="outer", fill="nocb")
        assert merged.core_data()[0, 1] == 20.0

    def test_reproduces_base_values(self, a, b):
        """Extracting a's own time points after an outer merge returns a."""
        merged = merge_series(a, b, join="outer", fill=0)
        back = merged[list(a.index), "a.x"]
        np.testing.assert_array_equal(back.core_data(), a.core_data())

    def test_unnamed_sources(self):
        x = make_series([1.0], ["2024-01-01"])
        y = make_series([2.0], ["2024-01-01"])
        assert merge_series(x, y).columns == ("s1.x", "s2.x")

    def test_custom_separator(self, a, b):
        merged = merge_series(a, b, config=TSFrameConfig(column_sep="_", default_join="inner"))
        assert merged.columns == ("a_x", "b_x")
        assert len(merged) == 2

    def test_self_merge_gets_distinct_columns(self, a):
        merged = merge_series(a, a, join="outer", fill=0)
        assert merged.columns == ("a.x", "a2.x")
        np.testing.assert_array_equal(merged.core_data()[:, 0], merged.core_data()[:, 1])

    def test_repeated_names_get_positions(self, a, b):
        other = b.with_name("a")
        merged = merge_series(a, other, a, join="inner")
        assert merged.columns == ("a.x", "a2.x", "a3.x")

    def test_unnamed_label_taken_by_name(self):
        x = make_series([1.0], ["2024-01-01"], name="s2")
        y = make_series([2.0], ["2024-01-01"])
        assert merge_series(x, y).columns == ("s2.x", "s22.x")

    def test_separator_in_column_collides(self):
        x = make_series([1.0], ["2024-01-01"], name="a", columns=["b.c"])
        y = make_series([2.0], ["2024-01-01"], name="a.b", columns=["c"])
        with pytest.raises(EIncompatibleMerge, match="collide"):
            merge_series(x, y)

    def test_single_operand(self, a):
        with pytest.raises(EIncompatibleMerge):
            merge_series(a)

    def test_unknown_join(self, a, b):
        with pytest.raises(EIncompatibleMerge):
            merge_series(a, b, join="cross")

    def test_unknown_fill(self, a, b):
        with pytest.raises(EIncompatibleMerge):
            merge_series(a, b, fill="median")

    def test_numeric_string_fill_rejected(self, a, b):
        with pytest.raises(EIncompatibleMerge):
            merge_series(a, b, fill="0")

    def test_integer_fill(self, a, b):
        merged = merge_series(a, b, join="outer", fill=7)
        assert merged.core_data()[0, 1] == 7.0

    def test_mixed_timezones(self, a, b):
        merged = merge_series(a.with_timezone("Asia/Tokyo"), b, join="inner")
        assert merged.tz == "Asia/Tokyo"
        assert len(merged) == 2

    def test_inputs_untouched(self, a, b):
        before = a.core_data()
        merge_series(a, b, join="outer", fill=0)
        np.testing.assert_array_equal(a.core_data(), before)

    def test_attributes_from_first(self):
        x = make_series([1.0], ["2024-01-01"], attributes={"units": "kWh"}, name="x")
        y = make_series([2.0], pd.DatetimeIndex(["2024-01-01"]), name="y")
        assert merge_series(x, y).attrs["units"] == "kWh"
