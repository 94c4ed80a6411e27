"""Head and tail windows by row count or calendar duration.

Windows compose freely: each call looks only at its input's own index, so
``first_n(last_n(first_n(s, "2 weeks"), "1 weeks"), "3 days")`` reads as
the first three days of the last week of the first two weeks.
"""

from __future__ import annotations

import numbers

import numpy as np

from tsframe.core.errors import EInvalidSelector
from tsframe.core.specs import Duration
from tsframe.series.store import TimeSeries
from tsframe.time import parse_duration


def first_n(series: TimeSeries, n: int | str) -> TimeSeries:
    """Leading rows of a series.

    Args:
        series: Input series
        n: Row count (negative: all but the first ``|n|`` rows), or a
            duration such as ``"3 days"`` selecting the first calendar
            periods present in the data

    Returns:
        New TimeSeries; asking for more rows than exist returns them all
    """
    return _window(series, n, from_end=False)


def last_n(series: TimeSeries, n: int | str) -> TimeSeries:
    """Trailing rows of a series.

    Args:
        series: Input series
        n: Row count (negative: all but the last ``|n|`` rows), or a
            duration such as ``"1 weeks"`` selecting the last calendar
            periods present in the data

    Returns:
        New TimeSeries
    """
    return _window(series, n, from_end=True)


def _window(series: TimeSeries, n: int | str, from_end: bool) -> TimeSeries:
    if isinstance(n, str):
        return series.take_rows(_period_positions(series, parse_duration(n), from_end))
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise EInvalidSelector(f"Window size must be an integer or a duration string, got {n!r}")
    rows = len(series)
    k = min(abs(int(n)), rows)
    if n >= 0:
        positions = np.arange(rows - k, rows) if from_end else np.arange(k)
    else:
        positions = np.arange(rows - k) if from_end else np.arange(k, rows)
    return series.take_rows(positions)


def _period_positions(series: TimeSeries, duration: Duration, from_end: bool) -> np.ndarray:
    """Rows falling in the first/last ``duration.amount`` calendar periods."""
    if len(series) == 0:
        return np.array([], dtype=np.intp)
    wall_clock = series.index.to_pandas().tz_localize(None)
    ordinals = np.asarray(wall_clock.to_period(duration.period_freq).asi8)
    periods = np.unique(ordinals)
    count = min(abs(duration.amount), len(periods))

    if duration.amount >= 0:
        chosen = periods[len(periods) - count :] if from_end else periods[:count]
    else:
        chosen = periods[: len(periods) - count] if from_end else periods[count:]
    return np.flatnonzero(np.isin(ordinals, chosen))
