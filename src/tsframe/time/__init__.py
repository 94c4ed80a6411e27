"""Time utilities: time point canonicalisation and selector parsing.

Every calendar value entering the library is converted to a tz-aware
nanosecond ``pd.Timestamp`` in a single canonical time zone, so series
built from dates, datetimes or strings compare and align directly.
"""

from __future__ import annotations

import numbers
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from pydantic import ValidationError

from tsframe.core.errors import EInvalidSelector
from tsframe.core.specs import Duration

# ---------------------------
# Canonical time points
# ---------------------------


def to_timepoint(value: Any, tz: str = "UTC") -> pd.Timestamp:
    """Convert a single calendar value to a canonical time point.

    Naive values are localised to ``tz``; aware values are converted to it.

    Raises:
        EInvalidSelector: If the value cannot be read as a point in time
    """
    if isinstance(value, numbers.Number):
        raise EInvalidSelector(
            f"Numbers are not time points: {value!r}",
            context={"value": repr(value)},
            fix_hint="Use integer positions or date strings",
        )
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise EInvalidSelector(
            f"Cannot interpret {value!r} as a time point",
            context={"value": repr(value)},
        ) from exc
    if pd.isna(ts):
        raise EInvalidSelector("Missing time point", context={"value": repr(value)})
    if ts.tzinfo is None:
        ts = ts.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")
    else:
        ts = ts.tz_convert(tz)
    return ts.as_unit("ns")


def to_timepoints(values: Iterable[Any], tz: str = "UTC") -> pd.DatetimeIndex:
    """Convert a sequence of calendar values to a canonical DatetimeIndex.

    The result keeps the input order; ordering checks belong to TimeIndex.
    """
    if isinstance(values, pd.Series):
        values = pd.Index(values)
    if isinstance(values, pd.DatetimeIndex):
        if values.hasnans:
            raise EInvalidSelector("Missing time point in index values")
        if values.tz is not None:
            return values.tz_convert(tz).as_unit("ns")
        # Ambiguous wall times resolve to DST, as in to_timepoint
        try:
            converted = values.tz_localize(
                tz,
                ambiguous=np.ones(len(values), dtype=bool),
                nonexistent="shift_forward",
            )
        except (TypeError, ValueError) as exc:
            raise EInvalidSelector(
                f"Cannot localise index values to {tz}",
                context={"tz": tz, "error": str(exc)},
            ) from exc
        return converted.as_unit("ns")

    points = [to_timepoint(v, tz) for v in values]
    if not points:
        return pd.DatetimeIndex([], tz=tz).as_unit("ns")
    return pd.DatetimeIndex(points).as_unit("ns")


def wall_clock_offsets(index: pd.DatetimeIndex) -> np.ndarray:
    """Elapsed time since local midnight for each entry, as timedelta64[ns]."""
    local = index.tz_localize(None) if index.tz is not None else index
    return np.asarray(local - local.normalize(), dtype="timedelta64[ns]")


# ---------------------------
# Durations
# ---------------------------

_DURATION_RE = re.compile(r"^\s*(?P<amount>[+-]?\d+)\s*(?P<unit>[A-Za-z]+)\s*$")

_UNIT_ALIASES: dict[str, str] = {
    "sec": "seconds",
    "secs": "seconds",
    "second": "seconds",
    "seconds": "seconds",
    "min": "minutes",
    "mins": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "hour": "hours",
    "hours": "hours",
    "day": "days",
    "days": "days",
    "week": "weeks",
    "weeks": "weeks",
    "month": "months",
    "months": "months",
    "quarter": "quarters",
    "quarters": "quarters",
    "year": "years",
    "years": "years",
}


def parse_duration(text: str) -> Duration:
    """Parse a ``"<amount> <unit>"`` string such as ``"2 weeks"``.

    Raises:
        EInvalidSelector: If the string or unit is not recognised
    """
    match = _DURATION_RE.match(text) if isinstance(text, str) else None
    if match is None:
        raise EInvalidSelector(
            f"Malformed duration {text!r}",
            context={"duration": text},
            fix_hint="Durations look like '3 days', '1 weeks' or '2 months'",
        )
    unit = _UNIT_ALIASES.get(match.group("unit").lower())
    if unit is None:
        raise EInvalidSelector(
            f"Unknown duration unit {match.group('unit')!r}",
            context={"duration": text, "known_units": sorted(set(_UNIT_ALIASES.values()))},
        )
    try:
        return Duration(amount=int(match.group("amount")), unit=unit)
    except ValidationError as exc:
        raise EInvalidSelector(f"Invalid duration {text!r}", context={"duration": text}) from exc


# ---------------------------
# Range selectors
# ---------------------------


@dataclass(frozen=True)
class TimeRange:
    """Half-open absolute interval ``[start, stop)``; None means unbounded."""

    start: pd.Timestamp | None
    stop: pd.Timestamp | None

    def mask(self, index: pd.DatetimeIndex) -> np.ndarray:
        keep = np.ones(len(index), dtype=bool)
        if self.start is not None:
            keep &= np.asarray(index >= self.start)
        if self.stop is not None:
            keep &= np.asarray(index < self.stop)
        return keep


@dataclass(frozen=True)
class ClockRange:
    """Recurring wall-clock window ``[start, stop)`` applied to every day.

    A window whose start is later than its stop wraps past midnight.
    """

    start: pd.Timedelta
    stop: pd.Timedelta

    def mask(self, index: pd.DatetimeIndex) -> np.ndarray:
        offsets = wall_clock_offsets(index)
        lo = self.start.to_timedelta64()
        hi = self.stop.to_timedelta64()
        if self.start <= self.stop:
            return (offsets >= lo) & (offsets < hi)
        return (offsets >= lo) | (offsets < hi)


_COMPACT_RE = re.compile(r"^(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?$")
_QUARTER_RE = re.compile(r"^(?P<year>\d{4})-?[Qq](?P<quarter>[1-4])$")
_DASHED_RE = re.compile(
    r"^(?P<year>\d{4})"
    r"(?:-(?P<month>\d{1,2})"
    r"(?:-(?P<day>\d{1,2})"
    r"(?:[ T](?P<hour>\d{1,2})"
    r"(?::(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2}))?)?)?)?)?$"
)
_CLOCK_RE = re.compile(r"^T(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?$")

# Finest populated field -> width of the period it denotes
_PRECISION_STEP: dict[str, pd.DateOffset] = {
    "year": pd.DateOffset(years=1),
    "month": pd.DateOffset(months=1),
    "day": pd.DateOffset(days=1),
    "hour": pd.DateOffset(hours=1),
    "minute": pd.DateOffset(minutes=1),
    "second": pd.DateOffset(seconds=1),
}


def _endpoint_period(token: str, tz: str) -> tuple[pd.Timestamp, pd.Timestamp]:
    """Return the half-open period a partial date string denotes."""
    quarter = _QUARTER_RE.match(token)
    if quarter:
        month = 3 * (int(quarter.group("quarter")) - 1) + 1
        fields = {"year": quarter.group("year"), "month": str(month)}
        step = pd.DateOffset(months=3)
    else:
        match = _COMPACT_RE.match(token) or _DASHED_RE.match(token)
        if match is None:
            raise EInvalidSelector(
                f"Malformed date in range selector: {token!r}",
                context={"token": token},
            )
        fields = {k: v for k, v in match.groupdict().items() if v is not None}
        finest = [name for name in _PRECISION_STEP if name in fields][-1]
        step = _PRECISION_STEP[finest]

    parts = {
        "year": int(fields["year"]),
        "month": int(fields.get("month", 1)),
        "day": int(fields.get("day", 1)),
        "hour": int(fields.get("hour", 0)),
        "minute": int(fields.get("minute", 0)),
        "second": int(fields.get("second", 0)),
    }
    try:
        naive = pd.Timestamp(**parts)
    except ValueError as exc:
        raise EInvalidSelector(
            f"Out-of-range date in range selector: {token!r}",
            context={"token": token},
        ) from exc
    start = naive.tz_localize(tz, ambiguous=True, nonexistent="shift_forward").as_unit("ns")
    stop = (naive + step).tz_localize(tz, ambiguous=True, nonexistent="shift_forward").as_unit("ns")
    return start, stop


def _clock_offset(token: str) -> tuple[pd.Timedelta, pd.Timedelta]:
    match = _CLOCK_RE.match(token)
    if match is None:
        raise EInvalidSelector(f"Malformed clock time {token!r}", context={"token": token})
    hour, minute = int(match.group("hour")), int(match.group("minute"))
    second = match.group("second")
    if hour > 23 or minute > 59 or (second is not None and int(second) > 59):
        raise EInvalidSelector(f"Out-of-range clock time {token!r}", context={"token": token})
    start = pd.Timedelta(hours=hour, minutes=minute, seconds=int(second or 0))
    width = pd.Timedelta(seconds=1) if second is not None else pd.Timedelta(minutes=1)
    return start, start + width


def parse_range(text: str, tz: str = "UTC") -> TimeRange | ClockRange:
    """Parse a textual range selector.

    Supported forms::

        "2016"                 every point in 2016
        "201601" / "2016-01"   every point in January 2016
        "2016Q2"               every point in the second quarter
        "20160101/20160315"    inclusive of both end days
        "/201601"              up to the end of January 2016
        "2016-03-01/"          from March 2016 onwards
        "T09:00/T10:00"        09:00 through 10:00:59 on every day

    Raises:
        EInvalidSelector: If the selector is malformed
    """
    if not isinstance(text, str) or not text.strip():
        raise EInvalidSelector("Empty range selector", context={"selector": repr(text)})
    text = text.strip()

    if "/" in text:
        left, _, right = text.partition("/")
        left, right = left.strip(), right.strip()
        if not left and not right:
            raise EInvalidSelector("Range selector has no endpoints", context={"selector": text})
    else:
        left, right = text, None

    if left.startswith("T") or (right or "").startswith("T"):
        if right is None:
            start, stop = _clock_offset(left)
            return ClockRange(start=start, stop=stop)
        start = _clock_offset(left)[0] if left else pd.Timedelta(0)
        stop = _clock_offset(right)[1] if right else pd.Timedelta(days=1)
        return ClockRange(start=start, stop=stop)

    if right is None:
        start, stop = _endpoint_period(left, tz)
        return TimeRange(start=start, stop=stop)

    start = _endpoint_period(left, tz)[0] if left else None
    stop = _endpoint_period(right, tz)[1] if right else None
    if start is not None and stop is not None and start >= stop:
        raise EInvalidSelector(
            f"Range selector start is after its end: {text!r}",
            context={"selector": text},
        )
    return TimeRange(start=start, stop=stop)


__all__ = [
    "ClockRange",
    "TimeRange",
    "parse_duration",
    "parse_range",
    "to_timepoint",
    "to_timepoints",
    "wall_clock_offsets",
]
