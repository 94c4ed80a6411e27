"""TimeSeries implementation.

A numeric block paired row-for-row with a ``TimeIndex``, plus free-form
attributes that are never row aligned. Every transform returns a new
instance; the only in-place path is single-cell assignment.
"""

from __future__ import annotations

import datetime as dt
import logging
import numbers
import operator
from collections.abc import Callable, Hashable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd

from tsframe.core.config import DEFAULT_CONFIG, TSFrameConfig
from tsframe.core.errors import (
    EDuplicateTimePoint,
    EIndexOutOfRange,
    EInvalidSelector,
    EInvalidValue,
    EShapeMismatch,
)
from tsframe.series.index import TimeIndex
from tsframe.time import ClockRange, TimeRange, parse_range, to_timepoints

logger = logging.getLogger(__name__)

_TIME_SCALARS = (dt.date, np.datetime64, pd.Timestamp)


def _default_columns(n: int, base: str) -> tuple[str, ...]:
    if n == 1:
        return (base,)
    return tuple(f"{base}{i}" for i in range(1, n + 1))


def _as_block(values: Any) -> np.ndarray:
    """Coerce input values to a fresh 2-D float64 array."""
    try:
        block = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise EInvalidValue(
            "Values must be numeric",
            context={"type": type(values).__name__},
        ) from exc
    if block.ndim == 1:
        block = block.reshape(-1, 1)
    if block.ndim != 2:
        raise EShapeMismatch(
            f"Values must be 1-D or 2-D, got {block.ndim}-D",
            context={"shape": block.shape},
        )
    return block


class TimeSeries:
    """Time-indexed numeric table.

    Attributes:
        index: The TimeIndex (one entry per row)
        columns: Column names
        name: Optional series name, used to qualify merged columns
        attrs: Read-only view of the attribute mapping

    Examples:
        >>> s = make_series([1.0, 2.0, 3.0], ["2024-01-01", "2024-01-02", "2024-01-03"])
        >>> s["2024-01-02/"].core_data().ravel().tolist()
        [2.0, 3.0]
    """

    __slots__ = ("_index", "_data", "_columns", "_attrs", "_name")

    def __init__(
        self,
        index: TimeIndex,
        data: np.ndarray,
        columns: Sequence[str],
        attrs: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> None:
        if data.ndim != 2:
            raise EShapeMismatch("Data block must be 2-D", context={"shape": data.shape})
        if data.shape[0] != len(index):
            raise EShapeMismatch(
                "Data rows do not match index length",
                context={"rows": data.shape[0], "index_length": len(index)},
            )
        columns = tuple(str(c) for c in columns)
        if len(columns) != data.shape[1]:
            raise EShapeMismatch(
                "Column names do not match data width",
                context={"columns": len(columns), "width": data.shape[1]},
            )
        if len(set(columns)) != len(columns):
            raise EShapeMismatch("Column names must be unique", context={"columns": list(columns)})

        self._index = index
        self._data = data
        self._columns = columns
        self._attrs = dict(attrs or {})
        self._name = name

    # -- construction ------------------------------------------------------

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        time_col: str | None = None,
        name: str | None = None,
        config: TSFrameConfig | None = None,
    ) -> TimeSeries:
        """Create a series from a DataFrame.

        Args:
            df: Input DataFrame; numeric columns become series columns
            time_col: Column holding time points (default: use the row index)
            name: Series name
            config: Construction config

        Returns:
            New TimeSeries
        """
        if time_col is not None:
            if time_col not in df.columns:
                raise EInvalidSelector(
                    f"Column '{time_col}' not found in DataFrame",
                    context={"columns": [str(c) for c in df.columns]},
                )
            times = df[time_col]
            values = df.drop(columns=[time_col])
        else:
            times = df.index
            values = df
        return make_series(
            values.to_numpy(dtype=np.float64),
            times,
            attributes=dict(df.attrs),
            name=name,
            columns=[str(c) for c in values.columns],
            config=config,
        )

    # -- accessors ---------------------------------------------------------

    @property
    def index(self) -> TimeIndex:
        return self._index

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def attrs(self) -> Mapping[str, Any]:
        return MappingProxyType(self._attrs)

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    @property
    def tz(self) -> str:
        return self._index.tz

    @property
    def start(self) -> pd.Timestamp | None:
        return self._index.start

    @property
    def end(self) -> pd.Timestamp | None:
        return self._index.end

    def core_data(self) -> np.ndarray:
        """Return a copy of the numeric block, shape ``(rows, columns)``."""
        return self._data.copy()

    def is_missing(self) -> np.ndarray:
        """Boolean block marking missing cells."""
        return np.isnan(self._data)

    def __len__(self) -> int:
        return self._data.shape[0]

    def __repr__(self) -> str:
        label = f" '{self._name}'" if self._name else ""
        body = self.to_frame().to_string(max_rows=10)
        return f"<TimeSeries{label} {self.shape[0]}x{self.shape[1]} tz={self.tz}>\n{body}"

    def to_frame(self) -> pd.DataFrame:
        """Return a DataFrame view of the data with a DatetimeIndex."""
        df = pd.DataFrame(self._data.copy(), index=self._index.to_pandas(), columns=list(self._columns))
        df.attrs.update(self._attrs)
        return df

    def equals(self, other: TimeSeries) -> bool:
        """True if index, columns and data (missing cells included) match."""
        return (
            isinstance(other, TimeSeries)
            and self._columns == other._columns
            and self._index.equals(other._index)
            and bool(np.array_equal(self._data, other._data, equal_nan=True))
        )

    # -- derivation helpers ------------------------------------------------

    def _derive(
        self,
        index: TimeIndex | None = None,
        data: np.ndarray | None = None,
        columns: Sequence[str] | None = None,
        **overrides: Any,
    ) -> TimeSeries:
        """New series sharing this one's metadata; data is used as given."""
        return TimeSeries(
            index=self._index if index is None else index,
            data=self._data.copy() if data is None else data,
            columns=self._columns if columns is None else columns,
            attrs=overrides.get("attrs", self._attrs),
            name=overrides.get("name", self._name),
        )

    def copy(self) -> TimeSeries:
        return self._derive()

    def with_attributes(self, **attributes: Hashable) -> TimeSeries:
        """Return a copy with attributes added or replaced."""
        return self._derive(attrs={**self._attrs, **attributes})

    def with_name(self, name: str | None) -> TimeSeries:
        return self._derive(name=name)

    def with_timezone(self, tz: str) -> TimeSeries:
        """Return a copy whose index is expressed in another time zone.

        Instants are unchanged, so alignment with the original is exact.
        """
        try:
            pd.Timestamp("2000-01-01", tz=tz)
        except Exception as exc:
            raise EInvalidSelector(f"Unknown time zone: {tz!r}", context={"tz": tz}) from exc
        return self._derive(index=self._index.tz_convert(tz))

    def take_rows(self, positions: np.ndarray) -> TimeSeries:
        """Rows at ascending positions, as a new series."""
        return self._derive(index=self._index.take(positions), data=self._data[positions].copy())

    # -- selection ---------------------------------------------------------

    def _check_position(self, pos: int) -> int:
        n = len(self)
        if pos < -n or pos >= n:
            raise EIndexOutOfRange(
                f"Position {pos} out of range for series of length {n}",
                context={"position": pos, "length": n},
            )
        return pos % n

    def _row_positions(self, selector: Any) -> np.ndarray:
        """Resolve a row selector to sorted, unique positions."""
        n = len(self)
        if selector is None or selector is Ellipsis:
            return np.arange(n)
        if isinstance(selector, str):
            selector = parse_range(selector, tz=self.tz)
        if isinstance(selector, (TimeRange, ClockRange)):
            return np.flatnonzero(selector.mask(self._index.to_pandas()))
        if isinstance(selector, (bool, np.bool_)):
            raise EInvalidSelector("A single bool is not a row selector; pass a mask")
        if isinstance(selector, numbers.Integral):
            return np.array([self._check_position(int(selector))], dtype=np.intp)
        if isinstance(selector, slice):
            if not all(
                part is None or isinstance(part, numbers.Integral)
                for part in (selector.start, selector.stop, selector.step)
            ):
                raise EInvalidSelector("Slices must use integer positions; use a range string for times")
            return np.unique(np.arange(n)[selector])
        if isinstance(selector, _TIME_SCALARS):
            return self._index.positions_of([selector])
        if isinstance(selector, TimeIndex):
            return self._matching_positions(selector)
        if isinstance(selector, pd.DatetimeIndex):
            return self._matching_positions(TimeIndex(to_timepoints(selector, tz=self.tz)))

        arr = np.asarray(selector)
        if arr.ndim != 1:
            raise EInvalidSelector("Row selectors must be one-dimensional", context={"shape": arr.shape})
        if arr.dtype == np.bool_:
            if len(arr) != n:
                raise EShapeMismatch(
                    "Boolean mask length does not match row count",
                    context={"mask_length": len(arr), "rows": n},
                )
            return np.flatnonzero(arr)
        if len(arr) == 0:
            return np.array([], dtype=np.intp)
        if np.issubdtype(arr.dtype, np.integer):
            out_of_range = (arr < -n) | (arr >= n)
            if out_of_range.any():
                bad = int(arr[out_of_range][0])
                raise EIndexOutOfRange(
                    f"Position {bad} out of range for series of length {n}",
                    context={"position": bad, "length": n},
                )
            return np.unique(arr % n)
        if np.issubdtype(arr.dtype, np.number):
            raise EInvalidSelector(
                "Numeric row selectors must be integer positions",
                context={"dtype": str(arr.dtype)},
            )
        if np.issubdtype(arr.dtype, np.datetime64):
            points = to_timepoints(pd.DatetimeIndex(arr), tz=self.tz)
        else:
            points = to_timepoints(list(selector), tz=self.tz)
        return self._matching_positions(TimeIndex(points))

    def _matching_positions(self, points: TimeIndex) -> np.ndarray:
        pos = self._index.reindex_positions(points)
        return np.unique(pos[pos >= 0])

    def _column_positions(self, selector: Any) -> np.ndarray:
        width = len(self._columns)
        if selector is None or selector is Ellipsis:
            return np.arange(width)
        if isinstance(selector, slice):
            return np.arange(width)[selector]
        items = [selector] if isinstance(selector, (str, numbers.Integral)) else list(selector)
        positions = []
        for item in items:
            if isinstance(item, str):
                if item not in self._columns:
                    raise EInvalidSelector(
                        f"Unknown column {item!r}",
                        context={"columns": list(self._columns)},
                    )
                positions.append(self._columns.index(item))
            elif isinstance(item, numbers.Integral) and not isinstance(item, bool):
                if item < -width or item >= width:
                    raise EIndexOutOfRange(
                        f"Column position {item} out of range",
                        context={"position": int(item), "width": width},
                    )
                positions.append(int(item) % width)
            else:
                raise EInvalidSelector(f"Invalid column selector {item!r}")
        return np.array(positions, dtype=np.intp)

    def __getitem__(self, key: Any) -> TimeSeries:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise EInvalidSelector("Use series[rows] or series[rows, columns]")
            rows, cols = key
        else:
            rows, cols = key, None
        row_pos = self._row_positions(rows)
        col_pos = self._column_positions(cols)
        data = self._data[np.ix_(row_pos, col_pos)].copy()
        columns = [self._columns[i] for i in col_pos]
        return self._derive(index=self._index.take(row_pos), data=data, columns=columns)

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise EInvalidSelector("Use series[row] = v or series[row, column] = v")
            row, cols = key
        else:
            row, cols = key, None

        if isinstance(row, numbers.Integral) and not isinstance(row, (bool, np.bool_)):
            pos = self._check_position(int(row))
        elif isinstance(row, (str, *_TIME_SCALARS)):
            found = self._index.locate(row)
            if found is None:
                raise EIndexOutOfRange(
                    f"Time point {row!r} not in index",
                    context={"time_point": str(row)},
                )
            pos = found
        else:
            raise EInvalidSelector("Assignment takes a single row position or time point")

        col_pos = self._column_positions(cols)
        try:
            cell = np.nan if value is None else float(value)
        except (TypeError, ValueError) as exc:
            raise EInvalidValue(f"Cannot store {value!r} in a numeric series") from exc
        self._data[pos, col_pos] = cell

    # -- arithmetic --------------------------------------------------------

    def _binary(self, other: Any, op: Callable[[Any, Any], Any], reflected: bool = False) -> TimeSeries:
        if isinstance(other, TimeSeries):
            common, left_pos, right_pos = self._index.align_positions(other.index)
            if len(common) == 0:
                logger.debug("Arithmetic on disjoint indices yields an empty series")
            left = self._data[left_pos]
            right = other._data[right_pos]
            lw, rw = left.shape[1], right.shape[1]
            if lw != rw and 1 not in (lw, rw):
                raise EShapeMismatch(
                    "Operands have incompatible column counts",
                    context={"left": lw, "right": rw},
                )
            columns = self._columns if lw >= rw else other._columns
            with np.errstate(divide="ignore", invalid="ignore"):
                data = op(left, right)
            return self._derive(index=common, data=np.asarray(data, dtype=np.float64), columns=columns)

        if isinstance(other, numbers.Number) and not isinstance(other, bool):
            with np.errstate(divide="ignore", invalid="ignore"):
                data = op(other, self._data) if reflected else op(self._data, other)
            return self._derive(data=np.asarray(data, dtype=np.float64))
        return NotImplemented

    def __add__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.add)

    def __radd__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.sub)

    def __rsub__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.mul)

    def __rmul__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other: Any) -> TimeSeries:
        return self._binary(other, operator.truediv, reflected=True)

    def __neg__(self) -> TimeSeries:
        return self._derive(data=-self._data)

    def __abs__(self) -> TimeSeries:
        return self._derive(data=np.abs(self._data))


# ---------------------------
# Functional surface
# ---------------------------


def make_series(
    values: Any,
    index: Any,
    attributes: Mapping[str, Any] | None = None,
    *,
    name: str | None = None,
    columns: Sequence[str] | None = None,
    config: TSFrameConfig | None = None,
) -> TimeSeries:
    """Build a TimeSeries from values and a matching index.

    Args:
        values: 1-D or 2-D numeric data, one row per index entry
        index: Calendar values (dates, datetimes, strings, DatetimeIndex)
        attributes: Metadata carried alongside the data, never row aligned
        name: Series name
        columns: Column names (default: ``x`` or ``x1..xn``)
        config: Time zone and ordering policy

    Returns:
        New TimeSeries

    Raises:
        EShapeMismatch: If values and index lengths disagree
        EDuplicateTimePoint: If the index repeats an instant
        EUnsortedIndex: If the index is out of order and sorting is disabled
    """
    config = config or DEFAULT_CONFIG
    if columns is None:
        if isinstance(values, pd.DataFrame):
            columns = [str(c) for c in values.columns]
        elif isinstance(values, pd.Series) and isinstance(values.name, str):
            columns = [values.name]
    block = _as_block(values)
    time_index, order = TimeIndex.build(index, config)
    if block.shape[0] != len(time_index):
        raise EShapeMismatch(
            "Values and index have different lengths",
            context={"rows": block.shape[0], "index_length": len(time_index)},
        )
    if order is not None:
        block = block[order]
    if columns is None:
        columns = _default_columns(block.shape[1], config.default_column)
    return TimeSeries(time_index, block, columns, attrs=attributes, name=name)


def core_data(series: TimeSeries) -> np.ndarray:
    """Numeric block of a series (a copy)."""
    return series.core_data()


def index_of(series: TimeSeries) -> TimeIndex:
    """Time index of a series."""
    return series.index


def subset(series: TimeSeries, selector: Any) -> TimeSeries:
    """Select rows by range string, positions, boolean mask or time points.

    Matching rows keep their original order.
    """
    return series[selector]


def bind_rows(*series: TimeSeries) -> TimeSeries:
    """Append the rows of several same-columned series.

    The result index is sorted; metadata comes from the first operand.

    Raises:
        EShapeMismatch: If column names differ
        EDuplicateTimePoint: If operands share an instant
    """
    if not series:
        raise EShapeMismatch("bind_rows needs at least one series")
    first = series[0]
    for other in series[1:]:
        if other.columns != first.columns:
            raise EShapeMismatch(
                "Cannot bind series with different columns",
                context={"expected": list(first.columns), "got": list(other.columns)},
            )

    stamps = np.concatenate([s.index.tz_convert(first.tz).asi8() for s in series])
    data = np.concatenate([s.core_data() for s in series], axis=0)
    order = np.argsort(stamps, kind="stable")
    values = pd.DatetimeIndex(stamps[order].astype("datetime64[ns]")).tz_localize("UTC").tz_convert(first.tz)
    if values.has_duplicates:
        raise EDuplicateTimePoint(
            "Series overlap in time",
            context={"time_point": str(values[values.duplicated()][0])},
        )
    index = TimeIndex(values)
    return TimeSeries(index, data[order], first.columns, attrs=first.attrs, name=first.name)
