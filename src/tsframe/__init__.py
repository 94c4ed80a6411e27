"""tsframe - time-indexed numeric series with alignment and imputation.

Input contract:
    A series is a numeric block plus a strictly increasing time index of
    the same length. Dates, datetimes and strings are all converted to
    tz-aware timestamps in one canonical zone (UTC unless configured).

Basic usage:
    >>> from tsframe import make_series, locf, first_n
    >>> s = make_series([1.0, None, 3.0], ["2024-01-01", "2024-01-02", "2024-01-03"])
    >>> locf(s).core_data().ravel().tolist()
    [1.0, 1.0, 3.0]
    >>> len(first_n(s, "2 days"))
    2

Alignment:
    >>> from tsframe import merge_series
    >>> merged = merge_series(a, b, join="outer", fill=0)
    >>> total = a + b  # intersection of both indices
"""

__version__ = "0.3.0"

from tsframe.core.config import DEFAULT_CONFIG, TSFrameConfig
from tsframe.core.errors import (
    EDuplicateTimePoint,
    EIncompatibleMerge,
    EIndexOutOfRange,
    EInvalidSelector,
    EInvalidValue,
    EShapeMismatch,
    EUnsortedIndex,
    TSFrameError,
)
from tsframe.core.types import MISSING
from tsframe.series import (
    TimeIndex,
    TimeSeries,
    align_intersection,
    align_timezone,
    bind_rows,
    core_data,
    diff,
    drop_missing,
    fill_missing,
    first_n,
    index_of,
    interpolate,
    lag,
    last_n,
    locf,
    make_series,
    merge_series,
    subset,
)
from tsframe.time import parse_duration, parse_range

__all__ = [
    "__version__",
    # Construction and access
    "make_series",
    "TimeSeries",
    "TimeIndex",
    "core_data",
    "index_of",
    "subset",
    "bind_rows",
    "MISSING",
    # Alignment
    "merge_series",
    "align_intersection",
    "align_timezone",
    # Windowing
    "first_n",
    "last_n",
    # Imputation
    "locf",
    "interpolate",
    "fill_missing",
    "drop_missing",
    # Shift
    "lag",
    "diff",
    # Parsing
    "parse_range",
    "parse_duration",
    # Config
    "TSFrameConfig",
    "DEFAULT_CONFIG",
    # Errors
    "TSFrameError",
    "EShapeMismatch",
    "EInvalidValue",
    "EIndexOutOfRange",
    "EInvalidSelector",
    "EDuplicateTimePoint",
    "EUnsortedIndex",
    "EIncompatibleMerge",
]
