"""Series module for tsframe.

Provides the time index, the series store and the operations on it.
"""

from .alignment import align_intersection, align_timezone, merge_series
from .imputation import drop_missing, fill_missing, interpolate, locf
from .index import TimeIndex
from .shift import diff, lag
from .store import TimeSeries, bind_rows, core_data, index_of, make_series, subset
from .windowing import first_n, last_n

__all__ = [
    # Index and store
    "TimeIndex",
    "TimeSeries",
    "make_series",
    "core_data",
    "index_of",
    "subset",
    "bind_rows",
    # Alignment
    "align_timezone",
    "align_intersection",
    "merge_series",
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
]
