"""Missing-value imputation.

Every function works column by column and returns a new series; the index
is never changed except by ``drop_missing``.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import pandas as pd

from tsframe.core.errors import EInvalidSelector
from tsframe.series.store import TimeSeries


def locf(
    series: TimeSeries,
    from_last: bool = False,
    max_gap: int | None = None,
) -> TimeSeries:
    """Carry the last observation forward (or the next one backward).

    Args:
        series: Input series
        from_last: Scan in reverse, filling from the following observation
        max_gap: Fill at most this many consecutive missing cells per run

    Returns:
        New TimeSeries; cells with no observation in the scan direction
        stay missing
    """
    if max_gap is not None and max_gap < 1:
        raise EInvalidSelector(f"max_gap must be positive, got {max_gap}")
    frame = pd.DataFrame(series.core_data())
    filled = frame.bfill(limit=max_gap) if from_last else frame.ffill(limit=max_gap)
    return series._derive(data=filled.to_numpy(dtype=np.float64))


def interpolate(series: TimeSeries) -> TimeSeries:
    """Fill interior gaps linearly in elapsed time.

    A missing cell at time t between observations (t0, v0) and (t1, v1)
    becomes ``v0 + (v1 - v0) * (t - t0) / (t1 - t0)``. Leading and trailing
    runs are left missing.
    """
    if len(series) == 0:
        return series.copy()
    frame = pd.DataFrame(series.core_data(), index=series.index.to_pandas())
    filled = frame.interpolate(method="time", limit_area="inside")
    return series._derive(data=filled.to_numpy(dtype=np.float64))


def fill_missing(series: TimeSeries, value: float) -> TimeSeries:
    """Replace every missing cell with a constant."""
    data = series.core_data()
    data[np.isnan(data)] = float(value)
    return series._derive(data=data)


def drop_missing(series: TimeSeries, how: Literal["any", "all"] = "any") -> TimeSeries:
    """Remove rows holding missing cells.

    Args:
        series: Input series
        how: "any" drops rows with at least one missing cell, "all" only
            rows where every cell is missing
    """
    missing = series.is_missing()
    if how == "any":
        drop = missing.any(axis=1)
    elif how == "all":
        drop = missing.all(axis=1) if series.shape[1] else np.zeros(len(series), dtype=bool)
    else:
        raise EInvalidSelector(f"how must be 'any' or 'all', got {how!r}")
    return series.take_rows(np.flatnonzero(~drop))
