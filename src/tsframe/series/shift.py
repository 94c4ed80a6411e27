"""Lag, lead and differencing."""

from __future__ import annotations

import numbers

import numpy as np

from tsframe.core.errors import EInvalidSelector
from tsframe.series.store import TimeSeries


def _shift_block(block: np.ndarray, k: int) -> np.ndarray:
    """Row i of the result holds row i - k of ``block``; vacated rows are NaN."""
    out = np.full_like(block, np.nan)
    n = block.shape[0]
    if k == 0:
        out[:] = block
    elif 0 < k < n:
        out[k:] = block[:-k]
    elif -n < k < 0:
        out[:k] = block[-k:]
    return out


def _check_steps(value: object, label: str, minimum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise EInvalidSelector(f"{label} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise EInvalidSelector(f"{label} must be at least {minimum}, got {value}")
    return int(value)


def lag(series: TimeSeries, k: int = 1) -> TimeSeries:
    """Shift values against the index.

    Positive ``k`` lags (row i takes row i - k), negative ``k`` leads.
    Rows with no source inside the series become missing.
    """
    k = _check_steps(k, "k")
    return series._derive(data=_shift_block(series.core_data(), k))


def diff(
    series: TimeSeries,
    lag: int = 1,
    differences: int = 1,
    log: bool = False,
) -> TimeSeries:
    """Successive differences ``x[i] - x[i - lag]``, applied ``differences`` times.

    The first ``lag * differences`` rows are missing. With ``log=True`` the
    natural log of the data is differenced.
    """
    lag = _check_steps(lag, "lag", minimum=1)
    differences = _check_steps(differences, "differences", minimum=1)
    data = series.core_data()
    if log:
        with np.errstate(divide="ignore", invalid="ignore"):
            data = np.log(data)
    for _ in range(differences):
        data = data - _shift_block(data, lag)
    return series._derive(data=data)
