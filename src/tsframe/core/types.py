"""Shared type aliases and sentinels."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Union

import numpy as np
import pandas as pd

MISSING: float = float("nan")
"""Missing-value sentinel stored in the data block."""

TimeLike = Union[str, dt.date, dt.datetime, np.datetime64, pd.Timestamp]

JoinType = Literal["inner", "outer", "left", "right"]
FillRule = Literal["missing", "locf", "nocb", "interpolate"]

DurationUnit = Literal["seconds", "minutes", "hours", "days", "weeks", "months", "quarters", "years"]
