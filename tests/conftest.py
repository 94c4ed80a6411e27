"""Shared fixtures."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsframe import make_series


@pytest.fixture
def daily_values() -> np.ndarray:
    return np.round(np.linspace(10.0, 29.0, 20) + np.sin(np.arange(20)), 4)


@pytest.fixture
def daily_series(daily_values):
    """Twenty consecutive days starting 1922-01-01 (a Sunday)."""
    index = pd.date_range("1922-01-01", periods=20, freq="D")
    return make_series(daily_values, index, attributes={"source": "fixture"}, name="x")
