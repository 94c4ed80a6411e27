"""Ordered time index.

A ``TimeIndex`` is an immutable, strictly increasing sequence of canonical
time points backed by a tz-aware nanosecond ``pd.DatetimeIndex``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np
import pandas as pd

from tsframe.core.config import DEFAULT_CONFIG, TSFrameConfig
from tsframe.core.errors import EDuplicateTimePoint, EInvalidSelector, EUnsortedIndex
from tsframe.time import to_timepoint, to_timepoints

logger = logging.getLogger(__name__)


class TimeIndex:
    """Strictly increasing, duplicate-free sequence of time points.

    Examples:
        >>> idx = TimeIndex.from_values(["2024-01-01", "2024-01-02"])
        >>> len(idx)
        2
        >>> idx.locate("2024-01-02")
        1
    """

    __slots__ = ("_values",)

    def __init__(self, values: pd.DatetimeIndex) -> None:
        # Trusted constructor; callers must pass a canonical, validated index.
        self._values = values

    @classmethod
    def from_values(
        cls,
        values: Iterable[Any],
        config: TSFrameConfig | None = None,
    ) -> TimeIndex:
        """Build an index from any sequence of calendar values.

        Args:
            values: Dates, datetimes, strings or a DatetimeIndex
            config: Controls the canonical time zone and sorting policy

        Returns:
            New TimeIndex

        Raises:
            EDuplicateTimePoint: If two values denote the same instant
            EUnsortedIndex: If values are out of order and sorting is disabled
        """
        return cls.build(values, config)[0]

    @classmethod
    def build(
        cls,
        values: Iterable[Any],
        config: TSFrameConfig | None = None,
    ) -> tuple[TimeIndex, np.ndarray | None]:
        """Like from_values, also returning the sort permutation applied (or None)."""
        config = config or DEFAULT_CONFIG
        if isinstance(values, TimeIndex):
            return values.tz_convert(config.tz), None
        points = to_timepoints(values, tz=config.tz)

        if points.has_duplicates:
            dupes = points[points.duplicated()].unique()
            raise EDuplicateTimePoint(
                f"Index contains {len(dupes)} duplicate time point(s)",
                context={"duplicates": [str(ts) for ts in dupes[:5]]},
            )

        if not points.is_monotonic_increasing:
            if not config.sort_index:
                diffs = np.diff(points.asi8)
                first_bad = int(np.argmax(diffs < 0)) + 1
                raise EUnsortedIndex(
                    "Index values are not in ascending order",
                    context={"position": first_bad, "value": str(points[first_bad])},
                )
            logger.warning("Sorting %d out-of-order index values", len(points))
            order = np.argsort(points.asi8, kind="stable")
            return cls(points[order]), order

        return cls(points), None

    @classmethod
    def empty(cls, tz: str = "UTC") -> TimeIndex:
        return cls(pd.DatetimeIndex([], tz=tz).as_unit("ns"))

    # -- sequence protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[pd.Timestamp]:
        return iter(self._values)

    def __getitem__(self, position: int) -> pd.Timestamp:
        return self._values[position]

    def __contains__(self, value: Any) -> bool:
        try:
            return self.locate(value) is not None
        except EInvalidSelector:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeIndex):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if len(self) == 0:
            return f"TimeIndex([], tz={self.tz})"
        return f"TimeIndex({len(self)} points, {self[0]} .. {self[-1]})"

    # -- properties --------------------------------------------------------

    @property
    def tz(self) -> str:
        return str(self._values.tz)

    @property
    def start(self) -> pd.Timestamp | None:
        return self._values[0] if len(self) else None

    @property
    def end(self) -> pd.Timestamp | None:
        return self._values[-1] if len(self) else None

    def to_pandas(self) -> pd.DatetimeIndex:
        """Return the backing DatetimeIndex."""
        return self._values

    def asi8(self) -> np.ndarray:
        """Nanoseconds since the epoch for each point."""
        return self._values.asi8

    # -- lookup ------------------------------------------------------------

    def locate(self, value: Any) -> int | None:
        """Binary-search a time point; return its position or None."""
        ts = to_timepoint(value, tz=self.tz)
        pos = int(self._values.searchsorted(ts, side="left"))
        if pos < len(self) and self._values[pos] == ts:
            return pos
        return None

    def slice_bounds(
        self,
        start: pd.Timestamp | None,
        stop: pd.Timestamp | None,
    ) -> tuple[int, int]:
        """Positions ``(i, j)`` such that ``self[i:j]`` lies in ``[start, stop)``."""
        i = 0 if start is None else int(self._values.searchsorted(start, side="left"))
        j = len(self) if stop is None else int(self._values.searchsorted(stop, side="left"))
        return i, max(i, j)

    def positions_of(self, values: Iterable[Any]) -> np.ndarray:
        """Sorted, unique positions of those values present in the index."""
        found = {pos for pos in (self.locate(v) for v in values) if pos is not None}
        return np.array(sorted(found), dtype=np.intp)

    # -- derivation --------------------------------------------------------

    def take(self, positions: np.ndarray | slice) -> TimeIndex:
        return TimeIndex(self._values[positions])

    def intersection(self, other: TimeIndex) -> TimeIndex:
        common = self._values.intersection(other.tz_convert(self.tz).to_pandas(), sort=True)
        return TimeIndex(common.as_unit("ns"))

    def union(self, other: TimeIndex) -> TimeIndex:
        merged = self._values.union(other.tz_convert(self.tz).to_pandas(), sort=True)
        return TimeIndex(merged.as_unit("ns"))

    def equals(self, other: TimeIndex) -> bool:
        return len(self) == len(other) and bool(np.array_equal(self.asi8(), other.asi8()))

    def tz_convert(self, tz: str) -> TimeIndex:
        if tz == self.tz:
            return self
        return TimeIndex(self._values.tz_convert(tz))

    def align_positions(self, other: TimeIndex) -> tuple[TimeIndex, np.ndarray, np.ndarray]:
        """Shared points plus their positions in ``self`` and ``other``."""
        _, left, right = np.intersect1d(self.asi8(), other.asi8(), assume_unique=True, return_indices=True)
        return self.take(left), left.astype(np.intp), right.astype(np.intp)

    def reindex_positions(self, target: TimeIndex) -> np.ndarray:
        """Position in ``self`` of each point of ``target``, -1 where absent."""
        own = self.asi8()
        wanted = target.asi8()
        if len(own) == 0:
            return np.full(len(wanted), -1, dtype=np.intp)
        pos = np.minimum(np.searchsorted(own, wanted, side="left"), len(own) - 1)
        return np.where(own[pos] == wanted, pos, -1).astype(np.intp)
