"""Library configuration.

A single frozen dataclass gathers the knobs that influence index
construction and merging. Operations take an optional ``config`` and fall
back to ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import get_args

import pandas as pd

from tsframe.core.types import JoinType

_JOIN_ALIASES = {"full": "outer"}


@dataclass(frozen=True)
class TSFrameConfig:
    """Configuration for series construction and alignment.

    Args:
        tz: Canonical time zone; naive inputs are localised to it
        sort_index: Sort out-of-order input instead of failing
        column_sep: Separator between source and column name in merges
        default_join: Join used by merge_series when none is given
        default_column: Column name used for single-column series
    """

    tz: str = "UTC"
    sort_index: bool = False
    column_sep: str = "."
    default_join: str = "outer"
    default_column: str = "x"

    def __post_init__(self) -> None:
        try:
            pd.Timestamp("2000-01-01", tz=self.tz)
        except Exception as exc:
            raise ValueError(f"Unknown time zone: {self.tz!r}") from exc
        if not self.column_sep:
            raise ValueError("column_sep must be a non-empty string")
        if not self.default_column:
            raise ValueError("default_column must be a non-empty string")
        join = _JOIN_ALIASES.get(self.default_join, self.default_join)
        if join not in get_args(JoinType):
            raise ValueError(f"default_join must be one of {get_args(JoinType)}, got {self.default_join!r}")
        object.__setattr__(self, "default_join", join)

    @classmethod
    def strict(cls, tz: str = "UTC") -> TSFrameConfig:
        """Strict preset - out-of-order input fails."""
        return cls(tz=tz, sort_index=False)

    @classmethod
    def lenient(cls, tz: str = "UTC") -> TSFrameConfig:
        """Lenient preset - out-of-order input is sorted on construction."""
        return cls(tz=tz, sort_index=True)

    def resolve_join(self, join: str | None) -> str:
        """Return the canonical join name, applying the default and aliases."""
        if join is None:
            return self.default_join
        return _JOIN_ALIASES.get(join, join)


DEFAULT_CONFIG = TSFrameConfig()
