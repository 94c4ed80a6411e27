"""Pydantic specs for operation parameters.

Parameters that arrive as loosely typed user input (merge options,
duration strings) are validated into these frozen models before any
work is done.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

from tsframe.core.types import DurationUnit, FillRule, JoinType


class BaseSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class MergeSpec(BaseSpec):
    """Validated options for merge_series."""

    join: JoinType = "outer"
    # A number fills with that constant, a FillRule applies an imputation rule.
    # Strict: numeric strings such as "0" are rejected
    fill: Union[StrictFloat, StrictInt, FillRule, None] = None
    column_sep: str = Field(".", min_length=1)

    @field_validator("fill", mode="before")
    @classmethod
    def _reject_bool(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("fill must be a number, a fill rule or None, not a bool")
        return value

    @property
    def fill_rule(self) -> str | None:
        """Name of the fill rule, or None for constant fills."""
        if isinstance(self.fill, str):
            return self.fill
        return None

    @property
    def leaves_missing(self) -> bool:
        return self.fill is None or self.fill == "missing"


class Duration(BaseSpec):
    """Parsed ``"<amount> <unit>"`` window length."""

    amount: int
    unit: DurationUnit

    @property
    def period_freq(self) -> str:
        """pandas period alias used to bucket rows by calendar period."""
        return _PERIOD_FREQ[self.unit]


_PERIOD_FREQ: dict[str, str] = {
    "seconds": "s",
    "minutes": "min",
    "hours": "h",
    "days": "D",
    # Weeks run Monday through Sunday
    "weeks": "W-SUN",
    "months": "M",
    "quarters": "Q",
    "years": "Y",
}
