"""Core error types with rich context.

Every failure raised by tsframe is a ``TSFrameError`` subclass carrying a
stable error code, a context dict and an actionable fix hint.
"""

# ruff: noqa: N818

from __future__ import annotations

from typing import Any


class TSFrameError(Exception):
    """Base exception for all tsframe errors.

    Attributes:
        error_code: Unique error code string for programmatic handling
        message: Human-readable error message
        context: Additional context data for debugging
        fix_hint: Actionable hint for resolving the error
    """

    error_code: str = "E_UNKNOWN"
    fix_hint: str = ""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if fix_hint is not None:
            self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f"(context: {self.context})")
        if self.fix_hint:
            parts.append(f"[hint: {self.fix_hint}]")
        return " ".join(parts)

    def to_agent_dict(self) -> dict[str, Any]:
        """Return a structured dict with error_code, message, fix_hint and context."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "fix_hint": self.fix_hint,
            "context": self.context,
        }


class EShapeMismatch(TSFrameError):
    """Data shape disagrees with the index, a mask, or another operand."""

    error_code = "E_SHAPE_MISMATCH"
    fix_hint = "Make sure values have one row per index entry and masks match the row count"


class EInvalidValue(TSFrameError, ValueError):
    """Cell values cannot be stored as numbers."""

    error_code = "E_INVALID_VALUE"
    fix_hint = "Series hold numeric data; convert or drop non-numeric columns first"


class EIndexOutOfRange(TSFrameError, IndexError):
    """Positional selector beyond the series bounds."""

    error_code = "E_INDEX_OUT_OF_RANGE"
    fix_hint = "Positions must lie in [-len(series), len(series))"


class EInvalidSelector(TSFrameError, ValueError):
    """Malformed range, duration, time point or column selector."""

    error_code = "E_INVALID_SELECTOR"
    fix_hint = "Use forms like '2016', '2016-01/2016-03', '/201601', 'T09:00/T10:00' or '2 weeks'"


class EDuplicateTimePoint(TSFrameError):
    """Index construction found the same instant twice."""

    error_code = "E_DUPLICATE_TIMEPOINT"
    fix_hint = "Drop or aggregate duplicate timestamps before building the series"


class EUnsortedIndex(TSFrameError):
    """Index values are not in ascending order."""

    error_code = "E_UNSORTED_INDEX"
    fix_hint = "Sort the input first, or pass config=TSFrameConfig.lenient() to sort on construction"


class EIncompatibleMerge(TSFrameError):
    """Merge request cannot be satisfied by the supplied operands."""

    error_code = "E_INCOMPATIBLE_MERGE"
    fix_hint = "Pass at least two series and a join of 'inner', 'outer', 'left' or 'right'"


# Error registry for lookup
ERROR_REGISTRY: dict[str, type[TSFrameError]] = {
    cls.error_code: cls
    for cls in (
        EShapeMismatch,
        EInvalidValue,
        EIndexOutOfRange,
        EInvalidSelector,
        EDuplicateTimePoint,
        EUnsortedIndex,
        EIncompatibleMerge,
    )
}


def get_error_class(error_code: str) -> type[TSFrameError]:
    """Get error class by code."""
    return ERROR_REGISTRY.get(error_code, TSFrameError)
