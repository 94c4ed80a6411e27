"""Core module - configuration, errors and parameter specs."""

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
from tsframe.core.specs import Duration, MergeSpec
from tsframe.core.types import MISSING

__all__ = [
    # Config
    "TSFrameConfig",
    "DEFAULT_CONFIG",
    # Specs
    "MergeSpec",
    "Duration",
    # Sentinel
    "MISSING",
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
