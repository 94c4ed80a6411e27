"""Time alignment and merge utilities.

Provides time zone unification, intersection alignment for arithmetic,
and join-based merging of several series with a fill policy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import reduce
from typing import Any

import numpy as np
from pydantic import ValidationError

from tsframe.core.config import DEFAULT_CONFIG, TSFrameConfig
from tsframe.core.errors import EIncompatibleMerge
from tsframe.core.specs import MergeSpec
from tsframe.series.imputation import interpolate, locf
from tsframe.series.index import TimeIndex
from tsframe.series.store import TimeSeries

logger = logging.getLogger(__name__)


def align_timezone(
    series: tuple[TimeSeries, ...] | list[TimeSeries],
    target_tz: str | None = None,
) -> list[TimeSeries]:
    """Unify time zones across several series.

    Instants are preserved; only their wall-clock representation changes.

    Args:
        series: Series to convert
        target_tz: Target time zone (default: the first series' zone)

    Returns:
        Series expressed in the target time zone
    """
    if not series:
        return []
    tz = target_tz or series[0].tz
    return [s if s.tz == tz else s.with_timezone(tz) for s in series]


def align_intersection(a: TimeSeries, b: TimeSeries) -> tuple[TimeIndex, np.ndarray, np.ndarray]:
    """Shared time points of two series and their row positions in each.

    An empty intersection is not an error; the returned index is empty.
    """
    common, left, right = a.index.align_positions(b.index)
    logger.debug(
        "Aligned %d and %d rows on %d shared time points",
        len(a),
        len(b),
        len(common),
    )
    return common, left, right


def _target_index(operands: list[TimeSeries], join: str) -> TimeIndex:
    indices = [s.index for s in operands]
    if join == "inner":
        return reduce(TimeIndex.intersection, indices)
    if join == "outer":
        return reduce(TimeIndex.union, indices)
    if join == "left":
        return indices[0]
    return indices[-1]


def _source_labels(operands: list[TimeSeries]) -> list[str]:
    """Series name or ``s<k>`` per operand; repeats get their position appended."""
    labels: list[str] = []
    for k, operand in enumerate(operands, start=1):
        base = operand.name or f"s{k}"
        label = base
        suffix = k
        while label in labels:
            label = f"{base}{suffix}"
            suffix += 1
        labels.append(label)
    return labels


_FILL_RULES: dict[str, Callable[[TimeSeries], TimeSeries]] = {
    "locf": locf,
    "nocb": lambda s: locf(s, from_last=True),
    "interpolate": interpolate,
}


def merge_series(
    *series: TimeSeries,
    join: str | None = None,
    fill: Any = None,
    config: TSFrameConfig | None = None,
) -> TimeSeries:
    """Merge several series column-wise on their time indices.

    Args:
        *series: Two or more series; the first is the base for a left join,
            the last for a right join
        join: "inner", "outer" (alias "full"), "left" or "right"
            (default: ``config.default_join``)
        fill: Value for cells an operand has no observation for. A number,
            None / "missing" to leave them missing, or one of the rules
            "locf", "nocb", "interpolate". Cells that were already missing
            in an operand are never touched.
        config: Supplies the default join and the column separator

    Returns:
        New TimeSeries whose columns are ``<source><sep><column>`` for each
        operand in order, where source is the series name or ``s<k>``;
        a name already used by an earlier operand gets its position appended

    Raises:
        EIncompatibleMerge: If fewer than two series are given, the join or
            fill is not recognised, or qualified column names still collide
            (a column name containing the separator)
    """
    config = config or DEFAULT_CONFIG
    if len(series) < 2:
        raise EIncompatibleMerge(
            "merge_series needs at least two series",
            context={"operands": len(series)},
        )
    try:
        spec = MergeSpec(join=config.resolve_join(join), fill=fill, column_sep=config.column_sep)
    except ValidationError as exc:
        raise EIncompatibleMerge(
            "Invalid merge options",
            context={"join": join, "fill": repr(fill), "errors": exc.errors(include_url=False)},
        ) from exc

    operands = align_timezone(series)
    target = _target_index(operands, spec.join)

    columns: list[str] = []
    blocks: list[np.ndarray] = []
    gaps: list[np.ndarray] = []
    for operand, source in zip(operands, _source_labels(operands)):
        pos = operand.index.reindex_positions(target)
        present = pos >= 0
        block = np.full((len(target), operand.shape[1]), np.nan)
        block[present] = operand.core_data()[pos[present]]
        blocks.append(block)
        gaps.append(np.repeat(~present[:, None], operand.shape[1], axis=1))
        columns.extend(f"{source}{spec.column_sep}{col}" for col in operand.columns)

    if len(set(columns)) != len(columns):
        raise EIncompatibleMerge(
            "Merged column names collide",
            context={"columns": columns},
            fix_hint="Give each operand a distinct name with series.with_name(...)",
        )

    data = np.hstack(blocks) if blocks else np.empty((len(target), 0))
    gap = np.hstack(gaps) if gaps else np.zeros_like(data, dtype=bool)
    merged = TimeSeries(target, data, columns, attrs=operands[0].attrs)
    logger.debug(
        "Merged %d series with %s join into %d rows x %d columns (%d introduced gaps)",
        len(operands),
        spec.join,
        merged.shape[0],
        merged.shape[1],
        int(gap.sum()),
    )
    return _apply_fill(merged, gap, spec)


def _apply_fill(merged: TimeSeries, gap: np.ndarray, spec: MergeSpec) -> TimeSeries:
    if spec.leaves_missing or not gap.any():
        return merged
    data = merged.core_data()
    if spec.fill_rule is None:
        data[gap] = float(spec.fill)
    else:
        filled = _FILL_RULES[spec.fill_rule](merged).core_data()
        data = np.where(gap, filled, data)
    return TimeSeries(merged.index, data, merged.columns, attrs=merged.attrs, name=merged.name)
