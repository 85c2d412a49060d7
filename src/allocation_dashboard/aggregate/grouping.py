"""Grouping primitives: per-key sums and counts in first-seen key order.

Both functions accept a pandas DataFrame or a Dask DataFrame. Dask input is
reduced partition by partition into partial per-key totals which are then
merged by key, so the result matches the pandas path exactly (including key
order).
"""
from __future__ import annotations

import logging
from typing import Any, Sequence, Union, cast

import numpy as np
import pandas as pd
import dask.dataframe as dd
from dask import delayed, compute  # type: ignore[attr-defined]

from allocation_dashboard.models import GroupTotal

log = logging.getLogger(__name__)

Key = Union[str, Sequence[str]]


def _to_python(v: Any) -> Any:
    """Unwrap numpy scalars (and tuples of them) into plain Python values."""
    if isinstance(v, tuple):
        return tuple(_to_python(x) for x in v)
    if isinstance(v, np.generic):
        return v.item()
    return v


def _key_columns(key: Key) -> str | list[str]:
    if isinstance(key, str):
        return key
    return list(key)


def _series_to_totals(series: pd.Series) -> list[GroupTotal]:
    return [GroupTotal(key=_to_python(k), total=_to_python(t)) for k, t in series.items()]


def _sum_keeping_nan(grouped: Any) -> pd.Series:
    """Sum a SeriesGroupBy, returning NaN for any group holding a NaN value.

    `GroupBy.sum()` skips NaN; a malformed value must not pass for 0.
    """
    sums = grouped.sum()
    has_nan = grouped.size() != grouped.count()
    if has_nan.any():
        sums = sums.astype(float).mask(has_nan)
    return sums


def _partial_sum(pdf: pd.DataFrame, key: str | list[str], value: str) -> pd.Series:
    """Per-partition sum; runs inside a delayed task."""
    return _sum_keeping_nan(pdf.groupby(key, sort=False, dropna=False)[value])


def _partial_count(pdf: pd.DataFrame, key: str | list[str]) -> pd.Series:
    """Per-partition row count; runs inside a delayed task."""
    return pdf.groupby(key, sort=False, dropna=False).size()


def _merge_partials(partials: Sequence[pd.Series]) -> pd.Series:
    """Merge partial per-key totals, keeping global first-seen key order.

    Partials arrive in partition order and each is already in first-seen
    order, so a stable groupby over their concatenation preserves it. A key
    with a NaN partial total stays NaN.
    """
    non_empty = [p for p in partials if len(p)]
    if not non_empty:
        return pd.Series(dtype="int64")
    stacked = pd.concat(non_empty)
    return _sum_keeping_nan(
        stacked.groupby(level=list(range(stacked.index.nlevels)), sort=False, dropna=False)
    )


def _reduce_partitions(ddf: Any, func: Any, *args: Any) -> pd.Series:
    delayed_parts = ddf.to_delayed()
    tasks = [delayed(func)(part, *args) for part in delayed_parts]
    # `compute` is untyped in our environment; cast to Any before calling
    partials = cast(Any, compute)(*tasks)
    log.debug("Merging %d partial groupings", len(partials))
    return _merge_partials(partials)


def group_by_sum(frame: Any, key: Key, value: str = "units") -> list[GroupTotal]:
    """Sum `value` per distinct `key`.

    Args:
        frame: pandas or Dask DataFrame of allocation records.
        key: Column name, or list of column names (yielding tuple keys).
        value: Numeric column to accumulate (defaults to `units`).

    Returns:
        List of `GroupTotal` in order of each key's first occurrence. Empty
        input returns an empty list. Duplicate keys are summed.
    """
    cols = _key_columns(key)
    if isinstance(frame, dd.DataFrame):
        return _series_to_totals(_reduce_partitions(frame, _partial_sum, cols, value))
    if len(frame) == 0:
        return []
    return _series_to_totals(_partial_sum(frame, cols, value))


def group_by_count(frame: Any, key: Key) -> list[GroupTotal]:
    """Count records per distinct `key`.

    Same ordering and input rules as `group_by_sum`; `total` is the number
    of records sharing the key.
    """
    cols = _key_columns(key)
    if isinstance(frame, dd.DataFrame):
        return _series_to_totals(_reduce_partitions(frame, _partial_count, cols))
    if len(frame) == 0:
        return []
    return _series_to_totals(_partial_count(frame, cols))


def to_partitions(pdf: pd.DataFrame, partition_rows: int) -> Any:
    """Wrap a pandas Dataset in a Dask DataFrame of roughly `partition_rows` rows each."""
    nparts = max(1, -(-len(pdf) // partition_rows))
    log.info("Split %d rows into %d Dask partitions", len(pdf), nparts)
    dd_mod = cast(Any, dd)
    return dd_mod.from_pandas(pdf, npartitions=nparts, sort=False)
