"""Mean/median helpers used by the summary statistics."""
from __future__ import annotations

from typing import Sequence

import numpy as np


def median(values: Sequence[float]) -> float:
    """Return the median of `values` without modifying them.

    Odd length returns the middle element, even length the mean of the two
    central elements. Any NaN value makes the result NaN.

    Raises:
        ValueError: if `values` is empty.
    """
    if len(values) == 0:
        raise ValueError("median() requires at least one value")
    ordered = np.sort(np.asarray(values, dtype=float))
    if np.isnan(ordered).any():
        return float("nan")
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return float((ordered[mid - 1] + ordered[mid]) / 2)


def mean(total: float, count: int) -> float:
    """Return `total / count`.

    Raises:
        ValueError: if `count` is zero.
    """
    if count == 0:
        raise ValueError("mean() requires a nonzero count")
    return float(total / count)
