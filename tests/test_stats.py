from __future__ import annotations

import math

import pytest

from allocation_dashboard.aggregate.stats import mean, median


def test_median_odd_even_and_single() -> None:
    assert median([3, 1, 2]) == 2
    assert median([4, 1, 3, 2]) == 2.5
    assert median([5]) == 5


def test_median_does_not_sort_input_in_place() -> None:
    values = [3, 1, 2]
    median(values)
    assert values == [3, 1, 2]


def test_median_rejects_empty() -> None:
    with pytest.raises(ValueError):
        median([])


def test_mean() -> None:
    assert mean(15, 2) == 7.5
    with pytest.raises(ValueError):
        mean(1, 0)


def test_median_with_nan_is_nan() -> None:
    assert math.isnan(median([1, float("nan"), 3]))
