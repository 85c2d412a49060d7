"""Derived dashboard views computed from a full allocation Dataset.

`compute_views` runs the whole derivation in one pass over the Dataset:

1. location totals, 2. product totals, 3. product/location pair totals,
4. the unit-count distribution (ascending by unit value), 5. summary
statistics, 6. zero-unit products, 7. fill-rate gap analysis (descending by
gap).

Top-N and sort choices are not applied here; see `selection`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import pandas as pd

from allocation_dashboard.aggregate.grouping import group_by_count, group_by_sum, to_partitions
from allocation_dashboard.aggregate.selection import sort_totals
from allocation_dashboard.aggregate.stats import mean, median
from allocation_dashboard.models import GapRow, GroupTotal, SummaryStatistics

log = logging.getLogger(__name__)

DEFAULT_PAIR_SEPARATOR = "__"


class EmptyDatasetError(ValueError):
    """Raised when views are requested for a Dataset with no records."""


@dataclass(frozen=True)
class AllocationViews:
    """All views derived from one Dataset.

    Attributes:
        location_totals: Units per location, first-seen order.
        product_totals: Units per product, first-seen order.
        pair_totals: Units per product/location pair, first-seen order.
        units_distribution: Number of rows per unit value, ascending by value.
        summary: Scalar KPIs.
        zero_unit_products: Products whose aggregated units are exactly 0.
        gap_analysis: Per-product gap and fill percent, largest gap first.
    """
    location_totals: list[GroupTotal]
    product_totals: list[GroupTotal]
    pair_totals: list[GroupTotal]
    units_distribution: list[GroupTotal]
    summary: SummaryStatistics
    zero_unit_products: list[Any]
    gap_analysis: list[GapRow]


def fill_percent(units: float, gap: float) -> float:
    """Share of demand (`units + gap`) covered by `units`, in percent.

    Rounded to one decimal; 0.0 when there is no demand at all.
    """
    demand = units + gap
    if demand == 0:
        return 0.0
    return round(units / demand * 100, 1)


def format_fill_percent(value: float) -> str:
    """Display form of a fill percent, e.g. `58.8`."""
    return f"{value:.1f}"


def separator_collides(frame: pd.DataFrame, separator: str) -> bool:
    """True when any product or location id contains `separator`."""
    ids = pd.concat([frame["product_id"], frame["location_id"]]).astype(str)
    return bool(ids.str.contains(separator, regex=False).any())


def pair_totals(frame: Any, separator: str = DEFAULT_PAIR_SEPARATOR) -> list[GroupTotal]:
    """Units per (product, location) pair, keyed `product + separator + location`.

    Grouping happens on both columns, so ids that contain `separator` never
    merge distinct pairs; only the rendered key can become ambiguous.
    """
    out = []
    for g in group_by_sum(frame, ["product_id", "location_id"]):
        product, location = g.key
        out.append(GroupTotal(key=f"{product}{separator}{location}", total=g.total))
    return out


def units_distribution(frame: Any) -> list[GroupTotal]:
    """Number of rows per unit value, ascending by unit value (not by count)."""
    return sorted(group_by_count(frame, "units"), key=lambda g: g.key)


def summary_statistics(
    frame: pd.DataFrame,
    location_totals: list[GroupTotal],
    product_totals: list[GroupTotal],
    pairs: list[GroupTotal],
) -> SummaryStatistics:
    """Compute the KPI bundle from the Dataset and its base groupings."""
    total_units = frame["units"].sum(skipna=False)
    store_totals = [g.total for g in location_totals]
    product_unit_totals = [g.total for g in product_totals]

    return SummaryStatistics(
        total_units=total_units.item() if hasattr(total_units, "item") else total_units,
        store_count=len(location_totals),
        product_count=len(product_totals),
        avg_per_store=mean(total_units, len(location_totals)),
        median_per_store=median(store_totals),
        avg_per_product=mean(total_units, len(product_totals)),
        median_per_product=median(product_unit_totals),
        nonzero_pair_count=sum(1 for g in pairs if g.total > 0),
        avg_gap=mean(frame["gap"].fillna(0).sum(), len(frame)),
    )


def zero_unit_products(product_totals: list[GroupTotal]) -> list[Any]:
    """Products present in the Dataset whose units sum to exactly 0."""
    return [g.key for g in product_totals if g.total == 0]


def gap_analysis(frame: Any, product_totals: list[GroupTotal]) -> list[GapRow]:
    """Gap per product with matching units and fill percent, largest gap first.

    Missing gap values count as 0.
    """
    units_by_product = {g.key: g.total for g in product_totals}
    rows = []
    for g in group_by_sum(frame.assign(gap=frame["gap"].fillna(0)), "product_id", value="gap"):
        units = units_by_product.get(g.key, 0)
        rows.append(
            GapRow(
                product=g.key,
                units=units,
                gap=g.total,
                fill_percent=fill_percent(units, g.total),
            )
        )
    return sorted(rows, key=lambda r: r.gap, reverse=True)


def compute_views(
    frame: pd.DataFrame,
    pair_separator: str = DEFAULT_PAIR_SEPARATOR,
    partition_rows: int | None = None,
) -> AllocationViews:
    """Derive every dashboard view from a full Dataset.

    Args:
        frame: Dataset with `product_id`, `location_id`, `units`, `gap`
            columns. It is not modified.
        pair_separator: Text between ids in pair keys.
        partition_rows: When set and the Dataset is larger, groupings run on
            Dask partitions of this many rows.

    Returns:
        `AllocationViews` for the Dataset.

    Raises:
        EmptyDatasetError: if `frame` has no rows.
    """
    if len(frame) == 0:
        raise EmptyDatasetError("cannot compute views for an empty dataset")

    log.info("Computing views for %d allocation rows", len(frame))

    if separator_collides(frame, pair_separator):
        log.warning("Identifiers contain the pair separator %r; pair keys may be ambiguous", pair_separator)

    source: Any = frame
    if partition_rows is not None and len(frame) > partition_rows:
        source = to_partitions(frame, partition_rows)

    locations = group_by_sum(source, "location_id")
    products = group_by_sum(source, "product_id")
    pairs = pair_totals(source, pair_separator)

    return AllocationViews(
        location_totals=locations,
        product_totals=products,
        pair_totals=pairs,
        units_distribution=units_distribution(source),
        summary=summary_statistics(frame, locations, products, pairs),
        zero_unit_products=zero_unit_products(products),
        gap_analysis=gap_analysis(source, products),
    )


# =========================================================
# DRILL-DOWN
# =========================================================

def drill_down(frame: pd.DataFrame, column: str, value: Any, by: str) -> list[GroupTotal]:
    """Units per `by` among the rows where `column == value`, largest first."""
    subset = frame[frame[column] == value]
    return sort_totals(group_by_sum(subset, by), "desc")


def drill_down_location(frame: pd.DataFrame, location_id: Any) -> list[GroupTotal]:
    """Products allocated to one location."""
    return drill_down(frame, "location_id", location_id, by="product_id")


def drill_down_product(frame: pd.DataFrame, product_id: Any) -> list[GroupTotal]:
    """Locations that received one product."""
    return drill_down(frame, "product_id", product_id, by="location_id")
