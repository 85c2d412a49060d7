"""Pydantic models for allocation records and the derived dashboard views.

`AllocationRecord` coerces the loosely typed text coming out of a CSV parser;
the remaining models describe outputs that are handed to rendering and export
layers as plain, serializable records.
"""

from __future__ import annotations

import math
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]
GroupKey = Union[str, int, float, tuple[Any, ...], None]

INT64_LIMIT = 2**63


def coerce_quantity(value: Any) -> Number:
    """Parse a unit/gap quantity, returning 0 for missing or invalid input.

    Integral values within the int64 range are returned as `int` so that unit
    counts stay usable as distribution keys; larger values stay `float`.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    if not math.isfinite(number):
        return 0
    if number.is_integer() and abs(number) < INT64_LIMIT:
        return int(number)
    return number


class AllocationRecord(BaseModel):
    """One allocation row: units sent to a location for a product, plus backlog.

    Attributes:
        product_id: Product identifier.
        location_id: Store/location identifier.
        units: Allocated units (invalid or missing parses to 0).
        gap: Backlog/unfulfilled units (same parsing rule).
    """
    model_config = ConfigDict(extra="ignore", frozen=True)
    product_id: str = ""
    location_id: str = ""
    units: Number = 0
    gap: Number = 0

    @field_validator("product_id", "location_id", mode="before")
    @classmethod
    def _text_id(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("units", "gap", mode="before")
    @classmethod
    def _quantity(cls, v: Any) -> Number:
        return coerce_quantity(v)


class GroupTotal(BaseModel):
    """Aggregated total for one grouping key."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    key: GroupKey
    total: Number


class SummaryStatistics(BaseModel):
    """Scalar KPIs computed once per dataset."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    total_units: Number
    store_count: int = Field(..., ge=0)
    product_count: int = Field(..., ge=0)
    avg_per_store: float
    median_per_store: float
    avg_per_product: float
    median_per_product: float
    nonzero_pair_count: int = Field(..., ge=0)
    avg_gap: float


class GapRow(BaseModel):
    """Per-product backlog with the share of demand covered by units."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    product: GroupKey
    units: Number
    gap: Number
    fill_percent: float
