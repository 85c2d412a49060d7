"""Dashboard session: the current Dataset plus memoized derived views.

A session holds one Dataset at a time. Every load or reset bumps a version
token; `views` runs the full aggregation at most once per version, while
sort/limit changes and drill-downs only slice or regroup on demand.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from allocation_dashboard.aggregate.selection import DESC, select_top, take
from allocation_dashboard.aggregate.views import (
    AllocationViews,
    compute_views,
    drill_down_location,
    drill_down_product,
)
from allocation_dashboard.config import Settings, get_settings
from allocation_dashboard.export.csv_export import write_csv, zero_unit_rows
from allocation_dashboard.ingest.parse_csv import CsvParseError, read_allocation_csv
from allocation_dashboard.models import GapRow, GroupTotal

log = logging.getLogger(__name__)

_CONFIGURED = object()


class DashboardSession:
    """Owns the loaded Dataset and caches the views derived from it."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.frame: pd.DataFrame | None = None
        self.error: str = ""
        self.version = 0
        self.aggregations = 0
        self._cache: tuple[int, AllocationViews | None] | None = None

    # --------------------------------------------------
    # Dataset lifecycle
    # --------------------------------------------------
    def load_frame(self, frame: pd.DataFrame) -> None:
        """Replace the Dataset; cached views are invalidated."""
        self.frame = frame
        self.error = ""
        self.version += 1
        log.info("Loaded dataset version %d (%d rows)", self.version, len(frame))

    def load_csv(self, path: Path | str) -> bool:
        """Parse `path` and replace the Dataset.

        On a parse failure the previous Dataset is kept and `error` holds the
        message.

        Returns:
            True when the file was loaded.
        """
        try:
            frame = read_allocation_csv(path)
        except CsvParseError as e:
            self.error = str(e)
            return False
        self.load_frame(frame)
        return True

    def reset(self) -> None:
        """Drop the Dataset and return to the initial state."""
        self.frame = None
        self.error = ""
        self.version += 1

    @property
    def views(self) -> AllocationViews | None:
        """Views for the current Dataset, or None when nothing is loaded."""
        if self._cache is not None and self._cache[0] == self.version:
            return self._cache[1]

        views = None
        if self.frame is not None and len(self.frame) > 0:
            views = compute_views(
                self.frame,
                pair_separator=self.settings.pair_separator,
                partition_rows=self.settings.partition_rows,
            )
            self.aggregations += 1
        self._cache = (self.version, views)
        return views

    def require_views(self) -> AllocationViews:
        """Views for the current Dataset.

        Raises:
            LookupError: if no non-empty Dataset is loaded.
        """
        views = self.views
        if views is None:
            raise LookupError("no dataset loaded")
        return views

    # --------------------------------------------------
    # Presentation slices
    # --------------------------------------------------
    def top_locations(self, direction: str = DESC, limit: int | None = None) -> list[GroupTotal]:
        """Location totals sorted by `direction` and cut to `limit`."""
        return select_top(self.require_views().location_totals, direction, limit)

    def top_products(self, direction: str = DESC, limit: int | None = None) -> list[GroupTotal]:
        """Product totals sorted by `direction` and cut to `limit`."""
        return select_top(self.require_views().product_totals, direction, limit)

    def top_distribution(self, limit: int | None = None) -> list[GroupTotal]:
        """First `limit` buckets of the unit distribution (kept in unit order)."""
        return take(self.require_views().units_distribution, limit)

    def gap_table(self, limit: Any = _CONFIGURED) -> list[GapRow]:
        """Largest-gap products; defaults to the configured table size."""
        if limit is _CONFIGURED:
            limit = self.settings.gap_table_limit
        return take(self.require_views().gap_analysis, limit)

    def drill_location(self, location_id: Any) -> list[GroupTotal]:
        """Products allocated to `location_id`, largest first."""
        self.require_views()
        return drill_down_location(self.frame, location_id)

    def drill_product(self, product_id: Any) -> list[GroupTotal]:
        """Locations that received `product_id`, largest first."""
        self.require_views()
        return drill_down_product(self.frame, product_id)

    # --------------------------------------------------
    # Export
    # --------------------------------------------------
    def export_all(self, out_dir: Path | str | None = None) -> list[Path]:
        """Write every view as CSV into `out_dir` and return the written paths."""
        views = self.require_views()
        out = Path(out_dir) if out_dir is not None else self.settings.export_dir
        tables: dict[str, list[Any]] = {
            "location_totals.csv": views.location_totals,
            "product_totals.csv": views.product_totals,
            "pair_totals.csv": views.pair_totals,
            "units_distribution.csv": views.units_distribution,
            "zero_units.csv": zero_unit_rows(views.zero_unit_products),
            "gap.csv": views.gap_analysis,
        }
        written = []
        for name, rows in tables.items():
            p = write_csv(rows, out / name)
            if p is not None:
                written.append(p)
        return written
