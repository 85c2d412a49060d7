"""allocation_dashboard package.

Contains modules for parsing inventory allocation CSVs (one row per
product/location pair with `units` and `gap`), deriving the dashboard views
(location, product and pair totals, the unit-count distribution, summary
statistics, zero-unit products and fill-rate gap analysis) and exporting them
back to CSV.

Architecture:
- CSV -> pandas Dataset -> derived views (pure functions)
- Dask is used for partitioned grouping of large datasets
- Pydantic models validate records and derived outputs
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
