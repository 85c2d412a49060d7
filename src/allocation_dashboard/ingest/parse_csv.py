"""Parse allocation CSV files into a normalized pandas Dataset.

The output always has the columns `product_id`, `location_id`, `units` and
`gap`. Identifiers are stripped text; quantities are numeric with missing or
unparseable cells coerced to 0, so downstream sums never see NaN.
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from allocation_dashboard.models import INT64_LIMIT, AllocationRecord

log = logging.getLogger(__name__)

ID_COLUMNS = ["product_id", "location_id"]
QUANTITY_COLUMNS = ["units", "gap"]
COLUMNS = ID_COLUMNS + QUANTITY_COLUMNS


class CsvParseError(Exception):
    """Raised when an allocation CSV cannot be parsed structurally."""

    def __init__(self, message: str = "CSV parse error") -> None:
        super().__init__(message)


def coerce_quantity_series(series: pd.Series) -> pd.Series:
    """Convert a text column to numbers, defaulting invalid cells to 0.

    Columns whose values are all integral and fit in int64 are returned as
    `int64`; anything else stays float64.
    """
    numeric = pd.to_numeric(series, errors="coerce")
    if len(numeric) == 0:
        return numeric.astype("int64")
    if numeric.dtype.kind == "i":
        return numeric.astype("int64")
    # floats, uint64 and object columns of out-of-range ints
    numeric = numeric.astype(float)
    numeric = numeric.where(numeric.abs() != float("inf"))
    numeric = numeric.fillna(0)
    if (numeric % 1 == 0).all() and numeric.abs().max() < INT64_LIMIT:
        return numeric.astype("int64")
    return numeric


def normalize_frame(pdf: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of `pdf` restricted to the Dataset columns.

    Missing quantity columns are filled with 0.

    Raises:
        CsvParseError: if an identifier column is missing.
    """
    missing = [c for c in ID_COLUMNS if c not in pdf.columns]
    if missing:
        log.error("Missing required column(s): %s", ", ".join(missing))
        raise CsvParseError()

    out = pd.DataFrame(index=pdf.index)

    # -----------------------------
    # Identifiers
    # -----------------------------
    for col in ID_COLUMNS:
        out[col] = pdf[col].fillna("").astype(str).str.strip()

    # -----------------------------
    # Quantities
    # -----------------------------
    for col in QUANTITY_COLUMNS:
        if col in pdf.columns:
            out[col] = coerce_quantity_series(pdf[col])
        else:
            out[col] = 0

    return out.reset_index(drop=True)


def read_allocation_csv(path: Path | str) -> pd.DataFrame:
    """Read an allocation CSV into a normalized Dataset.

    Every cell is read as text and blank lines are skipped; headers are
    stripped so ` units ` and `units` are the same column.

    Args:
        path: Path to a header CSV with `product_id`, `location_id` and
            optionally `units` and `gap` columns.

    Returns:
        pandas.DataFrame with columns `product_id`, `location_id`, `units`, `gap`.

    Raises:
        CsvParseError: if the file cannot be read or is structurally invalid.
    """
    path = Path(path)
    log.info("Parsing allocation CSV %s", path)
    try:
        pdf = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (OSError, UnicodeDecodeError, csv.Error, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        log.error("Failed to parse %s: %s", path, e)
        raise CsvParseError() from e

    pdf.columns = [str(c).strip() for c in pdf.columns]
    out = normalize_frame(pdf)
    log.info("Parsed %d allocation rows from %s", len(out), path)
    return out


def frame_from_rows(rows: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Build a Dataset from already-parsed row dicts.

    Each row is validated through `AllocationRecord`, which applies the same
    coercion rules as `read_allocation_csv`.
    """
    records = [AllocationRecord.model_validate(dict(r)).model_dump() for r in rows]
    if not records:
        return pd.DataFrame({c: pd.Series(dtype="int64" if c in QUANTITY_COLUMNS else object) for c in COLUMNS})

    pdf = pd.DataFrame(records, columns=COLUMNS)
    for col in QUANTITY_COLUMNS:
        pdf[col] = coerce_quantity_series(pdf[col])
    return pdf
