"""Serialize derived views to header-plus-rows CSV text.

Field order follows the first record's keys. Values are quoted where needed
(embedded commas, quotes, newlines), unlike a plain comma join.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

import pandas as pd
from pydantic import BaseModel

log = logging.getLogger(__name__)

ExportRow = Union[BaseModel, Mapping[str, Any]]


def rows_for_export(rows: Iterable[ExportRow]) -> list[dict[str, Any]]:
    """Convert pydantic models or mappings into plain dicts."""
    out: list[dict[str, Any]] = []
    for r in rows:
        if isinstance(r, BaseModel):
            out.append(r.model_dump(mode="python"))
        else:
            out.append(dict(r))
    return out


def zero_unit_rows(products: Iterable[Any]) -> list[dict[str, Any]]:
    """Rows for the zero-unit products export: one `product` column."""
    return [{"product": p} for p in products]


def to_csv_text(rows: Sequence[ExportRow]) -> str:
    """Render `rows` as CSV text with a header line.

    Returns:
        CSV text, or an empty string when there are no rows.
    """
    records = rows_for_export(rows)
    if not records:
        return ""
    columns = list(records[0].keys())
    pdf = pd.DataFrame.from_records(records, columns=columns)
    return pdf.to_csv(index=False, lineterminator="\n")


def write_csv(rows: Sequence[ExportRow], path: Path | str) -> Path | None:
    """Write `rows` to `path` as CSV.

    Returns:
        The written path, or ``None`` when there was nothing to write.
    """
    path = Path(path)
    text = to_csv_text(rows)
    if not text:
        log.warning("No rows to export for %s", path.name)
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    log.info("Exported %d rows to %s", len(rows), path)
    return path
