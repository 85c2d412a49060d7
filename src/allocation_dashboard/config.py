"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the dashboard options from the environment (a `.env` file in the
project root is loaded first).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


@dataclass(frozen=True)
class Settings:
    """Container for dashboard configuration read from the environment.

    Attributes:
        pair_separator: Text placed between product and location ids in pair keys.
        default_top_n: Default number of bars shown for location/product totals.
        gap_table_limit: Number of rows shown in the gap-analysis table.
        export_dir: Directory that CSV exports are written to.
        log_path: Log file written by the CLI.
        partition_rows: Row count above which grouping runs on Dask partitions.
    """
    pair_separator: str
    default_top_n: int
    gap_table_limit: int
    export_dir: Path
    log_path: Path
    partition_rows: int


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `ALLOC_PAIR_SEPARATOR` is empty or a numeric option
            is not a positive integer.
    """
    pair_separator = os.getenv("ALLOC_PAIR_SEPARATOR", "__")
    if not pair_separator:
        raise RuntimeError("ALLOC_PAIR_SEPARATOR must not be empty.")

    return Settings(
        pair_separator=pair_separator,
        default_top_n=_positive_int("ALLOC_DEFAULT_TOP_N", 10),
        gap_table_limit=_positive_int("ALLOC_GAP_TABLE_LIMIT", 50),
        export_dir=Path(os.getenv("ALLOC_EXPORT_DIR", "exports")),
        log_path=Path(os.getenv("ALLOC_LOG_PATH", "logs/dashboard.log")),
        partition_rows=_positive_int("ALLOC_PARTITION_ROWS", 200_000),
    )
