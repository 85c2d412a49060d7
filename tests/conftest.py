from __future__ import annotations

import pandas as pd
import pytest

from allocation_dashboard.config import Settings
from allocation_dashboard.ingest.parse_csv import frame_from_rows

SAMPLE_ROWS = [
    {"product_id": "P1", "location_id": "L1", "units": "10", "gap": "2"},
    {"product_id": "P1", "location_id": "L2", "units": "0", "gap": "5"},
    {"product_id": "P2", "location_id": "L1", "units": "5", "gap": "0"},
]


@pytest.fixture
def sample_frame() -> pd.DataFrame:
    return frame_from_rows(SAMPLE_ROWS)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        pair_separator="__",
        default_top_n=10,
        gap_table_limit=50,
        export_dir=tmp_path / "exports",
        log_path=tmp_path / "logs" / "dashboard.log",
        partition_rows=200_000,
    )
