from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from allocation_dashboard.config import Settings
from allocation_dashboard.session import DashboardSession


def test_views_computed_once_per_dataset(sample_frame: pd.DataFrame, settings: Settings) -> None:
    s = DashboardSession(settings)
    assert s.views is None

    s.load_frame(sample_frame)
    first = s.views
    s.top_locations("asc", 1)
    s.top_products("desc", None)
    s.top_distribution(2)
    s.gap_table()
    assert s.views is first
    assert s.aggregations == 1

    s.load_frame(sample_frame.copy())
    assert s.views is not first
    assert s.aggregations == 2


def test_slices_do_not_touch_base_views(sample_frame: pd.DataFrame, settings: Settings) -> None:
    s = DashboardSession(settings)
    s.load_frame(sample_frame)
    base = list(s.views.product_totals)

    assert [g.key for g in s.top_products("asc", 1)] == ["P2"]
    assert [g.key for g in s.top_products("desc", 1)] == ["P1"]
    assert s.views.product_totals == base
    assert [g.key for g in s.top_distribution(2)] == [0, 5]


def test_gap_table_uses_configured_limit(sample_frame: pd.DataFrame, settings: Settings) -> None:
    s = DashboardSession(Settings(**{**settings.__dict__, "gap_table_limit": 1}))
    s.load_frame(sample_frame)
    assert [r.product for r in s.gap_table()] == ["P1"]
    assert len(s.gap_table(None)) == 2


def test_drill_down_via_session(sample_frame: pd.DataFrame, settings: Settings) -> None:
    s = DashboardSession(settings)
    s.load_frame(sample_frame)
    assert [(g.key, g.total) for g in s.drill_location("L1")] == [("P1", 10), ("P2", 5)]
    assert [(g.key, g.total) for g in s.drill_product("P1")] == [("L1", 10), ("L2", 0)]


def test_empty_dataset_is_initial_state(sample_frame: pd.DataFrame, settings: Settings) -> None:
    s = DashboardSession(settings)
    s.load_frame(sample_frame.iloc[0:0])
    assert s.views is None
    with pytest.raises(LookupError):
        s.top_locations()


def test_failed_load_keeps_previous_dataset(tmp_path: Path, sample_frame: pd.DataFrame, settings: Settings) -> None:
    bad = tmp_path / "bad.csv"
    bad.write_text("units,gap\n1,2\n", encoding="utf-8")

    s = DashboardSession(settings)
    s.load_frame(sample_frame)
    version = s.version

    assert s.load_csv(bad) is False
    assert s.error == "CSV parse error"
    assert s.version == version
    assert s.views.summary.total_units == 15

    s.reset()
    assert s.views is None
    assert s.error == ""


def test_load_csv_and_export_all(tmp_path: Path, settings: Settings) -> None:
    src = tmp_path / "alloc.csv"
    src.write_text(
        "product_id,location_id,units,gap\nP1,L1,10,2\nP1,L2,0,5\nP2,L1,5,0\nP3,L2,0,1\n",
        encoding="utf-8",
    )
    s = DashboardSession(settings)
    assert s.load_csv(src) is True

    written = s.export_all()
    names = sorted(p.name for p in written)
    assert names == [
        "gap.csv",
        "location_totals.csv",
        "pair_totals.csv",
        "product_totals.csv",
        "units_distribution.csv",
        "zero_units.csv",
    ]
    assert all(p.parent == settings.export_dir for p in written)
    assert (settings.export_dir / "zero_units.csv").read_text(encoding="utf-8") == "product\nP3\n"
    assert (settings.export_dir / "gap.csv").read_text(encoding="utf-8").splitlines()[1] == "P1,10,7,58.8"
