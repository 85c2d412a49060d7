from __future__ import annotations

from pathlib import Path

import pytest

from allocation_dashboard.config import get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ALLOC_PAIR_SEPARATOR", "ALLOC_DEFAULT_TOP_N", "ALLOC_GAP_TABLE_LIMIT",
                 "ALLOC_EXPORT_DIR", "ALLOC_LOG_PATH", "ALLOC_PARTITION_ROWS"):
        monkeypatch.delenv(name, raising=False)
    s = get_settings()
    assert s.pair_separator == "__"
    assert s.default_top_n == 10
    assert s.gap_table_limit == 50
    assert s.export_dir == Path("exports")
    assert s.partition_rows == 200_000


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOC_PAIR_SEPARATOR", "|")
    monkeypatch.setenv("ALLOC_DEFAULT_TOP_N", "5")
    s = get_settings()
    assert s.pair_separator == "|"
    assert s.default_top_n == 5


@pytest.mark.parametrize(
    "name,value",
    [("ALLOC_PAIR_SEPARATOR", ""), ("ALLOC_GAP_TABLE_LIMIT", "0"), ("ALLOC_PARTITION_ROWS", "many")],
)
def test_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        get_settings()
