from __future__ import annotations

import logging
from pathlib import Path

from allocation_dashboard.aggregate.views import compute_views
from allocation_dashboard.ingest.parse_csv import read_allocation_csv
from allocation_dashboard.logging_config import configure_logging


def test_configure_logging_adds_stream_handler() -> None:
    # Ensure configuring logging doesn't raise and attaches a StreamHandler
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "dashboard.log"
    configure_logging(log_path)
    logging.getLogger("allocation_dashboard.test").info("hello file")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello file" in log_path.read_text(encoding="utf-8")
    configure_logging(None)


def test_package_modules_log_to_configured_file(tmp_path: Path) -> None:
    log_path = tmp_path / "dashboard.log"
    csv_path = tmp_path / "alloc.csv"
    csv_path.write_text("product_id,location_id,units,gap\nP1,L1,3,0\n", encoding="utf-8")
    configure_logging(log_path)
    compute_views(read_allocation_csv(csv_path))
    for h in logging.getLogger().handlers:
        h.flush()
    text = log_path.read_text(encoding="utf-8")
    assert "| INFO | allocation_dashboard.ingest.parse_csv | Parsed 1 allocation rows" in text
    assert "allocation_dashboard.aggregate.views | Computing views for 1 allocation rows" in text
    configure_logging(None)
