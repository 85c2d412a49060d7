"""Root logging setup for the allocation dashboard.

Modules log through `logging.getLogger(__name__)`. That covers CSV parsing
(rows read, files rejected), dataset loads in the session, view computation
and Dask partitioning, separator collisions in pair keys and CSV exports.
Merges of partitioned groupings are logged at DEBUG. `configure_logging`
sends everything to stdout and optionally to a file; the CLI passes the
`ALLOC_LOG_PATH` setting.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure root logging handlers and formatting.

    Calling this more than once replaces the previously installed handlers.

    Args:
        log_path: Optional path to a file where logs will be written.
        level: Logging level (defaults to INFO).
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
