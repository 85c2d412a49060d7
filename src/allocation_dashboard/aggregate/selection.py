"""Sort and top-N slicing of already computed group totals.

Nothing here re-aggregates or mutates its input: every function returns a new
list, so changing a sort direction or limit only costs a sort of the totals.
"""
from __future__ import annotations

from typing import Sequence, TypeVar

from allocation_dashboard.models import GroupTotal

T = TypeVar("T")

ASC = "asc"
DESC = "desc"
LIMIT_CHOICES = ("5", "10", "20", "50", "All")


def parse_limit(text: str | int | None) -> int | None:
    """Convert a limit choice to an int, or `None` for "All" (unbounded).

    Raises:
        ValueError: for non-numeric text or a non-positive limit.
    """
    if text is None:
        return None
    if isinstance(text, str):
        text = text.strip()
        if text.lower() == "all":
            return None
    limit = int(text)
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    return limit


def sort_totals(totals: Sequence[GroupTotal], direction: str = DESC) -> list[GroupTotal]:
    """Return `totals` sorted by `total`; ties keep their original order.

    Raises:
        ValueError: if `direction` is not "asc" or "desc".
    """
    if direction not in (ASC, DESC):
        raise ValueError(f"direction must be {ASC!r} or {DESC!r}, got {direction!r}")
    return sorted(totals, key=lambda g: g.total, reverse=direction == DESC)


def take(items: Sequence[T], limit: int | None) -> list[T]:
    """First `limit` items (all of them when `limit` is None)."""
    if limit is None:
        return list(items)
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    return list(items[:limit])


def select_top(
    totals: Sequence[GroupTotal],
    direction: str = DESC,
    limit: int | None = None,
) -> list[GroupTotal]:
    """Sort `totals` by `direction` and keep the first `limit` entries."""
    return take(sort_totals(totals, direction), limit)
