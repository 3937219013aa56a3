"""
Time and date utilities for rolling-average windows.

Key concepts:
  - Averaging window: the last N calendar days (inclusive of today) whose
    check-in and nutrition records feed the rolling averages.
  - Record dates are ISO-8601 ``YYYY-MM-DD`` strings in upstream payloads.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def window_start_date(days: int, today: Optional[date] = None) -> date:
    """Return the first date of an averaging window of ``days`` days.

    The window ends at ``today`` and starts ``days`` days earlier, matching
    a ``date >= start`` filter on the upstream tables.

    Args:
        days:  Window length in days.
        today: Reference date; defaults to the current UTC date.

    Returns:
        ``today - days``.

    Raises:
        ValueError: If ``days < 1``.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}.")
    ref = today or utcnow().date()
    return ref - timedelta(days=days)
