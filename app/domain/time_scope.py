"""Relative date windows applied to timestamped records.

Filtering happens in Python after fetching the user's rows, matching how
search and the analysis tab load everything and then narrow it down.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Iterable, List, Optional, TypeVar

from app.models.database.mixins.timestamp import as_utc

T = TypeVar("T")


class TimeScope(str, Enum):
    LAST_NIGHT = "lastNight"
    LAST_7_DAYS = "last7Days"
    LAST_30_DAYS = "last30Days"
    LAST_YEAR = "lastYear"
    ALL_TIME = "allTime"


def window_start(scope: TimeScope, now: Optional[datetime] = None) -> Optional[datetime]:
    """Inclusive lower bound for a scope, or None for allTime."""
    now = as_utc(now) if now else datetime.now(timezone.utc)

    if scope == TimeScope.ALL_TIME:
        return None
    if scope == TimeScope.LAST_NIGHT:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if scope == TimeScope.LAST_7_DAYS:
        return now - timedelta(days=7)
    if scope == TimeScope.LAST_30_DAYS:
        return now - timedelta(days=30)
    if scope == TimeScope.LAST_YEAR:
        # Midnight of the same calendar date one year back; Feb 29 falls back to Feb 28
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        try:
            return midnight.replace(year=now.year - 1)
        except ValueError:
            return midnight.replace(year=now.year - 1, day=28)
    raise ValueError(f"Unknown time scope: {scope}")


def filter_by_scope(
    items: Iterable[T],
    scope: TimeScope,
    now: Optional[datetime] = None,
    key: Callable[[T], datetime] = lambda item: item.timestamp,
) -> List[T]:
    start = window_start(scope, now)
    if start is None:
        return list(items)
    return [item for item in items if as_utc(key(item)) >= start]
