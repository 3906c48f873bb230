"""Tests for relative time windows."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.time_scope import TimeScope, filter_by_scope, window_start

NOW = datetime(2026, 3, 15, 14, 30, tzinfo=timezone.utc)


@dataclass
class Item:
    timestamp: datetime


@pytest.mark.parametrize(
    "scope, expected",
    [
        (TimeScope.LAST_NIGHT, datetime(2026, 3, 15, tzinfo=timezone.utc)),
        (TimeScope.LAST_7_DAYS, NOW - timedelta(days=7)),
        (TimeScope.LAST_30_DAYS, NOW - timedelta(days=30)),
        (TimeScope.LAST_YEAR, datetime(2025, 3, 15, tzinfo=timezone.utc)),
        (TimeScope.ALL_TIME, None),
    ],
)
def test_window_start(scope, expected):
    assert window_start(scope, NOW) == expected


def test_last_year_from_leap_day():
    leap_day = datetime(2028, 2, 29, 9, 0, tzinfo=timezone.utc)
    assert window_start(TimeScope.LAST_YEAR, leap_day) == datetime(2027, 2, 28, tzinfo=timezone.utc)


def test_filter_keeps_boundary_and_newer():
    start = NOW - timedelta(days=7)
    items = [Item(start), Item(start - timedelta(seconds=1)), Item(NOW)]

    kept = filter_by_scope(items, TimeScope.LAST_7_DAYS, NOW)

    assert kept == [items[0], items[2]]


def test_filter_treats_naive_timestamps_as_utc():
    naive_midnight = datetime(2026, 3, 15, 0, 0)
    kept = filter_by_scope([Item(naive_midnight)], TimeScope.LAST_NIGHT, NOW)
    assert len(kept) == 1


def test_all_time_keeps_everything():
    items = [Item(datetime(1999, 1, 1, tzinfo=timezone.utc)), Item(NOW)]
    assert filter_by_scope(items, TimeScope.ALL_TIME, NOW) == items


def test_last_year_keeps_whole_first_day():
    early_that_morning = Item(datetime(2025, 3, 15, 8, 0, tzinfo=timezone.utc))
    day_before = Item(datetime(2025, 3, 14, 23, 59, tzinfo=timezone.utc))

    kept = filter_by_scope([early_that_morning, day_before], TimeScope.LAST_YEAR, NOW)

    assert kept == [early_that_morning]
