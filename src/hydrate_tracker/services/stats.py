"""Daily totals and goal progress over entry collections."""

import math
from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

from hydrate_tracker.domain.entries import Entry, WaterLogRow
from hydrate_tracker.domain.stats import DailyTotal

WEEK_DAYS = 7


def date_key(timestamp: datetime) -> date:
    """Return the UTC calendar date of an instant."""
    if timestamp.tzinfo is None:
        return timestamp.date()
    return timestamp.astimezone(UTC).date()


def sum_for_date(entries: Iterable[Entry], day: date) -> int:
    """Sum the amounts logged on the given day."""
    return sum(entry.amount for entry in entries if date_key(entry.timestamp) == day)


def percent_of_goal(total: int, goal: int, clamp: bool = True) -> int:
    """Return progress towards the goal as a whole percent.

    Self progress is clamped to 0..100. Friend comparisons pass
    ``clamp=False`` so that over-achievers report e.g. 150.
    """
    if goal <= 0:
        return 0
    percent = math.floor(total / goal * 100 + 0.5)
    if clamp:
        return max(0, min(100, percent))
    return percent


def weekly_series(
    entries: Iterable[Entry], reference_date: date, goal: int
) -> list[DailyTotal]:
    """Return seven daily totals ending at the reference date, oldest first."""
    sums = daily_sums(entries)
    series = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = reference_date - timedelta(days=offset)
        total = sums.get(day, 0)
        series.append(
            DailyTotal(day=day, total_ml=total, percent=percent_of_goal(total, goal))
        )
    return series


def daily_sums(entries: Iterable[Entry]) -> dict[date, int]:
    """Group entries by UTC date and sum their amounts."""
    sums: dict[date, int] = {}
    for entry in entries:
        key = date_key(entry.timestamp)
        sums[key] = sums.get(key, 0) + entry.amount
    return sums


def totals_by_user(rows: Iterable[WaterLogRow], day: date) -> dict[UUID, int]:
    """Sum remote rows per owner for a single day."""
    totals: dict[UUID, int] = {}
    for row in rows:
        if date_key(row.logged_at) != day:
            continue
        totals[row.user_id] = totals.get(row.user_id, 0) + row.amount
    return totals
