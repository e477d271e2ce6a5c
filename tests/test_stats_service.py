"""Tests for daily totals and goal progress."""

from datetime import UTC, date, datetime, timedelta, timezone

from hydrate_tracker.domain.entries import Entry
from hydrate_tracker.services.stats import (
    daily_sums,
    date_key,
    percent_of_goal,
    sum_for_date,
    weekly_series,
)

TODAY = date(2024, 5, 10)


def _entry(amount: int, when: datetime) -> Entry:
    return Entry(id=f"e-{amount}-{when.isoformat()}", timestamp=when, amount=amount)


def _scenario() -> list[Entry]:
    return [
        _entry(200, datetime(2024, 5, 10, 8, 0, tzinfo=UTC)),
        _entry(300, datetime(2024, 5, 10, 12, 0, tzinfo=UTC)),
        _entry(150, datetime(2024, 5, 9, 18, 0, tzinfo=UTC)),
    ]


def test_sum_for_date_without_entries_is_zero() -> None:
    assert sum_for_date([], TODAY) == 0
    assert sum_for_date([], date(1999, 1, 1)) == 0


def test_sum_for_date_only_counts_matching_day() -> None:
    entries = _scenario()

    assert sum_for_date(entries, TODAY) == 500
    assert sum_for_date(entries, TODAY - timedelta(days=1)) == 150
    assert percent_of_goal(500, 2000) == 25


def test_date_key_uses_utc_calendar_day() -> None:
    plus_two = timezone(timedelta(hours=2))
    assert date_key(datetime(2024, 5, 1, 1, 0, tzinfo=plus_two)) == date(2024, 4, 30)


def test_percent_of_goal_clamps_self_progress_only() -> None:
    assert percent_of_goal(3000, 2000) == 100
    assert percent_of_goal(3000, 2000, clamp=False) == 150
    assert percent_of_goal(0, 2000) == 0
    assert percent_of_goal(500, 0) == 0


def test_percent_of_goal_rounds_half_up() -> None:
    assert percent_of_goal(5, 1000) == 1
    assert percent_of_goal(25, 1000) == 3


def test_weekly_series_returns_seven_consecutive_days() -> None:
    series = weekly_series(_scenario(), TODAY, goal=2000)

    assert len(series) == 7
    assert series[0].day == TODAY - timedelta(days=6)
    assert series[-1].day == TODAY
    for previous, current in zip(series, series[1:]):
        assert current.day - previous.day == timedelta(days=1)
    assert series[-1].total_ml == 500
    assert series[-1].percent == 25
    assert series[-2].total_ml == 150
    assert all(day.total_ml == 0 for day in series[:-2])


def test_weekly_series_is_deterministic() -> None:
    entries = _scenario()

    assert weekly_series(entries, TODAY, 2000) == weekly_series(entries, TODAY, 2000)


def test_daily_sums_groups_by_day() -> None:
    sums = daily_sums(_scenario())

    assert sums == {TODAY: 500, TODAY - timedelta(days=1): 150}
