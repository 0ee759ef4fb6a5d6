"""Aggregate counters derived from the record store."""

from collections.abc import Mapping
from datetime import date, timedelta

from habit_tracker.domain.dates import format_date_key, parse_date_key
from habit_tracker.domain.records import DayRecord
from habit_tracker.domain.stats import StatsSummary


def total_active_days(records: Mapping[str, DayRecord]) -> int:
    """Count days with a non-zero level."""
    return sum(1 for record in records.values() if record.is_active)


def current_streak(records: Mapping[str, DayRecord], today: date) -> int:
    """Count consecutive active days ending today.

    An inactive or missing today ends the streak at zero regardless of history.
    """
    streak = 0
    check = today
    while True:
        record = records.get(format_date_key(check))
        if record is None or not record.is_active:
            return streak
        streak += 1
        check -= timedelta(days=1)


def this_month_count(records: Mapping[str, DayRecord], today: date) -> int:
    """Count active days in today's calendar month."""
    count = 0
    for date_key, record in records.items():
        if not record.is_active:
            continue
        try:
            day = parse_date_key(date_key)
        except ValueError:
            continue
        if day.year == today.year and day.month == today.month:
            count += 1
    return count


def summarize(records: Mapping[str, DayRecord], today: date) -> StatsSummary:
    """Return all counters for the given day."""
    return StatsSummary(
        total_days=total_active_days(records),
        current_streak=current_streak(records, today),
        this_month=this_month_count(records, today),
    )
