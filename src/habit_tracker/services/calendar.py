"""Heatmap grid generation."""

from collections.abc import Mapping
from datetime import date, timedelta

from habit_tracker.domain.calendar import GridCell
from habit_tracker.domain.dates import format_date_key, is_sunday
from habit_tracker.domain.records import DayRecord, Level

DECEMBER = 12


def build_grid(
    year: int, records: Mapping[str, DayRecord], today: date
) -> list[GridCell]:
    """Return week-aligned cells covering the given year.

    The grid starts on the Sunday on or before Jan 1 and runs past Dec 31 until
    the last week row is closed, so the cell count is always a multiple of 7.
    Padding days outside the year are kept and flagged instead of dropped.
    """
    year_start = date(year, 1, 1)
    year_end = date(year, DECEMBER, 31)
    days_since_sunday = (year_start.weekday() + 1) % 7
    current = year_start - timedelta(days=days_since_sunday)

    cells: list[GridCell] = []
    while current <= year_end or not is_sunday(current):
        date_key = format_date_key(current)
        record = records.get(date_key)
        cells.append(
            GridCell(
                date=date_key,
                level=record.level if record else Level.NONE,
                is_future=current > today,
                is_in_current_display_year=current.year == year,
            )
        )
        current += timedelta(days=1)
    return cells


def year_bounds(start_year: int, today: date) -> tuple[int, int]:
    """Return the first and last years the calendar can display."""
    return start_year, max(start_year, today.year)
