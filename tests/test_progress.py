"""Tests for goal progress."""

from datetime import UTC, date, datetime, timedelta

import pytest

from habit_tracker.domain.progress import GoalInterval
from habit_tracker.services.progress import compute_progress, phase_for

GOAL = GoalInterval(start=date(2026, 1, 1), end=date(2029, 12, 31))


def test_start_day_counts_as_first_elapsed_day() -> None:
    progress = compute_progress(GOAL, datetime(2026, 1, 1, 9, 0, tzinfo=UTC))

    assert progress.total_days == 1460
    assert progress.elapsed_days == 1
    assert progress.remaining_days == 1460
    assert progress.percentage == pytest.approx(100 / 1460)
    assert progress.phase == 1


def test_progress_clamps_outside_the_goal() -> None:
    before = compute_progress(GOAL, datetime(2025, 6, 1, tzinfo=UTC))
    after = compute_progress(GOAL, datetime(2030, 6, 1, tzinfo=UTC))
    at_end = compute_progress(GOAL, datetime(2029, 12, 31, tzinfo=UTC))

    assert before.elapsed_days == 0
    assert before.percentage == 0
    assert before.phase == 1
    assert after.percentage == 100
    assert after.remaining_days == 0
    assert after.phase == 5
    assert at_end.percentage == 100


def test_progress_is_monotonic() -> None:
    moment = datetime(2025, 12, 1, 12, tzinfo=UTC)
    previous = -1.0
    while moment < datetime(2030, 2, 1, tzinfo=UTC):
        percentage = compute_progress(GOAL, moment).percentage
        assert percentage >= previous
        previous = percentage
        moment += timedelta(days=7, hours=5)


def test_phase_boundaries() -> None:
    assert phase_for(0) == 1
    assert phase_for(19.99) == 1
    assert phase_for(20) == 2
    assert phase_for(40) == 3
    assert phase_for(60) == 4
    assert phase_for(79.9) == 4
    assert phase_for(80) == 5
    assert phase_for(100) == 5
