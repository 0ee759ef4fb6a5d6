"""Goal progress and milestone phases."""

import math
from datetime import datetime, time, timedelta

from habit_tracker.domain.progress import GoalInterval, Progress

_DAY = timedelta(days=1)

# Lower percentage bound for each phase, highest first.
PHASE_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (80, 5),
    (60, 4),
    (40, 3),
    (20, 2),
)


def phase_for(percentage: float) -> int:
    """Map a completion percentage onto one of five milestone phases."""
    for threshold, phase in PHASE_THRESHOLDS:
        if percentage >= threshold:
            return phase
    return 1


def compute_progress(goal: GoalInterval, now: datetime) -> Progress:
    """Return elapsed and remaining days of the goal at ``now``.

    Goal days are taken at midnight in ``now``'s timezone. Partial days round
    up, so any moment after the start day's midnight counts as day one.
    """
    start = datetime.combine(goal.start, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(goal.end, time.min, tzinfo=now.tzinfo)

    total_days = math.ceil((end - start) / _DAY)
    elapsed_days = max(0, math.ceil((now - start) / _DAY))
    remaining_days = max(0, math.ceil((end - now) / _DAY))
    if total_days <= 0:
        percentage = 100.0
    else:
        percentage = min(100.0, max(0.0, elapsed_days / total_days * 100))

    return Progress(
        total_days=total_days,
        elapsed_days=elapsed_days,
        remaining_days=remaining_days,
        percentage=percentage,
        phase=phase_for(percentage),
    )
