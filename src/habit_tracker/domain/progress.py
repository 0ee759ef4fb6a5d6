"""Domain models for goal progress."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class GoalInterval:
    """Fixed start and end days of the tracked goal."""

    start: date
    end: date


@dataclass(frozen=True)
class Progress:
    """Elapsed and remaining days against a goal interval."""

    total_days: int
    elapsed_days: int
    remaining_days: int
    percentage: float
    phase: int
