"""Domain models for statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSummary:
    """Aggregate counters shown next to the heatmap."""

    total_days: int
    current_streak: int
    this_month: int
