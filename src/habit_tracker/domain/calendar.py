"""Domain models for the heatmap calendar."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridCell:
    """One day square in the heatmap grid."""

    date: str
    level: int
    is_future: bool
    is_in_current_display_year: bool
