"""Domain models for the day detail view."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DayDetail:
    """A single day's record with its markdown body."""

    date: str
    level: int
    title: str | None
    content: str | None
