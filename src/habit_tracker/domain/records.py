"""Domain models for daily records."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import IntEnum


class Level(IntEnum):
    """Intensity tiers for a recorded day."""

    NONE = 0
    LIGHT = 1
    MODERATE = 2
    HEAVY = 3
    MAX = 4


@dataclass(frozen=True)
class DayRecord:
    """One journal entry keyed by its day."""

    date: str
    title: str
    level: int
    content: str = ""
    updated_at: str | None = None

    @property
    def is_active(self) -> bool:
        """Return True for days with a non-zero level."""
        return self.level > Level.NONE

    def stamped(self, moment: datetime) -> "DayRecord":
        """Return a copy with ``updated_at`` set to the given moment."""
        return replace(self, updated_at=moment.isoformat())

    def to_payload(self) -> dict[str, object]:
        """Return the wire form used by caches and backends."""
        payload: dict[str, object] = {
            "title": self.title,
            "level": self.level,
            "content": self.content,
        }
        if self.updated_at is not None:
            payload["updatedAt"] = self.updated_at
        return payload

    @classmethod
    def from_payload(cls, date_key: str, payload: dict[str, object]) -> "DayRecord":
        """Build a record from its wire form."""
        updated_at = payload.get("updatedAt")
        return cls(
            date=date_key,
            title=str(payload.get("title") or ""),
            level=parse_level(payload.get("level")),
            content=str(payload.get("content") or ""),
            updated_at=str(updated_at) if updated_at else None,
        )


def parse_level(raw: object) -> int:
    """Read a stored level, rejecting anything outside the closed 0..4 range."""
    if raw is None or raw == "":
        return Level.NONE
    if isinstance(raw, bool):
        raise ValueError(f"Invalid level: {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"Invalid level: {raw!r}")
        raw = int(raw)
    if isinstance(raw, str):
        if not raw.strip().isdigit():
            raise ValueError(f"Invalid level: {raw!r}")
        raw = int(raw)
    if not isinstance(raw, int) or not Level.NONE <= raw <= Level.MAX:
        raise ValueError(f"Level out of range: {raw!r}")
    return raw


def records_from_mapping(raw: object) -> dict[str, DayRecord]:
    """Parse a ``{date: payload}`` mapping into records."""
    if not isinstance(raw, dict):
        raise TypeError("Record mapping must be a JSON object")
    records: dict[str, DayRecord] = {}
    for date_key, payload in raw.items():
        if not isinstance(payload, dict):
            raise TypeError(f"Record for {date_key} must be a JSON object")
        records[str(date_key)] = DayRecord.from_payload(str(date_key), payload)
    return records


def records_to_mapping(records: dict[str, DayRecord]) -> dict[str, dict[str, object]]:
    """Serialize records into a ``{date: payload}`` mapping."""
    return {date_key: record.to_payload() for date_key, record in records.items()}
