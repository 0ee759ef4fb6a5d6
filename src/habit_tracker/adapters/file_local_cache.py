"""File-backed key/value slots standing in for browser local storage."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from habit_tracker.services.sources import LocalCache

logger = logging.getLogger(__name__)


@dataclass
class FileLocalCache(LocalCache):
    """Stores string slots in a single JSON file."""

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the slot value, if any."""
        value = self._read_slots().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Write a slot, replacing the file atomically."""
        slots = self._read_slots()
        slots[key] = value
        serialized = json.dumps(slots, ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        staging = self.path.with_name(f"{self.path.name}.tmp")
        try:
            staging.write_text(serialized, encoding="utf-8")
            staging.replace(self.path)
        finally:
            staging.unlink(missing_ok=True)

    def _read_slots(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            slots = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable cache file %s", self.path)
            return {}
        return slots if isinstance(slots, dict) else {}
