"""Prioritized data sources the record store loads from."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from habit_tracker.domain.errors import NetworkError
from habit_tracker.domain.records import DayRecord, records_from_mapping

logger = logging.getLogger(__name__)


class RecordBackend(Protocol):
    """Remote backend holding the authoritative record set."""

    requires_credential: bool

    async def fetch_all(self, credential: str | None) -> dict[str, DayRecord]:
        """Return every stored record keyed by date."""

    async def save_record(self, record: DayRecord, credential: str | None) -> None:
        """Upsert one record remotely."""


class LocalCache(Protocol):
    """String-keyed persistent slots on this device."""

    def get_item(self, key: str) -> str | None:
        """Return the stored string for a key, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Store a string under a key."""


class StaticFiles(Protocol):
    """Read-only files published next to the widget."""

    async def fetch_index(self) -> object:
        """Return the decoded bootstrap ``data/index.json``."""

    async def fetch_day_markdown(self, date_key: str) -> str | None:
        """Return the raw markdown for a day, or None when absent."""


class SourceStatus(Enum):
    """Outcome of a single source attempt."""

    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceResult:
    """Typed result of a source attempt."""

    status: SourceStatus
    records: dict[str, DayRecord] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: dict[str, DayRecord]) -> "SourceResult":
        """Wrap records, marking an empty mapping as such."""
        status = SourceStatus.LOADED if records else SourceStatus.EMPTY
        return cls(status=status, records=records)

    @classmethod
    def failed(cls) -> "SourceResult":
        """Return a failed result."""
        return cls(status=SourceStatus.FAILED)


class RecordSource(Protocol):
    """One entry in the load priority list."""

    name: str
    requires_data: bool
    persist_on_load: bool

    async def fetch(self) -> SourceResult:
        """Attempt to read the full record set."""


@dataclass
class RemoteRecordSource(RecordSource):
    """Loads from the configured remote backend."""

    backend: RecordBackend
    credential: Callable[[], str | None]
    name: str = "remote"
    requires_data: bool = False
    persist_on_load: bool = True

    async def fetch(self) -> SourceResult:
        """Fetch all records from the backend."""
        try:
            records = await self.backend.fetch_all(self.credential())
        except NetworkError:
            logger.warning("Remote load failed, falling back", exc_info=True)
            return SourceResult.failed()
        return SourceResult.from_records(records)


@dataclass
class CachedRecordSource(RecordSource):
    """Loads the copy persisted on this device."""

    cache: LocalCache
    storage_key: str
    name: str = "local_cache"
    requires_data: bool = True
    persist_on_load: bool = False

    async def fetch(self) -> SourceResult:
        """Read and decode the cached mapping."""
        try:
            raw = self.cache.get_item(self.storage_key)
        except (OSError, ValueError):
            logger.warning("Local cache is unreadable", exc_info=True)
            return SourceResult.failed()
        if raw is None:
            return SourceResult.from_records({})
        try:
            records = records_from_mapping(json.loads(raw))
        except (TypeError, ValueError):
            logger.warning("Local cache holds malformed data", exc_info=True)
            return SourceResult.failed()
        return SourceResult.from_records(records)


@dataclass
class BootstrapRecordSource(RecordSource):
    """Loads the static bootstrap file shipped with the widget."""

    static_files: StaticFiles
    name: str = "bootstrap"
    requires_data: bool = False
    persist_on_load: bool = False

    async def fetch(self) -> SourceResult:
        """Fetch and decode ``data/index.json``."""
        try:
            raw = await self.static_files.fetch_index()
            records = records_from_mapping(raw)
        except NetworkError:
            logger.warning("Bootstrap file unavailable", exc_info=True)
            return SourceResult.failed()
        except (TypeError, ValueError) as exc:
            logger.warning("Bootstrap file is malformed: %s", exc)
            return SourceResult.failed()
        return SourceResult.from_records(records)


def is_acceptable(source: RecordSource, result: SourceResult) -> bool:
    """Return True when a result should end the fallback chain."""
    if result.status is SourceStatus.FAILED:
        return False
    return not (source.requires_data and result.status is SourceStatus.EMPTY)

