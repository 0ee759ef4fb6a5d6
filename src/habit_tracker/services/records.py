"""Record store and the save pipeline."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from habit_tracker.domain.dates import is_date_key
from habit_tracker.domain.errors import (
    CredentialMissing,
    NetworkError,
    StaleVersionError,
    ValidationError,
)
from habit_tracker.domain.records import (
    DayRecord,
    Level,
    records_to_mapping,
)
from habit_tracker.services.credentials import CredentialStore
from habit_tracker.services.sources import (
    LocalCache,
    RecordBackend,
    RecordSource,
    is_acceptable,
)

logger = logging.getLogger(__name__)


@dataclass
class RecordStore:
    """Day-keyed records owned by the running session."""

    sources: list[RecordSource]
    cache: LocalCache
    storage_key: str
    clock: Callable[[], datetime]
    records: dict[str, DayRecord] = field(default_factory=dict)
    loaded_from: str | None = None

    async def load(self) -> dict[str, DayRecord]:
        """Populate the store from the first usable source.

        Sources are tried in priority order; a failed source, or an empty one
        that must hold data, hands over to the next. When every source fails
        the store is left empty. Never raises.
        """
        for source in self.sources:
            result = await source.fetch()
            if not is_acceptable(source, result):
                logger.info("Source %s skipped (%s)", source.name, result.status.value)
                continue
            self.replace(result.records)
            self.loaded_from = source.name
            logger.info(
                "Loaded %d records from %s", len(result.records), source.name
            )
            if source.persist_on_load:
                self.persist_locally()
            return self.records
        self.replace({})
        self.loaded_from = None
        logger.warning("No record source available, starting empty")
        return self.records

    def replace(self, records: dict[str, DayRecord]) -> None:
        """Swap the whole mapping."""
        self.records = dict(records)

    def get(self, date_key: str) -> DayRecord | None:
        """Return the record for a day, if any."""
        return self.records.get(date_key)

    def level_of(self, date_key: str) -> int:
        """Return the day's level, treating absence as level 0."""
        record = self.records.get(date_key)
        return record.level if record else Level.NONE

    def upsert(self, record: DayRecord) -> DayRecord:
        """Replace or insert the full record for its day, stamping the time."""
        stored = record.stamped(self.clock())
        self.records[stored.date] = stored
        return stored

    def persist_locally(self) -> bool:
        """Write the full mapping to the local cache.

        Failures are logged and reported through the return value only.
        """
        try:
            payload = json.dumps(records_to_mapping(self.records), ensure_ascii=False)
            self.cache.set_item(self.storage_key, payload)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to persist records locally")
            return False
        return True

    def snapshot(self) -> dict[str, dict[str, object]]:
        """Return the records in their wire form."""
        return records_to_mapping(self.records)


@dataclass(frozen=True)
class SaveOutcome:
    """Result of a save, including a user-facing status message."""

    saved: bool
    message: str
    record: DayRecord | None = None


def validate_record(record: DayRecord) -> None:
    """Reject records that must not be saved."""
    if not is_date_key(record.date):
        raise ValidationError(f"Invalid date: {record.date}")
    if not record.title.strip():
        raise ValidationError("Title is required")
    if not Level.NONE <= record.level <= Level.MAX:
        raise ValidationError(f"Level must be between {Level.NONE} and {Level.MAX}")


@dataclass
class RecordService:
    """Application service that saves records and keeps replicas in step."""

    store: RecordStore
    credentials: CredentialStore
    backend: RecordBackend | None = None

    async def save(self, record: DayRecord) -> SaveOutcome:
        """Validate, store locally, then push the record to the backend.

        ``ValidationError`` and ``CredentialMissing`` block the save before any
        state changes. Backend failures leave the local copy in place and are
        reported through the outcome.
        """
        validate_record(record)
        credential = self.credentials.get()
        if self.backend is not None and self.backend.requires_credential:
            if not credential:
                raise CredentialMissing("A credential is required to save")

        stored = self.store.upsert(record)
        self.store.persist_locally()
        if self.backend is None:
            return SaveOutcome(saved=True, message="Saved", record=stored)

        try:
            await self.remote_save(stored, credential)
        except StaleVersionError:
            logger.warning("Remote save rejected, document changed", exc_info=True)
            return SaveOutcome(saved=False, message="Save failed", record=stored)
        except NetworkError:
            logger.warning("Remote save failed", exc_info=True)
            return SaveOutcome(saved=False, message="Save failed", record=stored)
        return SaveOutcome(saved=True, message="Saved", record=stored)

    async def remote_save(self, record: DayRecord, credential: str | None) -> None:
        """Push one stored record to the configured backend."""
        if self.backend is None:
            raise NetworkError("No remote backend configured")
        await self.backend.save_record(record, credential)

    async def reload(self) -> dict[str, DayRecord]:
        """Re-run the load chain."""
        return await self.store.load()

    def store_credential(self, credential: str) -> bool:
        """Remember a credential on this device."""
        if not credential.strip():
            raise ValidationError("Credential must not be empty")
        try:
            self.credentials.set(credential)
        except OSError:
            logger.exception("Failed to store credential")
            return False
        return True
