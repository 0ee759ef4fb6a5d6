"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from habit_tracker.config import BackendConfig, BackendKind, Settings
from habit_tracker.containers import AppContainer, wire_services
from habit_tracker.domain.errors import NetworkError, StaleVersionError
from habit_tracker.domain.records import DayRecord
from habit_tracker.services.sources import LocalCache, RecordBackend, StaticFiles

FIXED_NOW = datetime(2026, 3, 15, 9, 30, tzinfo=UTC)


@dataclass
class InMemoryLocalCache(LocalCache):
    """In-memory cache slots for tests."""

    slots: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False
    fail_reads: bool = False

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("cache unreadable")
        return self.slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("quota exceeded")
        self.slots[key] = value


@dataclass
class FakeRecordBackend(RecordBackend):
    """Fake remote backend keeping records in memory."""

    records: dict[str, DayRecord] = field(default_factory=dict)
    requires_credential: bool = False
    fail_fetch: bool = False
    fail_save: bool = False
    stale_save: bool = False
    credentials_seen: list[str | None] = field(default_factory=list)
    saved: list[DayRecord] = field(default_factory=list)

    async def fetch_all(self, credential: str | None) -> dict[str, DayRecord]:
        self.credentials_seen.append(credential)
        if self.fail_fetch:
            raise NetworkError("unreachable")
        return dict(self.records)

    async def save_record(self, record: DayRecord, credential: str | None) -> None:
        self.credentials_seen.append(credential)
        if self.stale_save:
            raise StaleVersionError("version changed")
        if self.fail_save:
            raise NetworkError("unreachable")
        self.records[record.date] = record
        self.saved.append(record)


@dataclass
class FakeStaticFiles(StaticFiles):
    """Fake static files with an optional bootstrap index."""

    index: object | None = None
    markdown: dict[str, str] = field(default_factory=dict)
    index_fetches: int = 0

    async def fetch_index(self) -> object:
        self.index_fetches += 1
        if self.index is None:
            raise NetworkError("GET data/index.json returned 404")
        return self.index

    async def fetch_day_markdown(self, date_key: str) -> str | None:
        return self.markdown.get(date_key)


def fixed_clock() -> datetime:
    return FIXED_NOW


def build_test_container(
    settings: Settings,
    cache: InMemoryLocalCache,
    static_files: FakeStaticFiles,
    backend: FakeRecordBackend | None = None,
    credential: str | None = None,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    backend_config = BackendConfig(
        kind=BackendKind.SPREADSHEET if backend else BackendKind.NONE,
        endpoint="https://backend.test" if backend else None,
        credential=credential,
    )
    return wire_services(
        settings=settings,
        backend_config=backend_config,
        backend=backend,
        cache=cache,
        static_files=static_files,
        clock=fixed_clock,
        close_resources=close_resources,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def cache() -> InMemoryLocalCache:
    return InMemoryLocalCache()


@pytest.fixture
def static_files() -> FakeStaticFiles:
    return FakeStaticFiles()


@pytest.fixture
def container(
    settings: Settings,
    cache: InMemoryLocalCache,
    static_files: FakeStaticFiles,
) -> AppContainer:
    return build_test_container(settings, cache, static_files)
