"""Tests for loading and persisting the record store."""

import asyncio
import json

import pytest

from habit_tracker.domain.records import DayRecord
from tests.conftest import (
    FIXED_NOW,
    FakeRecordBackend,
    FakeStaticFiles,
    InMemoryLocalCache,
    build_test_container,
)

RUN = DayRecord(date="2026-03-14", title="Run", level=3, content="5k")


def _cached(records: dict[str, dict[str, object]]) -> InMemoryLocalCache:
    return InMemoryLocalCache(slots={"daily-tracker-data": json.dumps(records)})


def test_load_prefers_remote_and_refreshes_cache(settings) -> None:
    cache = _cached({"2026-01-01": {"title": "Old", "level": 1}})
    backend = FakeRecordBackend(records={RUN.date: RUN})
    container = build_test_container(settings, cache, FakeStaticFiles(), backend)

    records = asyncio.run(container.store.load())

    assert records == {RUN.date: RUN}
    assert container.store.loaded_from == "remote"
    cached = json.loads(cache.slots["daily-tracker-data"])
    assert cached == {RUN.date: {"title": "Run", "level": 3, "content": "5k"}}


def test_empty_remote_still_replaces_store(settings) -> None:
    cache = _cached({"2026-01-01": {"title": "Old", "level": 1}})
    container = build_test_container(
        settings, cache, FakeStaticFiles(), FakeRecordBackend()
    )

    assert asyncio.run(container.store.load()) == {}
    assert container.store.loaded_from == "remote"


def test_remote_failure_falls_back_to_cache(settings) -> None:
    cache = _cached({"2026-01-01": {"title": "Old", "level": 1}})
    static_files = FakeStaticFiles(index={"2026-02-02": {"title": "B", "level": 2}})
    backend = FakeRecordBackend(fail_fetch=True)
    container = build_test_container(settings, cache, static_files, backend)

    records = asyncio.run(container.store.load())

    assert list(records) == ["2026-01-01"]
    assert container.store.loaded_from == "local_cache"
    assert static_files.index_fetches == 0


def test_empty_cache_falls_back_to_bootstrap(settings) -> None:
    cache = _cached({})
    static_files = FakeStaticFiles(
        index={"2026-02-02": {"title": "B", "level": 2, "updatedAt": "x"}}
    )
    container = build_test_container(settings, cache, static_files)

    records = asyncio.run(container.store.load())

    assert records["2026-02-02"].updated_at == "x"
    assert container.store.loaded_from == "bootstrap"


def test_malformed_cache_falls_back_to_bootstrap(settings) -> None:
    cache = InMemoryLocalCache(slots={"daily-tracker-data": "{not json"})
    container = build_test_container(settings, cache, FakeStaticFiles(index={}))

    assert asyncio.run(container.store.load()) == {}
    assert container.store.loaded_from == "bootstrap"


def test_load_never_raises_when_everything_fails(settings) -> None:
    cache = InMemoryLocalCache(fail_reads=True)
    backend = FakeRecordBackend(fail_fetch=True)
    container = build_test_container(settings, cache, FakeStaticFiles(), backend)

    assert asyncio.run(container.store.load()) == {}
    assert container.store.loaded_from is None


def test_upsert_replaces_whole_record_and_stamps_time(container) -> None:
    store = container.store
    store.upsert(DayRecord(date=RUN.date, title="Walk", level=1, content="long"))
    stored = store.upsert(RUN)

    assert store.get(RUN.date) == stored
    assert stored.content == "5k"
    assert stored.updated_at == FIXED_NOW.isoformat()
    assert store.upsert(RUN) == stored
    assert store.level_of("2026-03-13") == 0


def test_upsert_round_trips_through_local_cache(settings) -> None:
    cache = InMemoryLocalCache()
    container = build_test_container(settings, cache, FakeStaticFiles())
    stored = container.store.upsert(RUN)
    assert container.store.persist_locally()

    reloaded = build_test_container(settings, cache, FakeStaticFiles())
    records = asyncio.run(reloaded.store.load())

    assert records[RUN.date] == stored
    assert records[RUN.date].updated_at != RUN.updated_at


def test_persist_failure_is_swallowed(settings) -> None:
    cache = InMemoryLocalCache(fail_writes=True)
    container = build_test_container(settings, cache, FakeStaticFiles())
    container.store.upsert(RUN)

    assert container.store.persist_locally() is False
    assert container.store.get(RUN.date) is not None


@pytest.mark.parametrize(
    "raw",
    [
        '{"2026-01-01": {"title": "x", "level": 9}}',
        '{"2026-01-01": {"title": "x", "level": Infinity}}',
        '{"2026-01-01": {"title": "x", "level": 2.7}}',
    ],
)
def test_bad_cached_levels_fall_back_to_bootstrap(settings, raw: str) -> None:
    cache = InMemoryLocalCache(slots={"daily-tracker-data": raw})
    static_files = FakeStaticFiles(index={"2026-02-02": {"title": "B", "level": 2}})
    container = build_test_container(settings, cache, static_files)

    records = asyncio.run(container.store.load())

    assert list(records) == ["2026-02-02"]
    assert container.store.loaded_from == "bootstrap"


def test_overflowing_bootstrap_level_leaves_store_empty(settings) -> None:
    static_files = FakeStaticFiles(index=json.loads('{"2026-02-02": {"level": 1e999}}'))
    container = build_test_container(settings, InMemoryLocalCache(), static_files)

    assert asyncio.run(container.store.load()) == {}
    assert container.store.loaded_from is None
