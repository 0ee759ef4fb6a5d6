"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from habit_tracker.adapters.document_store_client import HttpxDocumentStoreBackend
from habit_tracker.adapters.file_local_cache import FileLocalCache
from habit_tracker.adapters.spreadsheet_client import HttpxSpreadsheetBackend
from habit_tracker.adapters.static_files_client import HttpxStaticFiles
from habit_tracker.config import (
    BackendConfig,
    BackendKind,
    Settings,
    goal_interval,
    resolve_backend,
)
from habit_tracker.domain.progress import GoalInterval
from habit_tracker.services.credentials import CredentialStore
from habit_tracker.services.days import DayDetailService
from habit_tracker.services.records import RecordService, RecordStore
from habit_tracker.services.sources import (
    BootstrapRecordSource,
    CachedRecordSource,
    LocalCache,
    RecordBackend,
    RecordSource,
    RemoteRecordSource,
    StaticFiles,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    backend_config: BackendConfig
    goal: GoalInterval
    clock: Callable[[], datetime]
    store: RecordStore
    record_service: RecordService
    day_detail_service: DayDetailService
    close_resources: Callable[[], Awaitable[None]]

    def today(self) -> date:
        """Return the current day in the configured timezone."""
        return self.clock().date()


def build_backend(config: BackendConfig, settings: Settings) -> RecordBackend | None:
    """Create the remote backend selected by the configuration."""
    if config.kind is BackendKind.SPREADSHEET and config.endpoint:
        return HttpxSpreadsheetBackend.create(config.endpoint)
    if config.kind is BackendKind.DOCUMENT_STORE and config.endpoint:
        return HttpxDocumentStoreBackend.create(
            config.endpoint,
            settings.document_path,
            branch=settings.document_branch,
        )
    return None


def wire_services(  # noqa: PLR0913
    settings: Settings,
    backend_config: BackendConfig,
    backend: RecordBackend | None,
    cache: LocalCache,
    static_files: StaticFiles,
    clock: Callable[[], datetime],
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Assemble services around already-built adapters."""
    credentials = CredentialStore(
        cache=cache,
        storage_key=settings.credential_storage_key,
        configured=backend_config.credential,
    )
    sources: list[RecordSource] = []
    if backend is not None:
        sources.append(RemoteRecordSource(backend=backend, credential=credentials.get))
    sources.append(
        CachedRecordSource(cache=cache, storage_key=settings.local_storage_key)
    )
    sources.append(BootstrapRecordSource(static_files=static_files))

    store = RecordStore(
        sources=sources,
        cache=cache,
        storage_key=settings.local_storage_key,
        clock=clock,
    )
    return AppContainer(
        settings=settings,
        backend_config=backend_config,
        goal=goal_interval(settings),
        clock=clock,
        store=store,
        record_service=RecordService(
            store=store, credentials=credentials, backend=backend
        ),
        day_detail_service=DayDetailService(store=store, static_files=static_files),
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend_config = resolve_backend(resolved_settings)
    backend = build_backend(backend_config, resolved_settings)
    static_files = HttpxStaticFiles.create(resolved_settings.static_base_url)
    tz = ZoneInfo(resolved_settings.timezone)

    def clock() -> datetime:
        return datetime.now(tz=tz)

    async def close_resources() -> None:
        await static_files.close()
        if isinstance(backend, HttpxSpreadsheetBackend | HttpxDocumentStoreBackend):
            await backend.close()

    return wire_services(
        settings=resolved_settings,
        backend_config=backend_config,
        backend=backend,
        cache=FileLocalCache(resolved_settings.local_cache_path),
        static_files=static_files,
        clock=clock,
        close_resources=close_resources,
    )
