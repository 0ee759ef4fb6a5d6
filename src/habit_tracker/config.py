"""Application configuration."""

import os
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from habit_tracker.domain.progress import GoalInterval

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class BackendKind(str, Enum):
    """Remote backends the record store can sync with."""

    NONE = "none"
    SPREADSHEET = "spreadsheet"
    DOCUMENT_STORE = "document_store"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    backend: BackendKind = BackendKind.NONE
    endpoint: str | None = None
    credential: str | None = None
    document_path: str = "data/index.json"
    document_branch: str | None = None
    static_base_url: str = "http://localhost:8000"
    local_cache_path: Path = Path(".habit-tracker/local-storage.json")
    local_storage_key: str = "daily-tracker-data"
    credential_storage_key: str = "daily-tracker-credential"
    timezone: str = "UTC"
    start_year: int = 2026
    goal_start: date = date(2026, 1, 1)
    goal_end: date = date(2029, 12, 31)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="HABIT_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


@dataclass(frozen=True)
class BackendConfig:
    """Backend selection resolved once at startup."""

    kind: BackendKind
    endpoint: str | None
    credential: str | None


def resolve_backend(settings: Settings) -> BackendConfig:
    """Resolve the backend, disabling it when no endpoint is configured."""
    endpoint = (settings.endpoint or "").strip() or None
    kind = settings.backend if endpoint else BackendKind.NONE
    credential = (settings.credential or "").strip() or None
    return BackendConfig(kind=kind, endpoint=endpoint, credential=credential)


def goal_interval(settings: Settings) -> GoalInterval:
    """Return the configured goal interval."""
    if settings.goal_end < settings.goal_start:
        raise ValueError("goal_end must not be before goal_start")
    return GoalInterval(start=settings.goal_start, end=settings.goal_end)
