"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from habit_tracker.api.models import CredentialPayload, RecordPayload
from habit_tracker.app_logging import configure_logging
from habit_tracker.containers import AppContainer
from habit_tracker.domain.dates import is_date_key
from habit_tracker.domain.errors import CredentialMissing, ValidationError
from habit_tracker.domain.records import DayRecord
from habit_tracker.services.calendar import build_grid, year_bounds
from habit_tracker.services.progress import compute_progress
from habit_tracker.services.stats import summarize


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.store.load()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/records")
    async def list_records(request: Request) -> dict[str, object]:
        """Return every record keyed by date."""
        state_container: AppContainer = request.app.state.container
        return {
            "records": state_container.store.snapshot(),
            "source": state_container.store.loaded_from,
        }

    @app.get("/api/calendar")
    async def calendar(request: Request, year: int | None = None) -> dict[str, object]:
        """Return the heatmap grid for a year."""
        state_container: AppContainer = request.app.state.container
        today = state_container.today()
        first_year, last_year = year_bounds(
            state_container.settings.start_year, today
        )
        display_year = year if year is not None else today.year
        if not first_year <= display_year <= last_year:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Year must be between {first_year} and {last_year}",
            )
        cells = build_grid(display_year, state_container.store.records, today)
        return {
            "year": display_year,
            "first_year": first_year,
            "last_year": last_year,
            "cells": [asdict(cell) for cell in cells],
        }

    @app.get("/api/stats")
    async def stats(request: Request) -> dict[str, object]:
        """Return aggregate counters."""
        state_container: AppContainer = request.app.state.container
        summary = summarize(state_container.store.records, state_container.today())
        return asdict(summary)

    @app.get("/api/progress")
    async def progress(request: Request) -> dict[str, object]:
        """Return goal progress and its milestone phase."""
        state_container: AppContainer = request.app.state.container
        result = compute_progress(state_container.goal, state_container.clock())
        return asdict(result)

    @app.get("/api/days/{date_key}")
    async def day_detail(date_key: str, request: Request) -> dict[str, object]:
        """Return a day's record with its markdown body."""
        if not is_date_key(date_key):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Date must be YYYY-MM-DD",
            )
        state_container: AppContainer = request.app.state.container
        detail = await state_container.day_detail_service.get_day(date_key)
        return asdict(detail)

    @app.post("/api/records")
    async def save_record(
        payload: RecordPayload, request: Request
    ) -> dict[str, object]:
        """Save one day's record."""
        state_container: AppContainer = request.app.state.container
        record = DayRecord(
            date=payload.date,
            title=payload.title.strip(),
            level=payload.level,
            content=payload.content,
        )
        try:
            outcome = await state_container.record_service.save(record)
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        except CredentialMissing as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
            ) from exc
        if not outcome.saved:
            logger.warning("Save for %s did not reach the backend", record.date)
        stored = outcome.record
        return {
            "saved": outcome.saved,
            "message": outcome.message,
            "record": (
                {"date": stored.date, **stored.to_payload()} if stored else None
            ),
        }

    @app.put("/api/credential")
    async def store_credential(
        payload: CredentialPayload, request: Request
    ) -> dict[str, object]:
        """Remember a credential for later saves."""
        state_container: AppContainer = request.app.state.container
        try:
            stored = state_container.record_service.store_credential(
                payload.credential
            )
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return {"stored": stored}

    @app.post("/api/reload")
    async def reload(request: Request) -> dict[str, object]:
        """Re-run the load chain and report where records came from."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.record_service.reload()
        return {"count": len(records), "source": state_container.store.loaded_from}

    return app
