"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from intake_tracker.api.forms import (
    EntryForm,
    IntakeCheck,
    RecordOut,
    SettingsForm,
    SettingsOut,
    SummaryOut,
)
from intake_tracker.app_logging import configure_logging
from intake_tracker.containers import AppContainer
from intake_tracker.domain.errors import IntakeRejectedError, StorageError


def create_app(container: AppContainer, run_scheduler: bool = True) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if run_scheduler:
            reminder = state_container.target_settings_service.load_reminder()
            state_container.daily_jobs.start(reminder)
        yield
        state_container.daily_jobs.shutdown()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StorageError)
    async def storage_error_handler(
        request: Request, exc: StorageError
    ) -> JSONResponse:
        logger.exception("Storage write failed", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/summary")
    async def summary(request: Request) -> SummaryOut:
        """Return today's totals, progress and statistics."""
        state_container: AppContainer = request.app.state.container
        return SummaryOut.from_domain(state_container.tracker.summary())

    @app.get("/records")
    async def list_records(
        request: Request, day: date | None = None
    ) -> list[RecordOut]:
        """Return the records of a day, newest first."""
        tracker = request.app.state.container.tracker
        records = tracker.records_for(day or tracker.today())
        return [RecordOut.from_domain(record) for record in records]

    @app.post("/records/validate")
    async def validate_record(form: EntryForm, request: Request) -> IntakeCheck:
        """Classify a prospective entry without saving it."""
        tracker = request.app.state.container.tracker
        if form.water_amount is not None:
            intake_status = tracker.validate_intake(water=form.water_amount)
        else:
            intake_status = tracker.validate_intake(calories=form.calories)
        return IntakeCheck(status=intake_status)

    @app.post("/records", status_code=status.HTTP_201_CREATED)
    async def add_record(form: EntryForm, request: Request) -> IntakeCheck:
        """Submit the entry form."""
        tracker = request.app.state.container.tracker
        record = form.to_record(tracker.now())
        try:
            intake_status = tracker.submit(record)
        except IntakeRejectedError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "status": exc.status.value,
                    "message": "This amount might be unsafe. Please reconsider.",
                },
            ) from exc
        return IntakeCheck(status=intake_status, record=RecordOut.from_domain(record))

    @app.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(record_id: UUID, request: Request) -> Response:
        """Delete a record."""
        request.app.state.container.tracker.delete_record(record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/settings")
    async def get_settings(request: Request) -> SettingsOut:
        """Return targets and reminder preferences."""
        state_container: AppContainer = request.app.state.container
        return SettingsOut.from_domain(
            state_container.tracker.targets,
            state_container.target_settings_service.load_reminder(),
        )

    @app.put("/settings")
    async def update_settings(form: SettingsForm, request: Request) -> SettingsOut:
        """Save and reschedule the reminder, then persist changed targets.

        Each setting is written separately, so a storage failure part way
        through answers 503 with the earlier writes kept. The reminder goes
        first and its job is rescheduled before any target is touched.
        """
        state_container: AppContainer = request.app.state.container
        tracker = state_container.tracker
        reminder = form.reminder()
        state_container.target_settings_service.save_reminder(reminder)
        state_container.daily_jobs.schedule_reminder(reminder)
        if form.water_target != tracker.targets.water_target:
            tracker.update_water_target(form.water_target)
        if form.calorie_target != tracker.targets.calorie_target:
            tracker.update_calorie_target(form.calorie_target)
        return SettingsOut.from_domain(tracker.targets, reminder)

    @app.post("/reset")
    async def reset_today(request: Request) -> dict[str, str]:
        """Delete today's records."""
        request.app.state.container.tracker.reset_daily()
        return {"status": "ok"}

    return app
