"""
FastAPI service for schedule operations.

This service exposes the schedule resolution engine, the CSV import pipeline
and note management from schedule_core/schedule_server as REST API endpoints.
All operations are local and fast; the repository is opened on startup and
closed on shutdown.
"""
from __future__ import annotations

import typing as t
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request

from schedule_core.config import DATA_PATH, SCHEDULE_SERVICE_PORT
from schedule_core.csv_template import generate_blank_template, generate_example_template, schedules_to_csv
from schedule_core.errors import CUSTOM_ERRORS, NotFoundError
from schedule_core.importer import import_schedule_csv
from schedule_core.logger import get_logger
from schedule_core import models as core
from schedule_core.reminders import check_due_reminders
from schedule_server import actions, queries
from schedule_server.formatting import format_base_schedule, format_day, format_week
from schedule_server.store import ScheduleRepository
from services.shared.models import (
    AddClassRequest,
    AppSettings as PydanticAppSettings,
    CancelClassRequest,
    ClassNote as PydanticClassNote,
    CSVValidationError as PydanticCSVValidationError,
    DayOverride as PydanticDayOverride,
    DayScheduleResponse,
    DueReminder as PydanticDueReminder,
    EditClassRequest,
    ExportScheduleResponse,
    GeneralNote as PydanticGeneralNote,
    ImportScheduleRequest,
    ImportScheduleResponse,
    RangeScheduleResponse,
    ResolvedClass as PydanticResolvedClass,
    SaveClassNoteRequest,
    SaveGeneralNoteRequest,
    ShowScheduleResponse,
    SubjectSchedule as PydanticSubjectSchedule,
    UpdateSettingsRequest,
)

logger = get_logger(__name__)

router = APIRouter()


def get_repository(request: Request) -> ScheduleRepository:
    """Dependency returning the repository opened by the lifespan handler."""
    return request.app.state.repository


def _http_error(e: Exception) -> HTTPException:
    """Translate a planner exception into an HTTPException."""
    status_code = CUSTOM_ERRORS.get(type(e), 400 if isinstance(e, ValueError) else 500)
    if status_code >= 500:
        logger.error("Schedule service error: %s", e, exc_info=True)
    return HTTPException(status_code=status_code, detail=str(e))


_HANDLED = tuple(CUSTOM_ERRORS) + (ValueError,)


def _override_model(override: core.DayOverride) -> PydanticDayOverride:
    data = asdict(override)
    data["kind"] = override.kind.value
    return PydanticDayOverride(**data)


def _day_response(date: str, classes: list[core.ResolvedClass]) -> DayScheduleResponse:
    return DayScheduleResponse(
        date=date,
        classes=[PydanticResolvedClass(**asdict(c)) for c in classes],
    )


@router.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "schedule-service"}


@router.post("/schedule/import", response_model=ImportScheduleResponse)
async def import_schedule(
        request: ImportScheduleRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> ImportScheduleResponse:
    """
    Replace the weekly schedule with the contents of a CSV.

    Validation failures are reported in the body with ``success`` false; the
    stored schedule is left untouched in that case.
    """
    try:
        result = import_schedule_csv(request.csv_text, repository, file_name=request.file_name)
    except _HANDLED as e:
        raise _http_error(e)
    return ImportScheduleResponse(
        success=result.success,
        imported_count=result.imported_count,
        errors=[PydanticCSVValidationError(**asdict(e)) for e in result.error_preview],
        remaining_error_count=result.remaining_error_count,
    )


@router.get("/schedule/export", response_model=ExportScheduleResponse)
async def export_schedule(repository: ScheduleRepository = Depends(get_repository)) -> ExportScheduleResponse:
    """Export the weekly schedule as canonical CSV."""
    return ExportScheduleResponse(csv_text=schedules_to_csv(repository.get_all_base_schedules()))


@router.get("/schedule/template", response_model=ExportScheduleResponse)
async def csv_template(examples: bool = False) -> ExportScheduleResponse:
    """Blank or example CSV template."""
    return ExportScheduleResponse(csv_text=generate_example_template() if examples else generate_blank_template())


@router.get("/schedule/base", response_model=list[PydanticSubjectSchedule])
async def list_base_schedules(
        repository: ScheduleRepository = Depends(get_repository),
) -> list[PydanticSubjectSchedule]:
    """List the recurring weekly classes."""
    return [PydanticSubjectSchedule(**asdict(s)) for s in repository.get_all_base_schedules()]


@router.get("/schedule/base/show", response_model=ShowScheduleResponse)
async def show_base_schedule(repository: ScheduleRepository = Depends(get_repository)) -> ShowScheduleResponse:
    """Weekly schedule as a formatted table."""
    formatted = format_base_schedule(repository.get_all_base_schedules(), repository.get_settings().time_format)
    return ShowScheduleResponse(formatted_schedule=formatted)


@router.get("/schedule/day/{date}", response_model=DayScheduleResponse)
async def get_day(date: str, repository: ScheduleRepository = Depends(get_repository)) -> DayScheduleResponse:
    """
    Resolved classes of one date.

    Classes are sorted by start time; canceled classes are included and flagged.
    """
    try:
        return _day_response(date, queries.get_resolved_day(repository, date))
    except _HANDLED as e:
        raise _http_error(e)


@router.get("/schedule/day/{date}/show", response_model=ShowScheduleResponse)
async def show_day(date: str, repository: ScheduleRepository = Depends(get_repository)) -> ShowScheduleResponse:
    """One date as a formatted table."""
    try:
        classes = queries.get_resolved_day(repository, date)
    except _HANDLED as e:
        raise _http_error(e)
    return ShowScheduleResponse(formatted_schedule=format_day(date, classes, repository.get_settings().time_format))


@router.get("/schedule/week/{date}", response_model=RangeScheduleResponse)
async def get_week(
        date: str,
        week_start: t.Optional[str] = None,
        repository: ScheduleRepository = Depends(get_repository),
) -> RangeScheduleResponse:
    """Resolved classes of the week containing a date."""
    try:
        week = queries.get_resolved_week(repository, date, week_start)
    except _HANDLED as e:
        raise _http_error(e)
    return RangeScheduleResponse(days=[_day_response(day, classes) for day, classes in week.items()])


@router.get("/schedule/week/{date}/show", response_model=ShowScheduleResponse)
async def show_week(date: str, repository: ScheduleRepository = Depends(get_repository)) -> ShowScheduleResponse:
    """The week containing a date as formatted text."""
    try:
        week = queries.get_resolved_week(repository, date)
    except _HANDLED as e:
        raise _http_error(e)
    return ShowScheduleResponse(formatted_schedule=format_week(week, repository.get_settings().time_format))


@router.get("/schedule/month/{year}/{month}", response_model=RangeScheduleResponse)
async def get_month(
        year: int,
        month: int,
        repository: ScheduleRepository = Depends(get_repository),
) -> RangeScheduleResponse:
    """Resolved classes of every day in a month."""
    try:
        days = queries.get_resolved_month(repository, year, month)
    except _HANDLED as e:
        raise _http_error(e)
    return RangeScheduleResponse(days=[_day_response(day, classes) for day, classes in days.items()])


@router.get("/schedule/month/{year}/{month}/indicators")
async def get_month_indicators(
        year: int,
        month: int,
        repository: ScheduleRepository = Depends(get_repository),
) -> dict[str, dict[str, bool]]:
    """Per-day markers for a month calendar grid."""
    try:
        return queries.get_month_indicators(repository, year, month)
    except _HANDLED as e:
        raise _http_error(e)


@router.post("/overrides/cancel", response_model=PydanticDayOverride)
async def cancel_class(
        request: CancelClassRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticDayOverride:
    """Cancel a recurring class on one date."""
    try:
        return _override_model(actions.cancel_class(repository, request.date, request.base_schedule_id))
    except _HANDLED as e:
        raise _http_error(e)


@router.post("/overrides/edit", response_model=PydanticDayOverride)
async def edit_class(
        request: EditClassRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticDayOverride:
    """Change a recurring class on one date."""
    changes = request.model_dump(exclude={"date", "base_schedule_id"}, exclude_none=True)
    try:
        return _override_model(actions.edit_class(repository, request.date, request.base_schedule_id, **changes))
    except _HANDLED as e:
        raise _http_error(e)


@router.post("/overrides/add", response_model=PydanticDayOverride)
async def add_class(
        request: AddClassRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticDayOverride:
    """Add a one-time class (or update one when ``override_id`` is set)."""
    try:
        return _override_model(actions.add_class(repository, **request.model_dump()))
    except _HANDLED as e:
        raise _http_error(e)


@router.delete("/overrides/{override_id}")
async def delete_override(override_id: str, repository: ScheduleRepository = Depends(get_repository)):
    """Delete an override so its date reverts to the weekly schedule."""
    try:
        if not repository.delete_override(override_id):
            raise NotFoundError(f"Override '{override_id}' not found")
    except _HANDLED as e:
        raise _http_error(e)
    return {"deleted": override_id}


@router.put("/notes/class", response_model=t.Optional[PydanticClassNote])
async def save_class_note(
        request: SaveClassNoteRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> t.Optional[PydanticClassNote]:
    """Save the note of a class instance; empty text deletes it and returns null."""
    try:
        note = actions.save_note_for_class(repository, request.date, request.instance_key, request.note_text)
    except _HANDLED as e:
        raise _http_error(e)
    return PydanticClassNote(**asdict(note)) if note else None


@router.get("/notes/class/{instance_key}", response_model=PydanticClassNote)
async def get_class_note(
        instance_key: str,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticClassNote:
    """Note of one class instance."""
    note = repository.get_class_note(instance_key)
    if note is None:
        raise _http_error(NotFoundError(f"No note for '{instance_key}'"))
    return PydanticClassNote(**asdict(note))


@router.post("/notes/general", response_model=PydanticGeneralNote)
async def save_general_note(
        request: SaveGeneralNoteRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticGeneralNote:
    """Create a general note, or update it when ``id`` is set."""
    try:
        note = repository.save_general_note(
            date=request.date,
            title=request.title,
            note_text=request.note_text,
            has_due_date=request.has_due_date,
            due_date=request.due_date,
            note_id=request.id,
        )
    except _HANDLED as e:
        raise _http_error(e)
    return PydanticGeneralNote(**asdict(note))


@router.get("/notes/general/{date}", response_model=list[PydanticGeneralNote])
async def list_general_notes(
        date: str,
        repository: ScheduleRepository = Depends(get_repository),
) -> list[PydanticGeneralNote]:
    """General notes of a date, newest first."""
    try:
        notes = repository.get_general_notes_by_date(date)
    except _HANDLED as e:
        raise _http_error(e)
    return [PydanticGeneralNote(**asdict(n)) for n in notes]


@router.delete("/notes/general/{note_id}")
async def delete_general_note(note_id: str, repository: ScheduleRepository = Depends(get_repository)):
    """Delete a general note and its reminder history."""
    if not repository.delete_general_note(note_id):
        raise _http_error(NotFoundError(f"General note '{note_id}' not found"))
    return {"deleted": note_id}


@router.post("/reminders/check", response_model=list[PydanticDueReminder])
async def check_reminders(
        today: t.Optional[str] = None,
        repository: ScheduleRepository = Depends(get_repository),
) -> list[PydanticDueReminder]:
    """Reminders due today; each is returned once per day."""
    try:
        reminders = check_due_reminders(repository, today)
    except _HANDLED as e:
        raise _http_error(e)
    return [PydanticDueReminder(**asdict(r)) for r in reminders]


@router.get("/settings", response_model=PydanticAppSettings)
async def get_settings(repository: ScheduleRepository = Depends(get_repository)) -> PydanticAppSettings:
    return PydanticAppSettings(**asdict(repository.get_settings()))


@router.patch("/settings", response_model=PydanticAppSettings)
async def update_settings(
        request: UpdateSettingsRequest,
        repository: ScheduleRepository = Depends(get_repository),
) -> PydanticAppSettings:
    """Change settings; omitted fields are left alone."""
    try:
        settings = repository.update_settings(**request.model_dump(exclude_none=True))
    except _HANDLED as e:
        raise _http_error(e)
    return PydanticAppSettings(**asdict(settings))


@router.get("/backup")
async def export_backup(repository: ScheduleRepository = Depends(get_repository)) -> dict[str, t.Any]:
    """Everything in the store as one JSON document."""
    return repository.export_backup()


@router.delete("/data")
async def clear_all_data(repository: ScheduleRepository = Depends(get_repository)):
    """Delete all schedules, overrides, notes and settings."""
    try:
        repository.clear_all_data()
    except _HANDLED as e:
        raise _http_error(e)
    return {"cleared": True}


def create_app(repository: t.Optional[ScheduleRepository] = None) -> FastAPI:
    """Build the schedule service around a repository.

    :param repository: Repository to serve; defaults to the JSON file from config.
    """
    repo = repository if repository is not None else ScheduleRepository(DATA_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the repository on startup and close it on shutdown."""
        app.state.repository = repo.open()
        yield
        repo.close()

    application = FastAPI(
        title="Schedule Service",
        description="REST API for weekly schedule import, per-day overrides and notes",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.include_router(router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=SCHEDULE_SERVICE_PORT)
