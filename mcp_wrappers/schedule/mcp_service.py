"""
MCP wrapper for the schedule service.

This module exposes the same tools as schedule_server.server but makes HTTP
calls to the schedule REST service. It handles serialization/deserialization
between the dataclass models and their Pydantic equivalents.
"""
from __future__ import annotations

import typing as t

import httpx
from fastmcp import FastMCP

from schedule_core.config import SCHEDULE_SERVICE_URL, STANDARD_TIMEOUT
from schedule_core.dates import get_today, get_year_month
from schedule_core.logger import get_logger
# Original dataclass models for the MCP interface
from schedule_core.models import ClassNote, DayOverride, DueReminder, GeneralNote, ResolvedClass, SubjectSchedule
# Pydantic models for HTTP serialization
from services.shared.models import (
    AddClassRequest,
    CancelClassRequest,
    ClassNote as PydanticClassNote,
    DayOverride as PydanticDayOverride,
    DayScheduleResponse,
    DueReminder as PydanticDueReminder,
    EditClassRequest,
    ExportScheduleResponse,
    GeneralNote as PydanticGeneralNote,
    ImportScheduleRequest,
    ImportScheduleResponse,
    SaveClassNoteRequest,
    SaveGeneralNoteRequest,
    ShowScheduleResponse,
    SubjectSchedule as PydanticSubjectSchedule,
)

logger = get_logger(__name__)

mcp = FastMCP("ScheduleMCPWrapper")


def _client() -> httpx.Client:
    """HTTP client bound to the schedule service."""
    return httpx.Client(base_url=SCHEDULE_SERVICE_URL, timeout=STANDARD_TIMEOUT)


def _call(action: str, method: str, path: str, **kwargs: t.Any) -> t.Any:
    """
    Send one request to the schedule service and return the decoded JSON body.

    :param action: Human-readable name of the operation, used in error messages.
    :raises RuntimeError: On timeouts, error statuses or connection problems.
    """
    try:
        with _client() as client:
            response = client.request(method, path, **kwargs)
            response.raise_for_status()
        return response.json()

    except httpx.TimeoutException:
        raise RuntimeError(f"{action} timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from schedule service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        logger.debug("Schedule service call %s %s failed", method, path, exc_info=True)
        raise RuntimeError(f"Error calling schedule service: {str(e)}")


def _import_schedule_csv(csv_text: str, file_name: str = "") -> ImportScheduleResponse:
    """Replace the weekly schedule via the service."""
    request = ImportScheduleRequest(csv_text=csv_text, file_name=file_name or None)
    return ImportScheduleResponse(**_call("Schedule import", "POST", "/schedule/import", json=request.model_dump()))


def _export_schedule_csv() -> str:
    return ExportScheduleResponse(**_call("Schedule export", "GET", "/schedule/export")).csv_text


def _get_csv_template(with_examples: bool = False) -> str:
    data = _call("Template download", "GET", "/schedule/template", params={"examples": with_examples})
    return ExportScheduleResponse(**data).csv_text


def _list_base_schedules() -> list[SubjectSchedule]:
    """
    List the recurring weekly classes.

    Responses are converted back into dataclasses so callers see the same
    types as the in-process server.
    """
    response_data = _call("List base schedules", "GET", "/schedule/base")
    return [_pydantic_to_dataclass_schedule(PydanticSubjectSchedule(**item)) for item in response_data]


def _show_base_schedule() -> str:
    return ShowScheduleResponse(**_call("Show base schedule", "GET", "/schedule/base/show")).formatted_schedule


def _get_day_schedule(date: str = "") -> list[ResolvedClass]:
    date = date or get_today()
    result = DayScheduleResponse(**_call("Day schedule", "GET", f"/schedule/day/{date}"))
    return [ResolvedClass(**c.model_dump()) for c in result.classes]


def _show_day_schedule(date: str = "") -> str:
    date = date or get_today()
    return ShowScheduleResponse(**_call("Show day", "GET", f"/schedule/day/{date}/show")).formatted_schedule


def _show_week_schedule(date: str = "") -> str:
    date = date or get_today()
    return ShowScheduleResponse(**_call("Show week", "GET", f"/schedule/week/{date}/show")).formatted_schedule


def _get_month_overview(year: int = 0, month: int = 0) -> dict[str, dict[str, bool]]:
    if not year or not month:
        year, month = get_year_month(get_today())
    return _call("Month overview", "GET", f"/schedule/month/{year}/{month}/indicators")


def _cancel_class(date: str, base_schedule_id: str) -> DayOverride:
    request = CancelClassRequest(date=date, base_schedule_id=base_schedule_id)
    data = _call("Cancel class", "POST", "/overrides/cancel", json=request.model_dump())
    return _pydantic_to_dataclass_override(PydanticDayOverride(**data))


def _edit_class(date: str, base_schedule_id: str, **changes: t.Any) -> DayOverride:
    request = EditClassRequest(date=date, base_schedule_id=base_schedule_id, **changes)
    data = _call("Edit class", "POST", "/overrides/edit", json=request.model_dump(exclude_none=True))
    return _pydantic_to_dataclass_override(PydanticDayOverride(**data))


def _add_class(
    date: str,
    subject_name: str,
    start_time: str,
    end_time: str,
    location: t.Optional[str] = None,
    professor: t.Optional[str] = None,
    color: t.Optional[str] = None,
) -> DayOverride:
    request = AddClassRequest(
        date=date,
        subject_name=subject_name,
        start_time=start_time,
        end_time=end_time,
        location=location,
        professor=professor,
        color=color,
    )
    data = _call("Add class", "POST", "/overrides/add", json=request.model_dump())
    return _pydantic_to_dataclass_override(PydanticDayOverride(**data))


def _delete_override(override_id: str) -> bool:
    _call("Delete override", "DELETE", f"/overrides/{override_id}")
    return True


def _save_class_note(date: str, instance_key: str, note_text: str) -> t.Optional[ClassNote]:
    request = SaveClassNoteRequest(date=date, instance_key=instance_key, note_text=note_text)
    data = _call("Save class note", "PUT", "/notes/class", json=request.model_dump())
    return ClassNote(**PydanticClassNote(**data).model_dump()) if data else None


def _create_general_note(date: str, title: str, note_text: str = "", due_date: str = "") -> GeneralNote:
    request = SaveGeneralNoteRequest(
        date=date,
        title=title,
        note_text=note_text or None,
        has_due_date=bool(due_date),
        due_date=due_date or None,
    )
    data = _call("Create general note", "POST", "/notes/general", json=request.model_dump())
    return GeneralNote(**PydanticGeneralNote(**data).model_dump())


def _list_general_notes(date: str = "") -> list[GeneralNote]:
    date = date or get_today()
    response_data = _call("List general notes", "GET", f"/notes/general/{date}")
    return [GeneralNote(**PydanticGeneralNote(**item).model_dump()) for item in response_data]


def _check_due_reminders(today: str = "") -> list[DueReminder]:
    params = {"today": today} if today else {}
    response_data = _call("Reminder check", "POST", "/reminders/check", params=params)
    return [DueReminder(**PydanticDueReminder(**item).model_dump()) for item in response_data]


def _pydantic_to_dataclass_schedule(pydantic_schedule: PydanticSubjectSchedule) -> SubjectSchedule:
    """Convert Pydantic SubjectSchedule to dataclass SubjectSchedule."""
    return SubjectSchedule(**pydantic_schedule.model_dump())


def _pydantic_to_dataclass_override(pydantic_override: PydanticDayOverride) -> DayOverride:
    """Convert Pydantic DayOverride to dataclass DayOverride (kind becomes an OverrideKind)."""
    return DayOverride(**pydantic_override.model_dump())


# MCP tool wrappers that call the raw functions
@mcp.tool()
def import_schedule_csv(csv_text: str, file_name: str = "") -> dict[str, t.Any]:
    """Replaces the weekly schedule with the classes in a CSV (all-or-nothing)."""
    return _import_schedule_csv(csv_text, file_name).model_dump()


@mcp.tool()
def export_schedule_csv() -> str:
    """Exports the weekly schedule as canonical CSV."""
    return _export_schedule_csv()


@mcp.tool()
def get_csv_template(with_examples: bool = False) -> str:
    """Returns the CSV import template."""
    return _get_csv_template(with_examples)


@mcp.tool()
def list_base_schedules() -> list[SubjectSchedule]:
    """Lists the recurring weekly classes."""
    return _list_base_schedules()


@mcp.tool()
def show_base_schedule() -> str:
    """Shows the recurring weekly classes as a table."""
    return _show_base_schedule()


@mcp.tool()
def get_day_schedule(date: str = "") -> list[ResolvedClass]:
    """Lists the classes that occur on a date (YYYY-MM-DD, default today), overrides applied."""
    return _get_day_schedule(date)


@mcp.tool()
def show_day_schedule(date: str = "") -> str:
    """Shows the classes of a date (default today) as a table."""
    return _show_day_schedule(date)


@mcp.tool()
def show_week_schedule(date: str = "") -> str:
    """Shows the week containing a date (default today)."""
    return _show_week_schedule(date)


@mcp.tool()
def get_month_overview(year: int = 0, month: int = 0) -> dict[str, dict[str, bool]]:
    """Returns per-day markers for a month (default current) covering classes, overrides and notes."""
    return _get_month_overview(year, month)


@mcp.tool()
def cancel_class(date: str, base_schedule_id: str) -> DayOverride:
    """Cancels a recurring class on one date."""
    return _cancel_class(date, base_schedule_id)


@mcp.tool()
def edit_class(
    date: str,
    base_schedule_id: str,
    subject_name: t.Optional[str] = None,
    start_time: t.Optional[str] = None,
    end_time: t.Optional[str] = None,
    location: t.Optional[str] = None,
    professor: t.Optional[str] = None,
    color: t.Optional[str] = None,
) -> DayOverride:
    """Changes a recurring class on one date only."""
    return _edit_class(
        date, base_schedule_id,
        subject_name=subject_name, start_time=start_time, end_time=end_time,
        location=location, professor=professor, color=color,
    )


@mcp.tool()
def add_class(
    date: str,
    subject_name: str,
    start_time: str,
    end_time: str,
    location: str = "",
    professor: str = "",
    color: str = "",
) -> DayOverride:
    """Adds a one-time class on a date."""
    return _add_class(
        date, subject_name, start_time, end_time,
        location=location or None, professor=professor or None, color=color or None,
    )


@mcp.tool()
def delete_override(override_id: str) -> bool:
    """Removes a cancel, edit or added class so the day reverts to the weekly schedule."""
    return _delete_override(override_id)


@mcp.tool()
def save_class_note(date: str, instance_key: str, note_text: str) -> t.Optional[ClassNote]:
    """Saves the note of one class instance; empty text deletes it."""
    return _save_class_note(date, instance_key, note_text)


@mcp.tool()
def create_general_note(date: str, title: str, note_text: str = "", due_date: str = "") -> GeneralNote:
    """Creates a note on a date, optionally with a due date for reminders."""
    return _create_general_note(date, title, note_text, due_date)


@mcp.tool()
def list_general_notes(date: str = "") -> list[GeneralNote]:
    """Lists the general notes of a date, newest first."""
    return _list_general_notes(date)


@mcp.tool()
def check_due_reminders(today: str = "") -> list[DueReminder]:
    """Returns reminders due today and marks them shown."""
    return _check_due_reminders(today)
