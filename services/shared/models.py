"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models in
schedule_core.models, ensuring consistent JSON serialization between the
schedule service and its clients.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, Field


# Type literals for commonly used values
OverrideKindLiteral = t.Literal["edit", "cancel", "add"]
WeekStart = t.Literal["monday", "sunday"]
TimeFormat = t.Literal["12h", "24h"]
NotificationTime = t.Literal["08:00", "12:00", "18:00"]


class SubjectSchedule(BaseModel):
    """
    One recurring weekly class.
    """
    id: str
    subject_name: str
    weekday: int = Field(ge=0, le=6)      # 0 = Sunday
    start_time: str                        # "HH:MM" 24h
    end_time: str                          # "HH:MM" 24h
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None


class DayOverride(BaseModel):
    """
    A date-specific exception to the weekly schedule.
    """
    id: str
    date: str                              # "YYYY-MM-DD"
    kind: OverrideKindLiteral
    subject_name: str
    start_time: str
    end_time: str
    base_schedule_id: t.Optional[str] = None
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None


class ResolvedClass(BaseModel):
    """A class as it occurs on one concrete date."""
    instance_key: str
    date: str
    subject_name: str
    start_time: str
    end_time: str
    base_schedule_id: t.Optional[str] = None
    override_id: t.Optional[str] = None
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None
    is_canceled: bool = False
    is_overridden: bool = False
    is_added: bool = False
    has_note: bool = False


class ClassNote(BaseModel):
    """Note attached to one class instance."""
    id: str
    date: str
    class_instance_key: str
    subject_name: str
    start_time: str
    note_text: str
    updated_at: str


class GeneralNote(BaseModel):
    """Note shown on a date, optionally with a due date."""
    id: str
    date: str
    title: str
    created_at: str
    updated_at: str
    note_text: t.Optional[str] = None
    has_due_date: bool = False
    due_date: t.Optional[str] = None


class AppSettings(BaseModel):
    """User preferences and import bookkeeping."""
    week_start: WeekStart = "monday"
    time_format: TimeFormat = "12h"
    last_imported_file_name: t.Optional[str] = None
    last_imported_at: t.Optional[str] = None
    schema_version: int = 1
    notifications_enabled: bool = False
    notification_time: NotificationTime = "08:00"


class CSVValidationError(BaseModel):
    """One problem found in an imported CSV."""
    row: int
    column: str
    message: str


class DueReminder(BaseModel):
    """A reminder that should be shown today."""
    note_id: str
    title: str
    due_date: str
    days_until_due: int
    message: str


# Request/Response Models for API endpoints
class ImportScheduleRequest(BaseModel):
    """Request model for importing a CSV schedule."""
    csv_text: str
    file_name: t.Optional[str] = None


class ImportScheduleResponse(BaseModel):
    """Response model for a CSV import."""
    success: bool
    imported_count: int = 0
    errors: list[CSVValidationError] = Field(default_factory=list)
    remaining_error_count: int = 0


class ExportScheduleResponse(BaseModel):
    """Response model for a CSV export."""
    csv_text: str


class DayScheduleResponse(BaseModel):
    """Resolved classes of one date."""
    date: str
    classes: list[ResolvedClass] = Field(default_factory=list)


class RangeScheduleResponse(BaseModel):
    """Resolved classes of consecutive dates."""
    days: list[DayScheduleResponse] = Field(default_factory=list)


class ShowScheduleResponse(BaseModel):
    """Response model for formatted schedule display."""
    formatted_schedule: str


class CancelClassRequest(BaseModel):
    """Request model for canceling a class on one date."""
    date: str
    base_schedule_id: str


class EditClassRequest(BaseModel):
    """Request model for changing a class on one date; unset fields keep their value."""
    date: str
    base_schedule_id: str
    subject_name: t.Optional[str] = None
    start_time: t.Optional[str] = None
    end_time: t.Optional[str] = None
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None


class AddClassRequest(BaseModel):
    """Request model for adding (or updating) a one-time class."""
    date: str
    subject_name: str
    start_time: str
    end_time: str
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None
    override_id: t.Optional[str] = None


class SaveClassNoteRequest(BaseModel):
    """Request model for saving the note of a class instance."""
    date: str
    instance_key: str
    note_text: str = ""


class SaveGeneralNoteRequest(BaseModel):
    """Request model for creating or updating a general note."""
    date: str
    title: str
    note_text: t.Optional[str] = None
    has_due_date: bool = False
    due_date: t.Optional[str] = None
    id: t.Optional[str] = None


class UpdateSettingsRequest(BaseModel):
    """Request model for changing settings; unset fields are left alone."""
    week_start: t.Optional[WeekStart] = None
    time_format: t.Optional[TimeFormat] = None
    notifications_enabled: t.Optional[bool] = None
    notification_time: t.Optional[NotificationTime] = None
