"""
Data models for the weekly schedule, its per-day overrides and notes.

This module contains all the dataclasses used to represent the recurring base
schedule, date-specific overrides, resolved class instances and notes.
"""
from __future__ import annotations

import typing as t
import uuid
from dataclasses import dataclass, field
from enum import Enum

from schedule_core.constants import SCHEMA_VERSION


def generate_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid.uuid4())


class OverrideKind(str, Enum):
    """What a day override does to the schedule on its date."""
    EDIT = "edit"
    CANCEL = "cancel"
    ADD = "add"


WeekStart = t.Literal["monday", "sunday"]
TimeFormat = t.Literal["12h", "24h"]
NotificationTime = t.Literal["08:00", "12:00", "18:00"]


@dataclass
class SubjectSchedule:
    """
    One recurring weekly class, e.g.:
    - "Physics, Monday 09:00-10:30, Lab A"
    """
    id: str
    subject_name: str
    weekday: int            # 0 (Sunday) - 6 (Saturday)
    start_time: str         # "HH:MM" 24h
    end_time: str           # "HH:MM" 24h
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None     # hex or preset name, stored as given


@dataclass
class DayOverride:
    """
    A date-specific exception to the base schedule.

    ``base_schedule_id`` is None for ADD overrides and set for EDIT/CANCEL.
    """
    id: str
    date: str               # "YYYY-MM-DD"
    kind: OverrideKind
    subject_name: str
    start_time: str
    end_time: str
    base_schedule_id: t.Optional[str] = None
    location: t.Optional[str] = None
    professor: t.Optional[str] = None
    color: t.Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OverrideKind):
            self.kind = OverrideKind(self.kind)


@dataclass
class ResolvedClass:
    """A base schedule entry or added class as it occurs on one concrete date."""
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


@dataclass
class ClassNote:
    """Free-text note for one class instance (one note per instance key)."""
    id: str
    date: str
    class_instance_key: str
    subject_name: str       # copied for display without lookup
    start_time: str
    note_text: str
    updated_at: str         # ISO timestamp


@dataclass
class GeneralNote:
    """A note shown on a date, optionally with a due date that drives reminders."""
    id: str
    date: str
    title: str
    created_at: str
    updated_at: str
    note_text: t.Optional[str] = None
    has_due_date: bool = False
    due_date: t.Optional[str] = None


@dataclass
class NotificationRecord:
    """Marks that a reminder for a note was shown on a given date."""
    id: str                 # "{note_id}:{notification_date}"
    note_id: str
    notification_date: str
    shown_at: str


@dataclass
class AppSettings:
    """User preferences and import bookkeeping."""
    week_start: WeekStart = "monday"
    time_format: TimeFormat = "12h"
    last_imported_file_name: t.Optional[str] = None
    last_imported_at: t.Optional[str] = None
    schema_version: int = SCHEMA_VERSION
    notifications_enabled: bool = False
    notification_time: NotificationTime = "08:00"


@dataclass
class CSVValidationError:
    """One problem found while validating an imported CSV."""
    row: int                # 1-based CSV record; 0 for file-level problems
    column: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a CSV: either schedules or errors, never both."""
    is_valid: bool
    schedules: list[SubjectSchedule] = field(default_factory=list)
    errors: list[CSVValidationError] = field(default_factory=list)


@dataclass
class DueReminder:
    """A general note whose due date is close enough to notify about today."""
    note_id: str
    title: str
    due_date: str
    days_until_due: int
    message: str
