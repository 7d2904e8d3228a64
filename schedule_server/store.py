# -*- coding: utf-8 -*-
"""
Document-style storage for schedules, overrides, notes and settings.

``ScheduleRepository`` keeps every collection in memory and, when given a
path, writes the whole document to a JSON file after each mutation. It has an
explicit open/close lifecycle and is passed to whatever needs it; there is no
module-level connection.
"""
from __future__ import annotations

import json
import os
import tempfile
import typing as t
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path

from schedule_core.constants import GENERAL_NOTE_TITLE_MAX_LENGTH, NOTE_MAX_LENGTH, SCHEMA_VERSION
from schedule_core.dates import to_date_string
from schedule_core.errors import NoteValidationError, OverrideValidationError, SettingsError, StorageError
from schedule_core.logger import get_logger
from schedule_core.models import (AppSettings, ClassNote, DayOverride, GeneralNote, NotificationRecord,
                                  OverrideKind, SubjectSchedule, generate_id)
from schedule_core.times import parse_time, time_to_minutes

logger = get_logger(__name__)

_SETTINGS_CHOICES: dict[str, tuple[str, ...]] = {
    "week_start": ("monday", "sunday"),
    "time_format": ("12h", "24h"),
    "notification_time": ("08:00", "12:00", "18:00"),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _in_range(value: t.Optional[str], start: str, end: str) -> bool:
    return value is not None and start <= value <= end


class ScheduleRepository:
    """Keyed collections backing the planner.

    Usage::

        with ScheduleRepository("data/schedule.json") as repo:
            repo.replace_all_base_schedules(schedules)

    Pass ``path=None`` for a purely in-memory repository.
    """

    def __init__(self, path: t.Optional[t.Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._is_open = False
        self._reset()

    def _reset(self) -> None:
        self._base_schedules: dict[str, SubjectSchedule] = {}
        self._overrides: dict[str, DayOverride] = {}
        self._class_notes: dict[str, ClassNote] = {}       # keyed by instance key
        self._general_notes: dict[str, GeneralNote] = {}
        self._notification_records: dict[str, NotificationRecord] = {}
        self._settings = AppSettings()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> "ScheduleRepository":
        """Load the backing document (if any) and allow access.

        :raises StorageError: If the file exists but cannot be read or decoded.
        """
        if self._is_open:
            return self
        self._reset()
        if self.path is not None and self.path.exists():
            try:
                document = json.loads(self.path.read_text(encoding="utf-8"))
                self._load_document(document)
            except (OSError, ValueError, TypeError, KeyError) as e:
                raise StorageError(f"Could not load schedule data from {self.path}: {e}") from e
            logger.info("Opened schedule data at %s", self.path)
        self._is_open = True
        return self

    def close(self) -> None:
        self._is_open = False

    def __enter__(self) -> "ScheduleRepository":
        return self.open()

    def __exit__(self, *exc_info: t.Any) -> None:
        self.close()

    def _require_open(self) -> None:
        if not self._is_open:
            raise StorageError("Schedule repository is not open")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _document(self) -> dict[str, t.Any]:
        overrides = []
        for override in self._overrides.values():
            data = asdict(override)
            data["kind"] = override.kind.value
            overrides.append(data)
        return {
            "schema_version": SCHEMA_VERSION,
            "base_schedules": [asdict(s) for s in self._base_schedules.values()],
            "overrides": overrides,
            "class_notes": [asdict(n) for n in self._class_notes.values()],
            "general_notes": [asdict(n) for n in self._general_notes.values()],
            "notification_records": [asdict(r) for r in self._notification_records.values()],
            "settings": asdict(self._settings),
        }

    def _load_document(self, document: dict[str, t.Any]) -> None:
        self._base_schedules = {
            item["id"]: SubjectSchedule(**item) for item in document.get("base_schedules", [])
        }
        self._overrides = {
            item["id"]: DayOverride(**item) for item in document.get("overrides", [])
        }
        self._class_notes = {
            item["class_instance_key"]: ClassNote(**item) for item in document.get("class_notes", [])
        }
        self._general_notes = {
            item["id"]: GeneralNote(**item) for item in document.get("general_notes", [])
        }
        self._notification_records = {
            item["id"]: NotificationRecord(**item) for item in document.get("notification_records", [])
        }
        known = {f.name for f in fields(AppSettings)}
        settings = {k: v for k, v in document.get("settings", {}).items() if k in known}
        self._settings = AppSettings(**settings)

    def _persist(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".schedule-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._document(), fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StorageError(f"Could not write schedule data to {self.path}: {e}") from e

    def _commit(self, rollback: t.Callable[[], None]) -> None:
        """Persist, undoing the in-memory change if the write fails."""
        try:
            self._persist()
        except StorageError:
            rollback()
            raise

    # ------------------------------------------------------------------
    # Base schedules
    # ------------------------------------------------------------------

    def get_all_base_schedules(self) -> list[SubjectSchedule]:
        self._require_open()
        return list(self._base_schedules.values())

    def get_base_schedule(self, schedule_id: str) -> t.Optional[SubjectSchedule]:
        self._require_open()
        return self._base_schedules.get(schedule_id)

    def replace_all_base_schedules(self, schedules: t.Sequence[SubjectSchedule]) -> list[SubjectSchedule]:
        """Atomically swap the whole base schedule for a new one.

        Overrides that pointed at the old entries are kept; they simply stop
        matching anything.
        """
        self._require_open()
        previous = self._base_schedules
        self._base_schedules = {schedule.id: schedule for schedule in schedules}

        def rollback() -> None:
            self._base_schedules = previous

        self._commit(rollback)
        logger.info("Replaced base schedule: %d -> %d entries", len(previous), len(self._base_schedules))
        return list(self._base_schedules.values())

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def get_override(self, override_id: str) -> t.Optional[DayOverride]:
        self._require_open()
        return self._overrides.get(override_id)

    def get_overrides_for_date(self, date: str) -> list[DayOverride]:
        day = to_date_string(date)
        return self.get_overrides_by_date_range(day, day)

    def get_overrides_by_date_range(self, start: str, end: str) -> list[DayOverride]:
        """Overrides dated between start and end, both inclusive."""
        self._require_open()
        first, last = to_date_string(start), to_date_string(end)
        return [o for o in self._overrides.values() if _in_range(o.date, first, last)]

    def get_dates_with_overrides(self, start: str, end: str) -> set[str]:
        return {o.date for o in self.get_overrides_by_date_range(start, end)}

    def upsert_override(self, override: DayOverride) -> DayOverride:
        """Create or replace an override and return the stored version.

        Times are normalized to ``HH:MM``. An edit or cancel replaces any
        other edit/cancel override for the same date and base schedule.

        :raises OverrideValidationError: If the override is inconsistent.
        """
        self._require_open()
        stored = _normalize_override(override)

        replaced = {
            other_id: other for other_id, other in self._overrides.items()
            if other_id != stored.id
            and other.kind is not OverrideKind.ADD
            and stored.kind is not OverrideKind.ADD
            and other.date == stored.date
            and other.base_schedule_id == stored.base_schedule_id
        }
        previous = self._overrides.get(stored.id)
        for other_id in replaced:
            del self._overrides[other_id]
        self._overrides[stored.id] = stored

        def rollback() -> None:
            self._overrides.update(replaced)
            if previous is None:
                self._overrides.pop(stored.id, None)
            else:
                self._overrides[stored.id] = previous

        self._commit(rollback)
        if replaced:
            logger.info("Override %s replaced %d earlier override(s) for %s", stored.id, len(replaced), stored.date)
        return stored

    def delete_override(self, override_id: str) -> bool:
        """Delete an override; returns False if it did not exist."""
        self._require_open()
        removed = self._overrides.pop(override_id, None)
        if removed is None:
            return False
        self._commit(lambda: self._overrides.__setitem__(override_id, removed))
        return True

    # ------------------------------------------------------------------
    # Class notes
    # ------------------------------------------------------------------

    def get_class_note(self, instance_key: str) -> t.Optional[ClassNote]:
        self._require_open()
        return self._class_notes.get(instance_key)

    def get_class_notes_by_date(self, date: str) -> list[ClassNote]:
        self._require_open()
        day = to_date_string(date)
        return [n for n in self._class_notes.values() if n.date == day]

    def get_note_keys_for_range(self, start: str, end: str) -> set[str]:
        """Instance keys of class notes dated within the range."""
        self._require_open()
        first, last = to_date_string(start), to_date_string(end)
        return {key for key, note in self._class_notes.items() if _in_range(note.date, first, last)}

    def get_dates_with_notes(self, start: str, end: str) -> set[str]:
        self._require_open()
        first, last = to_date_string(start), to_date_string(end)
        return {n.date for n in self._class_notes.values() if _in_range(n.date, first, last)}

    def save_class_note(
            self,
            instance_key: str,
            date: str,
            subject_name: str,
            start_time: str,
            note_text: str,
    ) -> t.Optional[ClassNote]:
        """Create, update or (for empty text) delete the note of a class instance.

        :return: The stored note, or None if empty text removed it.
        :raises NoteValidationError: If the text exceeds the length limit.
        """
        self._require_open()
        text = note_text.strip()
        if len(text) > NOTE_MAX_LENGTH:
            raise NoteValidationError(f"Note is longer than {NOTE_MAX_LENGTH} characters")
        if not text:
            self.delete_class_note(instance_key)
            return None

        previous = self._class_notes.get(instance_key)
        note = ClassNote(
            id=previous.id if previous else generate_id(),
            date=to_date_string(date),
            class_instance_key=instance_key,
            subject_name=subject_name,
            start_time=start_time,
            note_text=text,
            updated_at=_now(),
        )
        self._class_notes[instance_key] = note

        def rollback() -> None:
            if previous is None:
                self._class_notes.pop(instance_key, None)
            else:
                self._class_notes[instance_key] = previous

        self._commit(rollback)
        return note

    def delete_class_note(self, instance_key: str) -> bool:
        self._require_open()
        removed = self._class_notes.pop(instance_key, None)
        if removed is None:
            return False
        self._commit(lambda: self._class_notes.__setitem__(instance_key, removed))
        return True

    # ------------------------------------------------------------------
    # General notes
    # ------------------------------------------------------------------

    def get_general_note(self, note_id: str) -> t.Optional[GeneralNote]:
        self._require_open()
        return self._general_notes.get(note_id)

    def get_all_general_notes(self) -> list[GeneralNote]:
        self._require_open()
        return list(self._general_notes.values())

    def get_general_notes_by_date(self, date: str) -> list[GeneralNote]:
        """Notes shown on a date, most recently updated first."""
        self._require_open()
        day = to_date_string(date)
        notes = [n for n in self._general_notes.values() if n.date == day]
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)

    def get_general_notes_with_due_dates(self, start: str, end: str) -> list[GeneralNote]:
        """Notes with an active due date inside the range."""
        self._require_open()
        first, last = to_date_string(start), to_date_string(end)
        return [
            n for n in self._general_notes.values()
            if n.has_due_date and _in_range(n.due_date, first, last)
        ]

    def get_dates_with_general_notes(self, start: str, end: str) -> set[str]:
        self._require_open()
        first, last = to_date_string(start), to_date_string(end)
        return {n.date for n in self._general_notes.values() if _in_range(n.date, first, last)}

    def save_general_note(
            self,
            date: str,
            title: str,
            note_text: t.Optional[str] = None,
            has_due_date: bool = False,
            due_date: t.Optional[str] = None,
            note_id: t.Optional[str] = None,
    ) -> GeneralNote:
        """Create a general note, or update it when ``note_id`` is given.

        :raises NoteValidationError: On an empty or too long title, too long
            text, or a due date flag without a due date.
        """
        self._require_open()
        title = title.strip()
        if not title:
            raise NoteValidationError("Title is required")
        if len(title) > GENERAL_NOTE_TITLE_MAX_LENGTH:
            raise NoteValidationError(f"Title is longer than {GENERAL_NOTE_TITLE_MAX_LENGTH} characters")
        text = (note_text or "").strip() or None
        if text is not None and len(text) > NOTE_MAX_LENGTH:
            raise NoteValidationError(f"Note is longer than {NOTE_MAX_LENGTH} characters")
        if has_due_date and not due_date:
            raise NoteValidationError("A due date is required when has_due_date is set")
        try:
            day = to_date_string(date)
            due = to_date_string(due_date) if has_due_date and due_date else None
        except ValueError as e:
            raise NoteValidationError(f"Invalid date: {e}") from e

        now = _now()
        previous = self._general_notes.get(note_id) if note_id else None
        note = GeneralNote(
            id=note_id or generate_id(),
            date=day,
            title=title,
            note_text=text,
            has_due_date=has_due_date,
            due_date=due,
            created_at=previous.created_at if previous else now,
            updated_at=now,
        )
        self._general_notes[note.id] = note

        def rollback() -> None:
            if previous is None:
                self._general_notes.pop(note.id, None)
            else:
                self._general_notes[note.id] = previous

        self._commit(rollback)
        return note

    def delete_general_note(self, note_id: str) -> bool:
        """Delete a general note together with its notification records."""
        self._require_open()
        removed = self._general_notes.pop(note_id, None)
        if removed is None:
            return False
        records = {
            record_id: record for record_id, record in self._notification_records.items()
            if record.note_id == note_id
        }
        for record_id in records:
            del self._notification_records[record_id]

        def rollback() -> None:
            self._general_notes[note_id] = removed
            self._notification_records.update(records)

        self._commit(rollback)
        return True

    # ------------------------------------------------------------------
    # Notification records
    # ------------------------------------------------------------------

    def record_notification_shown(self, note_id: str, notification_date: str) -> NotificationRecord:
        self._require_open()
        day = to_date_string(notification_date)
        record = NotificationRecord(
            id=f"{note_id}:{day}",
            note_id=note_id,
            notification_date=day,
            shown_at=_now(),
        )
        previous = self._notification_records.get(record.id)
        self._notification_records[record.id] = record

        def rollback() -> None:
            if previous is None:
                self._notification_records.pop(record.id, None)
            else:
                self._notification_records[record.id] = previous

        self._commit(rollback)
        return record

    def has_notification_been_shown(self, note_id: str, notification_date: str) -> bool:
        self._require_open()
        return f"{note_id}:{to_date_string(notification_date)}" in self._notification_records

    def get_notification_records_by_note_id(self, note_id: str) -> list[NotificationRecord]:
        self._require_open()
        return [r for r in self._notification_records.values() if r.note_id == note_id]

    def clear_old_notification_records(self, before_date: str) -> int:
        """Drop records older than ``before_date``; returns how many were removed."""
        self._require_open()
        cutoff = to_date_string(before_date)
        old = {
            record_id: record for record_id, record in self._notification_records.items()
            if record.notification_date < cutoff
        }
        if not old:
            return 0
        for record_id in old:
            del self._notification_records[record_id]
        self._commit(lambda: self._notification_records.update(old))
        return len(old)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self) -> AppSettings:
        self._require_open()
        return self._settings

    def update_settings(self, **changes: t.Any) -> AppSettings:
        """Apply setting changes and return the new settings.

        :raises SettingsError: For unknown fields or unsupported values.
        """
        self._require_open()
        known = {f.name for f in fields(AppSettings)}
        for key, value in changes.items():
            if key not in known:
                raise SettingsError(f"Unknown setting '{key}'")
            choices = _SETTINGS_CHOICES.get(key)
            if choices is not None and value not in choices:
                raise SettingsError(f"Invalid value {value!r} for {key}; expected one of {', '.join(choices)}")

        previous = self._settings
        self._settings = AppSettings(**{**asdict(previous), **changes})

        def rollback() -> None:
            self._settings = previous

        self._commit(rollback)
        return self._settings

    def update_last_import(self, file_name: str) -> AppSettings:
        return self.update_settings(last_imported_file_name=file_name, last_imported_at=_now())

    # ------------------------------------------------------------------
    # Whole-store operations
    # ------------------------------------------------------------------

    def clear_all_data(self) -> None:
        """Remove every schedule, override, note, record and setting."""
        self._require_open()
        snapshot = self._document()
        self._reset()
        self._commit(lambda: self._load_document(snapshot))
        logger.warning("Cleared all schedule data")

    def export_backup(self) -> dict[str, t.Any]:
        """Everything in the store as a JSON-serialisable document."""
        self._require_open()
        document = self._document()
        document["exported_at"] = _now()
        return document


def _normalize_override(override: DayOverride) -> DayOverride:
    """Validate an override against its kind and normalize date and times."""
    try:
        date = to_date_string(override.date)
    except ValueError as e:
        raise OverrideValidationError(f"Invalid date '{override.date}'") from e

    kind = override.kind
    if kind is OverrideKind.ADD and override.base_schedule_id is not None:
        raise OverrideValidationError("An added class cannot reference a base schedule")
    if kind is not OverrideKind.ADD and not override.base_schedule_id:
        raise OverrideValidationError(f"A '{kind.value}' override must reference a base schedule")

    subject_name = override.subject_name.strip()
    start_time = parse_time(override.start_time)
    end_time = parse_time(override.end_time)
    if kind is not OverrideKind.CANCEL:
        if not subject_name:
            raise OverrideValidationError("Subject name is required")
        if start_time is None or end_time is None:
            raise OverrideValidationError("Invalid time format")
        if time_to_minutes(end_time) <= time_to_minutes(start_time):
            raise OverrideValidationError("End time must be after start time")

    return DayOverride(
        id=override.id or generate_id(),
        date=date,
        kind=kind,
        subject_name=subject_name,
        start_time=start_time or override.start_time,
        end_time=end_time or override.end_time,
        base_schedule_id=override.base_schedule_id,
        location=(override.location or "").strip() or None,
        professor=(override.professor or "").strip() or None,
        color=(override.color or "").strip() or None,
    )
