# -*- coding: utf-8 -*-
"""Write-side helpers: per-day changes addressed by date and class.

Each function returns the entity as stored so callers refresh their view
from the return value.
"""
from __future__ import annotations

import typing as t

from schedule_core.dates import to_date_string
from schedule_core.errors import NotFoundError, OverrideValidationError
from schedule_core.logger import get_logger
from schedule_core.models import ClassNote, DayOverride, OverrideKind, ResolvedClass, generate_id
from schedule_server.queries import build_override_for_class, get_resolved_day
from schedule_server.store import ScheduleRepository

logger = get_logger(__name__)


def find_resolved_class(repository: ScheduleRepository, date: str, instance_key: str) -> ResolvedClass:
    """Look up one class instance on a date.

    :raises NotFoundError: If no class with that instance key occurs on the date.
    """
    for resolved in get_resolved_day(repository, date):
        if resolved.instance_key == instance_key:
            return resolved
    raise NotFoundError(f"No class '{instance_key}' on {date}")


def _find_base_class(repository: ScheduleRepository, date: str, base_schedule_id: str) -> ResolvedClass:
    for resolved in get_resolved_day(repository, date):
        if resolved.base_schedule_id == base_schedule_id and not resolved.is_added:
            return resolved
    raise NotFoundError(f"Base schedule '{base_schedule_id}' does not occur on {date}")


def cancel_class(repository: ScheduleRepository, date: str, base_schedule_id: str) -> DayOverride:
    """Mark a recurring class as not happening on one date."""
    day = to_date_string(date)
    resolved = _find_base_class(repository, day, base_schedule_id)
    base = repository.get_base_schedule(base_schedule_id)
    # a cancel carries the base fields so the class can still be shown as it normally is
    override = build_override_for_class(
        resolved,
        OverrideKind.CANCEL,
        subject_name=base.subject_name if base else resolved.subject_name,
        start_time=base.start_time if base else resolved.start_time,
        end_time=base.end_time if base else resolved.end_time,
    )
    stored = repository.upsert_override(override)
    logger.info("Canceled %s on %s", stored.subject_name, day)
    return stored


def edit_class(
        repository: ScheduleRepository,
        date: str,
        base_schedule_id: str,
        **changes: t.Any,
) -> DayOverride:
    """Change a recurring class on one date.

    Fields not given keep their current value for that date.
    """
    day = to_date_string(date)
    resolved = _find_base_class(repository, day, base_schedule_id)
    changes = {key: value for key, value in changes.items() if value is not None}
    stored = repository.upsert_override(build_override_for_class(resolved, OverrideKind.EDIT, **changes))
    logger.info("Edited %s on %s", stored.subject_name, day)
    return stored


def restore_class(repository: ScheduleRepository, date: str, base_schedule_id: str) -> bool:
    """Drop any edit or cancel so the class reverts to the base schedule."""
    resolved = _find_base_class(repository, to_date_string(date), base_schedule_id)
    if resolved.override_id is None:
        return False
    return repository.delete_override(resolved.override_id)


def add_class(
        repository: ScheduleRepository,
        date: str,
        subject_name: str,
        start_time: str,
        end_time: str,
        location: t.Optional[str] = None,
        professor: t.Optional[str] = None,
        color: t.Optional[str] = None,
        override_id: t.Optional[str] = None,
) -> DayOverride:
    """Add a one-time class, or update one when ``override_id`` is given."""
    if override_id is not None:
        existing = repository.get_override(override_id)
        if existing is None:
            raise NotFoundError(f"Override '{override_id}' not found")
        if existing.kind is not OverrideKind.ADD:
            raise OverrideValidationError(f"Override '{override_id}' is not an added class")

    stored = repository.upsert_override(DayOverride(
        id=override_id or generate_id(),
        date=date,
        kind=OverrideKind.ADD,
        subject_name=subject_name,
        start_time=start_time,
        end_time=end_time,
        location=location,
        professor=professor,
        color=color,
    ))
    logger.info("Added %s on %s", stored.subject_name, stored.date)
    return stored


def save_note_for_class(
        repository: ScheduleRepository,
        date: str,
        instance_key: str,
        note_text: str,
) -> t.Optional[ClassNote]:
    """Attach text to a class instance; empty text removes the note."""
    day = to_date_string(date)
    resolved = find_resolved_class(repository, day, instance_key)
    return repository.save_class_note(
        instance_key=instance_key,
        date=day,
        subject_name=resolved.subject_name,
        start_time=resolved.start_time,
        note_text=note_text,
    )
