# -*- coding: utf-8 -*-
"""Read-side helpers: fetch from the repository, then run the resolver."""
from __future__ import annotations

import typing as t

from schedule_core.dates import DateLike, get_first_day_of_month, get_last_day_of_month, get_week_dates, to_date_string
from schedule_core.models import DayOverride, OverrideKind, ResolvedClass
from schedule_core.resolver import resolve, resolve_range
from schedule_server.store import ScheduleRepository


def get_resolved_day(repository: ScheduleRepository, date: DateLike) -> list[ResolvedClass]:
    """Resolved classes for one date, with note flags joined."""
    day = to_date_string(date)
    return resolve(
        day,
        repository.get_all_base_schedules(),
        repository.get_overrides_for_date(day),
        repository.get_note_keys_for_range(day, day),
    )


def get_resolved_range(repository: ScheduleRepository, start: DateLike, end: DateLike) -> dict[str, list[ResolvedClass]]:
    first, last = to_date_string(start), to_date_string(end)
    return resolve_range(
        first,
        last,
        repository.get_all_base_schedules(),
        repository.get_overrides_by_date_range(first, last),
        repository.get_note_keys_for_range(first, last),
    )


def get_resolved_week(
        repository: ScheduleRepository,
        date: DateLike,
        week_start: t.Optional[str] = None,
) -> dict[str, list[ResolvedClass]]:
    """Resolved classes for the week containing ``date``.

    The week start defaults to the stored setting.
    """
    week = get_week_dates(date, week_start or repository.get_settings().week_start)
    return get_resolved_range(repository, week[0], week[-1])


def get_resolved_month(repository: ScheduleRepository, year: int, month: int) -> dict[str, list[ResolvedClass]]:
    return get_resolved_range(
        repository,
        get_first_day_of_month(year, month),
        get_last_day_of_month(year, month),
    )


def get_month_indicators(repository: ScheduleRepository, year: int, month: int) -> dict[str, dict[str, bool]]:
    """Per-date markers for a month calendar grid.

    :return: ``{date: {"has_classes", "has_override", "has_note", "has_general_note"}}``
    """
    first, last = get_first_day_of_month(year, month), get_last_day_of_month(year, month)
    resolved = get_resolved_range(repository, first, last)
    override_dates = repository.get_dates_with_overrides(first, last)
    note_dates = repository.get_dates_with_notes(first, last)
    general_dates = repository.get_dates_with_general_notes(first, last)
    return {
        day: {
            "has_classes": any(not c.is_canceled for c in classes),
            "has_override": day in override_dates,
            "has_note": day in note_dates,
            "has_general_note": day in general_dates,
        }
        for day, classes in resolved.items()
    }


def build_override_for_class(
        resolved: ResolvedClass,
        kind: OverrideKind,
        **changes: t.Any,
) -> DayOverride:
    """Start an edit or cancel override from a class as currently shown.

    An existing override on the class keeps its id so saving replaces it.
    Editing an added class rewrites its ``add`` override.
    """
    if resolved.is_added:
        if kind is OverrideKind.CANCEL:
            raise ValueError("Added classes are removed by deleting their override, not canceled")
        kind = OverrideKind.ADD
    return DayOverride(
        id=changes.pop("id", None) or resolved.override_id or "",
        date=resolved.date,
        kind=kind,
        base_schedule_id=resolved.base_schedule_id,
        subject_name=changes.pop("subject_name", resolved.subject_name),
        start_time=changes.pop("start_time", resolved.start_time),
        end_time=changes.pop("end_time", resolved.end_time),
        location=changes.pop("location", resolved.location),
        professor=changes.pop("professor", resolved.professor),
        color=changes.pop("color", resolved.color),
    )
