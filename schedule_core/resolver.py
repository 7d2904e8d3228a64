"""
Schedule resolution engine.

Merges the recurring weekly base schedule with date-specific overrides into
the concrete, ordered list of classes for a date. Everything here is pure:
identical inputs always produce identical output, instance keys included.
"""
from __future__ import annotations

import typing as t

from schedule_core.dates import DateLike, get_date_range, get_month_dates, get_week_dates, to_date_string, weekday_of
from schedule_core.logger import get_logger
from schedule_core.models import DayOverride, OverrideKind, ResolvedClass, SubjectSchedule
from schedule_core.times import time_to_minutes

logger = get_logger(__name__)


def base_instance_key(date: str, base_schedule_id: str) -> str:
    """Instance key of a base schedule entry on a date."""
    return f"{date}:{base_schedule_id}"


def added_instance_key(date: str, override_id: str) -> str:
    """Instance key of a one-time class added by an override."""
    return f"{date}:override:{override_id}"


def _start_minutes(resolved: ResolvedClass) -> int:
    try:
        return time_to_minutes(resolved.start_time)
    except ValueError:
        # unparseable times sort last instead of failing the whole day
        return 24 * 60


def _from_base(date: str, schedule: SubjectSchedule, **flags: t.Any) -> ResolvedClass:
    return ResolvedClass(
        instance_key=base_instance_key(date, schedule.id),
        date=date,
        subject_name=schedule.subject_name,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        base_schedule_id=schedule.id,
        location=schedule.location,
        professor=schedule.professor,
        color=schedule.color,
        **flags,
    )


def _from_override(date: str, instance_key: str, override: DayOverride, **flags: t.Any) -> ResolvedClass:
    return ResolvedClass(
        instance_key=instance_key,
        date=date,
        subject_name=override.subject_name,
        start_time=override.start_time,
        end_time=override.end_time,
        base_schedule_id=override.base_schedule_id,
        override_id=override.id,
        location=override.location,
        professor=override.professor,
        color=override.color,
        **flags,
    )


def resolve(
        date: DateLike,
        base_schedules: t.Iterable[SubjectSchedule],
        overrides: t.Iterable[DayOverride],
        note_keys: t.Container[str] = frozenset(),
) -> list[ResolvedClass]:
    """Compute the classes that occur on a date.

    Canceled classes are kept in the result with ``is_canceled`` set and the
    base schedule's own fields; how to de-emphasize them is up to the caller.

    Args:
        date: Target calendar date.
        base_schedules: The whole base schedule; entries for other weekdays
            are skipped.
        overrides: Overrides for this date (others are skipped, so a
            multi-day batch can be passed as is).
        note_keys: Instance keys that have a class note attached.

    Returns:
        Resolved classes sorted by start time; ties keep base schedule order
        followed by added classes in override order.
    """
    day = to_date_string(date)
    weekday = weekday_of(day)

    targeted: dict[str, DayOverride] = {}
    added: list[DayOverride] = []
    for override in overrides:
        if override.date != day:
            continue
        if override.kind is OverrideKind.ADD:
            added.append(override)
        elif override.base_schedule_id is not None:
            # later entries win if the same base entry is targeted twice
            targeted[override.base_schedule_id] = override

    resolved: list[ResolvedClass] = []
    matched: set[str] = set()
    for schedule in base_schedules:
        if schedule.weekday != weekday:
            continue
        override = targeted.get(schedule.id)
        if override is None:
            resolved.append(_from_base(day, schedule))
            continue

        matched.add(schedule.id)
        if override.kind is OverrideKind.CANCEL:
            item = _from_base(day, schedule, is_canceled=True)
            item.override_id = override.id
            resolved.append(item)
        elif override.kind is OverrideKind.EDIT:
            resolved.append(_from_override(
                day, base_instance_key(day, schedule.id), override, is_overridden=True,
            ))
        else:
            raise AssertionError(f"Unhandled override kind: {override.kind!r}")

    for base_schedule_id in targeted.keys() - matched:
        logger.debug("Override for %s targets missing base schedule %s", day, base_schedule_id)

    for override in added:
        resolved.append(_from_override(
            day, added_instance_key(day, override.id), override, is_added=True,
        ))

    for item in resolved:
        item.has_note = item.instance_key in note_keys

    resolved.sort(key=_start_minutes)
    return resolved


def resolve_range(
        start: DateLike,
        end: DateLike,
        base_schedules: t.Sequence[SubjectSchedule],
        overrides: t.Sequence[DayOverride],
        note_keys: t.Container[str] = frozenset(),
) -> dict[str, list[ResolvedClass]]:
    """Resolve every date from start to end inclusive.

    :return: Ordered mapping of ``YYYY-MM-DD`` -> resolved classes.
    """
    by_date: dict[str, list[DayOverride]] = {}
    for override in overrides:
        by_date.setdefault(override.date, []).append(override)

    return {
        day: resolve(day, base_schedules, by_date.get(day, []), note_keys)
        for day in get_date_range(start, end)
    }


def resolve_week(
        date: DateLike,
        base_schedules: t.Sequence[SubjectSchedule],
        overrides: t.Sequence[DayOverride],
        note_keys: t.Container[str] = frozenset(),
        week_start: str = "monday",
) -> dict[str, list[ResolvedClass]]:
    """Resolve the seven days of the week containing ``date``."""
    week = get_week_dates(date, week_start)
    return resolve_range(week[0], week[-1], base_schedules, overrides, note_keys)


def resolve_month(
        year: int,
        month: int,
        base_schedules: t.Sequence[SubjectSchedule],
        overrides: t.Sequence[DayOverride],
        note_keys: t.Container[str] = frozenset(),
) -> dict[str, list[ResolvedClass]]:
    """Resolve every day of a calendar month."""
    days = get_month_dates(year, month)
    return resolve_range(days[0], days[-1], base_schedules, overrides, note_keys)
