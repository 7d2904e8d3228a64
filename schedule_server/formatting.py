# -*- coding: utf-8 -*-
"""Plain-text tables of resolved schedules for tool and API output."""
from __future__ import annotations

import typing as t

from schedule_core.dates import format_date_display, is_today
from schedule_core.models import ResolvedClass, SubjectSchedule
from schedule_core.constants import WEEKDAYS
from schedule_core.times import format_time, format_time_range


def class_status(resolved: ResolvedClass) -> str:
    """Short status label for a resolved class."""
    if resolved.is_canceled:
        return "CANCELED"
    if resolved.is_overridden:
        return "EDITED"
    if resolved.is_added:
        return "ADDED"
    return ""


def display_order(classes: t.Sequence[ResolvedClass]) -> list[ResolvedClass]:
    """Classes in display order: canceled ones move to the end."""
    return [c for c in classes if not c.is_canceled] + [c for c in classes if c.is_canceled]


def _clip(text: t.Optional[str], width: int) -> str:
    if not text:
        return "—"
    return text[:width - 1] if len(text) > width - 1 else text


def format_day(date: str, classes: t.Sequence[ResolvedClass], time_format: str = "12h") -> str:
    """Format one day's classes as a clean table.

    :param date: The day being shown.
    :param classes: Resolved classes for the day, in resolver order.
    :param time_format: ``"12h"`` or ``"24h"``.
    :return: Formatted table string.
    """
    heading = f"📅 {format_date_display(date).upper()} ({date})"
    if is_today(date):
        heading += " · TODAY"
    if not classes:
        return f"{heading}\nNo classes scheduled."

    lines = [heading]
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'Time':<22} {'Subject':<30} {'Location':<18} {'Status':<10} {'Note':<4}")
    lines.append("-" * 100)
    for idx, resolved in enumerate(display_order(classes), 1):
        time_range = format_time_range(resolved.start_time, resolved.end_time, time_format)
        lines.append(
            f"{idx:<4} {time_range:<22} {_clip(resolved.subject_name, 30):<30} "
            f"{_clip(resolved.location, 18):<18} {class_status(resolved):<10} "
            f"{'📝' if resolved.has_note else '':<4}"
        )
    lines.append("=" * 100)
    active = sum(1 for c in classes if not c.is_canceled)
    lines.append(f"Total: {active} class(es), {len(classes) - active} canceled")
    return "\n".join(lines)


def format_week(week: t.Mapping[str, t.Sequence[ResolvedClass]], time_format: str = "12h") -> str:
    """Format a week as one compact block per day."""
    lines = []
    for date, classes in week.items():
        lines.append(f"{format_date_display(date)} ({date})")
        if not classes:
            lines.append("   —")
        for resolved in display_order(classes):
            status = class_status(resolved)
            suffix = f" [{status}]" if status else ""
            lines.append(
                f"   {format_time(resolved.start_time, time_format):>8}  {resolved.subject_name}{suffix}"
            )
        lines.append("")
    return "\n".join(lines).rstrip()


def format_base_schedule(schedules: t.Sequence[SubjectSchedule], time_format: str = "12h") -> str:
    """Format the recurring weekly schedule sorted by weekday and time."""
    if not schedules:
        return "📚 No schedule imported."

    lines = ["📚 WEEKLY SCHEDULE"]
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'Day':<11} {'Time':<22} {'Subject':<30} {'Location':<15} {'Professor':<15}")
    lines.append("-" * 100)
    ordered = sorted(schedules, key=lambda s: (s.weekday, s.start_time))
    for idx, schedule in enumerate(ordered, 1):
        time_range = format_time_range(schedule.start_time, schedule.end_time, time_format)
        lines.append(
            f"{idx:<4} {WEEKDAYS[schedule.weekday]:<11} {time_range:<22} "
            f"{_clip(schedule.subject_name, 30):<30} {_clip(schedule.location, 15):<15} "
            f"{_clip(schedule.professor, 15):<15}"
        )
    lines.append("=" * 100)
    lines.append(f"Total: {len(schedules)} weekly class(es)")
    return "\n".join(lines)
