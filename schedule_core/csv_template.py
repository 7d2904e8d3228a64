"""
Canonical CSV format for schedule export and templates.

The same column layout is used for blank templates, example templates and
exports of the current schedule, and is what the importer expects (aliases
aside).
"""
from __future__ import annotations

import typing as t

from schedule_core.constants import CSV_HEADERS, WEEKDAYS
from schedule_core.models import SubjectSchedule
from schedule_core.times import time_to_minutes

CSV_COLUMN_DEFINITIONS: dict[str, dict[str, t.Any]] = {
    "subject_name": {
        "required": True,
        "description": "Name of the class or subject",
        "examples": ["Mathematics", "English Literature", "Computer Science 101"],
    },
    "day_of_week": {
        "required": True,
        "description": "Day of the week when the class occurs",
        "examples": ["Monday", "Tuesday", "Wed", "Thu"],
        "format": "Full name (Monday-Sunday), abbreviation (Mon-Sun) or 0-6 with 0 = Sunday",
    },
    "start_time": {
        "required": True,
        "description": "Class start time",
        "examples": ["09:00", "14:30", "9:00 AM", "2:30 PM"],
        "format": "24-hour (HH:MM) or 12-hour (H:MM AM/PM)",
    },
    "end_time": {
        "required": True,
        "description": "Class end time, after the start time on the same day",
        "examples": ["10:30", "16:00", "10:30 AM", "4:00 PM"],
        "format": "24-hour (HH:MM) or 12-hour (H:MM AM/PM)",
    },
    "location": {
        "required": False,
        "description": "Room number or location",
        "examples": ["Room 201", "Lab A", "Building B, Floor 3"],
    },
    "professor": {
        "required": False,
        "description": "Instructor name",
        "examples": ["Dr. Smith", "Prof. Johnson", "Ms. Davis"],
    },
    "color": {
        "required": False,
        "description": "Color for the class card",
        "examples": ["#F97B5C", "#5CF9E8", "coral", "teal"],
        "format": "Hex color (#RRGGBB) or preset name (coral, sky, mint, lavender, gold, rose, teal, orange)",
    },
}

EXAMPLE_ROWS = [
    ["Mathematics", "Monday", "09:00", "10:30", "Room 201", "Dr. Smith", ""],
    ["Physics", "Monday", "11:00", "12:30", "Lab A", "Prof. Johnson", ""],
    ["English Literature", "Tuesday", "09:00", "10:30", "Room 105", "Ms. Davis", ""],
    ["Computer Science", "Wednesday", "14:00", "16:00", "Lab B", "Dr. Chen", ""],
]


def escape_csv_field(value: t.Optional[str]) -> str:
    """Escape one field per RFC 4180.

    Fields containing a comma, quote, CR or LF are wrapped in quotes with
    inner quotes doubled. None and empty strings become empty fields.
    """
    if value is None or value == "":
        return ""
    text = str(value)
    if any(ch in text for ch in (",", '"', "\r", "\n")):
        return '"' + text.replace('"', '""') + '"'
    return text


def generate_csv_row(values: t.Iterable[t.Optional[str]]) -> str:
    return ",".join(escape_csv_field(value) for value in values)


def generate_csv_header_row() -> str:
    return ",".join(CSV_HEADERS)


def schedule_to_csv_row(schedule: SubjectSchedule) -> str:
    """Serialize one schedule with its weekday written as a full day name."""
    return generate_csv_row([
        schedule.subject_name,
        WEEKDAYS[schedule.weekday],
        schedule.start_time,
        schedule.end_time,
        schedule.location,
        schedule.professor,
        schedule.color,
    ])


def sort_schedules(schedules: t.Iterable[SubjectSchedule]) -> list[SubjectSchedule]:
    """Order schedules by weekday, then start time."""
    return sorted(schedules, key=lambda s: (s.weekday, time_to_minutes(s.start_time)))


def schedules_to_csv(schedules: t.Iterable[SubjectSchedule]) -> str:
    """Export schedules as canonical CSV, sorted by weekday then start time.

    :param schedules: Base schedules in any order.
    :return: CSV text with a header row; lines joined by ``\\n``.
    """
    lines = [generate_csv_header_row()]
    lines.extend(schedule_to_csv_row(schedule) for schedule in sort_schedules(schedules))
    return "\n".join(lines)


def generate_blank_template() -> str:
    """A template with the header row only."""
    return generate_csv_header_row()


def generate_example_template() -> str:
    """A template with a few example rows for reference."""
    lines = [generate_csv_header_row()]
    lines.extend(generate_csv_row(row) for row in EXAMPLE_ROWS)
    return "\n".join(lines)


def get_format_documentation() -> str:
    """Markdown description of every column, required ones first."""
    lines = ["# Schedule CSV Format", ""]
    for title, required in (("Required Columns", True), ("Optional Columns", False)):
        lines.append(f"## {title}")
        lines.append("")
        for header in CSV_HEADERS:
            definition = CSV_COLUMN_DEFINITIONS[header]
            if definition["required"] is not required:
                continue
            lines.append(f"### {header}")
            lines.append(definition["description"])
            if definition.get("format"):
                lines.append(f"Format: {definition['format']}")
            lines.append(f"Examples: {', '.join(definition['examples'])}")
            lines.append("")
    return "\n".join(lines)
