# -*- coding: utf-8 -*-
"""Shared constants for schedule import, resolution and display."""
from __future__ import annotations

WEEKDAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

WEEKDAYS_SHORT = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Accepted day_of_week spellings on import, all lower-case
DAY_MAP: dict[str, int] = {}
for _index, (_full, _short) in enumerate(zip(WEEKDAYS, WEEKDAYS_SHORT)):
    DAY_MAP[_full.lower()] = _index
    DAY_MAP[_short.lower()] = _index
    DAY_MAP[str(_index)] = _index

# Canonical CSV columns, in export order
CSV_HEADERS = (
    "subject_name",
    "day_of_week",
    "start_time",
    "end_time",
    "location",
    "professor",
    "color",
)

REQUIRED_FIELDS = ("subject_name", "day_of_week", "start_time", "end_time")

HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "subject_name": (
        "subject_name",
        "subject",
        "class",
        "course",
        "class_name",
        "course_name",
        "name",
    ),
    "day_of_week": ("day_of_week", "day", "weekday"),
    "start_time": ("start_time", "start", "from", "begin", "starts"),
    "end_time": ("end_time", "end", "to", "finish", "ends"),
    "location": ("location", "room", "place", "venue", "classroom"),
    "professor": ("professor", "teacher", "instructor", "lecturer", "prof"),
    "color": ("color", "colour"),
}

SUBJECT_COLORS: dict[str, str] = {
    "coral": "#F97B5C",
    "sky": "#5CA3F9",
    "mint": "#5CF9A3",
    "lavender": "#A35CF9",
    "gold": "#F9C75C",
    "rose": "#F95CA3",
    "teal": "#5CF9E8",
    "orange": "#F9A35C",
}

DEFAULT_COLOR = SUBJECT_COLORS["sky"]

NOTE_MAX_LENGTH = 1000
GENERAL_NOTE_TITLE_MAX_LENGTH = 100

# Reminders fire this many days before a due date
REMINDER_DAYS_BEFORE = (3, 2, 1)

SCHEMA_VERSION = 1
