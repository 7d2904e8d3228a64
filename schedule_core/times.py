"""Time-of-day parsing and formatting.

Times are stored as 24-hour ``"HH:MM"`` strings. Import accepts 24-hour
``H:MM``/``HH:MM`` and 12-hour ``H:MM AM``/``H:MM PM``.
"""
from __future__ import annotations

import re
import typing as t

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([ap])\.?\s*m\.?$", re.IGNORECASE)


def parse_time(value: t.Optional[str]) -> t.Optional[str]:
    """Parse a time string into normalized ``HH:MM``.

    :param value: Raw time such as ``"9:00"``, ``"14:30"`` or ``"2:30 PM"``.
    :return: ``"HH:MM"`` in 24-hour form, or None if the value is not a time.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    match = _TIME_12H.match(text)
    if match:
        hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).lower()
        if not 1 <= hour <= 12 or minute > 59:
            return None
        if meridiem == "a":
            hour = 0 if hour == 12 else hour
        else:
            hour = 12 if hour == 12 else hour + 12
        return f"{hour:02d}:{minute:02d}"

    match = _TIME_24H.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return f"{hour:02d}:{minute:02d}"

    return None


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` (or any parseable) time.

    :raises ValueError: If the value cannot be parsed.
    """
    normalized = parse_time(value)
    if normalized is None:
        raise ValueError(f"Invalid time: {value!r}")
    hours, minutes = normalized.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(value: str, time_format: str = "12h") -> str:
    """Render a stored time for display.

    :param value: ``HH:MM`` time.
    :param time_format: ``"12h"`` gives ``"9:05 AM"``, ``"24h"`` gives ``"09:05"``.
    :return: Formatted time, or the input unchanged if it cannot be parsed.
    """
    normalized = parse_time(value)
    if normalized is None:
        return value
    if time_format == "24h":
        return normalized
    hour, minute = (int(part) for part in normalized.split(":"))
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def format_time_range(start: str, end: str, time_format: str = "12h") -> str:
    return f"{format_time(start, time_format)} – {format_time(end, time_format)}"


def get_duration_minutes(start: str, end: str) -> int:
    """Length of a same-day interval in minutes."""
    return time_to_minutes(end) - time_to_minutes(start)


def format_duration(minutes: int) -> str:
    """Human duration such as ``"45m"``, ``"2h"`` or ``"1h 30m"``."""
    hours, rest = divmod(max(minutes, 0), 60)
    if hours and rest:
        return f"{hours}h {rest}m"
    if hours:
        return f"{hours}h"
    return f"{rest}m"
