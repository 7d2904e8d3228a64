"""
Row-level validation of imported schedule CSVs.

Validation never raises. Every problem in every row is collected, and any
problem rejects the whole import: base schedule ids are regenerated on each
import and overrides point at them, so the base collection is only ever
replaced as a whole.
"""
from __future__ import annotations

import typing as t

from schedule_core.constants import DAY_MAP, REQUIRED_FIELDS
from schedule_core.headers import HeaderMap
from schedule_core.logger import get_logger
from schedule_core.models import CSVValidationError, SubjectSchedule, ValidationResult, generate_id
from schedule_core.times import parse_time, time_to_minutes

logger = get_logger(__name__)

# Row number of the first data row: the header occupies row 1
FIRST_DATA_ROW = 2


def parse_day_of_week(value: t.Optional[str]) -> t.Optional[int]:
    """Parse a weekday name, 3-letter abbreviation or 0-6 number.

    :return: 0 (Sunday) - 6 (Saturday), or None if unrecognized.
    """
    if value is None:
        return None
    return DAY_MAP.get(value.strip().lower())


def _optional(value: t.Optional[str]) -> t.Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _cell(row: t.Sequence[str], header_map: HeaderMap, field_name: str) -> t.Optional[str]:
    index = header_map.get(field_name)
    if index is None or index >= len(row):
        return None
    return row[index]


def validate_row(
        row: t.Sequence[str],
        header_map: HeaderMap,
        row_number: int,
) -> tuple[t.Optional[SubjectSchedule], list[CSVValidationError]]:
    """Validate one data row.

    :param row: Raw field values of the row.
    :param header_map: Canonical field -> column index.
    :param row_number: 1-based row number used in error messages.
    :return: ``(schedule, [])`` for a valid row, ``(None, errors)`` otherwise.
    """
    errors: list[CSVValidationError] = []

    subject_name = (_cell(row, header_map, "subject_name") or "").strip()
    if not subject_name:
        errors.append(CSVValidationError(row_number, "subject_name", "Subject name is required"))

    raw_day = (_cell(row, header_map, "day_of_week") or "").strip()
    weekday = parse_day_of_week(raw_day)
    if not raw_day:
        errors.append(CSVValidationError(row_number, "day_of_week", "Day of week is required"))
    elif weekday is None:
        errors.append(CSVValidationError(
            row_number, "day_of_week",
            f"Invalid day '{raw_day}'. Use a day name (Monday), abbreviation (Mon) or 0-6",
        ))

    times: dict[str, t.Optional[str]] = {}
    for column, label in (("start_time", "Start time"), ("end_time", "End time")):
        raw_time = (_cell(row, header_map, column) or "").strip()
        times[column] = parse_time(raw_time)
        if not raw_time:
            errors.append(CSVValidationError(row_number, column, f"{label} is required"))
        elif times[column] is None:
            errors.append(CSVValidationError(
                row_number, column,
                f"Invalid time '{raw_time}'. Use HH:MM (24-hour) or H:MM AM/PM",
            ))

    start_time, end_time = times["start_time"], times["end_time"]
    if start_time and end_time and time_to_minutes(end_time) <= time_to_minutes(start_time):
        errors.append(CSVValidationError(
            row_number, "end_time",
            f"End time {end_time} must be after start time {start_time}",
        ))

    if errors:
        return None, errors

    schedule = SubjectSchedule(
        id=generate_id(),
        subject_name=subject_name,
        weekday=t.cast(int, weekday),
        start_time=t.cast(str, start_time),
        end_time=t.cast(str, end_time),
        location=_optional(_cell(row, header_map, "location")),
        professor=_optional(_cell(row, header_map, "professor")),
        color=_optional(_cell(row, header_map, "color")),
    )
    return schedule, []


def validate_csv(
        rows: t.Sequence[t.Sequence[str]],
        header_map: HeaderMap,
        first_row_number: int = FIRST_DATA_ROW,
) -> ValidationResult:
    """Validate parsed data rows against a resolved header map.

    :param rows: Data rows, header row excluded.
    :param header_map: Result of ``resolve_headers`` on the header row.
    :param first_row_number: Record number of ``rows[0]``, counting the header as 1.
    :return: A valid result with every schedule in input order, or an invalid
        result with every error and no schedules.
    """
    errors: list[CSVValidationError] = []

    missing = [field_name for field_name in REQUIRED_FIELDS if field_name not in header_map]
    for field_name in missing:
        errors.append(CSVValidationError(0, field_name, f"Missing required column '{field_name}'"))
    if missing:
        return ValidationResult(is_valid=False, errors=errors)

    schedules: list[SubjectSchedule] = []
    data_rows = 0
    for offset, row in enumerate(rows):
        if not any(value.strip() for value in row):
            continue
        data_rows += 1
        schedule, row_errors = validate_row(row, header_map, first_row_number + offset)
        if row_errors:
            errors.extend(row_errors)
        elif schedule is not None:
            schedules.append(schedule)

    if data_rows == 0:
        errors.append(CSVValidationError(0, "file", "CSV file contains no schedule rows"))

    if errors:
        logger.info("CSV validation failed with %d error(s)", len(errors))
        return ValidationResult(is_valid=False, errors=errors)

    logger.info("CSV validation accepted %d schedule(s)", len(schedules))
    return ValidationResult(is_valid=True, schedules=schedules)
