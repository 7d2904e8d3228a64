"""
CSV import pipeline: parse, resolve headers, validate, then commit.

The base schedule is replaced as a whole and only after the entire file
validates; any parse or validation problem leaves the stored schedule as it
was.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from pathlib import Path

from schedule_core.config import IMPORT_ERROR_PREVIEW
from schedule_core.constants import REQUIRED_FIELDS
from schedule_core.csv_parser import get_csv_headers, parse_csv
from schedule_core.errors import CSVParseError
from schedule_core.headers import get_header_mismatch_message, headers_match_template, resolve_headers
from schedule_core.logger import get_logger
from schedule_core.models import CSVValidationError, SubjectSchedule, ValidationResult
from schedule_core.validator import validate_csv

if t.TYPE_CHECKING:
    from schedule_server.store import ScheduleRepository

logger = get_logger(__name__)


@dataclass
class ImportResult:
    """Outcome of a CSV import as reported to the user."""
    success: bool
    imported_count: int = 0
    schedules: list[SubjectSchedule] = field(default_factory=list)
    errors: list[CSVValidationError] = field(default_factory=list)
    file_name: t.Optional[str] = None

    @property
    def error_preview(self) -> list[CSVValidationError]:
        """The first few errors, for display."""
        return self.errors[:IMPORT_ERROR_PREVIEW]

    @property
    def remaining_error_count(self) -> int:
        """How many errors are not part of the preview."""
        return max(len(self.errors) - IMPORT_ERROR_PREVIEW, 0)


def validate_csv_text(text: str) -> ValidationResult:
    """Parse and validate CSV text without touching any storage.

    A structural parse failure is reported as a single row-0 error. When
    required columns are missing, a row-0 ``header`` error explains how the
    header row differs from the template.
    """
    try:
        rows = parse_csv(text)
        headers = get_csv_headers(text)
    except CSVParseError as e:
        return ValidationResult(is_valid=False, errors=[CSVValidationError(0, "file", str(e))])

    if not rows:
        return ValidationResult(
            is_valid=False,
            errors=[CSVValidationError(0, "file", "CSV file is empty")],
        )

    if headers_match_template(headers):
        logger.debug("Header row matches the template")
    header_map = resolve_headers(headers)
    result = validate_csv(rows[1:], header_map)
    if any(field_name not in header_map for field_name in REQUIRED_FIELDS):
        result.errors.append(CSVValidationError(0, "header", get_header_mismatch_message(headers)))
    return result


def import_schedule_csv(
        text: str,
        repository: "ScheduleRepository",
        file_name: t.Optional[str] = None,
) -> ImportResult:
    """Validate CSV text and, if it is entirely valid, replace the base schedule.

    :param text: Raw CSV content.
    :param repository: An open repository to commit into.
    :param file_name: Original file name, kept in the settings for display.
    :return: The import outcome; on failure the repository is unchanged.
    :raises StorageError: If the validated schedules cannot be stored.
    """
    result = validate_csv_text(text)
    if not result.is_valid:
        logger.warning(
            "Import of %s rejected: %d error(s)", file_name or "CSV text", len(result.errors),
        )
        return ImportResult(success=False, errors=result.errors, file_name=file_name)

    stored = repository.replace_all_base_schedules(result.schedules)
    if file_name:
        repository.update_last_import(file_name)
    logger.info("Imported %d schedule(s) from %s", len(stored), file_name or "CSV text")
    return ImportResult(
        success=True,
        imported_count=len(stored),
        schedules=stored,
        file_name=file_name,
    )


def import_schedule_file(path: t.Union[str, Path], repository: "ScheduleRepository") -> ImportResult:
    """Import a CSV file from disk; see ``import_schedule_csv``."""
    csv_path = Path(path)
    text = csv_path.read_text(encoding="utf-8")
    return import_schedule_csv(text, repository, file_name=csv_path.name)
