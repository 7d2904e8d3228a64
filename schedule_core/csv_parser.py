"""CSV tokenizer for schedule imports.

Turns raw CSV text into rows of string fields following RFC 4180: quoted
fields may contain commas, newlines and doubled quotes. The parser knows
nothing about the schedule columns; header matching happens in
``schedule_core.headers``.
"""
from __future__ import annotations

import csv
import io
import typing as t
from pathlib import Path

from schedule_core.errors import CSVParseError
from schedule_core.logger import get_logger

logger = get_logger(__name__)

_BOM = "\ufeff"


def _reader(text: str) -> t.Iterator[list[str]]:
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    # strict: an unterminated quote raises csv.Error at end of input
    return csv.reader(io.StringIO(text, newline=""), strict=True)


def parse_csv(text: str) -> list[list[str]]:
    """Parse CSV text into rows, header row included.

    Blank lines at the end of the input produce no rows. A blank line in the
    middle is returned as an empty list so row numbers keep matching the file.

    :param text: Raw CSV content.
    :return: List of rows, each an ordered list of field strings.
    :raises CSVParseError: If a quoted field is never closed.
    """
    rows: list[list[str]] = []
    try:
        for row in _reader(text):
            rows.append(row)
    except csv.Error as e:
        raise CSVParseError(f"Malformed CSV near line {len(rows) + 1}: {e}") from e

    while rows and not any(field.strip() for field in rows[-1]):
        rows.pop()

    logger.debug("Parsed %d CSV row(s)", len(rows))
    return rows


def get_csv_headers(text: str) -> list[str]:
    """Return the header row, trimmed and lower-cased for alias matching.

    Only the first record is parsed, so a malformed body does not prevent
    reading the headers.

    :raises CSVParseError: If the header record itself is malformed.
    """
    try:
        first = next(_reader(text), [])
    except csv.Error as e:
        raise CSVParseError(f"Malformed CSV header: {e}") from e
    return [header.strip().lower() for header in first]


def parse_csv_file(path: t.Union[str, Path]) -> tuple[list[str], list[list[str]]]:
    """Read a CSV file and split it into normalized headers and data rows.

    :param path: Path to a UTF-8 CSV file.
    :return: ``(headers, rows)`` where rows exclude the header row.
    :raises CSVParseError: If the file is structurally malformed.
    """
    text = Path(path).read_text(encoding="utf-8")
    rows = parse_csv(text)
    if not rows:
        return [], []
    headers = [header.strip().lower() for header in rows[0]]
    return headers, rows[1:]
