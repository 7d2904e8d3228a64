"""Map user CSV headers onto the canonical schedule columns."""
from __future__ import annotations

import typing as t

from schedule_core.constants import CSV_HEADERS, HEADER_ALIASES
from schedule_core.logger import get_logger

logger = get_logger(__name__)

# canonical field -> column index in the raw rows
HeaderMap = dict[str, int]


def normalize_header(header: str) -> str:
    """Lower-case and trim a header; inner spaces and hyphens become underscores."""
    return "_".join(header.strip().lower().replace("-", " ").split())


def match_canonical_field(header: str) -> t.Optional[str]:
    """Return the canonical field a single header names, or None.

    :param header: Raw header text such as ``"Class"`` or ``" Start Time "``.
    """
    normalized = normalize_header(header)
    if not normalized:
        return None
    for field_name, aliases in HEADER_ALIASES.items():
        if normalized in aliases:
            return field_name
    return None


def resolve_headers(headers: t.Sequence[str]) -> HeaderMap:
    """Resolve a header row into a canonical field -> column index map.

    Headers that match no alias are ignored so extra user columns are allowed.
    When several headers resolve to the same field the first one wins.

    :param headers: Header row as read from the file.
    :return: Mapping containing only the fields that were found.
    """
    header_map: HeaderMap = {}
    for index, header in enumerate(headers):
        field_name = match_canonical_field(header)
        if field_name is None:
            if header.strip():
                logger.debug("Ignoring unrecognized column %r", header)
            continue
        if field_name in header_map:
            logger.debug(
                "Column %r duplicates %s (already column %d); ignored",
                header, field_name, header_map[field_name] + 1,
            )
            continue
        header_map[field_name] = index
    return header_map


def headers_match_template(headers: t.Sequence[str]) -> bool:
    """True if the header row is exactly the canonical header row, in order."""
    if len(headers) != len(CSV_HEADERS):
        return False
    return all(header.strip().lower() == expected for header, expected in zip(headers, CSV_HEADERS))


def get_header_mismatch_message(headers: t.Sequence[str]) -> str:
    """Explain how a header row differs from the canonical template."""
    expected = ", ".join(CSV_HEADERS)
    received = ", ".join(headers)
    return (
        "Your CSV headers do not match the template format.\n\n"
        f"Expected: {expected}\n"
        f"Received: {received}\n\n"
        "Column aliases such as 'class', 'day', 'from' and 'to' are also accepted."
    )
