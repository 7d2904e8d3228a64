"""Tests for header alias resolution."""
from schedule_core.constants import CSV_HEADERS
from schedule_core.headers import (get_header_mismatch_message, headers_match_template, match_canonical_field,
                                   normalize_header, resolve_headers)


def test_normalize_header():
    assert normalize_header("  Start Time ") == "start_time"
    assert normalize_header("Day-of-Week") == "day_of_week"


def test_aliases_resolve_like_canonical_headers():
    aliases = resolve_headers(["Class", "Day", "From", "To", "Room", "Instructor"])
    canonical = resolve_headers(list(CSV_HEADERS[:6]))
    assert aliases == canonical


def test_unknown_columns_are_ignored():
    header_map = resolve_headers(["subject", "notes", "day", "start", "end"])
    assert header_map == {"subject_name": 0, "day_of_week": 2, "start_time": 3, "end_time": 4}


def test_first_duplicate_wins():
    header_map = resolve_headers(["subject", "class", "day"])
    assert header_map["subject_name"] == 0


def test_match_canonical_field_unknown():
    assert match_canonical_field("Homework") is None
    assert match_canonical_field("") is None


def test_headers_match_template():
    assert headers_match_template(list(CSV_HEADERS))
    assert headers_match_template([h.upper() for h in CSV_HEADERS])
    assert not headers_match_template(["class", "day", "from", "to", "room", "teacher", "color"])


def test_header_mismatch_message_lists_both_rows():
    message = get_header_mismatch_message(["class", "day"])
    assert "subject_name, day_of_week" in message
    assert "Received: class, day" in message
