"""Tests for row and file validation of imported CSVs."""
from schedule_core.constants import CSV_HEADERS
from schedule_core.headers import resolve_headers
from schedule_core.validator import parse_day_of_week, validate_csv, validate_row

HEADER_MAP = resolve_headers(list(CSV_HEADERS))


def test_parse_day_of_week_forms():
    assert parse_day_of_week("Monday") == 1
    assert parse_day_of_week(" sun ") == 0
    assert parse_day_of_week("6") == 6
    assert parse_day_of_week("Funday") is None
    assert parse_day_of_week("7") is None


def test_valid_row_normalizes_fields():
    schedule, errors = validate_row(
        ["  Physics ", "Mon", "2:30 PM", "16:00", " Lab A ", "", "coral"], HEADER_MAP, 2,
    )
    assert errors == []
    assert schedule.subject_name == "Physics"
    assert schedule.weekday == 1
    assert schedule.start_time == "14:30"
    assert schedule.end_time == "16:00"
    assert schedule.location == "Lab A"
    assert schedule.professor is None
    assert schedule.color == "coral"


def test_end_before_start_is_a_single_error():
    schedule, errors = validate_row(["Physics", "Monday", "10:00", "09:00"], HEADER_MAP, 2)
    assert schedule is None
    assert len(errors) == 1
    assert errors[0].column == "end_time"
    assert errors[0].row == 2


def test_equal_start_and_end_is_rejected():
    _, errors = validate_row(["Physics", "Monday", "10:00", "10:00"], HEADER_MAP, 2)
    assert [e.column for e in errors] == ["end_time"]


def test_every_problem_in_a_row_is_reported():
    _, errors = validate_row(["", "Someday", "25:00", ""], HEADER_MAP, 4)
    assert {e.column for e in errors} == {"subject_name", "day_of_week", "start_time", "end_time"}
    assert all(e.row == 4 for e in errors)


def test_one_bad_row_rejects_the_whole_file():
    rows = [
        ["Physics", "Monday", "09:00", "10:30"],
        ["Chemistry", "Tuesday", "10:00", "09:00"],
        ["Biology", "Friday", "13:00", "14:00"],
    ]
    result = validate_csv(rows, HEADER_MAP)
    assert not result.is_valid
    assert result.schedules == []
    assert len(result.errors) == 1
    assert result.errors[0].row == 3


def test_valid_file_keeps_input_order_and_fresh_ids():
    rows = [
        ["Biology", "Friday", "13:00", "14:00"],
        ["Physics", "Monday", "09:00", "10:30"],
    ]
    result = validate_csv(rows, HEADER_MAP)
    assert result.is_valid
    assert [s.subject_name for s in result.schedules] == ["Biology", "Physics"]
    assert len({s.id for s in result.schedules}) == 2


def test_blank_rows_are_skipped():
    rows = [["Physics", "Monday", "09:00", "10:30"], ["", "", "", ""], []]
    result = validate_csv(rows, HEADER_MAP)
    assert result.is_valid
    assert len(result.schedules) == 1


def test_missing_required_column():
    header_map = resolve_headers(["subject", "day", "start"])
    result = validate_csv([["Physics", "Monday", "09:00"]], header_map)
    assert not result.is_valid
    assert [(e.row, e.column) for e in result.errors] == [(0, "end_time")]


def test_no_data_rows():
    result = validate_csv([], HEADER_MAP)
    assert not result.is_valid
    assert result.errors[0].column == "file"


def test_short_rows_are_missing_fields():
    result = validate_csv([["Physics", "Monday"]], HEADER_MAP)
    assert {e.column for e in result.errors} == {"start_time", "end_time"}
