"""Tests for CSV export and templates."""
from conftest import make_schedule

from schedule_core.constants import CSV_HEADERS
from schedule_core.csv_parser import parse_csv
from schedule_core.csv_template import (escape_csv_field, generate_blank_template, generate_example_template,
                                        get_format_documentation, schedules_to_csv)
from schedule_core.headers import resolve_headers
from schedule_core.validator import validate_csv


def test_escape_csv_field():
    assert escape_csv_field("plain") == "plain"
    assert escape_csv_field("Lab, West") == '"Lab, West"'
    assert escape_csv_field('The "Big" Room') == '"The ""Big"" Room"'
    assert escape_csv_field("two\nlines") == '"two\nlines"'
    assert escape_csv_field(None) == ""


def test_export_sorts_by_weekday_then_time():
    schedules = [
        make_schedule("a", "Late Monday", 1, "14:00", "15:00"),
        make_schedule("b", "Sunday", 0, "10:00", "11:00"),
        make_schedule("c", "Early Monday", 1, "08:00", "09:00"),
    ]
    lines = schedules_to_csv(schedules).split("\n")
    assert lines[0] == ",".join(CSV_HEADERS)
    assert [line.split(",")[0] for line in lines[1:]] == ["Sunday", "Early Monday", "Late Monday"]
    assert lines[2] == "Early Monday,Monday,08:00,09:00,,,"


def test_export_then_import_recovers_the_schedule():
    original = [
        make_schedule("a", "Physics", 1, "09:00", "10:30", location="Lab, West", professor='Dr. "Q"', color="sky"),
        make_schedule("b", "Art", 5, "13:00", "15:00", location="Studio\n2"),
        make_schedule("c", "Chemistry", 3, "08:00", "09:30", color="#A35CF9"),
    ]

    rows = parse_csv(schedules_to_csv(original))
    result = validate_csv(rows[1:], resolve_headers(rows[0]))

    assert result.is_valid

    def semantic(schedule):
        return (schedule.subject_name, schedule.weekday, schedule.start_time, schedule.end_time,
                schedule.location, schedule.professor, schedule.color)

    assert sorted(map(semantic, result.schedules)) == sorted(map(semantic, original))
    assert {s.id for s in result.schedules}.isdisjoint({"a", "b", "c"})


def test_templates():
    assert generate_blank_template() == ",".join(CSV_HEADERS)
    example = parse_csv(generate_example_template())
    assert len(example) > 1
    assert validate_csv(example[1:], resolve_headers(example[0])).is_valid


def test_format_documentation_lists_required_columns_first():
    docs = get_format_documentation()
    assert docs.index("## Required Columns") < docs.index("### subject_name") < docs.index("## Optional Columns")
    assert docs.index("## Optional Columns") < docs.index("### location")
