"""Tests for the all-or-nothing CSV import."""
from conftest import SAMPLE_CSV

from schedule_core.config import IMPORT_ERROR_PREVIEW
from schedule_core.importer import import_schedule_csv, import_schedule_file, validate_csv_text


def test_successful_import_replaces_schedule(repository):
    result = import_schedule_csv(SAMPLE_CSV, repository, file_name="fall.csv")

    assert result.success
    assert result.imported_count == 3
    assert [s.subject_name for s in repository.get_all_base_schedules()] == ["Physics", "Mathematics", "English"]
    settings = repository.get_settings()
    assert settings.last_imported_file_name == "fall.csv"
    assert settings.last_imported_at is not None


def test_invalid_import_leaves_previous_schedule(imported_repository):
    before = imported_repository.get_all_base_schedules()
    bad = "subject_name,day_of_week,start_time,end_time\nArt,Friday,10:00,11:00\nMusic,Friday,10:00,09:00\n"

    result = import_schedule_csv(bad, imported_repository, file_name="bad.csv")

    assert not result.success
    assert result.errors[0].row == 3
    assert imported_repository.get_all_base_schedules() == before
    assert imported_repository.get_settings().last_imported_file_name == "sample.csv"


def test_aliased_headers_are_accepted(repository):
    text = "Class,Day,From,To,Room,Instructor\nPhysics,Mon,9:00 AM,10:30 AM,Lab A,Dr. Q\n"
    result = import_schedule_csv(text, repository)
    assert result.success
    schedule = repository.get_all_base_schedules()[0]
    assert (schedule.weekday, schedule.start_time, schedule.location, schedule.professor) == (1, "09:00", "Lab A", "Dr. Q")


def test_parse_error_is_a_single_row_zero_error():
    result = validate_csv_text('subject_name,day_of_week,start_time,end_time\n"Physics,Monday,09:00,10:00\n')
    assert not result.is_valid
    assert len(result.errors) == 1
    assert (result.errors[0].row, result.errors[0].column) == (0, "file")


def test_missing_columns_explain_the_template():
    result = validate_csv_text("Subject,Day,Start,Duration\nPhysics,Monday,09:00,90\n")

    assert not result.is_valid
    assert [(e.row, e.column) for e in result.errors] == [(0, "end_time"), (0, "header")]
    assert "Expected: subject_name, day_of_week" in result.errors[1].message
    assert "Received: subject, day, start, duration" in result.errors[1].message


def test_multiline_field_counts_as_one_record():
    text = (
        "subject_name,day_of_week,start_time,end_time,location\n"
        "Physics,Monday,09:00,10:30,\"Building A\nRoom 2\"\n"
        "Art,Funday,10:00,11:00,Studio\n"
    )
    result = validate_csv_text(text)
    # rows are record numbers with the header as row 1, not physical lines
    assert [(e.row, e.column) for e in result.errors] == [(3, "day_of_week")]


def test_empty_file():
    result = validate_csv_text("")
    assert result.errors[0].message == "CSV file is empty"


def test_error_preview_is_bounded(repository):
    rows = "\n".join(f"Class {i},Noday,09:00,10:00" for i in range(15))
    result = import_schedule_csv("subject_name,day_of_week,start_time,end_time\n" + rows, repository)

    assert len(result.errors) == 15
    assert len(result.error_preview) == IMPORT_ERROR_PREVIEW
    assert result.remaining_error_count == 15 - IMPORT_ERROR_PREVIEW


def test_import_file(tmp_path, repository):
    path = tmp_path / "spring.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    result = import_schedule_file(path, repository)
    assert result.success
    assert result.file_name == "spring.csv"
