# -*- coding: utf-8 -*-
"""Tests for the JSON-backed schedule repository."""
import json

import pytest
from conftest import MONDAY, make_override, make_schedule

from schedule_core.errors import NoteValidationError, OverrideValidationError, SettingsError, StorageError
from schedule_core.models import OverrideKind
from schedule_server.store import ScheduleRepository


def test_closed_repository_refuses_access():
    repo = ScheduleRepository()
    with pytest.raises(StorageError):
        repo.get_all_base_schedules()
    repo.open()
    assert repo.get_all_base_schedules() == []
    repo.close()
    assert not repo.is_open


def test_replace_all_swaps_the_whole_collection(repository):
    repository.replace_all_base_schedules([make_schedule("a", "Art", 1, "09:00", "10:00")])
    repository.replace_all_base_schedules([make_schedule("b", "Biology", 2, "09:00", "10:00")])
    assert [s.id for s in repository.get_all_base_schedules()] == ["b"]


def test_data_survives_reopening(data_path):
    with ScheduleRepository(data_path) as repo:
        repo.replace_all_base_schedules([make_schedule("a", "Art", 1, "09:00", "10:00", color="gold")])
        repo.upsert_override(make_override("o1", MONDAY, OverrideKind.CANCEL, base_schedule_id="a"))
        repo.update_settings(time_format="24h")

    with ScheduleRepository(data_path) as repo:
        assert repo.get_base_schedule("a").color == "gold"
        assert repo.get_override("o1").kind is OverrideKind.CANCEL
        assert repo.get_settings().time_format == "24h"

    document = json.loads(data_path.read_text(encoding="utf-8"))
    assert document["overrides"][0]["kind"] == "cancel"


def test_failed_write_rolls_back(file_repository, monkeypatch):
    file_repository.replace_all_base_schedules([make_schedule("a", "Art", 1, "09:00", "10:00")])

    def broken_persist():
        raise StorageError("disk full")

    monkeypatch.setattr(file_repository, "_persist", broken_persist)
    with pytest.raises(StorageError):
        file_repository.replace_all_base_schedules([make_schedule("b", "Biology", 2, "09:00", "10:00")])

    assert [s.id for s in file_repository.get_all_base_schedules()] == ["a"]


def test_corrupt_file_raises_on_open(data_path):
    data_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        ScheduleRepository(data_path).open()


def test_upsert_normalizes_and_generates_an_id(repository):
    stored = repository.upsert_override(
        make_override("", MONDAY, OverrideKind.ADD, " Review ", "2:00 PM", "3:00 PM",
                      location="  "),
    )
    assert stored.id
    assert stored.subject_name == "Review"
    assert (stored.start_time, stored.end_time) == ("14:00", "15:00")
    assert stored.location is None


def test_one_edit_or_cancel_per_class_and_date(repository):
    repository.upsert_override(
        make_override("e1", MONDAY, OverrideKind.EDIT, "Physics", "10:00", "11:00", base_schedule_id="phys"),
    )
    repository.upsert_override(make_override("c1", MONDAY, OverrideKind.CANCEL, base_schedule_id="phys"))

    overrides = repository.get_overrides_for_date(MONDAY)
    assert [o.id for o in overrides] == ["c1"]


def test_added_classes_do_not_replace_each_other(repository):
    repository.upsert_override(make_override("a1", MONDAY, OverrideKind.ADD, "One", "09:00", "10:00"))
    repository.upsert_override(make_override("a2", MONDAY, OverrideKind.ADD, "Two", "09:00", "10:00"))
    assert len(repository.get_overrides_for_date(MONDAY)) == 2


@pytest.mark.parametrize("override", [
    make_override("x", MONDAY, OverrideKind.ADD, "Lab", "09:00", "10:00", base_schedule_id="phys"),
    make_override("x", MONDAY, OverrideKind.EDIT, "Lab", "09:00", "10:00"),
    make_override("x", MONDAY, OverrideKind.EDIT, "Lab", "10:00", "09:00", base_schedule_id="phys"),
    make_override("x", MONDAY, OverrideKind.ADD, "", "09:00", "10:00"),
    make_override("x", MONDAY, OverrideKind.ADD, "Lab", "soon", "10:00"),
    make_override("x", "someday", OverrideKind.CANCEL, base_schedule_id="phys"),
])
def test_inconsistent_overrides_are_rejected(repository, override):
    with pytest.raises(OverrideValidationError):
        repository.upsert_override(override)
    assert repository.get_overrides_by_date_range("2024-01-01", "2024-12-31") == []


def test_delete_override(repository):
    repository.upsert_override(make_override("a1", MONDAY, OverrideKind.ADD, "One", "09:00", "10:00"))
    assert repository.delete_override("a1")
    assert not repository.delete_override("a1")


def test_date_range_queries(repository):
    repository.upsert_override(make_override("a1", "2024-03-04", OverrideKind.ADD, "One", "09:00", "10:00"))
    repository.upsert_override(make_override("a2", "2024-03-20", OverrideKind.ADD, "Two", "09:00", "10:00"))
    assert [o.id for o in repository.get_overrides_by_date_range("2024-03-01", "2024-03-10")] == ["a1"]
    assert repository.get_dates_with_overrides("2024-03-01", "2024-03-31") == {"2024-03-04", "2024-03-20"}


def test_class_note_lifecycle(repository):
    key = f"{MONDAY}:phys"
    note = repository.save_class_note(key, MONDAY, "Physics", "09:00", "  bring goggles ")
    assert note.note_text == "bring goggles"

    updated = repository.save_class_note(key, MONDAY, "Physics", "09:00", "bring goggles and notebook")
    assert updated.id == note.id
    assert repository.get_note_keys_for_range(MONDAY, MONDAY) == {key}
    assert [n.id for n in repository.get_class_notes_by_date(MONDAY)] == [note.id]
    assert repository.get_class_notes_by_date("2024-03-05") == []

    assert repository.save_class_note(key, MONDAY, "Physics", "09:00", "   ") is None
    assert repository.get_class_note(key) is None


def test_class_note_length_limit(repository):
    with pytest.raises(NoteValidationError):
        repository.save_class_note(f"{MONDAY}:phys", MONDAY, "Physics", "09:00", "x" * 1001)


def test_general_notes(repository):
    first = repository.save_general_note(MONDAY, "Essay", has_due_date=True, due_date="2024-03-08")
    second = repository.save_general_note(MONDAY, "Buy books")

    assert {n.id for n in repository.get_general_notes_by_date(MONDAY)} == {first.id, second.id}
    assert [n.id for n in repository.get_general_notes_with_due_dates("2024-03-01", "2024-03-31")] == [first.id]

    edited = repository.save_general_note(MONDAY, "Essay draft", note_id=first.id)
    assert edited.created_at == first.created_at
    assert repository.get_general_note(first.id).title == "Essay draft"


@pytest.mark.parametrize("kwargs", [
    {"title": "   "},
    {"title": "x" * 101},
    {"title": "Essay", "has_due_date": True},
    {"title": "Essay", "has_due_date": True, "due_date": "soon"},
])
def test_general_note_validation(repository, kwargs):
    with pytest.raises(NoteValidationError):
        repository.save_general_note(MONDAY, **kwargs)


def test_deleting_a_general_note_drops_its_records(repository):
    note = repository.save_general_note(MONDAY, "Essay", has_due_date=True, due_date="2024-03-08")
    repository.record_notification_shown(note.id, "2024-03-05")
    assert repository.has_notification_been_shown(note.id, "2024-03-05")

    assert repository.delete_general_note(note.id)
    assert repository.get_notification_records_by_note_id(note.id) == []


def test_clear_old_notification_records(repository):
    repository.record_notification_shown("n1", "2024-03-01")
    repository.record_notification_shown("n1", "2024-03-05")
    assert repository.clear_old_notification_records("2024-03-03") == 1
    assert [r.id for r in repository.get_notification_records_by_note_id("n1")] == ["n1:2024-03-05"]


def test_settings_validation(repository):
    assert repository.get_settings().week_start == "monday"
    assert repository.update_settings(week_start="sunday").week_start == "sunday"
    with pytest.raises(SettingsError):
        repository.update_settings(week_start="friday")
    with pytest.raises(SettingsError):
        repository.update_settings(theme="dark")


def test_clear_all_data_and_backup(repository):
    repository.replace_all_base_schedules([make_schedule("a", "Art", 1, "09:00", "10:00")])
    repository.save_general_note(MONDAY, "Essay")

    backup = repository.export_backup()
    assert len(backup["base_schedules"]) == 1
    assert "exported_at" in backup

    repository.clear_all_data()
    assert repository.get_all_base_schedules() == []
    assert repository.get_all_general_notes() == []
