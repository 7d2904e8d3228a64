"""Tests for the HTTP-backed MCP wrapper, run against the service in-process."""
import pytest
from conftest import MONDAY, SAMPLE_CSV
from fastapi.testclient import TestClient

from mcp_wrappers.schedule import mcp_service
from schedule_core.models import DayOverride, OverrideKind, ResolvedClass, SubjectSchedule
from schedule_server.store import ScheduleRepository
from services.schedule_service.app import create_app


@pytest.fixture
def service(monkeypatch, data_path):
    """Route wrapper calls to an in-process app backed by a temporary file."""
    app = create_app(ScheduleRepository(data_path))
    monkeypatch.setattr(mcp_service, "_client", lambda: TestClient(app))
    return app


def test_import_and_list(service):
    result = mcp_service._import_schedule_csv(SAMPLE_CSV, "sample.csv")
    assert result.success and result.imported_count == 3

    schedules = mcp_service._list_base_schedules()
    assert all(isinstance(s, SubjectSchedule) for s in schedules)
    assert {s.subject_name for s in schedules} == {"Physics", "Mathematics", "English"}


def test_overrides_come_back_as_dataclasses(service):
    mcp_service._import_schedule_csv(SAMPLE_CSV)
    physics = next(s for s in mcp_service._list_base_schedules() if s.subject_name == "Physics")

    canceled = mcp_service._cancel_class(MONDAY, physics.id)
    assert isinstance(canceled, DayOverride)
    assert canceled.kind is OverrideKind.CANCEL

    added = mcp_service._add_class(MONDAY, "Review", "15:00", "16:00")
    day = mcp_service._get_day_schedule(MONDAY)
    assert all(isinstance(c, ResolvedClass) for c in day)
    assert [c.is_canceled for c in day if c.base_schedule_id == physics.id] == [True]
    assert any(c.override_id == added.id and c.is_added for c in day)

    assert mcp_service._delete_override(added.id)


def test_notes_and_reminders(service):
    mcp_service._import_schedule_csv(SAMPLE_CSV)
    key = mcp_service._get_day_schedule(MONDAY)[0].instance_key

    note = mcp_service._save_class_note(MONDAY, key, "Quiz")
    assert note.note_text == "Quiz"
    assert mcp_service._save_class_note(MONDAY, key, "") is None

    general = mcp_service._create_general_note(MONDAY, "Essay", due_date="2024-03-06")
    assert general.has_due_date
    assert [n.id for n in mcp_service._list_general_notes(MONDAY)] == [general.id]
    # notifications are off by default
    assert mcp_service._check_due_reminders("2024-03-05") == []


def test_formatted_views(service):
    mcp_service._import_schedule_csv(SAMPLE_CSV)
    assert "WEEKLY SCHEDULE" in mcp_service._show_base_schedule()
    assert "Physics" in mcp_service._show_day_schedule(MONDAY)
    assert "Tuesday" in mcp_service._show_week_schedule(MONDAY)
    assert mcp_service._get_month_overview(2024, 3)[MONDAY]["has_classes"]
    assert mcp_service._export_schedule_csv().startswith("subject_name,")
    assert mcp_service._get_csv_template(with_examples=False) == mcp_service._get_csv_template().strip()


def test_http_errors_become_runtime_errors(service):
    with pytest.raises(RuntimeError, match="404"):
        mcp_service._delete_override("missing")
    with pytest.raises(RuntimeError, match="422"):
        mcp_service._add_class(MONDAY, "Lab", "10:00", "09:00")


def test_dates_default_to_today(service, monkeypatch):
    monkeypatch.setattr(mcp_service, "get_today", lambda: MONDAY)
    mcp_service._import_schedule_csv(SAMPLE_CSV)

    assert [c.subject_name for c in mcp_service._get_day_schedule()] == ["Physics", "Mathematics"]
    assert "Physics" in mcp_service._show_day_schedule()
    assert mcp_service._get_month_overview()[MONDAY]["has_classes"]
    assert mcp_service._list_general_notes() == []
