"""Tests for the in-process schedule MCP server."""
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest
from conftest import MONDAY, SAMPLE_CSV

from schedule_core.models import OverrideKind
from schedule_core.dates import get_today
from schedule_server.formatting import format_day
from schedule_server.server import create_server

EXPECTED_TOOLS = {
    "import_schedule_csv", "export_schedule_csv", "get_csv_template", "list_base_schedules",
    "show_base_schedule", "get_day_schedule", "show_day_schedule", "show_week_schedule",
    "get_month_overview", "cancel_class", "edit_class", "add_class", "delete_override",
    "save_class_note", "create_general_note", "list_general_notes", "check_due_reminders",
}


async def _tools(repository):
    tools = await create_server(repository).get_tools()
    # All tools are wrapped by @mcp.tool(), so call the underlying .fn
    return {name: tool.fn for name, tool in tools.items()}


@pytest.mark.asyncio
async def test_all_tools_are_registered(repository):
    tools = await _tools(repository)
    assert EXPECTED_TOOLS <= set(tools)


@pytest.mark.asyncio
async def test_tools_share_the_repository(repository):
    tools = await _tools(repository)

    summary = tools["import_schedule_csv"](SAMPLE_CSV, "sample.csv")
    assert summary["success"] and summary["imported_count"] == 3

    physics = next(s for s in tools["list_base_schedules"]() if s.subject_name == "Physics")
    override = tools["edit_class"](MONDAY, physics.id, start_time="13:00", end_time="14:30")
    assert override.kind is OverrideKind.EDIT

    day = tools["get_day_schedule"](MONDAY)
    assert [c.subject_name for c in day] == ["Mathematics", "Physics"]
    assert "EDITED" in tools["show_day_schedule"](MONDAY)

    assert tools["delete_override"](override.id)
    assert tools["get_day_schedule"](MONDAY)[0].subject_name == "Physics"


@pytest.mark.asyncio
async def test_failed_import_summary(repository):
    tools = await _tools(repository)
    rows = "\n".join(f"Class {i},Noday,09:00,10:00" for i in range(12))
    summary = tools["import_schedule_csv"]("subject_name,day_of_week,start_time,end_time\n" + rows)
    assert not summary["success"]
    assert len(summary["errors"]) == 10
    assert summary["remaining_error_count"] == 2


def test_rejected_import_keeps_stdout_clean(tmp_path):
    """Stdout is the stdio transport, so warnings must not be written to it."""
    project_root = Path(__file__).resolve().parents[1]
    script = textwrap.dedent("""
        import asyncio

        from schedule_server.server import create_server
        from schedule_server.store import ScheduleRepository


        async def main():
            tools = await create_server(ScheduleRepository().open()).get_tools()
            summary = tools["import_schedule_csv"].fn(
                "subject_name,day_of_week,start_time,end_time\\nArt,Funday,09:00,10:00\\n"
            )
            assert not summary["success"]

        asyncio.run(main())
    """)
    env = dict(os.environ, PYTHONPATH=str(project_root), SCHEDULE_LOG_PATH=str(tmp_path / "schedule.log"))

    completed = subprocess.run(
        [sys.executable, "-c", script], cwd=project_root, env=env, capture_output=True, text=True, timeout=60,
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout == ""
    assert "Import of CSV text rejected" in completed.stderr


def test_day_heading_marks_today():
    assert "TODAY" in format_day(get_today(), [])
    assert "TODAY" not in format_day(MONDAY, [])
