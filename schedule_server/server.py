# -*- coding: utf-8 -*-
import typing as t

from fastmcp import FastMCP

from schedule_core.config import DATA_PATH
from schedule_core.csv_template import generate_blank_template, generate_example_template, schedules_to_csv
from schedule_core.dates import get_today, get_year_month
from schedule_core.errors import NotFoundError
from schedule_core.importer import import_schedule_csv as run_import
from schedule_core.models import ClassNote, DayOverride, DueReminder, GeneralNote, ResolvedClass, SubjectSchedule
from schedule_core.reminders import check_due_reminders as run_reminder_check
from schedule_server import actions, queries
from schedule_server.formatting import format_base_schedule, format_day, format_week
from schedule_server.store import ScheduleRepository


def create_server(repository: ScheduleRepository) -> FastMCP:
    """Build the schedule MCP server around an open repository.

    :param repository: Repository every tool reads from and writes to.
    :return: A FastMCP instance with all schedule tools registered.
    """
    mcp = FastMCP("ScheduleServer")

    @mcp.tool()
    def import_schedule_csv(csv_text: str, file_name: str = "") -> dict[str, t.Any]:
        """Replaces the weekly schedule with the classes in a CSV.

        The import is all-or-nothing: if any row is invalid nothing changes.

        :param csv_text: CSV content with a header row.
        :param file_name: Optional original file name.
        :return: Import summary with the imported count or the first errors.
        """
        result = run_import(csv_text, repository, file_name=file_name or None)
        return {
            "success": result.success,
            "imported_count": result.imported_count,
            "errors": [vars(e) for e in result.error_preview],
            "remaining_error_count": result.remaining_error_count,
        }

    @mcp.tool()
    def export_schedule_csv() -> str:
        """Exports the weekly schedule as canonical CSV.

        :return: CSV text sorted by weekday and start time.
        """
        return schedules_to_csv(repository.get_all_base_schedules())

    @mcp.tool()
    def get_csv_template(with_examples: bool = False) -> str:
        """Returns the CSV import template.

        :param with_examples: Include example rows.
        :return: CSV text.
        """
        return generate_example_template() if with_examples else generate_blank_template()

    @mcp.tool()
    def list_base_schedules() -> list[SubjectSchedule]:
        """Lists the recurring weekly classes.

        :return: A list of SubjectSchedule objects.
        """
        return repository.get_all_base_schedules()

    @mcp.tool()
    def show_base_schedule() -> str:
        """Shows the recurring weekly classes as a table."""
        return format_base_schedule(repository.get_all_base_schedules(), repository.get_settings().time_format)

    @mcp.tool()
    def get_day_schedule(date: str = "") -> list[ResolvedClass]:
        """Lists the classes that occur on a date, overrides applied.

        :param date: Date in YYYY-MM-DD format; defaults to today.
        :return: Resolved classes sorted by start time, canceled ones included.
        """
        return queries.get_resolved_day(repository, date or get_today())

    @mcp.tool()
    def show_day_schedule(date: str = "") -> str:
        """Shows the classes of a date as a table.

        :param date: Date in YYYY-MM-DD format; defaults to today.
        """
        day = date or get_today()
        classes = queries.get_resolved_day(repository, day)
        return format_day(day, classes, repository.get_settings().time_format)

    @mcp.tool()
    def show_week_schedule(date: str = "") -> str:
        """Shows the week containing a date.

        :param date: Any date of the week, YYYY-MM-DD; defaults to today.
        """
        week = queries.get_resolved_week(repository, date or get_today())
        return format_week(week, repository.get_settings().time_format)

    @mcp.tool()
    def get_month_overview(year: int = 0, month: int = 0) -> dict[str, dict[str, bool]]:
        """Returns per-day markers for a month (classes, overrides, notes).

        :param year: Four-digit year; defaults to the current year.
        :param month: Month 1-12; defaults to the current month.
        """
        if not year or not month:
            year, month = get_year_month(get_today())
        return queries.get_month_indicators(repository, year, month)

    @mcp.tool()
    def cancel_class(date: str, base_schedule_id: str) -> DayOverride:
        """Cancels a recurring class on one date.

        :param date: Date in YYYY-MM-DD format.
        :param base_schedule_id: Id of the weekly class.
        """
        return actions.cancel_class(repository, date, base_schedule_id)

    @mcp.tool()
    def edit_class(
            date: str,
            base_schedule_id: str,
            subject_name: t.Optional[str] = None,
            start_time: t.Optional[str] = None,
            end_time: t.Optional[str] = None,
            location: t.Optional[str] = None,
            professor: t.Optional[str] = None,
            color: t.Optional[str] = None,
    ) -> DayOverride:
        """Changes a recurring class on one date only.

        :param date: Date in YYYY-MM-DD format.
        :param base_schedule_id: Id of the weekly class.
        :return: The stored override.
        """
        return actions.edit_class(
            repository, date, base_schedule_id,
            subject_name=subject_name, start_time=start_time, end_time=end_time,
            location=location, professor=professor, color=color,
        )

    @mcp.tool()
    def add_class(
            date: str,
            subject_name: str,
            start_time: str,
            end_time: str,
            location: str = "",
            professor: str = "",
            color: str = "",
    ) -> DayOverride:
        """Adds a one-time class on a date.

        :param date: Date in YYYY-MM-DD format.
        :param subject_name: Name of the class.
        :param start_time: Start time, HH:MM or H:MM AM/PM.
        :param end_time: End time, after the start time.
        """
        return actions.add_class(
            repository, date, subject_name, start_time, end_time,
            location=location or None, professor=professor or None, color=color or None,
        )

    @mcp.tool()
    def delete_override(override_id: str) -> bool:
        """Removes a cancel, edit or added class so the day reverts to the weekly schedule.

        :param override_id: Id of the override.
        """
        if not repository.delete_override(override_id):
            raise NotFoundError(f"Override '{override_id}' not found")
        return True

    @mcp.tool()
    def save_class_note(date: str, instance_key: str, note_text: str) -> t.Optional[ClassNote]:
        """Saves the note of one class instance; empty text deletes it.

        :param date: Date of the class.
        :param instance_key: Instance key from get_day_schedule.
        :param note_text: Note body, at most 1000 characters.
        """
        return actions.save_note_for_class(repository, date, instance_key, note_text)

    @mcp.tool()
    def create_general_note(
            date: str,
            title: str,
            note_text: str = "",
            due_date: str = "",
    ) -> GeneralNote:
        """Creates a note on a date, optionally with a due date for reminders.

        :param date: Date the note is shown on.
        :param title: Short title, at most 100 characters.
        :param note_text: Optional longer text.
        :param due_date: Optional YYYY-MM-DD due date.
        """
        return repository.save_general_note(
            date=date, title=title, note_text=note_text or None,
            has_due_date=bool(due_date), due_date=due_date or None,
        )

    @mcp.tool()
    def list_general_notes(date: str = "") -> list[GeneralNote]:
        """Lists the general notes of a date, newest first."""
        return repository.get_general_notes_by_date(date or get_today())

    @mcp.tool()
    def check_due_reminders(today: str = "") -> list[DueReminder]:
        """Returns reminders due today (3, 2 or 1 days before a due date) and marks them shown."""
        return run_reminder_check(repository, today or None)

    return mcp


if __name__ == "__main__":
    create_server(ScheduleRepository(DATA_PATH).open()).run()
