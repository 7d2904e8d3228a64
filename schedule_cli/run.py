# -*- coding: utf-8 -*-
import json
import typing as t

import click
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from schedule_cli.utils import console, fail, handle_errors, read_csv_path, write_or_print
from schedule_core.colors import resolve_color
from schedule_core.config import DATA_PATH
from schedule_core.constants import WEEKDAYS_SHORT
from schedule_core.csv_template import (generate_blank_template, generate_example_template,
                                        get_format_documentation, schedules_to_csv)
from schedule_core.dates import format_date_display, get_month_dates, get_today, get_year_month, weekday_of
from schedule_core.importer import import_schedule_csv
from schedule_core.models import ResolvedClass
from schedule_core.reminders import check_due_reminders
from schedule_core.times import format_time, format_time_range
from schedule_server import actions, queries
from schedule_server.formatting import class_status, display_order
from schedule_server.store import ScheduleRepository


STATUS_STYLES = {
    "CANCELED": "strike dim",
    "EDITED": "yellow",
    "ADDED": "green",
}


def create_day_table(date: str, classes: t.Sequence[ResolvedClass], time_format: str) -> Table:
    """Create a table for the classes of one day."""
    table = Table(title=f"📅 {format_date_display(date)}", show_header=True, header_style="bold magenta")
    table.add_column("", width=2)  # color swatch
    table.add_column("Time", style="yellow")
    table.add_column("Subject", style="white")
    table.add_column("Location", style="cyan")
    table.add_column("Status")
    table.add_column("Instance key", style="dim")

    for resolved in display_order(classes):
        status = class_status(resolved)
        style = STATUS_STYLES.get(status, "")
        subject = resolved.subject_name + (" 📝" if resolved.has_note else "")
        table.add_row(
            Text("■", style=resolve_color(resolved.color)),
            format_time_range(resolved.start_time, resolved.end_time, time_format),
            Text(subject, style=style),
            resolved.location or "",
            Text(status, style=style),
            resolved.instance_key,
        )
    return table


def create_month_table(year: int, month: int, indicators: dict[str, dict[str, bool]], week_start: str) -> Table:
    """Create a calendar grid with a marker per day."""
    names = list(WEEKDAYS_SHORT)
    if week_start == "monday":
        names = names[1:] + names[:1]
    table = Table(title=f"{year}-{month:02d}", show_header=True, header_style="bold magenta")
    for name in names:
        table.add_column(name, justify="center")

    offset = 1 if week_start == "monday" else 0
    cells: list[str] = [""] * ((weekday_of(get_month_dates(year, month)[0]) - offset) % 7)
    for day, markers in indicators.items():
        mark = ""
        if markers["has_classes"]:
            mark += "•"
        if markers["has_override"]:
            mark += "*"
        if markers["has_note"] or markers["has_general_note"]:
            mark += "✎"
        cells.append(f"{int(day[-2:])}{mark}")
    while len(cells) % 7:
        cells.append("")
    for i in range(0, len(cells), 7):
        table.add_row(*cells[i:i + 7])
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--data",
    "data_path",
    type=click.Path(dir_okay=False),
    default=str(DATA_PATH),
    show_default=True,
    help="JSON file holding schedules, overrides and notes.",
)
@click.pass_context
def cli(ctx: click.Context, data_path: str) -> None:
    """Weekly class schedule with per-day changes and notes."""
    ctx.obj = ctx.with_resource(ScheduleRepository(data_path))


@cli.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
def import_command(repository: ScheduleRepository, csv_file: str) -> None:
    """Replace the weekly schedule with the classes in CSV_FILE."""
    text = read_csv_path(csv_file)
    result = import_schedule_csv(text, repository, file_name=click.format_filename(csv_file, shorten=True))
    if result.success:
        console.print(f"[bold green]✅ Imported {result.imported_count} class(es).[/bold green]")
        return

    table = Table(title="❌ Import failed, nothing was changed", header_style="bold red")
    table.add_column("Row", justify="right")
    table.add_column("Column", style="cyan")
    table.add_column("Problem")
    for error in result.error_preview:
        table.add_row(str(error.row), error.column, error.message)
    console.print(table)
    if result.remaining_error_count:
        console.print(f"... and {result.remaining_error_count} more")
    raise SystemExit(1)


@cli.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file instead of stdout.")
@click.pass_obj
@handle_errors
def export_command(repository: ScheduleRepository, output: t.Optional[str]) -> None:
    """Export the weekly schedule as CSV."""
    write_or_print(schedules_to_csv(repository.get_all_base_schedules()), output)


@cli.command()
@click.option("--examples", is_flag=True, help="Include example rows.")
@click.option("--docs", is_flag=True, help="Show the column documentation instead.")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file instead of stdout.")
def template(examples: bool, docs: bool, output: t.Optional[str]) -> None:
    """Print the CSV import template."""
    if docs:
        console.print(Panel(get_format_documentation(), title="CSV format", border_style="blue"))
        return
    write_or_print(generate_example_template() if examples else generate_blank_template(), output)


@cli.command()
@click.pass_obj
def base(repository: ScheduleRepository) -> None:
    """Show the weekly schedule."""
    schedules = repository.get_all_base_schedules()
    if not schedules:
        console.print("📚 No schedule imported.")
        return
    time_format = repository.get_settings().time_format
    table = Table(title="📚 Weekly schedule", header_style="bold magenta")
    table.add_column("Day", style="cyan")
    table.add_column("Time", style="yellow")
    table.add_column("Subject")
    table.add_column("Location")
    table.add_column("Professor")
    table.add_column("Id", style="dim")
    for schedule in sorted(schedules, key=lambda s: (s.weekday, s.start_time)):
        table.add_row(
            WEEKDAYS_SHORT[schedule.weekday],
            format_time_range(schedule.start_time, schedule.end_time, time_format),
            Text(schedule.subject_name, style=resolve_color(schedule.color)),
            schedule.location or "",
            schedule.professor or "",
            schedule.id,
        )
    console.print(table)


@cli.command()
@click.argument("date", required=False)
@click.pass_obj
@handle_errors
def day(repository: ScheduleRepository, date: t.Optional[str]) -> None:
    """Show the classes of DATE (YYYY-MM-DD, default today)."""
    target = date or get_today()
    classes = queries.get_resolved_day(repository, target)
    if not classes:
        console.print(f"{format_date_display(target)}: no classes scheduled.")
    else:
        console.print(create_day_table(target, classes, repository.get_settings().time_format))
    for class_note in repository.get_class_notes_by_date(target):
        console.print(f"📝 [bold]{class_note.subject_name}[/bold] {class_note.start_time}: {class_note.note_text}")
    for note in repository.get_general_notes_by_date(target):
        due = f" (due {note.due_date})" if note.has_due_date else ""
        console.print(f"📌 [bold]{note.title}[/bold]{due}")


@cli.command()
@click.argument("date", required=False)
@click.option("--week-start", type=click.Choice(["monday", "sunday"]), help="Override the stored week start.")
@click.pass_obj
@handle_errors
def week(repository: ScheduleRepository, date: t.Optional[str], week_start: t.Optional[str]) -> None:
    """Show the week containing DATE (default today)."""
    time_format = repository.get_settings().time_format
    resolved = queries.get_resolved_week(repository, date or get_today(), week_start)
    table = Table(title="🗓 Week", show_header=True, header_style="bold magenta")
    table.add_column("Day", style="cyan")
    table.add_column("Classes")
    for target, classes in resolved.items():
        lines = []
        for c in display_order(classes):
            status = class_status(c)
            line = Text(f"{format_time(c.start_time, time_format)} {c.subject_name}", style=STATUS_STYLES.get(status, ""))
            lines.append(line)
        table.add_row(format_date_display(target), Text("\n").join(lines) if lines else Text("—", style="dim"))
    console.print(table)


@cli.command()
@click.option("--year", type=int, help="Four-digit year (default current).")
@click.option("--month", type=click.IntRange(1, 12), help="Month 1-12 (default current).")
@click.pass_obj
@handle_errors
def month(repository: ScheduleRepository, year: t.Optional[int], month: t.Optional[int]) -> None:
    """Show a month calendar: • classes, * changed, ✎ notes."""
    current_year, current_month = get_year_month(get_today())
    year, month = year or current_year, month or current_month
    indicators = queries.get_month_indicators(repository, year, month)
    console.print(create_month_table(year, month, indicators, repository.get_settings().week_start))


@cli.group()
def override() -> None:
    """Change the schedule of a single date."""


@override.command("cancel")
@click.argument("date")
@click.argument("base_schedule_id")
@click.pass_obj
@handle_errors
def override_cancel(repository: ScheduleRepository, date: str, base_schedule_id: str) -> None:
    """Cancel a weekly class on DATE."""
    stored = actions.cancel_class(repository, date, base_schedule_id)
    console.print(f"[green]✓[/green] Canceled {stored.subject_name} on {stored.date} (override {stored.id})")


@override.command("edit")
@click.argument("date")
@click.argument("base_schedule_id")
@click.option("--subject", "subject_name", help="Subject name for that date.")
@click.option("--start", "start_time", help="Start time, HH:MM or H:MM AM/PM.")
@click.option("--end", "end_time", help="End time.")
@click.option("--location")
@click.option("--professor")
@click.option("--color")
@click.pass_obj
@handle_errors
def override_edit(repository: ScheduleRepository, date: str, base_schedule_id: str, **changes: t.Any) -> None:
    """Change a weekly class on DATE only."""
    if all(value is None for value in changes.values()):
        fail("Nothing to change; pass at least one option.")
    stored = actions.edit_class(repository, date, base_schedule_id, **changes)
    console.print(
        f"[green]✓[/green] {stored.subject_name} on {stored.date} is now "
        f"{format_time_range(stored.start_time, stored.end_time, repository.get_settings().time_format)}"
    )


@override.command("add")
@click.argument("date")
@click.argument("subject_name")
@click.argument("start_time")
@click.argument("end_time")
@click.option("--location")
@click.option("--professor")
@click.option("--color")
@click.pass_obj
@handle_errors
def override_add(
        repository: ScheduleRepository,
        date: str,
        subject_name: str,
        start_time: str,
        end_time: str,
        location: t.Optional[str],
        professor: t.Optional[str],
        color: t.Optional[str],
) -> None:
    """Add a one-time class on DATE."""
    stored = actions.add_class(
        repository, date, subject_name, start_time, end_time,
        location=location, professor=professor, color=color,
    )
    console.print(f"[green]✓[/green] Added {stored.subject_name} on {stored.date} (override {stored.id})")


@override.command("restore")
@click.argument("date")
@click.argument("base_schedule_id")
@click.pass_obj
@handle_errors
def override_restore(repository: ScheduleRepository, date: str, base_schedule_id: str) -> None:
    """Undo any edit or cancel of a weekly class on DATE."""
    if actions.restore_class(repository, date, base_schedule_id):
        console.print("[green]✓[/green] Restored to the weekly schedule.")
    else:
        console.print("Nothing to restore.")


@override.command("delete")
@click.argument("override_id")
@click.pass_obj
@handle_errors
def override_delete(repository: ScheduleRepository, override_id: str) -> None:
    """Delete an override by id."""
    if not repository.delete_override(override_id):
        fail(f"Override '{override_id}' not found")
    console.print("[green]✓[/green] Override deleted.")


@cli.command()
@click.argument("date")
@click.argument("instance_key")
@click.argument("text", default="")
@click.pass_obj
@handle_errors
def note(repository: ScheduleRepository, date: str, instance_key: str, text: str) -> None:
    """Set the note of a class instance; omit TEXT to delete it."""
    saved = actions.save_note_for_class(repository, date, instance_key, text)
    if saved is None:
        console.print("[green]✓[/green] Note removed.")
    else:
        console.print(f"[green]✓[/green] Note saved for {saved.subject_name} on {saved.date}")


@cli.group("general-note")
def general_note() -> None:
    """Notes attached to a date rather than a class."""


@general_note.command("add")
@click.argument("date")
@click.argument("title")
@click.option("--text", "note_text", help="Longer note text.")
@click.option("--due", "due_date", help="Due date (YYYY-MM-DD) for reminders.")
@click.option("--id", "note_id", help="Update an existing note instead of creating one.")
@click.pass_obj
@handle_errors
def general_note_add(
        repository: ScheduleRepository,
        date: str,
        title: str,
        note_text: t.Optional[str],
        due_date: t.Optional[str],
        note_id: t.Optional[str],
) -> None:
    """Create (or update) a general note on DATE."""
    saved = repository.save_general_note(
        date=date, title=title, note_text=note_text,
        has_due_date=due_date is not None, due_date=due_date, note_id=note_id,
    )
    console.print(f"[green]✓[/green] Saved '{saved.title}' ({saved.id})")


@general_note.command("list")
@click.argument("date", required=False)
@click.pass_obj
@handle_errors
def general_note_list(repository: ScheduleRepository, date: t.Optional[str]) -> None:
    """List the general notes of DATE (default today)."""
    notes = repository.get_general_notes_by_date(date or get_today())
    if not notes:
        console.print("No notes.")
        return
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Title")
    table.add_column("Due", style="yellow")
    table.add_column("Text")
    table.add_column("Id", style="dim")
    for item in notes:
        table.add_row(item.title, item.due_date or "", item.note_text or "", item.id)
    console.print(table)


@general_note.command("delete")
@click.argument("note_id")
@click.pass_obj
@handle_errors
def general_note_delete(repository: ScheduleRepository, note_id: str) -> None:
    """Delete a general note."""
    if not repository.delete_general_note(note_id):
        fail(f"General note '{note_id}' not found")
    console.print("[green]✓[/green] Note deleted.")


@cli.command()
@click.option("--today", help="Evaluate as of this date (YYYY-MM-DD).")
@click.option("--peek", is_flag=True, help="Do not mark the reminders as shown.")
@click.pass_obj
@handle_errors
def reminders(repository: ScheduleRepository, today: t.Optional[str], peek: bool) -> None:
    """Show due-date reminders for today."""
    if not repository.get_settings().notifications_enabled:
        console.print("[dim]Reminders are off; enable them with 'settings --notifications'.[/dim]")
        return
    due = check_due_reminders(repository, today, record=not peek)
    if not due:
        console.print("No reminders today.")
    for reminder in due:
        console.print(f"🔔 {reminder.message}")


@cli.command()
@click.option("--week-start", type=click.Choice(["monday", "sunday"]))
@click.option("--time-format", type=click.Choice(["12h", "24h"]))
@click.option("--notifications/--no-notifications", "notifications_enabled", default=None)
@click.option("--notification-time", type=click.Choice(["08:00", "12:00", "18:00"]))
@click.pass_obj
@handle_errors
def settings(repository: ScheduleRepository, **changes: t.Any) -> None:
    """Show or change settings."""
    changes = {key: value for key, value in changes.items() if value is not None}
    current = repository.update_settings(**changes) if changes else repository.get_settings()
    table = Table(title="⚙ Settings", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Week starts on", current.week_start)
    table.add_row("Time format", current.time_format)
    table.add_row("Reminders", "on" if current.notifications_enabled else "off")
    table.add_row("Reminder time", current.notification_time)
    table.add_row("Last import", f"{current.last_imported_file_name or '—'} {current.last_imported_at or ''}".strip())
    console.print(table)


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the backup to a file.")
@click.pass_obj
@handle_errors
def backup(repository: ScheduleRepository, output: t.Optional[str]) -> None:
    """Export everything as one JSON document."""
    document = json.dumps(repository.export_backup(), indent=2)
    if output is None:
        console.print(JSON(document))
    else:
        write_or_print(document, output)


@cli.command()
@click.confirmation_option(prompt="Delete all schedules, overrides and notes?")
@click.pass_obj
@handle_errors
def clear(repository: ScheduleRepository) -> None:
    """Delete all stored data."""
    repository.clear_all_data()
    console.print("[bold green]✅ All data cleared.[/bold green]")


if __name__ == "__main__":
    cli()
