"""Due-date reminder eligibility for general notes.

A note with a due date is reminded about 3, 2 and 1 days before it is due,
at most once per day. Delivering the notification is left to the caller;
this module only decides what is due and records what was shown.
"""
from __future__ import annotations

import typing as t

from schedule_core.constants import REMINDER_DAYS_BEFORE
from schedule_core.dates import DateLike, add_days, get_today, to_date, to_date_string
from schedule_core.logger import get_logger
from schedule_core.models import DueReminder, GeneralNote

if t.TYPE_CHECKING:
    from schedule_server.store import ScheduleRepository

logger = get_logger(__name__)


def days_until_due(due_date: DateLike, today: DateLike) -> int:
    """Whole days from today to the due date (negative once overdue)."""
    return (to_date(due_date) - to_date(today)).days


def is_reminder_due(note: GeneralNote, today: DateLike) -> bool:
    """True if the note should be reminded about on ``today``."""
    if not note.has_due_date or not note.due_date:
        return False
    return days_until_due(note.due_date, today) in REMINDER_DAYS_BEFORE


def reminder_message(title: str, days: int) -> str:
    if days == 1:
        return f'"{title}" is due tomorrow!'
    return f'"{title}" is due in {days} days'


def collect_due_reminders(
        notes: t.Iterable[GeneralNote],
        today: DateLike,
        already_shown: t.Container[str] = frozenset(),
) -> list[DueReminder]:
    """Select the notes to remind about today.

    :param notes: Candidate general notes.
    :param today: The current date.
    :param already_shown: Ids of notes already reminded about today.
    :return: Reminders ordered by due date, then title.
    """
    reminders = []
    for note in notes:
        if note.id in already_shown or not is_reminder_due(note, today):
            continue
        days = days_until_due(t.cast(str, note.due_date), today)
        reminders.append(DueReminder(
            note_id=note.id,
            title=note.title,
            due_date=t.cast(str, note.due_date),
            days_until_due=days,
            message=reminder_message(note.title, days),
        ))
    reminders.sort(key=lambda r: (r.due_date, r.title))
    return reminders


def check_due_reminders(
        repository: "ScheduleRepository",
        today: t.Optional[DateLike] = None,
        record: bool = True,
) -> list[DueReminder]:
    """Find today's due reminders in the repository and mark them as shown.

    Nothing is returned while notifications are disabled in the settings.

    :param repository: An open repository.
    :param today: Date to evaluate; defaults to the current date.
    :param record: Whether to record the reminders as shown.
    """
    if not repository.get_settings().notifications_enabled:
        return []

    day = to_date_string(today) if today is not None else get_today()
    horizon = add_days(day, max(REMINDER_DAYS_BEFORE))
    notes = repository.get_general_notes_with_due_dates(day, horizon)
    shown = {
        note.id for note in notes
        if repository.has_notification_been_shown(note.id, day)
    }
    reminders = collect_due_reminders(notes, day, shown)

    if record:
        for reminder in reminders:
            repository.record_notification_shown(reminder.note_id, day)
    logger.info("%d reminder(s) due on %s", len(reminders), day)
    return reminders
