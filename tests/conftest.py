"""Shared fixtures for the schedule planner tests."""
import typing as t

import pytest

from schedule_core.models import DayOverride, OverrideKind, SubjectSchedule
from schedule_server.store import ScheduleRepository

# 2024-03-04 is a Monday
MONDAY = "2024-03-04"
TUESDAY = "2024-03-05"
NEXT_MONDAY = "2024-03-11"

SAMPLE_CSV = (
    "subject_name,day_of_week,start_time,end_time,location,professor,color\n"
    "Physics,Monday,09:00,10:30,Lab A,Prof. Johnson,sky\n"
    "Mathematics,Monday,11:00,12:30,Room 201,Dr. Smith,#F97B5C\n"
    "English,Tuesday,9:00 AM,10:30 AM,Room 105,,\n"
)


def make_schedule(
        schedule_id: str,
        subject_name: str,
        weekday: int,
        start_time: str,
        end_time: str,
        **extra: t.Any,
) -> SubjectSchedule:
    return SubjectSchedule(
        id=schedule_id,
        subject_name=subject_name,
        weekday=weekday,
        start_time=start_time,
        end_time=end_time,
        **extra,
    )


def make_override(
        override_id: str,
        date: str,
        kind: OverrideKind,
        subject_name: str = "",
        start_time: str = "",
        end_time: str = "",
        **extra: t.Any,
) -> DayOverride:
    return DayOverride(
        id=override_id,
        date=date,
        kind=kind,
        subject_name=subject_name,
        start_time=start_time,
        end_time=end_time,
        **extra,
    )


@pytest.fixture
def physics() -> SubjectSchedule:
    return make_schedule("phys", "Physics", 1, "09:00", "10:30", location="Lab A")


@pytest.fixture
def repository() -> t.Iterator[ScheduleRepository]:
    """An open in-memory repository."""
    with ScheduleRepository() as repo:
        yield repo


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "schedule.json"


@pytest.fixture
def file_repository(data_path) -> t.Iterator[ScheduleRepository]:
    """An open repository persisted to a temporary JSON file."""
    with ScheduleRepository(data_path) as repo:
        yield repo


@pytest.fixture
def imported_repository(repository: ScheduleRepository) -> ScheduleRepository:
    """In-memory repository holding the three classes of SAMPLE_CSV."""
    from schedule_core.importer import import_schedule_csv

    result = import_schedule_csv(SAMPLE_CSV, repository, file_name="sample.csv")
    assert result.success
    return repository


def base_id(repository: ScheduleRepository, subject_name: str) -> str:
    """Id of the base schedule with a given subject."""
    for schedule in repository.get_all_base_schedules():
        if schedule.subject_name == subject_name:
            return schedule.id
    raise KeyError(subject_name)
