"""Records for university classes, meetings, professors and seat reminders."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass
class Reminder:
    user_id: int
    course_reference_number: int
    min_trigger: int = 1
    for_waitlist: bool = False
    triggered: bool = False


@dataclass
class Trigger:
    user_id: int
    course_reference_number: int
    min_trigger: int


@dataclass
class Class:
    id: int
    term: int
    course_reference_number: int
    course_number: str
    campus_description: str | None
    course_title: str | None
    credit_hours: int
    maximum_enrollment: int
    enrollment: int
    seats_available: int
    wait_capacity: int
    wait_available: int


@dataclass
class PartialClass:
    id: int
    course_reference_number: int
    course_number: str
    course_title: str | None


class Days(enum.IntFlag):
    """Days of the week on which a meeting is held."""

    BASE = 0
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 4
    WEDNESDAY = 8
    THURSDAY = 16
    FRIDAY = 32
    SATURDAY = 64

    def __str__(self) -> str:
        if int(self) == 0:
            return "<no days assigned>"
        return ", ".join(name for flag, name in _DAY_NAMES if int(self) & int(flag))

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_DAY_NAMES = (
    (Days.SUNDAY, "Sunday"),
    (Days.MONDAY, "Monday"),
    (Days.TUESDAY, "Tuesday"),
    (Days.WEDNESDAY, "Wednesday"),
    (Days.THURSDAY, "Thursday"),
    (Days.FRIDAY, "Friday"),
    (Days.SATURDAY, "Saturday"),
)


class MeetingType(enum.IntEnum):
    LECTURE = 1
    DISCUSSION = 2
    LAB = 3
    FIELDWORK = 4
    SEMINAR = 5
    INDIVIDUAL_STUDY = 6
    TUTORIAL = 7
    STUDIO = 8
    PRACTICUM = 9
    EXAM = 10
    PROJECT = 11
    INTERNSHIP = 12

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


@dataclass
class Meeting:
    class_id: int
    begin_time: str | None
    end_time: str | None
    begin_date: str
    end_date: str
    building: str | None
    building_description: str | None
    campus: str | None
    campus_description: str | None
    room: str | None
    credit_hour_session: float
    hours_per_week: float
    in_session: Days
    meeting_type: MeetingType


@dataclass
class Professor:
    id: int
    rmp_id: int | None
    last_name: str
    first_name: str
    middle_name: str | None
    full_name: str
    email: str | None
    department: str | None
    num_ratings: int
    rating: float


def fix_time(time: str) -> str:
    """Turn a 24-hour ``HHMM`` string into a 12-hour clock string."""
    hour_text, minutes = time[:2], time[2:]
    if len(hour_text) != 2 or not all(c in "0123456789" for c in hour_text):
        raise ValueError(f"invalid time {time!r}")
    hour = int(hour_text)

    if hour == 0:
        return f"12:{minutes} AM"
    if hour == 12:
        return f"12:{minutes} PM"
    if hour < 12:
        return f"{hour}:{minutes} AM"
    return f"{hour - 12}:{minutes} PM"


_SEMESTER_NAMES = {30: "Fall", 20: "Summer", 10: "Spring"}
_SEMESTER_CODES = {name.lower(): code for code, name in _SEMESTER_NAMES.items()}


def format_term(term: int) -> str:
    """Render a term code such as ``202330`` as ``"Fall 2023"``."""
    year, code = divmod(abs(term), 100)
    if term < 0:
        year, code = -year, -code
    return f"{_SEMESTER_NAMES.get(code, 'Unknown')} {year}"


def semester_from_text(text: str) -> int | None:
    """Semester code for "fall", "summer" or "spring", any case; otherwise ``None``."""
    return _SEMESTER_CODES.get(text.lower())