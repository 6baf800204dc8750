"""Class search: by CRN, course number or title, with the class information card."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from .course_models import (
    Class,
    Meeting,
    PartialClass,
    Professor,
    fix_time,
    format_term,
    semester_from_text,
)
from .embed import Embed

log = logging.getLogger(__name__)

EMPTY_QUERY = "Type the CRN, course number, or name of the class to look it up."
DATABASE_FAILED = "Failed to query our database... try again later?"
SEARCH_FAILED = "Failed to search for classes... try again later?"
NOTHING_FOUND = "Failed to find any classes with the given query. Did you mistype the input?"
ENROLLMENT_NOTE = "Enrollment and Waitlist are in terms of seats available/seats taken/max seats."
UNKNOWN_CLASS = "<unknown class name>"
NO_PROFESSORS = "No professors are assigned to this course."
NO_MEETINGS = "No meetings are assigned to this course."
MATCHES_NOTE = (
    "Multiple results were found for your query. Search again using the CRN for a particular class."
)

MIN_CRN = 10000
FIRST_YEAR = 2005
MAX_LISTED = 10

_INTEGER = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1


def _parse_i32(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if _I32_MIN <= value <= _I32_MAX else None


@dataclass(frozen=True)
class CourseQuery:
    """A parsed class search: either a CRN or a text query within a term."""

    term: int
    search_query: str = ""
    crn: int | None = None


def parse_course_args(args: Iterable[str], today: date) -> CourseQuery:
    """Interpret the command's words.

    A number of at least 10000 is a CRN and ends parsing; a number of at
    least 2005 is the year; a semester name sets the semester; every other
    word joins the search text. Without a semester, March to October
    searches the fall term and the rest of the year the spring term.
    """
    words = list(args)
    if not words:
        raise ValueError("no search terms given")

    year = today.year
    semester = 30 if 3 <= today.month <= 10 else 10
    query = ""

    for word in words:
        number = _parse_i32(word)
        if number is not None:
            if number >= MIN_CRN:
                return CourseQuery(term=year * 100 + semester, crn=number)
            if number >= FIRST_YEAR:
                year = number
                continue
        code = semester_from_text(word)
        if code is not None:
            semester = code
        else:
            query += " " + word

    return CourseQuery(term=year * 100 + semester, search_query=query)


def _meeting_line(meeting: Meeting) -> str:
    line = (
        f"- {meeting.meeting_type}: {meeting.building_description or '<no building>'} "
        f"{meeting.room or '<no room>'}"
    )
    if meeting.begin_time is not None and meeting.end_time is not None:
        return (
            f"{line} ({meeting.begin_date} - {meeting.end_date}) from {fix_time(meeting.begin_time)} "
            f"to {fix_time(meeting.end_time)} on {meeting.in_session}"
        )
    return line


def course_embed(
    class_: Class,
    professors: list[Professor] | None,
    meetings: list[Meeting] | None,
    stats: Mapping[str, datetime] | None,
) -> Embed:
    """Card for one class; ``None`` parts were unavailable and are left out."""
    embed = Embed(
        title=f"{class_.course_number}: {class_.course_title or UNKNOWN_CLASS}",
        description=ENROLLMENT_NOTE,
    )
    embed.add_field("CRN", class_.course_reference_number, True)
    embed.add_field("Credit Hours", class_.credit_hours, True)
    embed.add_field("Term", format_term(class_.term), True)
    embed.add_field(
        "Enrollment",
        f"{class_.seats_available}/{class_.enrollment}/{class_.maximum_enrollment}",
        True,
    )
    embed.add_field(
        "Waitlist",
        f"{class_.wait_available}/{class_.wait_capacity - class_.wait_available}/{class_.wait_capacity}",
        True,
    )

    if professors is not None:
        lines = "\n".join(f"- {p.full_name}" for p in professors)
        embed.add_field("Professor(s)", lines or NO_PROFESSORS, False)

    if meetings is not None:
        lines = "\n".join(_meeting_line(m) for m in meetings)
        embed.add_field("Meeting(s)", lines or NO_MEETINGS, False)

    if stats is not None and "class" in stats:
        embed.footer = "Last updated at"
        embed.timestamp = stats["class"].astimezone(timezone.utc)

    return embed


def matches_embed(classes: list[PartialClass]) -> Embed:
    """List of up to ten matching classes with their CRNs."""
    if not classes:
        raise ValueError("no classes to list")
    lines = "\n".join(
        f"`{c.course_reference_number}` - {c.course_number}: {c.course_title or UNKNOWN_CLASS}"
        for c in classes[:MAX_LISTED]
    )
    embed = Embed(title="Class Search", description=MATCHES_NOTE)
    embed.add_field(f"Classes Matched (totalling {len(classes)})", lines, False)
    return embed


def _optional(what: str, fetch: Callable[..., Any], *args: Any) -> Any:
    try:
        return fetch(*args)
    except Exception:
        log.exception("Failed to get %s", what)
        return None


def _class_card(db: Any, class_: Class) -> Embed:
    professors = _optional("professors", db.get_professors_for_class, class_.id)
    meetings = _optional("meetings", db.get_meetings_for_class, class_.id)
    stats = _optional("update statistics", db.get_stats)
    return course_embed(class_, professors, meetings, stats)


def _show_matches(db: Any, classes: list[PartialClass]) -> Embed | None:
    if not classes:
        return None
    if len(classes) == 1:
        crn = classes[0].course_reference_number
        class_ = db.get_class(crn)
        if class_ is None:
            raise LookupError(f"class {crn} disappeared")
        return _class_card(db, class_)
    return matches_embed(classes)


def lookup_courses(db: Any, args: Iterable[str], today: date | None = None) -> Embed | str:
    """Answer a class search with a card, a list of matches or a plain message."""
    words = list(args)
    if not words:
        return EMPTY_QUERY
    query = parse_course_args(words, today or date.today())

    if query.crn is not None:
        try:
            class_ = db.get_class(query.crn)
        except Exception:
            log.exception("Failed to get class")
            return DATABASE_FAILED
        if class_ is None:
            return f"Could not find a class with the CRN `{query.crn}`."
        return _class_card(db, class_)

    for search in (db.search_class_by_number, db.search_class_by_name):
        try:
            result = _show_matches(db, search(query.search_query, query.term))
        except Exception:
            log.exception("Failed to search for classes")
            return SEARCH_FAILED
        if result is not None:
            return result
    return NOTHING_FOUND