"""The university's academic calendar, read from the registrar's web page."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

import requests
from bs4 import BeautifulSoup

from .embed import Embed

UNKNOWN = "<unknown>"
EMPTY_SEMESTER = "Nothing was written..."
FIRST_CALENDAR_YEAR = 2005
REQUEST_TIMEOUT = 30

_INTEGER = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1


@dataclass
class Semester:
    name: str
    dates: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class AcademicCalendar:
    name: str
    semesters: list[Semester] = field(default_factory=list)


def _first_text(element) -> str | None:
    return next(iter(element.strings), None)


def _row_dates(row) -> tuple[str, str]:
    cells = [_first_text(cell) for cell in row.select("td")[:2]]
    cells = [UNKNOWN if text is None else str(text) for text in cells]
    cells += [UNKNOWN] * (2 - len(cells))
    return cells[0], cells[1]


def process_calendar(data: str) -> AcademicCalendar | None:
    """Parse a calendar page; ``None`` when it is not a calendar page."""
    page = BeautifulSoup(data, "html.parser")

    heading = page.find("h1")
    if heading is None:
        return None
    name = _first_text(heading)
    if name is None or "calendar" not in name.lower():
        return None

    titles = [
        str(text)
        for h2 in page.find_all("h2")
        for text in h2.strings
        if "semester" in text.lower() or "session" in text.lower()
    ]
    tables = [[_row_dates(row) for row in table.select("tr")] for table in page.find_all("table")]

    semesters = [Semester(title, dates) for title, dates in zip(titles, tables)]
    return AcademicCalendar(str(name), semesters)


def calendar_embed(calendar: AcademicCalendar) -> Embed:
    """One field per semester, one line per date."""
    embed = Embed(title=calendar.name)
    for semester in calendar.semesters:
        lines = "\n".join(f"{left} - {right}" for left, right in semester.dates)
        embed.add_field(semester.name, lines or EMPTY_SEMESTER, False)
    return embed


def academic_year(today: date, args: list[str]) -> int:
    """Starting year of the academic year to show.

    Spring and summer belong to the year that started the previous autumn.
    Any integer argument of at least 2005 overrides the year; the last wins.
    """
    year = today.year
    if today.month <= 7:
        year -= 1

    for arg in args:
        if not _INTEGER.fullmatch(arg):
            continue
        value = int(arg)
        if _I32_MIN <= value <= _I32_MAX and value >= FIRST_CALENDAR_YEAR:
            year = value
    return year


def calendar_url(year: int) -> str:
    return (
        "https://registrar.ucmerced.edu/schedules/academic-calendar/"
        f"academic-calendar-{year}-{year + 1}"
    )


def fetch_calendar(year: int) -> AcademicCalendar | None:
    """Download and parse the calendar; network failures raise ``requests`` errors."""
    response = requests.get(calendar_url(year), timeout=REQUEST_TIMEOUT)
    return process_calendar(response.text)