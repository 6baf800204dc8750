"""Weekly opening hours of the library, from the hours calendar service."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date as Date, datetime
from typing import Any

import requests

from .embed import Embed

TITLE = "Kolligian Library Hours"
REQUEST_TIMEOUT = 30

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass
class Hours:
    from_: str
    to: str


@dataclass
class Times:
    status: str
    note: str | None = None
    hours: list[Hours] | None = None
    currently_open: bool | None = None


@dataclass
class LibraryDay:
    date: str
    times: Times
    rendered: str


@dataclass
class Week:
    sunday: LibraryDay
    monday: LibraryDay
    tuesday: LibraryDay
    wednesday: LibraryDay
    thursday: LibraryDay
    friday: LibraryDay
    saturday: LibraryDay

    def days(self) -> list[tuple[str, LibraryDay]]:
        """The week's days with their names, Sunday first."""
        return [(name, getattr(self, name.lower())) for name in _WEEKDAYS]


@dataclass
class LibraryLocation:
    lid: int
    name: str
    category: str
    url: str
    contact: str
    lat: str
    long: str
    color: str
    f: str | None = None
    parent_lid: int | None = None
    weeks: list[Week] = field(default_factory=list)


@dataclass
class LibraryCalendar:
    locations: list[LibraryLocation] = field(default_factory=list)


def _get(obj: Any, key: str, kind: type, optional: bool = False) -> Any:
    if not isinstance(obj, dict):
        raise ValueError(f"expected an object holding {key!r}")
    value = obj.get(key)
    if value is None:
        if optional:
            return None
        raise ValueError(f"missing field {key!r}")
    if (isinstance(value, bool) and kind is not bool) or not isinstance(value, kind):
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def _u16(obj: Any, key: str, optional: bool = False) -> int | None:
    value = _get(obj, key, int, optional)
    if value is not None and not 0 <= value <= 0xFFFF:
        raise ValueError(f"field {key!r} is out of range")
    return value


def _times(obj: Any) -> Times:
    hours = _get(obj, "hours", list, optional=True)
    return Times(
        status=_get(obj, "status", str),
        note=_get(obj, "note", str, optional=True),
        hours=None if hours is None else [Hours(_get(h, "from", str), _get(h, "to", str)) for h in hours],
        currently_open=_get(obj, "currently_open", bool, optional=True),
    )


def _day(obj: Any) -> LibraryDay:
    return LibraryDay(
        date=_get(obj, "date", str),
        times=_times(_get(obj, "times", dict)),
        rendered=_get(obj, "rendered", str),
    )


def _week(obj: Any) -> Week:
    return Week(**{name.lower(): _day(_get(obj, name, dict)) for name in _WEEKDAYS})


def _location(obj: Any) -> LibraryLocation:
    return LibraryLocation(
        lid=_u16(obj, "lid"),
        name=_get(obj, "name", str),
        category=_get(obj, "category", str),
        url=_get(obj, "url", str),
        contact=_get(obj, "contact", str),
        lat=_get(obj, "lat", str),
        long=_get(obj, "long", str),
        color=_get(obj, "color", str),
        f=_get(obj, "fn", str, optional=True),
        parent_lid=_u16(obj, "parent_lid", optional=True),
        weeks=[_week(w) for w in _get(obj, "weeks", list)],
    )


def parse_calendar(data: Any) -> LibraryCalendar:
    """Parse the hours grid (JSON text or decoded object); raises ``ValueError``."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    return LibraryCalendar([_location(loc) for loc in _get(data, "locations", list)])


def library_url(date: Date) -> str:
    return (
        "https://api3.libcal.com/api_hours_grid.php?iid=4052&lid=0&format=json"
        f"&date={date.year}-{date.month:02}-{date.day:02}"
    )


def library_embed(calendar: LibraryCalendar) -> Embed:
    """Hours of the first location's first week, one field per day."""
    if not calendar.locations or not calendar.locations[0].weeks:
        raise ValueError("the calendar holds no week of hours")
    week = calendar.locations[0].weeks[0]
    start = datetime.strptime(week.sunday.date, "%Y-%m-%d").date()

    embed = Embed(
        title=TITLE,
        description=f"For the week of {_MONTHS[start.month - 1]} {start.day:02}, {start.year}",
    )
    for name, day in week.days():
        embed.add_field(name, day.rendered, False)
    return embed


def fetch_library_hours(date: Date | None = None) -> LibraryCalendar:
    """Download the hours for the week holding ``date`` (today by default)."""
    response = requests.get(library_url(date or Date.today()), timeout=REQUEST_TIMEOUT)
    return parse_calendar(response.text)