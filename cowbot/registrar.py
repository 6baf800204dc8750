"""Course listings from the registrar's course search service."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import requests

from .embed import Embed

REQUEST_TIMEOUT = 30
_BASE = "https://reg-prod.ec.ucmerced.edu/StudentRegistrationSsb/ssb"
SEARCH_URL = f"{_BASE}/courseSearch/courseSearch"

_SEMESTER_CODES = {"fall": "10", "spring": "20", "summer": "30"}


@dataclass
class Course:
    id: int
    term_effective: str | None = None
    course_number: str | None = None
    subject: str | None = None
    subject_code: str | None = None
    college: str | None = None
    college_code: str | None = None
    department: str | None = None
    department_code: str | None = None
    course_title: str | None = None
    credit_hour_indicator: str | None = None
    subject_description: str | None = None
    course_description: str | None = None
    division: str | None = None
    term_start: str | None = None
    term_end: str | None = None


@dataclass
class CourseSearchConfig:
    required: bool
    config: str | None = None
    display: str | None = None
    title: str | None = None
    width: str | None = None


@dataclass
class DisplaySettings:
    enrollment_display: str | None = None
    waitlist_display: str | None = None
    cross_list_display: str | None = None


@dataclass
class CourseList:
    success: bool
    total_count: int
    page_offset: int
    page_max_size: int
    display_settings: DisplaySettings
    is_plan_by_crn_set_for_term: bool
    data: list[Course] = field(default_factory=list)
    course_search_results_configs: list[CourseSearchConfig] = field(default_factory=list)
    path_mode: str | None = None


_COURSE_TEXT_FIELDS = {
    "term_effective": "termEffective",
    "course_number": "courseNumber",
    "subject": "subject",
    "subject_code": "subjectCode",
    "college": "college",
    "college_code": "collegeCode",
    "department": "department",
    "department_code": "departmentCode",
    "course_title": "courseTitle",
    "credit_hour_indicator": "creditHourIndicator",
    "subject_description": "subjectDescription",
    "course_description": "courseDescription",
    "division": "division",
    "term_start": "termStart",
    "term_end": "termEnd",
}


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


def _unsigned(obj: Any, key: str) -> int:
    value = _get(obj, key, int)
    if not 0 <= value < 2**64:
        raise ValueError(f"field {key!r} is out of range")
    return value


def _course(obj: Any) -> Course:
    texts = {name: _get(obj, key, str, optional=True) for name, key in _COURSE_TEXT_FIELDS.items()}
    return Course(id=_unsigned(obj, "id"), **texts)


def _search_config(obj: Any) -> CourseSearchConfig:
    return CourseSearchConfig(
        required=_get(obj, "required", bool),
        config=_get(obj, "config", str, optional=True),
        display=_get(obj, "display", str, optional=True),
        title=_get(obj, "title", str, optional=True),
        width=_get(obj, "width", str, optional=True),
    )


def _display_settings(obj: Any) -> DisplaySettings:
    return DisplaySettings(
        enrollment_display=_get(obj, "enrollmentDisplay", str, optional=True),
        waitlist_display=_get(obj, "waitlistDisplay", str, optional=True),
        cross_list_display=_get(obj, "crossListDisplay", str, optional=True),
    )


def parse_course_list(data: Any) -> CourseList:
    """Parse a search result (JSON text or decoded object); raises ``ValueError``."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    return CourseList(
        success=_get(data, "success", bool),
        total_count=_unsigned(data, "totalCount"),
        page_offset=_unsigned(data, "pageOffset"),
        page_max_size=_unsigned(data, "pageMaxSize"),
        display_settings=_display_settings(_get(data, "displaySettings", dict)),
        is_plan_by_crn_set_for_term=_get(data, "isPlanByCrnSetForTerm", bool),
        data=[_course(c) for c in _get(data, "data", list)],
        course_search_results_configs=[_search_config(c) for c in _get(data, "courseSearchResultsConfigs", list)],
        path_mode=_get(data, "pathMode", str, optional=True),
    )


def term_code(semester: str, year: int) -> str:
    """Registrar term code; unknown semester names give the code ``00``."""
    return f"{year}{_SEMESTER_CODES.get(semester.lower(), '00')}"


def course_list_embed(major: str, course_list: CourseList) -> Embed:
    major = major.upper()
    embed = Embed(title="Course List", description=f"For major: {major}")
    for course in course_list.data:
        title = course.course_title or "No Title"
        number = course.course_number or "000"
        description = (course.course_description or "No description") + "..."
        embed.add_field(f"{major} {number}-{title}", description, False)
    return embed


def fetch_course_list(semester: str, major: str = "", year: int | None = None) -> CourseList:
    """Open a search session for the term and list the first page of a major's courses."""
    if year is None:
        year = datetime.now(timezone.utc).year
    term = term_code(semester, year)
    major = major.upper()

    term_url = (
        f"{_BASE}/term/search?mode=courseSearch&term={term}"
        "&studyPath=&studyPathText=&startDatepicker=&endDatepicker="
    )
    results_url = (
        f"{_BASE}/courseSearchResults/courseSearchResults?txt_subject={major}&txt_term={term}"
        "&startDatepicker=&endDatepicker=&pageOffset=0&pageMaxSize=10"
        "&sortColumn=subjectDescription&sortDirection=asc"
    )

    with requests.Session() as session:
        session.get(term_url, timeout=REQUEST_TIMEOUT)
        session.get(SEARCH_URL, timeout=REQUEST_TIMEOUT)
        response = session.get(results_url, timeout=REQUEST_TIMEOUT)
        return parse_course_list(response.text)