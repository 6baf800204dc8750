from datetime import date

import pytest
import responses

from cowbot.calendar_page import (
    AcademicCalendar,
    Semester,
    academic_year,
    calendar_embed,
    calendar_url,
    fetch_calendar,
    process_calendar,
)

PAGE = """
<html><body>
<h1>Academic Calendar 2023-2024</h1>
<h2>Fall Semester 2023</h2>
<table>
  <tr><td>Aug 23</td><td>Instruction begins</td><td>ignored</td></tr>
  <tr><td>Dec 15</td><td>Semester ends</td></tr>
</table>
<h2>Important links</h2>
<h2>Spring Semester 2024</h2>
<table>
  <tr><td>Jan 16</td></tr>
</table>
</body></html>
"""


def test_process_calendar_reads_semesters():
    calendar = process_calendar(PAGE)
    assert calendar.name == "Academic Calendar 2023-2024"
    assert [s.name for s in calendar.semesters] == ["Fall Semester 2023", "Spring Semester 2024"]
    assert calendar.semesters[0].dates == [
        ("Aug 23", "Instruction begins"),
        ("Dec 15", "Semester ends"),
    ]


def test_missing_cells_are_unknown():
    calendar = process_calendar(PAGE)
    assert calendar.semesters[1].dates == [("Jan 16", "<unknown>")]


def test_page_without_calendar_heading_is_rejected():
    assert process_calendar("<h1>Welcome</h1><h2>Fall Semester</h2><table></table>") is None


def test_page_without_heading_is_rejected():
    assert process_calendar("<p>Academic calendar</p>") is None


def test_summer_session_titles_are_kept():
    page = "<h1>Calendar</h1><h2>Summer Session</h2><table><tr><td>a</td><td>b</td></tr></table>"
    calendar = process_calendar(page)
    assert calendar.semesters == [Semester("Summer Session", [("a", "b")])]


def test_calendar_embed_fields():
    calendar = AcademicCalendar(
        "Calendar",
        [Semester("Fall", [("Aug 23", "Start")]), Semester("Spring", [])],
    )
    embed = calendar_embed(calendar)
    assert embed.title == "Calendar"
    assert embed.fields == [
        ("Fall", "Aug 23 - Start", False),
        ("Spring", "Nothing was written...", False),
    ]


def test_calendar_embed_lines_match_dates():
    calendar = process_calendar(PAGE)
    embed = calendar_embed(calendar)
    assert len(embed.fields[0][1].split("\n")) == len(calendar.semesters[0].dates)


def test_academic_year_in_autumn_is_current_year():
    assert academic_year(date(2023, 9, 1), []) == 2023


def test_academic_year_in_spring_is_previous_year():
    assert academic_year(date(2023, 3, 1), []) == 2022


def test_academic_year_argument_overrides():
    assert academic_year(date(2023, 9, 1), ["2010"]) == 2010


@pytest.mark.parametrize("args", [["1999"], ["abc"], ["20x5"]])
def test_academic_year_ignores_bad_arguments(args):
    assert academic_year(date(2023, 9, 1), args) == academic_year(date(2023, 9, 1), [])


def test_academic_year_skips_words_before_year():
    assert academic_year(date(2023, 9, 1), ["abc", "2015"]) == 2015


def test_calendar_url_names_both_years():
    url = calendar_url(2023)
    assert url.startswith("https://registrar.ucmerced.edu/schedules/academic-calendar/")
    assert url.endswith("academic-calendar-2023-2024")


def test_fetch_calendar_parses_download():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, calendar_url(2023), body=PAGE, status=200)
        calendar = fetch_calendar(2023)
    assert calendar == process_calendar(PAGE)


def test_fetch_calendar_bad_page_gives_none():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, calendar_url(2030), body="<h1>Not found</h1>", status=404)
        assert fetch_calendar(2030) is None