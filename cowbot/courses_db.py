"""Class, meeting, professor and seat-reminder queries on the course database."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from .course_models import (
    Class,
    Days,
    Meeting,
    MeetingType,
    PartialClass,
    Professor,
    Reminder,
    Trigger,
)
from .ranking_db import RankingDatabase, _bind, _u64

_STRIPPED_CHARS = str.maketrans("", "", "()\"'")
_ALL_DAYS = 127

_PROFESSOR_COLUMNS = (
    "id, rmp_id, last_name, first_name, middle_name, email, department, num_ratings, rating, full_name"
)


def create_full_text_query(search_query: str) -> str:
    """Build a full-text search condition matching every word of the query.

    Parentheses and quotes are removed from each word, each word becomes a
    wildcard term and the terms are joined with ``AND``.
    """
    words = search_query.strip().split(" ")
    return " AND ".join(f'"*{word.translate(_STRIPPED_CHARS)}*"' for word in words)


def _professor(row: tuple) -> Professor:
    (prof_id, rmp_id, last_name, first_name, middle_name, email,
     department, num_ratings, rating, full_name) = row[:10]
    return Professor(
        id=prof_id,
        rmp_id=rmp_id,
        last_name=str(last_name),
        first_name=str(first_name),
        middle_name=middle_name,
        full_name=str(full_name),
        email=email,
        department=department,
        num_ratings=num_ratings,
        rating=rating,
    )


def _partial_class(row: tuple) -> PartialClass:
    class_id, crn, course_number, course_title = row[:4]
    return PartialClass(
        id=class_id,
        course_reference_number=crn,
        course_number=str(course_number),
        course_title=course_title,
    )


def _days(bits: int) -> Days:
    if not 0 <= bits <= _ALL_DAYS:
        raise ValueError(f"invalid day flags {bits}")
    return Days(bits)


class CoursesDatabase(RankingDatabase):
    """The bot database with the course catalogue and reminder queries."""

    def _execute(self, sql: str, *params: Any) -> int:
        statement, bound = _bind(sql, params)
        cursor = self._connection.cursor()
        try:
            cursor.execute(statement, bound)
            count = cursor.rowcount
        finally:
            cursor.close()
        commit = getattr(self._connection, "commit", None)
        if commit is not None:
            commit()
        return count

    def get_user_reminders(self, user_id: int) -> list[Reminder]:
        rows = self._rows(
            "SELECT course_reference_number, min_trigger, for_waitlist, triggered "
            "FROM [UniScraper].[UCM].[reminder] WHERE user_id = @P1",
            Decimal(user_id),
        )
        return [
            Reminder(
                user_id=user_id,
                course_reference_number=crn,
                min_trigger=min_trigger,
                for_waitlist=bool(for_waitlist),
                triggered=bool(triggered),
            )
            for crn, min_trigger, for_waitlist, triggered, *_ in rows
        ]

    def add_reminder(self, reminder: Reminder) -> None:
        """Store a reminder; the database rejects duplicates with an error."""
        self._execute(
            "INSERT INTO [UniScraper].[UCM].[reminder] "
            "(user_id, course_reference_number, min_trigger, for_waitlist, triggered) "
            "VALUES (@P1, @P2, @P3, @P4, @P5)",
            Decimal(reminder.user_id),
            reminder.course_reference_number,
            reminder.min_trigger,
            reminder.for_waitlist,
            reminder.triggered,
        )

    def remove_reminder(self, user_id: int, course_reference_number: int) -> bool:
        """Delete a reminder; ``True`` when one existed."""
        count = self._execute(
            "DELETE FROM [UniScraper].[UCM].[reminder] WHERE user_id = @P1 AND course_reference_number = @P2",
            Decimal(user_id),
            course_reference_number,
        )
        return count > 0

    def trigger_reminders(self) -> list[Trigger]:
        """Reminders whose seat threshold has just been reached."""
        rows = self._rows("EXEC [UniScraper].[UCM].[TriggerReminders]")
        triggers = []
        for user_id, crn, min_trigger, *_ in rows:
            user = _u64(user_id)
            if user is None:
                raise ValueError(f"invalid user id {user_id!r}")
            triggers.append(Trigger(user_id=user, course_reference_number=crn, min_trigger=min_trigger))
        return triggers

    def get_class(self, course_reference_number: int) -> Class | None:
        row = self._row(
            "SELECT id, term, course_number, campus_description, course_title, credit_hours, "
            "maximum_enrollment, enrollment, seats_available, wait_capacity, wait_available "
            "FROM [UniScraper].[UCM].[class] WHERE course_reference_number = @P1",
            course_reference_number,
        )
        if row is None:
            return None
        (class_id, term, course_number, campus_description, course_title, credit_hours,
         maximum_enrollment, enrollment, seats_available, wait_capacity, wait_available) = row[:11]
        return Class(
            id=class_id,
            term=term,
            course_reference_number=course_reference_number,
            course_number=str(course_number),
            campus_description=campus_description,
            course_title=course_title,
            credit_hours=credit_hours,
            maximum_enrollment=maximum_enrollment,
            enrollment=enrollment,
            seats_available=seats_available,
            wait_capacity=wait_capacity,
            wait_available=wait_available,
        )

    def get_professors_for_class(self, class_id: int) -> list[Professor]:
        """Professors teaching a class, by its database id (not its CRN)."""
        rows = self._rows(
            "SELECT professor.id, rmp_id, last_name, first_name, middle_name, email, department, "
            "num_ratings, rating, full_name FROM [UniScraper].[UCM].[professor] "
            "INNER JOIN [UniScraper].[UCM].[faculty] ON professor.id = faculty.professor_id "
            "WHERE class_id = @P1;",
            class_id,
        )
        return [_professor(row) for row in rows]

    def get_meetings_for_class(self, class_id: int) -> list[Meeting]:
        """Meetings of a class, by its database id (not its CRN)."""
        rows = self._rows(
            "SELECT begin_time, end_time, begin_date, end_date, building, building_description, "
            "campus, campus_description, room, credit_hour_session, hours_per_week, in_session, "
            "meeting_type FROM [UniScraper].[UCM].[meeting] WHERE class_id = @P1;",
            class_id,
        )
        meetings = []
        for row in rows:
            (begin_time, end_time, begin_date, end_date, building, building_description,
             campus, campus_description, room, credit_hour_session, hours_per_week,
             in_session, meeting_type) = row[:13]
            meetings.append(
                Meeting(
                    class_id=class_id,
                    begin_time=begin_time,
                    end_time=end_time,
                    begin_date=str(begin_date),
                    end_date=str(end_date),
                    building=building,
                    building_description=building_description,
                    campus=campus,
                    campus_description=campus_description,
                    room=room,
                    credit_hour_session=credit_hour_session,
                    hours_per_week=hours_per_week,
                    in_session=_days(int(in_session)),
                    meeting_type=MeetingType(int(meeting_type)),
                )
            )
        return meetings

    def search_class_by_number(self, course_number: str, term: int) -> list[PartialClass]:
        """Classes of a term whose course number (like ``CSE-031``) matches."""
        return self._class_search(
            course_number,
            term,
            "SELECT id, course_reference_number, course_number, course_title "
            "FROM UniScraper.UCM.class "
            "WHERE term = @P1 AND CONTAINS(course_number, @P2);",
        )

    def search_class_by_name(self, course_name: str, term: int) -> list[PartialClass]:
        """Classes of a term whose title matches, one per distinct title."""
        return self._class_search(
            course_name,
            term,
            "SELECT id, course_reference_number, course_number, course_title FROM "
            "(SELECT id, course_reference_number, course_number, course_title, term, ROW_NUMBER() "
            "OVER (PARTITION BY course_title ORDER BY course_reference_number) AS RowNumber "
            "FROM UniScraper.UCM.class WHERE term = @P1 AND CONTAINS(course_title, @P2)) AS mukyu "
            "WHERE mukyu.RowNumber = 1;",
        )

    def _class_search(self, search_query: str, term: int, sql: str) -> list[PartialClass]:
        rows = self._rows(sql, term, create_full_text_query(search_query))
        found = []
        for row in rows:
            item = _partial_class(row)
            if search_query == item.course_number or item.course_title == search_query:
                return [item]
            found.append(item)
        return found

    def search_professor(self, search_query: str) -> list[Professor]:
        rows = self._rows(
            f"SELECT {_PROFESSOR_COLUMNS} FROM [UniScraper].[UCM].[professor] WHERE CONTAINS(full_name, @P1);",
            create_full_text_query(search_query),
        )
        return [_professor(row) for row in rows]

    def get_classes_for_professor(self, professor_id: int, term: int) -> list[PartialClass]:
        rows = self._rows(
            "SELECT class.id, class.course_reference_number, class.course_number, class.course_title "
            "FROM [UniScraper].[UCM].[professor] "
            "INNER JOIN [UniScraper].[UCM].[faculty] ON professor.id = faculty.professor_id "
            "INNER JOIN [UniScraper].[UCM].[class] ON class.id = faculty.class_id "
            "WHERE class.term = @P1 AND professor.id = @P2",
            term,
            professor_id,
        )
        return [_partial_class(row) for row in rows]

    def get_stats(self) -> dict[str, datetime]:
        """Last update time of each scraped table, in local time without a zone."""
        rows = self._rows("SELECT table_name, last_update FROM [UniScraper].[UCM].[stats];")
        return {str(name): last_update for name, last_update, *_ in rows}