"""Professor search and the professor information card."""

from __future__ import annotations

import logging
import struct
from datetime import date, datetime, timezone
from typing import Any, Mapping

from .course_models import PartialClass, Professor, format_term
from .embed import Embed

log = logging.getLogger(__name__)

NO_MATCHES = (
    "No matches were found. Check your query for typos, or generalize it. "
    "Or, we may not have the person logged."
)
SEARCH_FAILED = "Failed to search for professors... try again later?"
NOT_TEACHING = "This person is not teaching any classes for this term."
UNKNOWN_CLASS = "<unknown class name>"
UNKNOWN_DEPARTMENT = "<unknown department>"
MAX_LISTED = 10
CLASS_LIST_LIMIT = 1000


def current_term(today: date) -> int:
    """Term code for a date: fall from March to October, spring otherwise."""
    semester = 30 if 3 <= today.month <= 10 else 10
    return today.year * 100 + semester


def _format_rating(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    single = struct.unpack("f", struct.pack("f", number))[0]
    for digits in range(1, 10):
        text = f"{number:.{digits}g}"
        if "e" not in text and struct.unpack("f", struct.pack("f", float(text)))[0] == single:
            return text
    return repr(number)


def _class_lines(classes: list[PartialClass]) -> str:
    text: str | None = None
    for item in classes:
        line = f"- {item.course_number} (`{item.course_reference_number}`): {item.course_title or UNKNOWN_CLASS}"
        if text is None:
            text = line
        elif len(text) < CLASS_LIST_LIMIT:
            text = f"{text}\n{line}"
    return NOT_TEACHING if text is None else text


def professor_embed(
    professor: Professor,
    classes: list[PartialClass] | None,
    stats: Mapping[str, datetime] | None,
    term: int,
) -> Embed:
    """Card for one professor; ``classes`` or ``stats`` is ``None`` when unavailable."""
    if professor.email is None:
        raise ValueError(f"professor {professor.full_name!r} has no email")

    embed = Embed(
        title=professor.full_name,
        description="Note: this uses Rate My Professor, which may be off at times~",
    )
    embed.add_field("Rating Score", _format_rating(professor.rating), True)
    embed.add_field("Number of Ratings", professor.num_ratings, True)
    embed.add_field("Email", professor.email, True)

    if classes is not None:
        embed.add_field(
            f"Classes for {format_term(term)} (totalling {len(classes)})",
            _class_lines(classes),
            False,
        )

    if stats is not None and "professor" in stats:
        embed.footer = "Last updated at"
        embed.timestamp = stats["professor"].astimezone(timezone.utc)

    return embed


def professor_matches_embed(professors: list[Professor]) -> Embed:
    """List of up to ten matching professors."""
    if not professors:
        raise ValueError("no professors to list")
    lines = "\n".join(
        f"`{p.full_name}` - {p.department or UNKNOWN_DEPARTMENT}" for p in professors[:MAX_LISTED]
    )
    embed = Embed(
        title="Professor Search",
        description="Multiple results were found for your query. Try refining your input.",
    )
    embed.add_field(f"Professors Matched (totalling {len(professors)})", lines, False)
    return embed


def search_professors(db: Any, search_query: str, today: date | None = None) -> Embed | str:
    """Answer a professor search with a card, a list of matches or a plain message."""
    try:
        professors = db.search_professor(search_query)
    except Exception:
        log.exception("Failed to search by name")
        return SEARCH_FAILED

    if not professors:
        return NO_MATCHES
    if len(professors) > 1:
        return professor_matches_embed(professors)

    professor = professors[0]
    term = current_term(today or date.today())
    try:
        classes = db.get_classes_for_professor(professor.id, term)
    except Exception:
        log.exception("Failed to get classes for professor")
        classes = None
    try:
        stats = db.get_stats()
    except Exception:
        log.exception("Failed to get update statistics")
        stats = None
    return professor_embed(professor, classes, stats, term)