from datetime import date, datetime, timezone

import pytest

from cowbot.course_models import PartialClass, Professor
from cowbot.professors import (
    NO_MATCHES,
    NOT_TEACHING,
    SEARCH_FAILED,
    current_term,
    professor_embed,
    professor_matches_embed,
    search_professors,
)


def make_professor(full_name="Jane Doe", email="jane@example.com", department="CSE", rating=4.5):
    return Professor(
        id=3, rmp_id=None, last_name="Doe", first_name="Jane", middle_name=None,
        full_name=full_name, email=email, department=department, num_ratings=12, rating=rating,
    )


class StubDb:
    def __init__(self, professors=(), classes=(), stats=None, fail_search=False, fail_classes=False):
        self.professors = list(professors)
        self.classes = list(classes)
        self.stats = stats or {}
        self.fail_search = fail_search
        self.fail_classes = fail_classes
        self.class_requests = []

    def search_professor(self, query):
        if self.fail_search:
            raise RuntimeError("database down")
        return self.professors

    def get_classes_for_professor(self, professor_id, term):
        self.class_requests.append((professor_id, term))
        if self.fail_classes:
            raise RuntimeError("database down")
        return self.classes

    def get_stats(self):
        return self.stats


@pytest.mark.parametrize("month", [3, 6, 10])
def test_current_term_fall_months(month):
    term = current_term(date(2023, month, 15))
    assert divmod(term, 100) == (2023, 30)


@pytest.mark.parametrize("month", [1, 2, 11, 12])
def test_current_term_spring_months(month):
    term = current_term(date(2023, month, 15))
    assert divmod(term, 100) == (2023, 10)


def test_embed_basic_fields():
    embed = professor_embed(make_professor(), [], None, 202330)
    names = [name for name, _, _ in embed.fields]
    assert embed.title == "Jane Doe"
    assert names[:3] == ["Rating Score", "Number of Ratings", "Email"]
    assert embed.fields[0][1] == "4.5"
    assert embed.fields[2][1] == "jane@example.com"
    assert embed.fields[3] == ("Classes for Fall 2023 (totalling 0)", NOT_TEACHING, False)


def test_embed_without_classes_omits_field():
    embed = professor_embed(make_professor(), None, None, 202330)
    assert len(embed.fields) == 3


def test_embed_requires_email():
    with pytest.raises(ValueError):
        professor_embed(make_professor(email=None), [], None, 202330)


def test_embed_class_list_is_truncated():
    classes = [PartialClass(i, 30000 + i, "CSE-031", "A" * 60) for i in range(50)]
    embed = professor_embed(make_professor(), classes, None, 202330)
    value = embed.fields[3][1]
    lines = value.split("\n")
    assert all(line.startswith("- CSE-031 (`") for line in lines)
    assert len(lines) < 50
    assert len(value) - len(lines[-1]) - 1 < 1000


def test_embed_stats_timestamp_in_utc():
    stats = {"professor": datetime(2023, 9, 1, 12, 0)}
    embed = professor_embed(make_professor(), [], stats, 202330)
    assert embed.footer == "Last updated at"
    assert embed.timestamp.tzinfo == timezone.utc
    assert embed.timestamp == stats["professor"].astimezone(timezone.utc)


def test_embed_ignores_other_stats():
    embed = professor_embed(make_professor(), [], {"class": datetime(2023, 9, 1)}, 202330)
    assert embed.timestamp is None and embed.footer is None


def test_matches_embed_lists_at_most_ten():
    professors = [make_professor(full_name=f"P{i}", department=None) for i in range(12)]
    embed = professor_matches_embed(professors)
    name, value, inline = embed.fields[0]
    assert name == "Professors Matched (totalling 12)"
    assert value.split("\n")[0] == "`P0` - <unknown department>"
    assert len(value.split("\n")) == 10


def test_matches_embed_rejects_empty():
    with pytest.raises(ValueError):
        professor_matches_embed([])


def test_search_no_matches():
    assert search_professors(StubDb(), "nobody", date(2023, 9, 1)) == NO_MATCHES


def test_search_failure_message():
    assert search_professors(StubDb(fail_search=True), "x", date(2023, 9, 1)) == SEARCH_FAILED


def test_search_single_match_uses_current_term():
    db = StubDb(professors=[make_professor()])
    embed = search_professors(db, "Jane", date(2023, 9, 1))
    assert db.class_requests == [(3, current_term(date(2023, 9, 1)))]
    assert embed.title == "Jane Doe"


def test_search_single_match_survives_class_failure():
    db = StubDb(professors=[make_professor()], fail_classes=True)
    embed = search_professors(db, "Jane", date(2023, 9, 1))
    assert len(embed.fields) == 3


def test_search_many_matches():
    db = StubDb(professors=[make_professor(full_name="A"), make_professor(full_name="B")])
    embed = search_professors(db, "x", date(2023, 9, 1))
    assert embed.title == "Professor Search"
    assert db.class_requests == []