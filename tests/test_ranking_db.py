from decimal import Decimal

import pytest

from cowbot.ranking_db import DEFAULT_TIMEOUT, ROWS_PER_PAGE, RankingDatabase
from cowbot.ranking_models import Experience, FullMember, LevelUp, Member, Rank


class FakeCursor:
    def __init__(self, connection):
        self._connection = connection
        self._sets = []
        self.description = None

    def execute(self, sql, params):
        self._connection.calls.append((sql, tuple(params)))
        response = self._connection.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        self._sets = list(response)
        self._advance()

    def _advance(self):
        if self._sets:
            self._current = self._sets.pop(0)
            self.description = (("column",),)
            return True
        self._current = []
        self.description = None
        return None

    def fetchall(self):
        return list(self._current)

    def nextset(self):
        return self._advance()

    def close(self):
        self._connection.closed += 1


class FakeConnection:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.commits = 0
        self.closed = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1


def make(*responses):
    connection = FakeConnection(*responses)
    return RankingDatabase(connection), connection


def test_provide_exp_reads_level_and_ranks():
    db, conn = make([[(3, Decimal(10), Decimal(20))]])
    assert db.provide_exp(5, 6) == LevelUp(level=3, old_rank=10, new_rank=20)
    sql, params = conn.calls[0]
    assert "@P" not in sql
    assert sql.count("?") == 2
    assert params == (5, 6)
    assert conn.commits == 1
    assert conn.closed == 1


def test_provide_exp_null_and_negative_ranks():
    db, _ = make([[(2, None, Decimal(-4))]])
    assert db.provide_exp(1, 1) == LevelUp(level=2, old_rank=None, new_rank=None)


def test_provide_exp_without_row_gives_default():
    db, _ = make([[]])
    assert db.provide_exp(1, 1) == LevelUp()


def test_get_xp_maps_columns():
    db, conn = make([[(150, 4)]], [[]])
    assert db.get_xp(1, 2) == Experience(level=4, xp=150)
    assert db.get_xp(1, 2) == Experience()
    assert conn.calls[0][1] == (1, 2)


def test_get_highest_role():
    db, conn = make([[(Decimal(77),)]], [[]])
    assert db.get_highest_role(9, 12) == 77
    assert conn.calls[0][1] == (9, 12)
    assert db.get_highest_role(9, 0) is None


def test_calculate_level_defaults_to_zero():
    db, _ = make([[(8,)]], [[]])
    assert db.calculate_level(3) == 8
    assert db.calculate_level(3) == 0


def test_channel_flags():
    db, _ = make([[(True,)]], [[]], [[(True,)]], [[]])
    assert db.toggle_channel_xp(1, 2) is True
    assert db.toggle_channel_xp(1, 2) is False
    assert db.channel_disabled(1, 2) is True
    assert db.channel_disabled(1, 2) is False


def test_top_members_page():
    rows = [(Decimal(100 + n), 5 - n, 10) for n in range(3)]
    db, conn = make([rows, [(25,)]])
    page = db.top_members(4, 2)
    assert page.members[0] == Member(id=100, exp=Experience(level=5, xp=10))
    assert len(page.members) == 3
    assert page.current_page == 2
    assert (page.last_page - 1) * ROWS_PER_PAGE < 25 <= page.last_page * ROWS_PER_PAGE
    sql, params = conn.calls[0]
    # The server id is bound twice: for the page and for the count.
    assert params == (4, 2 * ROWS_PER_PAGE, ROWS_PER_PAGE, 4)
    assert sql.count("?") == 4


@pytest.mark.parametrize("count", [0, 10, 20, 21])
def test_top_members_page_count_covers_all_rows(count):
    db, _ = make([[], [(count,)]])
    pages = db.top_members(1, 0).last_page
    assert pages * ROWS_PER_PAGE >= count
    assert pages == 0 or (pages - 1) * ROWS_PER_PAGE < count


def test_top_members_negative_page_uses_zero_offset():
    db, conn = make([[], [(0,)]])
    page = db.top_members(1, -3)
    assert page.current_page == -3
    assert conn.calls[0][1][1] == 0


def test_top_members_missing_count_raises():
    db, _ = make([[]])
    with pytest.raises(ValueError):
        db.top_members(1, 0)


def test_rank_within_members():
    db, _ = make([[(4,)]], [[]])
    assert db.rank_within_members(1, 2) == 4
    assert db.rank_within_members(1, 2) is None


def test_get_roles():
    db, _ = make([[("Calf", Decimal(11), 1), ("Cow", None, 10)]])
    assert db.get_roles(3) == [Rank("Calf", 11, 1), Rank("Cow", None, 10)]


def test_add_role_binds_in_order():
    db, conn = make([[(True,)]])
    assert db.add_role(1, "Cow", 22, 5) is True
    assert conn.calls[0][1] == (1, "Cow", 22, 5)
    assert all(isinstance(p, Decimal) for i, p in enumerate(conn.calls[0][1]) if i != 1)


def test_remove_role_and_set_timeout():
    db, conn = make([[]], [[(True,)]])
    assert db.remove_role(1, 22) is False
    assert db.set_timeout(1, 60) is True
    assert conn.calls[1][1] == (1, 60)


def test_get_timeout_default():
    db, _ = make([[(30,)]], [[]])
    assert db.get_timeout(1) == 30
    assert db.get_timeout(1) == DEFAULT_TIMEOUT == -1


def test_get_users():
    db, _ = make([[(Decimal(5), 2, 40, Decimal(9)), (Decimal(6), 0, 1, None)]])
    assert db.get_users(1) == [
        FullMember(user=5, exp=Experience(level=2, xp=40), role_id=9),
        FullMember(user=6, exp=Experience(level=0, xp=1), role_id=None),
    ]


def test_errors_propagate():
    db, conn = make(RuntimeError("connection lost"))
    with pytest.raises(RuntimeError, match="connection lost"):
        db.get_timeout(1)
    assert conn.closed == 1