from cowbot.ranking_models import (
    Experience,
    FullMember,
    LevelUp,
    Member,
    MemberPagination,
    Rank,
)


def test_level_up_defaults():
    assert LevelUp() == LevelUp(level=0, old_rank=None, new_rank=None)


def test_experience_defaults():
    exp = Experience()
    assert (exp.level, exp.xp) == (0, 0)


def test_member_gets_fresh_experience():
    a = Member(id=1)
    b = Member(id=2)
    a.exp.xp = 50
    assert b.exp.xp == 0


def test_full_member_role_defaults_to_none():
    member = FullMember(user=7, exp=Experience(level=3, xp=9))
    assert member.role_id is None
    assert member.exp == Experience(level=3, xp=9)


def test_rank_equality():
    assert Rank("Cow", 5, 10) == Rank(name="Cow", role_id=5, min_level=10)
    assert Rank("Cow", 5, 10) != Rank("Cow", None, 10)


def test_pagination_holds_members():
    members = [Member(id=1), Member(id=2)]
    page = MemberPagination(members=members, current_page=0, last_page=1)
    assert [m.id for m in page.members] == [1, 2]
    assert page.last_page == 1