"""Records describing members' experience and ranks on a server."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LevelUp:
    """Result of granting experience; a negative level means no level-up."""

    level: int = 0
    old_rank: int | None = None
    new_rank: int | None = None


@dataclass
class Experience:
    level: int = 0
    xp: int = 0


@dataclass
class Member:
    id: int
    exp: Experience = field(default_factory=Experience)


@dataclass
class FullMember:
    user: int
    exp: Experience = field(default_factory=Experience)
    role_id: int | None = None


@dataclass
class Rank:
    name: str
    role_id: int | None
    min_level: int


@dataclass
class MemberPagination:
    members: list[Member]
    current_page: int
    last_page: int