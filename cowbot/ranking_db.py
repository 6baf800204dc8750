"""Experience, level and rank storage backed by the ranking database."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Sequence

from .ranking_models import (
    Experience,
    FullMember,
    LevelUp,
    Member,
    MemberPagination,
    Rank,
)

ROWS_PER_PAGE = 10
DEFAULT_TIMEOUT = -1

_PLACEHOLDER = re.compile(r"@P(\d+)")
_U64_MAX = 2**64 - 1


def _u64(value: Any) -> int | None:
    """An unsigned 64-bit id from a numeric column, or ``None`` when it does not fit."""
    if value is None:
        return None
    number = Decimal(value)
    if number < 0 or number > _U64_MAX:
        return None
    return int(number)


def _bind(sql: str, params: Sequence[Any]) -> tuple[str, tuple[Any, ...]]:
    """Rewrite numbered ``@Pn`` placeholders as ``?`` and order parameters to match."""
    ordered: list[Any] = []

    def substitute(match: re.Match) -> str:
        index = int(match.group(1)) - 1
        if not 0 <= index < len(params):
            raise IndexError(f"no parameter for placeholder {match.group(0)}")
        ordered.append(params[index])
        return "?"

    return _PLACEHOLDER.sub(substitute, sql), tuple(ordered)


class RankingDatabase:
    """Ranking queries over a DB-API connection using the ``qmark`` parameter style."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def _results(self, sql: str, *params: Any) -> list[list[tuple]]:
        statement, bound = _bind(sql, params)
        cursor = self._connection.cursor()
        try:
            cursor.execute(statement, bound)
            result_sets: list[list[tuple]] = []
            while True:
                if cursor.description is not None:
                    result_sets.append([tuple(row) for row in cursor.fetchall()])
                next_set = getattr(cursor, "nextset", None)
                if next_set is None or not next_set():
                    break
        finally:
            cursor.close()
        commit = getattr(self._connection, "commit", None)
        if commit is not None:
            commit()
        return result_sets

    def _rows(self, sql: str, *params: Any) -> list[tuple]:
        result_sets = self._results(sql, *params)
        return result_sets[0] if result_sets else []

    def _row(self, sql: str, *params: Any) -> tuple | None:
        rows = self._rows(sql, *params)
        return rows[0] if rows else None

    def _scalar(self, default: Any, sql: str, *params: Any) -> Any:
        row = self._row(sql, *params)
        return default if row is None else row[0]

    def provide_exp(self, server_id: int, user_id: int) -> LevelUp:
        """Grant experience for a message; a negative level means no level-up."""
        row = self._row(
            "EXEC Ranking.ProvideExp @serverid = @P1, @userid = @P2",
            Decimal(server_id),
            Decimal(user_id),
        )
        if row is None:
            return LevelUp()
        return LevelUp(level=row[0], old_rank=_u64(row[1]), new_rank=_u64(row[2]))

    def get_xp(self, server_id: int, user_id: int) -> Experience:
        row = self._row(
            "SELECT xp, level FROM [Ranking].[Level] WHERE server_id = @P1 AND [user_id] = @P2",
            Decimal(server_id),
            Decimal(user_id),
        )
        if row is None:
            return Experience()
        return Experience(level=row[1], xp=row[0])

    def get_highest_role(self, server_id: int, level: int) -> int | None:
        """The role with the greatest minimum level not above ``level``."""
        row = self._row(
            "SELECT TOP 1 role_id FROM [Ranking].[Role] WHERE server_id = @P1 AND min_level <= @P2 "
            "ORDER BY min_level DESC",
            Decimal(server_id),
            level,
        )
        return None if row is None else _u64(row[0])

    def calculate_level(self, level: int) -> int:
        return self._scalar(0, "EXEC [Ranking].[CalculateLevel] @level = @P1", level)

    def toggle_channel_xp(self, server_id: int, channel_id: int) -> bool:
        """Toggle experience in a channel; ``True`` means it is now disabled."""
        return bool(
            self._scalar(
                False,
                "EXEC [Ranking].[ToggleChannel] @serverid = @P1, @channelid = @P2",
                Decimal(server_id),
                Decimal(channel_id),
            )
        )

    def channel_disabled(self, server_id: int, channel_id: int) -> bool:
        return bool(
            self._scalar(
                False,
                "SELECT CAST(1 AS BIT) FROM [Ranking].[DisabledChannel] WHERE server_id = @P1 AND channel_id = @P2",
                Decimal(server_id),
                Decimal(channel_id),
            )
        )

    def top_members(self, server_id: int, page: int) -> MemberPagination:
        """One zero-indexed page of the leaderboard, with the number of pages."""
        offset = max(page * ROWS_PER_PAGE, 0)
        result_sets = self._results(
            "SELECT user_id, level, xp FROM [Ranking].[Level] WHERE server_id = @P1 "
            "ORDER BY level DESC, xp DESC OFFSET @P2 ROWS FETCH NEXT @P3 ROWS ONLY; "
            "SELECT COUNT(1) FROM [Ranking].[Level] WHERE server_id = @P1",
            Decimal(server_id),
            offset,
            ROWS_PER_PAGE,
        )
        if len(result_sets) < 2 or not result_sets[1]:
            raise ValueError("leaderboard query returned no member count")
        count = result_sets[1][0][0]

        members = []
        for user_id, level, xp in (row[:3] for row in result_sets[0]):
            member_id = _u64(user_id)
            if member_id is None:
                raise ValueError(f"invalid user id {user_id!r}")
            members.append(Member(id=member_id, exp=Experience(level=level, xp=xp)))

        pages = count // ROWS_PER_PAGE + (1 if count % ROWS_PER_PAGE else 0)
        return MemberPagination(members=members, current_page=page, last_page=pages)

    def rank_within_members(self, server_id: int, user_id: int) -> int | None:
        """The member's one-based position on the leaderboard, if ranked."""
        return self._scalar(
            None,
            "SELECT row_number FROM (SELECT user_id, ROW_NUMBER() OVER (ORDER BY level DESC, xp DESC) "
            "AS row_number FROM [Ranking].[Level] WHERE server_id = @P1) mukyu WHERE user_id = @P2",
            Decimal(server_id),
            Decimal(user_id),
        )

    def get_roles(self, server_id: int) -> list[Rank]:
        """Ranks of the server in ascending order of minimum level."""
        rows = self._rows(
            "SELECT role_name, role_id, min_level FROM [Ranking].[Role] WHERE server_id = @P1 "
            "ORDER BY min_level ASC",
            Decimal(server_id),
        )
        return [Rank(name=str(name), role_id=_u64(role_id), min_level=min_level) for name, role_id, min_level, *_ in rows]

    def add_role(self, server_id: int, role_name: str, role_id: int, min_level: int) -> bool:
        """Add a rank, or update it when the role is already a rank."""
        return bool(
            self._scalar(
                False,
                "EXEC [Ranking].[AddRole] @server_id = @P1, @role_name = @P2, @role_id = @P3, @min_level = @P4",
                Decimal(server_id),
                role_name,
                Decimal(role_id),
                Decimal(min_level),
            )
        )

    def remove_role(self, server_id: int, role_id: int) -> bool:
        return bool(
            self._scalar(
                False,
                "EXEC [Ranking].[RemoveRole] @serverid = @P1, @roleid = @P2",
                Decimal(server_id),
                Decimal(role_id),
            )
        )

    def set_timeout(self, server_id: int, timeout: int) -> bool:
        return bool(
            self._scalar(
                False,
                "EXEC [Ranking].[SetServerTimeout] @serverid = @P1, @timeout = @P2",
                Decimal(server_id),
                Decimal(timeout),
            )
        )

    def get_timeout(self, server_id: int) -> int:
        """Experience cooldown of the server, or -1 when none is stored."""
        return self._scalar(
            DEFAULT_TIMEOUT,
            "SELECT TOP 1 timeout FROM [Ranking].[Server] WHERE id=@P1",
            Decimal(server_id),
        )

    def get_users(self, server_id: int) -> list[FullMember]:
        """Every ranked member with experience and current rank role."""
        rows = self._rows("EXEC [Ranking].[GetAllUsers] @serverid = @P1", Decimal(server_id))
        members = []
        for user_id, level, xp, role_id, *_ in rows:
            member_id = _u64(user_id)
            if member_id is None:
                raise ValueError(f"invalid user id {user_id!r}")
            members.append(
                FullMember(user=member_id, exp=Experience(level=level, xp=xp), role_id=_u64(role_id))
            )
        return members