"""Bot configuration loaded from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from os import PathLike

_STRING_FIELDS = (
    "token",
    "sql_server_ip",
    "sql_server_username",
    "sql_server_password",
    "cmd_prefix",
    "lavalink_ip",
    "lavalink_password",
)


@dataclass(frozen=True)
class Config:
    """Connection settings for the chat service, database and audio node."""

    token: str
    sql_server_ip: str
    sql_server_port: int
    sql_server_username: str
    sql_server_password: str
    cmd_prefix: str
    lavalink_ip: str
    lavalink_password: str

    def lavalink_enabled(self) -> bool:
        """The audio node is used only when both its host and password are set."""
        return bool(self.lavalink_ip) and bool(self.lavalink_password)


def parse_config(text: str | bytes) -> Config:
    """Parse configuration JSON; raises ``ValueError`` when it is malformed."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("configuration must be a JSON object")

    values = {}
    for name in _STRING_FIELDS:
        value = raw.get(name)
        if not isinstance(value, str):
            raise ValueError(f"configuration field {name!r} must be a string")
        values[name] = value

    port = raw.get("sql_server_port")
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
        raise ValueError("configuration field 'sql_server_port' must be a port number")

    return Config(sql_server_port=port, **values)


def load_config(path: str | PathLike = "config.json") -> Config:
    """Read and parse a configuration file."""
    with open(path, encoding="utf-8") as handle:
        return parse_config(handle.read())