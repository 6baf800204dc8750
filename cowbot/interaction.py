"""Turning slash-command interactions into text commands."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable


class OptionKind(enum.Enum):
    """Kinds of resolved option values a slash command can carry."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    USER = "user"
    CHANNEL = "channel"
    ROLE = "role"
    NUMBER = "number"
    UNKNOWN = "unknown"


@dataclass
class CommandOption:
    """One option of a slash command; users, channels and roles resolve to their id."""

    kind: OptionKind
    value: Any = None
    resolved: Any = None


def _format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        return str(int(number))
    return format(Decimal(repr(number)), "f")


def format_option(option: CommandOption) -> str:
    """Render an option's resolved value as text-command argument."""
    resolved = option.resolved
    if option.kind is OptionKind.STRING:
        return str(resolved)
    if option.kind is OptionKind.INTEGER:
        return str(int(resolved))
    if option.kind is OptionKind.BOOLEAN:
        return "true" if resolved else "false"
    if option.kind is OptionKind.USER:
        return f"<@{resolved}>"
    if option.kind is OptionKind.CHANNEL:
        return f"<#{resolved}>"
    if option.kind is OptionKind.ROLE:
        return f"<@&{resolved}"
    if option.kind is OptionKind.NUMBER:
        return _format_number(float(resolved))
    return ""


def build_command_content(application_id: int, command_name: str, options: Iterable[CommandOption] = ()) -> str:
    """Text of a message that mentions the bot and invokes the command.

    Options lacking either a value or a resolved value are skipped; the
    remaining arguments are joined by spaces and appended to the command name.
    """
    content = f"<@!{application_id}> {command_name}"
    arguments = [
        format_option(option)
        for option in options
        if option.value is not None and option.resolved is not None
    ]
    if arguments:
        content += " ".join(arguments)
    return content