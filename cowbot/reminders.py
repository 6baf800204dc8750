"""Seat reminders for classes: listing, adding, removing and triggering them."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable

from .course_models import Class, Reminder
from .embed import Embed

log = logging.getLogger(__name__)

# Seconds between passes of ``check_reminders``.
REMINDER_INTERVAL = 60

UNKNOWN_CLASS = "<unknown class name>"
NO_REMINDERS = "You do not have any reminders set. Add some using `reminders add`."
ADD_USAGE = (
    "You need to pass in a valid CRN.\n"
    "You can also pass in the minimum amount of seats to trigger the reminder, as well.\n"
    "If you want, you can also make it trigger on waitlist seats instead (true/false), "
    "however you must have done the previous part beforehand.\n"
    "Ex. `reminders add 31415 1 true`"
)
INVALID_FIRST_CRN = "You need to pass in a valid CRN for the first value."
TRIGGER_TOO_SMALL = "Your minimum trigger must be greater than or equal to 1 seat."
TRIGGER_NOT_INTEGER = "You need to pass in a positive integer for minimum trigger."
WAITLIST_NOT_BOOL = (
    'Put "true" if you want to trigger on waitlist slots, otherwise omit this field (or put "false").'
)
ADD_FAILED = "Error adding your reminder. Maybe you have a duplicate?"
CRN_NOT_FOUND = "Could not find this CRN... did you type it right?"
REMOVE_USAGE = "You need to pass in a valid CRN for a reminder you set up."
INVALID_CRN = "That is not a valid CRN."
REMOVED = "Successfully removed your reminder."
NOT_REMOVED = "You did not have a reminder with this CRN."
REMOVE_FAILED = "Failed to remove your reminder... try again later?"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_BOOLS = {"true": True, "false": False}


class ReminderArgumentError(ValueError):
    """The command's arguments were invalid; the message explains why to the user."""


def _parse_i32(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if _I32_MIN <= value <= _I32_MAX else None


def _flag(value: bool) -> str:
    return "true" if value else "false"


def reminders_embed(reminders: list[Reminder]) -> Embed:
    """A user's reminders, one field per CRN."""
    embed = Embed(title="Your Course Reminders")
    if not reminders:
        embed.description = NO_REMINDERS
        return embed
    for reminder in reminders:
        embed.add_field(
            f"CRN {reminder.course_reference_number}",
            f"Minimum Trigger: `{reminder.min_trigger}`\n"
            f"For Waitlist: `{_flag(reminder.for_waitlist)}`\n"
            f"Triggered: `{_flag(reminder.triggered)}`",
            False,
        )
    return embed


def parse_add_args(args: Iterable[str]) -> tuple[int, int, bool]:
    """Parse ``CRN [minimum seats] [for waitlist]``; defaults are one seat and no waitlist."""
    words = list(args)
    if not words:
        raise ReminderArgumentError(ADD_USAGE)

    crn = _parse_i32(words[0])
    if crn is None:
        raise ReminderArgumentError(INVALID_FIRST_CRN)

    min_trigger = 1
    if len(words) > 1:
        value = _parse_i32(words[1])
        if value is None:
            raise ReminderArgumentError(TRIGGER_NOT_INTEGER)
        if value < 1:
            raise ReminderArgumentError(TRIGGER_TOO_SMALL)
        min_trigger = value

    for_waitlist = False
    if len(words) > 2:
        if words[2] not in _BOOLS:
            raise ReminderArgumentError(WAITLIST_NOT_BOOL)
        for_waitlist = _BOOLS[words[2]]

    return crn, min_trigger, for_waitlist


def add_reminder(db: Any, user_id: int, args: Iterable[str]) -> str:
    """Add a reminder for an existing class and describe the outcome."""
    try:
        crn, min_trigger, for_waitlist = parse_add_args(args)
    except ReminderArgumentError as error:
        return str(error)

    reminder = Reminder(
        user_id=user_id,
        course_reference_number=crn,
        min_trigger=min_trigger,
        for_waitlist=for_waitlist,
        triggered=False,
    )

    try:
        class_ = db.get_class(crn)
    except Exception:
        log.exception("Failed to look up class")
        class_ = None
    if class_ is None:
        return CRN_NOT_FOUND

    try:
        db.add_reminder(reminder)
    except Exception:
        log.exception("Failed to add reminder")
        return ADD_FAILED
    return (
        f"Successfully added your reminder for {class_.course_number}: "
        f"{class_.course_title or UNKNOWN_CLASS}!"
    )


def remove_reminder(db: Any, user_id: int, args: Iterable[str]) -> str:
    """Remove the reminder for the CRN given first and describe the outcome."""
    words = list(args)
    if not words:
        return REMOVE_USAGE
    crn = _parse_i32(words[0])
    if crn is None:
        return INVALID_CRN
    try:
        removed = db.remove_reminder(user_id, crn)
    except Exception:
        log.exception("Failed to remove reminder")
        return REMOVE_FAILED
    return REMOVED if removed else NOT_REMOVED


def triggered_embed(class_: Class) -> Embed:
    """Notification sent when a class has the seats a reminder waits for."""
    embed = Embed(title="Reminder Triggered~", description=class_.course_title or UNKNOWN_CLASS)
    embed.add_field("Course Number", class_.course_number, True)
    embed.add_field("Course Reference Number", class_.course_reference_number, True)
    embed.add_field("Seats Available/Total", f"{class_.seats_available}/{class_.maximum_enrollment}", True)
    embed.add_field("Waitlist Available/Total", f"{class_.wait_available}/{class_.wait_capacity}", True)
    return embed


def check_reminders(db: Any, notify: Callable[[int, Embed], Any]) -> int:
    """Run one pass over triggered reminders, calling ``notify(user_id, embed)``.

    Failures are logged and skipped. Returns the number of notifications sent.
    Meant to be called every ``REMINDER_INTERVAL`` seconds.
    """
    try:
        triggers = db.trigger_reminders()
    except Exception:
        log.exception("Failed to query reminders")
        return 0

    sent = 0
    for trigger in triggers:
        try:
            class_ = db.get_class(trigger.course_reference_number)
        except Exception:
            log.exception("Failed to look up class for reminder")
            continue
        if class_ is None:
            continue
        try:
            notify(trigger.user_id, triggered_embed(class_))
        except Exception:
            log.exception("Failed to send DM to user")
            continue
        sent += 1
    return sent