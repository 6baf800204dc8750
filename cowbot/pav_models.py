"""Dining hall models: days, meals, menu API records and opening hours."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, ClassVar


class Day(enum.IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    def __str__(self) -> str:
        return self.name.title()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_DAY_PREFIXES = {day.name[:2].lower(): day for day in Day}


def day_from_text(text: str) -> Day:
    """Recognise a day from its first two letters; raises ``ValueError`` otherwise."""
    if len(text) < 2:
        raise ValueError(f"cannot tell a day from {text!r}")
    try:
        return _DAY_PREFIXES[text.lower()[:2]]
    except KeyError:
        raise ValueError(f"not a day: {text!r}") from None


def day_from_weekday(weekday: int) -> Day:
    """Convert ``datetime.weekday()`` (Monday is 0) to a ``Day``."""
    if not 0 <= weekday <= 6:
        raise ValueError(f"invalid weekday {weekday}")
    return Day((weekday + 1) % 7)


@dataclass(frozen=True)
class Meal:
    """A meal period, or a custom category name to search for."""

    name: str
    custom: bool = False

    BREAKFAST: ClassVar["Meal"]
    LUNCH: ClassVar["Meal"]
    DINNER: ClassVar["Meal"]

    def __str__(self) -> str:
        return self.name


Meal.BREAKFAST = Meal("Breakfast")
Meal.LUNCH = Meal("Lunch")
Meal.DINNER = Meal("Dinner")

_KNOWN_MEALS = {meal.name.lower(): meal for meal in (Meal.BREAKFAST, Meal.LUNCH, Meal.DINNER)}


def parse_meal(text: str) -> Meal:
    """Known meal names map to their meal; anything else becomes a custom meal."""
    lowered = text.lower()
    return _KNOWN_MEALS.get(lowered) or Meal(lowered, custom=True)


@dataclass
class LocationSpecialGroup:
    id: str
    name: str


@dataclass
class Location:
    id: str
    location_special_group_ids: list[LocationSpecialGroup] | None = None


@dataclass
class Company:
    id: str
    location_info: Location


@dataclass
class Group:
    id: str
    name: str
    order: int | None = None


def _search_all(groups: list[Group], query: str) -> list[Group]:
    needle = query.lower()
    return [group for group in groups if needle in group.name.lower()]


def _search(groups: list[Group], query: str) -> str | None:
    matches = _search_all(groups, query)
    if not matches:
        return None
    return min(matches, key=lambda group: len(group.name)).id


@dataclass
class MenuGroups:
    menu_groups: list[Group] = field(default_factory=list)
    menu_categories: list[Group] = field(default_factory=list)

    def get_group(self, day: Day) -> str | None:
        """Id of the shortest-named group mentioning the day."""
        return _search(self.menu_groups, str(day))

    def get_groups(self, day: Day) -> list[Group]:
        return _search_all(self.menu_groups, str(day))

    def get_category(self, meal: Meal) -> str | None:
        """Id of the shortest-named category mentioning the meal."""
        return _search(self.menu_categories, str(meal))

    def get_categories(self, meal: Meal) -> list[Group]:
        return _search_all(self.menu_categories, str(meal))


@dataclass
class Item:
    id: str
    name: str
    description: str


@dataclass
class RawMaterial:
    id: str
    name: str


def _field(obj: Any, key: str, kind: type, optional: bool = False) -> Any:
    if not isinstance(obj, dict):
        raise ValueError(f"expected an object holding {key!r}")
    value = obj.get(key)
    if value is None:
        if optional:
            return None
        raise ValueError(f"missing field {key!r}")
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def _payload(data: Any) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    _field(data, "code", int)
    _field(data, "message", str)
    if "data" not in data:
        raise ValueError("missing field 'data'")
    return data["data"]


def _location(obj: Any) -> Location:
    groups = _field(obj, "locationSpecialGroupIds", list, optional=True)
    return Location(
        id=_field(obj, "_id", str),
        location_special_group_ids=None
        if groups is None
        else [LocationSpecialGroup(_field(g, "_id", str), _field(g, "name", str)) for g in groups],
    )


def _group(obj: Any) -> Group:
    return Group(_field(obj, "_id", str), _field(obj, "name", str), _field(obj, "order", int, optional=True))


def _list(value: Any) -> list:
    if not isinstance(value, list):
        raise ValueError("expected a list")
    return value


def parse_company(data: Any) -> Company:
    """Parse a company response (JSON text or decoded object)."""
    obj = _payload(data)
    return Company(id=_field(obj, "_id", str), location_info=_location(_field(obj, "locationInfo", dict)))


def parse_locations(data: Any) -> list[Location]:
    return [_location(obj) for obj in _list(_payload(data))]


def parse_menu_groups(data: Any) -> MenuGroups:
    obj = _payload(data)
    return MenuGroups(
        menu_groups=[_group(g) for g in _field(obj, "menuGroups", list)],
        menu_categories=[_group(g) for g in _field(obj, "menuCategories", list)],
    )


def parse_menu_items(data: Any) -> list[Item]:
    obj = _payload(data)
    return [
        Item(_field(i, "_id", str), _field(i, "name", str), _field(i, "description", str))
        for i in _field(obj, "menuItems", list)
    ]


def parse_raw_materials(data: Any) -> list[RawMaterial]:
    return [RawMaterial(_field(m, "_id", str), _field(m, "name", str)) for m in _list(_payload(data))]


PAVILION_BREAKFAST_WEEKDAY_START = time(7, 0)
PAVILION_BREAKFAST_WEEKEND_START = time(9, 0)
PAVILION_BREAKFAST_END = time(10, 30)
PAVILION_LUNCH_START = time(11, 0)
PAVILION_LUNCH_END = time(15, 0)
PAVILION_DINNER_START = time(16, 0)
PAVILION_DINNER_END = time(21, 0)
YABLOKOFF_DINNER_START = time(15, 0)
YABLOKOFF_DINNER_END = time(0, 0)


def next_meal(moment: datetime) -> tuple[Day, Meal]:
    """The meal being served now or next at the Pavilion."""
    day = day_from_weekday(moment.weekday())
    now = moment.time()
    if now < PAVILION_BREAKFAST_END:
        return day, Meal.BREAKFAST
    if now < PAVILION_LUNCH_END:
        return day, Meal.LUNCH
    if now < PAVILION_DINNER_END:
        return day, Meal.DINNER
    return Day((day + 1) % 7), Meal.BREAKFAST


def is_yablokoff_dinner(day: Day) -> bool:
    """Yablokoff serves dinner on weekdays only."""
    return day not in (Day.SATURDAY, Day.SUNDAY)