"""Menus, announcements and opening times of the Pavilion and Yablokoff dining halls."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable

import requests

from .embed import Embed
from .pav_models import (
    Company,
    Day,
    Item,
    Location,
    Meal,
    MenuGroups,
    RawMaterial,
    day_from_text,
    is_yablokoff_dinner,
    next_meal,
    parse_company,
    parse_locations,
    parse_meal,
    parse_menu_groups,
    parse_menu_items,
    parse_raw_materials,
)

log = logging.getLogger(__name__)

API = "https://widget.api.eagle.bigzpoon.com"
COMPANY_ID = "uc-merced-the-pavilion"
REQUEST_TIMEOUT = 30

TIMES_TITLE = "Pavilion/Yablokoff Times"
ANNOUNCEMENTS_TITLE = "Pavilion/Yablokoff Announcements"
LOADING = "Loading data, please wait warmly..."
ERROR_NAME = "Error~"
NO_RESTAURANT = (
    "Could not find an appropriate restaurant link for the week! Current algorithm might be outdated."
)
MAX_MENU_FIELDS = 4
MAX_FIELD_LENGTH = 1024

# Week 1 of the current menu rotation starts on this day.
ROTATION_START = datetime(2022, 8, 21)
YABLOKOFF_LOCATION = "YWDC-FALL"

_USER_PREFERENCES = (
    '{"allergies":[],"lifestyleChoices":[],"medicalGoals":[],"preferenceApplyStatus":false}'
)
_RAW_MATERIALS_BODY = (
    '{ "menuId": "M_ID", "fdaRounding": true, "allergyIds": [], "lifestyleChoiceIds": [], '
    '"nutritionGoals": [], "preferenceApplyStatus": false, "skipCommonIngredients": [], '
    '"locationId": "L_ID" }'
)

_BREAKFAST_WEEKDAY_START = time(7, 0)
_BREAKFAST_WEEKEND_START = time(9, 0)
_BREAKFAST_END = time(10, 30)
_LUNCH_START = time(11, 0)
_LUNCH_END = time(15, 0)
_DINNER_START = time(16, 0)
_DINNER_END = time(21, 0)
_YABLOKOFF_DINNER_START = time(15, 0)
_YABLOKOFF_DINNER_END = time(0, 0)

_KNOWN_MEALS = {"Breakfast", "Lunch", "Dinner"}


class BigZpoonClient:
    """Client of the menu service that publishes the dining halls' menus."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    def __enter__(self) -> BigZpoonClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def _get(self, url: str, company_id: str, params: Any = None) -> str:
        response = self._session.get(
            url, params=params, headers={"x-comp-id": company_id}, timeout=REQUEST_TIMEOUT
        )
        return response.text

    def fetch_company_info(self) -> Company:
        return parse_company(self._get(f"{API}/company", COMPANY_ID))

    def fetch_restaurants(self, company: Company) -> list[Location]:
        return parse_locations(self._get(f"{API}/nearbyrestaurants", company.id))

    def fetch_groups(self, company: Company, location: Location) -> MenuGroups:
        url = f"{API}/locations/menugroups?locationId={location.id}"
        return parse_menu_groups(self._get(url, company.id))

    def fetch_menu(self, company: Company, location: Location, category: str, group: str):
        """Items of one category within one menu group (day)."""
        params = [
            ("categoryId", category),
            ("isPreview", "false"),
            ("locationId", location.id),
            ("menuGroupId", group),
            ("userPreferences", _USER_PREFERENCES),
        ]
        return parse_menu_items(self._get(f"{API}/menuitems", company.id, params))

    def fetch_raw_materials(self, company: Company, location: Location, item: Item) -> list[RawMaterial]:
        body = _RAW_MATERIALS_BODY.replace("M_ID", item.id).replace("L_ID", location.id)
        response = self._session.post(
            f"{API}/raw-materials",
            data=body.encode("utf-8"),
            headers={"x-comp-id": company.id, "Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        return parse_raw_materials(response.text)


@dataclass
class PavilionRequest:
    """What the pavilion command was asked to show."""

    day: Day
    meal: Meal
    title: str = ""
    next_week: bool = False
    times: bool = False
    announcements: bool = False


def _is_known_meal(meal: Meal) -> bool:
    return str(meal) in _KNOWN_MEALS


def _parse_day(text: str) -> Day | None:
    try:
        return day_from_text(text)
    except ValueError:
        return None


def parse_pavilion_args(args: Iterable[str], now: datetime) -> PavilionRequest:
    """Interpret the command's words.

    A single word about times or hours asks for the opening times, one about
    announcements for the announcements. Otherwise ``next`` selects next
    week, day names select the day and the other words name a meal.
    """
    words = list(args)
    day, meal = next_meal(now)

    if len(words) == 1:
        lowered = words[0].lower()
        if "time" in lowered or "hour" in lowered:
            return PavilionRequest(day=day, meal=meal, title=TIMES_TITLE, times=True)
        if "announce" in lowered:
            return PavilionRequest(day=day, meal=meal, title=ANNOUNCEMENTS_TITLE, announcements=True)

    next_week = False
    custom: list[str] = []
    for word in words:
        if word == "next":
            next_week = True
            continue
        parsed_day = _parse_day(word)
        if parsed_day is not None:
            day = parsed_day
        else:
            custom.append(word)

    if custom:
        meal = parse_meal(" ".join(custom))
        if _is_known_meal(meal):
            title = f"{meal} at the Pavilion/Yablokoff for {day}"
        else:
            # Never echo unvalidated input back to the channel.
            title = f"Custom Category at the Pavilion/Yablokoff for {day}"
    else:
        title = f"{meal} at the Pavilion/Yablokoff for {day}"

    return PavilionRequest(day=day, meal=meal, title=title, next_week=next_week)


def week_number(today: date | datetime, next_week: bool = False) -> int:
    """One-based week of the menu rotation, plus one when asking for next week."""
    if not isinstance(today, datetime):
        today = datetime.combine(today, time())
    delta = today.replace(tzinfo=None) - ROTATION_START
    seconds = delta.days * 86400 + delta.seconds
    days = abs(seconds) // 86400 * (1 if seconds >= 0 else -1)
    weeks = abs(days) // 7 * (1 if days >= 0 else -1)
    return weeks + 1 + (1 if next_week else 0)


def _first_group_name(location: Location) -> str | None:
    groups = location.location_special_group_ids
    return groups[0].name if groups else None


def _named_locations(restaurants: Iterable[Location]) -> list[Location]:
    return [r for r in restaurants if _first_group_name(r) is not None]


def _find_location(restaurants: Iterable[Location], name: str) -> Location | None:
    return next((r for r in _named_locations(restaurants) if _first_group_name(r) == name), None)


def _log_missing_location(restaurants: Iterable[Location]) -> None:
    names = ", ".join(_first_group_name(r) for r in _named_locations(restaurants)) or "<none>"
    log.error("Failed to find restaurant: %s", names)


def process_announcement(client: BigZpoonClient, name: str) -> str:
    """Text of the announcement published by the location ``name``, or why it is missing."""
    try:
        company = client.fetch_company_info()
    except Exception:
        log.exception("Failed to get company info")
        return "Failed to get company info!"
    try:
        restaurants = client.fetch_restaurants(company)
    except Exception:
        log.exception("Failed to read restaurant list")
        return "Failed to load restaurant info!"

    location = _find_location(restaurants, name)
    if location is None:
        _log_missing_location(restaurants)
        return NO_RESTAURANT

    try:
        groups = client.fetch_groups(company, location)
    except Exception:
        log.exception("Failed to get groups and categories")
        return "Failed to get groups and categories from the website!"

    if not groups.menu_groups:
        log.error("Failed to find a group for info")
        return "Failed to find a group for info."
    group = groups.menu_groups[0]
    category = next((c for c in groups.menu_categories if "announce" in c.name.lower()), None)
    if category is None:
        log.error("Failed to find a group for announcements")
        return "Failed to find a category for announcements."

    try:
        menu = client.fetch_menu(company, location, category.id, group.id)
    except Exception:
        log.exception("Failed to get the menu")
        return "Failed to get the menu from the website."
    if not menu.menu_items:
        return "No announcement could be found."

    try:
        materials = client.fetch_raw_materials(company, location, menu.menu_items[0])
    except Exception:
        log.exception("Failed to get announcement data")
        return "Failed to get announcement data."
    return "\n".join(m.name for m in materials) or "The announcement is empty?"


def _menu_items(
    client: BigZpoonClient,
    company: Company,
    restaurants: list[Location],
    location: Location | None,
    day: Day,
    meal: Meal,
) -> list[tuple[str, str]]:
    if location is None:
        _log_missing_location(restaurants)
        return [(ERROR_NAME, NO_RESTAURANT)]

    try:
        groups = client.fetch_groups(company, location)
    except Exception:
        log.exception("Failed to get groups and categories")
        return [(ERROR_NAME, "Failed to get groups and categories from the website!")]

    group_id = groups.get_group(day)
    if group_id is None:
        return [(ERROR_NAME, "Could not find a group for the given day!")]

    output = []
    for category in groups.get_categories(meal):
        try:
            menu = client.fetch_menu(company, location, category.id, group_id)
        except Exception:
            log.exception("Failed to get the menu")
            description = "Failed to get the menu from the website!"
        else:
            description = "\n".join(
                f"**{item.name}** - {item.description}" for item in menu.menu_items
            ) or "There is nothing on the menu?"
        output.append((category.name, description))
    return output


def process_bigzpoon(
    client: BigZpoonClient,
    day: Day,
    meal: Meal,
    next_week: bool = False,
    today: date | datetime | None = None,
) -> list[tuple[str, str]]:
    """Menu sections as (category, text) pairs for the Pavilion, then Yablokoff."""
    try:
        company = client.fetch_company_info()
    except Exception:
        log.exception("Failed to get company info")
        return [(ERROR_NAME, "Failed to get company info!")]
    try:
        restaurants = client.fetch_restaurants(company)
    except Exception:
        log.exception("Failed to read restaurant list")
        return [(ERROR_NAME, "Failed to load restaurant info!")]

    week = week_number(today or datetime.now(), next_week)
    pavilion = _find_location(restaurants, f"PAV-FALL-W{week}")
    yablokoff = _find_location(restaurants, YABLOKOFF_LOCATION)

    output = _menu_items(client, company, restaurants, pavilion, day, meal)

    # Yablokoff has no next-week menus and only serves dinner on weekdays.
    if not next_week and is_yablokoff_dinner(day):
        output.extend(
            (f"Yablokoff {category}", menu)
            for category, menu in _menu_items(client, company, restaurants, yablokoff, day, meal)
        )
    return output


def _clock(moment: time) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour:>2}:{moment.minute:02} {suffix}"


def _meal_hours(breakfast_start: time) -> str:
    return (
        f"Breakfast: {_clock(breakfast_start)} - {_clock(_BREAKFAST_END)}\n"
        f"Lunch: {_clock(_LUNCH_START)} - {_clock(_LUNCH_END)}\n"
        f"Dinner: {_clock(_DINNER_START)} - {_clock(_DINNER_END)}"
    )


def pavilion_times_embed() -> Embed:
    """Opening times of the dining halls and cafés."""
    embed = Embed(title=TIMES_TITLE)
    embed.add_field("Pavilion on Weekdays", _meal_hours(_BREAKFAST_WEEKDAY_START), False)
    embed.add_field("Pavilion on Weekends", _meal_hours(_BREAKFAST_WEEKEND_START), False)
    embed.add_field(
        "Yablokoff on Weekdays",
        f"Dinner: {_clock(_YABLOKOFF_DINNER_START)} - {_clock(_YABLOKOFF_DINNER_END)}",
        False,
    )
    embed.add_field("Lantern Cafe", "Monday to Friday: 7:00 AM - 5:00 PM", False)
    embed.add_field("Bobcat Snack Shop", "Monday to Friday: 8:00 AM - 6:00 PM", False)
    return embed


def pavilion_embed(title: str, menus: Iterable[tuple[str, str]]) -> Embed:
    """At most four menu sections, each cut to the field length limit."""
    embed = Embed(title=title)
    for index, (name, menu) in enumerate(menus):
        if index >= MAX_MENU_FIELDS:
            break
        embed.add_field(name, menu[:MAX_FIELD_LENGTH], False)
    return embed


def announcements_embed(client: BigZpoonClient) -> Embed:
    """Announcements of both dining halls."""
    embed = Embed(title=ANNOUNCEMENTS_TITLE)
    embed.add_field("Pavilion Announcements", process_announcement(client, "ANNOUNCEMENT-PAV"), False)
    embed.add_field("Yablokoff Announcements", process_announcement(client, "ANNOUNCEMENT-WYDC"), False)
    return embed


def _envelope(data: Any) -> str:
    return json.dumps({"code": 200, "message": "ok", "data": data})