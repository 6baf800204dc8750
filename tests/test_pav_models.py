import json
from datetime import date, datetime, timedelta

import pytest

from cowbot.pav_models import (
    Day,
    Group,
    Meal,
    MenuGroups,
    day_from_text,
    day_from_weekday,
    is_yablokoff_dinner,
    next_meal,
    parse_company,
    parse_locations,
    parse_meal,
    parse_menu_groups,
    parse_menu_items,
    parse_raw_materials,
)


def _wrap(data):
    return {"code": 200, "message": "ok", "data": data}


@pytest.mark.parametrize("text", ["Monday", "mo", "MONDAY", "Mon"])
def test_day_from_text(text):
    assert day_from_text(text) is Day.MONDAY


@pytest.mark.parametrize("text", ["", "x", "zz", "q day"])
def test_day_from_text_rejects(text):
    with pytest.raises(ValueError):
        day_from_text(text)


def test_day_names_round_trip():
    for day in Day:
        assert day_from_text(str(day)) is day


def test_day_from_weekday_matches_calendar():
    start = date(2024, 1, 1)
    for offset in range(7):
        d = start + timedelta(days=offset)
        assert str(day_from_weekday(d.weekday())) == d.strftime("%A")


def test_day_from_weekday_rejects():
    with pytest.raises(ValueError):
        day_from_weekday(7)


def test_parse_meal_known():
    assert parse_meal("LUNCH") is Meal.LUNCH
    assert str(parse_meal("dinner")) == "Dinner"
    assert parse_meal("Breakfast").custom is False


def test_parse_meal_custom_is_lowercased():
    meal = parse_meal("Late Night")
    assert meal.custom is True
    assert str(meal) == "late night"


def test_menu_group_search_prefers_shortest():
    groups = MenuGroups(
        menu_groups=[Group("a", "Monday Week 1"), Group("b", "Monday"), Group("c", "Tuesday")],
        menu_categories=[Group("d", "Lunch Specials"), Group("e", "lunch")],
    )
    assert groups.get_group(Day.MONDAY) == "b"
    assert [g.id for g in groups.get_groups(Day.MONDAY)] == ["a", "b"]
    assert groups.get_category(Meal.LUNCH) == "e"
    assert [g.id for g in groups.get_categories(Meal.LUNCH)] == ["d", "e"]
    assert groups.get_category(Meal.BREAKFAST) is None
    assert groups.get_groups(Day.FRIDAY) == []


def test_parse_company_from_text():
    text = json.dumps(_wrap({"_id": "comp", "locationInfo": {"_id": "loc"}}))
    company = parse_company(text)
    assert company.id == "comp"
    assert company.location_info.id == "loc"
    assert company.location_info.location_special_group_ids is None


def test_parse_locations():
    locations = parse_locations(
        _wrap([
            {"_id": "l1", "locationSpecialGroupIds": [{"_id": "g", "name": "YWDC-FALL"}]},
            {"_id": "l2"},
        ])
    )
    assert [loc.id for loc in locations] == ["l1", "l2"]
    assert locations[0].location_special_group_ids[0].name == "YWDC-FALL"


def test_parse_menu_groups_and_items():
    groups = parse_menu_groups(
        _wrap({"menuGroups": [{"_id": "g", "name": "Monday", "order": 2}],
               "menuCategories": [{"_id": "c", "name": "Dinner"}]})
    )
    assert groups.menu_groups[0].order == 2
    assert groups.menu_categories[0].order is None
    items = parse_menu_items(_wrap({"menuItems": [{"_id": "i", "name": "Soup", "description": "Hot"}]}))
    assert (items[0].name, items[0].description) == ("Soup", "Hot")


def test_parse_raw_materials():
    materials = parse_raw_materials(_wrap([{"_id": "r", "name": "Closed today"}]))
    assert [m.name for m in materials] == ["Closed today"]


def test_parse_missing_data_raises():
    with pytest.raises(ValueError):
        parse_company({"code": 200, "message": "ok"})
    with pytest.raises(ValueError):
        parse_menu_items(_wrap({"menuItems": [{"_id": "i", "name": "Soup"}]}))


def test_next_meal_periods():
    morning = datetime(2024, 1, 1, 8, 0)
    today = day_from_weekday(morning.weekday())
    assert next_meal(morning) == (today, Meal.BREAKFAST)
    assert next_meal(morning.replace(hour=12)) == (today, Meal.LUNCH)
    assert next_meal(morning.replace(hour=20, minute=59)) == (today, Meal.DINNER)


def test_next_meal_late_rolls_over():
    for offset in range(7):
        late = datetime(2024, 1, 1, 22, 0) + timedelta(days=offset)
        tomorrow = day_from_weekday((late + timedelta(days=1)).weekday())
        assert next_meal(late) == (tomorrow, Meal.BREAKFAST)


def test_yablokoff_weekdays_only():
    assert is_yablokoff_dinner(Day.SATURDAY) is False
    assert is_yablokoff_dinner(Day.SUNDAY) is False
    assert all(is_yablokoff_dinner(d) for d in Day if d not in (Day.SATURDAY, Day.SUNDAY))