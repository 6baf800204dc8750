import pytest
import responses

from cowbot.foodtrucks import URL, fetch_schedule, process_schedules, schedule_embed

PAGE = """
<img src="/logo.png">
<p>This week:</p>
<p><a href="#"><img src="/schedule-week1.png"></a></p>
<p><img src="/schedule-week2.png"></p>
"""


def test_first_paragraph_image_is_chosen():
    assert process_schedules(PAGE) == "/schedule-week1.png"


def test_no_image_gives_none():
    assert process_schedules("<p>No trucks this week</p>") is None


def test_image_outside_paragraph_is_ignored():
    assert process_schedules('<div><img src="/a.png"></div>') is None


def test_image_without_source_is_an_error():
    with pytest.raises(ValueError):
        process_schedules("<p><img alt='schedule'></p>")


def test_schedule_embed_with_image():
    embed = schedule_embed("/schedule.png")
    assert embed.title == "Food Truck Schedule"
    assert embed.image == "/schedule.png"
    assert embed.description is None


def test_schedule_embed_without_image():
    embed = schedule_embed(None)
    assert embed.image is None
    assert embed.description == "Could not get any valid schedules... Did the website change layout?"


def test_fetch_schedule():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=PAGE, status=200)
        assert fetch_schedule() == "/schedule-week1.png"