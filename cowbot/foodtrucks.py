"""The weekly food truck schedule, published as an image."""

from __future__ import annotations

import requests
from bs4 import BeautifulSoup

from .embed import Embed

TITLE = "Food Truck Schedule"
URL = "https://dining.ucmerced.edu/food-trucks"
NO_SCHEDULE = "Could not get any valid schedules... Did the website change layout?"
REQUEST_TIMEOUT = 30


def process_schedules(data: str) -> str | None:
    """Source of the first image inside a paragraph, or ``None``."""
    page = BeautifulSoup(data, "html.parser")
    image = page.select_one("p img")
    if image is None:
        return None
    source = image.get("src")
    if source is None:
        raise ValueError("schedule image has no source")
    return str(source)


def schedule_embed(image_url: str | None) -> Embed:
    embed = Embed(title=TITLE)
    if image_url is None:
        embed.description = NO_SCHEDULE
    else:
        embed.image = image_url
    return embed


def fetch_schedule() -> str | None:
    """Download the page and find the schedule image; network failures raise."""
    response = requests.get(URL, timeout=REQUEST_TIMEOUT)
    return process_schedules(response.text)