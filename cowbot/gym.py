"""Opening hours of the recreation and athletic facilities."""

from __future__ import annotations

import requests
from bs4 import BeautifulSoup

from .embed import Embed

TITLE = "Recreation and Athletic Facility Hours"
URL = "https://recreation.ucmerced.edu/Facility-Hours"
EMPTY = "\u200b"
NO_HOURS = "Could not get any hours... Did the website change layout?"
REQUEST_TIMEOUT = 30


def _element_text(element) -> str:
    return "\n".join(text.strip() for text in element.strings if text.strip())


def process_hours(data: str) -> list[tuple[str, str]]:
    """Pair each ``h3`` heading in ``.content`` with the paragraphs that follow it."""
    page = BeautifulSoup(data, "html.parser")
    output: list[tuple[str, str]] = []
    name: str | None = None
    values: list[str] = []

    def flush() -> None:
        if name is not None:
            output.append((name, "\n".join(values)))
            values.clear()

    for element in page.select(".content h3, .content p"):
        text = _element_text(element)
        if element.name == "h3":
            flush()
            name = text
        elif name is not None:
            values.append(text)
        else:
            # Paragraphs without a heading mean the layout is not understood.
            break
    flush()
    return output


def hours_embed(hours: list[tuple[str, str]]) -> Embed:
    """One field per facility; an explanation when nothing was found."""
    embed = Embed(title=TITLE)
    if not hours:
        embed.description = NO_HOURS
        return embed
    for name, value in hours:
        embed.add_field(name, value or EMPTY, False)
    return embed


def fetch_hours() -> list[tuple[str, str]]:
    """Download and parse the hours page; network failures raise ``requests`` errors."""
    response = requests.get(URL, timeout=REQUEST_TIMEOUT)
    return process_hours(response.text)