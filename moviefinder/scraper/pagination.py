"""Pagination marker detection for listing pages."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from moviefinder.config import settings


def detect_max_page(html: str, param: Optional[str] = None) -> int:
    """Return the highest page number referenced by any anchor in *html*.

    Looks for a ``?page=N`` style query parameter in every ``href``.
    Non-numeric and non-positive values are ignored.  Returns ``1`` when the
    page carries no pagination links.
    """
    name = param or settings.page_param
    soup = BeautifulSoup(html, "html.parser")
    highest = 1

    for anchor in soup.find_all("a", href=True):
        try:
            values = parse_qs(urlsplit(anchor["href"]).query).get(name, [])
        except ValueError:
            continue
        for value in values:
            try:
                number = int(value.strip())
            except ValueError:
                continue
            if number > highest:
                highest = number

    return highest
