"""Crawl planning: which years and listing pages to visit."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from moviefinder.config import PAGE_CEILING, settings
from moviefinder.scraper.models import CandidatePage, SiteContext


def plan_years(today: date, lookback: int) -> List[int]:
    """Return the years to scan, newest first.

    Next year comes first because sites list a handful of early releases
    ahead of time, then the current year, then *lookback* past years.
    """
    current = today.year
    return [current + 1, current] + [current - i for i in range(1, max(lookback, 0) + 1)]


def listing_url(
    base_url: str,
    year: int,
    page: int = 1,
    language: Optional[str] = None,
) -> str:
    """Build the listing URL for *year*, e.g. ``{base}/tamil-2025-movies/?page=3``."""
    marker = language or settings.language_marker
    url = f"{base_url.rstrip('/')}/{marker}-{year}-movies/"
    if page > 1:
        url += f"?{settings.page_param}={page}"
    return url


def plan_pages(
    site: SiteContext,
    year: int,
    max_page: int,
    ceiling: int = PAGE_CEILING,
) -> List[CandidatePage]:
    """Return pages ``2..max_page`` of *year*, never past *ceiling*.

    Page 1 is not included: it has already been fetched to learn *max_page*.
    """
    last = min(max_page, ceiling, PAGE_CEILING)
    return [
        CandidatePage(url=listing_url(site.base_url, year, page), year=year, page_number=page)
        for page in range(2, last + 1)
    ]
