"""Scraper package — page fetch, link extraction & pagination detection."""

from moviefinder.scraper.extractor import SlugRule, extract_links, matches_query
from moviefinder.scraper.fetcher import fetch_page
from moviefinder.scraper.models import (
    CandidatePage,
    FetchOutcome,
    LinkResult,
    Query,
    SiteContext,
)
from moviefinder.scraper.pagination import detect_max_page

__all__ = [
    "fetch_page",
    "extract_links",
    "matches_query",
    "detect_max_page",
    "SlugRule",
    "CandidatePage",
    "FetchOutcome",
    "LinkResult",
    "Query",
    "SiteContext",
]
