"""Search package: crawl planning, orchestration, dedupe & the invocation service."""

from moviefinder.search.dedupe import dedupe_links
from moviefinder.search.orchestrator import scan_years
from moviefinder.search.planner import listing_url, plan_pages, plan_years
from moviefinder.search.service import SearchInput, SearchResponse, search_movie_links

__all__ = [
    "dedupe_links",
    "scan_years",
    "listing_url",
    "plan_pages",
    "plan_years",
    "SearchInput",
    "SearchResponse",
    "search_movie_links",
]
