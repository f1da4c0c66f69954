"""Invocation entry point: validate input, run the pipeline, build the payload.

``search_movie_links`` is what every outer surface (HTTP API, CLI) calls.
Input is validated by :class:`SearchInput` before any network activity.
"""

from __future__ import annotations

import sys
from datetime import date
from typing import List, Optional
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from moviefinder.config import settings
from moviefinder.scraper.models import LinkResult, Query, SiteContext, origin_of
from moviefinder.search.dedupe import dedupe_links
from moviefinder.search.orchestrator import scan_years
from moviefinder.search.planner import plan_years
from moviefinder.search.site_search import search_site


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SearchInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(
        alias="baseUrl",
        description="Movie site base URL, e.g. https://moviesda15.com",
    )
    query: str = Field(min_length=1)
    max_results: int = Field(
        default=settings.default_max_results,
        alias="maxResults",
        ge=1,
        le=settings.max_results_cap,
        strict=True,
    )

    @field_validator("base_url")
    @classmethod
    def _absolute_http_url(cls, value: str) -> str:
        try:
            parts = urlsplit(value.strip())
        except ValueError as exc:
            raise ValueError(f"invalid URL: {exc}") from exc
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError("baseUrl must be an absolute http(s) URL")
        try:
            origin_of(value.strip())
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid URL: {exc}") from exc
        return value

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query is required")
        return value


class LinkOut(BaseModel):
    title: str
    url: str


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    base_url: str = Field(alias="baseUrl")
    count: int
    results: List[LinkOut]

    def to_payload(self) -> str:
        """Serialise as the tool's textual response."""
        return self.model_dump_json(by_alias=True, indent=2)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def find_links(
    params: SearchInput,
    today: Optional[date] = None,
    site_search: Optional[bool] = None,
) -> List[LinkResult]:
    """Run plan → crawl → (fallback) → dedupe → truncate for *params*."""
    site = SiteContext.from_base_url(params.base_url, settings.year_lookback)
    query = Query.from_text(params.query.strip())
    years = plan_years(today or date.today(), site.year_lookback)
    print(f"[SEARCH] {params.query!r} on {site.origin}, years {years}", file=sys.stderr)

    links = scan_years(years, site, query)

    fallback = settings.site_search_fallback if site_search is None else site_search
    if not links and fallback:
        links = search_site(site, query)

    unique = dedupe_links(links)
    limit = min(params.max_results, settings.max_results_cap)
    return unique[:limit]


def search_movie_links(
    params: SearchInput,
    today: Optional[date] = None,
    site_search: Optional[bool] = None,
) -> SearchResponse:
    """Search *params.base_url* for *params.query* and return the response payload.

    Finding nothing is not an error: the response has ``count == 0``.
    """
    links = find_links(params, today=today, site_search=site_search)
    return SearchResponse(
        query=params.query,
        base_url=params.base_url,
        count=len(links),
        results=[LinkOut(**link.to_dict()) for link in links],
    )
