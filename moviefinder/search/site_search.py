"""Fallback: probe the site's own search endpoints.

Only used when the year crawl found nothing and the fallback is enabled.
Search-result pages do not use the listing wrapper, so every anchor on the
page is considered; the slug filter and query matching still apply.
"""

from __future__ import annotations

import sys
from functools import partial
from typing import Callable, List, Optional
from urllib.parse import quote

from moviefinder.scraper.extractor import SlugFilter, default_slug_filter, extract_links
from moviefinder.scraper.fetcher import fetch_page, make_client
from moviefinder.scraper.models import FetchOutcome, LinkResult, Query, SiteContext

Fetch = Callable[[str], FetchOutcome]


def _log(message: str) -> None:
    print(f"[SITE SEARCH] {message}", file=sys.stderr)


def site_search_urls(base_url: str, text: str) -> List[str]:
    """Return the candidate search URLs for *text*, in probe order."""
    base = base_url.rstrip("/")
    q = quote(text.strip(), safe="!'()*")
    return [
        f"{base}/search/{q}",
        f"{base}/?s={q}",
        f"{base}/search?search={q}",
        f"{base}/search?query={q}",
    ]


def _probe(
    urls: List[str],
    site: SiteContext,
    query: Query,
    fetch: Fetch,
    slug_filter: SlugFilter,
) -> List[LinkResult]:
    for url in urls:
        try:
            outcome = fetch(url)
            if not outcome.ok:
                continue
            links = extract_links(outcome.body, site, query, slug_filter=slug_filter, selector="a")
        except Exception as exc:
            _log(f"✗ {url} failed: {exc!r}, trying next endpoint.")
            continue
        _log(f"{url} → {len(links)} match(es).")
        return links
    _log("no search endpoint returned a usable page.")
    return []


def search_site(
    site: SiteContext,
    query: Query,
    fetch: Optional[Fetch] = None,
    slug_filter: SlugFilter = default_slug_filter,
) -> List[LinkResult]:
    """Extract matches from the first search endpoint that returns a usable page.

    A failing endpoint (unusable response or an exception while fetching or
    extracting) is skipped in favour of the next one.
    """
    urls = site_search_urls(site.base_url, query.raw_text)
    if fetch is not None:
        return _probe(urls, site, query, fetch, slug_filter)

    with make_client(max_connections=1) as client:
        return _probe(urls, site, query, partial(fetch_page, client=client), slug_filter)
