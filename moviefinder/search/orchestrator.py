"""Year-by-year crawl driver.

Years are scanned strictly one after another, newest first.  Within a year,
page 1 is fetched on its own (it tells us how many pages exist); pages
``2..N`` then go through a bounded ``ThreadPoolExecutor`` so at most
``settings.fetch_concurrency`` requests hit the site at once.  Results are
collected in planned page order, never completion order.
"""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from functools import partial, reduce
from typing import Callable, Iterable, List, Optional

from moviefinder.config import PAGE_CEILING, settings
from moviefinder.scraper.extractor import extract_links
from moviefinder.scraper.fetcher import fetch_page, make_client
from moviefinder.scraper.models import CandidatePage, FetchOutcome, LinkResult, Query, SiteContext
from moviefinder.scraper.pagination import detect_max_page
from moviefinder.search.planner import listing_url, plan_pages

Fetch = Callable[[str], FetchOutcome]
Extract = Callable[[str, SiteContext, Query], List[LinkResult]]


def _log(message: str) -> None:
    print(f"[CRAWL] {message}", file=sys.stderr)


def _process_page(
    page: CandidatePage,
    site: SiteContext,
    query: Query,
    fetch: Fetch,
    extract: Extract,
) -> List[LinkResult]:
    """Fetch and extract one page.  Any failure yields no links."""
    try:
        outcome = fetch(page.url)
        if not outcome.ok:
            return []
        return extract(outcome.body, site, query)
    except Exception as exc:
        _log(f"✗ {page.url} (page {page.page_number}) failed: {exc!r}")
        return []


def _scan_year(
    year: int,
    site: SiteContext,
    query: Query,
    fetch: Fetch,
    extract: Extract,
    concurrency: int,
    ceiling: int,
) -> List[LinkResult]:
    first_url = listing_url(site.base_url, year)
    try:
        outcome = fetch(first_url)
        if not outcome.ok:
            _log(f"{year}: first page unavailable ({outcome.reason}), skipping year.")
            return []
        links = list(extract(outcome.body, site, query))
        max_page = min(detect_max_page(outcome.body), ceiling)
    except Exception as exc:
        _log(f"{year}: could not process {first_url}: {exc!r}, skipping year.")
        return []

    pages = plan_pages(site, year, max_page, ceiling)
    if pages:
        worker = partial(_process_page, site=site, query=query, fetch=fetch, extract=extract)
        with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="crawl") as pool:
            # map() yields in submission order, so page order is preserved.
            per_page = list(pool.map(worker, pages))
        for found in per_page:
            links.extend(found)

    _log(f"{year}: {len(pages) + 1} page(s) scanned, {len(links)} match(es).")
    return links


def scan_years(
    years: Iterable[int],
    site: SiteContext,
    query: Query,
    fetch: Optional[Fetch] = None,
    extract: Extract = extract_links,
    concurrency: Optional[int] = None,
    ceiling: Optional[int] = None,
) -> List[LinkResult]:
    """Crawl every year in *years* and return all matched links in discovery order.

    The full year range is always scanned; there is no early exit once
    matches are found.  Duplicates are kept here and removed later by
    :func:`moviefinder.search.dedupe.dedupe_links`.

    Args:
        years: Years in planner order.
        site: Target site.
        query: Parsed title query.
        fetch: Page fetcher.  Defaults to :func:`fetch_page` bound to one
            shared ``httpx.Client`` that is closed before returning.
        extract: Per-page extractor.
        concurrency: Worker-pool size for pages ``2..N``.
        ceiling: Maximum page number per year (capped at 50).
    """
    workers = max(concurrency or settings.fetch_concurrency, 1)
    limit = min(ceiling or settings.max_pages_per_year, PAGE_CEILING)

    def run(fetcher: Fetch) -> List[LinkResult]:
        def step(acc: List[LinkResult], year: int) -> List[LinkResult]:
            acc.extend(_scan_year(year, site, query, fetcher, extract, workers, limit))
            return acc

        return reduce(step, years, [])

    if fetch is not None:
        return run(fetch)

    with make_client(max_connections=workers) as client:
        return run(partial(fetch_page, client=client))
