"""Tests for the search package: planner, dedupe and the year-by-year crawl.

The orchestrator tests inject a fake ``fetch`` callable backed by a dict of
URL → HTML so page scheduling can be asserted exactly.  One test drives the
default ``httpx`` path through ``respx`` instead.
"""

from __future__ import annotations

import threading
import time
from datetime import date

import httpx
import respx

from moviefinder.scraper.models import CandidatePage, FetchOutcome, LinkResult, Query, SiteContext
from moviefinder.search.dedupe import dedupe_links
from moviefinder.search.orchestrator import scan_years
from moviefinder.search.planner import listing_url, plan_pages, plan_years


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_BASE = "https://moviesda.test"
_SITE = SiteContext.from_base_url(_BASE, year_lookback=1)
_FILLER = "<p>" + "Latest Tamil movies, updated daily. " * 8 + "</p>"


def _listing(*entries: tuple[str, str], last_page: int = 1) -> str:
    items = "".join(f'<div class="f"><a href="{href}">{text}</a></div>' for href, text in entries)
    pager = "".join(f'<a href="?page={n}">{n}</a>' for n in range(2, last_page + 1))
    return f"<html><body>{_FILLER}{items}<div class=\"pagination\">{pager}</div></body></html>"


class _FakeSite:
    """URL → HTML lookup standing in for ``fetch_page``; unknown URLs are 404."""

    def __init__(self, pages: dict[str, str], fail: set[str] | None = None) -> None:
        self.pages = pages
        self.fail = fail or set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> FetchOutcome:
        with self._lock:
            self.calls.append(url)
        if url in self.fail:
            raise RuntimeError(f"boom: {url}")
        html = self.pages.get(url)
        if html is None:
            return FetchOutcome("unusable", reason="HTTP 404")
        return FetchOutcome("ok", body=html)


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------

class TestPlanYears:
    def test_next_current_then_lookback(self) -> None:
        assert plan_years(date(2025, 3, 1), 3) == [2026, 2025, 2024, 2023, 2022]

    def test_zero_lookback(self) -> None:
        assert plan_years(date(2025, 12, 31), 0) == [2026, 2025]


class TestListingUrl:
    def test_first_page_has_no_parameter(self) -> None:
        assert listing_url(_BASE, 2025) == f"{_BASE}/tamil-2025-movies/"

    def test_later_pages_carry_page_parameter(self) -> None:
        assert listing_url(_BASE, 2025, 3) == f"{_BASE}/tamil-2025-movies/?page=3"

    def test_trailing_slash_on_base(self) -> None:
        assert listing_url(_BASE + "/", 2024) == f"{_BASE}/tamil-2024-movies/"

    def test_language_marker(self) -> None:
        assert listing_url(_BASE, 2024, language="telugu") == f"{_BASE}/telugu-2024-movies/"


class TestPlanPages:
    def test_single_page_year_plans_nothing(self) -> None:
        assert plan_pages(_SITE, 2025, 1) == []

    def test_pages_two_to_max(self) -> None:
        pages = plan_pages(_SITE, 2025, 4)
        assert [p.page_number for p in pages] == [2, 3, 4]
        assert pages[0] == CandidatePage(url=f"{_BASE}/tamil-2025-movies/?page=2", year=2025, page_number=2)

    def test_clamped_to_ceiling(self) -> None:
        pages = plan_pages(_SITE, 2025, 9999)
        assert len(pages) == 49
        assert pages[-1].page_number == 50

    def test_ceiling_cannot_exceed_absolute_limit(self) -> None:
        assert len(plan_pages(_SITE, 2025, 500, ceiling=500)) == 49


# ---------------------------------------------------------------------------
# Dedupe
# ---------------------------------------------------------------------------

class TestDedupeLinks:
    _A = LinkResult(title="Leo", url=f"{_BASE}/leo-movie/")
    _A2 = LinkResult(title="LEO (2023)", url=f"{_BASE}/leo-movie/")
    _B = LinkResult(title="Jailer", url=f"{_BASE}/jailer-movie/")

    def test_removes_duplicate_urls(self) -> None:
        out = dedupe_links([self._A, self._B, self._A2, self._B])
        assert [l.url for l in out] == [self._A.url, self._B.url]

    def test_first_title_wins(self) -> None:
        out = dedupe_links([self._A2, self._A])
        assert out[0].title == "LEO (2023)"

    def test_idempotent(self) -> None:
        once = dedupe_links([self._A, self._A2, self._B, self._A])
        assert dedupe_links(once) == once
        assert [l.title for l in dedupe_links(once)] == [l.title for l in once]

    def test_empty(self) -> None:
        assert dedupe_links([]) == []


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class TestScanYears:
    _QUERY = Query.from_text("dhandoraa")

    def test_failed_first_page_skips_year_without_pagination(self) -> None:
        site = _FakeSite({
            listing_url(_BASE, 2025): _listing(("/dhandoraa-2025-tamil-movie/", "Dhandoraa 2025")),
        })

        links = scan_years([2026, 2025], _SITE, self._QUERY, fetch=site)

        assert site.calls == [listing_url(_BASE, 2026), listing_url(_BASE, 2025)]
        assert [l.url for l in links] == [f"{_BASE}/dhandoraa-2025-tamil-movie/"]

    def test_pagination_is_clamped_to_fifty_pages(self) -> None:
        first = _listing().replace("</body>", '<a href="?page=9999">Last</a></body>')
        pages = {listing_url(_BASE, 2025): first}
        for n in range(2, 100):
            pages[listing_url(_BASE, 2025, n)] = _listing()
        site = _FakeSite(pages)

        scan_years([2025], _SITE, self._QUERY, fetch=site)

        assert len(site.calls) == 50
        assert listing_url(_BASE, 2025, 50) in site.calls
        assert listing_url(_BASE, 2025, 51) not in site.calls

    def test_page_order_kept_regardless_of_completion_order(self) -> None:
        pages = {listing_url(_BASE, 2025): _listing(("/dhandoraa-part-1-movie/", "Dhandoraa 1"), last_page=4)}
        for n in range(2, 5):
            pages[listing_url(_BASE, 2025, n)] = _listing((f"/dhandoraa-part-{n}-movie/", f"Dhandoraa {n}"))
        base_fetch = _FakeSite(pages)

        def slow_early_pages(url: str) -> FetchOutcome:
            # page 2 finishes last, page 4 first
            if "page=2" in url:
                time.sleep(0.2)
            elif "page=3" in url:
                time.sleep(0.1)
            return base_fetch(url)

        links = scan_years([2025], _SITE, self._QUERY, fetch=slow_early_pages, concurrency=3)

        assert [l.title for l in links] == ["Dhandoraa 1", "Dhandoraa 2", "Dhandoraa 3", "Dhandoraa 4"]

    def test_single_page_failure_does_not_abort_year(self) -> None:
        pages = {listing_url(_BASE, 2025): _listing(last_page=3)}
        pages[listing_url(_BASE, 2025, 3)] = _listing(("/dhandoraa-2025-tamil-movie/", "Dhandoraa"))
        site = _FakeSite(pages, fail={listing_url(_BASE, 2025, 2)})

        links = scan_years([2025], _SITE, self._QUERY, fetch=site)

        assert [l.title for l in links] == ["Dhandoraa"]

    def test_all_years_scanned_even_after_matches(self) -> None:
        site = _FakeSite({
            listing_url(_BASE, y): _listing(("/dhandoraa-2025-tamil-movie/", f"Dhandoraa {y}"))
            for y in (2026, 2025, 2024)
        })

        links = scan_years([2026, 2025, 2024], _SITE, self._QUERY, fetch=site)

        assert site.calls == [listing_url(_BASE, y) for y in (2026, 2025, 2024)]
        assert [l.title for l in links] == ["Dhandoraa 2026", "Dhandoraa 2025", "Dhandoraa 2024"]

    def test_concurrency_is_bounded(self) -> None:
        pages = {listing_url(_BASE, 2025): _listing(last_page=12)}
        for n in range(2, 13):
            pages[listing_url(_BASE, 2025, n)] = _listing()
        base_fetch = _FakeSite(pages)
        state = {"active": 0, "peak": 0}
        lock = threading.Lock()

        def tracking_fetch(url: str) -> FetchOutcome:
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            try:
                time.sleep(0.02)
                return base_fetch(url)
            finally:
                with lock:
                    state["active"] -= 1

        scan_years([2025], _SITE, self._QUERY, fetch=tracking_fetch, concurrency=3)

        assert len(base_fetch.calls) == 12
        assert state["peak"] <= 3

    def test_default_fetch_uses_httpx(self) -> None:
        pages = {
            ("/tamil-2025-movies/", None): _listing(("/dhandoraa-2025-tamil-movie/", "Dhandoraa"), last_page=2),
            ("/tamil-2025-movies/", "2"): _listing(("/dhandoraa-2-tamil-movie/", "Dhandoraa 2")),
        }

        def handler(request: httpx.Request) -> httpx.Response:
            html = pages.get((request.url.path, request.url.params.get("page")))
            if html is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, text=html)

        with respx.mock:
            route = respx.route(host="moviesda.test").mock(side_effect=handler)
            links = scan_years([2026, 2025], _SITE, self._QUERY)

        assert route.call_count == 3
        assert [l.title for l in links] == ["Dhandoraa", "Dhandoraa 2"]
