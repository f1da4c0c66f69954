"""Link extraction: turns one listing page into matched :class:`LinkResult`s.

Extraction is pure and synchronous given an HTML string; all I/O and
concurrency live in :mod:`moviefinder.search.orchestrator`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from moviefinder.config import settings
from moviefinder.scraper.models import LinkResult, Query, SiteContext, normalize_url, origin_of

# Predicate over a lowercased absolute URL: True when it looks like a detail page.
SlugFilter = Callable[[str], bool]


# ---------------------------------------------------------------------------
# Slug-shape filtering
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SlugRule:
    """Deny-then-allow marker rule for telling detail pages from listings.

    Listing and detail pages share a section name and differ only by a
    plural/singular suffix (``-movies/`` vs ``-movie/``).  Any ``deny``
    marker rejects the URL; otherwise at least one ``allow`` marker must be
    present.
    """

    deny: Tuple[str, ...] = ("-movies/",)
    allow: Tuple[str, ...] = ("-movie/", "-series/")

    def __call__(self, lower_url: str) -> bool:
        if any(marker in lower_url for marker in self.deny):
            return False
        return any(marker in lower_url for marker in self.allow)


default_slug_filter: SlugFilter = SlugRule()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _debug(message: str) -> None:
    if settings.debug:
        print(f"[EXTRACT] {message}", file=sys.stderr)


def _resolve(base_url: str, href: str) -> Optional[str]:
    """Resolve *href* against *base_url* and normalise it; ``None`` when unusable."""
    try:
        url = httpx.URL(urljoin(base_url + "/", href))
        if url.scheme.lower() not in ("http", "https") or not url.host:
            return None
        return normalize_url(str(url))
    except (ValueError, httpx.InvalidURL):
        return None


def matches_query(words: Sequence[str], text: str, url: str) -> bool:
    """Return ``True`` when every query word occurs in *text* or every word in *url*.

    Titles are often transliterated differently in the visible text and the
    slug, so either side matching on its own is enough.
    """
    lower_text = text.lower()
    lower_url = url.lower()
    return all(w in lower_text for w in words) or all(w in lower_url for w in words)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_links(
    html: str,
    site: SiteContext,
    query: Query,
    slug_filter: SlugFilter = default_slug_filter,
    selector: Optional[str] = None,
) -> List[LinkResult]:
    """Return the anchors in *html* that point at a detail page matching *query*.

    Only anchors inside the per-entry wrapper (``settings.entry_selector``,
    ``div.f a`` by default) are considered, which keeps navigation and
    footer links out of the results.  Anchors with an empty href or text,
    unresolvable hrefs, off-site links, and category pages are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[LinkResult] = []

    for anchor in soup.select(selector or settings.entry_selector):
        href = (anchor.get("href") or "").strip()
        text = anchor.get_text().strip()
        if not href or not text:
            continue

        url = _resolve(site.base_url, href)
        if url is None:
            continue
        try:
            if origin_of(url) != site.origin:
                continue
        except (ValueError, httpx.InvalidURL):
            continue

        lower_url = url.lower()
        if not slug_filter(lower_url):
            _debug(f"Skipping non-detail URL: {lower_url}")
            continue

        if matches_query(query.words, text, url):
            _debug(f"MATCH {text!r} -> {url}")
            links.append(LinkResult(title=text, url=url))
        elif query.words and query.words[0] in text.lower():
            _debug(f"Partial match {text!r} (needs all of {list(query.words)})")

    return links
