"""Order-preserving deduplication of link results."""

from __future__ import annotations

from typing import Iterable, List

from moviefinder.scraper.models import LinkResult


def dedupe_links(links: Iterable[LinkResult]) -> List[LinkResult]:
    """Drop repeated URLs, keeping the first occurrence (and its title)."""
    seen: set[str] = set()
    unique: List[LinkResult] = []
    for link in links:
        if link.url not in seen:
            seen.add(link.url)
            unique.append(link)
    return unique
