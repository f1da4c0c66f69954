"""Data models for the crawl-and-match pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

import httpx

FetchStatus = Literal["ok", "unusable", "error"]


def normalize_url(url: str) -> str:
    """Return *url* with a lowercase scheme and host and no default port.

    ``https://MoviesDA.test:443/x`` and ``https://moviesda.test/x`` name the
    same page and normalise to the same string.

    Raises:
        httpx.InvalidURL: If *url* cannot be parsed.
    """
    parsed = httpx.URL(url)
    if parsed.scheme != parsed.scheme.lower():
        parsed = parsed.copy_with(scheme=parsed.scheme.lower())
    return str(parsed)


def origin_of(url: str) -> str:
    """Return the normalised ``scheme://host[:port]`` of *url*.

    The port is omitted when it is the scheme's default (80/443).

    Raises:
        httpx.InvalidURL: If *url* cannot be parsed.
    """
    parsed = httpx.URL(url)
    host = parsed.host
    if ":" in host:
        host = f"[{host}]"
    origin = f"{parsed.scheme.lower()}://{host}"
    if parsed.port is not None:
        origin += f":{parsed.port}"
    return origin



@dataclass(frozen=True)
class Query:
    """A title query and its lowercase whitespace-split words."""

    raw_text: str
    words: Tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "Query":
        return cls(raw_text=text, words=tuple(text.lower().split()))


@dataclass(frozen=True)
class SiteContext:
    """The site being crawled for one invocation."""

    base_url: str
    origin: str
    year_lookback: int

    @classmethod
    def from_base_url(cls, base_url: str, year_lookback: int) -> "SiteContext":
        base = base_url.strip().rstrip("/")
        return cls(base_url=base, origin=origin_of(base), year_lookback=year_lookback)


@dataclass(frozen=True)
class CandidatePage:
    """One listing page scheduled for fetching."""

    url: str
    year: int
    page_number: int = 1


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a single page fetch.

    ``body`` is only populated when ``status == "ok"``; ``reason`` carries a
    short diagnostic for the other two states.
    """

    status: FetchStatus
    body: Optional[str] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class LinkResult:
    """A matched detail-page link.  Identity is the URL alone."""

    title: str = field(compare=False)
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url}
