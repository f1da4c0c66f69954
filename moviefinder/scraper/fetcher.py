"""Single-page HTTP fetcher with usable/unusable classification."""

from __future__ import annotations

import sys
from typing import Optional

import httpx

from moviefinder.config import settings
from moviefinder.scraper.models import FetchOutcome

_ACCEPT = "text/html,application/xhtml+xml"


def default_headers() -> dict[str, str]:
    """Browser-like request headers sent with every listing fetch."""
    return {"User-Agent": settings.user_agent, "Accept": _ACCEPT}


def make_client(
    timeout: Optional[float] = None,
    max_connections: Optional[int] = None,
) -> httpx.Client:
    """Return an ``httpx.Client`` configured for listing-page fetches.

    Callers own the client and must close it (use it as a context manager).
    """
    limits = httpx.Limits(max_connections=max_connections or settings.fetch_concurrency)
    return httpx.Client(
        headers=default_headers(),
        timeout=timeout if timeout is not None else settings.request_timeout,
        follow_redirects=True,
        limits=limits,
    )


def _classify(response: httpx.Response) -> FetchOutcome:
    if not response.is_success:
        return FetchOutcome("unusable", reason=f"HTTP {response.status_code}")
    body = response.text
    if not body or len(body) < settings.min_body_length:
        return FetchOutcome("unusable", reason=f"body too short ({len(body or '')} chars)")
    return FetchOutcome("ok", body=body)


def fetch_page(
    url: str,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> FetchOutcome:
    """Fetch *url* once and classify the response.

    Error pages and placeholders are usually near-empty, so a 2xx response
    whose body is shorter than ``settings.min_body_length`` is ``unusable``.
    Transport failures (DNS, refused connection, TLS, timeout) come back as
    ``error`` instead of raising; callers skip both states the same way.

    Args:
        url: Absolute URL to GET.
        timeout: Seconds before httpx cancels the request.  Defaults to
            ``settings.request_timeout``.
        client: Optional shared client.  When omitted a private client is
            opened and always closed before returning.
    """
    try:
        if client is None:
            with make_client(timeout=timeout, max_connections=1) as own:
                response = own.get(url)
        else:
            response = client.get(
                url,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        print(f"[FETCH] ✗ {url}: {type(exc).__name__}: {exc}", file=sys.stderr)
        return FetchOutcome("error", reason=f"{type(exc).__name__}: {exc}")

    outcome = _classify(response)
    if not outcome.ok:
        print(f"[FETCH] unusable {url}: {outcome.reason}", file=sys.stderr)
    return outcome
