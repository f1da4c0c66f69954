"""Centralised settings for moviefinder.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

# Hard upper bound on listing pages per year, whatever the site or env says.
PAGE_CEILING = 50


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "15.0"))
    )
    min_body_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_BODY_LENGTH", "200"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/121.0.0.0 Safari/537.36",
        )
    )
    fetch_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_CONCURRENCY", "10"))
    )

    # ------------------------------------------------------------------
    # Crawl plan
    # ------------------------------------------------------------------
    language_marker: str = field(
        default_factory=lambda: os.environ.get("LISTING_LANGUAGE", "tamil")
    )
    year_lookback: int = field(
        default_factory=lambda: int(os.environ.get("YEAR_LOOKBACK", "3"))
    )
    max_pages_per_year: int = field(
        default_factory=lambda: min(
            int(os.environ.get("MAX_PAGES_PER_YEAR", str(PAGE_CEILING))), PAGE_CEILING
        )
    )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    entry_selector: str = field(
        default_factory=lambda: os.environ.get("ENTRY_SELECTOR", "div.f a")
    )
    page_param: str = field(
        default_factory=lambda: os.environ.get("PAGE_PARAM", "page")
    )

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    default_max_results: int = 10
    max_results_cap: int = PAGE_CEILING
    site_search_fallback: bool = field(
        default_factory=lambda: _env_flag("SITE_SEARCH_FALLBACK")
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    debug: bool = field(default_factory=lambda: _env_flag("MOVIEFINDER_DEBUG"))


# Module-level singleton, import this everywhere:
#   from moviefinder.config import settings
settings = Settings()
