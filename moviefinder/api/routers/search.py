"""Search endpoint.

Routes
------
POST /search   Body: {"baseUrl": "https://...", "query": "...", "maxResults": 10}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from moviefinder.search.service import SearchInput, SearchResponse, search_movie_links

router = APIRouter()


@router.post("", response_model=SearchResponse, response_model_by_alias=True)
def search(body: SearchInput) -> Any:
    """Crawl the site's yearly listings and return links matching ``query``.

    Invalid bodies are rejected with 422 before any page is fetched.  An
    empty ``results`` list with ``count == 0`` means nothing matched.
    """
    return search_movie_links(body)
