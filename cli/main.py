"""moviefinder CLI: entry-point for running searches and the API server.

Usage:
    python cli/main.py --help

Commands:
    search    → crawl a site for a title and print the JSON payload
    serve     → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from moviefinder.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer
from pydantic import ValidationError

from moviefinder.config import settings

app = typer.Typer(
    name="moviefinder",
    help="Find a movie's detail page on a year-indexed listing site.",
    no_args_is_help=True,
)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "input"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------
@app.command("search")
def search(
    base_url: str = typer.Option(
        ..., "--base-url", help="Site base URL, e.g. https://moviesda15.com"
    ),
    query: str = typer.Option(..., help="Movie title to look for."),
    max_results: Optional[int] = typer.Option(
        None,
        "--max-results",
        help=f"1-{settings.max_results_cap}, default {settings.default_max_results}.",
    ),
    site_search: bool = typer.Option(
        settings.site_search_fallback,
        "--site-search/--no-site-search",
        help="Probe the site's own search pages when the crawl finds nothing.",
    ),
) -> None:
    """Crawl the yearly listings for QUERY and print the result payload as JSON."""
    from moviefinder.search.service import SearchInput, search_movie_links

    raw = {"baseUrl": base_url, "query": query}
    if max_results is not None:
        raw["maxResults"] = max_results
    try:
        params = SearchInput.model_validate(raw)
    except ValidationError as exc:
        typer.echo(f"[search] Invalid input: {_format_validation_error(exc)}", err=True)
        raise typer.Exit(2)

    response = search_movie_links(params, site_search=site_search)
    typer.echo(response.to_payload())


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
) -> None:
    """Run the HTTP API (POST /search) with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] moviefinder API on http://{host}:{port}", err=True)
    uvicorn.run("moviefinder.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
