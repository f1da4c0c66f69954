"""FastAPI application factory.

Routers
-------
    /search    — movie link search (POST, JSON body)
    /health    — liveness probe
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moviefinder import __version__
from moviefinder.api.routers import search as search_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="moviefinder API",
        description=(
            "Search a year-indexed movie listing site for a title and return "
            "links to matching detail pages."
        ),
        version=__version__,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(search_router.router, prefix="/search", tags=["search"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn moviefinder.api.app:app --reload
app = create_app()
