"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from moviefinder.api import app

    uvicorn moviefinder.api:app --reload
"""

from moviefinder.api.app import app

__all__ = ["app"]
