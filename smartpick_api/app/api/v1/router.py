"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers.  Each one declares its full
paths (``/queries``, ``/top-queries``, ``/recommendationsForUser``,
...) because the public URLs do not share a common prefix per domain.
"""

from fastapi import APIRouter

from .endpoints import info, queries, recommendations

router = APIRouter()

router.include_router(info.router, tags=["info"])
router.include_router(queries.router, tags=["queries"])
router.include_router(recommendations.router, tags=["recommendations"])
