"""
Liveness endpoint.

``GET /`` answers with a short plain‑text banner so load balancers
and humans can check the server is up without touching the database.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

LIVENESS_MESSAGE = "SmartPick Server is Running..."


@router.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def root() -> str:
    return LIVENESS_MESSAGE
