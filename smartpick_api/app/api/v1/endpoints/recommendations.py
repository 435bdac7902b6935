"""
API endpoints for recommendations.

Recommendations can be listed by anyone, filtered by query and/or
author.  Posting one requires a verified identity and bumps the
referenced query's counter; deleting one is reserved to its author and
decrements the counter again.  ``/recommendationsForUser`` shows the
caller everything recommended on their own queries.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from smartpick_api.app.core.db import RecordStore, get_store
from smartpick_api.app.core.exceptions import SmartPickError
from smartpick_api.app.core.security import CurrentUser, get_current_user
from smartpick_api.app.schemas.common import InsertResult, MessageResponse
from smartpick_api.app.schemas.recommendation import (
    RecommendationCreate,
    RecommendationRead,
    UserRecommendationRead,
)
from smartpick_api.app.services.recommendation_service import RecommendationService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_recommendation_service(store: RecordStore = Depends(get_store)) -> RecommendationService:
    return RecommendationService(store)


@router.post(
    "/recommendations",
    response_model=InsertResult,
    status_code=status.HTTP_201_CREATED,
    summary="Recommend a product for a query",
)
async def create_recommendation(
    data: RecommendationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> InsertResult:
    """Store a recommendation authored by the caller.

    The referenced query's ``recommendationCount`` is incremented
    afterwards; an unknown ``queryId`` is tolerated.
    """
    try:
        return await run_in_threadpool(service.create_recommendation, data.model_dump(), current_user)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to create recommendation")
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/recommendations",
    response_model=List[RecommendationRead],
    summary="List recommendations",
)
async def list_recommendations(
    query_id: Optional[str] = Query(None, alias="queryId"),
    user_email: Optional[str] = Query(None, alias="userEmail"),
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[RecommendationRead]:
    """List recommendations, optionally filtered by ``queryId`` and ``userEmail``."""
    try:
        return await run_in_threadpool(service.list_recommendations, query_id, user_email)
    except Exception as e:
        logger.exception("Failed to list recommendations")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete(
    "/recommendations/{recommendation_id}",
    response_model=MessageResponse,
    summary="Delete a recommendation",
)
async def delete_recommendation(
    recommendation_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> MessageResponse:
    """Delete a recommendation authored by the caller.

    Returns 404 if it does not exist and 403 if someone else wrote it.
    """
    try:
        await run_in_threadpool(service.delete_recommendation, recommendation_id, current_user)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to delete recommendation %s", recommendation_id)
        raise HTTPException(status_code=500, detail=str(e))
    return MessageResponse(message="Recommendation deleted successfully")


@router.get(
    "/recommendationsForUser",
    response_model=List[UserRecommendationRead],
    summary="Recommendations on the caller's queries",
)
async def recommendations_for_user(
    current_user: CurrentUser = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[UserRecommendationRead]:
    """Return recommendations on the caller's queries, each with its ``queryTitle``."""
    try:
        return await run_in_threadpool(service.recommendations_for_user, current_user)
    except Exception as e:
        logger.exception("Failed to load recommendations for %s", current_user.email)
        raise HTTPException(status_code=500, detail=str(e))
