"""
API endpoints for queries.

Anyone may browse queries and the top‑ranked list.  Creating a query
requires a verified identity, which becomes the query's owner; only
that owner may delete it.  The manual ``/recommend`` counter bump is
anonymous unless the deployment turns ``ALLOW_ANONYMOUS_RECOMMEND``
off.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from smartpick_api.app.core.db import RecordStore, get_store
from smartpick_api.app.core.exceptions import SmartPickError
from smartpick_api.app.core.security import CurrentUser, get_current_user, get_recommend_caller
from smartpick_api.app.schemas.common import InsertResult, MessageResponse, UpdateResult
from smartpick_api.app.schemas.query import QueryCreate, QueryRead
from smartpick_api.app.services.query_service import QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_query_service(store: RecordStore = Depends(get_store)) -> QueryService:
    return QueryService(store)


@router.post(
    "/queries",
    response_model=InsertResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a query",
)
async def create_query(
    data: QueryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: QueryService = Depends(get_query_service),
) -> InsertResult:
    """Create a new query owned by the caller.

    ``email`` and ``name`` come from the verified token; ``date`` and a
    zero ``recommendationCount`` are set by the server.
    """
    try:
        return await run_in_threadpool(service.create_query, data.model_dump(), current_user)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to create query")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/queries", response_model=List[QueryRead], summary="List queries")
async def list_queries(
    service: QueryService = Depends(get_query_service),
) -> List[QueryRead]:
    """Return every query, unfiltered and unpaginated."""
    try:
        return await run_in_threadpool(service.list_queries)
    except Exception as e:
        logger.exception("Failed to list queries")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/queries/{query_id}", response_model=QueryRead, summary="Get a single query")
async def get_query(
    query_id: str,
    service: QueryService = Depends(get_query_service),
) -> QueryRead:
    """Retrieve a single query by its ID.

    Returns 400 for a malformed ID and 404 if the query does not exist.
    """
    try:
        return await run_in_threadpool(service.get_query, query_id)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to fetch query %s", query_id)
        raise HTTPException(status_code=500, detail=str(e))


@router.patch(
    "/queries/{query_id}/recommend",
    response_model=UpdateResult,
    summary="Increment a query's recommendation count",
)
async def recommend_query(
    query_id: str,
    caller: Optional[CurrentUser] = Depends(get_recommend_caller),
    service: QueryService = Depends(get_query_service),
) -> UpdateResult:
    """Add one to ``recommendationCount`` without storing a recommendation."""
    try:
        return await run_in_threadpool(service.increment_recommendation_count, query_id)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to bump recommendation count of query %s", query_id)
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/queries/{query_id}", response_model=MessageResponse, summary="Delete a query")
async def delete_query(
    query_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: QueryService = Depends(get_query_service),
) -> MessageResponse:
    """Delete a query.

    Only the owner may delete a query; others receive 403.  The query's
    recommendations are left in place.
    """
    try:
        await run_in_threadpool(service.delete_query, query_id, current_user)
    except SmartPickError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Failed to delete query %s", query_id)
        raise HTTPException(status_code=500, detail=str(e))
    return MessageResponse(message="Query deleted successfully")


@router.get("/top-queries", response_model=List[QueryRead], summary="Most recommended queries")
async def top_queries(
    service: QueryService = Depends(get_query_service),
) -> List[QueryRead]:
    """Return up to three queries with the highest ``recommendationCount``."""
    try:
        return await run_in_threadpool(service.top_queries)
    except Exception as e:
        logger.exception("Failed to compute top queries")
        raise HTTPException(status_code=500, detail=str(e))
