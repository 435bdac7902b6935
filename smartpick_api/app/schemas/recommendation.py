"""
Pydantic schemas for recommendations.

A recommendation is one user's suggestion attached to a query via
``queryId``.  Only the presence of ``queryId`` is checked; the rest of
the payload is stored as sent.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecommendationCreate(BaseModel):
    """Schema for creating a recommendation."""

    model_config = ConfigDict(extra="allow")

    queryId: str = Field(..., description="Identifier of the query being answered")


class RecommendationRead(BaseModel):
    """Schema for reading a recommendation from the API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    queryId: Optional[str] = None
    userEmail: Optional[str] = None
    date: Optional[str] = None


class UserRecommendationRead(RecommendationRead):
    """Recommendation joined with the title of the caller's query.

    ``queryTitle`` is ``None`` when the referenced query no longer
    matches one of the caller's queries.
    """

    queryTitle: Optional[Any] = None
