"""
Pydantic schemas for queries.

A query is a user's request for product recommendations.  Apart from
the ownership and bookkeeping fields stamped by the server, its
content (title, product name, description, image URL, ...) is chosen
by the client and stored verbatim, so both schemas accept extra
fields.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryCreate(BaseModel):
    """Schema for creating a new query.

    Any JSON object is accepted.  ``email``, ``name``, ``date`` and
    ``recommendationCount`` are overwritten by the server.
    """

    model_config = ConfigDict(extra="allow")


class QueryRead(BaseModel):
    """Schema for reading a query from the API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    recommendationCount: int = 0
