"""
Response shapes shared by both resources.

Write endpoints answer with the store's acknowledgement rather than
the stored document, mirroring the MongoDB driver results
(``insertedId``, ``matchedCount`` and so on).
"""

from typing import Optional

from pydantic import BaseModel, Field


class InsertResult(BaseModel):
    """Acknowledgement of a single insert."""

    acknowledged: bool = True
    insertedId: str = Field(..., description="Identifier assigned by the store")


class UpdateResult(BaseModel):
    """Acknowledgement of a single update."""

    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int
    upsertedId: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
