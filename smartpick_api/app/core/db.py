"""
MongoDB integration for the two SmartPick collections.

This module provides the ``RecordStore`` wrapper around a
``pymongo.MongoClient``, a FastAPI dependency returning the store
attached to the running application (``get_store``) and small helpers
for converting identifiers and documents between BSON and JSON.

The store is created once per application and handed to the services
explicitly; nothing in the request path reaches for a module‑level
client.  Tests inject a ``mongomock.MongoClient`` in place of a real
connection.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.server_api import ServerApi

from .exceptions import InvalidIdentifierError

logger = logging.getLogger(__name__)

QUERIES_COLLECTION = "queries"
RECOMMENDATIONS_COLLECTION = "recommendations"


class RecordStore:
    """Handle to the ``queries`` and ``recommendations`` collections."""

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "smartPickDB",
        client: Optional[Any] = None,
    ) -> None:
        self.uri = uri
        self.database_name = database_name
        self._client = client
        self._owns_client = client is None
        self.queries: Optional[Collection] = None
        self.recommendations: Optional[Collection] = None

    def connect(self) -> None:
        """Open the client (if needed), bind collections and ensure indexes."""
        if self._client is None:
            self._client = MongoClient(
                self.uri,
                server_api=ServerApi("1", strict=True, deprecation_errors=True),
            )
        db = self._client[self.database_name]
        self.queries = db[QUERIES_COLLECTION]
        self.recommendations = db[RECOMMENDATIONS_COLLECTION]
        self.ensure_indexes()
        logger.info("Connected to MongoDB database %s", self.database_name)

    def ensure_indexes(self) -> None:
        # Sorting for top queries and the lookups behind the list filters.
        self.queries.create_index([("recommendationCount", DESCENDING)])
        self.queries.create_index([("email", ASCENDING)])
        self.recommendations.create_index([("queryId", ASCENDING)])
        self.recommendations.create_index([("userEmail", ASCENDING)])

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
            logger.info("Closed MongoDB connection")


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency returning the store bound at startup."""
    return request.app.state.store


def parse_object_id(value: Any) -> ObjectId:
    """Parse ``value`` as an ``ObjectId`` or raise ``InvalidIdentifierError``."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(value)


def try_object_id(value: Any) -> Optional[ObjectId]:
    """Like ``parse_object_id`` but returns ``None`` for malformed values."""
    try:
        return parse_object_id(value)
    except InvalidIdentifierError:
        return None


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Return a JSON‑friendly copy of a MongoDB document.

    ``ObjectId`` values become their hex strings and ``datetime``
    values become ISO‑8601 strings, recursively through nested
    dictionaries and lists.
    """
    return {key: _serialize_value(value) for key, value in doc.items()}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value


def now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
