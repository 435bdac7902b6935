"""
Business logic for queries.

This service manages the ``queries`` collection: creation on behalf of
a verified user, listing, retrieval, owner‑only deletion, the manual
recommendation counter bump and the top‑N ranking.  The
``recommendationCount`` field is otherwise maintained by
``RecommendationService`` as recommendations come and go.

Deleting a query leaves its recommendations in place.  They remain
listable and show up with ``queryTitle`` unset in per‑user joins.
"""

import logging
from typing import Any, Dict, List

from pymongo import DESCENDING

from ..core.db import RecordStore, now_iso, parse_object_id, serialize_document
from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.security import CurrentUser

logger = logging.getLogger(__name__)

TOP_QUERIES_LIMIT = 3


class QueryService:
    """Service for handling recommendation queries."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def create_query(self, payload: Dict[str, Any], user: CurrentUser) -> Dict[str, Any]:
        """Insert a new query owned by ``user``.

        The owner fields, creation date and a zero counter are stamped
        server‑side and take precedence over anything in ``payload``.
        Returns the insert acknowledgement.
        """
        document = {key: value for key, value in payload.items() if key != "_id"}
        document["date"] = now_iso()
        document["recommendationCount"] = 0
        document["email"] = user.email
        document["name"] = user.name or user.email
        result = self.store.queries.insert_one(document)
        logger.info("User %s created query %s", user.email, result.inserted_id)
        return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}

    def list_queries(self) -> List[Dict[str, Any]]:
        return [serialize_document(doc) for doc in self.store.queries.find()]

    def get_query(self, query_id: str) -> Dict[str, Any]:
        """Retrieve a single query by ID.

        Raises ``InvalidIdentifierError`` for malformed ids and
        ``NotFoundError`` when no such query exists.
        """
        doc = self.store.queries.find_one({"_id": parse_object_id(query_id)})
        if doc is None:
            raise NotFoundError("Query", query_id)
        return serialize_document(doc)

    def increment_recommendation_count(self, query_id: str) -> Dict[str, Any]:
        """Bump the counter of ``query_id`` by one.

        The increment is unconditional and not tied to any stored
        recommendation.  An unknown id is not an error; the result
        simply reports ``matchedCount == 0``.
        """
        result = self.store.queries.update_one(
            {"_id": parse_object_id(query_id)},
            {"$inc": {"recommendationCount": 1}},
        )
        logger.info("Manual recommendation bump on query %s (matched=%s)", query_id, result.matched_count)
        return {
            "acknowledged": result.acknowledged,
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
            "upsertedId": str(result.upserted_id) if result.upserted_id is not None else None,
        }

    def delete_query(self, query_id: str, user: CurrentUser) -> None:
        """Delete a query owned by ``user``.

        Existence is checked before ownership, so a query belonging to
        someone else always raises ``ForbiddenError`` rather than
        ``NotFoundError``.
        """
        object_id = parse_object_id(query_id)
        doc = self.store.queries.find_one({"_id": object_id})
        if doc is None:
            raise NotFoundError("Query", query_id)
        if doc.get("email") != user.email:
            raise ForbiddenError("Forbidden: Not your query")
        self.store.queries.delete_one({"_id": object_id})
        logger.info("User %s deleted query %s", user.email, query_id)

    def top_queries(self, limit: int = TOP_QUERIES_LIMIT) -> List[Dict[str, Any]]:
        """Return the ``limit`` queries with the most recommendations.

        Queries with equal counts come back in whatever order the
        store yields them; that order is not guaranteed to be stable.
        """
        cursor = self.store.queries.find().sort("recommendationCount", DESCENDING).limit(limit)
        return [serialize_document(doc) for doc in cursor]
