"""
Business logic for recommendations.

Recommendations live in their own collection and point at a query by
its string id (``queryId``).  Creating or deleting one also adjusts
the referenced query's ``recommendationCount``.  The two writes are
issued one after the other without a transaction: if the process dies
between them the counter drifts from the number of stored
recommendations, and nothing reconciles it afterwards.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.db import RecordStore, now_iso, parse_object_id, serialize_document, try_object_id
from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.security import CurrentUser

logger = logging.getLogger(__name__)


class RecommendationService:
    """Service for handling recommendations attached to queries."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _adjust_query_count(self, query_id: Any, delta: int) -> None:
        # Dangling or malformed references match nothing and are ignored.
        object_id = try_object_id(query_id)
        if object_id is None:
            logger.warning("Recommendation references malformed query id %r", query_id)
            return
        result = self.store.queries.update_one(
            {"_id": object_id},
            {"$inc": {"recommendationCount": delta}},
        )
        if result.matched_count == 0:
            logger.warning("Recommendation references missing query %s", query_id)

    def create_recommendation(self, payload: Dict[str, Any], user: CurrentUser) -> Dict[str, Any]:
        """Store a recommendation and bump its query's counter.

        ``queryId`` is not checked for existence; a recommendation for
        an unknown query is stored and the counter update is a no‑op.
        """
        document = {key: value for key, value in payload.items() if key != "_id"}
        document["date"] = now_iso()
        document["userEmail"] = user.email
        result = self.store.recommendations.insert_one(document)
        self._adjust_query_count(document.get("queryId"), 1)
        logger.info(
            "User %s recommended on query %s (recommendation %s)",
            user.email,
            document.get("queryId"),
            result.inserted_id,
        )
        return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}

    def list_recommendations(
        self,
        query_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """List recommendations, optionally filtered.

        Both filters are combined with AND; an empty or missing filter
        imposes no constraint.
        """
        filters: Dict[str, Any] = {}
        if query_id:
            filters["queryId"] = query_id
        if user_email:
            filters["userEmail"] = user_email
        return [serialize_document(doc) for doc in self.store.recommendations.find(filters)]

    def delete_recommendation(self, recommendation_id: str, user: CurrentUser) -> None:
        """Delete a recommendation owned by ``user`` and decrement its query.

        The counter is not clamped and may go negative if it was
        already out of step.
        """
        object_id = parse_object_id(recommendation_id)
        doc = self.store.recommendations.find_one({"_id": object_id})
        if doc is None:
            raise NotFoundError("Recommendation", recommendation_id)
        if doc.get("userEmail") != user.email:
            raise ForbiddenError("Forbidden: Not your recommendation")
        self.store.recommendations.delete_one({"_id": object_id})
        self._adjust_query_count(doc.get("queryId"), -1)
        logger.info("User %s deleted recommendation %s", user.email, recommendation_id)

    def recommendations_for_user(self, user: CurrentUser) -> List[Dict[str, Any]]:
        """Recommendations left on the caller's queries.

        Fetches the caller's queries (id and title only), then every
        recommendation pointing at one of them, and joins the two in
        memory on the string form of the query id.  Each result gains
        a ``queryTitle`` taken from ``queryTitle`` or, failing that,
        ``title`` on the query.
        """
        owned = self.store.queries.find(
            {"email": user.email},
            {"_id": 1, "queryTitle": 1, "title": 1},
        )
        titles = {
            str(query["_id"]): query.get("queryTitle", query.get("title"))
            for query in owned
        }
        if not titles:
            return []
        recommendations = self.store.recommendations.find({"queryId": {"$in": list(titles)}})
        results = []
        for rec in recommendations:
            joined = serialize_document(rec)
            joined["queryTitle"] = titles.get(rec.get("queryId"))
            results.append(joined)
        return results
