from __future__ import annotations

from typing import Any

import mongomock
import pytest
from fastapi.testclient import TestClient

from smartpick_api.app.core.config import Settings
from smartpick_api.app.core.db import RecordStore
from smartpick_api.app.core.security import InvalidTokenError
from smartpick_api.app.main import create_app

TOKENS: dict[str, dict[str, Any]] = {
    "token-a": {"uid": "uid-a", "email": "a@x.com", "name": "Alice"},
    "token-b": {"uid": "uid-b", "email": "b@x.com"},
    "token-c": {"uid": "uid-c", "email": "c@x.com", "name": "Carol"},
    "token-no-email": {"uid": "uid-anon"},
}


class FakeVerifier:
    def __init__(self, claims_by_token: dict[str, dict[str, Any]]) -> None:
        self.claims_by_token = claims_by_token
        self.calls: list[str] = []

    def verify(self, token: str) -> dict[str, Any]:
        self.calls.append(token)
        try:
            return dict(self.claims_by_token[token])
        except KeyError:
            raise InvalidTokenError("unknown token")


def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> RecordStore:
    return RecordStore(database_name="smartpick-test", client=mongomock.MongoClient())


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier(TOKENS)


@pytest.fixture
def settings() -> Settings:
    return Settings(allow_anonymous_recommend=True)


@pytest.fixture
def client(settings: Settings, store: RecordStore, verifier: FakeVerifier):
    app = create_app(settings=settings, store=store, verifier=verifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_query(client: TestClient):
    def _create(token: str = "token-a", **fields: Any) -> str:
        response = client.post("/queries", headers=auth(token), json=fields)
        assert response.status_code == 201, response.text
        return response.json()["insertedId"]

    return _create


@pytest.fixture
def create_recommendation(client: TestClient):
    def _create(query_id: str, token: str = "token-b", **fields: Any) -> str:
        response = client.post(
            "/recommendations",
            headers=auth(token),
            json={"queryId": query_id, **fields},
        )
        assert response.status_code == 201, response.text
        return response.json()["insertedId"]

    return _create
