from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from smartpick_api.app.core import security
from smartpick_api.app.core.config import Settings
from smartpick_api.app.core.security import (
    CurrentUser,
    FirebaseIdentityVerifier,
    InvalidTokenError,
)
from smartpick_api.app.main import create_app
from tests.conftest import auth


@pytest.mark.integration
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Basic dXNlcjpwYXNz"},
        {"Authorization": "Bearer"},
        {"Authorization": "token-a"},
    ],
)
def test_missing_or_malformed_header_is_401(client: TestClient, verifier, headers) -> None:
    response = client.delete("/queries/0123456789abcdef01234567", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}
    assert verifier.calls == []


@pytest.mark.integration
def test_rejected_token_is_403(client: TestClient) -> None:
    response = client.post("/queries", headers=auth("forged"), json={"title": "x"})

    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden: Invalid token"}


@pytest.mark.integration
def test_token_without_email_is_403(client: TestClient, store) -> None:
    response = client.post("/queries", headers=auth("token-no-email"), json={"title": "x"})

    assert response.status_code == 403
    assert store.queries.count_documents({}) == 0


@pytest.mark.integration
def test_manual_recommend_can_require_identity(store, verifier) -> None:
    app = create_app(
        settings=Settings(allow_anonymous_recommend=False),
        store=store,
        verifier=verifier,
    )
    with TestClient(app) as client:
        created = client.post("/queries", headers=auth("token-a"), json={"title": "x"})
        query_id = created.json()["insertedId"]

        anonymous = client.patch(f"/queries/{query_id}/recommend")
        signed_in = client.patch(f"/queries/{query_id}/recommend", headers=auth("token-b"))

    assert anonymous.status_code == 401
    assert signed_in.status_code == 200
    assert signed_in.json()["modifiedCount"] == 1


def test_current_user_from_claims() -> None:
    user = CurrentUser.from_claims({"user_id": "u1", "email": "a@x.com"})

    assert user.uid == "u1"
    assert user.name == "a@x.com"


def test_firebase_verifier_returns_claims(monkeypatch) -> None:
    seen = {}

    def fake_verify(token, app=None):
        seen["token"] = token
        seen["app"] = app
        return {"uid": "u1", "email": "a@x.com"}

    monkeypatch.setattr(security.auth, "verify_id_token", fake_verify)
    verifier = FirebaseIdentityVerifier()
    sentinel_app = object()
    verifier._app = sentinel_app

    assert verifier.verify("abc") == {"uid": "u1", "email": "a@x.com"}
    assert seen == {"token": "abc", "app": sentinel_app}


@pytest.mark.parametrize(
    "error",
    [
        ValueError("Illegal ID token provided."),
        security.auth.ExpiredIdTokenError("Token expired", None),
    ],
)
def test_firebase_verifier_wraps_verification_errors(monkeypatch, error) -> None:
    def fake_verify(token, app=None):
        raise error

    monkeypatch.setattr(security.auth, "verify_id_token", fake_verify)
    verifier = FirebaseIdentityVerifier()
    verifier._app = object()

    with pytest.raises(InvalidTokenError):
        verifier.verify("abc")


def test_firebase_app_initialised_once_from_service_account(monkeypatch) -> None:
    initialised = []

    def fake_get_app(name):
        raise ValueError("no app")

    def fake_initialize_app(cred, name=None):
        initialised.append((cred, name))
        return "firebase-app"

    monkeypatch.setattr(security.firebase_admin, "get_app", fake_get_app)
    monkeypatch.setattr(security.firebase_admin, "initialize_app", fake_initialize_app)
    monkeypatch.setattr(security.credentials, "Certificate", lambda info: ("cert", info))
    monkeypatch.setattr(security.auth, "verify_id_token", lambda token, app=None: {"app": app})

    account = {"type": "service_account", "project_id": "smartpick"}
    verifier = FirebaseIdentityVerifier(json.dumps(account))

    assert verifier.verify("t1") == {"app": "firebase-app"}
    assert verifier.verify("t2") == {"app": "firebase-app"}
    assert initialised == [(("cert", account), "smartpick")]
