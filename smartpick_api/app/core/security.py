"""
Identity verification for bearer tokens.

Clients authenticate with Firebase and send the resulting ID token in
the ``Authorization`` header as ``Bearer <token>``.  This module
exchanges that token for verified identity claims through the
Firebase Admin SDK and exposes FastAPI dependencies that gate
endpoints on a verified caller.

The verifier is attached to ``app.state`` at startup so tests can
substitute any object implementing ``IdentityVerifier``.
"""

import json
import logging
from typing import Any, Dict, Optional, Protocol

import firebase_admin
from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from firebase_admin import exceptions as firebase_exceptions
from pydantic import BaseModel

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "smartpick"


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


class IdentityVerifier(Protocol):
    def verify(self, token: str) -> Dict[str, Any]:
        ...


class FirebaseIdentityVerifier:
    """Verify Firebase ID tokens with the Admin SDK.

    The Firebase app is initialised lazily on the first verification
    so that importing or constructing the application never requires
    credentials.
    """

    def __init__(self, service_account_json: str = "") -> None:
        self.service_account_json = service_account_json
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            except ValueError:
                if self.service_account_json:
                    cred = credentials.Certificate(json.loads(self.service_account_json))
                else:
                    cred = credentials.ApplicationDefault()
                self._app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
                logger.info("Initialised Firebase Admin app %s", FIREBASE_APP_NAME)
        return self._app

    def verify(self, token: str) -> Dict[str, Any]:
        app = self._get_app()
        try:
            return auth.verify_id_token(token, app=app)
        except (ValueError, firebase_exceptions.FirebaseError) as exc:
            raise InvalidTokenError(str(exc)) from exc


class CurrentUser(BaseModel):
    """Verified identity of the caller."""

    uid: Optional[str] = None
    email: str
    name: str

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "CurrentUser":
        email = claims["email"]
        return cls(
            uid=claims.get("uid") or claims.get("user_id") or claims.get("sub"),
            email=email,
            name=claims.get("name") or email,
        )


security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Dependency that retrieves the current authenticated user.

    A missing or non‑Bearer ``Authorization`` header yields HTTP 401.
    A token the verifier rejects, or one that carries no email claim,
    yields HTTP 403.  Either way the request stops before any handler
    code runs.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    verifier: IdentityVerifier = request.app.state.verifier
    try:
        claims = await run_in_threadpool(verifier.verify, credentials.credentials)
    except InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Invalid token",
        )
    if not claims.get("email"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Token has no email claim",
        )
    return CurrentUser.from_claims(claims)


async def get_recommend_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """Gate for the manual counter increment.

    Anonymous callers are let through unless the deployment disables
    ``allow_anonymous_recommend``, in which case this behaves exactly
    like ``get_current_user``.
    """
    if request.app.state.settings.allow_anonymous_recommend:
        return None
    return await get_current_user(request, credentials)
