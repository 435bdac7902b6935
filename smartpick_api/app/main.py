"""
Main entrypoint for the SmartPick API.

This module assembles the FastAPI application, sets up logging, CORS
and error rendering, and includes the versioned router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn smartpick_api.app.main:app --reload

The record store and identity verifier can be passed to
``create_app`` explicitly; otherwise they are built from ``Settings``
when the application starts.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import RecordStore
from .core.logging_config import setup_logging
from .core.security import FirebaseIdentityVerifier, IdentityVerifier

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"message": ...}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(exc)},
        )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    verifier: Optional[IdentityVerifier] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment‑derived
        ``settings`` instance.
    store : Optional[RecordStore]
        Record store to serve requests from.  When omitted, a store
        connected to ``settings.resolve_mongodb_uri()`` is created.
    verifier : Optional[IdentityVerifier]
        Bearer token verifier.  Defaults to Firebase.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the startup below
    # can safely log messages.
    setup_logging(settings.log_level)

    record_store = store or RecordStore(
        uri=settings.resolve_mongodb_uri(),
        database_name=settings.database_name,
    )
    identity_verifier = verifier or FirebaseIdentityVerifier(settings.firebase_service_account)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await run_in_threadpool(record_store.connect)
        app.state.store = record_store
        app.state.verifier = identity_verifier
        app.state.settings = settings
        try:
            yield
        finally:
            await run_in_threadpool(record_store.close)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Public paths are unversioned; the v1 router is mounted at the root.
    app.include_router(v1_router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it via ``smartpick_api.app.main:app``.
app = create_app()
