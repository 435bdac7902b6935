"""Entry point for the SmartPick API server.

This script launches the FastAPI application under Uvicorn.  Host and
port are read from the ``HOST`` and ``PORT`` environment variables
(defaults ``0.0.0.0`` and ``3000``); database and Firebase
credentials are read from the environment or a ``.env`` file in the
working directory.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from smartpick_api.app.core.config import settings


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app="smartpick_api.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
