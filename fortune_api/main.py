"""
Fortune Service - Main Application

Application factory, lifespan handling and the process entry point.

Run with uvicorn, e.g.::

    uvicorn fortune_api.main:app --port 9000

or through the ``fortune-api`` console script.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from fortune_api.api import create_api_router
from fortune_api.exceptions import (
    FortuneException,
    fortune_exception_handler,
    generic_exception_handler,
    http_exception_handler,
)
from fortune_api.logging_config import setup_logging
from fortune_api.middleware.logging import LoggingMiddleware
from fortune_api.settings import settings
from fortune_api.storage import FortuneStore, create_fortune_store

# Configure structured logging (JSON in production, colored in development)
setup_logging()
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Lifespan event handler
# ------------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the fortune store on startup and release Redis on shutdown."""
    logger.info("Starting application...")

    owns_store = app.state.fortune_store is None
    if owns_store:
        # The Redis probe sleeps between attempts, keep it off the event loop
        app.state.fortune_store = await run_in_threadpool(create_fortune_store)

    yield

    logger.info("Initiating graceful shutdown...")
    store: FortuneStore = app.state.fortune_store
    if owns_store and store.secondary is not None:
        try:
            store.secondary.close()
        except Exception as e:
            logger.warning(f"Error closing secondary store: {e}")
    logger.info("Graceful shutdown complete")


# ------------------------------------------------------------------------------
# FastAPI app setup
# ------------------------------------------------------------------------------


def create_app(store: Optional[FortuneStore] = None, instrument: bool = True) -> FastAPI:
    """Create the FastAPI application.

    Args:
        store: Fortune store to serve. When omitted the lifespan builds one
            from settings (probing Redis) at startup.
        instrument: Register Prometheus HTTP metrics and expose /metrics.
            The instrumentator registers its collectors globally, so only one
            instrumented app should exist per process.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        lifespan=lifespan,
    )
    app.state.fortune_store = store

    app.add_exception_handler(FortuneException, fortune_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(LoggingMiddleware)

    if instrument:
        Instrumentator().instrument(app).expose(app)

    app.include_router(create_api_router())
    return app


def run() -> None:
    """Console entry point: serve on the port fixed in settings."""
    logger.info(
        f"Application starting: {settings.api.title} v{settings.api.version} "
        f"on {settings.api.host}:{settings.api.port}"
    )
    logger.info(f"Storage backend: {settings.storage_backend} (Redis at {settings.redis.addr})")
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


# Module-level app so uvicorn can discover it without calling create_app.
app = create_app()


if __name__ == "__main__":
    run()
