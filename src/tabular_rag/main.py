"""
Tabular RAG Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures logging and exception handling, and provides a test-friendly
application factory.

Design Goals
------------
- Deterministic startup
- Centralized router registration
- Pipeline errors rendered with stable codes, everything else as a 500
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from fastapi import FastAPI

from .config import settings
from .core.errors import (
    TabularRagError,
    rag_exception_handler,
    unhandled_exception_handler,
)

from .api import (
    health_routes,
    ingest_routes,
    model_routes,
    query_routes,
)


logger = logging.getLogger("tabular_rag.app")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    configure_logging(settings.log_level)

    app = FastAPI(
        title="tabular-rag-server",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(TabularRagError, rag_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(ingest_routes.router)
    app.include_router(query_routes.router)
    app.include_router(model_routes.router)

    # --------------------------------------------------------------
    # Startup Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup() -> None:
        logger.info(
            "Starting tabular-rag-server (ollama=%s, embedding_model=%s)",
            settings.ollama_host,
            settings.embedding_model,
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down tabular-rag-server")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
