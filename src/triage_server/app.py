"""FastAPI app factory for the triage wizard, plus the ``triage-server`` CLI.

The catalog is loaded and validated once, in the lifespan handler; a
malformed catalog therefore stops the server at startup.  Engine, catalog
and renderer then live on ``app.state`` for the route dependencies.

Routes are mounted under ``/api/v1``; ``/health`` sits outside the prefix.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from triage_rulesets.catalog import load_catalog
from triage_rulesets.display import ResultCopyRenderer
from triage_rulesets.engine import DecisionEngine

from triage_server.config import ServerSettings, load_settings
from triage_server.errors import (
    generic_error_handler,
    key_error_handler,
    value_error_handler,
)
from triage_server.routes import register_routes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the catalog, engine and renderer shared by every request."""
    settings: ServerSettings = app.state.settings

    catalog = load_catalog(settings.catalog_path)
    engine = DecisionEngine(
        catalog,
        default_strategy=settings.default_strategy,
        strict=settings.strict,
    )
    app.state.catalog = catalog
    app.state.engine = engine
    app.state.renderer = ResultCopyRenderer(catalog)
    logger.info(
        "Triage server ready: catalog v%s, %d questions, default strategy=%s, strict=%s",
        catalog.version, catalog.size(), engine.default_strategy.value, settings.strict,
    )

    yield

    logger.info("Triage server shutting down")


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Assemble the application for ``settings`` (env-derived by default)."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )

    app = FastAPI(
        title="Health Triage Wizard API",
        description="Stateless REST API for the yes/no health triage wizard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Credentials are only allowed for an explicit origin list
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ValueError and KeyError subclasses from the SDK land in the first two
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    async def health(request: Request) -> dict:
        """Readiness probe reporting the loaded catalog."""
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None:
            return {"status": "error", "detail": "catalog not loaded"}
        return {"status": "ok", "questions": catalog.size(), "version": catalog.version}

    register_routes(app)
    return app


# ASGI export for ``uvicorn triage_server.app:app``
app = create_app()


def cli() -> None:
    """Entry point of the ``triage-server`` console script."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "triage_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
