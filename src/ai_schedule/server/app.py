"""FastAPI app factory.

Endpoints are thin wrappers over a single :class:`DomainStore` held on ``app.state``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_schedule import __version__
from ai_schedule.config import AppSettings
from ai_schedule.errors import DanglingReferenceError, DuplicateIdError, IllegalTransitionError
from ai_schedule.server.config import ServerSettings
from ai_schedule.server.router import router as api_router
from ai_schedule.state import DomainStore, seed_if_empty, start_metrics_refresh

logger = logging.getLogger(__name__)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DuplicateIdError)
    async def _duplicate(_request: Request, exc: DuplicateIdError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(IllegalTransitionError)
    async def _illegal_transition(_request: Request, exc: IllegalTransitionError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(DanglingReferenceError)
    async def _dangling(_request: Request, exc: DanglingReferenceError) -> JSONResponse:
        return _error(422, exc)

    # Covers pydantic ValidationError raised while re-validating merged entities.
    @app.exception_handler(ValueError)
    async def _invalid(_request: Request, exc: ValueError) -> JSONResponse:
        logger.info("Rejected invalid update", extra={"error": str(exc)})
        return _error(422, exc)


def create_app(
    store: DomainStore | None = None,
    settings: ServerSettings | None = None,
) -> FastAPI:
    settings = settings or ServerSettings()
    store = store or DomainStore(AppSettings().store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.seed_on_start:
            seed_if_empty(store)

        refresh = None
        if settings.metrics_refresh_seconds > 0:
            refresh = start_metrics_refresh(store, settings.metrics_refresh_seconds)
        app.state.metrics_refresh = refresh
        try:
            yield
        finally:
            if refresh is not None:
                refresh.stop()

    app = FastAPI(
        title="AI Schedule",
        version=__version__,
        description="REST API over the AI schedule dashboard domain store.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store

    # Dev-friendly CORS so a Vite dev server can call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app
