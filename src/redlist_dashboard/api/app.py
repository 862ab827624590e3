"""
FastAPI application factory.

Sets up:
- structured JSON logging (python-json-logger) at startup
- CORS for the dashboard UI
- request id + timing middleware (``X-Request-ID`` response header)
- ``{"error": message}`` rendering for dashboard and upstream errors
- the snapshot store and response caches on ``app.state``
- routers for the Red List, GBIF, charts, search and literature endpoints
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import requests
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from redlist_dashboard import __version__
from redlist_dashboard.api.deps import ResponseCaches
from redlist_dashboard.api.routes import (
    charts,
    gbif,
    literature,
    occurrences,
    redlist,
    search,
    species,
)
from redlist_dashboard.config import Settings, get_settings
from redlist_dashboard.errors import DashboardError
from redlist_dashboard.logging_setup import configure_logging
from redlist_dashboard.store import SnapshotStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: SnapshotStore | None = None) -> FastAPI:
    """Build the API app. Tests pass their own settings and store."""
    settings = settings or get_settings()
    store = store or SnapshotStore(settings.data_dir, ttl_seconds=settings.cache_ttl_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level, json_logs=settings.json_logs)
        logger.info(
            "service_startup",
            extra={
                "app_name": settings.app_name,
                "env": settings.app_env,
                "data_dir": str(settings.data_dir),
            },
        )
        yield
        logger.info("service_shutdown")

    app = FastAPI(
        title="Red List Dashboard API",
        description="GBIF occurrence and IUCN Red List coverage for the dashboard UI",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.caches = ResponseCaches(settings.cache_ttl_seconds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Attach a request id, log timing, and turn unhandled errors into 500s."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()
        context = {"request_id": request_id, "path": request.url.path, "method": request.method}

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.exception("unhandled_exception", extra={**context, "duration_ms": duration_ms})
            response = JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})
            response.headers["X-Request-ID"] = request_id
            return response

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "request_complete",
            extra={**context, "status_code": response.status_code, "duration_ms": duration_ms},
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("dashboard_error", extra={"path": request.url.path, "error": exc.message})
        return JSONResponse(status_code=exc.status_code, content=exc.body())

    @app.exception_handler(requests.RequestException)
    async def upstream_error_handler(
        request: Request, exc: requests.RequestException
    ) -> JSONResponse:
        logger.error("upstream_error", extra={"path": request.url.path, "error": str(exc)})
        return JSONResponse(status_code=500, content={"error": str(exc)})

    app.include_router(redlist.router, prefix="/api/redlist", tags=["redlist"])
    app.include_router(species.router, prefix="/api/species", tags=["species"])
    app.include_router(gbif.router, prefix="/api/gbif", tags=["gbif"])
    app.include_router(charts.router, prefix="/api", tags=["charts"])
    app.include_router(occurrences.router, prefix="/api", tags=["occurrences"])
    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(literature.router, prefix="/api", tags=["literature"])

    @app.get("/health", tags=["health"])
    def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": settings.app_name}

    return app
