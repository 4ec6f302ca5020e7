"""FastAPI application factory and entry point.

Creates the application instance, registers middleware and exception
handlers, and mounts the route routers.  Long-lived collaborators (engine,
stores, HTTP client) are built in the lifespan startup and released on
shutdown.

Usage::

    # Development server (from project root)
    uvicorn learning_feed.api.main:app --reload
"""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from learning_feed import __version__
from learning_feed.api import metrics
from learning_feed.api.dependencies import build_services
from learning_feed.config.settings import Settings, get_settings
from learning_feed.core.database import create_schema
from learning_feed.core.exceptions import InternalError, NotFoundError, ValidationError
from learning_feed.core.logging_config import configure_logging, request_id_var
from learning_feed.core.seed import seed_demo_content

logger = structlog.get_logger(__name__)

_INTERNAL_ERROR_BODY = {"message": "Internal server error"}
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _first_error_field(error: dict[str, Any]) -> Optional[str]:
    """Wire name of the field a pydantic error points at, if any."""
    parts = [
        str(part)
        for part in error.get("loc", ())
        if part not in _LOCATION_PREFIXES and isinstance(part, str)
    ]
    return ".".join(parts) or None


def _error_message(error: dict[str, Any]) -> str:
    message = str(error.get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": exc.message, "field": exc.field})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first failing field as 400 ``{message, field}``."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = _first_error_field(first)
    logger.info("request.invalid", field=field, error_count=len(errors))
    return JSONResponse(
        status_code=400,
        content={"message": _error_message(first), "field": field},
    )


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": str(exc)})


async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("internal_error", error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(status_code=500, content=_INTERNAL_ERROR_BODY)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    call ``create_app()`` with their own settings (e.g. a throwaway
    database URL).

    Args:
        settings: Explicit settings.  Defaults to :func:`get_settings`.

    Returns:
        A fully configured ``FastAPI`` instance.  Its services exist only
        while the lifespan is running.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        services = build_services(settings)
        application.state.services = services
        try:
            if settings.auto_create_schema:
                await create_schema(services.engine)
            if settings.seed_demo_content:
                await seed_demo_content(services.content_store)
            logger.info(
                "application_startup",
                app_name=settings.app_name,
                debug=settings.debug,
                log_level=settings.log_level,
            )
            yield
        finally:
            await services.close()
            logger.info("application_shutdown")

    application = FastAPI(
        title=settings.app_name,
        description="Personal learning feed: save, rank and complete learning content.",
        version=__version__,
        debug=settings.debug,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    # ---- Middleware --------------------------------------------------------

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every incoming request and its response status + duration.

        Attaches a unique ``request_id`` to the structlog context so that all
        log lines emitted during a request can be correlated, and records the
        HTTP metrics against the matched route template.
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed = time.perf_counter() - start
            status_code = response.status_code if response is not None else 500
            route = request.scope.get("route")
            route_path = getattr(route, "path", "unmatched")
            metrics.http_requests_total.labels(
                method=request.method, path=route_path, status=str(status_code)
            ).inc()
            metrics.http_request_duration_seconds.labels(
                method=request.method, path=route_path
            ).observe(elapsed)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn(
                "request_complete",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000, 2),
            )

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Exception handlers -----------------------------------------------

    application.add_exception_handler(ValidationError, _validation_error_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(NotFoundError, _not_found_handler)
    application.add_exception_handler(InternalError, _internal_error_handler)
    application.add_exception_handler(SQLAlchemyError, _internal_error_handler)

    # ---- Routers -----------------------------------------------------------

    from learning_feed.api.routes import (  # noqa: PLC0415
        content,
        health as health_routes,
        stats,
    )

    application.include_router(health_routes.router)
    application.include_router(content.router, prefix="/api/content", tags=["content"])
    application.include_router(stats.router, prefix="/api/stats", tags=["stats"])

    # ---- System endpoints -------------------------------------------------

    @application.get("/health", tags=["system"])
    async def health() -> JSONResponse:
        """Return a minimal process-level liveness status.

        Performs no I/O.  The database check is at ``/api/health``.
        """
        return JSONResponse({"status": "ok"})

    if settings.metrics_enabled:

        @application.get("/metrics", tags=["system"], include_in_schema=False)
        async def prometheus_metrics() -> Response:
            body, content_type = metrics.get_metrics_response()
            return Response(content=body, media_type=content_type)

    return application


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

app = create_app()
"""The FastAPI application instance.

This is the ASGI callable passed to Uvicorn.
"""
