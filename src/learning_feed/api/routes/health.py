"""Health check route handlers.

``GET /api/health``
    Shallow liveness check: verifies the process is alive and can reach the
    database (``SELECT 1``).  Always returns HTTP 200; the ``status`` field
    distinguishes ``"ok"`` from ``"degraded"``.

The process-level ``GET /health`` lives in ``api/main.py`` and performs no
I/O.  These endpoints are diagnostic and must never raise HTTP 5xx errors.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from learning_feed.api.dependencies import ServicesDep
from learning_feed.core.database import ping

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get("/api/health")
async def api_health(services: ServicesDep) -> JSONResponse:
    """Report database reachability.

    Returns:
        200 JSON ``{"status", "database", "timestamp"}``.
    """
    database = await ping(services.session_factory)
    overall = "ok" if database == "ok" else "degraded"
    if overall != "ok":
        logger.warning("health.degraded", database=database)
    return JSONResponse(
        {
            "status": overall,
            "database": database,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
