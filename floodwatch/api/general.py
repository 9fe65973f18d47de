"""
Unversioned operational endpoints: landing page, health probe, metrics.
"""

import time

from fastapi import APIRouter, Request, Response, status

from floodwatch.core.config import settings
from floodwatch.core.monitoring import METRICS_CONTENT_TYPE, get_metrics

router = APIRouter(tags=["General"])


@router.get("/")
async def root():
    """
    ## Floodwatch API

    Entry point listing the main resources.
    """
    prefix = settings.api_prefix
    return {
        "message": settings.app_name,
        "version": settings.version,
        "status": "running",
        "documentation": {
            "swagger_ui": f"{prefix}/docs",
            "redoc": f"{prefix}/redoc",
            "openapi_json": f"{prefix}/openapi.json",
        },
        "endpoints": {
            "readings": f"{prefix}/readings",
            "summaries": f"{prefix}/summaries",
            "statistics": f"{prefix}/stats",
            "system": f"{prefix}/system/time",
            "health": "/health",
            "metrics": "/metrics",
        },
    }


@router.get("/health")
async def health_check(request: Request, response: Response):
    """
    ## Health Check

    - **200 OK**: database reachable, ready for readings.
    - **503 Service Unavailable**: still starting up.
    """
    ready = getattr(request.app.state, "startup_complete", False)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "healthy" if ready else "initializing",
        "app_name": settings.app_name,
        "version": settings.version,
        "telegram_enabled": settings.telegram_enabled,
        "timestamp": time.time(),
    }


@router.get("/metrics", include_in_schema=False)
async def metrics():
    return Response(content=get_metrics(), media_type=METRICS_CONTENT_TYPE)
