"""
FastAPI application for the flood monitoring service.

Run with ``uvicorn floodwatch.main:app`` or ``python -m floodwatch.main``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from floodwatch.api import general
from floodwatch.api.v1.api import api_router
from floodwatch.core.config import settings
from floodwatch.core.constants import API_DESCRIPTION
from floodwatch.core.database import init_db
from floodwatch.core.logging_config import setup_logging
from floodwatch.core.middleware import (
    ErrorHandlingMiddleware,
    LoggingMiddleware,
    request_validation_handler,
)
from floodwatch.core.monitoring import MetricsMiddleware

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.startup_complete = False
    logger.info(f"Starting {settings.app_name} {settings.version} (civil zone {settings.time_zone})")

    try:
        init_db()
    except Exception as error:
        logger.error(f"Startup aborted, database unavailable: {error}")
        raise

    if not settings.telegram_enabled:
        logger.warning("Telegram alerts disabled: TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not set")

    app.state.startup_complete = True
    logger.info("Ready to accept readings")

    yield

    logger.info(f"Shutting down {settings.app_name}")


docs_prefix = settings.api_prefix if settings.debug else None

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description=API_DESCRIPTION,
    openapi_url=f"{docs_prefix}/openapi.json" if docs_prefix else None,
    docs_url=f"{docs_prefix}/docs" if docs_prefix else None,
    redoc_url=f"{docs_prefix}/redoc" if docs_prefix else None,
    lifespan=lifespan,
)

# Last added runs outermost: metrics, then request id/logging, then errors
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(MetricsMiddleware)

app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(general.router)
app.include_router(api_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "floodwatch.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
