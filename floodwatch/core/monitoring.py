"""
Monitoring and metrics configuration for the flood monitoring service.
"""

import time

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status_code"]
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

READINGS_INGESTED = Counter(
    "readings_ingested_total", "Ingest attempts by outcome", ["outcome"]
)

VERDICTS = Counter(
    "verdicts_total", "Risk verdicts produced", ["source", "status"]
)

NOTIFICATIONS = Counter(
    "notifications_total", "Alert notifications attempted", ["kind", "status"]
)

ROLLUPS = Counter("daily_rollups_total", "Daily rollup runs", ["status"])

READINGS_PURGED = Counter(
    "readings_purged_total", "Raw readings deleted by the retention sweeper"
)

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST


class MetricsMiddleware:
    """
    Pure ASGI middleware counting requests and timing them per route path.

    The status code is read off the response start message, so responses built
    by inner middleware (error envelopes) are counted too.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        started = time.perf_counter()
        response_status = [500]

        async def capture_status(message):
            if message["type"] == "http.response.start":
                response_status[0] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            labels = {"method": scope.get("method", "UNKNOWN"), "endpoint": scope.get("path", "/")}
            REQUEST_DURATION.labels(**labels).observe(time.perf_counter() - started)
            REQUEST_COUNT.labels(status_code=str(response_status[0]), **labels).inc()


def record_ingest(outcome: str):
    """Record an ingest outcome (accepted, rejected, store_error)."""
    READINGS_INGESTED.labels(outcome=outcome).inc()


def record_verdict(source: str, status: str):
    VERDICTS.labels(source=source, status=status).inc()


def record_notification(kind: str, success: bool = True):
    """Record notification delivery metrics."""
    status = "success" if success else "error"
    NOTIFICATIONS.labels(kind=kind, status=status).inc()


def record_rollup(success: bool = True):
    status = "success" if success else "error"
    ROLLUPS.labels(status=status).inc()


def record_purge(count: int):
    if count > 0:
        READINGS_PURGED.inc(count)


def get_metrics() -> bytes:
    """Get Prometheus metrics in text format."""
    return generate_latest()
