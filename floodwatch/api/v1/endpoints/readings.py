"""
Sensor reading API endpoints.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from floodwatch.api.deps import get_ingestion_service, get_status_service
from floodwatch.core.civil_time import civil_now
from floodwatch.schemas.reading import (
    ChartDataResponse,
    ChartPoint,
    CurrentStatusResponse,
    IngestResponse,
    LatestReadingsResponse,
    PredictionResponse,
    ReadingResponse,
)
from floodwatch.services.ingestion_service import IngestionService
from floodwatch.services.status_service import StatusService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=IngestResponse, status_code=201)
def ingest_reading(
    payload: Any = Body(
        ...,
        examples=[{"h_kanan": 125.5, "h_kiri": 115.0, "q_kanan": 88.0, "q_kiri": 80.5}],
    ),
    service: IngestionService = Depends(get_ingestion_service),
):
    """
    Receive one reading from the field device.

    The reading is stored, classified and, when the verdict is FLOOD or
    DANGER, an alert is sent. The capture time is assigned by the server.
    """
    result = service.ingest(payload)
    return IngestResponse(
        reading=ReadingResponse.model_validate(result.reading),
        verdict=result.verdict,
        alert_attempted=result.alert_attempted,
        alert_sent=result.alert_sent,
    )


@router.get("/latest", response_model=LatestReadingsResponse)
def get_latest_readings(
    limit: int = Query(10, ge=1, le=1000, description="Maximum number of records"),
    service: StatusService = Depends(get_status_service),
):
    """Most recent readings, newest first."""
    readings = service.latest(limit=limit)
    return LatestReadingsResponse(
        count=len(readings),
        data=[ReadingResponse.model_validate(r) for r in readings],
        timestamp=civil_now(),
    )


@router.get("/chart", response_model=ChartDataResponse)
def get_chart_data(
    hours: int = Query(24, ge=1, le=24 * 31, description="Look-back window in hours"),
    service: StatusService = Depends(get_status_service),
):
    """Water level series for the last N hours, oldest first."""
    readings = service.chart_data(hours=hours)
    return ChartDataResponse(
        hours=hours,
        data=[ChartPoint.model_validate(r) for r in readings],
        timestamp=civil_now(),
    )


@router.get("/current-status", response_model=CurrentStatusResponse)
def get_current_status(service: StatusService = Depends(get_status_service)):
    """Verdict for the most recent stored reading."""
    return CurrentStatusResponse(**service.current_status())


@router.post("/predict", response_model=PredictionResponse)
def predict(
    payload: Any = Body(...),
    service: StatusService = Depends(get_status_service),
):
    """Classify a reading without storing it or alerting."""
    verdict = service.predict(payload)
    return PredictionResponse(verdict=verdict, timestamp=civil_now())
