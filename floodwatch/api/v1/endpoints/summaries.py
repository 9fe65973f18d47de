"""
Daily summary and statistics endpoints.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from floodwatch.api.deps import get_rollup_service, get_status_service, get_summary_store
from floodwatch.core.exceptions import ResourceNotFoundException
from floodwatch.schemas.summary import (
    DailySummaryRecord,
    StatisticsResponse,
    SummaryListResponse,
)
from floodwatch.services.reading_store import SummaryStore
from floodwatch.services.rollup_service import RollupService
from floodwatch.services.status_service import StatusService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/summaries", response_model=SummaryListResponse)
def list_summaries(
    limit: int = Query(30, ge=1, le=366),
    store: SummaryStore = Depends(get_summary_store),
):
    """Daily summaries, most recent day first."""
    rows = store.list_summaries(limit=limit)
    return SummaryListResponse(
        count=len(rows), data=[DailySummaryRecord.model_validate(r) for r in rows]
    )


@router.get("/summaries/{summary_date}", response_model=DailySummaryRecord)
def get_summary(summary_date: date, store: SummaryStore = Depends(get_summary_store)):
    row = store.get_summary(summary_date)
    if row is None:
        raise ResourceNotFoundException(
            f"No daily summary for {summary_date.isoformat()}",
            {"summary_date": summary_date.isoformat()},
        )
    return DailySummaryRecord.model_validate(row)


@router.post("/summaries/{summary_date}/compute", response_model=DailySummaryRecord)
def compute_summary(
    summary_date: date, service: RollupService = Depends(get_rollup_service)
):
    """
    Recompute the summary for one civil day now.

    Same code path as the scheduled job; safe to repeat.
    """
    logger.info(f"Manual daily summary requested for {summary_date}")
    return service.compute_daily_summary(summary_date)


@router.get("/stats", response_model=StatisticsResponse)
def get_statistics(service: StatusService = Depends(get_status_service)):
    return StatisticsResponse(statistics=service.statistics())
