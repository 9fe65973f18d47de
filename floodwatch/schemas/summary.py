"""
Pydantic schemas for daily summaries and statistics.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from floodwatch.schemas.reading import ReadingResponse, RiskStatus


class DailySummaryRecord(BaseModel):
    summary_date: date
    avg_right_level: float = 0.0
    avg_left_level: float = 0.0
    avg_right_flow: float = 0.0
    avg_left_flow: float = 0.0
    sample_count: int = Field(default=0, ge=0)
    status: str = RiskStatus.SAFE.value
    flood_flag: int = 0
    last_status: str = RiskStatus.SAFE.value
    last_flood_flag: int = 0
    computed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SummaryListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[DailySummaryRecord]


class Statistics(BaseModel):
    total_readings: int
    latest_reading: Optional[ReadingResponse] = None
    flood_days: int
    safe_days: int
    server_time: datetime


class StatisticsResponse(BaseModel):
    success: bool = True
    statistics: Statistics
