"""
Alert payloads handed to the notification sink. Never persisted.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from floodwatch.schemas.reading import ReadingValues, Verdict


class AlertEvent(BaseModel):
    timestamp: datetime


class ReadingAlertEvent(AlertEvent):
    """A single reading classified as FLOOD or DANGER."""

    reading_id: Optional[int] = None
    values: ReadingValues
    verdict: Verdict

    @property
    def kind(self) -> str:
        return "reading"


class DailyAlertEvent(AlertEvent):
    """A day whose rollup status is FLOOD or DANGER."""

    summary_date: date
    status: str
    avg_right_level: float
    avg_left_level: float
    max_right_level: float
    max_left_level: float
    sample_count: int
    flood_event_count: int
    confidence: float = Field(default=0.0, ge=0, le=100)

    @property
    def kind(self) -> str:
        return "daily"

    @property
    def flood_share(self) -> float:
        if not self.sample_count:
            return 0.0
        return self.flood_event_count / self.sample_count * 100
