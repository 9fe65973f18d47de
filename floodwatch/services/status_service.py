"""
Read-side reporting: current status, statistics, chart series.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from floodwatch.core.civil_time import civil_now
from floodwatch.models.reading import SensorReading
from floodwatch.schemas.reading import (
    ReadingResponse,
    ReadingValues,
    RiskStatus,
    Verdict,
)
from floodwatch.schemas.summary import Statistics
from floodwatch.services.ingestion_service import parse_reading_payload

logger = logging.getLogger(__name__)


class StatusService:
    def __init__(
        self,
        reading_store,
        summary_store,
        classifier,
        clock: Callable[[], datetime] = civil_now,
    ):
        self.reading_store = reading_store
        self.summary_store = summary_store
        self.classifier = classifier
        self.clock = clock

    def current_status(self) -> Dict[str, Any]:
        """Classify the most recent stored reading. No write, no alert."""
        latest: Optional[SensorReading] = self.reading_store.latest_reading()
        if latest is None:
            return {
                "status": RiskStatus.SAFE.value,
                "flood_flag": 0,
                "verdict": None,
                "current_reading": None,
                "last_updated": self.clock(),
            }

        values = ReadingValues(
            right_level=latest.right_level,
            left_level=latest.left_level,
            right_flow=latest.right_flow,
            left_flow=latest.left_flow,
        )
        verdict = self.classifier.classify(values)
        if verdict.flood_flag:
            logger.info(f"Current status indicates flood (reading {latest.id})")

        return {
            "status": verdict.status,
            "flood_flag": verdict.flood_flag,
            "verdict": verdict,
            "current_reading": ReadingResponse.model_validate(latest),
            "last_updated": self.clock(),
        }

    def predict(self, payload: Dict[str, Any]) -> Verdict:
        """Classify an ad-hoc payload without storing it."""
        return self.classifier.classify(parse_reading_payload(payload))

    def latest(self, limit: int = 10) -> List[SensorReading]:
        return self.reading_store.latest_readings(limit=limit)

    def chart_data(self, hours: int = 24) -> List[SensorReading]:
        since = self.clock() - timedelta(hours=hours)
        return self.reading_store.readings_since(since)

    def statistics(self) -> Statistics:
        total = self.reading_store.count_readings()
        latest = self.reading_store.latest_reading()
        days = self.summary_store.count_by_flood_flag()

        return Statistics(
            total_readings=total,
            latest_reading=ReadingResponse.model_validate(latest) if latest else None,
            flood_days=days.get(1, 0),
            safe_days=days.get(0, 0),
            server_time=self.clock(),
        )
