"""
Persistent store access for raw readings and daily summaries.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from floodwatch.core.exceptions import DatabaseException
from floodwatch.models.daily_summary import DailySummary
from floodwatch.models.reading import SensorReading
from floodwatch.schemas.reading import ReadingValues
from floodwatch.schemas.summary import DailySummaryRecord

logger = logging.getLogger(__name__)


class ReadingStore:
    """Insert, range-query and delete raw sensor readings."""

    def __init__(self, db: Session):
        self.db = db

    def insert_reading(self, values: ReadingValues, captured_at: datetime) -> SensorReading:
        """Persist one reading and return it with its generated id."""
        try:
            reading = SensorReading(**values.model_dump(), captured_at=captured_at)
            self.db.add(reading)
            self.db.commit()
            self.db.refresh(reading)
            logger.info(f"Stored reading {reading.id} captured at {captured_at.isoformat()}")
            return reading
        except Exception as e:
            logger.error(f"Failed to store reading: {e}")
            self.db.rollback()
            raise DatabaseException("Failed to store reading") from e

    def list_readings_between(self, start: datetime, end: datetime) -> List[SensorReading]:
        """Readings with start <= captured_at < end, oldest first."""
        try:
            return (
                self.db.query(SensorReading)
                .filter(
                    SensorReading.captured_at >= start,
                    SensorReading.captured_at < end,
                )
                .order_by(SensorReading.captured_at.asc())
                .all()
            )
        except Exception as e:
            logger.error(f"Failed to query readings between {start} and {end}: {e}")
            self.db.rollback()
            raise DatabaseException("Failed to query readings") from e

    def delete_readings_before(self, cutoff: datetime) -> int:
        """Delete readings captured strictly before cutoff. Returns the row count."""
        try:
            deleted = (
                self.db.query(SensorReading)
                .filter(SensorReading.captured_at < cutoff)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            return deleted or 0
        except Exception as e:
            logger.error(f"Failed to delete readings before {cutoff}: {e}")
            self.db.rollback()
            raise DatabaseException("Failed to delete old readings") from e

    def latest_readings(self, limit: int = 10) -> List[SensorReading]:
        try:
            return (
                self.db.query(SensorReading)
                .order_by(SensorReading.captured_at.desc(), SensorReading.id.desc())
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Failed to fetch latest readings: {e}")
            raise DatabaseException("Failed to fetch latest readings") from e

    def latest_reading(self) -> Optional[SensorReading]:
        readings = self.latest_readings(limit=1)
        return readings[0] if readings else None

    def readings_since(self, since: datetime) -> List[SensorReading]:
        try:
            return (
                self.db.query(SensorReading)
                .filter(SensorReading.captured_at >= since)
                .order_by(SensorReading.captured_at.asc())
                .all()
            )
        except Exception as e:
            logger.error(f"Failed to fetch readings since {since}: {e}")
            raise DatabaseException("Failed to fetch readings") from e

    def count_readings(self) -> int:
        try:
            return self.db.query(func.count(SensorReading.id)).scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count readings: {e}")
            raise DatabaseException("Failed to count readings") from e


class SummaryStore:
    """Upsert and read daily summaries keyed by civil date."""

    def __init__(self, db: Session):
        self.db = db

    def upsert_summary(self, record: DailySummaryRecord) -> DailySummaryRecord:
        """Insert the summary, or overwrite the existing row for the same date."""
        values = record.model_dump()
        stmt = insert(DailySummary).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DailySummary.summary_date],
            set_={key: stmt.excluded[key] for key in values if key != "summary_date"},
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
            logger.info(f"Upserted daily summary for {record.summary_date}")
            return record
        except Exception as e:
            logger.error(f"Failed to upsert summary for {record.summary_date}: {e}")
            self.db.rollback()
            raise DatabaseException(
                "Failed to save daily summary",
                {"summary_date": record.summary_date.isoformat()},
            ) from e

    def get_summary(self, summary_date: date) -> Optional[DailySummary]:
        try:
            return (
                self.db.query(DailySummary)
                .filter(DailySummary.summary_date == summary_date)
                .first()
            )
        except Exception as e:
            logger.error(f"Failed to fetch summary for {summary_date}: {e}")
            raise DatabaseException("Failed to fetch daily summary") from e

    def list_summaries(self, limit: int = 30) -> List[DailySummary]:
        try:
            return (
                self.db.query(DailySummary)
                .order_by(DailySummary.summary_date.desc())
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Failed to list summaries: {e}")
            raise DatabaseException("Failed to list daily summaries") from e

    def count_by_flood_flag(self) -> Dict[int, int]:
        """Number of summarized days per flood flag, e.g. {0: 12, 1: 3}."""
        try:
            rows = (
                self.db.query(DailySummary.flood_flag, func.count(DailySummary.summary_date))
                .group_by(DailySummary.flood_flag)
                .all()
            )
            return {int(flag): int(count) for flag, count in rows}
        except Exception as e:
            logger.error(f"Failed to count summaries: {e}")
            raise DatabaseException("Failed to count daily summaries") from e
