"""
Daily rollup of raw readings into one summary row per civil day.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from floodwatch.core.civil_time import civil_now, day_window
from floodwatch.core.monitoring import record_rollup
from floodwatch.schemas.alert import DailyAlertEvent
from floodwatch.schemas.reading import RiskStatus, flood_flag_for
from floodwatch.schemas.summary import DailySummaryRecord

logger = logging.getLogger(__name__)


@dataclass
class DayStatistics:
    """Single-pass accumulator over one day's readings."""

    count: int = 0
    sum_right_level: float = 0.0
    sum_left_level: float = 0.0
    sum_right_flow: float = 0.0
    sum_left_flow: float = 0.0
    max_right_level: Optional[float] = None
    max_left_level: Optional[float] = None
    flood_event_count: int = 0

    @classmethod
    def collect(cls, readings: Iterable, flood_threshold: float) -> "DayStatistics":
        stats = cls()
        for reading in readings:
            right = float(reading.right_level)
            left = float(reading.left_level)

            stats.count += 1
            stats.sum_right_level += right
            stats.sum_left_level += left
            stats.sum_right_flow += float(reading.right_flow)
            stats.sum_left_flow += float(reading.left_flow)

            if stats.max_right_level is None or right > stats.max_right_level:
                stats.max_right_level = right
            if stats.max_left_level is None or left > stats.max_left_level:
                stats.max_left_level = left

            if right > flood_threshold or left > flood_threshold:
                stats.flood_event_count += 1
        return stats

    def _avg(self, total: float) -> float:
        return total / self.count if self.count else 0.0

    @property
    def avg_right_level(self) -> float:
        return self._avg(self.sum_right_level)

    @property
    def avg_left_level(self) -> float:
        return self._avg(self.sum_left_level)

    @property
    def avg_right_flow(self) -> float:
        return self._avg(self.sum_right_flow)

    @property
    def avg_left_flow(self) -> float:
        return self._avg(self.sum_left_flow)

    @property
    def peak_level(self) -> float:
        return max(self.max_right_level or 0.0, self.max_left_level or 0.0)

    @property
    def flood_share(self) -> float:
        return self.flood_event_count / self.count * 100 if self.count else 0.0


class RollupService:
    """
    Computes and upserts the DailySummary for a civil date.

    Recomputing a date overwrites the earlier row; only computed_at differs
    when the underlying readings have not changed.
    """

    def __init__(
        self,
        reading_store,
        summary_store,
        notifier,
        flood_threshold: float = 150.0,
        danger_threshold: float = 180.0,
        watch_threshold: float = 120.0,
        time_zone: Optional[str] = None,
        clock: Callable[[], datetime] = civil_now,
    ):
        self.reading_store = reading_store
        self.summary_store = summary_store
        self.notifier = notifier
        self.flood_threshold = flood_threshold
        self.danger_threshold = danger_threshold
        self.watch_threshold = watch_threshold
        self.time_zone = time_zone
        self.clock = clock

    def derive_status(self, stats: DayStatistics) -> str:
        if stats.count == 0:
            return RiskStatus.SAFE.value
        if stats.peak_level > self.danger_threshold:
            return RiskStatus.DANGER.value
        if stats.peak_level > self.flood_threshold:
            return RiskStatus.FLOOD.value
        if max(stats.avg_right_level, stats.avg_left_level) > self.watch_threshold:
            return RiskStatus.WATCH.value
        return RiskStatus.SAFE.value

    def compute_daily_summary(self, target_date: date) -> DailySummaryRecord:
        try:
            record = self._compute(target_date)
        except Exception:
            record_rollup(success=False)
            raise
        record_rollup(success=True)
        return record

    def _compute(self, target_date: date) -> DailySummaryRecord:
        start, end = day_window(target_date, self.time_zone)
        logger.info(f"Computing daily summary for {target_date} ({start.isoformat()} - {end.isoformat()})")

        readings = self.reading_store.list_readings_between(start, end)
        computed_at = self.clock()

        if not readings:
            logger.info(f"No readings found for {target_date}, recording empty summary")
            record = DailySummaryRecord(summary_date=target_date, computed_at=computed_at)
            self.summary_store.upsert_summary(record)
            return record

        stats = DayStatistics.collect(readings, self.flood_threshold)
        status = self.derive_status(stats)
        flag = flood_flag_for(status)

        record = DailySummaryRecord(
            summary_date=target_date,
            avg_right_level=round(stats.avg_right_level, 2),
            avg_left_level=round(stats.avg_left_level, 2),
            avg_right_flow=round(stats.avg_right_flow, 2),
            avg_left_flow=round(stats.avg_left_flow, 2),
            sample_count=stats.count,
            status=status,
            flood_flag=flag,
            last_status=status,
            last_flood_flag=flag,
            computed_at=computed_at,
        )

        logger.info(
            f"Summary {target_date}: count={stats.count} status={status} "
            f"max_right={stats.max_right_level:.1f} max_left={stats.max_left_level:.1f} "
            f"flood_events={stats.flood_event_count} ({stats.flood_share:.1f}%)"
        )

        self.summary_store.upsert_summary(record)

        if flag == 1:
            self._send_alert(record, stats)

        return record

    def _send_alert(self, record: DailySummaryRecord, stats: DayStatistics) -> bool:
        try:
            event = DailyAlertEvent(
                timestamp=record.computed_at,
                summary_date=record.summary_date,
                status=record.status,
                avg_right_level=record.avg_right_level,
                avg_left_level=record.avg_left_level,
                max_right_level=stats.max_right_level,
                max_left_level=stats.max_left_level,
                sample_count=stats.count,
                flood_event_count=stats.flood_event_count,
                confidence=min(100, round(stats.flood_share)),
            )
            return bool(self.notifier.notify(event))
        except Exception as e:
            logger.warning(f"Daily alert for {record.summary_date} failed: {e}")
            return False
