import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from floodwatch.core.civil_time import civil_now
from floodwatch.core.exceptions import DatabaseException, ValidationException
from floodwatch.core.monitoring import record_purge

logger = logging.getLogger(__name__)

# Must stay longer than the one-day window the rollup reads back
MIN_RETENTION = timedelta(days=2)


class RetentionService:
    """Deletes raw readings older than the retention horizon."""

    def __init__(
        self,
        reading_store,
        retention_days: int = 30,
        clock: Callable[[], datetime] = civil_now,
    ):
        self.reading_store = reading_store
        self.retention_days = retention_days
        self.clock = clock

    def cutoff(self, horizon: Optional[timedelta] = None) -> datetime:
        horizon = horizon if horizon is not None else timedelta(days=self.retention_days)
        if horizon < MIN_RETENTION:
            raise ValidationException(
                "Retention horizon too short",
                {"horizon_days": horizon.total_seconds() / 86400, "minimum_days": MIN_RETENTION.days},
            )
        return self.clock() - horizon

    def purge_older_than(self, horizon: Optional[timedelta] = None) -> int:
        """
        Delete readings captured strictly before now - horizon.

        Zero matching rows is a normal outcome. A horizon under two days raises
        ValidationException before anything is deleted; store errors are logged
        and re-raised as DatabaseException.
        """
        cutoff = self.cutoff(horizon)
        logger.info(f"Deleting readings captured before {cutoff.isoformat()}")

        try:
            deleted = self.reading_store.delete_readings_before(cutoff)
        except DatabaseException as e:
            logger.error(f"Retention sweep failed: {e.message} {e.details}")
            raise

        record_purge(deleted)
        logger.info(f"Deleted {deleted} old readings")
        return deleted
