import logging
from datetime import date, timedelta
from typing import Optional

from celery.signals import worker_ready

from floodwatch.core.celery_app import celery_app
from floodwatch.core.civil_time import civil_today
from floodwatch.core.config import settings
from floodwatch.core.database import SessionLocal
from floodwatch.services.reading_store import ReadingStore, SummaryStore
from floodwatch.services.retention_service import RetentionService
from floodwatch.services.rollup_service import RollupService

logger = logging.getLogger(__name__)


def _build_notifier():
    from floodwatch.api.deps import get_alert_notifier

    return get_alert_notifier()


@celery_app.task
def generate_daily_summary(target_date: Optional[str] = None):
    """
    Roll up one civil day of readings (default: yesterday in civil time).
    Never raises; failures are logged and reported in the result.
    """
    db_session = SessionLocal()
    try:
        day = (
            date.fromisoformat(target_date)
            if target_date
            else civil_today() - timedelta(days=1)
        )
        logger.info(f"Daily summary triggered for {day}")

        service = RollupService(
            reading_store=ReadingStore(db_session),
            summary_store=SummaryStore(db_session),
            notifier=_build_notifier(),
            flood_threshold=settings.flood_threshold,
            danger_threshold=settings.danger_threshold,
            watch_threshold=settings.watch_threshold,
        )
        record = service.compute_daily_summary(day)
        return {
            "status": "success",
            "summary_date": record.summary_date.isoformat(),
            "sample_count": record.sample_count,
            "summary_status": record.status,
        }
    except Exception as e:
        logger.error(f"Daily summary failed: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}
    finally:
        db_session.close()


@celery_app.task
def purge_old_readings(retention_days: Optional[int] = None):
    """Delete readings older than the retention horizon. Never raises."""
    db_session = SessionLocal()
    try:
        days = settings.retention_days if retention_days is None else retention_days
        service = RetentionService(ReadingStore(db_session), retention_days=days)
        deleted = service.purge_older_than(timedelta(days=days))
        return {"status": "success", "deleted": deleted, "retention_days": days}
    except Exception as e:
        logger.error(f"Cleanup failed: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}
    finally:
        db_session.close()


@worker_ready.connect
def warm_up_daily_summary(sender=None, **kwargs):
    """Queue one rollup shortly after the worker starts."""
    if not settings.rollup_warmup_enabled:
        return
    logger.info(
        f"Scheduling warm-up daily summary in {settings.rollup_warmup_delay_seconds}s"
    )
    generate_daily_summary.apply_async(countdown=settings.rollup_warmup_delay_seconds)
