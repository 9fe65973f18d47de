from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from floodwatch.core.config import settings

celery_app = Celery(
    "floodwatch_worker",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["floodwatch.tasks.maintenance_tasks"],
)

# crontab entries are evaluated in the deployment's civil zone
celery_app.conf.timezone = settings.time_zone
celery_app.conf.enable_utc = True
celery_app.conf.task_serializer = "json"
celery_app.conf.result_serializer = "json"
celery_app.conf.accept_content = ["json"]

celery_app.conf.beat_schedule = {
    "daily-summary": {
        "task": "floodwatch.tasks.maintenance_tasks.generate_daily_summary",
        "schedule": crontab(hour=settings.rollup_hour, minute=settings.rollup_minute),
    },
    "purge-old-readings": {
        "task": "floodwatch.tasks.maintenance_tasks.purge_old_readings",
        "schedule": crontab(hour=settings.cleanup_hour, minute=settings.cleanup_minute),
    },
}


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Use the application's logging configuration instead of Celery's."""
    from floodwatch.core.logging_config import setup_logging

    setup_logging()
