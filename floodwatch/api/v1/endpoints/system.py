from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from floodwatch.api.deps import get_alert_notifier
from floodwatch.core.civil_time import civil_now
from floodwatch.core.config import settings
from floodwatch.services.notification_service import AlertNotifier

router = APIRouter()


@router.get("/time")
def get_server_time():
    """Server clock in UTC and in the deployment's civil zone."""
    now_civil = civil_now()
    return {
        "success": True,
        "time": {
            "utc": datetime.now(timezone.utc).isoformat(),
            "civil": now_civil.isoformat(),
            "civil_display": now_civil.strftime("%d/%m/%Y %H:%M:%S"),
            "timezone": settings.time_zone,
            "utc_offset": now_civil.strftime("%z"),
        },
    }


@router.post("/notifications/test")
def send_test_notification(notifier: AlertNotifier = Depends(get_alert_notifier)):
    """Send a sample alert to the configured chat."""
    sent = notifier.send_test_alert()
    return {
        "success": sent,
        "telegram_enabled": settings.telegram_enabled,
    }
