"""
Telegram alert delivery and message formatting.
"""

import logging
from typing import Optional, Union

import requests

from floodwatch.core.civil_time import civil_now, to_civil
from floodwatch.core.exceptions import NotificationException
from floodwatch.core.monitoring import record_notification
from floodwatch.schemas.alert import AlertEvent, DailyAlertEvent, ReadingAlertEvent
from floodwatch.schemas.reading import RiskStatus, ReadingValues, Verdict, VerdictSource

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATION = "Evacuate immediately and inspect the flood gates!"
TIME_FORMAT = "%d/%m/%Y %H:%M:%S"


class TelegramNotifier:
    """Sends Markdown messages to a single Telegram chat."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def send(self, message: str) -> bool:
        """Deliver one message. Returns False on any failure, never raises."""
        if not self.enabled:
            logger.warning("Telegram credentials not set (TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)")
            return False

        try:
            self._post(message)
            logger.info(f"Telegram alert sent to chat {self.chat_id}")
            return True
        except NotificationException as e:
            logger.warning(f"Failed to send Telegram alert: {e.message} {e.details}")
            return False

    def _post(self, message: str):
        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": message,
            "parse_mode": "Markdown",
            "disable_notification": False,
        }
        try:
            resp = self._session.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.exceptions.Timeout as e:
            raise NotificationException("Telegram request timed out", {"timeout": self.timeout}) from e
        except requests.exceptions.RequestException as e:
            # The URL embeds the bot token, keep it out of the logs
            status_code = getattr(getattr(e, "response", None), "status_code", None)
            raise NotificationException(
                "Telegram request failed", {"status_code": status_code, "error": type(e).__name__}
            ) from e
        except ValueError as e:
            raise NotificationException("Telegram returned invalid JSON") from e

        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else None
            raise NotificationException(
                "Telegram rejected the message", {"description": description}
            )


def _format_time(value) -> str:
    return to_civil(value).strftime(TIME_FORMAT)


def format_reading_alert(event: ReadingAlertEvent) -> str:
    values = event.values
    verdict = event.verdict
    recommendation = verdict.recommendation or DEFAULT_RECOMMENDATION
    reading_line = f"*Reading:* #{event.reading_id}\n" if event.reading_id is not None else ""

    return (
        "🚨 *FLOOD ALERT DETECTED!* 🚨\n\n"
        f"*Time:* {_format_time(event.timestamp)}\n"
        f"*Status:* {verdict.status}\n"
        f"*Confidence:* {verdict.confidence:g}%\n"
        f"*Source:* {verdict.source.value}\n"
        f"{reading_line}\n"
        "📊 *SENSOR DATA:*\n"
        f"• Right water level: {values.right_level:g} cm\n"
        f"• Left water level: {values.left_level:g} cm\n"
        f"• Right flow: {values.right_flow:g} L/s\n"
        f"• Left flow: {values.left_flow:g} L/s\n\n"
        "⚠️ *IMMEDIATE ACTION:*\n"
        f"{recommendation}\n\n"
        "📍 *Automatic Flood Detection System*"
    )


def format_daily_alert(event: DailyAlertEvent) -> str:
    if event.status == RiskStatus.DANGER.value:
        closing = "🚨 *HIGH ALERT!*\nConditions are extremely dangerous!"
    else:
        closing = "⚠️ *FLOOD WATCH!*\nBe careful with the water conditions."

    return (
        "📊 *DAILY FLOOD REPORT*\n\n"
        f"📅 *Date:* {event.summary_date.isoformat()}\n"
        f"⚠️ *Status:* {event.status}\n\n"
        "📈 *Statistics:*\n"
        f"   • Average right: {event.avg_right_level:.1f} cm\n"
        f"   • Average left: {event.avg_left_level:.1f} cm\n"
        f"   • Maximum right: {event.max_right_level:.1f} cm\n"
        f"   • Maximum left: {event.max_left_level:.1f} cm\n"
        f"   • Total readings: {event.sample_count}\n"
        f"   • Flood events: {event.flood_event_count}x ({event.flood_share:.1f}%)\n\n"
        f"{closing}"
    )


def format_alert_message(event: Union[ReadingAlertEvent, DailyAlertEvent]) -> str:
    if isinstance(event, DailyAlertEvent):
        return format_daily_alert(event)
    if isinstance(event, ReadingAlertEvent):
        return format_reading_alert(event)
    raise TypeError(f"Unsupported alert event: {type(event).__name__}")


class AlertNotifier:
    """
    Best-effort alert delivery on top of a message sink.
    Failures are logged and reported as False, never raised.
    """

    def __init__(self, sink):
        self.sink = sink

    def notify(self, event: AlertEvent) -> bool:
        kind = getattr(event, "kind", "unknown")
        try:
            message = format_alert_message(event)
            sent = bool(self.sink.send(message))
        except Exception as e:
            logger.warning(f"Alert delivery failed ({kind}): {e}")
            sent = False

        if not sent:
            logger.warning(f"Alert ({kind}) was not delivered")
        record_notification(kind, sent)
        return sent

    def send_test_alert(self) -> bool:
        """Send a sample reading alert to verify the channel end to end."""
        event = ReadingAlertEvent(
            timestamp=civil_now(),
            reading_id=None,
            values=ReadingValues(right_level=160, left_level=155, right_flow=120, left_flow=110),
            verdict=Verdict(
                status="TEST",
                confidence=95,
                recommendation="This is a test message from the flood monitoring system",
                source=VerdictSource.FALLBACK,
            ),
        )
        return self.notify(event)
