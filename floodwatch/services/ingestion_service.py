import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List

from pydantic import ValidationError

from floodwatch.core.civil_time import civil_now
from floodwatch.core.exceptions import DatabaseException, ValidationException
from floodwatch.core.monitoring import record_ingest
from floodwatch.models.reading import SensorReading
from floodwatch.schemas.alert import ReadingAlertEvent
from floodwatch.schemas.reading import ReadingValues, Verdict

logger = logging.getLogger(__name__)

# Canonical field name -> accepted payload keys (device firmware uses the legacy names)
FIELD_KEYS = {
    "right_level": ("right_level", "h_kanan"),
    "left_level": ("left_level", "h_kiri"),
    "right_flow": ("right_flow", "q_kanan"),
    "left_flow": ("left_flow", "q_kiri"),
}


@dataclass
class IngestResult:
    reading: SensorReading
    verdict: Verdict
    alert_attempted: bool
    alert_sent: bool


def parse_reading_payload(payload: Any) -> ReadingValues:
    """
    Validate an inbound payload into the four reading values.

    Keys are matched case-insensitively. Values must be present and coercible
    to finite numbers; no range check is applied.
    """
    if not isinstance(payload, dict):
        raise ValidationException("Reading payload must be a JSON object")

    normalized = {
        str(key).lower(): value for key, value in payload.items() if value is not None
    }

    missing: List[str] = [
        field
        for field, keys in FIELD_KEYS.items()
        if not any(key in normalized for key in keys)
    ]
    if missing:
        raise ValidationException("Missing required fields", {"missing": missing})

    try:
        return ReadingValues.model_validate(normalized)
    except ValidationError as e:
        invalid = [
            {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationException("Invalid reading values", {"invalid": invalid}) from e


class IngestionService:
    """
    Validate, persist, classify and (maybe) alert on one inbound reading.

    The reading is stored before it is classified, so every verdict belongs to
    a durable reading. Classification and notification problems never fail the
    request; validation and store problems always do.
    """

    def __init__(
        self,
        store,
        classifier,
        notifier,
        clock: Callable[[], datetime] = civil_now,
    ):
        self.store = store
        self.classifier = classifier
        self.notifier = notifier
        self.clock = clock

    def ingest(self, payload: Any) -> IngestResult:
        try:
            values = parse_reading_payload(payload)
        except ValidationException as e:
            logger.warning(f"Rejected reading: {e.message} {e.details}")
            record_ingest("rejected")
            raise

        # Server-side receipt time; client-supplied timestamps are ignored
        captured_at = self.clock()

        try:
            reading = self.store.insert_reading(values, captured_at)
        except DatabaseException:
            record_ingest("store_error")
            raise

        verdict = self.classifier.classify(values)
        logger.info(
            f"Reading {reading.id}: status={verdict.status} flood_flag={verdict.flood_flag} "
            f"source={verdict.source.value}"
        )

        alert_attempted = verdict.flood_flag == 1
        alert_sent = False
        if alert_attempted:
            alert_sent = self._send_alert(reading, values, verdict, captured_at)

        record_ingest("accepted")
        return IngestResult(
            reading=reading,
            verdict=verdict,
            alert_attempted=alert_attempted,
            alert_sent=alert_sent,
        )

    def _send_alert(
        self,
        reading: SensorReading,
        values: ReadingValues,
        verdict: Verdict,
        captured_at: datetime,
    ) -> bool:
        try:
            event = ReadingAlertEvent(
                timestamp=captured_at,
                reading_id=reading.id,
                values=values,
                verdict=verdict,
            )
            return bool(self.notifier.notify(event))
        except Exception as e:
            logger.warning(f"Alert for reading {reading.id} failed: {e}")
            return False
