import logging
import math
from typing import Any, Dict, Optional

from floodwatch.core.exceptions import ClassificationException
from floodwatch.core.monitoring import record_verdict
from floodwatch.schemas.reading import (
    RiskStatus,
    ReadingValues,
    Verdict,
    VerdictSource,
    flood_flag_for,
    normalize_status,
)
from floodwatch.services.classification_client import ClassificationClient

logger = logging.getLogger(__name__)

SAFE_RECOMMENDATION = "Water levels are within normal range."


class RiskClassifier:
    """
    Produces a verdict for every reading.

    The remote model is asked first; if it cannot answer, a deterministic
    threshold rule on the two water levels decides instead.
    """

    def __init__(
        self,
        client: Optional[ClassificationClient],
        flood_threshold: float = 150.0,
        fallback_confidence: float = 90.0,
        fallback_recommendation: str = "Evacuate immediately and inspect the flood gates!",
    ):
        self.client = client
        self.flood_threshold = flood_threshold
        self.fallback_confidence = fallback_confidence
        self.fallback_recommendation = fallback_recommendation

    def classify(self, values: ReadingValues) -> Verdict:
        try:
            if self.client is None:
                raise ClassificationException("No classification service configured")
            body = self.client.predict(values)
            verdict = self._parse_remote(body)
        except ClassificationException as e:
            logger.warning(f"Classification service unavailable, using threshold rule: {e.message}")
            verdict = self.fallback(values)
        except Exception as e:
            logger.warning(f"Unexpected classification failure, using threshold rule: {e}")
            verdict = self.fallback(values)

        record_verdict(verdict.source.value, verdict.status)
        return verdict

    def fallback(self, values: ReadingValues) -> Verdict:
        """Deterministic rule: either level above the flood threshold means FLOOD."""
        if values.right_level > self.flood_threshold or values.left_level > self.flood_threshold:
            return Verdict(
                status=RiskStatus.FLOOD.value,
                confidence=self.fallback_confidence,
                recommendation=self.fallback_recommendation,
                source=VerdictSource.FALLBACK,
            )
        return Verdict(
            status=RiskStatus.SAFE.value,
            confidence=self.fallback_confidence,
            recommendation=SAFE_RECOMMENDATION,
            source=VerdictSource.FALLBACK,
        )

    def _parse_remote(self, body: Dict[str, Any]) -> Verdict:
        raw_status = body.get("status")
        if raw_status is None or not str(raw_status).strip():
            raise ClassificationException("Classification response has no status", {"body": body})

        verdict = Verdict(
            status=normalize_status(raw_status),
            confidence=_clamp_confidence(body.get("confidence")),
            recommendation=str(body.get("recommendation") or ""),
            source=VerdictSource.REMOTE,
        )

        if not verdict.recognized:
            logger.warning(f"Unrecognized status from classification service: {raw_status!r}")

        prediction = body.get("prediction")
        if prediction is not None and _as_int(prediction) != flood_flag_for(verdict.status):
            logger.info(
                f"Remote prediction={prediction} disagrees with status {verdict.status}; "
                f"flood flag follows the status"
            )
        return verdict


def _clamp_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(confidence):
        return 0.0
    return max(0.0, min(100.0, confidence))


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
