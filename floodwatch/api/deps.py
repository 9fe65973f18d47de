"""
API dependencies: collaborator handles and per-request services.

The classification client and the Telegram sink are built once per process;
services are built per request around the request's database session. Tests
replace any of these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from floodwatch.core.config import settings
from floodwatch.core.database import get_db  # noqa
from floodwatch.services.classification_client import ClassificationClient
from floodwatch.services.ingestion_service import IngestionService
from floodwatch.services.notification_service import AlertNotifier, TelegramNotifier
from floodwatch.services.reading_store import ReadingStore, SummaryStore
from floodwatch.services.risk_classifier import RiskClassifier
from floodwatch.services.rollup_service import RollupService
from floodwatch.services.status_service import StatusService


@lru_cache
def get_classification_client() -> ClassificationClient:
    return ClassificationClient(
        base_url=settings.classifier_url, timeout=settings.classifier_timeout
    )


@lru_cache
def get_telegram_notifier() -> TelegramNotifier:
    return TelegramNotifier(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        api_url=settings.telegram_api_url,
        timeout=settings.notification_timeout,
    )


def get_alert_notifier() -> AlertNotifier:
    return AlertNotifier(get_telegram_notifier())


def get_risk_classifier() -> RiskClassifier:
    return RiskClassifier(
        client=get_classification_client(),
        flood_threshold=settings.flood_threshold,
        fallback_confidence=settings.fallback_confidence,
        fallback_recommendation=settings.fallback_recommendation,
    )


def get_ingestion_service(
    db: Session = Depends(get_db),
    classifier: RiskClassifier = Depends(get_risk_classifier),
    notifier: AlertNotifier = Depends(get_alert_notifier),
) -> IngestionService:
    return IngestionService(
        store=ReadingStore(db), classifier=classifier, notifier=notifier
    )


def get_rollup_service(
    db: Session = Depends(get_db),
    notifier: AlertNotifier = Depends(get_alert_notifier),
) -> RollupService:
    return RollupService(
        reading_store=ReadingStore(db),
        summary_store=SummaryStore(db),
        notifier=notifier,
        flood_threshold=settings.flood_threshold,
        danger_threshold=settings.danger_threshold,
        watch_threshold=settings.watch_threshold,
    )


def get_status_service(
    db: Session = Depends(get_db),
    classifier: RiskClassifier = Depends(get_risk_classifier),
) -> StatusService:
    return StatusService(
        reading_store=ReadingStore(db),
        summary_store=SummaryStore(db),
        classifier=classifier,
    )


def get_summary_store(db: Session = Depends(get_db)) -> SummaryStore:
    return SummaryStore(db)
