from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.orm import Session

from floodwatch.schemas.reading import Verdict, VerdictSource

JAKARTA = ZoneInfo("Asia/Jakarta")


@pytest.fixture
def mock_db_session():
    """Fixture for mocking SQLAlchemy session."""
    session = MagicMock(spec=Session)
    return session


@pytest.fixture
def fixed_now():
    return datetime(2026, 10, 19, 8, 30, tzinfo=JAKARTA)


@pytest.fixture
def make_reading():
    """Factory for stored-reading stand-ins (attribute access like the ORM row)."""

    def _make(
        id=1,
        right_level=100.0,
        left_level=95.0,
        right_flow=70.0,
        left_flow=65.0,
        captured_at=None,
    ):
        return SimpleNamespace(
            id=id,
            right_level=right_level,
            left_level=left_level,
            right_flow=right_flow,
            left_flow=left_flow,
            captured_at=captured_at or datetime(2026, 10, 19, 8, 0, tzinfo=JAKARTA),
        )

    return _make


@pytest.fixture
def safe_verdict():
    return Verdict(
        status="SAFE",
        confidence=88.0,
        recommendation="Water levels are within normal range.",
        source=VerdictSource.REMOTE,
    )


@pytest.fixture
def flood_verdict():
    return Verdict(
        status="FLOOD",
        confidence=93.0,
        recommendation="Evacuate low-lying areas",
        source=VerdictSource.REMOTE,
    )


@pytest.fixture
def mock_classifier(safe_verdict):
    classifier = MagicMock()
    classifier.classify.return_value = safe_verdict
    return classifier


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.notify.return_value = True
    notifier.send_test_alert.return_value = True
    return notifier


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: Mark tests as API tests")
    config.addinivalue_line("markers", "core: Mark tests as Core tests")
    config.addinivalue_line("markers", "services: Mark tests as Service tests")
    config.addinivalue_line("markers", "tasks: Mark tests as Celery task tests")
    config.addinivalue_line("markers", "v1: Mark tests as V1 API tests")


def pytest_collection_modifyitems(items):
    """Add markers based on directory structure."""
    for item in items:
        path = str(item.fspath)

        if "test_api" in path:
            item.add_marker("api")
            item.add_marker("v1")

        if "test_core" in path:
            item.add_marker("core")

        if "test_services" in path:
            item.add_marker("services")

        if "test_tasks" in path:
            item.add_marker("tasks")


@pytest.fixture
def client(mock_db_session, mock_classifier, mock_notifier):
    """
    Test client with dependency overrides.
    - Mocks DB session
    - Replaces the risk classifier and the alert notifier
    """
    from fastapi.testclient import TestClient

    from floodwatch.api.deps import get_alert_notifier, get_risk_classifier
    from floodwatch.core.database import get_db
    from floodwatch.main import app

    def override_get_db():
        try:
            yield mock_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_risk_classifier] = lambda: mock_classifier
    app.dependency_overrides[get_alert_notifier] = lambda: mock_notifier

    with patch("floodwatch.main.init_db"), TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
