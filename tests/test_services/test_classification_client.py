from unittest.mock import MagicMock, patch

import pytest
import requests

from floodwatch.core.exceptions import ClassificationException
from floodwatch.schemas.reading import ReadingValues
from floodwatch.services.classification_client import ClassificationClient

VALUES = ReadingValues(right_level=125.5, left_level=115.0, right_flow=88.0, left_flow=80.5)


@pytest.fixture
def mock_session():
    with patch("floodwatch.services.classification_client.requests.Session") as mock:
        yield mock.return_value


def test_predict_posts_model_field_names(mock_session):
    mock_session.post.return_value.json.return_value = {
        "Status": "AMAN",
        "Confidence": 91,
    }
    client = ClassificationClient("http://ml:8000/", timeout=5)

    body = client.predict(VALUES)

    assert body == {"status": "AMAN", "confidence": 91}
    mock_session.post.assert_called_once_with(
        "http://ml:8000/predict",
        json={"h_kanan": 125.5, "h_kiri": 115.0, "q_kanan": 88.0, "q_kiri": 80.5},
        timeout=5,
    )


def test_timeout_raises(mock_session):
    mock_session.post.side_effect = requests.exceptions.Timeout()
    client = ClassificationClient("http://ml:8000")

    with pytest.raises(ClassificationException) as exc:
        client.predict(VALUES)
    assert "timed out" in exc.value.message


def test_connection_error_raises(mock_session):
    mock_session.post.side_effect = requests.exceptions.ConnectionError("refused")
    client = ClassificationClient("http://ml:8000")

    with pytest.raises(ClassificationException):
        client.predict(VALUES)


def test_http_error_raises(mock_session):
    response = MagicMock(status_code=500)
    mock_session.post.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError(
        response=response
    )
    client = ClassificationClient("http://ml:8000")

    with pytest.raises(ClassificationException) as exc:
        client.predict(VALUES)
    assert exc.value.details["status_code"] == 500


def test_invalid_json_raises(mock_session):
    mock_session.post.return_value.json.side_effect = ValueError("no json")
    client = ClassificationClient("http://ml:8000")

    with pytest.raises(ClassificationException):
        client.predict(VALUES)


def test_non_object_body_raises(mock_session):
    mock_session.post.return_value.json.return_value = ["SAFE"]
    client = ClassificationClient("http://ml:8000")

    with pytest.raises(ClassificationException):
        client.predict(VALUES)
