from datetime import date, datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

JAKARTA = ZoneInfo("Asia/Jakarta")


def _summary(day, status="SAFE", flag=0, count=10):
    return SimpleNamespace(
        summary_date=day,
        avg_right_level=100.0,
        avg_left_level=90.0,
        avg_right_flow=60.0,
        avg_left_flow=55.0,
        sample_count=count,
        status=status,
        flood_flag=flag,
        last_status=status,
        last_flood_flag=flag,
        computed_at=datetime(2026, 10, 19, 0, 5, tzinfo=JAKARTA),
    )


def test_list_summaries(client, mock_db_session):
    mock_db_session.query.return_value.order_by.return_value.limit.return_value.all.return_value = [
        _summary(date(2026, 10, 18), "FLOOD", 1),
        _summary(date(2026, 10, 17)),
    ]

    response = client.get("/api/v1/summaries?limit=2")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert data["data"][0]["summary_date"] == "2026-10-18"
    assert data["data"][0]["flood_flag"] == 1


def test_get_summary(client, mock_db_session):
    mock_db_session.query.return_value.filter.return_value.first.return_value = _summary(date(2026, 10, 18))

    response = client.get("/api/v1/summaries/2026-10-18")

    assert response.status_code == 200
    assert response.json()["sample_count"] == 10


def test_get_summary_not_found(client, mock_db_session):
    mock_db_session.query.return_value.filter.return_value.first.return_value = None

    response = client.get("/api/v1/summaries/2026-10-18")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ResourceNotFoundException"


def test_get_summary_bad_date(client):
    assert client.get("/api/v1/summaries/yesterday").status_code == 422


def test_compute_summary_empty_day(client, mock_db_session, mock_notifier):
    mock_db_session.query.return_value.filter.return_value.order_by.return_value.all.return_value = []

    response = client.post("/api/v1/summaries/2026-10-18/compute")

    assert response.status_code == 200
    data = response.json()
    assert data["summary_date"] == "2026-10-18"
    assert data["sample_count"] == 0
    assert data["status"] == "SAFE"
    mock_db_session.execute.assert_called_once()
    mock_notifier.notify.assert_not_called()


def test_compute_summary_danger_day(client, mock_db_session, mock_notifier, make_reading):
    mock_db_session.query.return_value.filter.return_value.order_by.return_value.all.return_value = [
        make_reading(id=1, right_level=120, left_level=100),
        make_reading(id=2, right_level=160, left_level=90),
        make_reading(id=3, right_level=200, left_level=110),
    ]

    response = client.post("/api/v1/summaries/2026-10-18/compute")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "DANGER"
    assert data["sample_count"] == 3
    mock_notifier.notify.assert_called_once()


def test_statistics(client, mock_db_session, make_reading):
    query = mock_db_session.query.return_value
    query.scalar.return_value = 42
    query.order_by.return_value.limit.return_value.all.return_value = [make_reading(id=42)]
    query.group_by.return_value.all.return_value = [(0, 20), (1, 4)]

    response = client.get("/api/v1/stats")

    assert response.status_code == 200
    stats = response.json()["statistics"]
    assert stats["total_readings"] == 42
    assert stats["flood_days"] == 4
    assert stats["safe_days"] == 20
    assert stats["latest_reading"]["id"] == 42
