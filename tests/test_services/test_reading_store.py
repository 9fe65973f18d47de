from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.dialects import postgresql

from floodwatch.core.exceptions import DatabaseException
from floodwatch.models.daily_summary import DailySummary
from floodwatch.models.reading import SensorReading
from floodwatch.schemas.reading import ReadingValues
from floodwatch.schemas.summary import DailySummaryRecord
from floodwatch.services.reading_store import ReadingStore, SummaryStore

JAKARTA = ZoneInfo("Asia/Jakarta")
NOW = datetime(2026, 10, 19, 8, 0, tzinfo=JAKARTA)


def test_insert_reading(mock_db_session):
    values = ReadingValues(right_level=1, left_level=2, right_flow=3, left_flow=4)

    reading = ReadingStore(mock_db_session).insert_reading(values, NOW)

    assert isinstance(reading, SensorReading)
    assert reading.right_level == 1
    assert reading.left_flow == 4
    assert reading.captured_at == NOW
    mock_db_session.add.assert_called_once_with(reading)
    mock_db_session.commit.assert_called_once()
    mock_db_session.refresh.assert_called_once_with(reading)


def test_insert_failure_rolls_back(mock_db_session):
    mock_db_session.commit.side_effect = Exception("INSERT INTO sensor_readings failed")
    values = ReadingValues(right_level=1, left_level=2, right_flow=3, left_flow=4)

    with pytest.raises(DatabaseException) as exc:
        ReadingStore(mock_db_session).insert_reading(values, NOW)
    assert "sensor_readings" not in str(exc.value.details)
    mock_db_session.rollback.assert_called_once()


def test_list_readings_between(mock_db_session, make_reading):
    rows = [make_reading(id=1), make_reading(id=2)]
    mock_db_session.query.return_value.filter.return_value.order_by.return_value.all.return_value = rows

    result = ReadingStore(mock_db_session).list_readings_between(NOW, NOW)

    assert result == rows
    mock_db_session.query.assert_called_once_with(SensorReading)


def test_delete_readings_before(mock_db_session):
    query = mock_db_session.query.return_value.filter.return_value
    query.delete.return_value = 5

    deleted = ReadingStore(mock_db_session).delete_readings_before(NOW)

    assert deleted == 5
    query.delete.assert_called_once_with(synchronize_session=False)
    mock_db_session.commit.assert_called_once()


def test_delete_failure_rolls_back(mock_db_session):
    mock_db_session.query.return_value.filter.return_value.delete.side_effect = Exception("locked")

    with pytest.raises(DatabaseException):
        ReadingStore(mock_db_session).delete_readings_before(NOW)
    mock_db_session.rollback.assert_called_once()


def test_latest_reading_none_when_empty(mock_db_session):
    mock_db_session.query.return_value.order_by.return_value.limit.return_value.all.return_value = []
    assert ReadingStore(mock_db_session).latest_reading() is None


def test_count_readings(mock_db_session):
    mock_db_session.query.return_value.scalar.return_value = 12
    assert ReadingStore(mock_db_session).count_readings() == 12


def test_upsert_summary_executes_single_statement(mock_db_session):
    record = DailySummaryRecord(summary_date=date(2026, 10, 18), computed_at=NOW)

    result = SummaryStore(mock_db_session).upsert_summary(record)

    assert result is record
    mock_db_session.execute.assert_called_once()
    stmt = mock_db_session.execute.call_args[0][0]
    assert stmt.table.name == "daily_summaries"
    mock_db_session.commit.assert_called_once()


def test_upsert_overwrites_row_for_same_date(mock_db_session):
    record = DailySummaryRecord(summary_date=date(2026, 10, 18), computed_at=NOW, status="FLOOD")

    SummaryStore(mock_db_session).upsert_summary(record)

    stmt = mock_db_session.execute.call_args[0][0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    conflict, _, assignments = sql.partition("ON CONFLICT (summary_date) DO UPDATE SET")
    assert conflict.startswith("INSERT INTO daily_summaries")
    for column in DailySummary.__table__.columns.keys():
        if column in ("summary_date", "created_at"):
            assert f"{column} = excluded.{column}" not in assignments
        else:
            assert f"{column} = excluded.{column}" in assignments


def test_upsert_failure_rolls_back(mock_db_session):
    mock_db_session.execute.side_effect = Exception("deadlock")
    record = DailySummaryRecord(summary_date=date(2026, 10, 18), computed_at=NOW)

    with pytest.raises(DatabaseException) as exc:
        SummaryStore(mock_db_session).upsert_summary(record)
    assert exc.value.details["summary_date"] == "2026-10-18"
    mock_db_session.rollback.assert_called_once()


def test_count_by_flood_flag(mock_db_session):
    mock_db_session.query.return_value.group_by.return_value.all.return_value = [(0, 12), (1, 3)]
    assert SummaryStore(mock_db_session).count_by_flood_flag() == {0: 12, 1: 3}
