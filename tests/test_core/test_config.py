import pytest
from pydantic import ValidationError

from floodwatch.core.config import Settings, load_settings
from floodwatch.core.exceptions import ConfigurationException


def test_defaults():
    s = Settings(_env_file=None)
    assert s.time_zone == "Asia/Jakarta"
    assert s.flood_threshold == 150.0
    assert s.danger_threshold == 180.0
    assert s.watch_threshold == 120.0
    assert s.retention_days == 30
    assert (s.rollup_hour, s.rollup_minute) == (0, 5)
    assert (s.cleanup_hour, s.cleanup_minute) == (1, 0)
    assert s.tzinfo.key == "Asia/Jakarta"


def test_unknown_time_zone_rejected():
    with pytest.raises(ValidationError) as exc:
        Settings(_env_file=None, TIME_ZONE="Mars/Olympus_Mons")
    assert "Unknown time zone" in str(exc.value)


def test_threshold_order_enforced():
    with pytest.raises(ValidationError) as exc:
        Settings(_env_file=None, WATCH_THRESHOLD=200)
    assert "WATCH_THRESHOLD <= FLOOD_THRESHOLD <= DANGER_THRESHOLD" in str(exc.value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None, FLOOD_THRESHOLD=190)


def test_retention_must_cover_a_full_day():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, RETENTION_DAYS=1)
    assert Settings(_env_file=None, RETENTION_DAYS=2).retention_days == 2


def test_log_format_normalized():
    assert Settings(_env_file=None, LOG_FORMAT="JSON").log_format == "json"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_FORMAT="xml")


def test_telegram_enabled_requires_both_values():
    assert not Settings(_env_file=None, TELEGRAM_BOT_TOKEN="abc").telegram_enabled
    assert not Settings(_env_file=None, TELEGRAM_CHAT_ID="42").telegram_enabled
    assert Settings(
        _env_file=None, TELEGRAM_BOT_TOKEN="abc", TELEGRAM_CHAT_ID="42"
    ).telegram_enabled


def test_cors_origins_list():
    assert Settings(_env_file=None).cors_origins_list == ["*"]
    assert Settings(
        _env_file=None, CORS_ORIGINS="http://a.test, http://b.test"
    ).cors_origins_list == ["http://a.test", "http://b.test"]
    assert Settings(
        _env_file=None, CORS_ORIGINS='["http://c.test"]'
    ).cors_origins_list == ["http://c.test"]


def test_load_settings_wraps_validation_errors(monkeypatch):
    monkeypatch.setenv("TIME_ZONE", "Not/AZone")

    with pytest.raises(ConfigurationException) as exc:
        load_settings()

    errors = exc.value.details["errors"]
    assert len(errors) == 1
    assert "Unknown time zone" in errors[0]["error"]
