from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from floodwatch.core.civil_time import civil_now, day_window, get_civil_timezone, to_civil

JAKARTA = ZoneInfo("Asia/Jakarta")


def _length(window):
    start, end = window
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def test_default_zone_comes_from_settings():
    assert get_civil_timezone().key == "Asia/Jakarta"
    assert get_civil_timezone("Europe/Berlin").key == "Europe/Berlin"


def test_civil_now_is_aware():
    now = civil_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(hours=7)


def test_day_window_starts_at_local_midnight():
    start, end = day_window(date(2026, 10, 18), "Asia/Jakarta")

    assert start == datetime(2026, 10, 18, 0, 0, tzinfo=JAKARTA)
    assert end == datetime(2026, 10, 19, 0, 0, tzinfo=JAKARTA)
    assert start.astimezone(timezone.utc) == datetime(2026, 10, 17, 17, 0, tzinfo=timezone.utc)
    assert _length((start, end)) == timedelta(hours=24)


def test_day_window_follows_dst_transitions():
    assert _length(day_window(date(2026, 3, 29), "Europe/Berlin")) == timedelta(hours=23)
    assert _length(day_window(date(2026, 10, 25), "Europe/Berlin")) == timedelta(hours=25)
    assert _length(day_window(date(2026, 7, 1), "Europe/Berlin")) == timedelta(hours=24)


def test_to_civil_converts_aware_values():
    utc_value = datetime(2026, 1, 1, 17, 0, tzinfo=timezone.utc)
    assert to_civil(utc_value, "Asia/Jakarta") == datetime(2026, 1, 2, 0, 0, tzinfo=JAKARTA)
    assert to_civil(utc_value, "Asia/Jakarta").day == 2


def test_to_civil_treats_naive_as_wall_clock():
    naive = datetime(2026, 1, 1, 9, 15)
    converted = to_civil(naive, "Asia/Jakarta")
    assert converted.hour == 9
    assert converted.tzinfo.key == "Asia/Jakarta"
