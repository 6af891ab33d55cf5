from datetime import date, datetime, timedelta, timezone

import pytest

from utils.time_utils import day_bounds_utc, parse_to_utc, start_of_day_utc, utc_now


def test_parse_iso_and_naive_inputs():
    assert parse_to_utc("2024-01-01T05:00:00Z") == datetime(
        2024, 1, 1, 5, tzinfo=timezone.utc
    )
    assert parse_to_utc("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_to_utc(datetime(2024, 1, 1, 5)).tzinfo is timezone.utc
    assert parse_to_utc(date(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_offsets_convert_to_utc():
    assert parse_to_utc("2024-01-01T23:30:00-02:00") == datetime(
        2024, 1, 2, 1, 30, tzinfo=timezone.utc
    )


def test_parse_epoch_seconds_and_millis():
    expected = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_to_utc(1704067200) == expected
    assert parse_to_utc(1704067200000) == expected


@pytest.mark.parametrize("bad", ["not-a-date", object(), True])
def test_parse_rejects_garbage(bad):
    with pytest.raises(ValueError):
        parse_to_utc(bad)


def test_start_of_day_uses_utc_calendar_day():
    late_local = datetime(2024, 1, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert start_of_day_utc(late_local) == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_day_bounds_are_half_open_one_day():
    start, end = day_bounds_utc("2024-01-01T18:00:00Z")
    assert start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_utc_now_is_aware():
    assert utc_now().tzinfo is timezone.utc
