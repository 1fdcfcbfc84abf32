from datetime import datetime, timedelta, timezone

import pytest

from churchecker.core.timeutils import month_bounds, parse_timestamp


@pytest.mark.parametrize("value, micro", [
    ("2024-05-01T10:00:00.12345+00:00", 123450),
    ("2024-05-01T10:00:00.1+00:00", 100000),
    ("2024-05-01T10:00:00.123456+00:00", 123456),
    ("2024-05-01T10:00:00Z", 0),
])
def test_parse_timestamp_accepts_postgrest_fractions(value, micro):
    parsed = parse_timestamp(value)
    assert parsed == datetime(2024, 5, 1, 10, 0, 0, micro, tzinfo=timezone.utc)


def test_parse_timestamp_keeps_offsets_and_assumes_utc_when_naive():
    assert parse_timestamp("2026-11-01T10:00:00+09:00").utcoffset() == timedelta(hours=9)
    assert parse_timestamp("2026-11-01T10:00:00").tzinfo == timezone.utc
    assert parse_timestamp(datetime(2026, 11, 1, 10)).tzinfo == timezone.utc
    assert parse_timestamp(None) is None


def test_month_bounds():
    first, last = month_bounds(2028, 2)
    assert (first.day, last.day) == (1, 29)
