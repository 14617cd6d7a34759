from datetime import datetime, timezone, timedelta

import pytest
from hypothesis import given, strategies as st

from plantcare.app.utils.date_time import parse_dt, to_iso_utc, to_naive_utc, utcnow


@pytest.mark.parametrize(
    "dt_in, expected",
    [
        (None, None),
        (datetime(2025, 1, 1, 12, 0, 0), "2025-01-01T12:00:00Z"),  # naive assumed UTC
        (datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=2))), "2025-01-01T10:00:00Z"),
        (datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc), "2025-01-01T12:00:00Z"),
    ],
)
def test_to_iso_utc(dt_in, expected):
    assert to_iso_utc(dt_in) == expected


@pytest.mark.parametrize(
    "raw, expected_iso",
    [
        ("2025-01-02T03:04:05Z", "2025-01-02T03:04:05+00:00"),
        ("2025-01-02T05:04:05+02:00", "2025-01-02T03:04:05+00:00"),
        ("2025-01-02 03:04:05", "2025-01-02T03:04:05+00:00"),
        (datetime(2025, 1, 2, 3, 4, 5), "2025-01-02T03:04:05+00:00"),
        (datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-3))), "2025-01-02T06:04:05+00:00"),
    ],
)
def test_parse_dt_variants(raw, expected_iso):
    dt = parse_dt(raw)
    assert dt.tzinfo is not None
    assert dt.isoformat() == expected_iso


def test_parse_dt_invalid():
    with pytest.raises(ValueError):
        parse_dt("not-a-date")


def test_to_naive_utc_drops_tz_after_converting():
    assert to_naive_utc(None) is None
    aware = datetime(2025, 6, 1, 8, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2025, 6, 1, 6, 0)
    assert to_naive_utc("2025-06-01T06:00:00Z") == datetime(2025, 6, 1, 6, 0)
    assert to_naive_utc(datetime(2025, 6, 1, 6, 0)) == datetime(2025, 6, 1, 6, 0)


def test_utcnow_is_naive_whole_seconds():
    now = utcnow()
    assert now.tzinfo is None
    assert now.microsecond == 0


iso_with_z = st.datetimes(
    timezones=st.just(timezone.utc),
    min_value=datetime(1970, 1, 1),  # bounds must be naive per Hypothesis API
    max_value=datetime(2100, 12, 31),
).map(lambda d: d.replace(microsecond=0).isoformat().replace("+00:00", "Z"))


@given(iso_with_z)
def test_naive_utc_and_iso_roundtrip(z_str):
    naive = to_naive_utc(z_str)
    assert naive.tzinfo is None
    assert to_iso_utc(naive) == z_str
