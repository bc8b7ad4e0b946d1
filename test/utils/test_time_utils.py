from datetime import datetime, timezone

from lms_engine.utils.time_utils import generate_id, parse_iso_timestamp, utc_now_iso


def test_utc_now_iso_uses_z_suffix():
    now = utc_now_iso()
    assert now.endswith("Z")
    assert parse_iso_timestamp(now) is not None


def test_parse_iso_timestamp_variants():
    expected = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert parse_iso_timestamp("2024-03-01T12:00:00Z") == expected
    assert parse_iso_timestamp("2024-03-01T12:00:00+00:00") == expected
    assert parse_iso_timestamp("2024-03-01T14:00:00+02:00") == expected
    assert parse_iso_timestamp("2024-03-01T12:00:00") == expected


def test_parse_iso_timestamp_invalid():
    assert parse_iso_timestamp("") is None
    assert parse_iso_timestamp("yesterday") is None


def test_generate_id_is_prefixed_and_unique():
    first = generate_id("user")
    second = generate_id("user")
    assert first.startswith("user-")
    assert first != second
