"""Unit tests for base64 and timestamp encodings."""

from datetime import datetime, timedelta, timezone

import pytest

from secure_envelope.utils.encoding import (
    b64decode,
    b64encode,
    format_timestamp,
    parse_timestamp,
    to_bytes,
    truncate_to_millis,
    utc_now,
)


class TestBase64:
    """Test base64 helpers."""

    def test_known_value(self):
        """Test standard alphabet with padding."""
        assert b64encode(b"tampered message") == "dGFtcGVyZWQgbWVzc2FnZQ=="
        assert b64decode("dGFtcGVyZWQgbWVzc2FnZQ==") == b"tampered message"

    def test_invalid_characters(self):
        """Test characters outside the alphabet raise ValueError."""
        with pytest.raises(ValueError) as exc_info:
            b64decode("***")

        assert "Invalid base64 data" in str(exc_info.value)

    def test_to_bytes(self):
        """Test text is UTF-8 encoded and other types rejected."""
        assert to_bytes("é") == b"\xc3\xa9"
        assert to_bytes(bytearray(b"ab")) == b"ab"
        with pytest.raises(TypeError):
            to_bytes(42)


class TestTimestamps:
    """Test millisecond UTC timestamps."""

    def test_format(self):
        """Test the Z-suffixed millisecond form."""
        moment = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2024-01-15T10:30:00.123Z"

    def test_format_naive_is_utc(self):
        """Test naive datetimes are treated as UTC."""
        assert format_timestamp(datetime(2024, 1, 15)) == "2024-01-15T00:00:00.000Z"

    def test_format_converts_offsets(self):
        """Test other offsets are converted to UTC."""
        moment = datetime(2024, 1, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2024-01-15T10:00:00.000Z"

    def test_parse(self):
        """Test parsing returns an aware UTC datetime."""
        parsed = parse_timestamp("2024-01-15T10:30:00.123Z")

        assert parsed == datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)
        assert parsed.tzinfo is not None

    def test_parse_rejects_garbage(self):
        """Test non-timestamps raise ValueError."""
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
        with pytest.raises(ValueError):
            parse_timestamp(1700000000)

    def test_now_survives_formatting(self):
        """Test utc_now() is lossless through format and parse."""
        now = utc_now()
        assert now.microsecond % 1000 == 0
        assert parse_timestamp(format_timestamp(now)) == now

    def test_truncate(self):
        """Test sub-millisecond precision is dropped."""
        moment = datetime(2024, 1, 1, microsecond=999999)
        assert truncate_to_millis(moment).microsecond == 999000
