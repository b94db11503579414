"""Text encodings shared by certificates and envelopes.

Binary values travel as standard base64 text, and timestamps use the
millisecond ISO-8601 form ``2024-01-15T10:30:00.123Z``. Both encodings must
be lossless so that signatures computed at issuance still verify after a
serialize/deserialize round trip.
"""

import base64
import binascii
from datetime import datetime, timezone
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def to_bytes(data: Union[str, BytesLike]) -> bytes:
    """Normalize text or bytes input to bytes (text is UTF-8 encoded)."""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Expected str or bytes, got {type(data).__name__}")


def b64encode(data: BytesLike) -> str:
    """Encode bytes as standard base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def b64decode(text: str) -> bytes:
    """Decode standard base64 text.

    Args:
        text: Base64 string

    Returns:
        Decoded bytes

    Raises:
        ValueError: If text is not valid base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise ValueError(f"Invalid base64 data: {e}") from e


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    return truncate_to_millis(datetime.now(timezone.utc))


def truncate_to_millis(moment: datetime) -> datetime:
    """Drop sub-millisecond precision so the value survives formatting."""
    return moment.replace(microsecond=(moment.microsecond // 1000) * 1000)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are treated as UTC.

    Example:
        >>> format_timestamp(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If text is not an ISO-8601 timestamp
    """
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be a string, got {type(text).__name__}")
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
