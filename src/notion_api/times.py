"""Timestamp and date codecs for Notion API values.

The API reads timestamps in two shapes (``...Z`` and ``...+0900``) and uses an
empty object ``{}`` for "not set" in a few places. We always write the
explicit-offset shape.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

# Decoded from ``{}``; never produced by a real API timestamp.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_UTC_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")
_OFFSET_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
DATE_FORMAT = "%Y-%m-%d"


def is_zero(value: datetime) -> bool:
    """Return True if ``value`` is the unset timestamp."""
    return value == ZERO_TIME


def _strptime(value: str, formats: tuple) -> datetime:
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"invalid timestamp: {value!r}")


def parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp as sent by the API.

    Accepts ``{}`` (zero timestamp), ``YYYY-MM-DDTHH:MM:SS[.fff]Z`` and
    ``YYYY-MM-DDTHH:MM:SS[.fff]+HHMM``. Already-parsed datetimes pass through.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, dict) and not value:
        return ZERO_TIME
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")

    if value.endswith("Z"):
        return _strptime(value, _UTC_FORMATS).replace(tzinfo=timezone.utc)
    return _strptime(value, _OFFSET_FORMATS)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ``YYYY-MM-DDTHH:MM:SS[.ffffff]+HHMM``.

    Naive datetimes are taken as local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()

    out = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        out += "." + f"{value.microsecond:06d}".rstrip("0")

    offset = value.utcoffset() or timedelta(0)
    minutes = int(offset.total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{out}{sign}{hours:02d}{minutes:02d}"


def parse_date(value: Any) -> date:
    """Parse a bare ``YYYY-MM-DD`` date."""
    if isinstance(value, datetime):
        raise ValueError(f"invalid date: {value!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid date: {value!r}")
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def rfc3339(value: datetime) -> str:
    """Human-readable RFC 3339 rendering, ``Z`` for UTC."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


Timestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]

Date = Annotated[
    date,
    BeforeValidator(parse_date),
    PlainSerializer(format_date, return_type=str, when_used="json"),
]
