"""Timestamp normalization helpers for session logs."""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

# Integers below this are epoch seconds, at or above it epoch milliseconds.
_SECONDS_THRESHOLD = 1_000_000_000_000
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

_RFC3339_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})"
)


def _parse_rfc3339(token: str) -> datetime | None:
    match = _RFC3339_RE.fullmatch(token)
    if not match:
        return None
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        return datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}.{fraction}{offset}")
    except ValueError:
        return None


def datetime_to_ms(value: datetime) -> int:
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // _ONE_MS


def parse_timestamp_ms(value: Any) -> int | None:
    """Convert a raw log timestamp into epoch milliseconds.

    Strings must be RFC3339 date-times with an explicit offset. JSON integers
    are epoch seconds below one trillion and epoch milliseconds otherwise.
    Anything else (floats, booleans, objects, arrays, null) has no timestamp.
    """
    if isinstance(value, str):
        parsed = _parse_rfc3339(value)
        return datetime_to_ms(parsed) if parsed else None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    if value < _SECONDS_THRESHOLD:
        return value * 1000
    return value


def format_timestamp_ms(value: int | None) -> str:
    if value is None:
        return ""
    dt = _EPOCH + timedelta(milliseconds=value)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
