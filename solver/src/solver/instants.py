"""Instant parsing, formatting, and millisecond arithmetic."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from solver.errors import InvalidQueryError

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def parse_instant(value: object) -> datetime:
    """Return an aware UTC datetime from an ISO-8601 string or a datetime.

    Values without an offset are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise InvalidQueryError("Invalid startTime: empty string")
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidQueryError(f"Invalid startTime: {value!r}") from None
    else:
        raise InvalidQueryError(f"Invalid startTime: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_instant(dt: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_ms(dt: datetime) -> int:
    """Milliseconds since the Unix epoch, truncated."""
    return (dt - EPOCH) // _ONE_MS


def from_ms(ms: int) -> datetime:
    return EPOCH + timedelta(milliseconds=ms)
