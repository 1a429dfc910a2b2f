# src/storyfeed/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


def from_epoch_millis(value: int) -> datetime:
    """Return the aware UTC datetime ``value`` milliseconds after the epoch."""
    return EPOCH + timedelta(milliseconds=value)


def to_epoch_millis(value: datetime) -> int:
    """Return whole milliseconds since the epoch, truncating sub-millisecond parts."""
    return (as_utc(value) - EPOCH) // _MILLISECOND
