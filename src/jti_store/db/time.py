# src/jti_store/db/time.py
"""Time utilities for database models.

Timestamps are written as naive UTC values and read back as aware UTC
datetimes, so neither the process timezone nor the database session
timezone takes part in the conversion.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def to_utc(value: datetime) -> datetime:
    """Return ``value`` converted to an aware UTC datetime.

    Raises:
        TypeError: If ``value`` is not a datetime.
        ValueError: If ``value`` is naive.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("naive datetimes are ambiguous; attach a timezone")
    return value.astimezone(UTC)


def to_epoch_millis(value: datetime) -> int:
    """Return milliseconds since the Unix epoch for an aware datetime."""
    delta = to_utc(value) - datetime(1970, 1, 1, tzinfo=UTC)
    return delta // timedelta(milliseconds=1)


class UTCDateTime(TypeDecorator[datetime]):
    """DateTime column bound and loaded in UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return to_utc(value).replace(tzinfo=None)

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
