"""Utility methods used by multiple components."""

from __future__ import annotations

import datetime

__all__ = [
    "local_timezone",
    "normalize_datetime",
    "today_factory",
]


MIDNIGHT = datetime.time()


def today_factory() -> datetime.date:
    """Factory method for the current date to facilitate mocking."""
    return datetime.date.today()


def local_timezone() -> datetime.tzinfo:
    """Get the local timezone of the process."""
    if local_tz := datetime.datetime.now().astimezone().tzinfo:
        return local_tz
    return datetime.timezone.utc


def normalize_datetime(
    value: datetime.date | datetime.datetime, tzinfo: datetime.tzinfo | None = None
) -> datetime.datetime:
    """Convert date or datetime to a timezone aware datetime.

    Floating values are interpreted in the specified timezone, or the local
    timezone when none is given.
    """
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, MIDNIGHT)
    if value.tzinfo is None:
        if tzinfo is None:
            tzinfo = local_timezone()
        value = value.replace(tzinfo=tzinfo)
    return value
