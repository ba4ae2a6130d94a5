"""Configuration for building an event list.

All settings are passed with each request rather than set process wide so
that lists for different locales or timezones may be built concurrently.
"""

from __future__ import annotations

import datetime
import zoneinfo
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .iter import DEFAULT_HORIZON
from .util import local_timezone

__all__ = ["EventListConfig", "MODE_UPCOMING"]

MODE_UPCOMING = "upcoming"


class EventListConfig(BaseModel):
    """Settings used when building and describing an event list."""

    items: int = Field(default=5, gt=0)
    """The maximum number of events returned."""

    mode: str = MODE_UPCOMING
    """Which events to select, only 'upcoming' is currently defined."""

    horizon: datetime.timedelta = DEFAULT_HORIZON
    """How far past today to search for the next occurrence of an event."""

    timezone: Optional[str] = None
    """IANA timezone name start times are aligned to, or the local timezone."""

    date_format: str = "%d.%m.%Y"
    """The strftime format used for displaying dates."""

    time_format: str = "%H:%M"
    """The strftime format used for displaying times."""

    range_separator: str = " - "
    """Separator between the start and end of a displayed range."""

    resolve_terminated: bool = False
    """Resolve the next occurrence of recurrences that have an UNTIL date.

    By default events with an UNTIL date are left out of upcoming lists.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str | None) -> str | None:
        """Verify the timezone name can be loaded."""
        if value is not None:
            try:
                zoneinfo.ZoneInfo(value)
            except (zoneinfo.ZoneInfoNotFoundError, ValueError) as err:
                raise ValueError(f"Unknown timezone '{value}'") from err
        return value

    @field_validator("horizon")
    @classmethod
    def check_horizon(cls, value: datetime.timedelta) -> datetime.timedelta:
        """Verify the horizon is not negative."""
        if value < datetime.timedelta(0):
            raise ValueError(f"Horizon must not be negative: {value}")
        return value

    @property
    def tzinfo(self) -> datetime.tzinfo:
        """Return the timezone start times are aligned to."""
        if self.timezone is None:
            return local_timezone()
        return zoneinfo.ZoneInfo(self.timezone)
