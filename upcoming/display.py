"""Describe when an event happens as plain text.

Feeds report the end of all day events as the day after the event ends, so
the end date is moved back one day before it is displayed.
"""

from __future__ import annotations

import datetime

from .config import EventListConfig
from .event import Event

__all__ = ["describe_when"]

ONE_DAY = datetime.timedelta(days=1)


def describe_when(event: Event, config: EventListConfig | None = None) -> str:
    """Return the date range or date and time of the event."""
    if config is None:
        config = EventListConfig()
    start = event.start_date.strftime(config.date_format)
    if event.start_date == event.end_date:
        if event.start_time is None:
            return start
        time = event.start_time.strftime(config.time_format)
        return f"{start}{config.range_separator}{time}"
    last_date = event.end_date - ONE_DAY
    if last_date == event.start_date:
        return start
    end = last_date.strftime(config.date_format)
    return f"{start}{config.range_separator}{end}"
