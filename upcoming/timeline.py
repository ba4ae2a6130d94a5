"""Build a list of events from a calendar feed for display.

The list is built from the events of a feed in a few steps:
  - Start times are aligned to the local timezone of the viewer.
  - In 'upcoming' mode recurring events are moved to their next occurrence,
    and events that have already ended are removed.
  - Events are ordered by start date and truncated to the requested length.

Example:
```python
import datetime
from upcoming.event import Event
from upcoming.timeline import get_events

events = [
    Event(
        summary="Standup",
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule="FREQ=WEEKLY;BYDAY=MO,WE",
    ),
]
print(get_events(events, items=3))
```
"""

from __future__ import annotations

import datetime
import logging
import operator
from collections.abc import Iterable

from .config import MODE_UPCOMING, EventListConfig
from .event import Event, project
from .exceptions import RecurrenceError
from .expression import build
from .iter import resolve
from .util import today_factory

__all__ = ["get_events", "next_occurrence"]

_LOGGER = logging.getLogger(__name__)

_START_DATE = operator.attrgetter("start_date")


def next_occurrence(
    event: Event,
    today: datetime.date,
    config: EventListConfig | None = None,
) -> Event | None:
    """Return the event moved to its next occurrence on or after today.

    Returns None when the recurrence has no occurrence within the horizon,
    and raises a `RecurrenceError` when the rule can't be evaluated. A
    recurrence with an UNTIL date is only resolved when the config enables
    `resolve_terminated`, otherwise None is returned without evaluating the
    rest of the rule.
    """
    if config is None:
        config = EventListConfig()
    if event.terminated and not config.resolve_terminated:
        _LOGGER.debug("Skipping event '%s' with recurrence UNTIL", event.summary)
        return None
    if (rule := event.recurrence_rule) is None:
        return event
    search_end = today + config.horizon
    if rule.until is not None:
        if event.start_date > today:
            return event if event.start_date <= rule.until else None
        search_end = min(search_end, rule.until)
    elif event.start_date > today:
        _LOGGER.debug("Event '%s' first occurs in the future", event.summary)
        return event

    expr = build(rule, event.start_date, event.end_date)
    if not (dates := resolve(expr, today, search_end, limit=1)):
        _LOGGER.debug(
            "Event '%s' has no occurrence between %s and %s",
            event.summary,
            today,
            search_end,
        )
        return None
    return project(event, dates[0])


def _upcoming_events(
    events: list[Event], today: datetime.date, config: EventListConfig
) -> list[Event]:
    """Resolve recurring events and drop events that have already ended."""
    results = [event for event in events if not event.recurring]
    recurring = [event for event in events if event.recurring]
    for event in recurring:
        try:
            resolved = next_occurrence(event, today, config)
        except RecurrenceError as err:
            _LOGGER.warning(
                "Unable to evaluate recurrence of event '%s', treating it as a "
                "single event: %s",
                event.summary,
                err,
            )
            results.append(event)
            continue
        if resolved is not None:
            results.append(resolved)
    return [event for event in results if event.end_date >= today]


def get_events(
    events: Iterable[Event],
    items: int | None = None,
    mode: str | None = None,
    *,
    config: EventListConfig | None = None,
    today: datetime.date | None = None,
) -> list[Event]:
    """Return the next events ordered by start date.

    The `items` and `mode` arguments override the values in the config. Any
    mode other than 'upcoming' returns the feed events as is, only ordered
    and truncated.
    """
    if config is None:
        config = EventListConfig()
    if items is None:
        items = config.items
    if items < 1:
        raise ValueError(f"Number of items must be a positive integer: {items}")
    if mode is None:
        mode = config.mode
    if today is None:
        today = today_factory()

    tzinfo = config.tzinfo
    results = [event.localize(tzinfo) for event in sorted(events, key=_START_DATE)]
    if mode == MODE_UPCOMING:
        results = _upcoming_events(results, today, config)
    else:
        _LOGGER.debug("Mode '%s' does not filter events", mode)
    return sorted(results, key=_START_DATE)[:items]
