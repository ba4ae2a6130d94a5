"""A calendar event as yielded by a calendar feed.

An event covers one or more days. For all day events the end date is
exclusive, that is one day past the last day the event covers. An event may
also have a recurrence rule attached as raw fields, which are parsed on
demand into a `RecurrenceRule`.

Example:
```python
import datetime
from upcoming.event import Event, project

event = Event(
    summary="Book club",
    location="Library",
    start_date=datetime.date(2022, 8, 29),
    end_date=datetime.date(2022, 8, 30),
    rrule="FREQ=MONTHLY;BYDAY=-1MO",
)
print(project(event, datetime.date(2022, 9, 26)))
```

Events are immutable pydantic models: alignment and projection return a
copy of the event.
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from .exceptions import MalformedRuleError
from .types.recur import (
    RecurrenceRule,
    has_until,
    is_recurring,
    parse,
    parse_rule_fields,
)
from .util import normalize_datetime

__all__ = ["Event", "project"]

_LOGGER = logging.getLogger(__name__)


def _rule_fields_or_text(value: Any) -> Any:
    """Split rule input into fields, keeping text that can't be split as is."""
    try:
        return parse_rule_fields(value)
    except MalformedRuleError as err:
        if not isinstance(value, str):
            raise
        _LOGGER.debug("Keeping unsplit recurrence rule '%s': %s", value, err)
        return value.strip()


class Event(BaseModel):
    """A single event on a calendar."""

    summary: str = ""
    """Defines a short summary or subject for the event."""

    location: str = ""
    """Defines the intended venue for the activity defined by this event."""

    start_date: datetime.date
    """The first day of the event."""

    end_date: datetime.date
    """The end day of the event, exclusive for all day events."""

    start_time: Optional[datetime.datetime] = None
    """The timezone aware time the event starts, or None for all day events."""

    rrule: Annotated[
        Union[dict[str, str], str], BeforeValidator(_rule_fields_or_text)
    ] = Field(default_factory=dict)
    """The raw recurrence rule fields e.g. {'FREQ': 'WEEKLY', 'BYDAY': 'MO'}.

    An RRULE string such as 'FREQ=WEEKLY;BYDAY=MO' is accepted as well and
    split into fields. A string that can't be split is kept as text, and the
    error is raised once the rule is evaluated.
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_date_range(self) -> Event:
        """Verify the event does not end before it starts."""
        if self.start_date > self.end_date:
            raise ValueError(
                f"Event end date {self.end_date} is before start date {self.start_date}"
            )
        return self

    @property
    def recurring(self) -> bool:
        """Return True if this event has a recurrence rule with a frequency.

        Rule text that can't be split into fields counts as recurring.
        """
        if isinstance(self.rrule, str):
            return bool(self.rrule)
        return is_recurring(self.rrule)

    @property
    def terminated(self) -> bool:
        """Return True if the event recurs and the rule fields have an UNTIL date.

        The rule is not evaluated, so a malformed rule may still be terminated.
        """
        return (
            isinstance(self.rrule, dict)
            and is_recurring(self.rrule)
            and has_until(self.rrule)
        )

    @property
    def recurrence_rule(self) -> RecurrenceRule | None:
        """Return the parsed recurrence rule or None if the event does not recur.

        Raises a `MalformedRuleError` or `UnsupportedFrequencyError` when the
        raw rule fields can't be evaluated.
        """
        if not self.recurring:
            return None
        return parse(self.rrule)

    @property
    def duration(self) -> datetime.timedelta:
        """Return the span between the start and end date."""
        return self.end_date - self.start_date

    def localize(self, tzinfo: datetime.tzinfo) -> Event:
        """Return a copy of the event with the start time in the timezone.

        A floating start time is interpreted in the specified timezone.
        """
        if self.start_time is None:
            return self
        start_time = normalize_datetime(self.start_time, tzinfo).astimezone(tzinfo)
        return self.model_copy(update={"start_time": start_time})


def project(event: Event, occurrence: datetime.date) -> Event:
    """Return a copy of the event moved to start on the occurrence date.

    The duration of the event is preserved and all other fields are copied
    unchanged.
    """
    updates = {
        "start_date": occurrence,
        "end_date": occurrence + event.duration,
    }
    _LOGGER.debug("Projecting event '%s' to %s", event.summary, occurrence)
    return event.model_copy(update=updates)
