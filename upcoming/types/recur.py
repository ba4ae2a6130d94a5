"""Implementation of recurrence rules for calendar events.

A recurrence rule arrives as a bag of RFC-5545 style key/value fields such as
`FREQ=WEEKLY;BYDAY=MO,WE`. The fields are parsed once into a strongly typed
rule with one variant per frequency so that evaluating the rule never has to
look at raw strings again:

```python
from upcoming.types.recur import RecurrenceRule

rule = RecurrenceRule.from_rrule("FREQ=MONTHLY;BYDAY=2MO;INTERVAL=2")
print(rule)
```

The above example will output something like this:
```
freq=<Frequency.MONTHLY: 'MONTHLY'> interval=2 until=None
by_day=(WeekdayValue(weekday=<Weekday.MONDAY: 'MO'>, occurrence=2),)
by_month_day=None
```

Only a subset of rfc5545 is supported. Parts of rfc5545 not supported:
  Frequencies SECONDLY, MINUTELY, HOURLY
  COUNT, BYSETPOS, BYMONTH, BYYEARDAY, BYWEEKNO, WKST
  More than one BYDAY value or BYMONTHDAY value for MONTHLY rules
"""

from __future__ import annotations

import datetime
import enum
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from upcoming.exceptions import MalformedRuleError, UnsupportedFrequencyError

from .date import parse_date

__all__ = [
    "Weekday",
    "WeekdayValue",
    "Frequency",
    "RecurrenceRule",
    "YearlyRule",
    "MonthlyRule",
    "WeeklyRule",
    "DailyRule",
    "has_until",
    "is_recurring",
    "parse",
    "parse_rule_fields",
    "parse_weekday_values",
]

_LOGGER = logging.getLogger(__name__)

RRULE_PREFIX = "RRULE:"
WEEKDAY_REGEX = re.compile(r"([-+]?[0-9]*)([A-Z]{2})")
MAX_OCCURRENCE = 5


# Note: This can be StrEnum in python 3.11 and higher
class Weekday(str, enum.Enum):
    """Corresponds to a day of the week."""

    SUNDAY = "SU"
    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @property
    def isoweekday(self) -> int:
        """Return the day of the week where Monday is 1 and Sunday is 7."""
        return ISO_WEEKDAY[self]

    @classmethod
    def of(cls, value: datetime.date) -> Weekday:
        """Return the day of the week for the specified date."""
        return WEEKDAY_BY_ISO[value.isoweekday()]


ISO_WEEKDAY = {
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
    Weekday.SUNDAY: 7,
}
WEEKDAY_BY_ISO = {value: weekday for weekday, value in ISO_WEEKDAY.items()}


@dataclass(frozen=True)
class WeekdayValue:
    """Holds a weekday value and optional occurrence value."""

    weekday: Weekday
    """Day of the week value."""

    occurrence: Optional[int] = None
    """The occurrence value indicates the nth occurrence.

    Indicates the nth occurrence of a specific day within a MONTHLY rule. For
    example +1 represents the first Monday of the month, or -1 represents the
    last Monday of the month. The value is ignored for WEEKLY rules.
    """

    def __str__(self) -> str:
        """Return the WeekdayValue as an encoded string."""
        return f"{self.occurrence or ''}{self.weekday}"


class Frequency(str, enum.Enum):
    """Type of recurrence rule.

    Frequencies SECONDLY, MINUTELY, HOURLY are not supported.
    """

    DAILY = "DAILY"
    """Repeating events based on an interval of a day or more."""

    WEEKLY = "WEEKLY"
    """Repeating events based on an interval of a week or more."""

    MONTHLY = "MONTHLY"
    """Repeating events based on an interval of a month or more."""

    YEARLY = "YEARLY"
    """Repeating events based on an interval of a year or more."""


class RecurrenceRule(BaseModel):
    """A parsed recurrence rule.

    This is the common base of the rule variants and is not created directly,
    instead see `parse` or `RecurrenceRule.from_rrule`.
    """

    freq: Frequency

    interval: Optional[int] = Field(default=None, gt=0)
    """Interval at which the recurrence rule repeats, or every period if unset."""

    until: Optional[datetime.date] = None
    """The inclusive end date of the recurrence, or unbounded if unset."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_rrule(cls, rrule_str: str) -> RecurrenceRule:
        """Create a RecurrenceRule from an RRULE string."""
        return parse(parse_rule_fields(rrule_str))


class YearlyRule(RecurrenceRule):
    """A rule repeating on the same days of the year as the event."""

    freq: Literal[Frequency.YEARLY] = Frequency.YEARLY


class MonthlyRule(RecurrenceRule):
    """A rule repeating on a day of the month or a weekday within the month."""

    freq: Literal[Frequency.MONTHLY] = Frequency.MONTHLY

    by_day: tuple[WeekdayValue, ...] = ()
    """Weekdays with an optional occurrence, only the first is evaluated."""

    by_month_day: Optional[int] = Field(default=None, ge=1, le=31)
    """Day of the month between 1 to 31."""


class WeeklyRule(RecurrenceRule):
    """A rule repeating on a set of days of the week."""

    freq: Literal[Frequency.WEEKLY] = Frequency.WEEKLY

    by_day: tuple[WeekdayValue, ...] = ()
    """Supported days of the week."""


class DailyRule(RecurrenceRule):
    """A rule repeating every day."""

    freq: Literal[Frequency.DAILY] = Frequency.DAILY


RULE_TYPES: dict[Frequency, type[RecurrenceRule]] = {
    Frequency.YEARLY: YearlyRule,
    Frequency.MONTHLY: MonthlyRule,
    Frequency.WEEKLY: WeeklyRule,
    Frequency.DAILY: DailyRule,
}

RuleFieldsInput = Union[str, Mapping[str, Any], None]


def parse_rule_fields(value: RuleFieldsInput) -> dict[str, str]:
    """Normalize raw recurrence rule input into a dictionary of fields.

    The input may be an RRULE string like 'FREQ=YEARLY;INTERVAL=2' or a
    mapping of rule keys to values. Keys are upper case and values are
    stripped of whitespace. Blank values are preserved and treated as absent
    when the rule is parsed.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {
            str(key).strip().upper(): str(val).strip()
            for key, val in value.items()
            if val is not None
        }
    if not isinstance(value, str):
        raise MalformedRuleError(f"Expected recurrence rule as str or mapping: {value}")
    text = value.strip()
    if text.upper().startswith(RRULE_PREFIX):
        text = text[len(RRULE_PREFIX) :]
    result: dict[str, str] = {}
    if not text:
        return result
    for part in text.split(";"):
        if not part.strip():
            continue
        if "=" not in part:
            raise MalformedRuleError(
                f"Recurrence rule had unexpected format missing '=': {value}"
            )
        key, val = part.split("=", 1)
        result[key.strip().upper()] = val.strip()
    return result


def _field(fields: Mapping[str, str], key: str) -> str | None:
    """Return the field value or None if it is missing or blank."""
    if not (value := fields.get(key)):
        return None
    return value


def is_recurring(fields: Mapping[str, str]) -> bool:
    """Return True if the raw rule fields describe a recurring event."""
    return _field(fields, "FREQ") is not None


def has_until(fields: Mapping[str, str]) -> bool:
    """Return True if the raw rule fields set an end to the recurrence.

    Only the presence of UNTIL is checked, the value is not parsed.
    """
    return _field(fields, "UNTIL") is not None


def parse_weekday_values(value: str) -> tuple[WeekdayValue, ...]:
    """Parse a BYDAY value such as '2MO' or 'MO,WE,FR'."""
    results: list[WeekdayValue] = []
    for token in value.split(","):
        token = token.strip().upper()
        if not (match := WEEKDAY_REGEX.fullmatch(token)):
            raise MalformedRuleError(f"Expected BYDAY value like '2MO': '{token}'")
        occurrence, weekday = match.groups()
        try:
            weekday_value = Weekday(weekday)
        except ValueError as err:
            raise MalformedRuleError(
                f"Recurrence rule had unknown weekday: '{token}'"
            ) from err
        if occurrence in ("", "+", "-"):
            if occurrence:
                raise MalformedRuleError(f"BYDAY ordinal had no digits: '{token}'")
            results.append(WeekdayValue(weekday_value))
            continue
        ordinal = int(occurrence)
        if ordinal == 0 or abs(ordinal) > MAX_OCCURRENCE:
            raise MalformedRuleError(f"BYDAY ordinal out of range: '{token}'")
        results.append(WeekdayValue(weekday_value, ordinal))
    return tuple(results)


def parse(fields: Mapping[str, str]) -> RecurrenceRule:
    """Parse the raw recurrence rule fields into a RecurrenceRule.

    The caller is expected to check `is_recurring` first: a rule without a
    FREQ field describes a non-recurring event and is rejected here.
    """
    fields = parse_rule_fields(fields)
    if (freq_value := _field(fields, "FREQ")) is None:
        raise MalformedRuleError(f"Recurrence rule is missing FREQ: {fields}")
    try:
        freq = Frequency(freq_value.upper())
    except ValueError as err:
        raise UnsupportedFrequencyError(
            f"Unsupported frequency in rrule: {freq_value}"
        ) from err

    values: dict[str, Any] = {}
    if (interval := _field(fields, "INTERVAL")) is not None:
        values["interval"] = interval
    if (until := _field(fields, "UNTIL")) is not None:
        try:
            values["until"] = parse_date(until)
        except ValueError as err:
            raise MalformedRuleError(
                f"Recurrence rule had invalid UNTIL: '{until}'",
                detailed_error=str(err),
            ) from err
    if freq in (Frequency.MONTHLY, Frequency.WEEKLY):
        if (by_day := _field(fields, "BYDAY")) is not None:
            values["by_day"] = parse_weekday_values(by_day)
    if freq == Frequency.MONTHLY:
        if (by_month_day := _field(fields, "BYMONTHDAY")) is not None:
            values["by_month_day"] = by_month_day.split(",")[0].strip()

    try:
        rule = RULE_TYPES[freq].model_validate(values)
    except ValidationError as err:
        raise MalformedRuleError(
            f"Recurrence rule had invalid values: {fields}",
            detailed_error=str(err),
        ) from err
    _LOGGER.debug("Parsed recurrence rule %s", rule)
    return rule
