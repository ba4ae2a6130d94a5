"""Temporal expressions used to evaluate recurrence rules.

A temporal expression is a predicate over a single day that answers whether
a recurring event happens on that day. Calendar periods have non-uniform
lengths so each frequency is evaluated with its own primitive expression,
and expressions are combined with `&` and `|`:

```python
import datetime
from upcoming.expression import EveryInterval, Precision, WeekdayIn
from upcoming.types.recur import Weekday

expr = WeekdayIn([Weekday.MONDAY, Weekday.WEDNESDAY]) & EveryInterval(
    datetime.date(2022, 8, 29), 2, Precision.WEEK
)
print(expr.includes(datetime.date(2022, 9, 12)))
```

The `build` function creates the expression for a `RecurrenceRule` and the
dates of the event it is attached to.
"""

from __future__ import annotations

import datetime
import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from dateutil import relativedelta

from .exceptions import UnsupportedFrequencyError
from .types.recur import (
    DailyRule,
    Frequency,
    MonthlyRule,
    RecurrenceRule,
    Weekday,
    WeekdayValue,
    WeeklyRule,
    YearlyRule,
)

__all__ = [
    "TemporalExpression",
    "AllOf",
    "AnyOf",
    "AnnualRange",
    "MonthDayRange",
    "WeekdayInMonth",
    "WeekdayIn",
    "EveryDay",
    "EveryInterval",
    "Precision",
    "build",
]

_LOGGER = logging.getLogger(__name__)


class TemporalExpression(ABC):
    """A predicate that matches the days a recurring event happens on."""

    @abstractmethod
    def includes(self, value: datetime.date) -> bool:
        """Return True if the expression matches the specified day."""

    def __call__(self, value: datetime.date) -> bool:
        """Evaluate the expression for the specified day."""
        return self.includes(value)

    def __and__(self, other: TemporalExpression) -> TemporalExpression:
        """Return an expression matching days both expressions match."""
        return AllOf([self, other])

    def __or__(self, other: TemporalExpression) -> TemporalExpression:
        """Return an expression matching days either expression matches."""
        return AnyOf([self, other])


class AllOf(TemporalExpression):
    """Matches days that all of the expressions match."""

    def __init__(self, expressions: Iterable[TemporalExpression]) -> None:
        """Initialize AllOf."""
        self._expressions = list(expressions)

    def includes(self, value: datetime.date) -> bool:
        """Return True if all of the expressions match the day."""
        return all(expr.includes(value) for expr in self._expressions)

    def __repr__(self) -> str:
        return f"AllOf({self._expressions})"


class AnyOf(TemporalExpression):
    """Matches days that any of the expressions match.

    An empty AnyOf never matches.
    """

    def __init__(self, expressions: Iterable[TemporalExpression]) -> None:
        """Initialize AnyOf."""
        self._expressions = list(expressions)

    def includes(self, value: datetime.date) -> bool:
        """Return True if any of the expressions match the day."""
        return any(expr.includes(value) for expr in self._expressions)

    def __repr__(self) -> str:
        return f"AnyOf({self._expressions})"


class AnnualRange(TemporalExpression):
    """Matches an inclusive range of days of the year.

    The range wraps around the end of the year when the end is earlier in
    the year than the start, e.g. December 31st to January 2nd.
    """

    def __init__(
        self, start_month: int, start_day: int, end_month: int, end_day: int
    ) -> None:
        """Initialize AnnualRange."""
        self._start = (start_month, start_day)
        self._end = (end_month, end_day)

    def includes(self, value: datetime.date) -> bool:
        """Return True if the month and day are within the range."""
        day = (value.month, value.day)
        if self._start <= self._end:
            return self._start <= day <= self._end
        return day >= self._start or day <= self._end

    def __repr__(self) -> str:
        return f"AnnualRange(start={self._start}, end={self._end})"


class MonthDayRange(TemporalExpression):
    """Matches an inclusive range of days of the month.

    The range wraps around the end of the month when the end day is smaller
    than the start day.
    """

    def __init__(self, start_day: int, end_day: int) -> None:
        """Initialize MonthDayRange."""
        self._start_day = start_day
        self._end_day = end_day

    def includes(self, value: datetime.date) -> bool:
        """Return True if the day of the month is within the range."""
        if self._start_day <= self._end_day:
            return self._start_day <= value.day <= self._end_day
        return value.day >= self._start_day or value.day <= self._end_day

    def __repr__(self) -> str:
        return f"MonthDayRange(start_day={self._start_day}, end_day={self._end_day})"


class WeekdayInMonth(TemporalExpression):
    """Matches a day of the week within a month, e.g. the second Monday.

    A negative occurrence counts from the end of the month and an occurrence
    of None matches every such day of the week in the month.
    """

    def __init__(self, weekday: Weekday, occurrence: int | None = None) -> None:
        """Initialize WeekdayInMonth."""
        self._weekday = weekday
        self._occurrence = occurrence

    def includes(self, value: datetime.date) -> bool:
        """Return True if the day is the weekday occurrence within its month."""
        if Weekday.of(value) != self._weekday:
            return False
        if self._occurrence is None:
            return True
        if self._occurrence > 0:
            return (value.day - 1) // 7 + 1 == self._occurrence
        last_day = value + relativedelta.relativedelta(day=31)
        return (last_day.day - value.day) // 7 + 1 == -self._occurrence

    def __repr__(self) -> str:
        return f"WeekdayInMonth({self._occurrence or ''}{self._weekday})"


class WeekdayIn(TemporalExpression):
    """Matches any of the specified days of the week."""

    def __init__(self, weekdays: Iterable[Weekday]) -> None:
        """Initialize WeekdayIn."""
        self._weekdays = frozenset(weekdays)

    def includes(self, value: datetime.date) -> bool:
        """Return True if the day falls on one of the weekdays."""
        return Weekday.of(value) in self._weekdays

    def __repr__(self) -> str:
        return f"WeekdayIn({sorted(str(weekday) for weekday in self._weekdays)})"


class EveryDay(TemporalExpression):
    """Matches every day."""

    def includes(self, value: datetime.date) -> bool:
        """Return True for any day."""
        return True

    def __repr__(self) -> str:
        return "EveryDay()"


class Precision(str, enum.Enum):
    """The calendar period an interval is counted in."""

    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"


def _period_index(value: datetime.date, precision: Precision) -> int:
    """Return a number identifying the calendar period containing the day."""
    if precision == Precision.YEAR:
        return value.year
    if precision == Precision.MONTH:
        return value.year * 12 + value.month - 1
    if precision == Precision.WEEK:
        week_start = value + relativedelta.relativedelta(weekday=relativedelta.MO(-1))
        return week_start.toordinal() // 7
    return value.toordinal()


class EveryInterval(TemporalExpression):
    """Matches days in every nth period starting with the period of `start`.

    Periods are counted in whole calendar periods, so with a MONTH precision
    and interval of 2 every day in every other month matches. Weeks start on
    Monday. Days in periods before the start never match.
    """

    def __init__(
        self, start: datetime.date, interval: int, precision: Precision
    ) -> None:
        """Initialize EveryInterval."""
        if interval < 1:
            raise ValueError(f"Interval must be a positive integer: {interval}")
        self._start = start
        self._interval = interval
        self._precision = precision
        self._start_index = _period_index(start, precision)

    def includes(self, value: datetime.date) -> bool:
        """Return True if the day is in a period counted by the interval."""
        offset = _period_index(value, self._precision) - self._start_index
        return offset >= 0 and offset % self._interval == 0

    def __repr__(self) -> str:
        return (
            f"EveryInterval(start={self._start}, interval={self._interval}, "
            f"precision={self._precision.value})"
        )


FREQUENCY_PRECISION = {
    Frequency.YEARLY: Precision.YEAR,
    Frequency.MONTHLY: Precision.MONTH,
    Frequency.WEEKLY: Precision.WEEK,
    Frequency.DAILY: Precision.DAY,
}


def _monthly_expression(
    rule: MonthlyRule, start_date: datetime.date, end_date: datetime.date
) -> TemporalExpression:
    if rule.by_month_day is not None:
        return MonthDayRange(rule.by_month_day, end_date.day)
    if rule.by_day:
        # Only the first weekday is evaluated for monthly rules
        first: WeekdayValue = rule.by_day[0]
        if len(rule.by_day) > 1:
            _LOGGER.debug("Ignoring additional BYDAY values in %s", rule.by_day[1:])
        return WeekdayInMonth(first.weekday, first.occurrence)
    return MonthDayRange(start_date.day, end_date.day)


def _weekly_expression(
    rule: WeeklyRule, start_date: datetime.date
) -> TemporalExpression:
    if not rule.by_day:
        return WeekdayIn([Weekday.of(start_date)])
    return WeekdayIn(value.weekday for value in rule.by_day)


def build(
    rule: RecurrenceRule, start_date: datetime.date, end_date: datetime.date
) -> TemporalExpression:
    """Build the temporal expression for an event with a recurrence rule."""
    expr: TemporalExpression
    if isinstance(rule, YearlyRule):
        expr = AnnualRange(
            start_date.month, start_date.day, end_date.month, end_date.day
        )
    elif isinstance(rule, MonthlyRule):
        expr = _monthly_expression(rule, start_date, end_date)
    elif isinstance(rule, WeeklyRule):
        expr = _weekly_expression(rule, start_date)
    elif isinstance(rule, DailyRule):
        expr = EveryDay()
    else:
        raise UnsupportedFrequencyError(f"Unsupported frequency in rrule: {rule.freq}")

    if rule.interval is not None:
        expr = expr & EveryInterval(
            start_date, rule.interval, FREQUENCY_PRECISION[rule.freq]
        )
    _LOGGER.debug("Built expression %s for rule %s", expr, rule)
    return expr
