"""Library for parsing the value types used by recurrence rules."""

from .date import parse_date
from .recur import (
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
    "DailyRule",
    "Frequency",
    "MonthlyRule",
    "RecurrenceRule",
    "Weekday",
    "WeekdayValue",
    "WeeklyRule",
    "YearlyRule",
    "parse_date",
]
