"""Library for iterators used to find occurrences of recurring events.

An occurrence is found by scanning every day of a bounded range in order and
evaluating a temporal expression for the day. The range is bounded by a
horizon so the search always terminates, even for expressions that never
match.
"""

from __future__ import annotations

import datetime
import itertools
import logging
from collections.abc import Callable, Iterable, Iterator

from dateutil import rrule

from .util import today_factory

__all__ = [
    "DateRangeIterable",
    "DEFAULT_HORIZON",
    "resolve",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_HORIZON = datetime.timedelta(days=365)

DatePredicate = Callable[[datetime.date], bool]
"""A callable that returns True for a matching day, e.g. a TemporalExpression."""


class DateRangeIterable(Iterable[datetime.date]):
    """An iterable over every day of an inclusive date range.

    The `dateutil.rrule` library emits datetime values even when started from
    a date, so values are converted back into a datetime.date.
    """

    def __init__(self, start: datetime.date, end: datetime.date) -> None:
        """Initialize DateRangeIterable."""
        self._start = start
        self._end = end

    def __iter__(self) -> Iterator[datetime.date]:
        """Return an iterator over the days in chronological order."""
        if self._end < self._start:
            return
        for value in rrule.rrule(rrule.DAILY, dtstart=self._start, until=self._end):
            yield datetime.date.fromordinal(value.toordinal())

    def __repr__(self) -> str:
        return f"DateRangeIterable(start={self._start}, end={self._end})"


def resolve(
    predicate: DatePredicate,
    search_start: datetime.date | None = None,
    search_end: datetime.date | None = None,
    limit: int = 1,
) -> list[datetime.date]:
    """Return the earliest days in the range that match the predicate.

    The search range defaults to a year starting today and both ends are
    inclusive. At most `limit` days are returned in ascending order, and an
    empty list means the predicate has no occurrence within the range.
    """
    if limit < 1:
        raise ValueError(f"Limit must be a positive integer: {limit}")
    if search_start is None:
        search_start = today_factory()
    if search_end is None:
        search_end = search_start + DEFAULT_HORIZON
    days = DateRangeIterable(search_start, search_end)
    result = list(itertools.islice(filter(predicate, days), limit))
    _LOGGER.debug(
        "Resolved %s in [%s, %s] to %s", predicate, search_start, search_end, result
    )
    return result
