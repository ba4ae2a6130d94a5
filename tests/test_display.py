"""Tests for describing when an event happens."""

from __future__ import annotations

import datetime
import zoneinfo

import pytest

from upcoming.config import EventListConfig
from upcoming.display import describe_when
from upcoming.event import Event

TZ = zoneinfo.ZoneInfo("America/Regina")


@pytest.mark.parametrize(
    ("start_date", "end_date", "start_time", "expected"),
    [
        (
            datetime.date(2022, 8, 10),
            datetime.date(2022, 8, 10),
            datetime.datetime(2022, 8, 10, 9, 30, tzinfo=TZ),
            "10.08.2022 - 09:30",
        ),
        (
            datetime.date(2022, 8, 10),
            datetime.date(2022, 8, 10),
            None,
            "10.08.2022",
        ),
        (
            datetime.date(2022, 8, 10),
            datetime.date(2022, 8, 11),
            None,
            "10.08.2022",
        ),
        (
            datetime.date(2022, 8, 10),
            datetime.date(2022, 8, 13),
            None,
            "10.08.2022 - 12.08.2022",
        ),
    ],
)
def test_describe_when(
    start_date: datetime.date,
    end_date: datetime.date,
    start_time: datetime.datetime | None,
    expected: str,
) -> None:
    """Test describing single day, all day and multi-day events."""
    event = Event(start_date=start_date, end_date=end_date, start_time=start_time)
    assert describe_when(event) == expected
    assert event.end_date == end_date


def test_describe_when_custom_format() -> None:
    """Test the formats are read from the config."""
    config = EventListConfig(
        date_format="%Y-%m-%d", time_format="%I:%M %p", range_separator=" to "
    )
    event = Event(
        start_date=datetime.date(2022, 8, 10),
        end_date=datetime.date(2022, 8, 10),
        start_time=datetime.datetime(2022, 8, 10, 14, 0, tzinfo=TZ),
    )
    assert describe_when(event, config) == "2022-08-10 to 02:00 PM"

    event = Event(start_date=datetime.date(2022, 8, 10), end_date=datetime.date(2022, 8, 12))
    assert describe_when(event, config) == "2022-08-10 to 2022-08-11"
