"""Tests for Event component."""

from __future__ import annotations

import datetime
import zoneinfo

import pytest
from pydantic import ValidationError

from upcoming.event import Event, project
from upcoming.exceptions import MalformedRuleError, UnsupportedFrequencyError
from upcoming.types.recur import Weekday, WeekdayValue, WeeklyRule

TZ = zoneinfo.ZoneInfo("America/Regina")


def test_event() -> None:
    """Test creating an event."""
    event = Event(
        summary="Conference",
        location="Convention center",
        start_date="2022-09-12",
        end_date="2022-09-15",
    )
    assert event.summary == "Conference"
    assert event.location == "Convention center"
    assert event.start_date == datetime.date(2022, 9, 12)
    assert event.end_date == datetime.date(2022, 9, 15)
    assert event.start_time is None
    assert event.rrule == {}
    assert not event.recurring
    assert event.recurrence_rule is None
    assert event.duration == datetime.timedelta(days=3)


def test_end_before_start() -> None:
    """Test an event can't end before it starts."""
    with pytest.raises(ValidationError, match="before start date"):
        Event(start_date=datetime.date(2022, 9, 12), end_date=datetime.date(2022, 9, 11))


def test_event_is_immutable() -> None:
    """Test an event can't be modified in place."""
    event = Event(start_date=datetime.date(2022, 9, 12), end_date=datetime.date(2022, 9, 12))
    with pytest.raises(ValidationError):
        event.summary = "Changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    "rrule",
    [
        "FREQ=WEEKLY;BYDAY=MO,WE",
        "RRULE:FREQ=WEEKLY;BYDAY=MO,WE",
        {"FREQ": "WEEKLY", "BYDAY": "MO,WE"},
        {"freq": "WEEKLY", "byday": "MO,WE", "until": ""},
    ],
)
def test_recurring_event(rrule: str | dict[str, str]) -> None:
    """Test an event with a recurrence rule."""
    event = Event(
        summary="Standup",
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule=rrule,
    )
    assert event.recurring
    assert event.rrule["FREQ"] == "WEEKLY"
    assert event.recurrence_rule == WeeklyRule(
        by_day=(WeekdayValue(Weekday.MONDAY), WeekdayValue(Weekday.WEDNESDAY))
    )


def test_rule_without_frequency() -> None:
    """Test rule fields without a frequency don't make an event recurring."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule={"INTERVAL": "2"},
    )
    assert not event.recurring
    assert event.recurrence_rule is None


def test_invalid_rrule_string() -> None:
    """Test an RRULE string that can't be split is kept until evaluated."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule=" FREQ=DAILY;INVALID ",
    )
    assert event.rrule == "FREQ=DAILY;INVALID"
    assert event.recurring
    assert not event.terminated
    with pytest.raises(MalformedRuleError, match="missing '='"):
        event.recurrence_rule


def test_invalid_rrule_type() -> None:
    """Test rule input that is neither text nor a mapping is rejected."""
    with pytest.raises(ValidationError):
        Event(
            start_date=datetime.date(2022, 8, 1),
            end_date=datetime.date(2022, 8, 1),
            rrule=42,
        )


@pytest.mark.parametrize(
    ("rrule", "terminated"),
    [
        ("FREQ=WEEKLY;UNTIL=20221231", True),
        ("FREQ=HOURLY;UNTIL=someday", True),
        ("FREQ=WEEKLY;UNTIL=", False),
        ("FREQ=WEEKLY", False),
        ({"UNTIL": "20221231"}, False),
    ],
)
def test_terminated(rrule: str | dict[str, str], terminated: bool) -> None:
    """Test detecting an UNTIL date without evaluating the rule."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule=rrule,
    )
    assert event.terminated == terminated


def test_malformed_rule_on_access() -> None:
    """Test rule errors are raised when the rule is evaluated."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule="FREQ=DAILY;UNTIL=someday",
    )
    assert event.recurring
    with pytest.raises(MalformedRuleError):
        event.recurrence_rule

    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        rrule="FREQ=HOURLY",
    )
    with pytest.raises(UnsupportedFrequencyError):
        event.recurrence_rule


@pytest.mark.parametrize(
    ("start_date", "end_date", "occurrence", "expected_end"),
    [
        (
            datetime.date(2022, 8, 1),
            datetime.date(2022, 8, 1),
            datetime.date(2022, 9, 5),
            datetime.date(2022, 9, 5),
        ),
        (
            datetime.date(2022, 8, 1),
            datetime.date(2022, 8, 2),
            datetime.date(2022, 9, 5),
            datetime.date(2022, 9, 6),
        ),
        (
            datetime.date(2021, 12, 31),
            datetime.date(2022, 1, 3),
            datetime.date(2022, 12, 31),
            datetime.date(2023, 1, 3),
        ),
    ],
)
def test_project(
    start_date: datetime.date,
    end_date: datetime.date,
    occurrence: datetime.date,
    expected_end: datetime.date,
) -> None:
    """Test projecting an event to an occurrence preserves the duration."""
    start_time = datetime.datetime(2022, 8, 1, 9, 0, tzinfo=TZ)
    event = Event(
        summary="Review",
        location="Room 1",
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        rrule="FREQ=DAILY",
    )
    result = project(event, occurrence)
    assert result.start_date == occurrence
    assert result.end_date == expected_end
    assert result.end_date - result.start_date == event.end_date - event.start_date
    assert result.summary == "Review"
    assert result.location == "Room 1"
    assert result.start_time == start_time
    assert result.rrule == {"FREQ": "DAILY"}

    # The input event is not modified
    assert event.start_date == start_date
    assert event.end_date == end_date


def test_localize() -> None:
    """Test aligning the start time to a timezone."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        start_time=datetime.datetime(2022, 8, 1, 15, 0, tzinfo=datetime.timezone.utc),
    )
    result = event.localize(TZ)
    assert result.start_time == datetime.datetime(2022, 8, 1, 9, 0, tzinfo=TZ)
    assert result.start_time.tzinfo == TZ
    assert event.start_time.tzinfo == datetime.timezone.utc


def test_localize_floating_time() -> None:
    """Test a start time without a timezone is interpreted in the timezone."""
    event = Event(
        start_date=datetime.date(2022, 8, 1),
        end_date=datetime.date(2022, 8, 1),
        start_time=datetime.datetime(2022, 8, 1, 9, 0),
    )
    result = event.localize(TZ)
    assert result.start_time == datetime.datetime(2022, 8, 1, 9, 0, tzinfo=TZ)


def test_localize_all_day_event() -> None:
    """Test an all day event is left unchanged."""
    event = Event(start_date=datetime.date(2022, 8, 1), end_date=datetime.date(2022, 8, 2))
    assert event.localize(TZ) is event
