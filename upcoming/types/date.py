"""Library for parsing DATE and DATE-TIME values of a recurrence rule."""

from __future__ import annotations

import datetime
import logging
import re

__all__ = ["parse_date"]

_LOGGER = logging.getLogger(__name__)

DATE_REGEX = re.compile(r"^([0-9]{8})$")
DATETIME_REGEX = re.compile(r"^([0-9]{8})T([0-9]{6})(Z)?$")
ISO_DATE_REGEX = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")


def _parse_basic_date(value: str) -> datetime.date:
    year = int(value[0:4])
    month = int(value[4:6])
    day = int(value[6:])
    return datetime.date(year, month, day)


def parse_date(value: str) -> datetime.date:
    """Parse a rfc5545 DATE or DATE-TIME value into a datetime.date.

    A DATE-TIME is reduced to its date component. Extended ISO dates such as
    `2022-08-29` are accepted as well since some feeds emit them.
    """
    value = value.strip()
    if match := DATE_REGEX.fullmatch(value):
        result = _parse_basic_date(match.group(1))
    elif match := DATETIME_REGEX.fullmatch(value):
        # Validate the time even though only the date is used
        datetime.time.fromisoformat(
            f"{match.group(2)[0:2]}:{match.group(2)[2:4]}:{match.group(2)[4:6]}"
        )
        result = _parse_basic_date(match.group(1))
    elif ISO_DATE_REGEX.fullmatch(value):
        result = datetime.date.fromisoformat(value)
    else:
        raise ValueError(
            f"Expected value to match DATE or DATE-TIME pattern: '{value}'"
        )
    _LOGGER.debug("parse_date returned %s", result)
    return result
