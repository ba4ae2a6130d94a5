"""Test fixtures."""

from collections.abc import Generator
import datetime
import zoneinfo
from unittest.mock import patch

import pytest

LOCAL_TZ = zoneinfo.ZoneInfo("America/Regina")


@pytest.fixture(autouse=True)
def mock_local_timezone() -> Generator[datetime.tzinfo, None, None]:
    """Mock out the process local timezone used in tests."""
    with patch("upcoming.config.local_timezone", return_value=LOCAL_TZ), patch(
        "upcoming.util.local_timezone", return_value=LOCAL_TZ
    ):
        yield LOCAL_TZ
