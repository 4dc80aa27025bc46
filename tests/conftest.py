from datetime import datetime, timezone

import pytest

from tzparts import Era, Zone, custom_zone
from tzparts.gregorian import MINUTE_MS, instant_from_datetime


def utc_minutes(*args: int) -> int:
    return instant_from_datetime(datetime(*args, tzinfo=timezone.utc)) // MINUTE_MS


@pytest.fixture
def new_york_2022() -> Zone:
    """America/New_York for 2022 only: EDT from March 13 to November 6."""
    return custom_zone(
        "America/New_York",
        [
            Era(utc_minutes(2022, 11, 6, 6), -300),
            Era(utc_minutes(2022, 3, 13, 7), -240),
        ],
        -300,
    )
