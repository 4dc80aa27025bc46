"""
Proleptic Gregorian calendar arithmetic on integer millisecond timestamps.

A "naive" timestamp is a count of milliseconds since 1970-01-01T00:00:00 with
no offset applied; the helpers here convert between those and calendar fields
without consulting any platform time zone database.
"""

from datetime import datetime, timedelta, timezone

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)

# Days in a 400 year Gregorian cycle
_DAYS_PER_CYCLE = 146097


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def leap_years_before(year: int) -> int:
    """Number of leap years in [1, year)."""
    y = year - 1
    return y // 4 - y // 100 + y // 400


def millis_before_year(year: int) -> int:
    days = 365 * (year - 1970) + leap_years_before(year) - leap_years_before(1970)
    return days * DAY_MS


def millis_before_month(year: int, month: int) -> int:
    days = _DAYS_BEFORE_MONTH[month - 1]
    if month > 2 and is_leap_year(year):
        days += 1
    return days * DAY_MS


def naive_millis(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millis: int = 0,
) -> int:
    return (
        millis_before_year(year)
        + millis_before_month(year, month)
        + (day - 1) * DAY_MS
        + hour * HOUR_MS
        + minute * MINUTE_MS
        + second * SECOND_MS
        + millis
    )


def naive_fields(timestamp: int) -> tuple[int, int, int, int, int, int, int]:
    """
    Split a naive millisecond timestamp into
    (year, month, day, hour, minute, second, millis).
    """
    days = timestamp // DAY_MS
    # Estimate from the mean year length, then correct by at most a year.
    year = 1970 + (days * 400) // _DAYS_PER_CYCLE
    while millis_before_year(year) > timestamp:
        year -= 1
    while millis_before_year(year + 1) <= timestamp:
        year += 1

    rem = timestamp - millis_before_year(year)
    month = 12
    while millis_before_month(year, month) > rem:
        month -= 1
    rem -= millis_before_month(year, month)

    day, rem = divmod(rem, DAY_MS)
    hour, rem = divmod(rem, HOUR_MS)
    minute, rem = divmod(rem, MINUTE_MS)
    second, millis = divmod(rem, SECOND_MS)
    return year, month, day + 1, hour, minute, second, millis


def weekday(timestamp: int) -> int:
    """Day of week of a naive timestamp, Sunday=0 ... Saturday=6."""
    # 1970-01-01 was a Thursday
    return (timestamp // DAY_MS + 4) % 7


def instant_from_datetime(dt: datetime) -> int:
    """
    Milliseconds since the epoch for `dt`. Naive datetimes are taken as UTC.
    Sub-millisecond precision is truncated.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - _EPOCH
    return (
        delta.days * DAY_MS + delta.seconds * SECOND_MS + delta.microseconds // 1000
    )


def instant_to_datetime(instant: int) -> datetime:
    """Aware UTC datetime for a millisecond instant."""
    return _EPOCH + timedelta(milliseconds=instant)
