import re
from dataclasses import dataclass

from .errors import TZifError
from .gregorian import (
    DAY_MS,
    SECOND_MS,
    days_in_month,
    is_leap_year,
    millis_before_year,
    naive_millis,
    weekday,
)

# Adapted from zoneinfo._zoneinfo._parse_tz_str
_LOCAL_TZ_RE = re.compile(
    r"""
    (?P<std>[^<0-9:.+-]+|<[a-zA-Z0-9+-]+>)
    (?:
        (?P<stdoff>[+-]?\d{1,3}(?::\d{2}(?::\d{2})?)?)
        (?:
            (?P<dst>[^0-9:.+-]+|<[a-zA-Z0-9+-]+>)
            (?P<dstoff>[+-]?\d{1,3}(?::\d{2}(?::\d{2})?)?)?
        )? # dst
    )? # stdoff
    """,
    re.ASCII | re.VERBOSE,
)
_HMS_RE = re.compile(
    r"(?P<sign>[+-])?(?P<h>\d{1,3})(:(?P<m>\d{2})(:(?P<s>\d{2}))?)?", re.ASCII
)
_MWD_RE = re.compile(r"M(\d{1,2})\.(\d)\.(\d)", re.ASCII)

_DEFAULT_RULE_TIME_SECS = 2 * 3600


@dataclass(frozen=True)
class MonthWeekDayRule:
    """
    Mm.w.d: day `weekday` (Sunday=0) of week `week` of `month`; week 5 means
    the last such day of the month.
    """

    month: int
    week: int
    weekday: int
    time_secs: int

    def wall_millis(self, year: int) -> int:
        first = naive_millis(year, self.month, 1)
        day = 1 + (self.weekday - weekday(first)) % 7 + 7 * (self.week - 1)
        last = days_in_month(year, self.month)
        while day > last:
            day -= 7
        return naive_millis(year, self.month, day) + self.time_secs * SECOND_MS


@dataclass(frozen=True)
class JulianDayRule:
    """Jn: day 1..365, never counting February 29."""

    day_of_year: int
    time_secs: int

    def wall_millis(self, year: int) -> int:
        day_index = self.day_of_year - 1
        if is_leap_year(year) and self.day_of_year >= 60:
            day_index += 1
        return (
            millis_before_year(year) + day_index * DAY_MS + self.time_secs * SECOND_MS
        )


@dataclass(frozen=True)
class OrdinalDayRule:
    """n: zero-based day 0..365, counting February 29."""

    day_index: int
    time_secs: int

    def wall_millis(self, year: int) -> int:
        return (
            millis_before_year(year)
            + self.day_index * DAY_MS
            + self.time_secs * SECOND_MS
        )


DateRule = MonthWeekDayRule | JulianDayRule | OrdinalDayRule


@dataclass(frozen=True)
class PosixRule:
    """
    A POSIX TZ string as found in the footer of TZif v2+ data.

    Offsets are in seconds east of UTC (the TZ string itself counts west).
    """

    tz_string: str
    std_abbrev: str
    std_offset_secs: int
    dst_abbrev: str | None = None
    dst_offset_secs: int | None = None
    dst_start: DateRule | None = None
    dst_end: DateRule | None = None

    @property
    def has_dst(self) -> bool:
        return (
            self.dst_offset_secs is not None
            and self.dst_start is not None
            and self.dst_end is not None
        )

    def transitions(self, year: int) -> list[tuple[int, int]]:
        """
        (utc millis, new offset secs) pairs for the DST changes in `year`,
        in chronological order.
        """
        # Spelled out rather than has_dst so type checkers narrow the fields
        if (
            self.dst_offset_secs is None
            or self.dst_start is None
            or self.dst_end is None
        ):
            return []

        # Start is given in standard wall time, end in daylight wall time.
        start = self.dst_start.wall_millis(year) - self.std_offset_secs * SECOND_MS
        end = self.dst_end.wall_millis(year) - self.dst_offset_secs * SECOND_MS
        return sorted(
            [(start, self.dst_offset_secs), (end, self.std_offset_secs)]
        )

    @classmethod
    def parse(cls, tz_string: str) -> "PosixRule":
        local_tz, _, rules = tz_string.partition(",")

        match = _LOCAL_TZ_RE.fullmatch(local_tz)
        if match is None:
            raise TZifError(f"{local_tz!r} is not a valid TZ string")
        if match.group("stdoff") is None:
            raise TZifError(f"{local_tz!r} is missing required standard offset")

        std_offset_secs = cls._parse_offset(match.group("stdoff"))
        dst_abbrev = match.group("dst")
        dst_offset_secs = None
        if dst_abbrev:
            dst_abbrev = dst_abbrev.strip("<>")
            dstoff = match.group("dstoff")
            dst_offset_secs = (
                cls._parse_offset(dstoff) if dstoff else std_offset_secs + 3600
            )

        dst_start = dst_end = None
        if rules:
            start, sep, end = rules.partition(",")
            if not sep:
                raise TZifError(f"{tz_string!r} has a DST start but no end")
            dst_start = cls._parse_date_rule(start)
            dst_end = cls._parse_date_rule(end)

        return cls(
            tz_string,
            match.group("std").strip("<>"),
            std_offset_secs,
            dst_abbrev or None,
            dst_offset_secs,
            dst_start,
            dst_end,
        )

    @staticmethod
    def _parse_hms(value: str) -> tuple[int, int, int, bool]:
        match = _HMS_RE.fullmatch(value)
        if match is None:
            raise TZifError(f"{value!r} is not a valid time")
        h, m, s = (int(v or 0) for v in match.group("h", "m", "s"))
        if not (0 <= m < 60 and 0 <= s < 60):
            raise TZifError(f"Minutes/seconds must be in [0, 59]: {value}")
        return h, m, s, match.group("sign") == "-"

    @classmethod
    def _parse_offset(cls, value: str) -> int:
        h, m, s, negative = cls._parse_hms(value)
        if h > 24 or (h == 24 and (m or s)):
            raise TZifError(f"Offset must be within 24:00: {value}")
        total = h * 3600 + m * 60 + s
        # POSIX counts west of UTC as positive
        return total if negative else -total

    @classmethod
    def _parse_rule_time(cls, value: str | None) -> int:
        if not value:
            return _DEFAULT_RULE_TIME_SECS
        h, m, s, negative = cls._parse_hms(value)
        if h > 167:
            raise TZifError(f"Hour must be in [0, 167]: {value}")
        total = h * 3600 + m * 60 + s
        return -total if negative else total

    @classmethod
    def _parse_date_rule(cls, value: str) -> DateRule:
        date, _, time = value.partition("/")
        time_secs = cls._parse_rule_time(time)

        if date.startswith("M"):
            match = _MWD_RE.fullmatch(date)
            if match is None:
                raise TZifError(f"Invalid M<m>.<w>.<d> rule: {value}")
            month, week, day = (int(x) for x in match.groups())
            if not (1 <= month <= 12 and 1 <= week <= 5 and 0 <= day <= 6):
                raise TZifError(f"Invalid M<m>.<w>.<d> rule: {value}")
            return MonthWeekDayRule(month, week, day, time_secs)

        if date.startswith("J") and date[1:].isdigit():
            n = int(date[1:])
            if not 1 <= n <= 365:
                raise TZifError(f"J<n> must be 1..365: {value}")
            return JulianDayRule(n, time_secs)

        if date.isdigit():
            n = int(date)
            if not 0 <= n <= 365:
                raise TZifError(f"<n> must be 0..365: {value}")
            return OrdinalDayRule(n, time_secs)

        raise TZifError(f"Invalid DST rule date: {value}")
