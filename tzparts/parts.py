from dataclasses import dataclass, replace
from typing import Literal

from . import gregorian
from .gregorian import DAY_MS, MINUTE_MS, days_in_month, naive_fields
from .models import Month
from .zone import Zone

Disambiguate = Literal["earlier", "later"]

_MIN_YEAR = 1970


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Parts:
    """
    Calendar fields of an instant as seen in some zone.

    Obtain one from `to_parts`, adjust it with the `with_*` methods, and turn
    it back into an instant with `from_parts`. The setters clamp their input
    so the result is always a real calendar date.
    """

    year: int
    month: Month
    day: int
    hour: int
    minute: int
    second: int
    millis: int

    def with_year(self, year: int) -> "Parts":
        year = max(_MIN_YEAR, year)
        return replace(
            self, year=year, day=min(self.day, days_in_month(year, self.month))
        )

    def with_month(self, month: Month | int) -> "Parts":
        month = Month(_clamp(int(month), 1, 12))
        return replace(
            self, month=month, day=min(self.day, days_in_month(self.year, month))
        )

    def with_day(self, day: int) -> "Parts":
        return replace(
            self, day=_clamp(day, 1, days_in_month(self.year, self.month))
        )

    def with_hour(self, hour: int) -> "Parts":
        return replace(self, hour=_clamp(hour, 0, 23))

    def with_minute(self, minute: int) -> "Parts":
        return replace(self, minute=_clamp(minute, 0, 59))

    def with_second(self, second: int) -> "Parts":
        return replace(self, second=_clamp(second, 0, 59))

    def with_millis(self, millis: int) -> "Parts":
        return replace(self, millis=_clamp(millis, 0, 999))

    def naive_millis(self) -> int:
        """The fields read as a UTC timestamp, ignoring any zone."""
        return gregorian.naive_millis(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.millis,
        )


def to_parts(zone: Zone, instant: int) -> Parts:
    offset = zone.find_era(instant).current.offset
    year, month, day, hour, minute, second, millis = naive_fields(
        instant + offset * MINUTE_MS
    )
    return Parts(year, Month(month), day, hour, minute, second, millis)


def from_parts(
    zone: Zone, parts: Parts, disambiguate: Disambiguate = "earlier"
) -> int:
    """
    Resolve wall-clock `parts` in `zone` to an instant (ms since epoch).

    Inside a gap (clocks turned forward) the result snaps forward to the
    instant the wall clock reads when read with the pre-transition offset,
    e.g. 02:30 in a skipped 02:00-03:00 hour becomes 03:30 after the jump.
    Inside an overlap (clocks turned back) `disambiguate` picks the first
    ("earlier") or second ("later") occurrence of the repeated time.
    """
    if disambiguate not in ("earlier", "later"):
        raise ValueError(f"Invalid disambiguate value: {disambiguate!r}")

    my_time = parts.naive_millis()
    # Probe a day early so the lookup sees the era leading up to any
    # transition near `my_time`, not the one after it.
    lookup = zone.find_era(my_time - DAY_MS)

    before_time = my_time - lookup.current.offset * MINUTE_MS
    if lookup.next is None:
        return before_time

    after_time = my_time - lookup.next.offset * MINUTE_MS
    boundary = lookup.next.start * MINUTE_MS

    if before_time < boundary and after_time < boundary:
        return before_time
    if before_time >= boundary and after_time >= boundary:
        return after_time

    # Transition window: a gap when before_time > after_time, else an overlap.
    if before_time > after_time or disambiguate == "earlier":
        return before_time
    return after_time
