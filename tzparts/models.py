from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True)
class Era:
    """
    A span of time with a constant UTC offset.

    `start` is in minutes since the epoch (UTC, inclusive) and `offset` is in
    minutes east of UTC. The era lasts until the start of the next newer era.
    """

    start: int
    offset: int


@dataclass(frozen=True)
class EraLookup:
    """
    The era in effect at an instant, and the chronologically next era.
    """

    current: Era
    next: Era | None


class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12
