from collections.abc import Iterable
from dataclasses import dataclass

from .gregorian import MINUTE_MS
from .models import Era, EraLookup


@dataclass(frozen=True)
class Zone:
    """
    A named UTC offset schedule.

    `eras` is ordered newest first (strictly descending `start`). Ordering is
    the caller's responsibility and is not checked. `offset_of_earliest_era`
    applies to every instant before the oldest era, so a zone without eras is
    a fixed-offset zone.
    """

    name: str
    eras: tuple[Era, ...]
    offset_of_earliest_era: int

    def __post_init__(self) -> None:
        if not isinstance(self.eras, tuple):
            object.__setattr__(self, "eras", tuple(self.eras))

    def find_era(self, instant: int) -> EraLookup:
        """
        Era in effect at `instant` (ms since epoch) together with the era that
        follows it, if any.
        """
        minutes = instant // MINUTE_MS
        newer: Era | None = None
        for era in self.eras:
            if era.start <= minutes:
                return EraLookup(era, newer)
            newer = era
        # Before every recorded era; `newer` is now the oldest one, if any.
        return EraLookup(Era(0, self.offset_of_earliest_era), newer)

    def offset_at(self, instant: int) -> int:
        """UTC offset in minutes at `instant`."""
        return self.find_era(instant).current.offset


def custom_zone(name: str, eras: Iterable[Era], offset_of_earliest_era: int) -> Zone:
    return Zone(name, tuple(eras), offset_of_earliest_era)


UTC = custom_zone("UTC", [], 0)
