"""
Build a Zone from compiled time zone data (TZif, RFC 8536).

Only the data handed in is read: callers supply a byte stream or a file path.
"""

import logging
import os
import struct
from dataclasses import dataclass
from typing import IO

from .errors import TZifError
from .gregorian import MINUTE_MS, SECOND_MS, naive_fields
from .models import Era
from .posix import PosixRule
from .zone import Zone, custom_zone

logger = logging.getLogger(__name__)

DEFAULT_UNTIL_YEAR = 2037
UNTIL_YEAR_ENV = "TZPARTS_UNTIL_YEAR"

_HEADER = struct.Struct(">4s1c15x6I")
_TTINFO = struct.Struct(">i?B")


@dataclass(frozen=True)
class _Header:
    version: int
    is_utc_count: int
    is_std_count: int
    leap_count: int
    transition_count: int
    type_count: int
    abbrev_byte_count: int

    @classmethod
    def read(cls, file: IO[bytes]) -> "_Header":
        (
            magic,
            version_byte,
            is_utc_count,
            is_std_count,
            leap_count,
            transition_count,
            type_count,
            abbrev_byte_count,
        ) = _HEADER.unpack(_read_exact(file, _HEADER.size))

        if magic != b"TZif":
            raise TZifError("Invalid TZif data: magic sequence not found.")
        if type_count == 0:
            raise TZifError("Invalid TZif data: no local time types.")

        if version_byte == b"\x00":
            version = 1
        elif version_byte.isdigit():
            version = int(version_byte)
        else:
            raise TZifError(f"Invalid TZif data: bad version {version_byte!r}.")
        return cls(
            version,
            is_utc_count,
            is_std_count,
            leap_count,
            transition_count,
            type_count,
            abbrev_byte_count,
        )

    def data_size(self, time_size: int) -> int:
        return (
            self.transition_count * (time_size + 1)
            + self.type_count * _TTINFO.size
            + self.abbrev_byte_count
            + self.leap_count * (time_size + 4)
            + self.is_std_count
            + self.is_utc_count
        )


def read_zone(file: IO[bytes], name: str, until_year: int | None = None) -> Zone:
    """
    Read TZif data from `file` into a Zone called `name`.

    For version 2+ data the POSIX TZ footer is expanded into eras for every
    year after the last explicit transition up to and including `until_year`
    (default from the TZPARTS_UNTIL_YEAR environment variable, else 2037).
    """
    if until_year is None:
        until_year = _default_until_year()

    header = _Header.read(file)
    footer = None
    if header.version < 2:
        transitions, offsets = _read_data_block(file, header, 4)
    else:
        # The v1 block is superseded by the 64-bit block that follows it.
        _read_exact(file, header.data_size(4))
        header = _Header.read(file)
        transitions, offsets = _read_data_block(file, header, 8)
        footer = _read_footer(file)

    changes = [(time * SECOND_MS, offsets[index][0]) for time, index in transitions]
    initial_offset_secs = _initial_offset_secs(offsets)

    footer_count = 0
    if footer is not None and footer.has_dst:
        last = changes[-1][0] if changes else None
        first_year = naive_fields(last)[0] if last is not None else 1970
        for year in range(first_year, until_year + 1):
            for instant, offset_secs in footer.transitions(year):
                if last is None or instant > last:
                    changes.append((instant, offset_secs))
                    footer_count += 1
    elif footer is not None and not changes:
        initial_offset_secs = footer.std_offset_secs

    zone = custom_zone(
        name, _collapse(changes, initial_offset_secs), _minutes(initial_offset_secs)
    )
    logger.debug(
        "Loaded zone %s: %d eras (%d transitions from footer rules through %d)",
        name,
        len(zone.eras),
        footer_count,
        until_year,
    )
    return zone


def zone_from_path(
    path: str | os.PathLike[str], name: str | None = None, until_year: int | None = None
) -> Zone:
    real = os.path.realpath(path)
    with open(real, "rb") as file:
        return read_zone(file, name or os.fspath(path), until_year)


def _default_until_year() -> int:
    value = os.environ.get(UNTIL_YEAR_ENV)
    if not value:
        return DEFAULT_UNTIL_YEAR
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(
            f"{UNTIL_YEAR_ENV} must be an integer year, got {value!r}"
        ) from exc


def _read_exact(file: IO[bytes], size: int) -> bytes:
    data = file.read(size)
    if len(data) != size:
        raise TZifError(f"Truncated TZif data: expected {size} bytes, got {len(data)}")
    return data


def _read_data_block(
    file: IO[bytes], header: _Header, time_size: int
) -> tuple[list[tuple[int, int]], list[tuple[int, bool]]]:
    """
    Returns ([(transition secs, type index)], [(utc offset secs, is dst)]).
    Abbreviations, leap seconds and indicator flags are skipped.
    """
    count = header.transition_count
    time_format = "q" if time_size == 8 else "i"
    raw = _read_exact(file, count * time_size)
    times = struct.unpack(f">{count}{time_format}", raw)
    indices = list(_read_exact(file, count))

    offsets = [
        _TTINFO.unpack(_read_exact(file, _TTINFO.size))[:2]
        for _ in range(header.type_count)
    ]
    if any(index >= header.type_count for index in indices):
        raise TZifError("Invalid TZif data: transition refers to unknown type.")

    _read_exact(
        file,
        header.abbrev_byte_count
        + header.leap_count * (time_size + 4)
        + header.is_std_count
        + header.is_utc_count,
    )
    return list(zip(times, indices)), offsets


def _read_footer(file: IO[bytes]) -> PosixRule | None:
    lines = file.read().split(b"\n")
    if len(lines) < 2:
        return None
    try:
        tz_string = lines[1].rstrip(b"\x00").decode("ascii")
    except UnicodeDecodeError as exc:
        raise TZifError("Invalid TZif data: footer is not ASCII.") from exc
    if not tz_string:
        return None
    return PosixRule.parse(tz_string)


def _initial_offset_secs(offsets: list[tuple[int, bool]]) -> int:
    # Prefer the first standard-time type, else fall back to type 0
    return next((off for off, is_dst in offsets if not is_dst), offsets[0][0])


def _minutes(seconds: int) -> int:
    # Truncate toward zero; LMT offsets carry odd seconds
    whole = abs(seconds) // 60
    return whole if seconds >= 0 else -whole


def _collapse(changes: list[tuple[int, int]], initial_offset_secs: int) -> list[Era]:
    """
    Turn chronological (utc millis, offset secs) changes into newest-first
    eras, dropping changes that keep the offset the same.
    """
    initial = _minutes(initial_offset_secs)
    eras: list[Era] = []
    for instant, offset_secs in changes:
        offset = _minutes(offset_secs)
        start = instant // MINUTE_MS
        # A later change within the same minute replaces the earlier one
        if eras and eras[-1].start >= start:
            eras.pop()
        current = eras[-1].offset if eras else initial
        if offset != current:
            eras.append(Era(start, offset))
    eras.reverse()
    return eras
