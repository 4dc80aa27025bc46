from dataclasses import FrozenInstanceError

import pytest

from tzparts import UTC, Era, EraLookup, Zone, custom_zone
from tzparts.gregorian import MINUTE_MS

from .conftest import utc_minutes


def test_utc_has_no_eras():
    assert UTC.name == "UTC"
    assert UTC.eras == ()
    assert UTC.offset_of_earliest_era == 0
    assert UTC.find_era(1_700_000_000_000) == EraLookup(Era(0, 0), None)


def test_custom_zone_stores_eras_as_tuple():
    eras = [Era(200, 60), Era(100, 0)]
    zone = custom_zone("Test/Zone", eras, 30)
    eras.append(Era(0, 15))
    assert zone.eras == (Era(200, 60), Era(100, 0))
    assert zone == Zone("Test/Zone", [Era(200, 60), Era(100, 0)], 30)
    assert hash(zone) == hash(custom_zone("Test/Zone", zone.eras, 30))


def test_zone_is_immutable():
    with pytest.raises(FrozenInstanceError):
        UTC.name = "Other"  # type: ignore[misc]
    with pytest.raises(FrozenInstanceError):
        Era(0, 0).offset = 60  # type: ignore[misc]


def test_find_era_exactly_at_start_uses_new_era(new_york_2022):
    fall = utc_minutes(2022, 11, 6, 6)
    lookup = new_york_2022.find_era(fall * MINUTE_MS)
    assert lookup == EraLookup(Era(fall, -300), None)


def test_find_era_just_before_start_uses_previous_era(new_york_2022):
    spring = utc_minutes(2022, 3, 13, 7)
    fall = utc_minutes(2022, 11, 6, 6)
    lookup = new_york_2022.find_era(fall * MINUTE_MS - 1)
    assert lookup == EraLookup(Era(spring, -240), Era(fall, -300))


def test_find_era_before_all_eras_is_synthetic(new_york_2022):
    spring = utc_minutes(2022, 3, 13, 7)
    lookup = new_york_2022.find_era(0)
    assert lookup.current == Era(0, -300)
    assert lookup.next == Era(spring, -240)


def test_find_era_floors_negative_instants():
    zone = custom_zone("Test/Negative", [Era(0, 60), Era(-1, 30)], 0)
    assert zone.find_era(-1).current == Era(-1, 30)
    assert zone.find_era(-60_001).current == Era(0, 0)
    assert zone.find_era(-60_001).next == Era(-1, 30)


def test_offset_at(new_york_2022):
    assert new_york_2022.offset_at(utc_minutes(2022, 7, 1) * MINUTE_MS) == -240
    assert new_york_2022.offset_at(utc_minutes(2022, 12, 1) * MINUTE_MS) == -300
    assert new_york_2022.offset_at(utc_minutes(2021, 7, 1) * MINUTE_MS) == -300
