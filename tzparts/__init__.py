from .codec import decode, dumps, encode, loads
from .errors import DecodeError, TZifError
from .models import Era, EraLookup, Month
from .parts import Parts, from_parts, to_parts
from .tzif import read_zone, zone_from_path
from .zone import UTC, Zone, custom_zone

__all__ = [
    "UTC",
    "DecodeError",
    "Era",
    "EraLookup",
    "Month",
    "Parts",
    "TZifError",
    "Zone",
    "custom_zone",
    "decode",
    "dumps",
    "encode",
    "from_parts",
    "loads",
    "read_zone",
    "to_parts",
    "zone_from_path",
]
