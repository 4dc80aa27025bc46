"""
Wire encoding of a Zone.

    {"n": <name>, "e": [{"s": <start>, "o": <offset>}, ...], "o": <offset>}

Eras keep their stored (newest first) order. The short field names are part
of the wire format and must not change.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from .errors import DecodeError
from .models import Era
from .zone import Zone, custom_zone

logger = logging.getLogger(__name__)

NAME_FIELD = "n"
ERAS_FIELD = "e"
EARLIEST_OFFSET_FIELD = "o"
ERA_START_FIELD = "s"
ERA_OFFSET_FIELD = "o"


def encode(zone: Zone) -> dict[str, Any]:
    return {
        NAME_FIELD: zone.name,
        ERAS_FIELD: [
            {ERA_START_FIELD: era.start, ERA_OFFSET_FIELD: era.offset}
            for era in zone.eras
        ],
        EARLIEST_OFFSET_FIELD: zone.offset_of_earliest_era,
    }


def decode(value: Any) -> Zone:
    """
    Build a Zone from a wire value. Raises DecodeError naming the offending
    field if a field is missing or has the wrong type.
    """
    try:
        root = _require_mapping(value, "")
        name = _require_str(root, NAME_FIELD, "")
        raw_eras = _require_list(root, ERAS_FIELD, "")
        eras = [
            _decode_era(raw, f"{ERAS_FIELD}[{i}]") for i, raw in enumerate(raw_eras)
        ]
        offset = _require_int(root, EARLIEST_OFFSET_FIELD, "")
    except DecodeError as exc:
        logger.debug("Rejected zone wire value: %s", exc)
        raise
    return custom_zone(name, eras, offset)


def dumps(zone: Zone) -> str:
    return json.dumps(encode(zone), separators=(",", ":"))


def loads(text: str | bytes) -> Zone:
    try:
        value = json.loads(text)
    except ValueError as exc:
        raise DecodeError("", f"invalid JSON: {exc}") from exc
    return decode(value)


def _decode_era(value: Any, path: str) -> Era:
    era = _require_mapping(value, path)
    return Era(
        _require_int(era, ERA_START_FIELD, path),
        _require_int(era, ERA_OFFSET_FIELD, path),
    )


def _field_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(path, f"expected an object, got {type(value).__name__}")
    return value


def _lookup(obj: Mapping[str, Any], key: str, parent: str) -> Any:
    if key not in obj:
        raise DecodeError(_field_path(parent, key), "missing required field")
    return obj[key]


def _require_str(obj: Mapping[str, Any], key: str, parent: str) -> str:
    value = _lookup(obj, key, parent)
    if not isinstance(value, str):
        raise DecodeError(
            _field_path(parent, key), f"expected a string, got {type(value).__name__}"
        )
    return value


def _require_int(obj: Mapping[str, Any], key: str, parent: str) -> int:
    value = _lookup(obj, key, parent)
    # bool is an int subclass but never a valid offset or start
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(
            _field_path(parent, key), f"expected an integer, got {type(value).__name__}"
        )
    return value


def _require_list(obj: Mapping[str, Any], key: str, parent: str) -> list[Any]:
    value = _lookup(obj, key, parent)
    if not isinstance(value, (list, tuple)):
        raise DecodeError(
            _field_path(parent, key), f"expected a list, got {type(value).__name__}"
        )
    return list(value)
