"""
ClockConfiguration codec
------------------------
JSON wire format shared by the host app and the widget process.

Rules:
- Keys are the camelCase names of the first release (``use24HourFormat`` ...).
- Enums are written as their raw value; ``dateFormat`` is written as its
  pattern ("MMM d, yyyy") and also accepted by case name ("monthDayYear").
- Absent (or null) keys take the field default, so records written by older
  releases keep decoding after fields are added.
- A present value of the wrong type, an unknown enum tag or a malformed color
  rejects the whole record; callers fall back to ``DEFAULT`` wholesale.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from enum import Enum
from typing import Any, Dict, Optional, Union, get_type_hints

from ..exceptions.errors import ConfigurationDecodeError
from ..models.clock_configuration import DEFAULT, ORIGINAL_SCHEMA, ClockConfiguration
from ..models.clock_enums import DateDisplayFormat
from ..models.color import is_hex_color

logger = logging.getLogger(__name__)

COLOR_FIELDS = frozenset({"background_color", "text_color", "accent_color"})

_FIELDS = fields(ClockConfiguration)
_HINTS = get_type_hints(ClockConfiguration)


def wire_key(field_name: str) -> str:
    for f in _FIELDS:
        if f.name == field_name:
            return f.metadata["key"]
    raise KeyError(field_name)


def newer_wire_keys() -> list[str]:
    """Keys introduced after the original schema."""
    return [f.metadata["key"] for f in _FIELDS if f.metadata["since"] > ORIGINAL_SCHEMA]


# --------------------------------------------------------------------------- #
#  Encode
# --------------------------------------------------------------------------- #

def to_payload(config: ClockConfiguration) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for f in _FIELDS:
        value = getattr(config, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        payload[f.metadata["key"]] = value
    return payload


def encode(config: ClockConfiguration) -> bytes:
    """Deterministic UTF-8 JSON (sorted keys, compact separators)."""
    return json.dumps(
        to_payload(config), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


# --------------------------------------------------------------------------- #
#  Decode
# --------------------------------------------------------------------------- #

def decode(data: Union[bytes, bytearray, str]) -> ClockConfiguration:
    """
    Parses a serialized record.

    Raises:
        ConfigurationDecodeError: unparsable envelope or invalid present value.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        payload = json.loads(text)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise ConfigurationDecodeError(f"not a JSON record: {exc}") from exc
    return from_payload(payload)


def from_payload(payload: Any) -> ClockConfiguration:
    if not isinstance(payload, dict):
        raise ConfigurationDecodeError(
            f"expected a JSON object, got {type(payload).__name__}")

    kwargs: Dict[str, Any] = {}
    missing: list[str] = []
    for f in _FIELDS:
        key = f.metadata["key"]
        raw = payload.get(key)
        if raw is None:
            missing.append(key)
            continue
        kwargs[f.name] = _decode_value(f.name, key, raw)

    if missing:
        logger.debug("Record lacks %s; using defaults", ", ".join(missing))
    return ClockConfiguration(**kwargs)


def _decode_value(name: str, key: str, raw: Any) -> Any:
    typ = _HINTS[name]
    if typ is bool:
        if not isinstance(raw, bool):
            raise ConfigurationDecodeError(f"{key}: expected a boolean, got {raw!r}")
        return raw
    if name in COLOR_FIELDS:
        if not is_hex_color(raw):
            raise ConfigurationDecodeError(f"{key}: {raw!r} is not a hex color")
        return raw
    if name == "gradient_colors":
        if not isinstance(raw, list) or not all(is_hex_color(c) for c in raw):
            raise ConfigurationDecodeError(f"{key}: expected a list of hex colors")
        return tuple(raw)
    if typ is str:
        if not isinstance(raw, str):
            raise ConfigurationDecodeError(f"{key}: expected a string, got {raw!r}")
        return raw
    if isinstance(typ, type) and issubclass(typ, Enum):
        return _decode_enum(typ, key, raw)
    raise ConfigurationDecodeError(f"{key}: unsupported field type {typ!r}")


def _decode_enum(enum_cls: type, key: str, raw: Any) -> Enum:
    if not isinstance(raw, str):
        raise ConfigurationDecodeError(f"{key}: expected a string tag, got {raw!r}")
    try:
        return enum_cls(raw)
    except ValueError:
        pass
    if enum_cls is DateDisplayFormat:
        try:
            return DateDisplayFormat.from_tag(raw)
        except ValueError:
            pass
    raise ConfigurationDecodeError(f"{key}: {raw!r} is not a valid {enum_cls.__name__}")


def decode_or_default(data: Optional[Union[bytes, bytearray, str]]) -> ClockConfiguration:
    """Decode, or log and return ``DEFAULT`` (never a partially defaulted record)."""
    if data is None:
        logger.info("No saved clock configuration; using defaults")
        return DEFAULT
    try:
        return decode(data)
    except ConfigurationDecodeError as exc:
        logger.warning("Discarding unreadable clock configuration: %s", exc)
        return DEFAULT
