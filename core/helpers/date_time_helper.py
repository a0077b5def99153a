"""
date_time_helper.py

Helper functions for timezone resolution and wall-clock conversion.

The clock stores its zone as an IANA identifier; the empty string stands for
the system's local zone. All features should use ONLY these helpers to turn
an instant into the wall-clock time they display.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from functools import lru_cache
from typing import List, Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

# Identifier meaning "whatever zone the machine runs in"
LOCAL_ZONE = ""


@lru_cache(maxsize=64)
def resolve_zone(identifier: str) -> Optional[tzinfo]:
    """
    Returns the tzinfo for *identifier*, or None for the local system zone.

    Unknown or malformed identifiers fall back to the local zone, mirroring
    ``TimeZone(identifier:) ?? .current``.
    """
    name = (identifier or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError: zone directories such as "Europe"
        return None


def is_valid_zone(identifier: str) -> bool:
    """True for the local-zone marker and for every identifier ZoneInfo knows."""
    name = (identifier or "").strip()
    return name == LOCAL_ZONE or resolve_zone(name) is not None


def to_wall_clock(instant: datetime, identifier: str = LOCAL_ZONE) -> datetime:
    """
    Converts *instant* to the wall-clock time of the configured zone.

    Naive datetimes are taken as local wall-clock time already; they are only
    converted when a concrete zone is configured.
    """
    zone = resolve_zone(identifier)
    if instant.tzinfo is None:
        if zone is None:
            return instant
        return instant.astimezone().astimezone(zone)
    if zone is None:
        return instant.astimezone()
    return instant.astimezone(zone)


def zone_abbreviation(wall_clock: datetime) -> str:
    """Short zone name (e.g. "CET"), or "" when the datetime carries no zone."""
    return wall_clock.tzname() or ""


def available_zone_names() -> List[str]:
    """Sorted IANA identifiers for pickers (local marker not included)."""
    try:
        return sorted(available_timezones())
    except OSError:
        return []
