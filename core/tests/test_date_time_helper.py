"""Timezone helper tests."""
from __future__ import annotations

from datetime import datetime, timezone

from core.helpers.date_time_helper import (
    LOCAL_ZONE,
    available_zone_names,
    is_valid_zone,
    resolve_zone,
    to_wall_clock,
    zone_abbreviation,
)


def test_local_marker_and_invalid_names_resolve_to_none() -> None:
    assert resolve_zone(LOCAL_ZONE) is None
    assert resolve_zone("   ") is None
    assert resolve_zone("Not/AZone") is None
    assert resolve_zone("../etc/passwd") is None


def test_known_zone_resolves() -> None:
    assert resolve_zone("Europe/Berlin") is not None


def test_is_valid_zone() -> None:
    assert is_valid_zone("")
    assert is_valid_zone("America/New_York")
    assert not is_valid_zone("Atlantis/Capital")


def test_naive_instant_is_kept_for_local_zone() -> None:
    naive = datetime(2024, 1, 1, 10, 0)
    assert to_wall_clock(naive, "") == naive


def test_aware_instant_is_converted() -> None:
    instant = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    berlin = to_wall_clock(instant, "Europe/Berlin")
    assert (berlin.hour, zone_abbreviation(berlin)) == (14, "CEST")


def test_invalid_zone_uses_local_time() -> None:
    instant = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    assert to_wall_clock(instant, "Nope/Nope") == instant.astimezone()


def test_abbreviation_of_naive_datetime_is_empty() -> None:
    assert zone_abbreviation(datetime(2024, 1, 1)) == ""


def test_available_zone_names_sorted() -> None:
    names = available_zone_names()
    assert names == sorted(names)
    assert "Europe/Berlin" in names


def test_zone_directories_and_odd_names_fall_back_to_local() -> None:
    for name in ("Europe", "America", "Etc", "/", "a\x00b"):
        assert resolve_zone(name) is None
        assert not is_valid_zone(name)
    instant = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    assert to_wall_clock(instant, "Europe") == instant.astimezone()
