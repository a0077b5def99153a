"""
Timeline provider for the widget-rendering process.

The host scheduler asks for a short batch of future entries, shows each one
at or after its instant and asks again once the last entry is displayed
(``ReloadPolicy.AT_END``). This module only decides the batch contents and
the suggested cadence; it does not control delivery.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from ..models.clock_configuration import ClockConfiguration
from .clock_configuration_repository import ClockConfigurationRepository

DEFAULT_ENTRY_COUNT = 20


class ReloadPolicy(str, Enum):
    AT_END = "atEnd"      # request a fresh timeline after the last entry
    NEVER = "never"


@dataclass(frozen=True)
class TimelineEntry:
    instant: datetime
    config: ClockConfiguration


@dataclass(frozen=True)
class Timeline:
    entries: List[TimelineEntry]
    policy: ReloadPolicy = ReloadPolicy.AT_END

    @property
    def last_instant(self) -> Optional[datetime]:
        return self.entries[-1].instant if self.entries else None


class TimelineProvider:
    """Builds timeline entries from the configuration in the shared store."""

    def __init__(self, repository: ClockConfigurationRepository,
                 entry_count: int = DEFAULT_ENTRY_COUNT) -> None:
        self._repo = repository
        self.entry_count = max(1, int(entry_count))

    def placeholder(self, now: Optional[datetime] = None) -> TimelineEntry:
        return TimelineEntry(now or datetime.now().astimezone(), self._repo.load())

    def snapshot(self, now: Optional[datetime] = None) -> TimelineEntry:
        return TimelineEntry(now or datetime.now().astimezone(), self._repo.load())

    def timeline(self, now: Optional[datetime] = None) -> Timeline:
        """
        ``entry_count`` entries starting at *now*, one second apart when seconds
        are shown, otherwise one minute apart. The store is read once.
        """
        start = now or datetime.now().astimezone()
        config = self._repo.load()
        step = timedelta(seconds=config.refresh_interval_seconds)
        entries = [TimelineEntry(start + i * step, config) for i in range(self.entry_count)]
        return Timeline(entries, ReloadPolicy.AT_END)
