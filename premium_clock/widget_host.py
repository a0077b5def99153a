#!/usr/bin/env python3
"""Widget-rendering process entry point.

Runs independently of the host app: reads the shared store, asks the
TimelineProvider for a batch of entries, renders each one to a PNG when its
instant arrives and requests a fresh timeline once the last entry is shown.

    python -m premium_clock.widget_host --once --output widget.png
"""
from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from core.config.config_service import get_config_service
from core.logging.logic.log_setup import setup_logging

from .exceptions.errors import ConfigurationStoreError
from .logic.clock_configuration_repository import ClockConfigurationRepository, open_shared_store
from .logic.clock_service import ClockService
from .logic.frame_renderer import FrameRenderer, save_png_atomic
from .logic.storage_backends import InMemoryKeyValueStore
from .logic.timeline_provider import ReloadPolicy, Timeline, TimelineEntry, TimelineProvider
from .models.clock_enums import RenderContext

LOGGER = logging.getLogger("premium_clock.widget_host")


def _now() -> datetime:
    return datetime.now().astimezone()


class WidgetHost:
    """Drives timelines the way the system widget scheduler would."""

    def __init__(
        self,
        provider: TimelineProvider,
        output: Path,
        size: tuple = (338, 158),
        *,
        context: RenderContext = RenderContext.WIDGET,
        service: Optional[ClockService] = None,
        renderer: Optional[FrameRenderer] = None,
        clock: Callable[[], datetime] = _now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.output = Path(output)
        self.size = (int(size[0]), int(size[1]))
        self.context = context
        self._svc = service or ClockService()
        self._renderer = renderer or FrameRenderer()
        self._clock = clock
        self._sleep = sleep

    def render_entry(self, entry: TimelineEntry) -> Path:
        frame = self._svc.render(entry.config, entry.instant, self.context)
        image = self._renderer.render(frame, self.size)
        save_png_atomic(image, self.output)
        LOGGER.debug("Rendered %s at %s", frame.time_text, entry.instant.isoformat())
        return self.output

    def run_timeline(self, timeline: Timeline) -> int:
        """Shows every entry at (or after) its instant; returns the count rendered."""
        rendered = 0
        for entry in timeline.entries:
            delay = (entry.instant - self._clock()).total_seconds()
            if delay > 0:
                self._sleep(delay)
            self.render_entry(entry)
            rendered += 1
        return rendered

    def run(self, max_timelines: Optional[int] = None) -> int:
        """Requests timelines until *max_timelines* (forever when None)."""
        count = 0
        while max_timelines is None or count < max_timelines:
            timeline = self.provider.timeline(self._clock())
            LOGGER.info("Timeline with %d entries, policy=%s",
                        len(timeline.entries), timeline.policy.value)
            self.run_timeline(timeline)
            count += 1
            if timeline.policy is not ReloadPolicy.AT_END:
                break
        return count

    def snapshot(self) -> Path:
        return self.render_entry(self.provider.snapshot(self._clock()))


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    widget = get_config_service().widget
    parser = argparse.ArgumentParser(description="Premium clock widget renderer")
    parser.add_argument("--once", action="store_true", help="Render a single snapshot and exit")
    parser.add_argument("--output", type=Path, default=Path(widget.output),
                        help="PNG file the frames are written to")
    parser.add_argument("--context", choices=[c.value for c in RenderContext],
                        default=RenderContext.WIDGET.value)
    parser.add_argument("--width", type=int, default=widget.width)
    parser.add_argument("--height", type=int, default=widget.height)
    parser.add_argument("--entries", type=int, default=widget.timeline_entries,
                        help="Entries per timeline request")
    parser.add_argument("--timelines", type=int, default=None,
                        help="Stop after this many timelines (default: run forever)")
    parser.add_argument("--log-level", default=None, help="Overrides [Logging] level")
    return parser.parse_args(argv)


def _open_repository() -> ClockConfigurationRepository:
    try:
        return open_shared_store()
    except ConfigurationStoreError as exc:
        # Unavailable store: render the defaults instead of failing the widget
        LOGGER.error("Shared store unavailable (%s); rendering defaults", exc)
        return ClockConfigurationRepository(InMemoryKeyValueStore())


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level or get_config_service().logging.level)

    provider = TimelineProvider(_open_repository(), entry_count=args.entries)
    host = WidgetHost(provider, args.output, (args.width, args.height),
                      context=RenderContext(args.context))
    if args.once:
        LOGGER.info("Snapshot written to %s", host.snapshot())
        return 0
    try:
        host.run(args.timelines)
    except KeyboardInterrupt:
        LOGGER.info("Stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
