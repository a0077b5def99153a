"""
ClockPreviewWidget (Tkinter)
----------------------------
Live preview of the premium clock as the widget process would draw it.

- Renders through the shared ClockService + FrameRenderer, so the preview and
  the widget output agree pixel for pixel for the same instant.
- Ticks with Tk's ``after``; only the latest scheduled tick is kept.
- ``set_configuration`` shows unsaved editor state; ``reload_settings``
  re-reads the shared store.
"""

from __future__ import annotations

import logging
import tkinter as tk
from datetime import datetime
from tkinter import ttk
from typing import Optional

from PIL import ImageTk

from ..logic.clock_configuration_repository import ClockConfigurationRepository
from ..logic.clock_service import ClockService
from ..logic.frame_renderer import FrameRenderer
from ..models.clock_configuration import ClockConfiguration
from ..models.clock_enums import RenderContext

logger = logging.getLogger(__name__)


class ClockPreviewWidget(ttk.Frame):
    """
    Mount this into any container. The rendered frame is shown in a label and
    refreshed every ``tick_ms`` milliseconds.
    """

    def __init__(
        self,
        parent: tk.Misc,
        repository: ClockConfigurationRepository,
        *,
        size: tuple = (360, 120),
        tick_ms: int = 1000,
        context: RenderContext = RenderContext.PREVIEW,
    ) -> None:
        super().__init__(parent)
        self._repo = repository
        self._svc = ClockService()
        self._renderer = FrameRenderer()
        self._size = (int(size[0]), int(size[1]))
        self._tick_ms = max(50, int(tick_ms))
        self._context = context

        self._config: ClockConfiguration = self._repo.load()
        self._photo: Optional[ImageTk.PhotoImage] = None
        self._after_id: Optional[str] = None

        self._build_ui()
        self._update_frame()
        self._schedule_tick()

    # --- Public API ---------------------------------------------------------

    @property
    def configuration(self) -> ClockConfiguration:
        return self._config

    def set_configuration(self, config: ClockConfiguration) -> None:
        """Shows *config* immediately (e.g. unsaved editor state)."""
        self._config = config
        self._update_frame()
        self._reschedule()

    def reload_settings(self) -> None:
        """Re-reads the shared store and updates the view immediately."""
        self.set_configuration(self._repo.load())

    def render_now(self, instant: Optional[datetime] = None):
        """Renders the current configuration at *instant* (default: now)."""
        frame = self._svc.render(self._config, instant or datetime.now().astimezone(), self._context)
        return self._renderer.render(frame, self._size)

    # --- UI -----------------------------------------------------------------

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.image_label = ttk.Label(self, anchor="center")
        self.image_label.grid(row=0, column=0, sticky="ew", padx=12, pady=12)
        self.image_label.bind("<Double-Button-1>", lambda _e: self.reload_settings())

    # --- Tick loop ----------------------------------------------------------

    def _schedule_tick(self) -> None:
        self._after_id = self.after(self._tick_ms, self._on_tick)

    def _reschedule(self) -> None:
        if self._after_id is not None:
            try:
                self.after_cancel(self._after_id)
            except tk.TclError:
                pass
            self._after_id = None
        self._schedule_tick()

    def _on_tick(self) -> None:
        self._after_id = None
        self._update_frame()
        self._schedule_tick()

    def _update_frame(self) -> None:
        image = self.render_now()
        # keep a reference or Tk drops the image
        self._photo = ImageTk.PhotoImage(image)
        self.image_label.configure(image=self._photo)

    def destroy(self) -> None:
        if self._after_id is not None:
            try:
                self.after_cancel(self._after_id)
            except tk.TclError:
                pass
            self._after_id = None
        super().destroy()
