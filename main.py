import logging
import tkinter as tk
from tkinter import Frame, Label, X

from core.config.config_service import get_config_service
from core.logging.logic.log_setup import setup_logging
from premium_clock import create_feature_view, create_settings_view, get_feature_name
from premium_clock.exceptions.errors import ConfigurationStoreError
from premium_clock.logic.clock_configuration_repository import ClockConfigurationRepository, open_shared_store
from premium_clock.logic.storage_backends import InMemoryKeyValueStore

logger = logging.getLogger("standby_clock")


class MainWindow(tk.Tk):
    """Host application: live preview on top, configuration editor below."""

    def __init__(self, repository: ClockConfigurationRepository):
        super().__init__()
        cfg = get_config_service()

        self.title(f"{cfg.general.app_name} – {get_feature_name()}")
        self.geometry("820x760")
        self.repository = repository

        # Preview area (top)
        self.preview_frame = Frame(self, bg="#1c1c1e")
        self.preview_frame.pack(side="top", fill=X)
        self.preview = create_feature_view(
            self.preview_frame,
            repository,
            size=(cfg.preview.width, cfg.preview.height),
            tick_ms=cfg.preview.tick_ms,
        )
        self.preview.pack(pady=8)

        # Statusleiste (unten)
        self.status_bar = Label(self, text="Ready", anchor="w", bg="#eeeeee")
        self.status_bar.pack(side="bottom", fill=X)

        # Editor (middle)
        self.display_area = Frame(self)
        self.display_area.pack(fill="both", expand=True)
        self.settings = create_settings_view(
            self.display_area,
            repository,
            on_changed=self.preview.set_configuration,
            on_saved=self.on_saved,
        )
        self.settings.pack(fill="both", expand=True)

    def on_saved(self):
        """Refreshes the preview from the store after a save."""
        self.preview.reload_settings()
        self.set_status("Configuration saved")

    def set_status(self, message):
        """Aktualisiert die Statusleiste."""
        self.status_bar.config(text=message)


def main() -> int:
    setup_logging(get_config_service().logging.level)
    try:
        repository = open_shared_store()
    except ConfigurationStoreError as exc:
        logger.error("Shared store unavailable (%s); changes will not persist", exc)
        repository = ClockConfigurationRepository(InMemoryKeyValueStore())
    app = MainWindow(repository)
    app.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
