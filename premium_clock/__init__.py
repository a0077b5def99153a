"""
Premium clock feature package initializer.

Provides factory functions the host window can call to create the live
preview and the settings editor without hard-coding internals. The GUI
modules are imported on demand so the widget process and the tests never
need Tk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .logic.clock_configuration_repository import ClockConfigurationRepository, open_shared_store

if TYPE_CHECKING:
    import tkinter as tk


def get_feature_name() -> str:
    """
    Human readable feature name (used e.g. for navigation labels).

    Returns:
        str: The default feature name.
    """
    return "Premium Clock"


def create_feature_view(parent: tk.Misc, repository: Optional[ClockConfigurationRepository] = None,
                        **kwargs) -> tk.Frame:
    """
    Factory for the live clock preview.

    Args:
        parent (tk.Misc): Tk container to mount the widget onto.
        repository (ClockConfigurationRepository, optional): Shared store;
            opened from the application config when omitted.

    Returns:
        tk.Frame: A ticking preview widget.
    """
    from .gui.clock_widget import ClockPreviewWidget

    return ClockPreviewWidget(parent, repository or open_shared_store(), **kwargs)


def create_settings_view(parent: tk.Misc, repository: Optional[ClockConfigurationRepository] = None,
                         on_changed=None, on_saved=None) -> tk.Frame:
    """
    Factory for the settings view.

    Args:
        parent (tk.Misc): Tk container to mount the widget onto.
        repository (ClockConfigurationRepository, optional): Shared store.
        on_changed (Callable, optional): Receives every edited configuration.
        on_saved (Callable, optional): Called after a successful save.

    Returns:
        tk.Frame: The settings editor.
    """
    from .gui.settings_widget import ClockSettingsWidget

    return ClockSettingsWidget(parent, repository or open_shared_store(),
                               on_changed=on_changed, on_saved=on_saved)
