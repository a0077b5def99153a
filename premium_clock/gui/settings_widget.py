"""
ClockSettingsWidget (Tkinter)
-----------------------------
Configuration editor for the premium clock with validation, live preview
and atomic persistence through the shared store.

UX:
- Options grouped by topic (time, date, appearance, layout, effects,
  progress bar); every change is pushed to the live preview via
  ``on_changed`` without being persisted.
- Save writes the record; the widget process picks it up on its next
  timeline request. ``on_saved`` lets the host refresh other views.
"""

from __future__ import annotations

import dataclasses
import logging
import tkinter as tk
from enum import Enum
from tkinter import messagebox, ttk
from typing import Callable, Dict, List, Optional, Tuple, Type

from core.helpers.date_time_helper import available_zone_names, is_valid_zone

from ..exceptions.errors import ConfigurationStoreError
from ..logic.clock_configuration_repository import ClockConfigurationRepository
from ..models.clock_configuration import DEFAULT, ClockConfiguration
from ..models.clock_enums import (
    AnimationStyle,
    BackgroundStyle,
    ClockLayout,
    DateDisplayFormat,
    DateFontStyle,
    FontSizeOption,
    FontWeightOption,
    ProgressBarHeight,
    ProgressBarPosition,
    ProgressBarStyle,
    SpacingOption,
    TextAlignmentOption,
    TimeFontStyle,
)
from ..models.color import WidgetColor, is_hex_color, normalize_hex

logger = logging.getLogger(__name__)

LOCAL_ZONE_LABEL = "System (local)"

# (group title, [(field name, label, enum type or bool/str marker)])
_GROUPS: List[Tuple[str, List[Tuple[str, str, object]]]] = [
    ("Time", [
        ("use_24_hour_format", "Use 24-hour clock", bool),
        ("show_seconds", "Show seconds", bool),
        ("time_font", "Font", TimeFontStyle),
        ("time_font_size", "Size", FontSizeOption),
        ("time_font_weight", "Weight", FontWeightOption),
    ]),
    ("Date", [
        ("show_date", "Show date line", bool),
        ("date_format", "Format", DateDisplayFormat),
        ("date_font", "Font", DateFontStyle),
    ]),
    ("Appearance", [
        ("background_style", "Background", BackgroundStyle),
        ("background_color", "Background color", "color"),
        ("gradient_colors", "Gradient colors", "gradient"),
        ("text_color", "Text color", "color"),
        ("accent_color", "Accent color", "color"),
    ]),
    ("Layout", [
        ("layout", "Layout", ClockLayout),
        ("alignment", "Alignment", TextAlignmentOption),
        ("spacing", "Spacing", SpacingOption),
        ("timezone", "Timezone", "timezone"),
        ("show_timezone", "Show timezone", bool),
    ]),
    ("Effects", [
        ("shadow_enabled", "Text shadow", bool),
        ("glow_enabled", "Glow", bool),
        ("animation_style", "Animation", AnimationStyle),
    ]),
    ("Progress bar", [
        ("show_progress_bar", "Show day progress bar", bool),
        ("progress_bar_style", "Style", ProgressBarStyle),
        ("progress_bar_height", "Height", ProgressBarHeight),
        ("progress_bar_position", "Position", ProgressBarPosition),
    ]),
]


def option_label(member: Enum) -> str:
    """Human label of an enum member (``display_name`` where defined)."""
    label = getattr(member, "display_name", None)
    if label:
        return label
    value = str(member.value)
    return value[:1].upper() + value[1:]


def _display_hex(value: str) -> str:
    """Stored colors in the editor's canonical #RRGGBB form; unparsable values unchanged."""
    if is_hex_color(value):
        return "#" + normalize_hex(value).upper()
    return value


class ClockSettingsWidget(ttk.Frame):
    """
    Settings editor for the premium clock.

    Optional callbacks:
        on_changed(config): called with the edited (unsaved) configuration.
        on_saved(): called after a successful save.
    """

    def __init__(
        self,
        parent: tk.Misc,
        repository: ClockConfigurationRepository,
        on_changed: Optional[Callable[[ClockConfiguration], None]] = None,
        on_saved: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(parent)
        self._repo = repository
        self._on_changed = on_changed
        self._on_saved = on_saved

        self._config: ClockConfiguration = self._repo.load()
        self._bool_vars: Dict[str, tk.BooleanVar] = {}
        self._enum_ctrls: Dict[str, Tuple[ttk.Combobox, Type[Enum]]] = {}
        self._text_ctrls: Dict[str, ttk.Entry] = {}

        self._build_ui()
        self._populate_from_model()

    # --- UI -----------------------------------------------------------------

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.columnconfigure(1, weight=1)

        for index, (title, rows) in enumerate(_GROUPS):
            box = ttk.LabelFrame(self, text=title)
            box.grid(row=index // 2, column=index % 2, sticky="nsew", padx=8, pady=6)
            box.columnconfigure(1, weight=1)
            for r, (name, label, kind) in enumerate(rows):
                self._build_row(box, r, name, label, kind)

        # Buttons
        last = (len(_GROUPS) + 1) // 2
        ttk.Separator(self).grid(row=last, column=0, columnspan=2, sticky="ew", padx=8, pady=8)
        btns = ttk.Frame(self)
        btns.grid(row=last + 1, column=0, columnspan=2, sticky="e", padx=8, pady=(0, 12))

        self.save_btn = ttk.Button(btns, text="Save", command=self._on_save)
        self.reset_btn = ttk.Button(btns, text="Reset to defaults", command=self._on_reset)
        self.save_btn.grid(row=0, column=0, padx=(0, 6))
        self.reset_btn.grid(row=0, column=1)

    def _build_row(self, box: ttk.LabelFrame, row: int, name: str, label: str, kind: object) -> None:
        if kind is bool:
            var = tk.BooleanVar(value=False)
            ttk.Checkbutton(box, text=label, variable=var, command=self._update_preview).grid(
                row=row, column=0, columnspan=2, sticky="w", padx=10, pady=3
            )
            self._bool_vars[name] = var
            return

        ttk.Label(box, text=label).grid(row=row, column=0, sticky="w", padx=10, pady=3)
        if isinstance(kind, type) and issubclass(kind, Enum):
            ctrl = ttk.Combobox(box, values=[option_label(m) for m in kind], state="readonly")
            ctrl.bind("<<ComboboxSelected>>", lambda _e: self._update_preview())
            self._enum_ctrls[name] = (ctrl, kind)
        elif kind == "timezone":
            ctrl = ttk.Combobox(box, values=[LOCAL_ZONE_LABEL] + available_zone_names(), state="normal")
            ctrl.bind("<<ComboboxSelected>>", lambda _e: self._update_preview())
            ctrl.bind("<FocusOut>", lambda _e: self._update_preview())
            self._text_ctrls[name] = ctrl
        else:
            ctrl = ttk.Entry(box)
            ctrl.bind("<KeyRelease>", lambda _e: self._update_preview())
            self._text_ctrls[name] = ctrl
            if kind == "color":
                self._build_preset(box, row, ctrl)
        ctrl.grid(row=row, column=1, sticky="ew", padx=10, pady=3)

    def _build_preset(self, box: ttk.LabelFrame, row: int, entry: ttk.Entry) -> None:
        """Palette picker that writes the chosen color into *entry*."""
        preset = ttk.Combobox(box, values=[option_label(c) for c in WidgetColor],
                              state="readonly", width=8)

        def _apply(_e: object) -> None:
            color = next(c for c in WidgetColor if option_label(c) == preset.get())
            self._set_text(entry, color.hex)
            self._update_preview()

        preset.bind("<<ComboboxSelected>>", _apply)
        preset.grid(row=row, column=2, sticky="w", padx=(0, 10), pady=3)

    # --- Data binding -------------------------------------------------------

    def _populate_from_model(self) -> None:
        c = self._config
        for name, var in self._bool_vars.items():
            var.set(bool(getattr(c, name)))
        for name, (ctrl, _enum) in self._enum_ctrls.items():
            ctrl.set(option_label(getattr(c, name)))
        for name, ctrl in self._text_ctrls.items():
            if name == "gradient_colors":
                value = ", ".join(_display_hex(s) for s in c.gradient_colors)
            elif name == "timezone":
                value = c.timezone or LOCAL_ZONE_LABEL
            else:
                value = _display_hex(getattr(c, name))
            self._set_text(ctrl, value)

    def _collect_to_model(self, show_errors: bool = True) -> Optional[ClockConfiguration]:
        """
        Builds a configuration from the form, or returns None (after an error
        dialog when *show_errors*) if any input is invalid.
        """
        values: Dict[str, object] = {name: bool(var.get()) for name, var in self._bool_vars.items()}

        for name, (ctrl, enum_cls) in self._enum_ctrls.items():
            label = ctrl.get()
            member = next((m for m in enum_cls if option_label(m) == label), None)
            values[name] = member if member is not None else getattr(self._config, name)

        for name in ("background_color", "text_color", "accent_color"):
            raw = self._get_text(self._text_ctrls[name]).strip()
            if not is_hex_color(raw, strict=True):
                return self._invalid(show_errors, "Invalid color",
                                     f"'{raw}' is not a hex color. Use #RGB, #RRGGBB or #AARRGGBB.")
            values[name] = "#" + normalize_hex(raw, strict=True).upper()

        stops = [s.strip() for s in self._get_text(self._text_ctrls["gradient_colors"]).split(",") if s.strip()]
        bad = [s for s in stops if not is_hex_color(s, strict=True)]
        if bad:
            return self._invalid(show_errors, "Invalid gradient",
                                 f"Not a hex color: {', '.join(bad)}")
        values["gradient_colors"] = tuple("#" + normalize_hex(s, strict=True).upper() for s in stops)

        tz = self._get_text(self._text_ctrls["timezone"]).strip()
        if tz == LOCAL_ZONE_LABEL:
            tz = ""
        if not is_valid_zone(tz):
            return self._invalid(show_errors, "Invalid timezone",
                                 "The timezone you entered is not valid. Please provide a valid "
                                 "IANA timezone, e.g., Europe/Berlin, or pick the system zone.")
        values["timezone"] = tz

        return dataclasses.replace(self._config, **values)

    @staticmethod
    def _invalid(show_errors: bool, title: str, message: str) -> None:
        if show_errors:
            messagebox.showerror(title=title, message=message)
        return None

    # --- Actions ------------------------------------------------------------

    def _on_save(self) -> None:
        model = self._collect_to_model()
        if model is None:
            return

        try:
            self._repo.save(model)
        except ConfigurationStoreError as exc:
            logger.error("Saving clock configuration failed: %s", exc)
            messagebox.showerror(title="Save failed",
                                 message=f"The configuration could not be saved:\n{exc}")
            return

        self._config = self._repo.load()
        self._update_preview()

        if callable(self._on_saved):
            self._on_saved()

        messagebox.showinfo(title="Settings saved",
                            message="Your clock settings have been saved.")

    def _on_reset(self) -> None:
        self._config = DEFAULT
        self._populate_from_model()
        self._update_preview()

    # --- Preview ------------------------------------------------------------

    def _update_preview(self) -> None:
        tmp = self._collect_to_model(show_errors=False)
        if tmp is None or not callable(self._on_changed):
            return
        self._on_changed(tmp)

    # --- Helpers ------------------------------------------------------------

    @staticmethod
    def _get_text(ctrl: tk.Widget) -> str:
        if isinstance(ctrl, (ttk.Entry, tk.Entry)):
            return ctrl.get()
        return ""

    @staticmethod
    def _set_text(ctrl: tk.Widget, value: str) -> None:
        if isinstance(ctrl, ttk.Combobox):
            ctrl.set(value)
        elif isinstance(ctrl, (ttk.Entry, tk.Entry)):
            ctrl.delete(0, "end")
            ctrl.insert(0, value)
