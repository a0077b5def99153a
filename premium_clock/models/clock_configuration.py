"""
Data model for the premium clock configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .clock_enums import (
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

# Schema revisions. Fields added after the first release carry since=2 and
# must decode from records that lack them.
ORIGINAL_SCHEMA = 1
PROGRESS_BAR_SCHEMA = 2
CURRENT_SCHEMA = PROGRESS_BAR_SCHEMA


def _wire(key: str, since: int = ORIGINAL_SCHEMA) -> dict:
    return {"key": key, "since": since}


@dataclass(frozen=True)
class ClockConfiguration:
    """
    Every user-configurable option of the premium clock widget.

    The value is immutable: the editor replaces it as a whole
    (``dataclasses.replace``) and the widget process only ever reads it.

    Attributes:
        use_24_hour_format (bool): "HH:mm" instead of "h:mm".
        show_seconds (bool): Render the seconds line; also selects the
            one-second refresh cadence.
        show_date (bool): Render the date line (see ``date_format``).
        date_format (DateDisplayFormat): ``NONE`` hides the date regardless
            of ``show_date``.
        background_style (BackgroundStyle): solid, gradient or blur.
        background_color (str): Hex color for solid/blur, and the substitute
            for an empty gradient.
        gradient_colors (tuple[str, ...]): Hex colors, used in gradient mode.
        text_color (str): Hex color of time and date.
        accent_color (str): Hex color of seconds, glow and solid bars.
        time_font, time_font_size, time_font_weight, date_font: Typography.
        layout (ClockLayout): Structural arrangement.
        alignment, spacing: Ignored by the Apple Timer layout.
        shadow_enabled, glow_enabled (bool): Text effects.
        animation_style (AnimationStyle): Cosmetic only.
        timezone (str): IANA identifier; "" means the system zone.
        show_timezone (bool): Show the zone abbreviation (stacked layout).
        show_progress_bar, progress_bar_height, progress_bar_position,
        progress_bar_style: Standalone day-progress bar (schema 2).
    """
    use_24_hour_format: bool = field(default=False, metadata=_wire("use24HourFormat"))
    show_seconds: bool = field(default=True, metadata=_wire("showSeconds"))
    show_date: bool = field(default=True, metadata=_wire("showDate"))
    date_format: DateDisplayFormat = field(
        default=DateDisplayFormat.MONTH_DAY_YEAR, metadata=_wire("dateFormat"))
    background_style: BackgroundStyle = field(
        default=BackgroundStyle.SOLID, metadata=_wire("backgroundStyle"))
    background_color: str = field(default="#000000", metadata=_wire("backgroundColor"))
    gradient_colors: Tuple[str, ...] = field(
        default=("#000000", "#1a1a1a"), metadata=_wire("gradientColors"))
    text_color: str = field(default="#FFFFFF", metadata=_wire("textColor"))
    accent_color: str = field(default="#007AFF", metadata=_wire("accentColor"))
    time_font: TimeFontStyle = field(default=TimeFontStyle.ROUNDED, metadata=_wire("timeFont"))
    time_font_size: FontSizeOption = field(
        default=FontSizeOption.LARGE, metadata=_wire("timeFontSize"))
    time_font_weight: FontWeightOption = field(
        default=FontWeightOption.MEDIUM, metadata=_wire("timeFontWeight"))
    date_font: DateFontStyle = field(default=DateFontStyle.SYSTEM, metadata=_wire("dateFont"))
    layout: ClockLayout = field(default=ClockLayout.APPLE_TIMER, metadata=_wire("layout"))
    alignment: TextAlignmentOption = field(
        default=TextAlignmentOption.CENTER, metadata=_wire("alignment"))
    spacing: SpacingOption = field(default=SpacingOption.NORMAL, metadata=_wire("spacing"))
    shadow_enabled: bool = field(default=True, metadata=_wire("shadowEnabled"))
    glow_enabled: bool = field(default=False, metadata=_wire("glowEnabled"))
    animation_style: AnimationStyle = field(
        default=AnimationStyle.NONE, metadata=_wire("animationStyle"))
    timezone: str = field(default="", metadata=_wire("timezone"))
    show_timezone: bool = field(default=False, metadata=_wire("showTimezone"))

    # --- schema 2 ---
    show_progress_bar: bool = field(
        default=False, metadata=_wire("showProgressBar", PROGRESS_BAR_SCHEMA))
    progress_bar_height: ProgressBarHeight = field(
        default=ProgressBarHeight.MEDIUM, metadata=_wire("progressBarHeight", PROGRESS_BAR_SCHEMA))
    progress_bar_position: ProgressBarPosition = field(
        default=ProgressBarPosition.BOTTOM,
        metadata=_wire("progressBarPosition", PROGRESS_BAR_SCHEMA))
    progress_bar_style: ProgressBarStyle = field(
        default=ProgressBarStyle.DAY_PROGRESSION,
        metadata=_wire("progressBarStyle", PROGRESS_BAR_SCHEMA))

    def __post_init__(self) -> None:
        # Lists passed in by callers become tuples so the value stays hashable.
        if not isinstance(self.gradient_colors, tuple):
            object.__setattr__(self, "gradient_colors", tuple(self.gradient_colors))

    @property
    def uses_apple_timer(self) -> bool:
        return self.layout is ClockLayout.APPLE_TIMER

    @property
    def refresh_interval_seconds(self) -> int:
        """Suggested widget refresh cadence."""
        return 1 if self.show_seconds else 60


DEFAULT = ClockConfiguration()
