"""
ClockService – derives concrete render values from a configuration.
Separated from the views so the host preview and the widget process share
one implementation.

Every method is a pure function of its arguments and never raises: invalid
colors resolve to fixed fallbacks, empty gradients to the background color.
"""

from __future__ import annotations

from datetime import datetime
from typing import Tuple

from core.helpers.date_time_helper import to_wall_clock, zone_abbreviation

from ..models.clock_configuration import ClockConfiguration
from ..models.clock_enums import (
    BackgroundStyle,
    ClockLayout,
    DateDisplayFormat,
    DateFontStyle,
    FontSizeOption,
    FontWeightOption,
    ProgressBarStyle,
    RenderContext,
    TextAlignmentOption,
    TimeFontStyle,
)
from ..models.color import BLACK, CLEAR, WHITE, Color, WidgetColor
from ..models.render_frame import (
    Arrangement,
    FontDescriptor,
    FontDesign,
    FontSet,
    LayoutComposition,
    RenderFrame,
    ResolvedBackground,
    ResolvedColors,
)

SECONDS_PER_DAY = 24 * 60 * 60

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_TIME_DESIGNS = {
    TimeFontStyle.SYSTEM: FontDesign.DEFAULT,
    TimeFontStyle.ROUNDED: FontDesign.ROUNDED,
    TimeFontStyle.MONOSPACED: FontDesign.MONOSPACED,
    TimeFontStyle.SERIF: FontDesign.SERIF,
}
_DATE_DESIGNS = {
    DateFontStyle.SYSTEM: FontDesign.DEFAULT,
    DateFontStyle.ROUNDED: FontDesign.ROUNDED,
    DateFontStyle.SERIF: FontDesign.SERIF,
}

# Day-progression gradients by quartile of the day
_QUARTER_GRADIENTS = (
    (WidgetColor.PURPLE, WidgetColor.BLUE),
    (WidgetColor.BLUE, WidgetColor.CYAN, WidgetColor.YELLOW),
    (WidgetColor.YELLOW, WidgetColor.ORANGE),
    (WidgetColor.ORANGE, WidgetColor.RED, WidgetColor.PURPLE),
)

# Apple Timer composition per context: (time, seconds, date) point sizes
_APPLE_TIMER_SIZES = {
    RenderContext.WIDGET: (72.0, 28.0, 18.0),
    RenderContext.PREVIEW: (32.0, 12.0, 8.0),
}
# (block spacing, time/seconds gap, horizontal padding, indicator height)
_APPLE_TIMER_METRICS = {
    RenderContext.WIDGET: (8.0, 4.0, 20.0, 4.0),
    RenderContext.PREVIEW: (6.0, 3.0, 16.0, 2.0),
}
# The preview is drawn at 70% with readable minimums
_PREVIEW_SCALE = 0.7
_PREVIEW_MIN_SIZES = (16.0, 10.0, 10.0)   # time, date, seconds

BLUR_RADIUS = 5.0
FALLBACK_ACCENT = WidgetColor.BLUE.color


class ClockService:
    """Formats time, date and progress and resolves fonts, colors and layout."""

    # --- Text -----------------------------------------------------------

    @staticmethod
    def wall_clock(config: ClockConfiguration, instant: datetime) -> datetime:
        """The instant as wall-clock time in the configured zone."""
        return to_wall_clock(instant, config.timezone)

    def format_time(self, config: ClockConfiguration, instant: datetime) -> str:
        """Returns "14:05" with the 24-hour format, "2:05" otherwise."""
        t = self.wall_clock(config, instant)
        if config.use_24_hour_format:
            return f"{t.hour:02d}:{t.minute:02d}"
        return f"{t.hour % 12 or 12}:{t.minute:02d}"

    def format_seconds(self, config: ClockConfiguration, instant: datetime) -> str:
        return f"{self.wall_clock(config, instant).second:02d}"

    def format_date(self, config: ClockConfiguration, instant: datetime) -> str:
        fmt = config.date_format
        if fmt is DateDisplayFormat.NONE or not config.show_date:
            return ""
        d = self.wall_clock(config, instant)
        month = _MONTHS[d.month - 1]
        weekday = _WEEKDAYS[d.weekday()]
        if fmt is DateDisplayFormat.MONTH_DAY_YEAR:
            return f"{month} {d.day}, {d.year}"
        if fmt is DateDisplayFormat.DAY_MONTH_YEAR:
            return f"{d.day} {month} {d.year}"
        if fmt is DateDisplayFormat.SHORT_DATE:
            return f"{d.month}/{d.day}/{d.year % 100:02d}"
        if fmt is DateDisplayFormat.DAY_OF_WEEK:
            return weekday
        return weekday[:3]

    def format_timezone(self, config: ClockConfiguration, instant: datetime) -> str:
        return zone_abbreviation(self.wall_clock(config, instant))

    # --- Progress -------------------------------------------------------

    @staticmethod
    def day_progress(instant: datetime) -> float:
        """Fraction of the day elapsed at the instant's wall-clock time, in [0, 1)."""
        elapsed = instant.hour * 3600 + instant.minute * 60 + instant.second
        return elapsed / SECONDS_PER_DAY

    @staticmethod
    def resolve_progress_gradient(config: ClockConfiguration, progress: float) -> Tuple[Color, ...]:
        style = config.progress_bar_style
        if style is ProgressBarStyle.DAY_PROGRESSION:
            if progress < 0.25:
                stops = _QUARTER_GRADIENTS[0]
            elif progress < 0.5:
                stops = _QUARTER_GRADIENTS[1]
            elif progress < 0.75:
                stops = _QUARTER_GRADIENTS[2]
            else:
                stops = _QUARTER_GRADIENTS[3]
            return tuple(c.color for c in stops)
        accent = _parse(config.accent_color, FALLBACK_ACCENT)
        if style is ProgressBarStyle.SOLID:
            return (accent,)
        return (accent, accent.with_opacity(0.6))

    # --- Typography -----------------------------------------------------

    @staticmethod
    def resolve_font_size(option: FontSizeOption) -> Tuple[float, float, float]:
        """(time, date, seconds) point sizes."""
        return option.time_size, option.date_size, option.seconds_size

    def resolve_fonts(self, config: ClockConfiguration,
                      context: RenderContext = RenderContext.WIDGET) -> FontSet:
        if config.uses_apple_timer:
            time_pt, seconds_pt, date_pt = _APPLE_TIMER_SIZES[context]
            return FontSet(
                time=FontDescriptor(time_pt, config.time_font_weight, FontDesign.ROUNDED, True),
                date=FontDescriptor(date_pt, FontWeightOption.MEDIUM),
                seconds=FontDescriptor(seconds_pt, FontWeightOption.MEDIUM, FontDesign.ROUNDED, True),
            )

        time_pt, date_pt, seconds_pt = self.resolve_font_size(config.time_font_size)
        if context is RenderContext.PREVIEW:
            min_time, min_date, min_seconds = _PREVIEW_MIN_SIZES
            time_pt = max(time_pt * _PREVIEW_SCALE, min_time)
            date_pt = max(date_pt * _PREVIEW_SCALE, min_date)
            seconds_pt = max(seconds_pt * _PREVIEW_SCALE, min_seconds)
        return FontSet(
            time=FontDescriptor(time_pt, config.time_font_weight, _TIME_DESIGNS[config.time_font]),
            date=FontDescriptor(date_pt, FontWeightOption.MEDIUM, _DATE_DESIGNS[config.date_font]),
            seconds=FontDescriptor(seconds_pt, FontWeightOption.REGULAR, FontDesign.ROUNDED),
        )

    # --- Colors ---------------------------------------------------------

    @staticmethod
    def resolve_background(config: ClockConfiguration) -> ResolvedBackground:
        base = _parse(config.background_color, BLACK)
        style = config.background_style
        if style is BackgroundStyle.GRADIENT:
            parsed = (_parse(h, None) for h in config.gradient_colors)
            stops = tuple(c for c in parsed if c is not None)
            return ResolvedBackground(style, stops or (base, base))
        if style is BackgroundStyle.BLUR:
            return ResolvedBackground(style, (base,), BLUR_RADIUS)
        return ResolvedBackground(style, (base,))

    @staticmethod
    def resolve_colors(config: ClockConfiguration) -> ResolvedColors:
        text = _parse(config.text_color, WHITE)
        accent = _parse(config.accent_color, FALLBACK_ACCENT)
        return ResolvedColors(
            text=text,
            accent=accent,
            seconds=accent.with_opacity(0.8),
            date=text.with_opacity(0.7 if config.uses_apple_timer else 0.8),
            timezone=accent.with_opacity(0.6),
            shadow=BLACK.with_opacity(0.3) if config.shadow_enabled else CLEAR,
            glow=accent if config.glow_enabled else None,
            progress_track=text.with_opacity(0.2),
            indicator_fill=text.with_opacity(0.6),
        )

    # --- Layout ---------------------------------------------------------

    @staticmethod
    def select_layout_composition(config: ClockConfiguration,
                                  context: RenderContext = RenderContext.WIDGET) -> LayoutComposition:
        show_date = config.show_date and config.date_format is not DateDisplayFormat.NONE
        scale = config.animation_style.scale_factor

        if config.uses_apple_timer:
            spacing, inner, h_padding, indicator = _APPLE_TIMER_METRICS[context]
            return LayoutComposition(
                arrangement=Arrangement.FULL_WIDTH,
                alignment=TextAlignmentOption.CENTER,
                spacing=spacing,
                inner_spacing=inner,
                horizontal_padding=h_padding,
                vertical_padding=12.0,
                show_seconds=config.show_seconds,
                show_date=show_date,
                show_timezone=False,
                progress_bar=None,
                progress_bar_height=0.0,
                builtin_indicator=True,
                indicator_height=indicator,
                scale=scale,
            )

        gap = config.spacing.points
        arrangement = {
            ClockLayout.STACKED: Arrangement.STACKED,
            ClockLayout.SIDE_BY_SIDE: Arrangement.SIDE_BY_SIDE,
            ClockLayout.TIME_ONLY: Arrangement.TIME_ONLY,
        }[config.layout]
        return LayoutComposition(
            arrangement=arrangement,
            alignment=config.alignment,
            spacing=gap * 2 if arrangement is Arrangement.SIDE_BY_SIDE else gap,
            inner_spacing=gap / 2,
            horizontal_padding=16.0,
            vertical_padding=12.0,
            show_seconds=config.show_seconds,
            show_date=show_date and arrangement is not Arrangement.TIME_ONLY,
            show_timezone=config.show_timezone and arrangement is Arrangement.STACKED,
            progress_bar=config.progress_bar_position if config.show_progress_bar else None,
            progress_bar_height=config.progress_bar_height.points,
            builtin_indicator=False,
            indicator_height=0.0,
            scale=scale,
        )

    # --- Frame ----------------------------------------------------------

    def render(self, config: ClockConfiguration, instant: datetime,
               context: RenderContext = RenderContext.WIDGET) -> RenderFrame:
        """Derive the complete frame for one tick."""
        local = self.wall_clock(config, instant)
        progress = self.day_progress(local)
        return RenderFrame(
            instant=local,
            context=context,
            time_text=self.format_time(config, local),
            seconds_text=self.format_seconds(config, local),
            date_text=self.format_date(config, local),
            timezone_text=zone_abbreviation(local) if config.show_timezone else "",
            fonts=self.resolve_fonts(config, context),
            colors=self.resolve_colors(config),
            background=self.resolve_background(config),
            day_progress=progress,
            progress_gradient=self.resolve_progress_gradient(config, progress),
            composition=self.select_layout_composition(config, context),
        )


def _parse(value: str, fallback):
    try:
        return Color.from_hex(value)
    except ValueError:
        return fallback
