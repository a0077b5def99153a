"""
premium_clock/tests/test_clock_service.py

Derivation tests: text formatting, day progress, gradients, typography,
colors and layout composition.
"""

from __future__ import annotations

import itertools
import unittest
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from premium_clock.logic.clock_service import BLUR_RADIUS, FALLBACK_ACCENT, ClockService
from premium_clock.models.clock_configuration import DEFAULT
from premium_clock.models.clock_enums import (
    BackgroundStyle,
    ClockLayout,
    DateDisplayFormat,
    FontSizeOption,
    ProgressBarPosition,
    ProgressBarStyle,
    RenderContext,
    SpacingOption,
    TextAlignmentOption,
)
from premium_clock.models.color import BLACK, CLEAR, WHITE, Color, WidgetColor
from premium_clock.models.render_frame import Arrangement, FontDesign

svc = ClockService()

# Naive instants are wall-clock times in the system zone ("" timezone).
AFTERNOON = datetime(2024, 3, 5, 14, 5, 9)
NEW_YEAR = datetime(2024, 1, 1, 0, 7, 0)   # a Monday


class TestTimeText(unittest.TestCase):
    def test_24_hour(self) -> None:
        cfg = replace(DEFAULT, use_24_hour_format=True)
        self.assertEqual(svc.format_time(cfg, AFTERNOON), "14:05")

    def test_12_hour_has_no_leading_zero(self) -> None:
        self.assertEqual(svc.format_time(DEFAULT, AFTERNOON), "2:05")

    def test_12_hour_midnight_is_twelve(self) -> None:
        self.assertEqual(svc.format_time(DEFAULT, NEW_YEAR), "12:07")

    def test_24_hour_midnight_is_zero_padded(self) -> None:
        cfg = replace(DEFAULT, use_24_hour_format=True)
        self.assertEqual(svc.format_time(cfg, NEW_YEAR), "00:07")

    def test_seconds_are_two_digits(self) -> None:
        self.assertEqual(svc.format_seconds(DEFAULT, AFTERNOON), "09")

    def test_configured_zone_is_applied(self) -> None:
        cfg = replace(DEFAULT, use_24_hour_format=True, timezone="Asia/Tokyo")
        instant = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        self.assertEqual(svc.format_time(cfg, instant), "09:00")
        self.assertEqual(svc.format_timezone(cfg, instant), "JST")

    def test_invalid_zone_falls_back_to_local(self) -> None:
        instant = datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)
        bad = replace(DEFAULT, timezone="Mars/Olympus_Mons")
        self.assertEqual(svc.format_time(bad, instant), svc.format_time(DEFAULT, instant))

    def test_zone_directory_falls_back_to_local(self) -> None:
        instant = datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)
        cfg = replace(DEFAULT, timezone="Europe", show_timezone=True, layout=ClockLayout.STACKED)
        self.assertEqual(svc.format_time(cfg, instant), svc.format_time(DEFAULT, instant))
        self.assertEqual(svc.format_date(cfg, instant), svc.format_date(DEFAULT, instant))
        self.assertTrue(svc.render(cfg, instant).time_text)


class TestDateText(unittest.TestCase):
    def test_patterns(self) -> None:
        expected = {
            DateDisplayFormat.MONTH_DAY_YEAR: "Jan 1, 2024",
            DateDisplayFormat.DAY_MONTH_YEAR: "1 Jan 2024",
            DateDisplayFormat.SHORT_DATE: "1/1/24",
            DateDisplayFormat.DAY_OF_WEEK: "Monday",
            DateDisplayFormat.DAY_OF_WEEK_SHORT: "Mon",
        }
        for fmt, text in expected.items():
            with self.subTest(fmt=fmt):
                self.assertEqual(svc.format_date(replace(DEFAULT, date_format=fmt), NEW_YEAR), text)

    def test_none_format_suppresses_date(self) -> None:
        cfg = replace(DEFAULT, date_format=DateDisplayFormat.NONE, show_date=True)
        self.assertEqual(svc.format_date(cfg, NEW_YEAR), "")

    def test_show_date_off_suppresses_date(self) -> None:
        cfg = replace(DEFAULT, show_date=False)
        self.assertEqual(svc.format_date(cfg, NEW_YEAR), "")


class TestDayProgress(unittest.TestCase):
    def test_boundaries(self) -> None:
        self.assertEqual(ClockService.day_progress(datetime(2024, 1, 1, 0, 0, 0)), 0.0)
        self.assertEqual(ClockService.day_progress(datetime(2024, 1, 1, 12, 0, 0)), 0.5)
        self.assertEqual(ClockService.day_progress(datetime(2024, 1, 1, 23, 59, 59)), 86399 / 86400)

    def test_always_below_one(self) -> None:
        self.assertLess(ClockService.day_progress(datetime(2024, 1, 1, 23, 59, 59, 999999)), 1.0)


@pytest.mark.parametrize(
    "progress, stops",
    [
        (0.10, (WidgetColor.PURPLE, WidgetColor.BLUE)),
        (0.25, (WidgetColor.BLUE, WidgetColor.CYAN, WidgetColor.YELLOW)),
        (0.40, (WidgetColor.BLUE, WidgetColor.CYAN, WidgetColor.YELLOW)),
        (0.60, (WidgetColor.YELLOW, WidgetColor.ORANGE)),
        (0.90, (WidgetColor.ORANGE, WidgetColor.RED, WidgetColor.PURPLE)),
    ],
)
def test_day_progression_gradient_by_quartile(progress, stops) -> None:
    assert svc.resolve_progress_gradient(DEFAULT, progress) == tuple(c.color for c in stops)


def test_solid_and_pulsing_gradients_use_accent() -> None:
    accent = Color.from_hex("#FF3B30")
    solid = replace(DEFAULT, progress_bar_style=ProgressBarStyle.SOLID, accent_color="#FF3B30")
    pulsing = replace(solid, progress_bar_style=ProgressBarStyle.PULSING)
    assert svc.resolve_progress_gradient(solid, 0.3) == (accent,)
    assert svc.resolve_progress_gradient(pulsing, 0.3) == (accent, accent.with_opacity(0.6))


def test_invalid_accent_falls_back() -> None:
    cfg = replace(DEFAULT, progress_bar_style=ProgressBarStyle.SOLID, accent_color="nope")
    assert svc.resolve_progress_gradient(cfg, 0.3) == (FALLBACK_ACCENT,)


class TestTypography(unittest.TestCase):
    def test_size_table(self) -> None:
        assert svc.resolve_font_size(FontSizeOption.SMALL) == pytest.approx((24.0, 9.6, 12.0))
        assert svc.resolve_font_size(FontSizeOption.EXTRA_LARGE) == pytest.approx((48.0, 19.2, 24.0))

    def test_widget_fonts_follow_size_option(self) -> None:
        cfg = replace(DEFAULT, layout=ClockLayout.STACKED, time_font_size=FontSizeOption.LARGE)
        fonts = svc.resolve_fonts(cfg, RenderContext.WIDGET)
        assert (fonts.time.size, fonts.date.size, fonts.seconds.size) == pytest.approx((40.0, 16.0, 20.0))
        self.assertEqual(fonts.time.design, FontDesign.ROUNDED)

    def test_preview_fonts_are_scaled_with_minimums(self) -> None:
        cfg = replace(DEFAULT, layout=ClockLayout.STACKED, time_font_size=FontSizeOption.SMALL)
        fonts = svc.resolve_fonts(cfg, RenderContext.PREVIEW)
        self.assertAlmostEqual(fonts.time.size, 16.8)
        self.assertEqual(fonts.date.size, 10.0)
        self.assertEqual(fonts.seconds.size, 10.0)

    def test_apple_timer_sizes_are_fixed_per_context(self) -> None:
        for size in FontSizeOption:
            cfg = replace(DEFAULT, time_font_size=size)
            widget = svc.resolve_fonts(cfg, RenderContext.WIDGET)
            preview = svc.resolve_fonts(cfg, RenderContext.PREVIEW)
            self.assertEqual((widget.time.size, widget.seconds.size, widget.date.size), (72.0, 28.0, 18.0))
            self.assertEqual((preview.time.size, preview.seconds.size, preview.date.size), (32.0, 12.0, 8.0))
            self.assertTrue(widget.time.monospaced_digits)
            self.assertEqual(widget.time.design, FontDesign.ROUNDED)


class TestColors(unittest.TestCase):
    def test_gradient_background(self) -> None:
        cfg = replace(DEFAULT, background_style=BackgroundStyle.GRADIENT,
                      gradient_colors=("#FF0000", "#0000FF"))
        bg = svc.resolve_background(cfg)
        self.assertEqual(bg.colors, (Color(255, 0, 0), Color(0, 0, 255)))

    def test_empty_gradient_uses_background_color(self) -> None:
        cfg = replace(DEFAULT, background_style=BackgroundStyle.GRADIENT,
                      gradient_colors=(), background_color="#123456")
        base = Color.from_hex("#123456")
        self.assertEqual(svc.resolve_background(cfg).colors, (base, base))

    def test_invalid_gradient_stops_are_skipped(self) -> None:
        cfg = replace(DEFAULT, background_style=BackgroundStyle.GRADIENT,
                      gradient_colors=("#FF0000", "zzz"))
        self.assertEqual(svc.resolve_background(cfg).colors, (Color(255, 0, 0),))

    def test_blur_background_has_radius(self) -> None:
        cfg = replace(DEFAULT, background_style=BackgroundStyle.BLUR, background_color="#FFFFFF")
        bg = svc.resolve_background(cfg)
        self.assertEqual(bg.colors, (WHITE,))
        self.assertEqual(bg.blur_radius, BLUR_RADIUS)

    def test_invalid_colors_resolve_to_fallbacks(self) -> None:
        cfg = replace(DEFAULT, text_color="nope", background_color="worse", accent_color="#12")
        colors = svc.resolve_colors(cfg)
        self.assertEqual(colors.text, WHITE)
        self.assertEqual(colors.accent, FALLBACK_ACCENT)
        self.assertEqual(svc.resolve_background(cfg).colors, (BLACK,))

    def test_date_opacity_depends_on_layout(self) -> None:
        apple = svc.resolve_colors(DEFAULT)
        stacked = svc.resolve_colors(replace(DEFAULT, layout=ClockLayout.STACKED))
        self.assertAlmostEqual(apple.date.alpha, 0.7)
        self.assertAlmostEqual(stacked.date.alpha, 0.8)

    def test_effects(self) -> None:
        off = svc.resolve_colors(replace(DEFAULT, shadow_enabled=False, glow_enabled=False))
        on = svc.resolve_colors(replace(DEFAULT, shadow_enabled=True, glow_enabled=True))
        self.assertEqual(off.shadow, CLEAR)
        self.assertIsNone(off.glow)
        self.assertAlmostEqual(on.shadow.alpha, 0.3)
        self.assertEqual(on.glow, Color.from_hex(DEFAULT.accent_color))


class TestComposition(unittest.TestCase):
    def test_apple_timer_ignores_alignment_and_standalone_bar(self) -> None:
        cfg = replace(DEFAULT, alignment=TextAlignmentOption.LEADING, show_progress_bar=True)
        comp = svc.select_layout_composition(cfg, RenderContext.WIDGET)
        self.assertEqual(comp.arrangement, Arrangement.FULL_WIDTH)
        self.assertEqual(comp.alignment, TextAlignmentOption.CENTER)
        self.assertIsNone(comp.progress_bar)
        self.assertTrue(comp.builtin_indicator)
        self.assertEqual(comp.indicator_height, 4.0)
        self.assertEqual(comp.horizontal_padding, 20.0)

    def test_apple_timer_preview_metrics(self) -> None:
        comp = svc.select_layout_composition(DEFAULT, RenderContext.PREVIEW)
        self.assertEqual((comp.spacing, comp.inner_spacing, comp.indicator_height), (6.0, 3.0, 2.0))

    def test_time_only_hides_date(self) -> None:
        comp = svc.select_layout_composition(replace(DEFAULT, layout=ClockLayout.TIME_ONLY))
        self.assertEqual(comp.arrangement, Arrangement.TIME_ONLY)
        self.assertFalse(comp.show_date)

    def test_side_by_side_doubles_spacing(self) -> None:
        cfg = replace(DEFAULT, layout=ClockLayout.SIDE_BY_SIDE, spacing=SpacingOption.NORMAL)
        comp = svc.select_layout_composition(cfg)
        self.assertEqual(comp.spacing, 12.0)
        self.assertEqual(comp.inner_spacing, 3.0)

    def test_standalone_progress_bar(self) -> None:
        cfg = replace(DEFAULT, layout=ClockLayout.STACKED, show_progress_bar=True,
                      progress_bar_position=ProgressBarPosition.MIDDLE)
        comp = svc.select_layout_composition(cfg)
        self.assertEqual(comp.progress_bar, ProgressBarPosition.MIDDLE)
        self.assertEqual(comp.progress_bar_height, 4.0)
        self.assertFalse(comp.builtin_indicator)

    def test_timezone_only_in_stacked_layout(self) -> None:
        stacked = svc.select_layout_composition(
            replace(DEFAULT, layout=ClockLayout.STACKED, show_timezone=True))
        side = svc.select_layout_composition(
            replace(DEFAULT, layout=ClockLayout.SIDE_BY_SIDE, show_timezone=True))
        self.assertTrue(stacked.show_timezone)
        self.assertFalse(side.show_timezone)


class TestRender(unittest.TestCase):
    def test_frame_contents(self) -> None:
        cfg = replace(DEFAULT, use_24_hour_format=True, date_format=DateDisplayFormat.DAY_OF_WEEK)
        frame = svc.render(cfg, NEW_YEAR)
        self.assertEqual(frame.time_text, "00:07")
        self.assertEqual(frame.seconds_text, "00")
        self.assertEqual(frame.date_text, "Monday")
        self.assertEqual(frame.timezone_text, "")
        self.assertEqual(frame.context, RenderContext.WIDGET)
        self.assertAlmostEqual(frame.day_progress, 7 * 60 / 86400)

    def test_same_inputs_same_frame(self) -> None:
        self.assertEqual(svc.render(DEFAULT, AFTERNOON), svc.render(DEFAULT, AFTERNOON))


def test_every_enum_combination_renders() -> None:
    combos = itertools.product(
        ClockLayout, BackgroundStyle, DateDisplayFormat, ProgressBarStyle, RenderContext, (True, False)
    )
    for layout, background, date_format, bar_style, context, flag in combos:
        cfg = replace(
            DEFAULT,
            layout=layout,
            background_style=background,
            date_format=date_format,
            progress_bar_style=bar_style,
            show_progress_bar=flag,
            show_seconds=flag,
            show_timezone=not flag,
        )
        frame = svc.render(cfg, AFTERNOON, context)
        assert frame.time_text
        assert frame.background.colors
        assert frame.progress_gradient


@pytest.mark.parametrize("zone", ["Europe", "America", "/", "a\x00b", "   ", "../../etc/passwd"])
@pytest.mark.parametrize(
    "colors",
    [
        ("##abc--", "", "#12"),
        ("red", "#GGGGGG", "#1234567"),
        ("#000", "#FFFFFFFF", "x" * 500),
    ],
)
def test_odd_free_form_values_still_render(zone: str, colors) -> None:
    text, background, accent = colors
    for layout, context in itertools.product(ClockLayout, RenderContext):
        cfg = replace(
            DEFAULT,
            layout=layout,
            timezone=zone,
            show_timezone=True,
            text_color=text,
            background_color=background,
            accent_color=accent,
            gradient_colors=(background, accent, "#"),
            background_style=BackgroundStyle.GRADIENT,
        )
        frame = svc.render(cfg, AFTERNOON, context)
        assert frame.time_text
        assert frame.background.colors
        assert frame.progress_gradient
