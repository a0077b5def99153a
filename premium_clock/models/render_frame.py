"""
Derived, per-tick render values. Nothing in here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .clock_enums import (
    BackgroundStyle,
    FontWeightOption,
    ProgressBarPosition,
    RenderContext,
    TextAlignmentOption,
)
from .color import Color


class FontDesign(str, Enum):
    DEFAULT = "default"
    ROUNDED = "rounded"
    MONOSPACED = "monospaced"
    SERIF = "serif"


@dataclass(frozen=True)
class FontDescriptor:
    size: float
    weight: FontWeightOption
    design: FontDesign = FontDesign.DEFAULT
    monospaced_digits: bool = False


@dataclass(frozen=True)
class FontSet:
    time: FontDescriptor
    date: FontDescriptor
    seconds: FontDescriptor


@dataclass(frozen=True)
class ResolvedBackground:
    style: BackgroundStyle
    colors: Tuple[Color, ...]     # one color for solid/blur, >= 1 for gradient
    blur_radius: float = 0.0


@dataclass(frozen=True)
class ResolvedColors:
    text: Color
    accent: Color
    seconds: Color
    date: Color
    timezone: Color
    shadow: Color                 # CLEAR when shadows are off
    glow: Optional[Color]         # None when glow is off
    progress_track: Color
    indicator_fill: Color


class Arrangement(str, Enum):
    STACKED = "stacked"           # time over date
    SIDE_BY_SIDE = "sideBySide"   # time beside date
    TIME_ONLY = "timeOnly"
    FULL_WIDTH = "fullWidth"      # Apple Timer composition


@dataclass(frozen=True)
class LayoutComposition:
    """Structural arrangement chosen for a configuration and context."""
    arrangement: Arrangement
    alignment: TextAlignmentOption
    spacing: float                # gap between time block and date
    inner_spacing: float          # gap between time and seconds
    horizontal_padding: float
    vertical_padding: float
    show_seconds: bool
    show_date: bool
    show_timezone: bool
    progress_bar: Optional[ProgressBarPosition]   # standalone bar, if any
    progress_bar_height: float
    builtin_indicator: bool       # Apple Timer day indicator
    indicator_height: float
    scale: float = 1.0


@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs for one (configuration, instant) pair."""
    instant: datetime
    context: RenderContext
    time_text: str
    seconds_text: str
    date_text: str
    timezone_text: str
    fonts: FontSet
    colors: ResolvedColors
    background: ResolvedBackground
    day_progress: float
    progress_gradient: Tuple[Color, ...]
    composition: LayoutComposition
