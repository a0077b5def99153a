# premium_clock/models/clock_enums.py
from __future__ import annotations
from enum import Enum


class DateDisplayFormat(str, Enum):
    """Date line format. The value is the persisted pattern template."""
    MONTH_DAY_YEAR = "MMM d, yyyy"
    DAY_MONTH_YEAR = "d MMM yyyy"
    SHORT_DATE = "M/d/yy"
    DAY_OF_WEEK = "EEEE"
    DAY_OF_WEEK_SHORT = "EEE"
    NONE = ""          # suppresses the date line regardless of show_date

    @property
    def tag(self) -> str:
        return _DATE_FORMAT_TAGS[self]

    @classmethod
    def from_tag(cls, tag: str) -> "DateDisplayFormat":
        for member, member_tag in _DATE_FORMAT_TAGS.items():
            if member_tag == tag:
                return member
        raise ValueError(f"{tag!r} is not a valid DateDisplayFormat tag")

    @property
    def display_name(self) -> str:
        return {
            DateDisplayFormat.MONTH_DAY_YEAR: "Jan 1, 2024",
            DateDisplayFormat.DAY_MONTH_YEAR: "1 Jan 2024",
            DateDisplayFormat.SHORT_DATE: "1/1/24",
            DateDisplayFormat.DAY_OF_WEEK: "Monday",
            DateDisplayFormat.DAY_OF_WEEK_SHORT: "Mon",
            DateDisplayFormat.NONE: "No Date",
        }[self]


_DATE_FORMAT_TAGS = {
    DateDisplayFormat.MONTH_DAY_YEAR: "monthDayYear",
    DateDisplayFormat.DAY_MONTH_YEAR: "dayMonthYear",
    DateDisplayFormat.SHORT_DATE: "shortDate",
    DateDisplayFormat.DAY_OF_WEEK: "dayOfWeek",
    DateDisplayFormat.DAY_OF_WEEK_SHORT: "dayOfWeekShort",
    DateDisplayFormat.NONE: "none",
}


class BackgroundStyle(str, Enum):
    SOLID = "solid"
    GRADIENT = "gradient"
    BLUR = "blur"

    @property
    def display_name(self) -> str:
        return {"solid": "Solid Color", "gradient": "Gradient", "blur": "Blurred"}[self.value]


class TimeFontStyle(str, Enum):
    SYSTEM = "system"
    ROUNDED = "rounded"
    MONOSPACED = "monospaced"
    SERIF = "serif"


class DateFontStyle(str, Enum):
    SYSTEM = "system"
    ROUNDED = "rounded"
    SERIF = "serif"


class FontSizeOption(str, Enum):
    """Point size of the time line; date and seconds derive from it."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extraLarge"

    @property
    def time_size(self) -> float:
        return {"small": 24.0, "medium": 32.0, "large": 40.0, "extraLarge": 48.0}[self.value]

    @property
    def date_size(self) -> float:
        return self.time_size * 0.4

    @property
    def seconds_size(self) -> float:
        return self.time_size * 0.5


class FontWeightOption(str, Enum):
    LIGHT = "light"
    REGULAR = "regular"
    MEDIUM = "medium"
    SEMIBOLD = "semibold"
    BOLD = "bold"


class ClockLayout(str, Enum):
    STACKED = "stacked"
    SIDE_BY_SIDE = "sideBySide"
    TIME_ONLY = "timeOnly"
    APPLE_TIMER = "appleTimer"   # full width, built-in day indicator

    @property
    def display_name(self) -> str:
        return {
            "stacked": "Stacked",
            "sideBySide": "Side by Side",
            "timeOnly": "Time Only",
            "appleTimer": "Apple Timer Style",
        }[self.value]


class TextAlignmentOption(str, Enum):
    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"


class SpacingOption(str, Enum):
    TIGHT = "tight"
    NORMAL = "normal"
    LOOSE = "loose"

    @property
    def points(self) -> float:
        return {"tight": 2.0, "normal": 6.0, "loose": 12.0}[self.value]


class AnimationStyle(str, Enum):
    NONE = "none"
    FADE = "fade"
    SCALE = "scale"
    BOUNCE = "bounce"

    @property
    def scale_factor(self) -> float:
        return {"scale": 1.02, "bounce": 1.05}.get(self.value, 1.0)


class ProgressBarHeight(str, Enum):
    THIN = "thin"
    MEDIUM = "medium"
    THICK = "thick"

    @property
    def points(self) -> float:
        return {"thin": 2.0, "medium": 4.0, "thick": 6.0}[self.value]


class ProgressBarPosition(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class ProgressBarStyle(str, Enum):
    DAY_PROGRESSION = "dayProgression"
    SOLID = "solid"
    PULSING = "pulsing"

    @property
    def display_name(self) -> str:
        return {"dayProgression": "Day Progression", "solid": "Solid Color",
                "pulsing": "Pulsing"}[self.value]


class RenderContext(str, Enum):
    """Where a frame is shown; each context has its own size tables."""
    WIDGET = "widget"     # the widget-rendering process
    PREVIEW = "preview"   # the editor's live preview
