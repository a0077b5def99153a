"""
Color values used by the clock configuration and the renderer.

Colors are persisted as hex strings (``#RGB``, ``#RRGGBB`` or ``#AARRGGBB``)
and resolved to :class:`Color` when a frame is derived.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Color:
    """sRGB color with 8-bit channels and a 0..1 opacity."""
    red: int
    green: int
    blue: int
    alpha: float = 1.0

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """
        Parses a hex color. Surrounding punctuation such as ``#`` is ignored.

        Raises:
            ValueError: if the digits are not hex or the length is not 3, 6 or 8.
        """
        digits = normalize_hex(value)
        n = int(digits, 16)
        if len(digits) == 3:
            return cls((n >> 8) * 17, (n >> 4 & 0xF) * 17, (n & 0xF) * 17)
        if len(digits) == 6:
            return cls(n >> 16, n >> 8 & 0xFF, n & 0xFF)
        return cls(n >> 16 & 0xFF, n >> 8 & 0xFF, n & 0xFF, (n >> 24) / 255)

    def to_hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def with_opacity(self, opacity: float) -> "Color":
        return Color(self.red, self.green, self.blue, self.alpha * opacity)

    def rgba(self) -> Tuple[int, int, int, int]:
        """Channels as a Pillow RGBA tuple."""
        return (self.red, self.green, self.blue, round(self.alpha * 255))


def normalize_hex(value: str, strict: bool = False) -> str:
    """
    Validates a hex color and returns the bare hex digits.

    Stored records are read leniently: punctuation and whitespace around the
    digits are ignored. With *strict* only whitespace and a single leading
    ``#`` are allowed, which is what the editor accepts as input.
    """
    if not isinstance(value, str):
        raise ValueError(f"color must be a string, got {type(value).__name__}")
    if strict:
        digits = value.strip()
        if digits.startswith("#"):
            digits = digits[1:]
    else:
        digits = value.strip().strip(string.punctuation + string.whitespace)
    if len(digits) not in (3, 6, 8) or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"{value!r} is not a hex color")
    return digits


def is_hex_color(value: object, strict: bool = False) -> bool:
    try:
        normalize_hex(value, strict)  # type: ignore[arg-type]
    except ValueError:
        return False
    return True



BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
CLEAR = Color(0, 0, 0, 0.0)


class WidgetColor(str, Enum):
    """Named palette (system colors of the original app)."""
    BLACK = "black"
    BLUE = "blue"
    PURPLE = "purple"
    ORANGE = "orange"
    GREEN = "green"
    PINK = "pink"
    INDIGO = "indigo"
    MINT = "mint"
    TEAL = "teal"
    BROWN = "brown"
    RED = "red"
    YELLOW = "yellow"
    GRAY = "gray"
    CYAN = "cyan"

    @property
    def hex(self) -> str:
        return _PALETTE[self.value]

    @property
    def color(self) -> Color:
        return Color.from_hex(self.hex)


_PALETTE = {
    "black": "#000000",
    "blue": "#007AFF",
    "purple": "#AF52DE",
    "orange": "#FF9500",
    "green": "#34C759",
    "pink": "#FF2D55",
    "indigo": "#5856D6",
    "mint": "#00C7BE",
    "teal": "#30B0C7",
    "brown": "#A2845E",
    "red": "#FF3B30",
    "yellow": "#FFCC00",
    "gray": "#8E8E93",
    "cyan": "#32ADE6",
}
