"""
FrameRenderer
-------------
Rasterizes a :class:`RenderFrame` into a Pillow image. The host preview and
the widget process both go through this class, so a given
``(configuration, instant, context)`` produces the same pixels in both.

Layering (bottom to top): background, text shadow, glow, text, progress bar
or built-in day indicator. Sizes in the frame are points; ``pixel_ratio``
maps them to pixels.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from ..models.clock_enums import BackgroundStyle, FontWeightOption, ProgressBarPosition, TextAlignmentOption
from ..models.color import Color
from ..models.render_frame import Arrangement, FontDescriptor, FontDesign, RenderFrame

logger = logging.getLogger(__name__)

Size = Tuple[int, int]
Box = Tuple[int, int, int, int]

_BOLD_WEIGHTS = {FontWeightOption.SEMIBOLD, FontWeightOption.BOLD}

# Candidate font files per design; the first one Pillow can open wins.
_FONT_CANDIDATES = {
    FontDesign.DEFAULT: (("DejaVuSans.ttf", "arial.ttf", "Helvetica.ttc"),
                         ("DejaVuSans-Bold.ttf", "arialbd.ttf", "Helvetica.ttc")),
    FontDesign.ROUNDED: (("Nunito-Regular.ttf", "VarelaRound-Regular.ttf", "DejaVuSans.ttf", "arial.ttf"),
                         ("Nunito-Bold.ttf", "VarelaRound-Regular.ttf", "DejaVuSans-Bold.ttf", "arialbd.ttf")),
    FontDesign.MONOSPACED: (("DejaVuSansMono.ttf", "cour.ttf", "Menlo.ttc"),
                            ("DejaVuSansMono-Bold.ttf", "courbd.ttf", "Menlo.ttc")),
    FontDesign.SERIF: (("DejaVuSerif.ttf", "times.ttf", "Times New Roman.ttf"),
                       ("DejaVuSerif-Bold.ttf", "timesbd.ttf", "Times New Roman Bold.ttf")),
}

SHADOW_RADIUS = 2.0
SHADOW_OFFSET = 1.0
GLOW_RADIUS = 10.0
BAR_GAP = 8.0
INDICATOR_BOTTOM_PADDING = 4.0


@lru_cache(maxsize=64)
def load_font(design: FontDesign, bold: bool, px: int) -> ImageFont.ImageFont:
    """
    Opens the first installed candidate for *design*; falls back to Pillow's
    bundled font at the requested size.
    """
    for name in _FONT_CANDIDATES[design][1 if bold else 0]:
        try:
            return ImageFont.truetype(name, px)
        except OSError:
            continue
    logger.debug("No TrueType font for %s (bold=%s); using Pillow default", design.value, bold)
    return ImageFont.load_default(size=px)


@dataclass
class _Text:
    text: str
    font: ImageFont.ImageFont
    color: Color
    width: int = 0
    height: int = 0
    offset: Tuple[int, int] = (0, 0)
    x: int = 0
    y: int = 0
    glow: bool = False


class FrameRenderer:
    """Draws frames with Pillow. Instances are cheap and hold no frame state."""

    def __init__(self, pixel_ratio: float = 1.0) -> None:
        self.pixel_ratio = float(pixel_ratio)

    # --- Public API ---------------------------------------------------------

    def render(self, frame: RenderFrame, size: Size) -> Image.Image:
        """Returns an RGBA image of *size* pixels."""
        width, height = int(size[0]), int(size[1])
        image = self._paint_background(frame, (width, height))
        texts, bar_box = self._layout(frame, (width, height))

        colors = frame.colors
        if colors.shadow.alpha > 0:
            shadow = self._text_layer(texts, (width, height), colors.shadow,
                                      dy=self._px(SHADOW_OFFSET))
            image.alpha_composite(shadow.filter(ImageFilter.GaussianBlur(self._px(SHADOW_RADIUS))))
        if colors.glow is not None:
            glow = self._text_layer([t for t in texts if t.glow], (width, height), colors.glow)
            image.alpha_composite(glow.filter(ImageFilter.GaussianBlur(self._px(GLOW_RADIUS))))

        image.alpha_composite(self._text_layer(texts, (width, height)))

        if bar_box is not None:
            self._paint_progress(image, frame, bar_box)
        return image

    # --- Background ---------------------------------------------------------

    def _paint_background(self, frame: RenderFrame, size: Size) -> Image.Image:
        bg = frame.background
        if bg.style is BackgroundStyle.GRADIENT and len(bg.colors) > 1:
            return diagonal_gradient(bg.colors, size)
        image = Image.new("RGBA", size, bg.colors[0].rgba())
        if bg.style is BackgroundStyle.BLUR and bg.blur_radius > 0:
            image = image.filter(ImageFilter.GaussianBlur(self._px(bg.blur_radius)))
        return image

    # --- Layout -------------------------------------------------------------

    def _layout(self, frame: RenderFrame, size: Size) -> Tuple[List[_Text], Optional[Box]]:
        """
        Positions every text run; returns the runs and the progress bar box
        (x0, y0, x1, y1), or None when no bar is shown.
        """
        comp = frame.composition
        colors = frame.colors
        width, height = size
        left, right = self._px(comp.horizontal_padding), width - self._px(comp.horizontal_padding)
        top, bottom = self._px(comp.vertical_padding), height - self._px(comp.vertical_padding)
        spacing = self._px(comp.spacing)
        inner = self._px(comp.inner_spacing)

        time_run = self._measure(frame.time_text, frame.fonts.time, colors.text, comp.scale)
        time_run.glow = True
        seconds = (self._measure(frame.seconds_text, frame.fonts.seconds, colors.seconds)
                   if comp.show_seconds else None)
        date = (self._measure(frame.date_text, frame.fonts.date, colors.date)
                if comp.show_date and frame.date_text else None)
        zone = (self._measure(frame.timezone_text, frame.fonts.seconds, colors.timezone)
                if comp.show_timezone and frame.timezone_text else None)

        bar_box: Optional[Box] = None
        bar_h = 0
        if comp.builtin_indicator:
            bar_h = max(1, self._px(comp.indicator_height))
            y1 = height - self._px(INDICATOR_BOTTOM_PADDING)
            bar_box = (left, y1 - bar_h, right, y1)
            bottom = min(bottom, bar_box[1])
        elif comp.progress_bar is not None:
            bar_h = max(1, self._px(comp.progress_bar_height))
            gap = self._px(BAR_GAP)
            if comp.progress_bar is ProgressBarPosition.TOP:
                bar_box = (left, top, right, top + bar_h)
                top += bar_h + gap
            elif comp.progress_bar is ProgressBarPosition.BOTTOM:
                bar_box = (left, bottom - bar_h, right, bottom)
                bottom -= bar_h + gap
            else:
                bottom -= bar_h + gap

        if comp.arrangement is Arrangement.FULL_WIDTH:
            content = _vstack([_hstack([time_run, seconds], inner), date], spacing,
                              TextAlignmentOption.CENTER)
            alignment = TextAlignmentOption.CENTER
        else:
            time_block = _vstack([time_run, seconds], inner, TextAlignmentOption.CENTER)
            alignment = comp.alignment
            if comp.arrangement is Arrangement.STACKED:
                content = _vstack([time_block, date, zone], spacing, alignment)
            elif comp.arrangement is Arrangement.SIDE_BY_SIDE:
                content = _hstack([time_block, date], spacing)
            else:
                content = time_block

        block_bottom = content.place(left, right, top, bottom, alignment)
        if bar_box is None and comp.progress_bar is ProgressBarPosition.MIDDLE:
            y0 = block_bottom + self._px(BAR_GAP)
            bar_box = (left, y0, right, y0 + bar_h)
        return content.runs, bar_box

    def _measure(self, text: str, font: FontDescriptor, color: Color, scale: float = 1.0) -> _Text:
        px = max(1, self._px(font.size * scale))
        pil_font = load_font(font.design, font.weight in _BOLD_WEIGHTS, px)
        x0, y0, x1, y1 = _measure_draw().textbbox((0, 0), text, font=pil_font)
        return _Text(text, pil_font, color, x1 - x0, y1 - y0, (x0, y0))

    # --- Painting -----------------------------------------------------------

    @staticmethod
    def _text_layer(runs: Sequence[_Text], size: Size, color: Optional[Color] = None,
                    dy: int = 0) -> Image.Image:
        layer = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        for r in runs:
            fill = (color or r.color).rgba()
            draw.text((r.x - r.offset[0], r.y - r.offset[1] + dy), r.text, font=r.font, fill=fill)
        return layer

    def _paint_progress(self, image: Image.Image, frame: RenderFrame, box: Box) -> None:
        x0, y0, x1, y1 = box
        comp = frame.composition
        radius = (y1 - y0) // 2
        overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        draw.rounded_rectangle(box, radius=radius, fill=frame.colors.progress_track.rgba())

        fill_w = int(round((x1 - x0) * frame.day_progress))
        if fill_w > 0:
            if comp.builtin_indicator:
                draw.rectangle((x0, y0, x0 + fill_w, y1), fill=frame.colors.indicator_fill.rgba())
            else:
                strip = horizontal_gradient(frame.progress_gradient, (fill_w, y1 - y0))
                mask = Image.new("L", strip.size, 0)
                ImageDraw.Draw(mask).rounded_rectangle((0, 0, fill_w - 1, y1 - y0 - 1),
                                                       radius=radius, fill=255)
                fill = Image.new("RGBA", strip.size, (0, 0, 0, 0))
                fill.paste(strip, (0, 0), mask)
                overlay.alpha_composite(fill, (x0, y0))
        image.alpha_composite(overlay)

    def _px(self, points: float) -> int:
        return int(round(points * self.pixel_ratio))


# --------------------------------------------------------------------------- #
#  Gradients
# --------------------------------------------------------------------------- #

def _interpolate(stops: Sequence[Color], t: float) -> Tuple[int, int, int, int]:
    if len(stops) == 1:
        return stops[0].rgba()
    pos = min(max(t, 0.0), 1.0) * (len(stops) - 1)
    i = min(int(pos), len(stops) - 2)
    f = pos - i
    a, b = stops[i].rgba(), stops[i + 1].rgba()
    return tuple(int(round(a[k] + (b[k] - a[k]) * f)) for k in range(4))  # type: ignore[return-value]


def diagonal_gradient(stops: Sequence[Color], size: Size) -> Image.Image:
    """Linear gradient from the top-left corner to the bottom-right corner."""
    width, height = size
    steps = max(2, width + height - 1)
    ramp = [_interpolate(stops, i / (steps - 1)) for i in range(steps)]
    image = Image.new("RGBA", size)
    image.putdata([ramp[x + y] for y in range(height) for x in range(width)])
    return image


def horizontal_gradient(stops: Sequence[Color], size: Size) -> Image.Image:
    width, height = size
    row = [_interpolate(stops, x / max(1, width - 1)) for x in range(width)]
    image = Image.new("RGBA", size)
    image.putdata(row * height)
    return image


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

@lru_cache(maxsize=1)
def _measure_draw() -> ImageDraw.ImageDraw:
    return ImageDraw.Draw(Image.new("RGBA", (1, 1)))


@dataclass
class _Block:
    """Runs positioned relative to the block's top-left corner."""
    runs: List[_Text]
    width: int
    height: int

    def shift(self, dx: int, dy: int) -> None:
        for r in self.runs:
            r.x += dx
            r.y += dy

    def place(self, left: int, right: int, top: int, bottom: int,
              alignment: TextAlignmentOption) -> int:
        """Moves the block into the box, vertically centered; returns its bottom edge."""
        if alignment is TextAlignmentOption.LEADING:
            x = left
        elif alignment is TextAlignmentOption.TRAILING:
            x = right - self.width
        else:
            x = left + (right - left - self.width) // 2
        y = top + (bottom - top - self.height) // 2
        self.shift(x, y)
        return y + self.height


def _as_block(item: Union[_Text, _Block]) -> _Block:
    if isinstance(item, _Block):
        return item
    return _Block([item], item.width, item.height)


def _hstack(items: Sequence[Optional[Union[_Text, _Block]]], gap: int) -> _Block:
    """Left to right, each item vertically centered on the tallest one."""
    blocks = [_as_block(i) for i in items if i is not None]
    height = max(b.height for b in blocks)
    x = 0
    for b in blocks:
        b.shift(x, (height - b.height) // 2)
        x += b.width + gap
    return _Block([r for b in blocks for r in b.runs], x - gap, height)


def _vstack(items: Sequence[Optional[Union[_Text, _Block]]], gap: int,
            alignment: TextAlignmentOption) -> _Block:
    """Top to bottom, each item aligned horizontally within the widest one."""
    blocks = [_as_block(i) for i in items if i is not None]
    width = max(b.width for b in blocks)
    y = 0
    for b in blocks:
        if alignment is TextAlignmentOption.LEADING:
            dx = 0
        elif alignment is TextAlignmentOption.TRAILING:
            dx = width - b.width
        else:
            dx = (width - b.width) // 2
        b.shift(dx, y)
        y += b.height + gap
    return _Block([r for b in blocks for r in b.runs], width, y - gap)


def save_png_atomic(image: Image.Image, path: Path) -> None:
    """Writes *image* as PNG via a temp file and ``os.replace``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            image.save(fh, format="PNG")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
