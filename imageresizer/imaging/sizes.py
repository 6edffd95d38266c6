from __future__ import annotations
from typing import Tuple
from imageresizer.models.enums import ResizeFit, ResizeUnit
from imageresizer.models.settings import ImageSize

CM_PER_INCH = 2.54
DEFAULT_DPI = 96

def to_pixels(value: float, unit: ResizeUnit, source_px: int, dpi: int = DEFAULT_DPI) -> float:
    if unit == ResizeUnit.CENTIMETER:
        return value / CM_PER_INCH * dpi
    if unit == ResizeUnit.INCH:
        return value * dpi
    if unit == ResizeUnit.PERCENT:
        return source_px * value / 100.0
    return float(value)

def box_pixels(size: ImageSize, source: Tuple[int, int], dpi: int = DEFAULT_DPI) -> Tuple[float, float]:
    """Requested box in pixels. A zero side follows the source aspect ratio."""
    sw, sh = source
    w = to_pixels(size.width, size.unit, sw, dpi)
    h = to_pixels(size.height, size.unit, sh, dpi)
    if w <= 0 and h <= 0:
        return (float(sw), float(sh))
    if w <= 0:
        w = h * sw / sh
    elif h <= 0:
        h = w * sh / sw
    return (w, h)

def target_pixels(size: ImageSize, source: Tuple[int, int], dpi: int = DEFAULT_DPI,
                  shrink_only: bool = False, ignore_orientation: bool = False) -> Tuple[int, int]:
    sw, sh = source
    bw, bh = box_pixels(size, source, dpi)
    if ignore_orientation and bw != bh and sw != sh and (bw > bh) != (sw > sh):
        # portrait sources get the portrait version of a landscape box and vice versa
        bw, bh = bh, bw
    if size.fit == ResizeFit.FIT:
        scale = min(bw / sw, bh / sh)
        w, h = sw * scale, sh * scale
    else:
        # fill crops to the box, stretch distorts into it
        w, h = bw, bh
    if shrink_only and (w > sw or h > sh):
        return (sw, sh)
    return (max(1, round(w)), max(1, round(h)))
