# imageresizer/imaging/encoding.py
# Purpose: turn the stored Image Resizer settings into an actual resized file.
# - Fallback encoder + quality/compression -> Pillow save arguments
# - Output file naming from the %1..%6 template
# - Optional preservation of the source modification time
# - Replace mode overwrites the source in its own format

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from PIL import Image, ImageOps

from imageresizer.imaging.sizes import DEFAULT_DPI, target_pixels
from imageresizer.models.enums import Encoder, ResizeFit, TiffCompressOption, get_encoder_index
from imageresizer.models.settings import ImageResizerProperties, ImageSize

try:
    RESAMPLE_LANCZOS = Image.Resampling.LANCZOS  # type: ignore[attr-defined]
except AttributeError:
    RESAMPLE_LANCZOS = Image.LANCZOS

log = logging.getLogger("image-resizer.encoding")

PILLOW_FORMATS: Dict[Encoder, str] = {
    Encoder.PNG: "PNG",
    Encoder.BITMAP: "BMP",
    Encoder.JPEG: "JPEG",
    Encoder.TIFF: "TIFF",
    Encoder.GIF: "GIF",
}

EXTENSIONS: Dict[Encoder, str] = {
    Encoder.PNG: ".png",
    Encoder.BITMAP: ".bmp",
    Encoder.JPEG: ".jpg",
    Encoder.TIFF: ".tif",
    Encoder.GIF: ".gif",
}

TIFF_COMPRESSION: Dict[TiffCompressOption, Optional[str]] = {
    TiffCompressOption.DEFAULT: None,
    TiffCompressOption.NONE: "raw",
    TiffCompressOption.CCITT3: "group3",
    TiffCompressOption.CCITT4: "group4",
    TiffCompressOption.LZW: "tiff_lzw",
    TiffCompressOption.RLE: "packbits",
    TiffCompressOption.ZIP: "tiff_deflate",
}

# libtiff only encodes 1-bit images with the CCITT schemes
BILEVEL_COMPRESSION = ("group3", "group4")


def fallback_encoder(props: ImageResizerProperties) -> Encoder:
    index = get_encoder_index(props.fallback_encoder)
    if index < 0:
        raise ValueError(f"Unknown fallback encoder: {props.fallback_encoder}")
    return Encoder(index)



def _format_options(fmt: str, props: ImageResizerProperties) -> Dict[str, Any]:
    opts: Dict[str, Any] = {"format": fmt}
    if fmt == "JPEG":
        opts["quality"] = int(props.jpeg_quality_level)
    elif fmt == "TIFF":
        compression = TIFF_COMPRESSION[TiffCompressOption(props.tiff_compress_option)]
        if compression:
            opts["compression"] = compression
    # Pillow only writes non-interlaced PNG, so the interlace option has no counterpart here
    return opts


def save_options(props: ImageResizerProperties) -> Dict[str, Any]:
    """Keyword arguments for ``Image.save`` matching the configured encoder."""
    encoder = fallback_encoder(props)
    fmt = PILLOW_FORMATS.get(encoder)
    if fmt is None:
        raise ValueError(f"No Pillow writer for the {encoder.name} encoder")
    return _format_options(fmt, props)


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


_PLACEHOLDER = re.compile(r"%([1-6])")


def format_file_name(template: str, original: str, size: ImageSize, actual: Tuple[int, int]) -> str:
    """
    %1 original name, %2 preset name, %3/%4 preset width/height,
    %5/%6 actual width/height. Substituted text is never expanded again.
    """
    values = {
        "1": original,
        "2": size.name,
        "3": _num(size.width),
        "4": _num(size.height),
        "5": str(actual[0]),
        "6": str(actual[1]),
    }
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], template)


def output_path(src: Path, out_dir: Path, size: ImageSize, actual: Tuple[int, int],
                props: ImageResizerProperties) -> Path:
    ext = EXTENSIONS.get(fallback_encoder(props), src.suffix)
    base = format_file_name(props.file_name, src.stem, size, actual)
    out = out_dir / f"{base}{ext}"
    i = 1
    while out.exists():
        out = out_dir / f"{base}_{i}{ext}"
        i += 1
    return out


def _prepare_for(resized: Image.Image, opts: Dict[str, Any]) -> Image.Image:
    if opts.get("compression") in BILEVEL_COMPRESSION and resized.mode != "1":
        return resized.convert("1")
    if opts["format"] in ("JPEG", "BMP") and resized.mode not in ("RGB", "L"):
        return resized.convert("RGB")
    return resized


def resize_file(src: str | Path, out_dir: str | Path, size: ImageSize,
                props: ImageResizerProperties, dpi: int = DEFAULT_DPI) -> Path:
    """
    Resize one image with a preset.

    The result goes to ``out_dir`` with the fallback encoder, or over ``src``
    in its own format when ``props.replace`` is set.
    """
    src = Path(src)
    out_dir = Path(out_dir)
    if not src.exists():
        raise FileNotFoundError(f"Input image not found: {src}")
    st = os.stat(src)

    with Image.open(src) as im:
        source_format = im.format
        tw, th = target_pixels(size, im.size, dpi, shrink_only=props.shrink_only,
                               ignore_orientation=props.ignore_orientation)
        if size.fit == ResizeFit.FILL:
            resized = ImageOps.fit(im, (tw, th), method=RESAMPLE_LANCZOS)
        else:
            resized = im.resize((tw, th), resample=RESAMPLE_LANCZOS)

    if props.replace:
        if source_format in Image.SAVE:
            opts = _format_options(source_format, props)
        else:
            opts = save_options(props)
        out = src
    else:
        opts = save_options(props)
        out_dir.mkdir(parents=True, exist_ok=True)
        out = output_path(src, out_dir, size, resized.size, props)

    resized = _prepare_for(resized, opts)
    log.info(f"Resizing {src.name} -> {out.name} ({resized.width}x{resized.height})")
    try:
        resized.save(out, **opts)
    except Exception:
        if out != src and out.exists():
            out.unlink()
        raise

    if props.keep_date_modified:
        os.utime(out, (st.st_atime, st.st_mtime))
    return out
