# imageresizer/cli.py
# Command line front end: resize files with the presets saved by the settings panel.

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from imageresizer.config import DEFAULT_MODULE_NAME
from imageresizer.imaging.encoding import resize_file
from imageresizer.imaging.sizes import DEFAULT_DPI
from imageresizer.models.settings import ImageResizerSettings, ImageSize
from imageresizer.storage.settings_utils import SettingsLoadError, SettingsUtils
from imageresizer.utils.logging_utils import build_logger


def load_settings(utils: SettingsUtils, module_name: str) -> ImageResizerSettings:
    """Stored settings, or defaults when nothing usable is on disk. Never writes."""
    try:
        return ImageResizerSettings.from_dict(utils.get_settings(module_name))
    except SettingsLoadError:
        return ImageResizerSettings(name=module_name)


def pick_size(settings: ImageResizerSettings, name: Optional[str]) -> ImageSize:
    sizes = settings.properties.sizes
    if not sizes:
        raise ValueError("No resize presets are configured")
    if name is None:
        idx = settings.properties.selected_size_index
        return sizes[idx] if 0 <= idx < len(sizes) else sizes[0]
    for size in sizes:
        if size.name.lower() == name.lower():
            return size
    raise ValueError(f"Unknown preset: {name} (have: {', '.join(s.name for s in sizes)})")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Resize images with the saved Image Resizer presets.")
    ap.add_argument("inputs", nargs="+", help="Images to resize")
    ap.add_argument("-o", "--outdir", required=True, help="Output directory")
    ap.add_argument("--size", help="Preset name (defaults to the selected preset)")
    ap.add_argument("--dpi", type=int, default=DEFAULT_DPI, help="DPI for centimeter/inch presets")
    ap.add_argument("--settings-dir", help="Settings root (defaults to the per-user location)")
    ap.add_argument("--module", default=DEFAULT_MODULE_NAME, help="Settings module name")
    args = ap.parse_args(argv)

    utils = SettingsUtils(args.settings_dir)
    log = build_logger(log_dir=utils.root / "logs")

    settings = load_settings(utils, args.module)
    try:
        size = pick_size(settings, args.size)
    except ValueError as e:
        log.error(str(e))
        return 2

    failures = 0
    for src in args.inputs:
        try:
            out = resize_file(src, args.outdir, size, settings.properties, dpi=args.dpi)
            log.info(f"Saved: {out}")
        except Exception as e:
            failures += 1
            log.error(f"{Path(src).name}: {e}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
