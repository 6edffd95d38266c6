"""
Locations and names used by the settings layer.

The settings root can be redirected with the IMAGERESIZER_SETTINGS_DIR
environment variable (tests and portable installs use this).
"""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "ImageResizer"
DEFAULT_MODULE_NAME = "Image Resizer"

SETTINGS_FILE = "settings.json"
SIZES_FILE = "sizes.json"

SETTINGS_DIR_ENV = "IMAGERESIZER_SETTINGS_DIR"


def settings_root() -> Path:
    """Directory holding one sub-folder per module."""
    override = os.environ.get(SETTINGS_DIR_ENV)
    if override:
        return Path(override)

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA", str(Path.home()))
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME.lower()
