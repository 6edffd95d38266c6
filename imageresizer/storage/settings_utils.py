from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from imageresizer.config import SETTINGS_FILE, settings_root

log = logging.getLogger("image-resizer.storage")


class SettingsLoadError(Exception):
    """Raised when a settings file is missing, unreadable or not a settings record."""


class SettingsUtils:
    """
    Reads and writes per-module JSON files under ``<root>/<module>/<file>``.

    Writes are wholesale; there is no partial update. Write failures are not
    caught here and reach the caller as ``OSError``.
    """

    def __init__(self, root: Optional[str | Path] = None):
        self.root = Path(root) if root is not None else settings_root()

    def settings_path(self, module_name: str, file_name: str = SETTINGS_FILE) -> Path:
        return self.root / module_name / file_name

    def settings_exists(self, module_name: str, file_name: str = SETTINGS_FILE) -> bool:
        return self.settings_path(module_name, file_name).is_file()

    def get_settings(self, module_name: str, file_name: str = SETTINGS_FILE) -> Dict[str, Any]:
        path = self.settings_path(module_name, file_name)
        if not path.is_file():
            raise SettingsLoadError(f"Settings file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SettingsLoadError(f"Could not read {path}: {e}") from e

        if not isinstance(data, dict):
            raise SettingsLoadError(f"{path} does not hold a JSON object")
        return data

    def save_settings(self, json_text: str, module_name: str, file_name: str = SETTINGS_FILE) -> None:
        path = self.settings_path(module_name, file_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(json_text)
        log.debug("Saved %s", path)
