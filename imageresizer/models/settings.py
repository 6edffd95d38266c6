from __future__ import annotations
import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List

from imageresizer.config import DEFAULT_MODULE_NAME
from imageresizer.models.enums import ENCODER_GUIDS, Encoder, ResizeFit, ResizeUnit
from imageresizer.storage.settings_utils import SettingsLoadError

SETTINGS_VERSION = "1"


@dataclass
class ImageSize:
    """One resize preset. ``id`` is assigned by the owning list, not stored meaningfully on disk."""

    id: int = 0
    name: str = ""
    fit: ResizeFit = ResizeFit.FIT
    width: float = 0
    height: float = 0
    unit: ResizeUnit = ResizeUnit.PIXEL

    def edited(self, **changes: Any) -> "ImageSize":
        """Return an edited copy; hand it to the owner to apply."""
        if "id" in changes:
            raise ValueError("id of an image size cannot be edited")
        return replace(self, **changes)

    def update(self, other: "ImageSize") -> None:
        self.name = other.name
        self.fit = other.fit
        self.width = other.width
        self.height = other.height
        self.unit = other.unit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Id": self.id,
            "name": self.name,
            "fit": int(self.fit),
            "width": self.width,
            "height": self.height,
            "unit": int(self.unit),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageSize":
        return cls(
            id=int(data.get("Id", 0)),
            name=str(data.get("name", "")),
            fit=ResizeFit(int(data.get("fit", ResizeFit.FIT))),
            width=data.get("width", 0),
            height=data.get("height", 0),
            unit=ResizeUnit(int(data.get("unit", ResizeUnit.PIXEL))),
        )


def default_sizes() -> List[ImageSize]:
    return [
        ImageSize(0, "Small", ResizeFit.FIT, 854, 480, ResizeUnit.PIXEL),
        ImageSize(1, "Medium", ResizeFit.FIT, 1366, 768, ResizeUnit.PIXEL),
        ImageSize(2, "Large", ResizeFit.FIT, 1920, 1080, ResizeUnit.PIXEL),
        ImageSize(3, "Phone", ResizeFit.FIT, 320, 568, ResizeUnit.PIXEL),
    ]


def sizes_to_json(sizes: List[ImageSize]) -> str:
    """Serialized form of the standalone presets file."""
    return json.dumps({"value": [s.to_dict() for s in sizes]})


# attribute name -> key inside the "properties" block
_PROPERTY_KEYS = {
    "selected_size_index": "imageresizer_selectedSizeIndex",
    "shrink_only": "imageresizer_shrinkOnly",
    "replace": "imageresizer_replace",
    "ignore_orientation": "imageresizer_ignoreOrientation",
    "jpeg_quality_level": "imageresizer_jpegQualityLevel",
    "png_interlace_option": "imageresizer_pngInterlaceOption",
    "tiff_compress_option": "imageresizer_tiffCompressOption",
    "file_name": "imageresizer_fileName",
    "sizes": "imageresizer_sizes",
    "keep_date_modified": "imageresizer_keepDateModified",
    "fallback_encoder": "imageresizer_fallbackEncoder",
}

# JSON type each scalar property must carry
_SCALAR_TYPES = {
    "selected_size_index": int,
    "shrink_only": bool,
    "replace": bool,
    "ignore_orientation": bool,
    "jpeg_quality_level": int,
    "png_interlace_option": int,
    "tiff_compress_option": int,
    "file_name": str,
    "keep_date_modified": bool,
    "fallback_encoder": str,
}


def _check_scalar(attr: str, key: str, value: Any) -> None:
    expected = _SCALAR_TYPES[attr]
    # bool is an int subclass; neither may stand in for the other
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise SettingsLoadError(f"Property {key!r} should hold {expected.__name__}, got {value!r}")


@dataclass
class ImageResizerProperties:
    selected_size_index: int = 0
    shrink_only: bool = False
    replace: bool = False
    ignore_orientation: bool = True
    jpeg_quality_level: int = 90
    png_interlace_option: int = 0
    tiff_compress_option: int = 0
    file_name: str = "%1 (%2)"
    sizes: List[ImageSize] = field(default_factory=default_sizes)
    keep_date_modified: bool = False
    fallback_encoder: str = ENCODER_GUIDS[Encoder.JPEG]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for attr, key in _PROPERTY_KEYS.items():
            value = getattr(self, attr)
            if attr == "sizes":
                value = [s.to_dict() for s in value]
            out[key] = {"value": value}
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageResizerProperties":
        props = cls()
        for attr, key in _PROPERTY_KEYS.items():
            if key not in data:
                continue
            wrapped = data[key]
            if not isinstance(wrapped, dict) or "value" not in wrapped:
                raise SettingsLoadError(f"Malformed property {key!r}")
            value = wrapped["value"]
            if attr == "sizes":
                value = [ImageSize.from_dict(s) for s in value]
            else:
                _check_scalar(attr, key, value)
            setattr(props, attr, value)
        return props


@dataclass
class ImageResizerSettings:
    """Settings record of the image resizer module, as written to settings.json."""

    name: str = DEFAULT_MODULE_NAME
    version: str = SETTINGS_VERSION
    properties: ImageResizerProperties = field(default_factory=ImageResizerProperties)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "properties": self.properties.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageResizerSettings":
        if not isinstance(data.get("properties"), dict):
            raise SettingsLoadError("Settings record has no properties block")
        try:
            properties = ImageResizerProperties.from_dict(data["properties"])
        except (TypeError, ValueError, AttributeError) as e:
            raise SettingsLoadError(f"Invalid settings record: {e}") from e
        return cls(
            name=str(data.get("name", DEFAULT_MODULE_NAME)),
            version=str(data.get("version", SETTINGS_VERSION)),
            properties=properties,
        )


# ----------------------------- general settings -----------------------------
# attribute name -> key the host uses in the "enabled" block
_ENABLED_KEYS = {
    "fancy_zones": "FancyZones",
    "image_resizer": "ImageResizer",
    "file_explorer_preview": "File Explorer Preview",
    "power_rename": "PowerRename",
    "shortcut_guide": "Shortcut Guide",
    "keyboard_manager": "Keyboard Manager",
    "color_picker": "ColorPicker",
    "launcher": "PowerToys Run",
}


@dataclass(frozen=True)
class EnabledModules:
    fancy_zones: bool = True
    image_resizer: bool = True
    file_explorer_preview: bool = True
    power_rename: bool = True
    shortcut_guide: bool = True
    keyboard_manager: bool = True
    color_picker: bool = True
    launcher: bool = True

    def to_dict(self) -> Dict[str, bool]:
        return {key: getattr(self, attr) for attr, key in _ENABLED_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnabledModules":
        return cls(**{attr: bool(data[key]) for attr, key in _ENABLED_KEYS.items() if key in data})


@dataclass(frozen=True)
class GeneralSettings:
    """Read-only snapshot of the host's general settings."""

    startup: bool = False
    run_elevated: bool = False
    theme: str = "system"
    enabled: EnabledModules = field(default_factory=EnabledModules)

    def is_module_enabled(self, module_field: str) -> bool:
        return bool(getattr(self.enabled, module_field))

    def with_module_enabled(self, module_field: str, value: bool) -> "GeneralSettings":
        if module_field not in {f.name for f in fields(EnabledModules)}:
            raise ValueError(f"Unknown module flag: {module_field}")
        return replace(self, enabled=replace(self.enabled, **{module_field: bool(value)}))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startup": self.startup,
            "run_elevated": self.run_elevated,
            "theme": self.theme,
            "enabled": self.enabled.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneralSettings":
        return cls(
            startup=bool(data.get("startup", False)),
            run_elevated=bool(data.get("run_elevated", False)),
            theme=str(data.get("theme", "system")),
            enabled=EnabledModules.from_dict(data.get("enabled", {})),
        )


@dataclass(frozen=True)
class OutgoingGeneralSettings:
    """Message sent to the host when general settings change."""

    general: GeneralSettings

    def to_json(self) -> str:
        return json.dumps({"general": self.general.to_dict()})

    def __str__(self) -> str:
        return self.to_json()
