# imageresizer/viewmodels/image_resizer_view_model.py
# Binding layer between the Image Resizer settings panel and settings.json.
# - Every property setter persists the whole record, then notifies
# - Enabling/disabling the module goes to the host as a general settings message
# - Presets keep stable ids; edits come back as ImageSize copies via update_size()

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import Property, QObject, Signal

from imageresizer.config import DEFAULT_MODULE_NAME, SIZES_FILE
from imageresizer.models.enums import (
    Encoder,
    PngInterlaceOption,
    TiffCompressOption,
    get_encoder_guid,
    get_encoder_index,
)
from imageresizer.models.settings import (
    GeneralSettings,
    ImageResizerSettings,
    ImageSize,
    OutgoingGeneralSettings,
    sizes_to_json,
)
from imageresizer.storage.settings_utils import SettingsUtils

log = logging.getLogger("image-resizer.viewmodel")


class SizeNotFoundError(LookupError):
    """No preset with the requested id."""


class ImageResizerViewModel(QObject):
    """
    Observable settings of the Image Resizer module.

    The host owns the general settings; this object only ever holds a snapshot
    of them. When the enabled flag changes a new snapshot is emitted through
    ``generalSettingsChanged`` and sent to the host with ``send_config_msg``.
    """

    propertyChanged = Signal(str)  # property name
    generalSettingsChanged = Signal(object)  # new GeneralSettings snapshot

    isEnabledChanged = Signal(bool)
    sizesChanged = Signal()
    jpegQualityLevelChanged = Signal(int)
    pngInterlaceOptionChanged = Signal(int)
    tiffCompressOptionChanged = Signal(int)
    fileNameChanged = Signal(str)
    keepDateModifiedChanged = Signal(bool)
    encoderChanged = Signal(int)

    def __init__(
        self,
        settings_utils: SettingsUtils,
        general_settings: GeneralSettings,
        send_config_msg: Callable[[str], int],
        module_name: str = DEFAULT_MODULE_NAME,
        *,
        enabled_field: str = "image_resizer",
        write_sizes_file: bool = True,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        if settings_utils is None:
            raise ValueError("settings_utils is required")

        self._settings_utils = settings_utils
        self._module_name = module_name
        self._enabled_field = enabled_field
        self._write_sizes_file = write_sizes_file
        self._general_settings = general_settings
        self._send_config_msg = send_config_msg

        try:
            data = settings_utils.get_settings(module_name)
            self._settings = ImageResizerSettings.from_dict(data)
        except Exception as e:
            log.warning("Could not load %s settings (%s), writing defaults", module_name, e)
            self._settings = ImageResizerSettings(name=module_name)
            self._save()

        props = self._settings.properties
        self._is_enabled = general_settings.is_module_enabled(enabled_field)
        self._sizes: List[ImageSize] = props.sizes
        self._jpeg_quality_level = props.jpeg_quality_level
        self._png_interlace_option = props.png_interlace_option
        self._tiff_compress_option = props.tiff_compress_option
        self._file_name = props.file_name
        self._keep_date_modified = props.keep_date_modified
        self._encoder = get_encoder_index(props.fallback_encoder)

        for i, size in enumerate(self._sizes):
            size.id = i

    # ---------------------- host-facing state ----------------------
    @property
    def general_settings(self) -> GeneralSettings:
        return self._general_settings

    @property
    def settings(self) -> ImageResizerSettings:
        return self._settings

    @property
    def module_name(self) -> str:
        return self._module_name

    # ---------------------- enabled ----------------------
    def _get_is_enabled(self) -> bool:
        return self._is_enabled

    def _set_is_enabled(self, value: bool) -> None:
        value = bool(value)
        if value == self._is_enabled:
            return
        self._is_enabled = value
        self._general_settings = self._general_settings.with_module_enabled(self._enabled_field, value)
        message = OutgoingGeneralSettings(self._general_settings).to_json()
        status = self._send_config_msg(message)
        log.info("%s %s (host replied %s)", self._module_name, "enabled" if value else "disabled", status)
        self.generalSettingsChanged.emit(self._general_settings)
        self._notify("isEnabled", self.isEnabledChanged, value)

    isEnabled = Property(bool, _get_is_enabled, _set_is_enabled, notify=isEnabledChanged)  # type: ignore[arg-type]

    # ---------------------- presets ----------------------
    def _get_sizes(self) -> List[ImageSize]:
        return self._sizes

    def _set_sizes(self, value: List[ImageSize]) -> None:
        self.save_image_sizes(value)
        self._sizes = value
        self._notify("sizes", self.sizesChanged)

    sizes = Property(list, _get_sizes, _set_sizes, notify=sizesChanged)  # type: ignore[arg-type]

    # ---------------------- scalar settings ----------------------
    def _get_jpeg_quality_level(self) -> int:
        return self._jpeg_quality_level

    def _set_jpeg_quality_level(self, value: int) -> None:
        value = int(value)
        if not 0 <= value <= 100:
            raise ValueError(f"JPEG quality must be between 0 and 100, got {value}")
        if value == self._jpeg_quality_level:
            return
        self._jpeg_quality_level = value
        self._settings.properties.jpeg_quality_level = value
        self._save()
        self._notify("jpegQualityLevel", self.jpegQualityLevelChanged, value)

    jpegQualityLevel = Property(int, _get_jpeg_quality_level, _set_jpeg_quality_level, notify=jpegQualityLevelChanged)  # type: ignore[arg-type]

    def _get_png_interlace_option(self) -> int:
        return self._png_interlace_option

    def _set_png_interlace_option(self, value: int) -> None:
        value = int(PngInterlaceOption(value))
        if value == self._png_interlace_option:
            return
        self._png_interlace_option = value
        self._settings.properties.png_interlace_option = value
        self._save()
        self._notify("pngInterlaceOption", self.pngInterlaceOptionChanged, value)

    pngInterlaceOption = Property(int, _get_png_interlace_option, _set_png_interlace_option, notify=pngInterlaceOptionChanged)  # type: ignore[arg-type]

    def _get_tiff_compress_option(self) -> int:
        return self._tiff_compress_option

    def _set_tiff_compress_option(self, value: int) -> None:
        value = int(TiffCompressOption(value))
        if value == self._tiff_compress_option:
            return
        self._tiff_compress_option = value
        self._settings.properties.tiff_compress_option = value
        self._save()
        self._notify("tiffCompressOption", self.tiffCompressOptionChanged, value)

    tiffCompressOption = Property(int, _get_tiff_compress_option, _set_tiff_compress_option, notify=tiffCompressOptionChanged)  # type: ignore[arg-type]

    def _get_file_name(self) -> str:
        return self._file_name

    def _set_file_name(self, value: str) -> None:
        # blank templates are dropped without complaint
        if not value or not value.strip():
            return
        if value == self._file_name:
            return
        self._file_name = value
        self._settings.properties.file_name = value
        self._save()
        self._notify("fileName", self.fileNameChanged, value)

    fileName = Property(str, _get_file_name, _set_file_name, notify=fileNameChanged)  # type: ignore[arg-type]

    def _get_keep_date_modified(self) -> bool:
        return self._keep_date_modified

    def _set_keep_date_modified(self, value: bool) -> None:
        value = bool(value)
        if value == self._keep_date_modified:
            return
        self._keep_date_modified = value
        self._settings.properties.keep_date_modified = value
        self._save()
        self._notify("keepDateModified", self.keepDateModifiedChanged, value)

    keepDateModified = Property(bool, _get_keep_date_modified, _set_keep_date_modified, notify=keepDateModifiedChanged)  # type: ignore[arg-type]

    def _get_encoder(self) -> int:
        return self._encoder

    def _set_encoder(self, value: int) -> None:
        value = int(Encoder(value))
        if value == self._encoder:
            return
        self._encoder = value
        if self._write_sizes_file:
            self._save_sizes_file(self._settings.properties.sizes)
        self._settings.properties.fallback_encoder = get_encoder_guid(value)
        self._save()
        self._notify("encoder", self.encoderChanged, value)

    encoder = Property(int, _get_encoder, _set_encoder, notify=encoderChanged)  # type: ignore[arg-type]

    # ---------------------- preset list operations ----------------------
    def add_row(self) -> ImageSize:
        """Append an empty preset with the next free id and persist the list."""
        sizes = self._sizes
        next_id = max(s.id for s in sizes) + 1 if sizes else 0
        new_size = ImageSize(id=next_id)
        sizes.append(new_size)
        self.save_image_sizes(sizes)
        self._notify("sizes", self.sizesChanged)
        return new_size

    def delete_image_size(self, size_id: int) -> None:
        """Remove the preset with ``size_id``. Remaining ids are left as they are."""
        size = self._find_size(size_id)
        self._sizes.remove(size)
        self.save_image_sizes(self._sizes)
        self._notify("sizes", self.sizesChanged)

    def update_size(self, edited: ImageSize) -> ImageSize:
        """Apply an edited preset copy (see ``ImageSize.edited``) to the list entry with the same id."""
        target = self._find_size(edited.id)
        target.update(edited)
        self.save_image_sizes(self._sizes)
        self._notify("sizes", self.sizesChanged)
        return target

    def save_image_sizes(self, sizes: List[ImageSize]) -> None:
        if self._write_sizes_file:
            self._save_sizes_file(sizes)
        self._settings.properties.sizes = sizes
        self._save()

    # ---------------------- encoder lookup ----------------------
    @staticmethod
    def get_encoder_guid(value: int) -> Optional[str]:
        return get_encoder_guid(value)

    @staticmethod
    def get_encoder_index(guid: Optional[str]) -> int:
        return get_encoder_index(guid)

    # ---------------------- helpers ----------------------
    def _find_size(self, size_id: int) -> ImageSize:
        for size in self._sizes:
            if size.id == size_id:
                return size
        raise SizeNotFoundError(f"No image size with id {size_id}")

    def _save(self) -> None:
        self._settings_utils.save_settings(self._settings.to_json(), self._module_name)

    def _save_sizes_file(self, sizes: List[ImageSize]) -> None:
        self._settings_utils.save_settings(sizes_to_json(sizes), self._module_name, SIZES_FILE)

    def _notify(self, name: str, signal, *args) -> None:
        signal.emit(*args)
        self.propertyChanged.emit(name)
