from __future__ import annotations
from enum import IntEnum
from typing import Dict, Optional

class ResizeFit(IntEnum):
    FILL = 0     # cover then crop center
    FIT = 1      # keep aspect ratio inside the box
    STRETCH = 2  # direct resize

class ResizeUnit(IntEnum):
    CENTIMETER = 0
    INCH = 1
    PERCENT = 2
    PIXEL = 3

class PngInterlaceOption(IntEnum):
    DEFAULT = 0
    ON = 1
    OFF = 2

class TiffCompressOption(IntEnum):
    DEFAULT = 0
    NONE = 1
    CCITT3 = 2
    CCITT4 = 3
    LZW = 4
    RLE = 5
    ZIP = 6

class Encoder(IntEnum):
    PNG = 0
    BITMAP = 1
    JPEG = 2
    TIFF = 3
    WMP = 4  # shown as the second TIFF entry in the panel
    GIF = 5

ENCODER_GUIDS: Dict[Encoder, str] = {
    Encoder.PNG: "1b7cfaf4-713f-473c-bbcd-6137425faeaf",
    Encoder.BITMAP: "0af1d87e-fcfe-4188-bdeb-a7906471cbe3",
    Encoder.JPEG: "19e4a5aa-5662-4fc5-a0c0-1758028e1057",
    Encoder.TIFF: "163bcc30-e2e9-4f0b-961d-a3e9fdb788a3",
    Encoder.WMP: "57a37caa-367a-4540-916b-f183c5093a4b",
    Encoder.GIF: "1f8a5601-7d4d-4cbd-9c82-1bc8d4eeb9a5",
}

_GUID_TO_INDEX: Dict[str, int] = {guid: int(enc) for enc, guid in ENCODER_GUIDS.items()}

def get_encoder_guid(index: int) -> Optional[str]:
    """GUID string for an encoder index, or None for anything outside 0-5."""
    try:
        return ENCODER_GUIDS[Encoder(index)]
    except ValueError:
        return None

def get_encoder_index(guid: Optional[str]) -> int:
    """Encoder index for a GUID string, -1 when the string is not in the table."""
    return _GUID_TO_INDEX.get(guid, -1) if guid is not None else -1
