import os
from pathlib import Path

import pytest
from PIL import Image

from imageresizer.imaging.encoding import format_file_name, resize_file, save_options
from imageresizer.models.enums import ENCODER_GUIDS, Encoder, ResizeFit, TiffCompressOption
from imageresizer.models.settings import ImageResizerProperties, ImageSize


def _props(encoder: Encoder, **kwargs) -> ImageResizerProperties:
    return ImageResizerProperties(fallback_encoder=ENCODER_GUIDS[encoder], **kwargs)


def test_jpeg_options_carry_quality():
    assert save_options(_props(Encoder.JPEG, jpeg_quality_level=70)) == {"format": "JPEG", "quality": 70}


def test_tiff_compression_mapping():
    assert save_options(_props(Encoder.TIFF, tiff_compress_option=int(TiffCompressOption.LZW))) == {
        "format": "TIFF", "compression": "tiff_lzw"}
    assert save_options(_props(Encoder.TIFF)) == {"format": "TIFF"}


def test_other_encoders():
    assert save_options(_props(Encoder.PNG)) == {"format": "PNG"}
    assert save_options(_props(Encoder.BITMAP)) == {"format": "BMP"}
    assert save_options(_props(Encoder.GIF)) == {"format": "GIF"}


def test_unsupported_or_unknown_encoder():
    with pytest.raises(ValueError):
        save_options(_props(Encoder.WMP))
    with pytest.raises(ValueError):
        save_options(ImageResizerProperties(fallback_encoder="bogus"))


def test_file_name_template():
    size = ImageSize(name="Small", width=854, height=480)
    assert format_file_name("%1 (%2)", "holiday", size, (640, 480)) == "holiday (Small)"
    assert format_file_name("%1_%3x%4_%5x%6", "a", size, (640, 480)) == "a_854x480_640x480"
    assert format_file_name("%3", "a", ImageSize(width=2.5), (1, 1)) == "2.5"


def test_resize_file_writes_jpeg(tmp_path: Path):
    src = tmp_path / "in.png"
    Image.new("RGBA", (400, 300), (10, 20, 30, 255)).save(src)
    size = ImageSize(name="Small", fit=ResizeFit.FIT, width=200, height=200)

    out = resize_file(src, tmp_path / "out", size, _props(Encoder.JPEG))

    assert out.name == "in (Small).jpg"
    with Image.open(out) as im:
        assert im.format == "JPEG"
        assert im.size == (200, 150)


def test_resize_file_fill_crops_and_avoids_overwrite(tmp_path: Path):
    src = tmp_path / "pic.png"
    Image.new("RGB", (400, 300), (200, 0, 0)).save(src)
    size = ImageSize(name="Square", fit=ResizeFit.FILL, width=100, height=100)
    props = _props(Encoder.PNG)

    first = resize_file(src, tmp_path, size, props)
    second = resize_file(src, tmp_path, size, props)

    assert first.name == "pic (Square).png"
    assert second.name == "pic (Square)_1.png"
    with Image.open(second) as im:
        assert im.size == (100, 100)


def test_keep_date_modified(tmp_path: Path):
    src = tmp_path / "old.png"
    Image.new("RGB", (50, 50)).save(src)
    os.utime(src, (1_000_000_000, 1_000_000_000))
    size = ImageSize(name="Tiny", width=10, height=10)

    kept = resize_file(src, tmp_path / "a", size, _props(Encoder.PNG, keep_date_modified=True))
    fresh = resize_file(src, tmp_path / "b", size, _props(Encoder.PNG))

    assert int(os.stat(kept).st_mtime) == 1_000_000_000
    assert int(os.stat(fresh).st_mtime) != 1_000_000_000


def test_missing_input(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        resize_file(tmp_path / "nope.png", tmp_path, ImageSize(), _props(Encoder.PNG))


def test_file_name_template_single_pass():
    size = ImageSize(name="Small%1", width=854, height=480)
    assert format_file_name("%1 (%2)", "report%2", size, (1, 1)) == "report%2 (Small%1)"
    assert format_file_name("%1", "50%6", size, (1, 2)) == "50%6"


@pytest.mark.parametrize("option", [TiffCompressOption.CCITT3, TiffCompressOption.CCITT4])
def test_ccitt_tiff_is_written_bilevel(tmp_path: Path, option):
    src = tmp_path / "scan.png"
    Image.new("RGB", (40, 30), (250, 250, 250)).save(src)
    props = _props(Encoder.TIFF, tiff_compress_option=int(option))

    out = resize_file(src, tmp_path / "out", ImageSize(name="Same"), props)

    with Image.open(out) as im:
        assert im.format == "TIFF"
        assert im.mode == "1"
        assert im.size == (40, 30)


def test_failed_save_leaves_no_partial_file(tmp_path: Path, monkeypatch):
    src = tmp_path / "in.png"
    Image.new("RGB", (20, 20)).save(src)
    out_dir = tmp_path / "out"

    def broken_save(self, fp, *args, **kwargs):
        Path(fp).write_bytes(b"partial")
        raise OSError("encoder error -2 when writing image file")

    monkeypatch.setattr(Image.Image, "save", broken_save)
    with pytest.raises(OSError):
        resize_file(src, out_dir, ImageSize(name="x"), _props(Encoder.PNG))
    assert list(out_dir.iterdir()) == []


def test_ignore_orientation_turns_the_box(tmp_path: Path):
    src = tmp_path / "portrait.png"
    Image.new("RGB", (300, 400)).save(src)
    size = ImageSize(name="Wide", fit=ResizeFit.FIT, width=200, height=100)

    turned = resize_file(src, tmp_path / "a", size, _props(Encoder.PNG, ignore_orientation=True))
    strict = resize_file(src, tmp_path / "b", size, _props(Encoder.PNG, ignore_orientation=False))

    with Image.open(turned) as im:
        assert im.size == (100, 133)
    with Image.open(strict) as im:
        assert im.size == (75, 100)


def test_replace_overwrites_source_in_its_own_format(tmp_path: Path):
    src = tmp_path / "photo.png"
    Image.new("RGB", (400, 300)).save(src)
    out_dir = tmp_path / "out"
    props = _props(Encoder.JPEG, replace=True)

    out = resize_file(src, out_dir, ImageSize(name="Small", width=200, height=150), props)

    assert out == src
    assert not out_dir.exists()
    with Image.open(src) as im:
        assert im.format == "PNG"
        assert im.size == (200, 150)
