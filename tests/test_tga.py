# tests/test_tga.py
import io

import numpy as np
import pytest
from PIL import Image

import btfslice.tga as tga
from btfslice.color import encode_pixels, to_color
from btfslice.constants import TGAImageType
from btfslice.raster import PixelBuffer
from btfslice.tga import (TGAHeader, TGAWriteError, read_tga_header,
                          rgba_to_bgra, save_tga, write_tga)

RED = to_color((1.0, 0.0, 0.0))
GREEN = to_color((0.0, 1.0, 0.0))


def _buffer(words, width, height):
    buffer = PixelBuffer(width, height)
    buffer.pixels[:] = words
    return buffer


def test_header_layout():
    packed = TGAHeader.truecolor(2, 1).pack()
    assert packed == bytes([0, 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 1, 0, 32, 0])


def test_header_dimensions_are_little_endian():
    packed = TGAHeader.truecolor(300, 513).pack()
    assert len(packed) == 18
    assert packed[12:14] == (300).to_bytes(2, "little")
    assert packed[14:16] == (513).to_bytes(2, "little")


def test_header_unpack():
    header = TGAHeader.unpack(TGAHeader.truecolor(640, 480).pack())
    assert header.image_type == TGAImageType.UNCOMPRESSED_TRUE_COLOR
    assert (header.width, header.height, header.pixel_depth) == (640, 480, 32)
    with pytest.raises(ValueError):
        TGAHeader.unpack(b"\x00" * 17)


@pytest.mark.parametrize("width,height", [(65536, 1), (1, 70000), (-1, 1)])
def test_header_rejects_dimensions_beyond_16_bits(width, height):
    with pytest.raises(TGAWriteError):
        TGAHeader.truecolor(width, height)


def test_channel_reorder_pure_red():
    assert list(rgba_to_bgra(np.array([RED], dtype="<u4"))) == [0x00, 0x00, 0xFF, 0xFF]


def test_channel_reorder_black_and_white():
    words = encode_pixels(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]], dtype=np.float32))
    assert list(rgba_to_bgra(words)) == [0, 0, 0, 255, 255, 255, 255, 255]


def test_channel_reorder_leaves_source_untouched():
    word = 0x44332211
    source = np.array([word], dtype="<u4")
    assert list(rgba_to_bgra(source)) == [0x33, 0x22, 0x11, 0x44]
    assert int(source[0]) == word


def test_write_two_pixel_scenario():
    stream = io.BytesIO()
    size = write_tga(stream, 2, 1, _buffer([RED, GREEN], 2, 1))
    data = stream.getvalue()
    assert size == len(data) == 18 + 8
    header = TGAHeader.unpack(data)
    assert (header.width, header.height, header.pixel_depth, header.image_type) == (2, 1, 32, 2)
    assert data[18:] == bytes.fromhex("0000FFFF00FF00FF")


def test_write_rejects_pixel_count_mismatch():
    with pytest.raises(ValueError):
        write_tga(io.BytesIO(), 2, 2, np.zeros(3, dtype="<u4"))


def test_short_write_is_an_error():
    class ShortStream(io.BytesIO):
        def write(self, data):
            super().write(data[:-1])
            return len(data) - 1

    with pytest.raises(TGAWriteError, match="Short write"):
        write_tga(ShortStream(), 1, 1, np.array([RED], dtype="<u4"))


@pytest.mark.parametrize("width,height", [(1, 1), (3, 5), (17, 2)])
def test_file_size(tmp_path, width, height):
    path = tmp_path / "out.tga"
    words = np.full(width * height, GREEN, dtype="<u4")
    size = save_tga(path, width, height, _buffer(words, width, height))
    assert size == 18 + width * height * 4
    assert path.stat().st_size == size
    header = read_tga_header(path)
    assert (header.width, header.height) == (width, height)


def test_existing_file_is_truncated(tmp_path):
    path = tmp_path / "out.tga"
    path.write_bytes(b"x" * 1000)
    save_tga(path, 1, 1, np.array([RED], dtype="<u4"))
    assert path.stat().st_size == 22


def test_open_failure(tmp_path):
    path = tmp_path / "missing_dir" / "out.tga"
    with pytest.raises(TGAWriteError):
        save_tga(path, 1, 1, np.array([RED], dtype="<u4"))
    assert not path.exists()


def _fail_on_pixels(stream, data, what):
    if what == "pixel data":
        raise TGAWriteError("disk full")
    stream.write(data)


def test_partial_file_removed_on_write_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(tga, "_write_all", _fail_on_pixels)
    path = tmp_path / "out.tga"
    with pytest.raises(TGAWriteError, match="disk full"):
        save_tga(path, 1, 1, np.array([RED], dtype="<u4"))
    assert not path.exists()


def test_partial_file_kept_when_requested(tmp_path, monkeypatch):
    monkeypatch.setattr(tga, "_write_all", _fail_on_pixels)
    path = tmp_path / "out.tga"
    with pytest.raises(TGAWriteError):
        save_tga(path, 1, 1, np.array([RED], dtype="<u4"), remove_partial=False)
    assert path.stat().st_size == 18


def test_released_buffer_cannot_be_saved(tmp_path):
    buffer = _buffer([RED], 1, 1)
    buffer.release()
    path = tmp_path / "out.tga"
    with pytest.raises(TGAWriteError):
        save_tga(path, 1, 1, buffer)
    assert not path.exists()


def test_pillow_reads_written_file(tmp_path):
    path = tmp_path / "out.tga"
    save_tga(path, 2, 1, _buffer([RED, GREEN], 2, 1))
    with Image.open(path, formats=["TGA"]) as im:
        assert im.format == "TGA"
        assert im.size == (2, 1)
        rgb = im.convert("RGB")
        assert rgb.getpixel((0, 0)) == (255, 0, 0)
        assert rgb.getpixel((1, 0)) == (0, 255, 0)


def test_bad_arguments_leave_existing_file_alone(tmp_path):
    path = tmp_path / "out.tga"
    path.write_bytes(b"previous image")
    with pytest.raises(TGAWriteError):
        save_tga(path, 2, 2, np.zeros(3, dtype="<u4"))
    released = _buffer([RED], 1, 1)
    released.release()
    with pytest.raises(TGAWriteError):
        save_tga(path, 1, 1, released)
    assert path.read_bytes() == b"previous image"
