import pytest

import bmp_image
from bmp_image import (
    BmpFileHeader, BmpInfoHeader, Bmp8Image, OutOfMemory, ShortRead,
    allocate_buffer, allocate_pixels, is_allocated, padded_row_width,
)
from conftest import bmp8_bytes, bmp24_bytes


@pytest.mark.parametrize("width, expected", [(1, 4), (3, 4), (4, 4), (5, 8), (640, 640)])
def test_padded_row_width(width, expected):
    assert padded_row_width(width) == expected


def test_headers_decode_fixed_layout():
    raw = bmp24_bytes([[(1, 2, 3)] * 4] * 2)
    fh = BmpFileHeader.from_bytes(raw[:14])
    ih = BmpInfoHeader.from_bytes(raw[14:54])
    assert (fh.signature, fh.size, fh.offset) == (0x4D42, 54 + 24, 54)
    assert (ih.width, ih.height, ih.planes, ih.bits, ih.compression) == (4, 2, 1, 24, 0)
    assert fh.to_bytes() + ih.to_bytes() == raw[:54]


def test_negative_height_is_signed():
    raw = bmp24_bytes([[(0, 0, 0)] * 4] * 3, top_down=True)
    assert BmpInfoHeader.from_bytes(raw[14:54]).height == -3


def test_short_header_raises():
    with pytest.raises(ShortRead):
        BmpFileHeader.from_bytes(b"BM")
    with pytest.raises(ShortRead):
        BmpInfoHeader.from_bytes(b"\x00" * 39)


def test_allocation_sizes():
    grid = allocate_pixels(5, 3)
    assert len(grid) == 3 and all(len(row) == 5 for row in grid)
    grid[0][0] = (1, 1, 1)
    assert grid[1][0] == (0, 0, 0)
    assert len(allocate_buffer(5, 3)) == 3 * 8


def test_bmp8_raw_header_fields():
    raw = bmp8_bytes([[1, 2, 3, 4, 5]] * 2)
    img = Bmp8Image.from_raw(raw[:54], raw[54:1078])
    assert (img.width, img.height, img.color_depth) == (5, 2, 8)
    assert img.row_padding == 3
    assert img.data_size == 16
    assert len(img.palette) == 256
    assert not is_allocated(img)
    img.data = allocate_buffer(img.width, img.height)
    assert is_allocated(img)
    img.free()
    assert not is_allocated(img)


def test_bmp8_raw_header_file_size(gray_rows):
    raw = bmp8_bytes(gray_rows)
    img = Bmp8Image.from_raw(raw[:54], raw[54:1078])
    assert img.file_size == len(raw) == 54 + 1024 + 16


def test_bmp8_raw_header_top_down(gray_rows):
    raw = bmp8_bytes(gray_rows, top_down=True)
    img = Bmp8Image.from_raw(raw[:54], raw[54:1078])
    assert img.top_down
    assert img.height == 4
    assert img.data_size == 16


def test_allocate_pixels_out_of_memory(monkeypatch):
    built = []

    def failing_row(width):
        if len(built) == 2:
            raise MemoryError
        built.append(width)
        return [(0, 0, 0)] * width

    monkeypatch.setattr(bmp_image, "_blank_row", failing_row)
    with pytest.raises(OutOfMemory):
        allocate_pixels(4, 3)


def test_allocate_buffer_out_of_memory(monkeypatch):
    def failing_bytearray(*args):
        raise MemoryError

    monkeypatch.setattr(bmp_image, "bytearray", failing_bytearray, raising=False)
    with pytest.raises(OutOfMemory):
        allocate_buffer(4, 3)
