import struct

import pytest


def bmp24_bytes(rows, top_down=False, compression=0, magic=b"BM", bits=24):
    """Encode visual rows of (r, g, b), top row first, as a 24-bit BMP."""
    height = len(rows)
    width = len(rows[0]) if height else 0
    data_size = width * height * 3
    file_header = magic + struct.pack("<IHHI", 54 + data_size, 0, 0, 54)
    info_header = struct.pack("<IiiHHIIiiII", 40, width, -height if top_down else height,
                              1, bits, compression, data_size, 2835, 2835, 0, 0)
    disk_rows = rows if top_down else rows[::-1]
    payload = b"".join(bytes(c for (r, g, b) in row for c in (b, g, r)) for row in disk_rows)
    return file_header + info_header + payload


def gray_palette() -> bytes:
    return b"".join(bytes((i, i, i, 0)) for i in range(256))


def bmp8_bytes(rows, palette=None, compression=0, magic=b"BM", bits=8, top_down=False):
    """Encode visual rows of samples, top row first, as an 8-bit BMP with padded rows."""
    height = len(rows)
    width = len(rows[0]) if height else 0
    padding = (4 - width % 4) % 4
    disk_rows = rows if top_down else rows[::-1]
    payload = b"".join(bytes(row) + b"\x00" * padding for row in disk_rows)
    file_header = magic + struct.pack("<IHHI", 54 + 1024 + len(payload), 0, 0, 54 + 1024)
    info_header = struct.pack("<IiiHHIIiiII", 40, width, -height if top_down else height,
                              1, bits, compression,
                              len(payload), 2835, 2835, 256, 0)
    return file_header + info_header + (palette or gray_palette()) + payload


@pytest.fixture
def rgb_rows():
    return [
        [(10, 20, 30), (255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(1, 2, 3), (4, 5, 6), (7, 8, 9), (200, 100, 50)],
        [(0, 0, 0), (255, 255, 255), (128, 128, 128), (12, 34, 56)],
    ]


@pytest.fixture
def gray_rows():
    # width 3 -> one padding byte per row
    return [
        [0, 50, 100],
        [150, 200, 250],
        [30, 60, 90],
        [255, 128, 1],
    ]


@pytest.fixture
def write_file(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write


@pytest.fixture
def bmp24_path(write_file, rgb_rows):
    return write_file("color.bmp", bmp24_bytes(rgb_rows))


@pytest.fixture
def bmp8_path(write_file, gray_rows):
    return write_file("gray.bmp", bmp8_bytes(gray_rows))
