#!/usr/bin/env python3
"""
bmpdecoder.py: manual BMP reader/writer (no Pillow)

Handles:
- 24-bit true color: field-decoded headers, bottom-up BGR scanlines
- 8-bit indexed: raw 54-byte header + 1024-byte palette kept as opaque blocks,
  payload kept as stored (row padding included)
Load functions return the image or None; save functions return True/False.
Failures are logged, never raised to the caller.
"""

import logging
import struct
from pathlib import Path
from typing import Optional, Union

from bmp_image import (
    BMP_MAGIC, BMP_HEADER_SIZE, BMP_COLOR_TABLE_SIZE, BITMAP_DEPTH,
    FILE_HEADER_SIZE, INFO_HEADER_SIZE, SUPPORTED_DEPTHS,
    BMPError, BMPFileNotFound, InvalidFormat, UnsupportedDepth,
    ShortRead, ShortWrite,
    BmpFileHeader, BmpInfoHeader, Bmp24Image, Bmp8Image,
    allocate_buffer,
)

logger = logging.getLogger(__name__)

BmpImage = Union[Bmp8Image, Bmp24Image]


# ------------------ Positioned I/O ------------------

def file_raw_read(position: int, size: int, n: int, fp) -> bytes:
    """Read n elements of `size` bytes at `position`. May return fewer bytes."""
    fp.seek(position)
    return fp.read(size * n)


def file_raw_write(position: int, buffer: bytes, fp) -> int:
    fp.seek(position)
    written = fp.write(buffer)
    return len(buffer) if written is None else written


def _read_exact(position: int, count: int, fp, what: str) -> bytes:
    data = file_raw_read(position, 1, count, fp)
    if len(data) != count:
        raise ShortRead(f"Expected {count} bytes of {what}, got {len(data)}")
    return data


def _write_exact(position: int, buffer: bytes, fp, what: str):
    written = file_raw_write(position, buffer, fp)
    if written != len(buffer):
        raise ShortWrite(f"Wrote {written} of {len(buffer)} bytes of {what}")


def _open(path, mode: str):
    try:
        return open(path, mode)
    except OSError as e:
        raise BMPFileNotFound(f"Cannot open {path}: {e}") from e


def _check_common(signature: int, depth: int, expected_depth: int,
                  planes: int, compression: int, width: int):
    if signature != BMP_MAGIC:
        raise InvalidFormat("Not a BMP file (missing 'BM' magic bytes)")
    if width < 0:
        raise InvalidFormat(f"Negative image width: {width}")
    if depth != expected_depth:
        raise UnsupportedDepth(f"Expected {expected_depth}-bit image, found {depth}-bit")
    if planes != 1:
        raise InvalidFormat(f"Invalid number of color planes: {planes}")
    if compression != 0:
        raise InvalidFormat(f"Compressed BMP not supported (compression={compression})")


# ------------------ Depth detection ------------------

def read_bit_depth(path) -> int:
    """Raw value of the 2-byte depth field at offset 28."""
    with _open(path, "rb") as fp:
        raw = file_raw_read(BITMAP_DEPTH, 2, 1, fp)
    if len(raw) != 2:
        raise ShortRead(f"{path} is too short to hold a BMP header")
    return struct.unpack("<H", raw)[0]


def detect_bit_depth(path) -> Optional[int]:
    """8 or 24 for a supported file, else None."""
    try:
        bits = read_bit_depth(path)
    except BMPError as e:
        logger.error("%s", e)
        return None
    logger.debug("Detected %d bits per pixel in %s", bits, path)
    return bits if bits in SUPPORTED_DEPTHS else None


# ------------------ 24-bit ------------------

def _read_bmp24(path) -> Bmp24Image:
    with _open(path, "rb") as fp:
        file_header = BmpFileHeader.from_bytes(file_raw_read(0, FILE_HEADER_SIZE, 1, fp))
        info_header = BmpInfoHeader.from_bytes(
            file_raw_read(FILE_HEADER_SIZE, INFO_HEADER_SIZE, 1, fp))
        _check_common(file_header.signature, info_header.bits, 24,
                      info_header.planes, info_header.compression, info_header.width)

        img = Bmp24Image.from_headers(file_header, info_header)
        width, offset = img.width, file_header.offset

        # Rows are addressed as width*3 bytes apart; no scanline padding.
        for y in range(img.height):
            disk_row = img.disk_row(y)
            row = _read_exact(offset + disk_row * width * 3, width * 3, fp,
                              f"pixel row {disk_row}")
            img.data[y] = [(row[x+2], row[x+1], row[x]) for x in range(0, width * 3, 3)]
    return img


def _write_bmp24(img: Bmp24Image, path):
    with _open(path, "wb") as fp:
        _write_exact(0, img.file_header.to_bytes(), fp, "file header")
        _write_exact(FILE_HEADER_SIZE, img.info_header.to_bytes(), fp, "info header")
        offset, width = img.file_header.offset, img.width
        for y, row in enumerate(img.data):
            disk_row = img.disk_row(y)
            out = bytearray(width * 3)
            for x, (r, g, b) in enumerate(row):
                out[x*3:x*3+3] = (b, g, r)
            _write_exact(offset + disk_row * width * 3, bytes(out), fp,
                         f"pixel row {disk_row}")


def bmp24_load(path) -> Optional[Bmp24Image]:
    try:
        img = _read_bmp24(path)
    except (BMPError, OSError) as e:
        logger.error("Failed to load 24-bit BMP %s: %s", path, e)
        return None
    logger.info("Loaded 24-bit BMP %s (%dx%d)", path, img.width, img.height)
    return img


def bmp24_save(img: Bmp24Image, path) -> bool:
    if not isinstance(img, Bmp24Image) or img.data is None:
        logger.error("Cannot save %s: invalid 24-bit image", path)
        return False
    try:
        _write_bmp24(img, path)
    except (BMPError, OSError) as e:
        logger.error("Failed to save 24-bit BMP %s: %s", path, e)
        return False
    logger.info("Saved 24-bit BMP %s", path)
    return True


# ------------------ 8-bit ------------------

def _read_bmp8(path) -> Bmp8Image:
    with _open(path, "rb") as fp:
        header = fp.read(BMP_HEADER_SIZE)
        if len(header) != BMP_HEADER_SIZE:
            raise ShortRead("Incomplete BMP header")
        img = Bmp8Image.from_raw(header, b"")
        _check_common(img.signature, img.color_depth, 8, img.planes, img.compression,
                      img.width)

        color_table = fp.read(BMP_COLOR_TABLE_SIZE)
        if len(color_table) != BMP_COLOR_TABLE_SIZE:
            raise ShortRead("Cannot read color table")
        img.color_table = color_table

        img.data = allocate_buffer(img.width, img.height)
        payload = fp.read(len(img.data))
        if len(payload) != len(img.data):
            raise ShortRead(f"Expected {len(img.data)} bytes of pixel data, got {len(payload)}")
        img.data[:] = payload
    return img


def _write_bmp8(img: Bmp8Image, path):
    with _open(path, "wb") as fp:
        for block, what in ((img.header, "header"),
                            (img.color_table, "color table"),
                            (bytes(img.data), "pixel data")):
            written = fp.write(block)
            if written != len(block):
                raise ShortWrite(f"Wrote {written} of {len(block)} bytes of {what}")


def bmp8_load(path) -> Optional[Bmp8Image]:
    try:
        img = _read_bmp8(path)
    except (BMPError, OSError) as e:
        logger.error("Failed to load 8-bit BMP %s: %s", path, e)
        return None
    logger.info("Loaded 8-bit BMP %s (%dx%d)", path, img.width, img.height)
    return img


def bmp8_save(img: Bmp8Image, path) -> bool:
    if not isinstance(img, Bmp8Image) or img.data is None:
        logger.error("Cannot save %s: invalid 8-bit image", path)
        return False
    try:
        _write_bmp8(img, path)
    except (BMPError, OSError) as e:
        logger.error("Failed to save 8-bit BMP %s: %s", path, e)
        return False
    logger.info("Saved 8-bit BMP %s", path)
    return True


# ------------------ Generic entry points ------------------

def load_bmp(path) -> Optional[BmpImage]:
    """Detect the depth of `path` and load it with the matching reader."""
    try:
        bits = read_bit_depth(path)
    except BMPError as e:
        logger.error("Failed to load BMP %s: %s", path, e)
        return None
    if bits == 8:
        return bmp8_load(path)
    if bits == 24:
        return bmp24_load(path)
    logger.error("%s: %d-bit images are not supported (only 8 and 24)", path, bits)
    return None


def save_bmp(img: BmpImage, path) -> bool:
    if isinstance(img, Bmp8Image):
        return bmp8_save(img, path)
    if isinstance(img, Bmp24Image):
        return bmp24_save(img, path)
    logger.error("Cannot save %s: not a BMP image", path)
    return False


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 2:
        print("Usage: python bmpdecoder.py <file.bmp>")
    else:
        image = load_bmp(Path(sys.argv[1]))
        if image is not None:
            print(f"Width: {image.width}")
            print(f"Height: {image.height}")
            print(f"Color Depth: {image.color_depth}")
