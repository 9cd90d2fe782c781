#!/usr/bin/env python3
"""
bmp_image.py

In-memory model of uncompressed BMP images:
- 14-byte file header and 40-byte info header (24-bit path)
- Opaque 54-byte header + 1024-byte color table (8-bit path)
- Pixel storage allocation / release
- Error types shared by the codec and the transforms
"""

from __future__ import annotations
import struct
from dataclasses import dataclass, field
from typing import List, Tuple, Optional

# ------------------ Format constants ------------------

BMP_MAGIC = 0x4D42            # "BM" read as little-endian uint16
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
BMP_HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_SIZE
BMP_COLOR_TABLE_SIZE = 1024   # 256 entries x BGRA

# Byte offsets of header fields, counted from the start of the file
BITMAP_MAGIC = 0x00
BITMAP_SIZE = 0x02
BITMAP_OFFSET = 0x0A
BITMAP_WIDTH = 0x12
BITMAP_HEIGHT = 0x16
BITMAP_PLANES = 0x1A
BITMAP_DEPTH = 0x1C
BITMAP_COMPRESSION = 0x1E
BITMAP_SIZE_RAW = 0x22

FILE_HEADER_FMT = "<HIHHI"
INFO_HEADER_FMT = "<IiiHHIIiiII"

SUPPORTED_DEPTHS = (8, 24)

Pixel = Tuple[int, int, int]
RGBRows = List[List[Pixel]]


# ------------------ Errors ------------------

class BMPError(Exception):
    """Base class for everything the codec and transforms can raise."""


class BMPFileNotFound(BMPError):
    pass


class InvalidFormat(BMPError):
    pass


class UnsupportedDepth(BMPError):
    pass


class ShortRead(BMPError):
    pass


class ShortWrite(BMPError):
    pass


class OutOfMemory(BMPError):
    pass


class DivisionGuard(BMPError):
    """Equalization is undefined when every pixel sits at the first level."""


# ------------------ Headers ------------------

@dataclass
class BmpFileHeader:
    signature: int
    size: int
    reserved1: int
    reserved2: int
    offset: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "BmpFileHeader":
        if len(data) != FILE_HEADER_SIZE:
            raise ShortRead("Incomplete BMP file header")
        return cls(*struct.unpack(FILE_HEADER_FMT, data))

    def to_bytes(self) -> bytes:
        return struct.pack(FILE_HEADER_FMT, self.signature, self.size,
                           self.reserved1, self.reserved2, self.offset)


@dataclass
class BmpInfoHeader:
    size: int
    width: int
    height: int
    planes: int
    bits: int
    compression: int
    imagesize: int
    xresolution: int
    yresolution: int
    ncolors: int
    importantcolors: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "BmpInfoHeader":
        if len(data) != INFO_HEADER_SIZE:
            raise ShortRead("Incomplete BMP info header")
        return cls(*struct.unpack(INFO_HEADER_FMT, data))

    def to_bytes(self) -> bytes:
        return struct.pack(INFO_HEADER_FMT, self.size, self.width, self.height,
                           self.planes, self.bits, self.compression,
                           self.imagesize, self.xresolution, self.yresolution,
                           self.ncolors, self.importantcolors)


# ------------------ Buffers ------------------

def padded_row_width(width: int) -> int:
    """Bytes per 8-bit scanline once padded to a multiple of 4."""
    return width + ((4 - width % 4) % 4)


def _blank_row(width: int) -> List[Pixel]:
    return [(0, 0, 0)] * width


def allocate_pixels(width: int, height: int) -> RGBRows:
    """Grid of black pixels, one list per visual row."""
    rows: RGBRows = []
    try:
        for _ in range(height):
            rows.append(_blank_row(width))
    except MemoryError:
        # drop the rows built so far before reporting
        rows.clear()
        raise OutOfMemory(f"Cannot allocate {width}x{height} pixel grid")
    return rows


def allocate_buffer(width: int, height: int) -> bytearray:
    try:
        return bytearray(height * padded_row_width(width))
    except MemoryError:
        raise OutOfMemory(f"Cannot allocate {width}x{height} sample buffer")


# ------------------ Images ------------------

@dataclass
class Bmp24Image:
    file_header: BmpFileHeader
    info_header: BmpInfoHeader
    width: int
    height: int
    color_depth: int = 24
    data: Optional[RGBRows] = None
    top_down: bool = False

    @classmethod
    def from_headers(cls, file_header: BmpFileHeader, info_header: BmpInfoHeader) -> "Bmp24Image":
        width = info_header.width
        height = abs(info_header.height)
        return cls(file_header, info_header, width, height,
                   color_depth=info_header.bits,
                   data=allocate_pixels(width, height),
                   top_down=info_header.height < 0)

    def disk_row(self, y: int) -> int:
        """On-disk scanline index holding visual row y."""
        return y if self.top_down else self.height - 1 - y

    def free(self):
        self.data = None


@dataclass
class Bmp8Image:
    header: bytes
    color_table: bytes
    width: int
    height: int
    color_depth: int = 8
    data: Optional[bytearray] = field(default=None, repr=False)
    top_down: bool = False

    @classmethod
    def from_raw(cls, header: bytes, color_table: bytes) -> "Bmp8Image":
        width, height = struct.unpack_from("<ii", header, BITMAP_WIDTH)
        depth = struct.unpack_from("<H", header, BITMAP_DEPTH)[0]
        return cls(bytes(header), bytes(color_table), width, abs(height), depth,
                   top_down=height < 0)

    # Fields decoded from the raw header on demand; the header itself is
    # never rewritten.
    @property
    def signature(self) -> int:
        return struct.unpack_from("<H", self.header, BITMAP_MAGIC)[0]

    @property
    def file_size(self) -> int:
        return struct.unpack_from("<I", self.header, BITMAP_SIZE)[0]

    @property
    def data_offset(self) -> int:
        return struct.unpack_from("<I", self.header, BITMAP_OFFSET)[0]

    @property
    def planes(self) -> int:
        return struct.unpack_from("<H", self.header, BITMAP_PLANES)[0]

    @property
    def compression(self) -> int:
        return struct.unpack_from("<I", self.header, BITMAP_COMPRESSION)[0]

    @property
    def data_size(self) -> int:
        return struct.unpack_from("<I", self.header, BITMAP_SIZE_RAW)[0]

    @property
    def row_padding(self) -> int:
        return (4 - self.width % 4) % 4

    @property
    def row_size(self) -> int:
        return padded_row_width(self.width)

    @property
    def palette(self) -> List[Pixel]:
        t = self.color_table
        return [(t[i+2], t[i+1], t[i]) for i in range(0, BMP_COLOR_TABLE_SIZE, 4)]

    def free(self):
        self.data = None


def is_allocated(img) -> bool:
    return isinstance(img, (Bmp8Image, Bmp24Image)) and img.data is not None
