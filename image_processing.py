# image_processing.py
"""
Manual point-processing methods for BMP images.
All operations mutate the image in place and work on both depths:
- 8-bit images: every byte of the padded buffer
- 24-bit images: every channel of every pixel
Histogram equalization runs on the Y channel for 24-bit images and directly
on the samples for 8-bit images.
"""

import logging
import math
from typing import List, Optional, Tuple

from bmp_image import Bmp8Image, Bmp24Image, DivisionGuard, is_allocated

logger = logging.getLogger(__name__)

LEVELS = 256


def clip8(x: int) -> int:
    return max(0, min(255, x))


def round_half_away(x: float) -> int:
    """Round like C's round(): halves go away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _usable(img, operation: str) -> bool:
    if not is_allocated(img):
        logger.warning("%s skipped: invalid image", operation)
        return False
    return True


# ---------------------------------------------------------------------
# 1. Negative Transformation
# ---------------------------------------------------------------------
def negative(img):
    """Negative transformation: s = 255 - r (for each sample)."""
    if not _usable(img, "Negative"):
        return
    if isinstance(img, Bmp8Image):
        data = img.data
        for i in range(len(data)):
            data[i] = 255 - data[i]
        return
    for row in img.data:
        for x, (r, g, b) in enumerate(row):
            row[x] = (255 - r, 255 - g, 255 - b)


# ---------------------------------------------------------------------
# 2. Brightness
# ---------------------------------------------------------------------
def brightness(img, value: int):
    """Add `value` (-255..255) to every sample, saturating to [0, 255]."""
    if not _usable(img, "Brightness"):
        return
    if isinstance(img, Bmp8Image):
        data = img.data
        for i in range(len(data)):
            data[i] = clip8(data[i] + value)
        return
    for row in img.data:
        for x, (r, g, b) in enumerate(row):
            row[x] = (clip8(r + value), clip8(g + value), clip8(b + value))


# ---------------------------------------------------------------------
# 3. Threshold (Black/White), 8-bit only
# ---------------------------------------------------------------------
def threshold(img, t: int):
    """Samples >= t become 255, everything else 0."""
    if not _usable(img, "Threshold"):
        return
    if not isinstance(img, Bmp8Image):
        logger.warning("Threshold only applies to 8-bit images")
        return
    data = img.data
    for i in range(len(data)):
        data[i] = 255 if data[i] >= t else 0


# ---------------------------------------------------------------------
# 4. Grayscale, 24-bit only
# ---------------------------------------------------------------------
def grayscale(img):
    """Convert to grayscale using s = (R + G + B) // 3."""
    if not _usable(img, "Grayscale"):
        return
    if not isinstance(img, Bmp24Image):
        logger.warning("Grayscale only applies to 24-bit images")
        return
    for row in img.data:
        for x, (r, g, b) in enumerate(row):
            s = (r + g + b) // 3
            row[x] = (s, s, s)


# ---------------------------------------------------------------------
# 5. Histogram Equalization
# ---------------------------------------------------------------------
def compute_histogram(img: Bmp8Image) -> Optional[List[int]]:
    """Histogram of an 8-bit image; row padding is not counted."""
    if not is_allocated(img):
        return None
    hist = [0] * LEVELS
    row_size, width, data = img.row_size, img.width, img.data
    for y in range(img.height):
        start = y * row_size
        for v in data[start:start + width]:
            hist[v] += 1
    return hist


def compute_cdf(hist: List[int], total: int) -> List[int]:
    """
    Equalization lookup table from a histogram:
        map[i] = round((cdf[i] - cdf_min) / (total - cdf_min) * 255)
    Raises DivisionGuard when total == cdf_min.
    """
    cdf = [0] * LEVELS
    cdf[0] = hist[0]
    for i in range(1, LEVELS):
        cdf[i] = cdf[i - 1] + hist[i]

    cdf_min = next((c for c in cdf if c > 0), 0)
    if total == cdf_min:
        raise DivisionGuard(f"cdf_min equals pixel count ({total})")

    # levels below the first populated one clamp to 0
    return [clip8(round_half_away(max(0, c - cdf_min) / (total - cdf_min) * 255.0))
            for c in cdf]


def rgb_to_yuv(r: int, g: int, b: int) -> Tuple[float, float, float]:
    y = 0.299 * r + 0.587 * g + 0.114 * b
    u = -0.14713 * r - 0.28886 * g + 0.436 * b
    v = 0.615 * r - 0.51499 * g - 0.10001 * b
    return y, u, v


def yuv_to_rgb(y: float, u: float, v: float) -> Tuple[int, int, int]:
    r = round_half_away(y + 1.13983 * v)
    g = round_half_away(y - 0.39465 * u - 0.58060 * v)
    b = round_half_away(y + 2.03211 * u)
    return clip8(r), clip8(g), clip8(b)


def luminance_level(r: int, g: int, b: int) -> int:
    return clip8(round_half_away(rgb_to_yuv(r, g, b)[0]))


def compute_luminance_histogram(img: Bmp24Image) -> Optional[List[int]]:
    if not is_allocated(img):
        return None
    hist = [0] * LEVELS
    for row in img.data:
        for (r, g, b) in row:
            hist[luminance_level(r, g, b)] += 1
    return hist


def _equalize8(img: Bmp8Image):
    lut = compute_cdf(compute_histogram(img), img.width * img.height)
    row_size, width, data = img.row_size, img.width, img.data
    for y in range(img.height):
        start = y * row_size
        for i in range(start, start + width):
            data[i] = lut[data[i]]


def _equalize24(img: Bmp24Image):
    lut = compute_cdf(compute_luminance_histogram(img), img.width * img.height)
    for row in img.data:
        for x, (r, g, b) in enumerate(row):
            y, u, v = rgb_to_yuv(r, g, b)
            # keep U and V, replace only the luminance
            row[x] = yuv_to_rgb(lut[clip8(round_half_away(y))], u, v)


def equalize(img):
    """Histogram equalization, in place. Degenerate images are left untouched."""
    if not _usable(img, "Equalization"):
        return
    try:
        if isinstance(img, Bmp8Image):
            _equalize8(img)
        else:
            _equalize24(img)
    except DivisionGuard as e:
        logger.warning("Equalization skipped: %s", e)
