#!/usr/bin/env python3
"""
filters.py

Spatial domain filters for BMP images, applied by NxN convolution:
- Box blur
- Gaussian blur
- Outline
- Emboss
- Sharpen

Border policy differs by depth:
- 24-bit: every pixel is filtered; taps falling outside the image are skipped
- 8-bit: pixels closer than N//2 to an edge are left unchanged
"""

import logging
from typing import Optional, Sequence, Tuple, Union

from bmp_image import Bmp8Image, is_allocated

logger = logging.getLogger(__name__)

Kernel = Tuple[Tuple[float, ...], ...]

# ------------------ Kernels ------------------

BOX_BLUR: Kernel = tuple(tuple(1 / 9 for _ in range(3)) for _ in range(3))

GAUSSIAN_BLUR: Kernel = (
    (1 / 16, 2 / 16, 1 / 16),
    (2 / 16, 4 / 16, 2 / 16),
    (1 / 16, 2 / 16, 1 / 16),
)

OUTLINE: Kernel = (
    (-1.0, -1.0, -1.0),
    (-1.0, 8.0, -1.0),
    (-1.0, -1.0, -1.0),
)

EMBOSS: Kernel = (
    (-2.0, -1.0, 0.0),
    (-1.0, 1.0, 1.0),
    (0.0, 1.0, 2.0),
)

SHARPEN: Kernel = (
    (0.0, -1.0, 0.0),
    (-1.0, 5.0, -1.0),
    (0.0, -1.0, 0.0),
)

KERNELS = {
    "box_blur": BOX_BLUR,
    "gaussian_blur": GAUSSIAN_BLUR,
    "outline": OUTLINE,
    "emboss": EMBOSS,
    "sharpen": SHARPEN,
}


def saturate(x: float) -> int:
    """Clamp to [0, 255] then truncate toward zero."""
    return int(max(0.0, min(255.0, x)))


def _kernel_size(kernel: Sequence[Sequence[float]], kernel_size: Optional[int]) -> int:
    n = len(kernel) if kernel_size is None else kernel_size
    if n <= 0 or n % 2 == 0:
        raise ValueError(f"Kernel size must be odd, got {n}")
    if len(kernel) != n or any(len(row) != n for row in kernel):
        raise ValueError(f"Kernel must be {n}x{n}")
    return n


# ------------------ Convolution ------------------

def convolve(img, x: int, y: int, kernel: Kernel, kernel_size: int) -> Union[int, Tuple[int, int, int]]:
    """
    Weighted sum of the neighbourhood centred on (x, y).
    Returns an (r, g, b) tuple for 24-bit images, a single sample for 8-bit.
    Taps outside the image are skipped.
    """
    half = kernel_size // 2
    if isinstance(img, Bmp8Image):
        row_size, data = img.row_size, img.data
        acc = 0.0
        for j in range(-half, half + 1):
            yy = y + j
            if not 0 <= yy < img.height:
                continue
            for i in range(-half, half + 1):
                xx = x + i
                if 0 <= xx < img.width:
                    acc += data[yy * row_size + xx] * kernel[j + half][i + half]
        return saturate(acc)

    r_acc = g_acc = b_acc = 0.0
    for j in range(-half, half + 1):
        yy = y + j
        if not 0 <= yy < img.height:
            continue
        row = img.data[yy]
        for i in range(-half, half + 1):
            xx = x + i
            if 0 <= xx < img.width:
                w = kernel[j + half][i + half]
                r, g, b = row[xx]
                r_acc += r * w
                g_acc += g * w
                b_acc += b * w
    return saturate(r_acc), saturate(g_acc), saturate(b_acc)


def apply_filter(img, kernel: Kernel, kernel_size: Optional[int] = None):
    """Convolve the whole image with `kernel`; the result replaces the pixels at once."""
    n = _kernel_size(kernel, kernel_size)
    if not is_allocated(img):
        logger.warning("Filter skipped: invalid image")
        return

    if isinstance(img, Bmp8Image):
        half = n // 2
        out = bytearray(img.data)
        row_size = img.row_size
        for y in range(half, img.height - half):
            for x in range(half, img.width - half):
                out[y * row_size + x] = convolve(img, x, y, kernel, n)
        img.data = out
        return

    out = [[convolve(img, x, y, kernel, n) for x in range(img.width)]
           for y in range(img.height)]
    img.data = out


# ------------------ Named filters ------------------

def box_blur(img):
    apply_filter(img, BOX_BLUR, 3)


def gaussian_blur(img):
    apply_filter(img, GAUSSIAN_BLUR, 3)


def outline(img):
    apply_filter(img, OUTLINE, 3)


def emboss(img):
    apply_filter(img, EMBOSS, 3)


def sharpen(img):
    apply_filter(img, SHARPEN, 3)
