"""
Rendering helpers for the viewer: BMP images to Pillow images, histograms
to bar-chart images. Nothing here touches Tk, so it can run headless.
"""

from io import BytesIO
from typing import Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

from bmp_image import Bmp8Image, RGBRows, is_allocated


def to_rgb_rows(img) -> RGBRows:
    """Visual rows of (r, g, b), top row first. 8-bit samples go through the palette."""
    if not is_allocated(img):
        return []
    if isinstance(img, Bmp8Image):
        palette = img.palette
        # 8-bit payload stays in disk order: bottom-up unless the height was negative
        order = range(img.height) if img.top_down else range(img.height - 1, -1, -1)
        rows = []
        for y in order:
            start = y * img.row_size
            rows.append([palette[v] for v in img.data[start:start + img.width]])
        return rows
    return [list(row) for row in img.data]


def to_pil_image(img) -> Image.Image:
    rows = to_rgb_rows(img)
    if not rows or not rows[0]:
        return Image.new("RGB", (1, 1))
    arr = np.array(rows, dtype=np.uint8)
    return Image.fromarray(arr)


def channel_histograms(img) -> Dict[str, List[int]]:
    rhist = [0]*256
    ghist = [0]*256
    bhist = [0]*256
    gray = [0]*256
    for row in to_rgb_rows(img):
        for (r, g, b) in row:
            rhist[r] += 1
            ghist[g] += 1
            bhist[b] += 1
            gray[(r + g + b)//3] += 1
    return {"R": rhist, "G": ghist, "B": bhist, "Gray": gray}


HISTOGRAM_COLORS: Tuple[Tuple[str, str], ...] = (
    ("R", "red"), ("G", "green"), ("B", "blue"), ("Gray", "gray"),
)


def plot_histogram_image(hist, color="gray", width=128, height=128) -> Image.Image:
    fig, ax = plt.subplots(figsize=(width/100, height/100), dpi=100)
    ax.bar(range(256), hist, color=color)
    ax.set_xlim(0, 255)
    ax.set_ylim(0, max(hist)*1.1 if hist and max(hist) else 1)
    ax.axis('off')
    buf = BytesIO()
    plt.savefig(buf, format='png', bbox_inches='tight', pad_inches=0)
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf)
