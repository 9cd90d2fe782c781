#!/usr/bin/env python3
"""
commands.py

Operations exposed to a front end (text menu, GUI):
open / save / apply filter by menu index / image info.
The front end only deals with paths and menu indices; depth dispatch
happens here.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

import filters
import image_processing as ip
from bmp_image import Bmp8Image, Bmp24Image, is_allocated
from bmpdecoder import load_bmp, save_bmp

logger = logging.getLogger(__name__)


class FilterEntry(NamedTuple):
    label: str
    apply: Callable
    needs_value: bool = False


# Menu entries, numbered from 1 in the order listed
FILTERS_8: List[FilterEntry] = [
    FilterEntry("Negative", ip.negative),
    FilterEntry("Brightness", ip.brightness, needs_value=True),
    FilterEntry("Black and white (threshold)", ip.threshold, needs_value=True),
    FilterEntry("Box blur", filters.box_blur),
    FilterEntry("Gaussian blur", filters.gaussian_blur),
    FilterEntry("Outline", filters.outline),
    FilterEntry("Emboss", filters.emboss),
    FilterEntry("Sharpen", filters.sharpen),
    FilterEntry("Histogram equalization", ip.equalize),
]

FILTERS_24: List[FilterEntry] = [
    FilterEntry("Negative", ip.negative),
    FilterEntry("Brightness", ip.brightness, needs_value=True),
    FilterEntry("Grayscale", ip.grayscale),
    FilterEntry("Box blur", filters.box_blur),
    FilterEntry("Gaussian blur", filters.gaussian_blur),
    FilterEntry("Outline", filters.outline),
    FilterEntry("Emboss", filters.emboss),
    FilterEntry("Sharpen", filters.sharpen),
    FilterEntry("Histogram equalization", ip.equalize),
]


def open_image(path):
    """Detect the depth of `path` and load it; None on failure."""
    img = load_bmp(path)
    if img is None:
        logger.error("Could not open %s", path)
    return img


def save_image(img, path) -> bool:
    return save_bmp(img, path)


def filter_menu(img) -> List[FilterEntry]:
    if isinstance(img, Bmp8Image):
        return FILTERS_8
    if isinstance(img, Bmp24Image):
        return FILTERS_24
    return []


def apply_filter_by_index(img, index: int, value: Optional[int] = None) -> bool:
    """Apply menu entry `index` (1-based). Returns False for a bad index or image."""
    if not is_allocated(img):
        logger.warning("No image loaded")
        return False
    menu = filter_menu(img)
    if not 1 <= index <= len(menu):
        logger.warning("Invalid filter option %s (1..%d)", index, len(menu))
        return False
    entry = menu[index - 1]
    if entry.needs_value:
        if value is None:
            logger.warning("%s needs a value", entry.label)
            return False
        entry.apply(img, value)
    else:
        entry.apply(img)
    logger.info("%s applied", entry.label)
    return True


def image_info(img) -> Dict[str, int]:
    if not isinstance(img, (Bmp8Image, Bmp24Image)):
        return {}
    info = {
        "Width": img.width,
        "Height": img.height,
        "Color Depth": img.color_depth,
    }
    if isinstance(img, Bmp8Image):
        info["Data Size"] = img.data_size
    return info


def print_info(img):
    info = image_info(img)
    if not info:
        print("Error: invalid image")
        return
    print("Image Info:")
    for k, v in info.items():
        print(f"{k}: {v}")
