"""Strict pixel-level equality between rendered bitmaps."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError


class ComparisonError(Exception):
    """Raised when two bitmaps cannot be loaded for comparison."""


def images_equal(img1: Image.Image, img2: Image.Image) -> bool:
    """Return True when *img1* and *img2* have identical RGBA pixels."""
    if not isinstance(img1, Image.Image) or not isinstance(img2, Image.Image):
        raise TypeError("images_equal expects PIL.Image.Image inputs")
    if img1.size != img2.size:
        return False

    pixels1 = np.asarray(img1.convert("RGBA"))
    pixels2 = np.asarray(img2.convert("RGBA"))
    return bool(np.array_equal(pixels1, pixels2))


def bitmaps_equal(path_a: str | Path, path_b: str | Path) -> bool:
    """Compare two bitmap files in strict mode."""
    try:
        with Image.open(path_a) as img_a, Image.open(path_b) as img_b:
            return images_equal(img_a, img_b)
    except (UnidentifiedImageError, OSError) as exc:
        raise ComparisonError(f"Cannot compare {path_a} and {path_b}: {exc}") from exc
