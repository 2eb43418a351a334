"""Image loading, resizing and pixel normalization."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from detpyramid.core.constants import PIXEL_SCALE, RGB_CHANNELS

logger = logging.getLogger(__name__)

RESAMPLE_FILTER = Image.Resampling.LANCZOS


def validate_target_size(target_size: tuple[int, int]) -> tuple[int, int]:
    """Check a (width, height) pair of positive ints."""
    try:
        width, height = target_size
    except (TypeError, ValueError) as e:
        msg = f"target_size must be a (width, height) pair, got {target_size!r}"
        raise ValueError(msg) from e

    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            msg = f"target_size values must be positive integers, got {target_size!r}"
            raise ValueError(msg)
    return (width, height)


class ImageSampleLoader:
    """Load an image file as a flat, normalized RGB buffer of a fixed size.

    Resizing stretches to the exact target size with a Lanczos filter; aspect
    ratio is not preserved. Each call opens, decodes and releases the file,
    nothing is kept between calls.
    """

    def __init__(self, target_size: tuple[int, int]) -> None:
        self.target_size = validate_target_size(target_size)

    @property
    def buffer_length(self) -> int:
        """Get the number of floats in every returned buffer."""
        width, height = self.target_size
        return width * height * RGB_CHANNELS

    def load(self, image_path: Path) -> np.ndarray | None:
        """Load an image, or return None if it cannot be read or decoded."""
        try:
            with Image.open(image_path) as img:
                rgb = img.convert("RGB")
                resized = rgb.resize(self.target_size, resample=RESAMPLE_FILTER)
                array = np.asarray(resized, dtype=np.uint8)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning("Failed to load image %s: %s", image_path, e)
            return None

        # (H, W, 3) row-major flattening interleaves R, G, B per pixel
        pixels = array.astype(np.float32) / np.float32(PIXEL_SCALE)
        return pixels.reshape(-1)

    def __call__(self, image_path: Path) -> np.ndarray | None:
        """Load an image; see :meth:`load`."""
        return self.load(image_path)

    def __repr__(self) -> str:
        """Return detailed representation."""
        width, height = self.target_size
        return f"ImageSampleLoader(target_size=({width}, {height}))"
