from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from repixel.core.features import PixelGrid
from repixel.errors import ImageLoadError, InvalidInput

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> Image.Image:
    try:
        with Image.open(path) as im:
            im.load()
            return im.convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(f"cannot load image {path}: {e}") from e


def fit_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Largest size with the same aspect ratio inside max_width x max_height.

    Images that already fit are left alone; nothing is ever enlarged.
    """
    if width <= 0 or height <= 0:
        return max(0, width), max(0, height)
    if width <= max_width and height <= max_height:
        return width, height
    ratio = min(max_width / width, max_height / height)
    return max(1, math.floor(width * ratio)), max(1, math.floor(height * ratio))


def resize_to_fit(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    w, h = fit_size(image.width, image.height, max_width, max_height)
    if (w, h) == image.size:
        return image
    return image.resize((w, h), Image.BICUBIC)


def match_sizes(source: Image.Image, target: Image.Image) -> Image.Image:
    """Resize ``source`` onto ``target``'s size when the two differ."""
    if source.size == target.size:
        return source
    logger.warning(
        "Source %dx%d differs from target %dx%d, resizing source",
        source.width,
        source.height,
        target.width,
        target.height,
    )
    return source.resize(target.size, Image.BICUBIC)


def to_pixel_grid(image: Image.Image) -> PixelGrid:
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    return PixelGrid(rgba.width, rgba.height, rgba.tobytes())


def load_pixel_grid(path: str | Path, max_width: int, max_height: int) -> PixelGrid:
    image = resize_to_fit(load_image(path), max_width, max_height)
    logger.info("Loaded %s as %dx%d", path, image.width, image.height)
    return to_pixel_grid(image)


def frame_to_rgb(frame: np.ndarray) -> np.ndarray:
    """Composite an RGBA frame over black."""
    if frame.ndim != 3 or frame.shape[2] != 4:
        raise InvalidInput(f"expected an (h, w, 4) frame, got shape {frame.shape}")
    alpha = frame[..., 3:4].astype(np.float32) / 255.0
    rgb = frame[..., :3].astype(np.float32) * alpha
    return np.clip(rgb + 0.5, 0, 255).astype(np.uint8)


def frame_to_image(frame: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(frame, dtype=np.uint8))
