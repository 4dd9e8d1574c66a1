"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from repixel.core.features import PixelGrid, PixelRecord


def solid_grid(width: int, height: int, rgb: tuple[int, int, int]) -> PixelGrid:
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., :3] = rgb
    arr[..., 3] = 255
    return PixelGrid(width, height, arr.tobytes())


def grid_from_rgb(rows) -> PixelGrid:
    """Build a grid from nested [row][col] -> (r, g, b) lists."""
    arr = np.asarray(rows, dtype=np.uint8)
    h, w, _ = arr.shape
    rgba = np.concatenate([arr, np.full((h, w, 1), 255, dtype=np.uint8)], axis=2)
    return PixelGrid(w, h, rgba.tobytes())


def record(x: int, y: int, brightness: float, edge: float = 0.0, rgb=(0, 0, 0)) -> PixelRecord:
    return PixelRecord(rgb[0], rgb[1], rgb[2], x, y, brightness, edge)


@pytest.fixture
def black_2x2() -> PixelGrid:
    return solid_grid(2, 2, (0, 0, 0))


@pytest.fixture
def white_2x2() -> PixelGrid:
    return solid_grid(2, 2, (255, 255, 255))


@pytest.fixture
def gradient_grid() -> PixelGrid:
    # 4x3, brightness rising left to right
    rows = [[(v, v, v) for v in (0, 80, 160, 240)] for _ in range(3)]
    return grid_from_rgb(rows)
