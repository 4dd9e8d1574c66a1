from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

import numpy as np

from ..errors import InvalidInput

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


@dataclass(frozen=True)
class PixelGrid:
    """Row-major RGBA buffer, 4 values per pixel."""

    width: int
    height: int
    pixels: Any

    def as_array(self) -> np.ndarray:
        """Return the buffer as an (height, width, 4) array, validating its size."""
        if self.width < 0 or self.height < 0:
            raise InvalidInput(f"negative grid size {self.width}x{self.height}")
        if isinstance(self.pixels, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(self.pixels, dtype=np.uint8)
        else:
            flat = np.asarray(self.pixels).reshape(-1)
        expected = self.width * self.height * 4
        if flat.size != expected:
            raise InvalidInput(
                f"pixel buffer has {flat.size} values, expected {expected} "
                f"for a {self.width}x{self.height} RGBA grid"
            )
        return flat.reshape(self.height, self.width, 4)


@dataclass(frozen=True)
class PixelRecord:
    r: int
    g: int
    b: int
    x: int
    y: int
    brightness: float
    edge_strength: float


def brightness_of(r: float, g: float, b: float) -> float:
    return LUMA_R * r + LUMA_G * g + LUMA_B * b


def brightness_map(rgb: np.ndarray) -> np.ndarray:
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return LUMA_R * r.astype(np.float64) + LUMA_G * g.astype(np.float64) + LUMA_B * b.astype(np.float64)


def edge_strength_map(lum: np.ndarray) -> np.ndarray:
    """Forward difference against the right and bottom neighbours.

    Pixels on the last column / row simply omit the missing term, so the
    bottom-right pixel always ends up with 0.
    """
    edges = np.zeros_like(lum, dtype=np.float64)
    edges[:, :-1] += np.abs(lum[:, :-1] - lum[:, 1:])
    edges[:-1, :] += np.abs(lum[:-1, :] - lum[1:, :])
    return edges


def extract_features(grid: PixelGrid) -> List[PixelRecord]:
    """One PixelRecord per grid cell, y outer and x inner."""
    arr = grid.as_array()
    if arr.size == 0:
        return []
    rgb = arr[..., :3]
    lum = brightness_map(rgb)
    edges = edge_strength_map(lum)

    h, w = lum.shape
    rs = rgb[..., 0].reshape(-1).tolist()
    gs = rgb[..., 1].reshape(-1).tolist()
    bs = rgb[..., 2].reshape(-1).tolist()
    lums = lum.reshape(-1).tolist()
    strengths = edges.reshape(-1).tolist()

    records = []
    i = 0
    for y in range(h):
        for x in range(w):
            records.append(PixelRecord(rs[i], gs[i], bs[i], x, y, lums[i], strengths[i]))
            i += 1
    return records
