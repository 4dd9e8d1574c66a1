from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from .correspondence import Particle


def clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


def ease_in_out_cubic(p: float) -> float:
    if p < 0.5:
        return 4 * p * p * p
    return 1 - math.pow(-2 * p + 2, 3) / 2


def progress_at(elapsed_ms: float, duration_ms: float) -> float:
    # non-positive duration means the run is already over
    if duration_ms <= 0:
        return 1.0
    return clamp01(elapsed_ms / duration_ms)


def interpolate(particles: Sequence[Particle], t: float) -> Tuple[np.ndarray, np.ndarray]:
    """Recompute every particle's current position for eased value ``t``.

    Positions round half up, so 2.5 -> 3 and -2.5 -> -2.
    """
    n = len(particles)
    start = np.empty((n, 2), dtype=np.float64)
    end = np.empty((n, 2), dtype=np.float64)
    for i, p in enumerate(particles):
        start[i, 0] = p.start_x
        start[i, 1] = p.start_y
        end[i, 0] = p.end_x
        end[i, 1] = p.end_y
    pos = np.floor(start + (end - start) * t + 0.5).astype(np.int64)
    xs = pos[:, 0]
    ys = pos[:, 1]
    for p, x, y in zip(particles, xs.tolist(), ys.tolist()):
        p.current_x = x
        p.current_y = y
    return xs, ys


def rasterize(
    particles: Sequence[Particle],
    width: int,
    height: int,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Draw particles at their current positions into an RGBA buffer.

    Particles are written in list order; when several land on one pixel the
    last one wins. Pixels no particle reaches stay (0, 0, 0, 0).
    """
    if out is None or out.shape != (height, width, 4):
        out = np.zeros((height, width, 4), dtype=np.uint8)
    else:
        out.fill(0)
    if not particles or width <= 0 or height <= 0:
        return out

    xs = np.fromiter((p.current_x for p in particles), dtype=np.int64, count=len(particles))
    ys = np.fromiter((p.current_y for p in particles), dtype=np.int64, count=len(particles))
    colors = np.array([(p.r, p.g, p.b) for p in particles], dtype=np.uint8)

    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    flat = (ys * width + xs)[inside]
    colors = colors[inside]
    if flat.size == 0:
        return out

    # keep only the last particle per pixel, fancy assignment order is not guaranteed
    rev_flat = flat[::-1]
    _, first_in_rev = np.unique(rev_flat, return_index=True)
    last = flat.size - 1 - first_in_rev

    view = out.reshape(-1, 4)
    view[flat[last], :3] = colors[last]
    view[flat[last], 3] = 255
    return out


def draw_particles(
    particles: Sequence[Particle],
    progress: float,
    width: int,
    height: int,
    out: np.ndarray | None = None,
) -> np.ndarray:
    t = ease_in_out_cubic(clamp01(progress))
    interpolate(particles, t)
    return rasterize(particles, width, height, out)
