from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Sequence

import imageio.v2 as imageio
import imageio.v3 as iio
import numpy as np

from repixel.core.animator import ParticleAnimator
from repixel.core.correspondence import Particle
from repixel.core.scheduler import ManualFrameScheduler
from repixel.errors import ExportError
from repixel.utils.image_ops import frame_to_rgb

logger = logging.getLogger(__name__)


def render_frames(
    particles: List[Particle],
    width: int,
    height: int,
    duration_ms: float,
    fps: int = 30,
    hold_frames: int = 0,
) -> List[np.ndarray]:
    """Render the whole animation on a deterministic timeline, one RGB frame per tick."""
    frames: List[np.ndarray] = []
    scheduler = ManualFrameScheduler(frame_ms=1000.0 / max(1, fps))
    animator = ParticleAnimator(scheduler, sink=lambda f: frames.append(frame_to_rgb(f)), duration_ms=duration_ms)
    animator.set_particles(particles, width, height)
    animator.start()
    scheduler.run_until_idle()
    if frames:
        frames.extend(frames[-1].copy() for _ in range(max(0, hold_frames)))
    logger.debug("Rendered %d frames at %d fps", len(frames), fps)
    return frames


def export_animation(frames: Sequence[np.ndarray], path: str | Path, fps: int = 30, loop: bool = True) -> Path:
    """Write frames as a GIF, or as an MP4 when ``path`` ends in .mp4."""
    path = Path(path)
    if not frames:
        raise ExportError("no frames to export")
    if path.suffix.lower() == ".mp4":
        _write_mp4(frames, path, fps)
    else:
        _write_gif(frames, path, fps, loop)
    logger.info("Exported %d frames to %s", len(frames), path)
    return path


def _write_gif(frames: Sequence[np.ndarray], path: Path, fps: int, loop: bool) -> None:
    dur = max(10, int(1000 / max(1, fps)))
    kwargs = {"loop": 0} if loop else {}
    try:
        iio.imwrite(path, np.stack(frames), extension=".gif", duration=dur, **kwargs)
    except (OSError, ValueError) as e:
        raise ExportError(f"GIF export to {path} failed: {e}") from e


def _write_mp4(frames: Sequence[np.ndarray], path: Path, fps: int) -> None:
    writer = None
    try:
        writer = imageio.get_writer(
            path,
            fps=fps,
            codec="libx264",
            quality=10,
            ffmpeg_log_level="error",
            pixelformat="yuv420p",
            macro_block_size=1,
        )
        for fr in frames:
            writer.append_data(fr)
    except (ImportError, OSError, ValueError, RuntimeError) as e:
        if path.exists():
            os.remove(path)
        raise ExportError(f"MP4 export to {path} failed (is imageio-ffmpeg installed?): {e}") from e
    finally:
        if writer is not None:
            writer.close()
