from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import numpy as np

from .correspondence import Particle
from .render import draw_particles, progress_at
from .scheduler import FrameScheduler

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 3000.0

FrameSink = Callable[[np.ndarray], None]


class AnimatorState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class AnimationState:
    particles: List[Particle] = field(default_factory=list)
    canvas_width: int = 0
    canvas_height: int = 0
    duration_ms: float = DEFAULT_DURATION_MS
    start_timestamp: Optional[float] = None
    frame_handle: Any = None
    completion_callback: Optional[Callable[[], None]] = None


class ParticleAnimator:
    """Moves particles from their start to their end positions over ``duration_ms``.

    Every frame recomputes positions from the eased progress and rasterizes
    the whole particle list into one RGBA buffer, which is handed to ``sink``.
    The animator owns that buffer; sinks must copy it if they keep it.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        sink: Optional[FrameSink] = None,
        duration_ms: float = DEFAULT_DURATION_MS,
    ):
        self.scheduler = scheduler
        self.sink = sink
        self.anim = AnimationState(duration_ms=float(duration_ms))
        self._state = AnimatorState.IDLE
        self._run_id = 0
        self._progress = 0.0
        self._frame: Optional[np.ndarray] = None

    @property
    def state(self) -> AnimatorState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is AnimatorState.RUNNING

    @property
    def progress(self) -> float:
        """Progress of the last rendered frame."""
        return self._progress

    @property
    def frame(self) -> Optional[np.ndarray]:
        return self._frame

    @property
    def duration_ms(self) -> float:
        return self.anim.duration_ms

    @duration_ms.setter
    def duration_ms(self, value: float) -> None:
        self.anim.duration_ms = float(value)

    def set_particles(self, particles: List[Particle], width: int, height: int) -> None:
        self.anim.particles = particles
        self.anim.canvas_width = int(width)
        self.anim.canvas_height = int(height)
        self._frame = np.zeros((self.anim.canvas_height, self.anim.canvas_width, 4), dtype=np.uint8)
        logger.debug("Animator holds %d particles on a %dx%d canvas", len(particles), width, height)

    def start(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        if self.anim.frame_handle is not None:
            self.scheduler.cancel_frame(self.anim.frame_handle)
            self.anim.frame_handle = None
        self._run_id += 1
        self._state = AnimatorState.RUNNING
        self._progress = 0.0
        self.anim.completion_callback = on_complete
        try:
            self.anim.start_timestamp = self.scheduler.now()
            self._request(self._run_id)
        except Exception:
            self._abort()
            raise
        logger.info(
            "Animation started: %d particles over %.0f ms", len(self.anim.particles), self.anim.duration_ms
        )

    def stop(self) -> None:
        if self.anim.frame_handle is not None:
            self.scheduler.cancel_frame(self.anim.frame_handle)
            self.anim.frame_handle = None
        self._run_id += 1
        if self._state is AnimatorState.RUNNING:
            self._state = AnimatorState.IDLE
            logger.info("Animation stopped at progress %.3f", self._progress)

    def render_at(self, progress: float) -> np.ndarray:
        """Render one frame for ``progress`` without touching the run state."""
        self._frame = draw_particles(
            self.anim.particles,
            progress,
            self.anim.canvas_width,
            self.anim.canvas_height,
            self._frame,
        )
        if self.sink is not None:
            self.sink(self._frame)
        return self._frame

    def _abort(self) -> None:
        """Back to IDLE after a failed start or frame, without completing."""
        self._run_id += 1
        self._state = AnimatorState.IDLE
        self.anim.frame_handle = None
        self.anim.completion_callback = None
        logger.error("Animation aborted at progress %.3f", self._progress)

    def _request(self, run_id: int) -> None:
        self.anim.frame_handle = self.scheduler.request_frame(lambda ts: self._on_frame(run_id, ts))

    def _on_frame(self, run_id: int, timestamp: float) -> None:
        # stale callback from a stopped or restarted run
        if run_id != self._run_id or self._state is not AnimatorState.RUNNING:
            return
        self.anim.frame_handle = None

        start = self.anim.start_timestamp if self.anim.start_timestamp is not None else timestamp
        progress = progress_at(timestamp - start, self.anim.duration_ms)
        progress = max(progress, self._progress)
        self._progress = progress
        try:
            self.render_at(progress)
            if run_id != self._run_id:
                # the sink stopped or restarted us mid-frame
                return
            if progress < 1.0:
                self._request(run_id)
                return
        except Exception:
            if run_id == self._run_id:
                self._abort()
            raise

        self._state = AnimatorState.COMPLETED
        callback = self.anim.completion_callback
        self.anim.completion_callback = None
        logger.info("Animation completed")
        if callback is not None:
            callback()
