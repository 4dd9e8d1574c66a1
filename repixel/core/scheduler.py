from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Protocol

if TYPE_CHECKING:
    from .animator import ParticleAnimator

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    """Host per-frame callback mechanism.

    ``request_frame`` schedules ``callback`` once and returns a handle that
    ``cancel_frame`` accepts. Callbacks receive a monotonic timestamp in ms.
    """

    def now(self) -> float: ...

    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualFrameScheduler:
    """Deterministic scheduler driven by the caller, one frame every ``frame_ms``."""

    def __init__(self, frame_ms: float = 1000.0 / 60, start_ms: float = 0.0):
        self.frame_ms = float(frame_ms)
        self._now = float(start_ms)
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1
        self.frames_run = 0

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, ms: float) -> None:
        self._now += ms

    def run_pending(self) -> int:
        """Fire every callback queued so far; callbacks they queue wait for the next call."""
        due = list(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback(self._now)
            self.frames_run += 1
        return len(due)

    def step(self) -> int:
        self.advance(self.frame_ms)
        return self.run_pending()

    def run_until_idle(self, max_frames: int = 1_000_000) -> int:
        """Run the current frame, then keep stepping until nothing is queued."""
        ran = self.run_pending()
        while self._pending:
            if ran >= max_frames:
                raise RuntimeError(f"scheduler still busy after {max_frames} frames")
            ran += self.step()
        return ran


class AsyncioFrameScheduler:
    """Frames on an asyncio event loop at a fixed rate."""

    def __init__(self, fps: float = 60.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.interval = 1.0 / max(1e-3, float(fps))
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, lambda: callback(self.now()))

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


async def play(animator: "ParticleAnimator") -> None:
    """Start ``animator`` and wait for it to complete.

    Cancelling the awaiting task stops the animation.
    """
    done = asyncio.get_running_loop().create_future()

    def _finish() -> None:
        if not done.done():
            done.set_result(None)

    animator.start(_finish)
    try:
        await done
    except asyncio.CancelledError:
        animator.stop()
        raise
