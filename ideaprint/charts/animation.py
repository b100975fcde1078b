"""Entrance animation for the radar chart.

``RadarAnimation`` is a single-shot state machine, IDLE -> ANIMATING ->
SETTLED, advanced by whatever frame scheduler it is started on. Progress
never decreases and the machine never leaves SETTLED.
"""
import time
from enum import Enum
from itertools import count
from typing import Callable, Dict, List, Optional

FrameCallback = Callable[[float], None]


class AnimationState(str, Enum):
    IDLE = "idle"
    ANIMATING = "animating"
    SETTLED = "settled"


class ManualScheduler:
    """Frames fire only when ``fire`` is called."""

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = count(1)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def fire(self, now: float) -> None:
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(now)


class BlockingScheduler(ManualScheduler):
    """Runs frames on the calling thread at a fixed interval until none are left."""

    def __init__(self, frame_interval: float = 1 / 30, clock=time.monotonic, sleep=time.sleep):
        super().__init__()
        self.frame_interval = frame_interval
        self.clock = clock
        self.sleep = sleep

    def run(self, max_frames: int = 10_000) -> int:
        frames = 0
        while self.pending and frames < max_frames:
            self.sleep(self.frame_interval)
            self.fire(self.clock())
            frames += 1
        return frames


class RadarAnimation:
    def __init__(self, duration: float = 1.5, clock=time.monotonic):
        self.duration = duration
        self.clock = clock
        self.state = AnimationState.IDLE
        self.progress = 0.0
        self._started_at: Optional[float] = None
        self._scheduler = None
        self._handle: Optional[int] = None
        self._listeners: List[FrameCallback] = []

    @property
    def interactive(self) -> bool:
        return self.state is AnimationState.SETTLED

    @property
    def running(self) -> bool:
        return self._handle is not None

    def on_frame(self, listener: FrameCallback) -> None:
        self._listeners.append(listener)

    def start(self, scheduler) -> bool:
        if self.state is not AnimationState.IDLE:
            return False
        self.state = AnimationState.ANIMATING
        self._started_at = self.clock()
        self._scheduler = scheduler
        self._request()
        return True

    def stop(self) -> None:
        if self._handle is not None and self._scheduler is not None:
            self._scheduler.cancel(self._handle)
        self._handle = None

    def _request(self) -> None:
        self._handle = self._scheduler.request_frame(self._tick)

    def _tick(self, now: float) -> None:
        self._handle = None
        if self.state is not AnimationState.ANIMATING:
            return
        if self.duration <= 0:
            progress = 1.0
        else:
            progress = min(max((now - self._started_at) / self.duration, 0.0), 1.0)
        self.progress = max(self.progress, progress)
        if self.progress >= 1.0:
            self.state = AnimationState.SETTLED
        else:
            self._request()
        # state and the next frame are in place before listeners run
        for listener in self._listeners:
            listener(self.progress)
