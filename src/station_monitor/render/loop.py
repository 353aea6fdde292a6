"""
Render loop - per-frame redraw of the stream with task overlays.

Cooperative on one thread: every tick is a callback scheduled on the
frame scheduler (an asyncio event loop in production). The renderer re-reads
its inputs (playing flag, detector, task snapshot, templates) on every tick
and never mutates them.

States:
  IDLE     - created, never played
  PLAYING  - a tick is drawn and the next one scheduled, until stopped
  STOPPED  - pending tick cancelled, source released
"""

import asyncio
import logging
import math
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from ..models import Detector, OngoingTask, Surface, Template
from ..utils.constants import (
    DEFAULT_ASPECT,
    DEFAULT_PLACEHOLDER_SIZE,
    DEFAULT_REFRESH_RATE,
    FPS_WINDOW_SIZE,
    STREAM_OPEN_TIMEOUT,
    STREAM_READ_TIMEOUT,
    STREAM_RECONNECT_DELAY,
)
from .composer import FrameComposer
from .source import FrameSource, resolve_source

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
SourceFactory = Callable[[bool, Detector | None], FrameSource]


class LoopState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    STOPPED = "stopped"


class FrameScheduler(Protocol):
    """
    Schedules one callback per display refresh.

    ``request_frame`` returns a handle that ``cancel_frame`` accepts; a
    cancelled callback must never run.
    """

    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class AsyncioFrameScheduler:
    """
    Frame scheduler on an asyncio event loop.

    Callbacks fire on the next refresh boundary (multiples of
    1 / refresh_rate on the loop clock) rather than after a fixed delay,
    so a slow frame does not push every later frame back.
    """

    def __init__(
        self,
        refresh_rate: float = DEFAULT_REFRESH_RATE,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        if refresh_rate <= 0:
            raise ValueError(f"refresh_rate must be positive, got {refresh_rate}")
        self.interval = 1.0 / refresh_rate
        self._loop = loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        now = loop.time()
        when = (math.floor(now / self.interval) + 1) * self.interval
        return loop.call_at(when, callback, when)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class FpsCounter:
    """Rolling frame rate over the last ``window`` frame timestamps."""

    def __init__(self, window: int = FPS_WINDOW_SIZE):
        self._times: deque[float] = deque(maxlen=max(2, window))

    def tick(self, timestamp: float) -> float:
        self._times.append(timestamp)
        return self.fps

    @property
    def fps(self) -> float:
        if len(self._times) < 2:
            return 0.0
        span = self._times[-1] - self._times[0]
        if span <= 0:
            return 0.0
        return (len(self._times) - 1) / span

    def reset(self) -> None:
        self._times.clear()


@dataclass(frozen=True)
class Size:
    width: float
    height: float


ResizeHandler = Callable[[Size], None]


class ResizeNotifier:
    """Explicit subscription point for container size changes."""

    def __init__(self):
        self._handlers: list[ResizeHandler] = []

    def subscribe(self, handler: ResizeHandler) -> Callable[[], None]:
        """Register a handler. Returns a function that unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def notify(self, size: Size) -> None:
        for handler in list(self._handlers):
            handler(size)


class AspectRatioContainer:
    """
    Display container locked to a fixed aspect ratio.

    The height always follows the width (width * 9 / 16 by default),
    independent of the source image's own aspect ratio.
    """

    def __init__(self, width: float, ratio: tuple[int, int] = DEFAULT_ASPECT):
        self.ratio = ratio
        self.size = Size(width, self.height_for(width))

    def height_for(self, width: float) -> float:
        ratio_w, ratio_h = self.ratio
        return width * ratio_h / ratio_w

    def adjust(self, size: Size) -> None:
        """Resize handler: recompute the height from the observed width."""
        self.size = Size(size.width, self.height_for(size.width))

    def attach(self, notifier: ResizeNotifier) -> Callable[[], None]:
        """Adjust once for the current width, then follow notifications."""
        self.adjust(self.size)
        return notifier.subscribe(self.adjust)


class StreamRenderer:
    """
    Drives the per-frame redraw of a stream view.

    Args:
        surface: Surface the frames are composed onto
        scheduler: Frame scheduler (one callback per refresh)
        composer: Frame composer; defaults to FrameComposer()
        source_factory: Builds the frame source for (playing, detector)
        on_frame: Called with the surface after every composed frame
        on_fps: Called with the current frame rate after every frame
        clock: Time source for the first frame's timestamp
    """

    def __init__(
        self,
        surface: Surface,
        scheduler: FrameScheduler,
        composer: FrameComposer | None = None,
        source_factory: SourceFactory | None = None,
        on_frame: Callable[[Surface], None] | None = None,
        on_fps: Callable[[float], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.surface = surface
        self.composer = composer or FrameComposer()
        self.state = LoopState.IDLE
        self.fps = 0.0

        self.playing = False
        self.detector: Detector | None = None
        self.ongoing_task: OngoingTask | None = None
        self.templates: Sequence[Template] = ()

        self._scheduler = scheduler
        self._source_factory = source_factory or make_source_factory("")
        self._on_frame = on_frame
        self._on_fps = on_fps
        self._clock = clock
        self._handle: Any = None
        self._source: FrameSource | None = None
        self._fps_counter = FpsCounter()
        self._closed = False

    # External inputs

    def set_playing(self, playing: bool) -> None:
        self.playing = playing
        if playing and self.state != LoopState.PLAYING:
            self._start()
        elif not playing and self.state == LoopState.PLAYING:
            self._stop()

    def set_detector(self, detector: Detector | None) -> None:
        self.detector = detector
        if self.state == LoopState.PLAYING:
            self._release_source()
            self._source = self._source_factory(True, detector)

    def set_task(self, task: OngoingTask | None) -> None:
        self.ongoing_task = task

    def set_templates(self, templates: Sequence[Template]) -> None:
        self.templates = tuple(templates)

    # Lifecycle

    def render_once(self) -> None:
        """Compose a single frame for the current inputs without scheduling."""
        source = self._source or self._source_factory(self.playing, self.detector)
        try:
            self._draw_frame(source, self._clock())
        finally:
            if source is not self._source:
                source.release()

    def close(self) -> None:
        """Stop the loop for good. Safe to call more than once."""
        self._stop()
        self._closed = True
        self.state = LoopState.STOPPED

    def __enter__(self) -> "StreamRenderer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def has_pending_frame(self) -> bool:
        return self._handle is not None

    # Internals

    def _start(self) -> None:
        if self._closed:
            logger.warning("Renderer is closed, ignoring play request")
            return

        logger.info("Stream playback started")
        self._source = self._source_factory(True, self.detector)
        self._fps_counter.reset()
        self.state = LoopState.PLAYING
        self._tick(self._clock())

    def _stop(self) -> None:
        # Cancel first so no callback can draw onto a released surface
        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None

        if self.state == LoopState.PLAYING:
            logger.info("Stream playback stopped")
            self.state = LoopState.STOPPED
        self._release_source()

    def _tick(self, timestamp: float) -> None:
        self._handle = None
        if self.state != LoopState.PLAYING:
            return

        try:
            self._draw_frame(self._source, timestamp)
        except Exception as e:
            logger.error(f"Frame render failed: {e}", exc_info=True)

        # on_frame may have stopped playback
        if self.state == LoopState.PLAYING:
            self._handle = self._scheduler.request_frame(self._tick)

    def _draw_frame(self, source: FrameSource, timestamp: float) -> None:
        image = source.read()
        self.fps = self._fps_counter.tick(timestamp)

        self.composer.compose(
            self.surface,
            image,
            task=self.ongoing_task,
            templates=self.templates,
            fps=self.fps,
        )

        if self._on_frame is not None:
            self._on_frame(self.surface)
        if self._on_fps is not None:
            self._on_fps(self.fps)

    def _release_source(self) -> None:
        if self._source is not None:
            self._source.release()
            self._source = None


def make_source_factory(
    backend_base: str,
    placeholder_size: tuple[int, int] = DEFAULT_PLACEHOLDER_SIZE,
    reconnect_delay: float = STREAM_RECONNECT_DELAY,
    open_timeout: float = STREAM_OPEN_TIMEOUT,
    read_timeout: float = STREAM_READ_TIMEOUT,
) -> SourceFactory:
    """Bind backend settings into a (playing, detector) -> source factory."""

    def factory(playing: bool, detector: Detector | None) -> FrameSource:
        return resolve_source(
            playing,
            detector,
            backend_base,
            placeholder_size=placeholder_size,
            reconnect_delay=reconnect_delay,
            open_timeout=open_timeout,
            read_timeout=read_timeout,
        )

    return factory


__all__ = [
    "AspectRatioContainer",
    "AsyncioFrameScheduler",
    "FpsCounter",
    "FrameScheduler",
    "LoopState",
    "ResizeNotifier",
    "Size",
    "StreamRenderer",
    "make_source_factory",
]
