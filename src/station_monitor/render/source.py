"""
Stream sources - where the render loop gets its frames.

A detector stream is read with OpenCV. When nothing is playing, no
detector is configured, or the stream cannot be read, a static placeholder
frame is returned instead; none of these are treated as errors.
"""

import logging
import threading
from typing import Protocol

import cv2
import numpy as np

from ..models import Detector
from ..utils.constants import (
    DEFAULT_PLACEHOLDER_SIZE,
    PLACEHOLDER_BACKGROUND,
    PLACEHOLDER_TEXT_COLOR,
    STREAM_PATH,
    STREAM_OPEN_TIMEOUT,
    STREAM_READ_TIMEOUT,
    STREAM_RECONNECT_DELAY,
)

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """Anything that yields the current frame as a BGR image."""

    def read(self) -> np.ndarray: ...

    def release(self) -> None: ...


def stream_url(backend_base: str, detector_id: int) -> str:
    """Build the MJPEG stream URL for a detector."""
    return backend_base.rstrip("/") + STREAM_PATH.format(detector_id=detector_id)


def make_placeholder(width: int, height: int) -> np.ndarray:
    """Grey image with its size printed in the middle."""
    image = np.full((height, width, 3), PLACEHOLDER_BACKGROUND, np.uint8)
    text = f"{width}x{height}"
    scale = max(0.5, width / 320)
    thickness = max(1, int(scale * 2))
    (text_w, text_h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, thickness)
    cv2.putText(
        image,
        text,
        ((width - text_w) // 2, (height + text_h) // 2),
        cv2.FONT_HERSHEY_SIMPLEX,
        scale,
        PLACEHOLDER_TEXT_COLOR,
        thickness,
    )
    return image


class PlaceholderSource:
    """Static placeholder frame."""

    def __init__(self, size: tuple[int, int] = DEFAULT_PLACEHOLDER_SIZE):
        self.size = size
        self._image = make_placeholder(*size)

    def read(self) -> np.ndarray:
        return self._image

    def release(self) -> None:
        pass


class VideoStreamSource:
    """
    Detector stream read through ``cv2.VideoCapture`` on a reader thread.

    The capture is owned by a daemon thread started on the first ``read()``.
    The thread opens the stream with bounded open/read timeouts and keeps the
    most recently decoded frame; ``read()`` only hands that frame back, so a
    stalled endpoint never holds up the caller. Until a frame arrives, and
    after any open or read failure, the placeholder is returned and the
    thread retries after ``reconnect_delay`` seconds.
    """

    def __init__(
        self,
        url: str,
        placeholder_size: tuple[int, int] = DEFAULT_PLACEHOLDER_SIZE,
        reconnect_delay: float = STREAM_RECONNECT_DELAY,
        open_timeout: float = STREAM_OPEN_TIMEOUT,
        read_timeout: float = STREAM_READ_TIMEOUT,
    ):
        self.url = url
        self.reconnect_delay = reconnect_delay
        self.open_timeout = open_timeout
        self.read_timeout = read_timeout
        self._placeholder = make_placeholder(*placeholder_size)
        self._cap: cv2.VideoCapture | None = None
        self._latest: np.ndarray | None = None
        self._lock = threading.Lock()
        self._shutdown = threading.Event()
        self._thread: threading.Thread | None = None
        self._degraded = False

    def read(self) -> np.ndarray:
        if self._thread is None and not self._shutdown.is_set():
            self._start()

        with self._lock:
            frame = self._latest
        return self._placeholder if frame is None else frame

    def release(self) -> None:
        self._shutdown.set()
        if self._thread is None:
            self._close_capture()
            return

        self._thread.join(timeout=0.2)
        if self._thread.is_alive():
            # Still inside an open/read call; it releases the capture on exit
            logger.debug(f"Stream reader still busy, leaving it to exit: {self.url}")

    def pump(self) -> bool:
        """
        Open the capture if needed and decode one frame.

        Returns:
            False when the stream is unavailable and the reader should back off
        """
        if self._cap is None:
            logger.debug(f"Opening stream: {self.url}")
            cap = open_capture(self.url, self.open_timeout, self.read_timeout)
            if not cap.isOpened():
                cap.release()
                self._mark_degraded("cannot open")
                return False
            self._cap = cap
            logger.info(f"Stream connected: {self.url}")

        ret, frame = self._cap.read()
        if not ret or frame is None:
            self._mark_degraded("read failed")
            self._close_capture()
            return False

        with self._lock:
            self._latest = frame
        if self._degraded:
            logger.info(f"Stream recovered: {self.url}")
            self._degraded = False
        return True

    def _start(self) -> None:
        self._thread = threading.Thread(
            target=self._run, name="StreamReader", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        try:
            while not self._shutdown.is_set():
                if not self.pump():
                    self._shutdown.wait(self.reconnect_delay)
        except Exception as e:
            logger.error(f"Stream reader crashed: {e}", exc_info=True)
            self._mark_degraded("reader error")
        finally:
            self._close_capture()

    def _mark_degraded(self, reason: str) -> None:
        with self._lock:
            self._latest = None
        if not self._degraded:
            logger.warning(f"Stream unavailable ({reason}), showing placeholder: {self.url}")
            self._degraded = True

    def _close_capture(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


def open_capture(url: str, open_timeout: float, read_timeout: float) -> cv2.VideoCapture:
    """Open ``url`` with FFmpeg, bounding connect and per-read waits."""
    return cv2.VideoCapture(
        url,
        cv2.CAP_FFMPEG,
        [
            cv2.CAP_PROP_OPEN_TIMEOUT_MSEC,
            int(open_timeout * 1000),
            cv2.CAP_PROP_READ_TIMEOUT_MSEC,
            int(read_timeout * 1000),
        ],
    )


def resolve_source(
    playing: bool,
    detector: Detector | None,
    backend_base: str,
    placeholder_size: tuple[int, int] = DEFAULT_PLACEHOLDER_SIZE,
    reconnect_delay: float = STREAM_RECONNECT_DELAY,
    open_timeout: float = STREAM_OPEN_TIMEOUT,
    read_timeout: float = STREAM_READ_TIMEOUT,
) -> FrameSource:
    """
    Pick the frame source for the current playback state.

    Returns a VideoStreamSource only when playing with a detector that has
    an id; otherwise the placeholder.
    """
    if not playing or detector is None or not detector.is_streamable:
        return PlaceholderSource(placeholder_size)

    return VideoStreamSource(
        stream_url(backend_base, detector.id),
        placeholder_size=placeholder_size,
        reconnect_delay=reconnect_delay,
        open_timeout=open_timeout,
        read_timeout=read_timeout,
    )
