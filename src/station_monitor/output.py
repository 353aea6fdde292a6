"""
Output sinks - present composed frames in a window or as latest.jpg.

The surface holds the frame at the source's native resolution; sinks
stretch it into the fixed-aspect container, the way the dashboard stretches
its canvas to fill the stream box.
"""

import logging
import os
import time
from collections.abc import Callable

import cv2
import numpy as np

from .models import Surface
from .render.loop import AspectRatioContainer, ResizeNotifier, Size
from .utils.constants import DEFAULT_SNAPSHOT_INTERVAL, SNAPSHOT_DIR

logger = logging.getLogger(__name__)


def fit_to_container(pixels: np.ndarray, size: Size) -> np.ndarray:
    """Stretch a frame to the container size (rounded to whole pixels)."""
    width = max(1, int(round(size.width)))
    height = max(1, int(round(size.height)))
    if pixels.size == 0:
        return np.zeros((height, width, 3), np.uint8)
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return pixels
    return cv2.resize(pixels, (width, height), interpolation=cv2.INTER_LINEAR)


class SnapshotSink:
    """
    Writes the latest frame to ``<snapshot_dir>/latest.jpg``.

    Writes are rate limited to one per ``interval`` seconds and go through
    a temp file so readers never see a partial JPEG.
    """

    def __init__(
        self,
        container: AspectRatioContainer,
        snapshot_dir: str = SNAPSHOT_DIR,
        interval: float = DEFAULT_SNAPSHOT_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.container = container
        self.snapshot_dir = snapshot_dir
        self.interval = interval
        self.path = os.path.join(snapshot_dir, "latest.jpg")
        self._clock = clock
        self._last_write = float("-inf")
        os.makedirs(snapshot_dir, exist_ok=True)

    def present(self, surface: Surface) -> None:
        now = self._clock()
        if now - self._last_write < self.interval:
            return
        self._last_write = now

        frame = fit_to_container(surface.pixels, self.container.size)
        tmp_path = os.path.join(self.snapshot_dir, "latest.tmp.jpg")
        if cv2.imwrite(tmp_path, frame):
            os.replace(tmp_path, self.path)
        else:
            logger.debug(f"Could not write snapshot to {tmp_path}")

    def close(self) -> None:
        pass


class WindowSink:
    """
    Shows frames in an OpenCV window.

    The window is user-resizable. When its width changes, the new size is
    published on the resize notifier and the window is snapped back to the
    container's aspect ratio on the next frame.
    """

    def __init__(
        self,
        container: AspectRatioContainer,
        notifier: ResizeNotifier,
        window_name: str = "Station Monitor",
        on_quit: Callable[[], None] | None = None,
    ):
        self.container = container
        self.notifier = notifier
        self.window_name = window_name
        self.on_quit = on_quit
        self._last_width: int | None = None
        self._open = False

    def open(self) -> None:
        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        size = self.container.size
        cv2.resizeWindow(self.window_name, int(size.width), int(round(size.height)))
        self._last_width = int(size.width)
        self._open = True

    def present(self, surface: Surface) -> None:
        if not self._open:
            self.open()

        cv2.imshow(self.window_name, fit_to_container(surface.pixels, self.container.size))
        key = cv2.waitKey(1) & 0xFF
        if key in (ord("q"), 27) and self.on_quit is not None:
            self.on_quit()
            return

        self._check_resize()

    def _check_resize(self) -> None:
        _, _, width, height = cv2.getWindowImageRect(self.window_name)
        if width <= 0 or width == self._last_width:
            return

        self._last_width = width
        self.notifier.notify(Size(width, height))
        size = self.container.size
        cv2.resizeWindow(self.window_name, int(size.width), int(round(size.height)))

    def close(self) -> None:
        if self._open:
            cv2.destroyWindow(self.window_name)
            self._open = False
