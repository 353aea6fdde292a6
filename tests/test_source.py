"""
Tests for stream source resolution
"""

import asyncio
import socket
import time
import unittest
from unittest.mock import MagicMock, patch

import cv2
import numpy as np

from src.station_monitor.models import Detector
from src.station_monitor.render.canvas import Canvas
from src.station_monitor.render.loop import (
    AsyncioFrameScheduler,
    StreamRenderer,
    make_source_factory,
)
from src.station_monitor.render.source import (
    PlaceholderSource,
    VideoStreamSource,
    make_placeholder,
    resolve_source,
    stream_url,
)

BACKEND = "http://backend.local:5000"


class TestStreamUrl(unittest.TestCase):
    def test_builds_detector_path(self):
        self.assertEqual(
            stream_url(BACKEND, 7), "http://backend.local:5000/api/v1/detectors/7/stream"
        )

    def test_trailing_slash(self):
        self.assertEqual(stream_url(BACKEND + "/", 7), stream_url(BACKEND, 7))


class TestResolveSource(unittest.TestCase):
    """Test picking the placeholder or the detector stream."""

    def test_not_playing_is_placeholder(self):
        source = resolve_source(False, Detector(id=7), BACKEND)
        self.assertIsInstance(source, PlaceholderSource)

    def test_no_detector_is_placeholder(self):
        source = resolve_source(True, None, BACKEND)
        self.assertIsInstance(source, PlaceholderSource)

    def test_detector_without_id_is_placeholder(self):
        source = resolve_source(True, Detector(id=None), BACKEND)
        self.assertIsInstance(source, PlaceholderSource)

    def test_playing_with_detector_streams(self):
        source = resolve_source(True, Detector(id=7), BACKEND)

        self.assertIsInstance(source, VideoStreamSource)
        self.assertEqual(source.url, stream_url(BACKEND, 7))

    def test_factory_binds_settings(self):
        factory = make_source_factory(BACKEND, placeholder_size=(160, 90))

        placeholder = factory(False, None)
        stream = factory(True, Detector(id=2))

        self.assertEqual(placeholder.read().shape, (90, 160, 3))
        self.assertEqual(stream.url, stream_url(BACKEND, 2))


class TestPlaceholder(unittest.TestCase):
    def test_size(self):
        image = make_placeholder(640, 360)

        self.assertEqual(image.shape, (360, 640, 3))
        self.assertEqual(image.dtype, np.uint8)

    def test_has_size_text(self):
        image = make_placeholder(640, 360)
        self.assertGreater(len(np.unique(image.reshape(-1, 3), axis=0)), 1)

    def test_same_frame_every_read(self):
        source = PlaceholderSource((32, 18))
        self.assertIs(source.read(), source.read())


class TestVideoStreamSource(unittest.TestCase):
    """Test the stream reader with a mocked capture, one pump at a time."""

    def make_capture(self, opened=True, frames=()):
        cap = MagicMock()
        cap.isOpened.return_value = opened
        cap.read.side_effect = list(frames)
        return cap

    def test_unreachable_stream_returns_placeholder(self):
        cap = self.make_capture(opened=False)
        source = VideoStreamSource("http://x/stream", placeholder_size=(32, 18))

        with patch("cv2.VideoCapture", return_value=cap):
            with self.assertLogs(level="WARNING") as logs:
                self.assertFalse(source.pump())
                self.assertFalse(source.pump())

        with patch.object(source, "_start"):
            image = source.read()
        self.assertEqual(image.shape, (18, 32, 3))
        cap.release.assert_called()
        # One warning per outage
        self.assertEqual(len(logs.records), 1)

    def test_opens_with_bounded_timeouts(self):
        cap = self.make_capture(frames=[(True, np.zeros((2, 2, 3), np.uint8))])
        source = VideoStreamSource("http://x/stream", open_timeout=1.5, read_timeout=0.25)

        with patch("cv2.VideoCapture", return_value=cap) as capture_cls:
            source.pump()

        url, backend, params = capture_cls.call_args.args
        self.assertEqual(url, "http://x/stream")
        self.assertEqual(backend, cv2.CAP_FFMPEG)
        self.assertEqual(
            params,
            [cv2.CAP_PROP_OPEN_TIMEOUT_MSEC, 1500, cv2.CAP_PROP_READ_TIMEOUT_MSEC, 250],
        )

    def test_read_returns_latest_frame(self):
        first = np.full((18, 32, 3), 1, np.uint8)
        second = np.full((18, 32, 3), 2, np.uint8)
        cap = self.make_capture(frames=[(True, first), (True, second)])
        source = VideoStreamSource("http://x/stream")

        with patch("cv2.VideoCapture", return_value=cap), patch.object(source, "_start"):
            self.assertTrue(source.pump())
            self.assertIs(source.read(), first)
            self.assertTrue(source.pump())
            self.assertIs(source.read(), second)

    def test_read_failure_releases_capture(self):
        frame = np.zeros((18, 32, 3), np.uint8)
        cap = self.make_capture(frames=[(True, frame), (False, None)])
        source = VideoStreamSource("http://x/stream", placeholder_size=(32, 18))

        with patch("cv2.VideoCapture", return_value=cap), patch.object(source, "_start"):
            source.pump()
            with self.assertLogs(level="WARNING"):
                self.assertFalse(source.pump())
            image = source.read()

        # A dead stream shows the placeholder, not the last good frame
        self.assertIsNot(image, frame)
        self.assertEqual(image.shape, (18, 32, 3))
        cap.release.assert_called_once()

    def test_recovery_is_logged(self):
        frame = np.zeros((18, 32, 3), np.uint8)
        dead = self.make_capture(opened=False)
        alive = self.make_capture(frames=[(True, frame)])
        source = VideoStreamSource("http://x/stream")

        with patch("cv2.VideoCapture", side_effect=[dead, alive]):
            with self.assertLogs(level="INFO") as logs:
                source.pump()
                self.assertTrue(source.pump())

        self.assertTrue(any("recovered" in r.getMessage() for r in logs.records))

    def test_release_stops_reader_thread(self):
        frame = np.zeros((18, 32, 3), np.uint8)
        cap = MagicMock()
        cap.isOpened.return_value = True
        cap.read.return_value = (True, frame)
        source = VideoStreamSource("http://x/stream", placeholder_size=(32, 18))

        with patch("cv2.VideoCapture", return_value=cap):
            source.read()
            deadline = time.monotonic() + 2.0
            while source.read() is not frame and time.monotonic() < deadline:
                time.sleep(0.01)
            self.assertIs(source.read(), frame)

            source.release()

        self.assertFalse(source._thread.is_alive())
        cap.release.assert_called_once()

    def test_read_after_release_does_not_restart(self):
        source = VideoStreamSource("http://x/stream", placeholder_size=(32, 18))
        source.release()

        with patch("cv2.VideoCapture") as capture_cls:
            image = source.read()

        self.assertEqual(image.shape, (18, 32, 3))
        self.assertIsNone(source._thread)
        capture_cls.assert_not_called()


class TestStalledStream(unittest.TestCase):
    """A detector endpoint that accepts connections but never answers."""

    def setUp(self):
        self.server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server.bind(("127.0.0.1", 0))
        self.server.listen(8)
        port = self.server.getsockname()[1]
        self.backend = f"http://127.0.0.1:{port}"

    def tearDown(self):
        self.server.close()

    def test_read_does_not_block(self):
        source = VideoStreamSource(
            stream_url(self.backend, 1),
            placeholder_size=(32, 18),
            open_timeout=0.5,
            read_timeout=0.5,
        )

        start = time.monotonic()
        frames = [source.read() for _ in range(5)]
        elapsed = time.monotonic() - start
        source.release()

        self.assertLess(elapsed, 0.5)
        self.assertTrue(all(frame.shape == (18, 32, 3) for frame in frames))

    def test_render_loop_keeps_ticking(self):
        frames = []

        async def play_for(seconds):
            loop = asyncio.get_running_loop()
            renderer = StreamRenderer(
                Canvas(),
                AsyncioFrameScheduler(60, loop),
                source_factory=make_source_factory(
                    self.backend,
                    placeholder_size=(32, 18),
                    open_timeout=0.5,
                    read_timeout=0.5,
                ),
                on_frame=lambda surface: frames.append(loop.time()),
            )
            renderer.set_detector(Detector(1))
            start = time.monotonic()
            renderer.set_playing(True)
            started = time.monotonic() - start
            await asyncio.sleep(seconds)
            renderer.close()
            return started

        start = time.monotonic()
        started = asyncio.run(play_for(0.3))
        elapsed = time.monotonic() - start

        self.assertLess(started, 0.5)
        self.assertLess(elapsed, 2.0)
        # Ticks kept running on the event loop while the stream was stalled
        self.assertGreater(len(frames), 5)


if __name__ == "__main__":
    unittest.main()
