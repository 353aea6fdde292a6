"""
Tests for frame output sinks
"""

import os
import tempfile
import unittest

import cv2
import numpy as np

from src.station_monitor.output import SnapshotSink, fit_to_container
from src.station_monitor.render.canvas import Canvas
from src.station_monitor.render.loop import AspectRatioContainer, Size


class TestFitToContainer(unittest.TestCase):
    def test_stretches_to_container(self):
        frame = np.zeros((100, 100, 3), np.uint8)

        fitted = fit_to_container(frame, Size(160, 90))

        self.assertEqual(fitted.shape, (90, 160, 3))

    def test_rounds_fractional_height(self):
        fitted = fit_to_container(np.zeros((10, 10, 3), np.uint8), Size(1000, 562.5))
        self.assertEqual(fitted.shape[:2], (562, 1000))

    def test_same_size_is_unchanged(self):
        frame = np.zeros((90, 160, 3), np.uint8)
        self.assertIs(fit_to_container(frame, Size(160, 90)), frame)

    def test_empty_frame(self):
        fitted = fit_to_container(np.zeros((0, 0, 3), np.uint8), Size(16, 9))
        self.assertEqual(fitted.shape, (9, 16, 3))


class TestSnapshotSink(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.now = 0.0
        self.sink = SnapshotSink(
            AspectRatioContainer(320),
            snapshot_dir=self.tmpdir.name,
            interval=1.0,
            clock=lambda: self.now,
        )
        self.surface = Canvas(64, 36)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_writes_latest_jpg(self):
        self.sink.present(self.surface)

        image = cv2.imread(self.sink.path)
        self.assertIsNotNone(image)
        self.assertEqual(image.shape[:2], (180, 320))
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir.name, "latest.tmp.jpg")))

    def test_rate_limited(self):
        self.sink.present(self.surface)
        first_mtime = os.stat(self.sink.path).st_mtime_ns
        os.utime(self.sink.path, ns=(0, 0))

        self.now = 0.5
        self.sink.present(self.surface)
        self.assertEqual(os.stat(self.sink.path).st_mtime_ns, 0)

        self.now = 1.5
        self.sink.present(self.surface)
        self.assertNotEqual(os.stat(self.sink.path).st_mtime_ns, 0)
        self.assertGreater(first_mtime, 0)


if __name__ == "__main__":
    unittest.main()
