"""
Tests for hit-test geometry
"""

import unittest

from src.station_monitor.render.geometry import (
    distance,
    is_between,
    is_in_circle,
    is_in_rectangle,
)


class TestDistance(unittest.TestCase):
    """Test Euclidean distance."""

    def test_three_four_five(self):
        """Test the classic right triangle."""
        self.assertEqual(distance(0, 0, 3, 4), 5.0)

    def test_symmetric(self):
        """Test distance does not depend on argument order."""
        self.assertEqual(distance(1, 2, 7, 10), distance(7, 10, 1, 2))

    def test_same_point(self):
        """Test distance from a point to itself is zero."""
        self.assertEqual(distance(5, 5, 5, 5), 0.0)


class TestRectangle(unittest.TestCase):
    """Test closed-interval rectangle containment."""

    def test_inside(self):
        self.assertTrue(is_in_rectangle(5, 5, 0, 0, 10, 10))

    def test_corners_are_inside(self):
        """Test all four corners count as inside."""
        for x, y in [(0, 0), (10, 0), (0, 10), (10, 10)]:
            with self.subTest(x=x, y=y):
                self.assertTrue(is_in_rectangle(x, y, 0, 0, 10, 10))

    def test_just_outside(self):
        self.assertFalse(is_in_rectangle(10.01, 5, 0, 0, 10, 10))
        self.assertFalse(is_in_rectangle(5, -0.01, 0, 0, 10, 10))

    def test_zero_size_rectangle(self):
        """Test a degenerate rectangle still contains its origin."""
        self.assertTrue(is_in_rectangle(3, 4, 3, 4, 0, 0))
        self.assertFalse(is_in_rectangle(3, 5, 3, 4, 0, 0))

    def test_is_between_inclusive(self):
        self.assertTrue(is_between(1, 1, 2))
        self.assertTrue(is_between(2, 1, 2))
        self.assertFalse(is_between(2.5, 1, 2))


class TestCircle(unittest.TestCase):
    """Test open-interval circle containment."""

    def test_center_inside(self):
        self.assertTrue(is_in_circle(0, 0, 0, 0, 12))

    def test_boundary_is_outside(self):
        """Test a point exactly on the radius is not inside."""
        self.assertFalse(is_in_circle(12, 0, 0, 0, 12))
        self.assertFalse(is_in_circle(0, -12, 0, 0, 12))

    def test_just_inside_boundary(self):
        self.assertTrue(is_in_circle(11.99, 0, 0, 0, 12))

    def test_diagonal(self):
        """Test distance is Euclidean, not per-axis."""
        self.assertFalse(is_in_circle(9, 9, 0, 0, 12))  # ~12.73 away
        self.assertTrue(is_in_circle(8, 8, 0, 0, 12))  # ~11.31 away


if __name__ == "__main__":
    unittest.main()
