"""
Canvas - numpy/OpenCV backed drawing surface.

Shapes are rasterized into a coverage mask with OpenCV and then blended
into the BGR pixel buffer using the current composite operation and alpha.
Supported composite operations: source-over, difference, screen, darken.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

import cv2
import numpy as np

from ..models.surface import Color, DrawState, Surface, TextMetrics
from .geometry import distance

FONT = cv2.FONT_HERSHEY_SIMPLEX


@contextmanager
def drawing_state(surface: Surface) -> Iterator[Surface]:
    """
    Scope drawing-state changes to a block.

    Saves the surface state on entry and restores it on every exit,
    including exceptions raised inside the block.
    """
    surface.save()
    try:
        yield surface
    finally:
        surface.restore()


def _split_color(color: Color) -> tuple[tuple[float, float, float], float]:
    """Split a BGR or BGRA color into (bgr, alpha)."""
    if len(color) == 4:
        return (color[0], color[1], color[2]), float(color[3])
    return (color[0], color[1], color[2]), 1.0


def _blend_source_over(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.broadcast_to(src, dst.shape)


def _blend_difference(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.abs(dst - src)


def _blend_screen(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return 255.0 - (255.0 - dst) * (255.0 - src) / 255.0


def _blend_darken(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.minimum(dst, src)


_BLENDERS = {
    "source-over": _blend_source_over,
    "difference": _blend_difference,
    "screen": _blend_screen,
    "darken": _blend_darken,
}


def dash_segments(
    points: Sequence[tuple[float, float]], pattern: Sequence[float]
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """
    Split a polyline into the "on" segments of a dash pattern.

    The pattern runs continuously along the whole polyline, so a dash that
    starts near a corner continues on the next edge. Odd-length patterns
    are repeated once to make them even.

    Args:
        points: Polyline vertices in drawing order
        pattern: Alternating on/off lengths in pixels

    Returns:
        List of (start, end) point pairs to stroke
    """
    pattern = list(pattern)
    if len(pattern) % 2:
        pattern = pattern * 2

    segments = []
    index = 0
    remaining = pattern[0]

    for (ax, ay), (bx, by) in zip(points, points[1:]):
        length = distance(ax, ay, bx, by)
        pos = 0.0
        while pos < length:
            step = min(remaining, length - pos)
            if index % 2 == 0 and step > 0:
                t0 = pos / length
                t1 = (pos + step) / length
                segments.append(
                    (
                        (ax + (bx - ax) * t0, ay + (by - ay) * t0),
                        (ax + (bx - ax) * t1, ay + (by - ay) * t1),
                    )
                )
            pos += step
            remaining -= step
            if remaining <= 1e-9:
                index = (index + 1) % len(pattern)
                remaining = pattern[index]

    return segments


def _point(x: float, y: float) -> tuple[int, int]:
    return int(round(x)), int(round(y))


class Canvas:
    """
    Raster drawing surface holding a BGR ``uint8`` image.

    Resizing always clears the contents, which the render loop relies on
    as its clear-and-redraw step.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.state = DrawState()
        self._stack: list[DrawState] = []
        self._pixels = np.zeros((max(0, height), max(0, width), 3), np.uint8)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def resize(self, width: int, height: int) -> None:
        self._pixels = np.zeros((max(0, int(height)), max(0, int(width)), 3), np.uint8)

    def save(self) -> None:
        self._stack.append(replace(self.state))

    def restore(self) -> None:
        if self._stack:
            self.state = self._stack.pop()

    @property
    def depth(self) -> int:
        """Number of saved states on the stack."""
        return len(self._stack)

    # Primitives

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        mask = self._new_mask()
        thickness = self._thickness()
        dash = self.state.line_dash

        if self._dash_is_active(dash):
            corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h), (x, y)]
            for start, end in dash_segments(corners, dash):
                cv2.line(mask, _point(*start), _point(*end), 255, thickness)
        else:
            cv2.rectangle(mask, _point(x, y), _point(x + w, y + h), 255, thickness)

        self._composite(mask, self.state.stroke_color)

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        x0, x1 = sorted((int(round(x)), int(round(x + w))))
        y0, y1 = sorted((int(round(y)), int(round(y + h))))
        x0, x1 = max(0, x0), min(self.width, x1)
        y0, y1 = max(0, y0), min(self.height, y1)
        if x0 >= x1 or y0 >= y1:
            return

        mask = self._new_mask()
        mask[y0:y1, x0:x1] = 255
        self._composite(mask, self.state.fill_color)

    def stroke_circle(self, cx: float, cy: float, r: float) -> None:
        """Stroke a full circle. Circles are always solid."""
        mask = self._new_mask()
        cv2.circle(mask, _point(cx, cy), int(round(r)), 255, self._thickness())
        self._composite(mask, self.state.stroke_color)

    def fill_text(self, text: str, x: float, y: float) -> None:
        mask = self._text_mask(text, x, y, self.state.font_thickness)
        self._composite(mask, self.state.fill_color)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        """Stroke the outline of the text, leaving the glyph interior alone."""
        grow = max(1, int(round(self.state.line_width / 2)))
        outer = self._text_mask(text, x, y, self.state.font_thickness + 2 * grow)
        inner = self._text_mask(text, x, y, self.state.font_thickness)
        outer[inner > 0] = 0
        self._composite(outer, self.state.stroke_color)

    def measure_text(self, text: str) -> TextMetrics:
        (width, ascent), descent = cv2.getTextSize(
            text, FONT, self.state.font_scale, self.state.font_thickness
        )
        return TextMetrics(width=width, ascent=ascent, descent=descent)

    def draw_image(self, image: np.ndarray, x: int = 0, y: int = 0) -> None:
        """Copy an image onto the surface at (x, y), clipped to bounds."""
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        img_h, img_w = image.shape[:2]
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + img_w), min(self.height, y + img_h)
        if x0 >= x1 or y0 >= y1:
            return

        self._pixels[y0:y1, x0:x1] = image[y0 - y : y1 - y, x0 - x : x1 - x]

    # Internals

    def _new_mask(self) -> np.ndarray:
        return np.zeros((self.height, self.width), np.uint8)

    def _thickness(self) -> int:
        return max(1, int(round(self.state.line_width)))

    @staticmethod
    def _dash_is_active(dash: Sequence[float]) -> bool:
        return bool(dash) and all(d >= 0 for d in dash) and any(d > 0 for d in dash)

    def _text_mask(self, text: str, x: float, y: float, thickness: int) -> np.ndarray:
        mask = self._new_mask()
        cv2.putText(
            mask, text, _point(x, y), FONT, self.state.font_scale, 255, thickness
        )
        return mask

    def _composite(self, mask: np.ndarray, color: Color) -> None:
        """Blend ``color`` into every pixel covered by ``mask``."""
        blender = _BLENDERS.get(self.state.composite)
        if blender is None:
            raise ValueError(f"Unsupported composite operation: {self.state.composite}")

        selected = mask > 0
        if not selected.any():
            return

        bgr, color_alpha = _split_color(color)
        alpha = self.state.alpha * color_alpha
        if alpha <= 0:
            return

        dst = self._pixels[selected].astype(np.float32)
        src = np.asarray(bgr, np.float32)
        out = dst + (blender(dst, src) - dst) * alpha
        self._pixels[selected] = np.clip(np.rint(out), 0, 255).astype(np.uint8)


__all__ = [
    "Canvas",
    "dash_segments",
    "drawing_state",
]
