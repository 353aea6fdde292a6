"""
Surface Protocol - Common interface for 2D drawing targets.

The drawing functions in ``render.templates`` and the frame composer only
talk to this protocol, so they can target the numpy-backed ``Canvas`` or a
recording double in tests.

Drawing state (blend mode, alpha, colors, line width, dash pattern, font)
behaves like a stack: ``save()`` pushes a copy of the current state and
``restore()`` pops it. Callers should use ``render.canvas.drawing_state``
rather than pairing the calls by hand.
"""

from dataclasses import dataclass
from typing import Literal, Protocol

import numpy as np

CompositeOp = Literal["source-over", "difference", "screen", "darken"]
Color = tuple  # (b, g, r) or (b, g, r, alpha)


@dataclass
class DrawState:
    """Mutable drawing state saved/restored as a unit."""

    composite: CompositeOp = "source-over"
    alpha: float = 1.0
    line_width: float = 1.0
    stroke_color: Color = (0, 0, 0)
    fill_color: Color = (0, 0, 0)
    line_dash: tuple[float, ...] = ()
    font_scale: float = 0.5
    font_thickness: int = 1


@dataclass(frozen=True)
class TextMetrics:
    """Measured text extent in pixels."""

    width: int
    ascent: int
    descent: int


class Surface(Protocol):
    """
    Protocol for raster drawing surfaces.

    Example:
        with drawing_state(surface):
            surface.state.line_width = 4
            surface.stroke_rect(10, 10, 100, 50)
    """

    state: DrawState

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def pixels(self) -> np.ndarray: ...

    def resize(self, width: int, height: int) -> None:
        """Resize the surface. Always clears its contents."""
        ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def stroke_circle(self, cx: float, cy: float, r: float) -> None: ...

    def fill_text(self, text: str, x: float, y: float) -> None: ...

    def stroke_text(self, text: str, x: float, y: float) -> None: ...

    def measure_text(self, text: str) -> TextMetrics: ...

    def draw_image(self, image: np.ndarray, x: int = 0, y: int = 0) -> None: ...
