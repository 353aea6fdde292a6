"""
Frame composer - base image plus task and template overlays.
"""

from collections.abc import Sequence

import numpy as np

from ..models import OngoingTask, Surface, Template
from ..utils.constants import (
    ALL_STEPS_COLOR,
    ALL_STEPS_DASH,
    ALL_STEPS_LINE_WIDTH,
    REMAINING_STEP_COLOR,
    REMAINING_STEP_LINE_WIDTH,
)
from .canvas import drawing_state
from .templates import stream_draw_fps, stream_draw_templates


class FrameComposer:
    """
    Composes one frame onto a surface.

    Draw order: source image, remaining steps (solid green), all steps
    (dashed grey), live templates, FPS readout.
    """

    def __init__(self, draw_labels: bool = True, show_fps: bool = False):
        self.draw_labels = draw_labels
        self.show_fps = show_fps

    def compose(
        self,
        surface: Surface,
        image: np.ndarray,
        task: OngoingTask | None = None,
        templates: Sequence[Template] | None = None,
        fps: float | None = None,
    ) -> None:
        """
        Draw a complete frame.

        Args:
            surface: Target surface, resized to the image (which clears it)
            image: Decoded BGR source image at native resolution
            task: Task snapshot, or None for no task overlay
            templates: Live templates to draw, if any
            fps: Current frame rate for the readout
        """
        height, width = image.shape[:2]
        surface.resize(width, height)
        surface.draw_image(image, 0, 0)

        if task is not None:
            self._draw_task(surface, task)

        if templates:
            stream_draw_templates(surface, templates, self.draw_labels)

        if self.show_fps and fps is not None:
            stream_draw_fps(surface, fps)

    def _draw_task(self, surface: Surface, task: OngoingTask) -> None:
        with drawing_state(surface):
            surface.state.stroke_color = REMAINING_STEP_COLOR
            surface.state.line_width = REMAINING_STEP_LINE_WIDTH
            surface.state.line_dash = ()
            for region in task.remaining_regions():
                surface.stroke_rect(*region.as_rect())

        with drawing_state(surface):
            surface.state.stroke_color = ALL_STEPS_COLOR
            surface.state.line_width = ALL_STEPS_LINE_WIDTH
            surface.state.line_dash = ALL_STEPS_DASH
            for region in task.all_regions():
                surface.stroke_rect(*region.as_rect())
