"""
Template editor - move and resize templates over a still image.

Pointer events from an OpenCV window go through the interaction resolver;
drawing uses the editor renderings. Edits live only in memory: the final
template list is returned to the caller.

Controls:
  drag inside a template   move it
  drag the corner handle   resize it
  l                        toggle labels
  q / Esc                  finish
"""

import logging
from collections.abc import Sequence

import cv2
import numpy as np

from .models import Template
from .render import (
    NO_ACTION,
    ActionType,
    Canvas,
    apply_drag,
    editor_darken_outside_rectangle,
    editor_draw_selected_template,
    editor_draw_templates,
    find_action,
)

logger = logging.getLogger(__name__)


class TemplateEditor:
    """
    Editing state for a template list over one image.

    ``handle_pointer`` matches the OpenCV mouse callback signature so it
    can be registered directly with ``cv2.setMouseCallback``.
    """

    def __init__(
        self,
        image: np.ndarray,
        templates: Sequence[Template],
        window_name: str = "Template Editor",
        draw_labels: bool = True,
    ):
        self.image = image
        self.templates = list(templates)
        self.window_name = window_name
        self.draw_labels = draw_labels
        self.selected: int | None = None
        self.action = NO_ACTION
        self.canvas = Canvas()

    @property
    def selected_template(self) -> Template | None:
        if self.selected is None:
            return None
        return self.templates[self.selected]

    def handle_pointer(self, event: int, x: int, y: int, flags=0, param=None) -> None:
        if event == cv2.EVENT_LBUTTONDOWN:
            hit = find_action(x, y, self.templates)
            if hit is None:
                self.selected, self.action = None, NO_ACTION
            else:
                self.selected, self.action = hit

        elif event == cv2.EVENT_MOUSEMOVE:
            if self.action.type != ActionType.NONE and self.selected is not None:
                self.templates[self.selected] = apply_drag(
                    self.templates[self.selected], self.action, x, y
                )

        elif event == cv2.EVENT_LBUTTONUP:
            self.action = NO_ACTION

    def render(self) -> np.ndarray:
        """Draw image, vignette, templates, and the selection."""
        height, width = self.image.shape[:2]
        self.canvas.resize(width, height)
        self.canvas.draw_image(self.image, 0, 0)

        selected = self.selected_template
        if selected is not None:
            editor_darken_outside_rectangle(
                self.canvas,
                selected.x,
                selected.y,
                selected.width,
                selected.height,
                self.image,
            )

        others = [t for i, t in enumerate(self.templates) if i != self.selected]
        editor_draw_templates(self.canvas, others, self.draw_labels)

        if selected is not None:
            editor_draw_selected_template(self.canvas, selected, self.draw_labels)

        return self.canvas.pixels

    def run(self) -> list[Template]:
        """Run the editor window until the user quits."""
        cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.window_name, self.handle_pointer)
        logger.info("Editor open - drag to move, drag corner to resize, q to finish")

        try:
            while True:
                cv2.imshow(self.window_name, self.render())
                key = cv2.waitKey(15) & 0xFF
                if key in (ord("q"), 27):
                    break
                if key == ord("l"):
                    self.draw_labels = not self.draw_labels
                if cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) < 1:
                    break
        finally:
            cv2.destroyWindow(self.window_name)

        return self.templates
