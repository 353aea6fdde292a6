"""
Template drawing - stream and editor renderings of template rectangles.

Every public function scopes its state changes with ``drawing_state`` so
blend mode, alpha, dash pattern, and colors never leak into later draws.
"""

from collections.abc import Iterable

import numpy as np

from ..models import Surface, Template
from ..utils.constants import (
    ABSENT_COLOR,
    DARKEN_FILL,
    FPS_FONT_SCALE,
    FPS_FONT_THICKNESS,
    FPS_HIGH_COLOR,
    FPS_LOW_COLOR,
    FPS_LOW_THRESHOLD,
    FPS_MID_COLOR,
    FPS_MID_THRESHOLD,
    FPS_OUTLINE_COLOR,
    FPS_POSITION,
    LABEL_BACKGROUND,
    LABEL_FONT_SCALE,
    LABEL_FONT_THICKNESS,
    LABEL_PADDING_X,
    LABEL_PADDING_Y,
    LABEL_TEXT_COLOR,
    PRESENT_COLOR,
    SELECTED_TEMPLATE_COLOR,
    STREAM_TEMPLATE_LINE_WIDTH,
    TEMPLATE_COLOR,
    TEMPLATE_DASH_COLOR,
    TEMPLATE_HANDLE_RADIUS,
    TEMPLATE_LINE_WIDTH,
    UNTRACKED_ALPHA,
    UNTRACKED_DASH_COLOR,
)
from .canvas import drawing_state

Rect = tuple[float, float, float, float]


def draw_label(surface: Surface, x: float, y: float, text: str) -> None:
    """
    Draw a text label on a filled box just above-right of (x, y).

    Labels are never blended or dashed; the current alpha still applies.
    """
    with drawing_state(surface):
        state = surface.state
        state.composite = "source-over"
        state.line_dash = ()
        state.line_width = TEMPLATE_LINE_WIDTH
        state.font_scale = LABEL_FONT_SCALE
        state.font_thickness = LABEL_FONT_THICKNESS

        metrics = surface.measure_text(text)

        state.fill_color = LABEL_BACKGROUND
        surface.fill_rect(
            x - LABEL_PADDING_X,
            y - 2 * LABEL_PADDING_Y - metrics.ascent,
            metrics.width + 4 * LABEL_PADDING_X,
            metrics.ascent + 2 * LABEL_PADDING_Y - 1,
        )

        state.fill_color = LABEL_TEXT_COLOR
        surface.fill_text(text, x + LABEL_PADDING_X, y - LABEL_PADDING_Y)


def fps_color(fps: float) -> tuple[int, int, int]:
    """Color band for an FPS value: red below 5, amber below 15, else green."""
    if fps < FPS_LOW_THRESHOLD:
        return FPS_LOW_COLOR
    if fps < FPS_MID_THRESHOLD:
        return FPS_MID_COLOR
    return FPS_HIGH_COLOR


def stream_draw_fps(surface: Surface, fps: float) -> None:
    """Draw the frames-per-second readout in the top-left corner."""
    text = f"{fps:.0f}"
    x, y = FPS_POSITION

    with drawing_state(surface):
        state = surface.state
        state.composite = "source-over"
        state.font_scale = FPS_FONT_SCALE
        state.font_thickness = FPS_FONT_THICKNESS
        state.line_width = 2
        state.fill_color = fps_color(fps)
        state.stroke_color = FPS_OUTLINE_COLOR

        surface.fill_text(text, x, y)
        surface.stroke_text(text, x, y)


def draw_dashed_template(
    surface: Surface,
    template: Template,
    background_color: tuple,
    dash_color: tuple,
) -> None:
    """
    Stroke a template twice so it stays visible over any image.

    The first pass is a solid "difference" stroke in the background color;
    the second is a normal dashed stroke in the dash color, with on/off
    lengths of twice the current line width.
    """
    rect = (template.x, template.y, template.width, template.height)

    with drawing_state(surface):
        state = surface.state
        state.composite = "difference"
        state.stroke_color = background_color
        state.line_dash = ()
        surface.stroke_rect(*rect)

        state.composite = "source-over"
        state.line_dash = (2 * state.line_width, 2 * state.line_width)
        state.stroke_color = dash_color
        surface.stroke_rect(*rect)


def partition_templates(
    templates: Iterable[Template],
) -> tuple[list[Template], list[Template]]:
    """Split templates into (tracked, untracked), keeping order in each."""
    tracked, untracked = [], []
    for template in templates:
        (tracked if template.is_tracked else untracked).append(template)
    return tracked, untracked


def stream_draw_templates(
    surface: Surface, templates: Iterable[Template], draw_labels: bool
) -> None:
    """
    Draw templates over the live stream.

    Untracked templates are drawn first at half opacity; tracked templates
    follow at full opacity, dashed green when present and red when absent.
    """
    tracked, untracked = partition_templates(templates)

    with drawing_state(surface):
        state = surface.state
        state.line_width = STREAM_TEMPLATE_LINE_WIDTH

        state.alpha = UNTRACKED_ALPHA
        for template in untracked:
            draw_dashed_template(surface, template, TEMPLATE_COLOR, UNTRACKED_DASH_COLOR)
            if draw_labels:
                draw_label(surface, template.x, template.y, template.name)

        state.alpha = 1.0
        for template in tracked:
            dash_color = PRESENT_COLOR if template.present else ABSENT_COLOR
            draw_dashed_template(surface, template, TEMPLATE_COLOR, dash_color)
            if draw_labels:
                draw_label(surface, template.x, template.y, template.name)


def editor_draw_templates(
    surface: Surface, templates: Iterable[Template], draw_labels: bool
) -> None:
    """Draw every template with the neutral editor styling."""
    with drawing_state(surface):
        surface.state.line_width = TEMPLATE_LINE_WIDTH

        for template in templates:
            draw_dashed_template(surface, template, TEMPLATE_COLOR, TEMPLATE_DASH_COLOR)
            if draw_labels:
                draw_label(surface, template.x, template.y, template.name)


def editor_draw_selected_template(
    surface: Surface, template: Template, draw_labels: bool
) -> None:
    """
    Draw the selected template with its resize handle.

    The handle is a circle of radius TEMPLATE_HANDLE_RADIUS centered on the
    bottom-right corner, the same zone the interaction resolver treats as
    the resize hit area.
    """
    with drawing_state(surface):
        state = surface.state
        state.composite = "screen"
        state.stroke_color = SELECTED_TEMPLATE_COLOR
        state.line_width = TEMPLATE_LINE_WIDTH
        state.line_dash = ()

        surface.stroke_rect(template.x, template.y, template.width, template.height)

        corner_x, corner_y = template.bottom_right
        surface.stroke_circle(corner_x, corner_y, TEMPLATE_HANDLE_RADIUS)

        if draw_labels:
            draw_label(surface, template.x, template.y, template.name)


def darken_bands(
    x: float, y: float, w: float, h: float, canvas_width: float, canvas_height: float
) -> list[Rect]:
    """
    Rectangles covering the canvas outside the focus rectangle.

    Returns the top, left, right, and bottom bands as (x, y, w, h). They
    tile the canvas minus the focus rectangle without gaps or overlap.
    """
    return [
        (0, 0, canvas_width, y),
        (0, y, x, h),
        (x + w, y, canvas_width - x - w, h),
        (0, y + h, canvas_width, canvas_height - y - h),
    ]


def editor_darken_outside_rectangle(
    surface: Surface, x: float, y: float, w: float, h: float, image: np.ndarray
) -> None:
    """Dim everything outside (x, y, w, h) relative to the image bounds."""
    canvas_height, canvas_width = image.shape[:2]

    with drawing_state(surface):
        surface.state.composite = "darken"
        surface.state.fill_color = DARKEN_FILL

        for band in darken_bands(x, y, w, h, canvas_width, canvas_height):
            surface.fill_rect(*band)


__all__ = [
    "darken_bands",
    "draw_dashed_template",
    "draw_label",
    "editor_darken_outside_rectangle",
    "editor_draw_selected_template",
    "editor_draw_templates",
    "fps_color",
    "partition_templates",
    "stream_draw_fps",
    "stream_draw_templates",
]
