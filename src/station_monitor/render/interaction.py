"""
Interaction resolver - maps pointer positions to template actions.

Hit zones match what ``editor_draw_selected_template`` draws: the resize
handle circle at the bottom-right corner, and the template rectangle.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import IntEnum

from ..models import Template
from ..utils.constants import TEMPLATE_HANDLE_RADIUS
from .geometry import is_in_circle, is_in_rectangle


class ActionType(IntEnum):
    NONE = 0
    RESIZE = 1
    MOVE = 2


@dataclass(frozen=True)
class DrawingAction:
    """
    Result of resolving a pointer position against a template.

    Attributes:
        type: Action kind
        offset_x: Pointer x minus template x at hit time (MOVE only)
        offset_y: Pointer y minus template y at hit time (MOVE only)
    """

    type: ActionType
    offset_x: float = 0.0
    offset_y: float = 0.0


NO_ACTION = DrawingAction(ActionType.NONE)
RESIZE_ACTION = DrawingAction(ActionType.RESIZE)


def get_action_for_template(
    x: float, y: float, template: Template
) -> DrawingAction | None:
    """
    Classify what a pointer at (x, y) would do to a template.

    The resize handle is checked before the rectangle: near the corner the
    two zones overlap and resize wins.

    Returns:
        RESIZE action, MOVE action with grab offset, or None
    """
    corner_x, corner_y = template.bottom_right
    if is_in_circle(x, y, corner_x, corner_y, TEMPLATE_HANDLE_RADIUS):
        return RESIZE_ACTION

    if is_in_rectangle(x, y, template.x, template.y, template.width, template.height):
        return DrawingAction(
            ActionType.MOVE, offset_x=x - template.x, offset_y=y - template.y
        )

    return None


def find_action(
    x: float, y: float, templates: Sequence[Template]
) -> tuple[int, DrawingAction] | None:
    """
    Resolve a pointer against a list of templates.

    Templates later in the list are drawn on top, so they are checked first.

    Returns:
        (index, action) of the topmost hit, or None
    """
    for index in range(len(templates) - 1, -1, -1):
        action = get_action_for_template(x, y, templates[index])
        if action is not None:
            return index, action
    return None


def apply_drag(
    template: Template, action: DrawingAction, x: float, y: float
) -> Template:
    """
    Compute the template after dragging the pointer to (x, y).

    MOVE keeps the original grab point under the pointer. RESIZE moves the
    bottom-right corner to the pointer, clamping the size at zero.
    """
    if action.type == ActionType.MOVE:
        return replace(template, x=x - action.offset_x, y=y - action.offset_y)

    if action.type == ActionType.RESIZE:
        return replace(
            template,
            width=max(0.0, x - template.x),
            height=max(0.0, y - template.y),
        )

    return template


__all__ = [
    "NO_ACTION",
    "ActionType",
    "DrawingAction",
    "apply_drag",
    "find_action",
    "get_action_for_template",
]
