"""
Rendering and interaction engine.

  geometry     - hit-test predicates
  canvas       - numpy/OpenCV drawing surface with a state stack
  templates    - template, label, vignette, and FPS drawing
  interaction  - pointer -> resize/move action resolution
  composer     - base image plus task and template overlays
  source       - detector stream / placeholder frame sources
  loop         - per-frame render loop and aspect-ratio container
"""

from .canvas import Canvas, drawing_state
from .composer import FrameComposer
from .geometry import distance, is_in_circle, is_in_rectangle
from .interaction import (
    NO_ACTION,
    ActionType,
    DrawingAction,
    apply_drag,
    find_action,
    get_action_for_template,
)
from .loop import (
    AspectRatioContainer,
    AsyncioFrameScheduler,
    FpsCounter,
    LoopState,
    ResizeNotifier,
    Size,
    StreamRenderer,
    make_source_factory,
)
from .source import PlaceholderSource, VideoStreamSource, resolve_source, stream_url
from .templates import (
    darken_bands,
    draw_dashed_template,
    draw_label,
    editor_darken_outside_rectangle,
    editor_draw_selected_template,
    editor_draw_templates,
    stream_draw_fps,
    stream_draw_templates,
)

__all__ = [
    "NO_ACTION",
    "ActionType",
    "AspectRatioContainer",
    "AsyncioFrameScheduler",
    "Canvas",
    "DrawingAction",
    "FpsCounter",
    "FrameComposer",
    "LoopState",
    "PlaceholderSource",
    "ResizeNotifier",
    "Size",
    "StreamRenderer",
    "VideoStreamSource",
    "apply_drag",
    "darken_bands",
    "distance",
    "draw_dashed_template",
    "draw_label",
    "drawing_state",
    "editor_darken_outside_rectangle",
    "editor_draw_selected_template",
    "editor_draw_templates",
    "find_action",
    "get_action_for_template",
    "is_in_circle",
    "is_in_rectangle",
    "make_source_factory",
    "resolve_source",
    "stream_draw_fps",
    "stream_draw_templates",
    "stream_url",
]
