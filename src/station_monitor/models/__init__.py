"""
Consolidated data models for the station monitor.

This package contains the data structures shared by drawing, interaction,
and the render loop.
"""

from .detector import Detector, DetectorState, parse_detector_state
from .surface import DrawState, Surface, TextMetrics
from .task import (
    ObjectRegion,
    ObjectState,
    OngoingTask,
    OngoingTaskInstance,
    Step,
    parse_task_snapshot,
)
from .template import (
    Template,
    TrackedTemplate,
    UntrackedTemplate,
    parse_template,
    parse_templates,
    template_to_dict,
)

__all__ = [
    # Detector
    "Detector",
    "DetectorState",
    # Surface protocol
    "DrawState",
    # Task snapshot
    "ObjectRegion",
    "ObjectState",
    "OngoingTask",
    "OngoingTaskInstance",
    "Step",
    "Surface",
    # Templates
    "Template",
    "TextMetrics",
    "TrackedTemplate",
    "UntrackedTemplate",
    "parse_detector_state",
    "parse_task_snapshot",
    "parse_template",
    "parse_templates",
    "template_to_dict",
]
