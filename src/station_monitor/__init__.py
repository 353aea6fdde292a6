"""
Station Monitor

Live overlay for a workstation's detector stream. Each frame draws the
video (or a placeholder), the ongoing task's remaining and upcoming step
regions, and the station's detection templates, then presents it in a
window or as a snapshot JPEG.

Supports a Terraform-like workflow:
  --validate  Check configuration validity
  --edit      Adjust templates over a still image

Package structure:
  render/   - Drawing surface, overlays, interaction, and the render loop
  models/   - Templates, task snapshots, detectors, surface protocol
  config/   - Configuration loading and validation
  utils/    - Constants and the snapshot server
"""

__version__ = "1.0.0"

# Configuration
from .config import (
    Config,
    ConfigValidationError,
    ValidationResult,
    load_config,
    validate_config_full,
)

# Models
from .models import (
    Detector,
    OngoingTask,
    Template,
    TrackedTemplate,
    UntrackedTemplate,
    parse_task_snapshot,
    parse_template,
)

# Rendering
from .render import (
    AspectRatioContainer,
    AsyncioFrameScheduler,
    Canvas,
    FrameComposer,
    StreamRenderer,
    find_action,
)

__all__ = [
    "AspectRatioContainer",
    "AsyncioFrameScheduler",
    "Canvas",
    # Config
    "Config",
    "ConfigValidationError",
    # Models
    "Detector",
    # Render
    "FrameComposer",
    "OngoingTask",
    "StreamRenderer",
    "Template",
    "TrackedTemplate",
    "UntrackedTemplate",
    "ValidationResult",
    "find_action",
    "load_config",
    "parse_task_snapshot",
    "parse_template",
    "validate_config_full",
]
