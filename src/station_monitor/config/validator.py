"""
Configuration Validator - Validates config syntax and semantic correctness.

Schema errors come from Pydantic; semantic checks add warnings for setups
that run but degrade (e.g. no detector means placeholder-only output).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..render.source import stream_url
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)


class Colors:
    """ANSI color codes for terminal output."""

    CYAN = "\033[0;36m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[0;33m"
    RED = "\033[0;31m"
    GRAY = "\033[0;90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class ConfigValidationError(Exception):
    """Raised when config validation fails."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__("; ".join(result.errors))


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)
    config: Config | None = None


def validate_config_full(config: dict) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate

    Returns:
        ValidationResult with errors, warnings, derived settings, and the
        parsed Config when valid.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.valid = False
        result.errors.append("Configuration must be a mapping")
        return result

    try:
        parsed = validate_config_pydantic(config)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            result.errors.append(f"{location}: {error['msg']}")
        result.valid = False
        return result

    _check_stream(parsed, result)
    _check_overlay_inputs(parsed, result)
    _check_render(parsed, result)

    result.config = parsed
    result.valid = not result.errors
    return result


def _check_stream(config: Config, result: ValidationResult) -> None:
    detector_id = config.stream.detector_id
    if detector_id is None:
        result.warnings.append(
            "stream.detector_id not set - the placeholder image will be shown"
        )
        result.derived["source"] = "placeholder"
    elif not config.stream.playing:
        result.warnings.append("stream.playing is false - the placeholder image will be shown")
        result.derived["source"] = "placeholder"
    else:
        result.derived["source"] = stream_url(config.backend.base_url, detector_id)


def _check_overlay_inputs(config: Config, result: ValidationResult) -> None:
    task_source = config.overlay.task_source
    if task_source and not task_source.startswith(("http://", "https://")):
        if not Path(task_source).exists():
            result.warnings.append(
                f"Task snapshot not found: {task_source} (no task overlay will be drawn)"
            )

    templates_file = config.overlay.templates_file
    if templates_file and not Path(templates_file).exists():
        result.errors.append(f"Templates file not found: {templates_file}")


def _check_render(config: Config, result: ValidationResult) -> None:
    render = config.render
    container_height = render.container_width * render.aspect_height / render.aspect_width
    result.derived["container"] = (render.container_width, container_height)

    if config.output.mode == "snapshot" and config.output.snapshot_interval == 0:
        result.warnings.append(
            "output.snapshot_interval is 0 - latest.jpg is rewritten every frame"
        )


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result in Terraform-like format."""
    print()
    print(f"{Colors.BOLD}Configuration Validation{Colors.RESET}")
    print("=" * 60)

    if result.valid:
        print(f"\n{Colors.GREEN}✓ Configuration is valid{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}✗ Configuration has errors{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}✗{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    if result.valid and result.derived:
        print(f"\n{Colors.CYAN}Derived Configuration:{Colors.RESET}")

        source = result.derived.get("source")
        if source:
            print(f"  Stream source: {source}")

        container = result.derived.get("container")
        if container:
            width, height = container
            print(f"  Container: {width} x {height:g}")

    print()
