"""
Configuration loading and validation.

- load_config: Locate, read, override from env, and validate config.yaml
- check_config: Validate an already loaded mapping, raising on errors
- validate_config_full: Validation with errors/warnings/derived settings
- print_validation_result: Terraform-like validation report

Pydantic schemas available for type-safe access:
- Config: Complete configuration schema
"""

from .loader import (
    check_config,
    find_config_file,
    load_config,
    load_config_with_env,
    load_raw_config,
    read_config_file,
)
from .schemas import (
    BackendConfig,
    Config,
    OutputConfig,
    OverlayConfig,
    RenderConfig,
    RuntimeConfig,
    StreamConfig,
    validate_config_pydantic,
)
from .validator import (
    Colors,
    ConfigValidationError,
    ValidationResult,
    print_validation_result,
    validate_config_full,
)

__all__ = [
    "BackendConfig",
    "Colors",
    # Pydantic validation
    "Config",
    # Exception
    "ConfigValidationError",
    "OutputConfig",
    "OverlayConfig",
    "RenderConfig",
    "RuntimeConfig",
    "StreamConfig",
    "ValidationResult",
    # Loading
    "check_config",
    "find_config_file",
    "load_config",
    "load_config_with_env",
    "load_raw_config",
    # Display
    "print_validation_result",
    "read_config_file",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
