"""
Configuration loading - file discovery, pointer files, env overrides.
"""

import logging
import os
from pathlib import Path

import yaml

from ..utils.constants import ENV_BACKEND_URL, ENV_DETECTOR_ID
from .schemas import Config
from .validator import ConfigValidationError, ValidationResult, validate_config_full

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


def find_config_file(config_path: str = DEFAULT_CONFIG_NAME) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if not the default name)
    2. Current directory (config.yaml)
    3. ~/.config/station-monitor/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None when the default name is not found
        anywhere (built-in defaults apply)

    Raises:
        FileNotFoundError: If an explicitly specified file does not exist
    """
    if config_path != DEFAULT_CONFIG_NAME:
        specified = Path(config_path)
        if not specified.exists():
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "station-monitor" / DEFAULT_CONFIG_NAME,
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    return None


def read_config_file(config_file: Path) -> dict:
    """
    Read a YAML config file.

    Supports pointer files: if the file only contains ``use: other.yaml``,
    that file (relative to the pointer) is loaded instead.

    Raises:
        yaml.YAMLError: If the YAML is invalid
    """
    with open(config_file, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if isinstance(config, dict) and list(config.keys()) == ["use"]:
        pointer_path = Path(config_file).parent / config["use"]
        logger.info(f"Config pointer: {config_file} -> {pointer_path}")
        with open(pointer_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

    return config


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_BACKEND_URL in os.environ:
        logger.info(f"Using backend URL from environment: {ENV_BACKEND_URL}")
        config.setdefault("backend", {})["base_url"] = os.environ[ENV_BACKEND_URL]

    if ENV_DETECTOR_ID in os.environ:
        logger.info(f"Using detector id from environment: {ENV_DETECTOR_ID}")
        config.setdefault("stream", {})["detector_id"] = os.environ[ENV_DETECTOR_ID]

    return config


def load_raw_config(config_path: str = DEFAULT_CONFIG_NAME) -> dict:
    """Locate, read, and apply env overrides, without validating."""
    config_file = find_config_file(config_path)
    if config_file is None:
        logger.info("No config file found, using built-in defaults")
        config = {}
    else:
        config = read_config_file(config_file)
        logger.info(f"Configuration loaded from {config_file}")

    return load_config_with_env(config)


def check_config(config: dict) -> ValidationResult:
    """
    Validate a loaded config mapping, logging any warnings.

    Returns:
        The valid ValidationResult (parsed config plus derived settings)

    Raises:
        ConfigValidationError: If validation fails
    """
    result = validate_config_full(config)
    if not result.valid:
        raise ConfigValidationError(result)

    for warning in result.warnings:
        logger.warning(warning)

    logger.info("Configuration validated")
    return result


def load_config(config_path: str = DEFAULT_CONFIG_NAME) -> Config:
    """
    Load and validate configuration.

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        yaml.YAMLError: If the file is not valid YAML
        ConfigValidationError: If validation fails
    """
    return check_config(load_raw_config(config_path)).config
