"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
Every section has defaults, so an empty config file is valid.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.constants import (
    DEFAULT_CONTAINER_WIDTH,
    DEFAULT_REFRESH_RATE,
    DEFAULT_SNAPSHOT_INTERVAL,
    DEFAULT_SNAPSHOT_PORT,
    SNAPSHOT_DIR,
    STREAM_OPEN_TIMEOUT,
    STREAM_READ_TIMEOUT,
    STREAM_RECONNECT_DELAY,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class BackendConfig(StrictModel):
    """Backend API settings."""

    base_url: str = Field(default="http://localhost:5000", min_length=1)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


class StreamConfig(StrictModel):
    """Stream source settings."""

    detector_id: int | None = Field(default=None, ge=1)
    detector_name: str = ""
    playing: bool = True
    placeholder_width: int = Field(default=640, gt=0)
    placeholder_height: int = Field(default=360, gt=0)
    reconnect_delay: float = Field(default=STREAM_RECONNECT_DELAY, ge=0)
    open_timeout: float = Field(default=STREAM_OPEN_TIMEOUT, gt=0)
    read_timeout: float = Field(default=STREAM_READ_TIMEOUT, gt=0)


class RenderConfig(StrictModel):
    """Render loop and presentation settings."""

    refresh_rate: float = Field(default=DEFAULT_REFRESH_RATE, gt=0, le=240)
    aspect_width: int = Field(default=16, gt=0)
    aspect_height: int = Field(default=9, gt=0)
    container_width: int = Field(default=DEFAULT_CONTAINER_WIDTH, gt=0)
    draw_labels: bool = True
    show_fps: bool = True


class OverlayConfig(StrictModel):
    """Overlay inputs: task snapshot and live templates."""

    task_source: str | None = Field(
        default=None, description="Task snapshot JSON/YAML path or http(s) URL"
    )
    templates_file: str | None = Field(
        default=None, description="Template list JSON/YAML path"
    )


class OutputConfig(StrictModel):
    """Where composed frames go."""

    mode: Literal["window", "snapshot"] = "snapshot"
    window_name: str = Field(default="Station Monitor", min_length=1)
    snapshot_dir: str = SNAPSHOT_DIR
    snapshot_interval: float = Field(default=DEFAULT_SNAPSHOT_INTERVAL, ge=0)
    snapshot_port: int = Field(default=DEFAULT_SNAPSHOT_PORT, ge=1, le=65535)
    serve_snapshots: bool = True


class RuntimeConfig(StrictModel):
    """Runtime configuration."""

    default_duration_minutes: float = Field(default=60.0, gt=0)


class Config(StrictModel):
    """Complete configuration schema."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
