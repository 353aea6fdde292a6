"""
Utility modules for constants and the snapshot HTTP server.
"""

from .constants import (
    DEFAULT_SNAPSHOT_PORT,
    ENV_BACKEND_URL,
    ENV_DETECTOR_ID,
    SNAPSHOT_DIR,
    TEMPLATE_HANDLE_RADIUS,
)
from .snapshot_server import start_snapshot_server, stop_snapshot_server

__all__ = [
    "DEFAULT_SNAPSHOT_PORT",
    "ENV_BACKEND_URL",
    "ENV_DETECTOR_ID",
    "SNAPSHOT_DIR",
    "TEMPLATE_HANDLE_RADIUS",
    "start_snapshot_server",
    "stop_snapshot_server",
]
