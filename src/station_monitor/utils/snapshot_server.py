"""
Snapshot server - publishes latest.jpg over HTTP for remote viewers.

The snapshot sink rewrites latest.jpg on its own schedule; a child
``http.server`` process serves the snapshot directory as static files.
"""

import logging
import os
import socket
import subprocess
import sys

from .constants import DEFAULT_SNAPSHOT_PORT, SNAPSHOT_DIR

logger = logging.getLogger(__name__)


def _lan_address() -> str:
    """Address other machines on the network can reach this host at."""
    # UDP connect sends nothing; it only selects the outbound interface
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        probe.connect(("8.8.8.8", 80))
        return probe.getsockname()[0]
    except OSError:
        return "localhost"
    finally:
        probe.close()


def _port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        return sock.connect_ex(("localhost", port)) == 0


def start_snapshot_server(
    snapshot_dir: str = SNAPSHOT_DIR, port: int = DEFAULT_SNAPSHOT_PORT
) -> tuple[str, subprocess.Popen | None]:
    """
    Serve ``snapshot_dir`` on ``port``.

    Returns:
        (URL of latest.jpg, server process). The process is None when the
        port is already taken or the child could not be spawned.
    """
    os.makedirs(snapshot_dir, exist_ok=True)
    url = f"http://{_lan_address()}:{port}/latest.jpg"

    if _port_in_use(port):
        logger.info(f"Port {port} busy - reusing the server already bound to it")
        return url, None

    try:
        process = subprocess.Popen(
            [sys.executable, "-m", "http.server", str(port), "--bind", "0.0.0.0"],
            cwd=snapshot_dir,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.warning(f"Could not start snapshot server: {e}")
        return url, None

    logger.info(f"Serving {snapshot_dir} on port {port}")
    return url, process


def stop_snapshot_server(process: subprocess.Popen | None) -> None:
    """Terminate the server process, killing it if it lingers."""
    if process is None:
        return
    process.terminate()
    try:
        process.wait(timeout=2)
    except subprocess.TimeoutExpired:
        process.kill()
