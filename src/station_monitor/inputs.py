"""
Overlay inputs - task snapshots and template lists from files or URLs.
"""

import json
import logging
from pathlib import Path

import requests
import yaml

from .models import OngoingTask, Template, parse_task_snapshot, parse_templates

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # Seconds


def _parse_document(text: str, name: str):
    if name.endswith((".yaml", ".yml")):
        return yaml.safe_load(text)
    return json.loads(text)


def load_document(location: str):
    """
    Load a JSON or YAML document from a path or an http(s) URL.

    Raises:
        requests.RequestException: If the URL cannot be fetched
        FileNotFoundError: If the path does not exist
        ValueError: If the content cannot be parsed
    """
    if location.startswith(("http://", "https://")):
        response = requests.get(location, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    text = Path(location).read_text(encoding="utf-8")
    try:
        return _parse_document(text, location)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse {location}: {e}") from e


def load_task_snapshot(location: str | None) -> OngoingTask | None:
    """
    Load the ongoing task snapshot.

    A missing or unreadable snapshot is not an error: it is logged and
    None is returned, which draws no task overlay.
    """
    if not location:
        return None

    try:
        return parse_task_snapshot(load_document(location))
    except (requests.RequestException, OSError, ValueError) as e:
        logger.warning(f"No task overlay - could not load task snapshot {location}: {e}")
        return None


def load_templates(location: str | None) -> list[Template]:
    """
    Load a template list.

    The document is either a list of templates or a mapping with a
    ``templates`` key.

    Raises:
        ValueError: If the document or a template is malformed
    """
    if not location:
        return []

    data = load_document(location)
    if isinstance(data, dict):
        data = data.get("templates", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of templates in {location}")

    templates = parse_templates(data)
    logger.info(f"Loaded {len(templates)} template(s) from {location}")
    return templates
