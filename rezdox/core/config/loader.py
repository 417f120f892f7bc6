"""
Configuration loader — reads rezdox.yml into a DoxygenRequest.

A package can keep its documentation arguments next to package.yaml
instead of repeating them on every command line:

    doxygen:
      label: doc
      files: [python/mymodule]
      destination: docs
      doxypy: true
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from rezdox.core.models.doxygen import DoxygenRequest

logger = logging.getLogger(__name__)

CONFIG_FILE = "rezdox.yml"


class ConfigError(Exception):
    """Raised when rezdox.yml is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for rezdox.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to rezdox.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path) -> DoxygenRequest:
    """Load and validate the ``doxygen:`` block of a config file.

    A flat file (no ``doxygen:`` key) is read as the block itself.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    block = data.get("doxygen", data)
    if not isinstance(block, dict):
        raise ConfigError(f"Expected 'doxygen' to be a mapping in {path}")

    # A single file is a common shorthand.
    if isinstance(block.get("files"), str):
        block = {**block, "files": [block["files"]]}

    try:
        request = DoxygenRequest.model_validate(block)
    except Exception as e:
        raise ConfigError(f"Invalid doxygen configuration: {e}") from e

    logger.info("Loaded doxygen config '%s' from %s", request.label, path)
    return request
