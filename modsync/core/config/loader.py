"""
Configuration loader — reads modsync.yml into a ToolConfig.

The config file is optional: with none present, the built-in defaults
(the five cloud-administration modules) apply. When present, it is read
as YAML and validated against the Pydantic schema.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from modsync.core.models.config import ToolConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "modsync.yml"

# Environment override for the pwsh executable
PWSH_ENV_VAR = "MODSYNC_PWSH"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for modsync.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to modsync.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, *, search: bool = True) -> ToolConfig:
    """Load and validate tool configuration.

    Args:
        path: Explicit path to modsync.yml. If None and ``search`` is set,
            searches upward from the working directory.
        search: Whether to search for a config file when no path is given.

    Returns:
        Validated ToolConfig. Defaults when no file is found.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using built-in defaults", CONFIG_FILE)
        return _apply_env(ToolConfig())

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

    # The YAML may wrap everything under a "modsync" key or be flat
    config_data = data.get("modsync", data)
    if not isinstance(config_data, dict):
        raise ConfigError(f"Expected a mapping under 'modsync' in {path}")

    try:
        config = ToolConfig.model_validate(config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config from %s with %d target modules", path, len(config.targets))
    return _apply_env(config)


def _apply_env(config: ToolConfig) -> ToolConfig:
    """Overlay environment overrides onto a loaded config."""
    pwsh = os.environ.get(PWSH_ENV_VAR)
    if pwsh:
        return config.model_copy(update={"pwsh": pwsh})
    return config
