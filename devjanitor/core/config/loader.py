"""
Configuration loader — reads package-managers.json into a CustomConfig.

The override file is optional.  ``load_custom_config`` is what discovery
uses: a missing, unreadable or malformed file degrades to "no custom
configuration" and never stops a scan.  ``read_custom_config`` is the
strict variant behind ``devjanitor config check``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from devjanitor.core.context import HostEnvironment
from devjanitor.core.models.config import CustomConfig

logger = logging.getLogger(__name__)

APP_DIR_NAME = "dev-janitor"

# Tried in order; the first existing file wins.
CONFIG_FILE_NAMES = (
    "package-managers.json",
    "package-managers.yml",
    "package-managers.yaml",
)

CONFIG_DIR_ENV = "DEV_JANITOR_CONFIG_DIR"


class ConfigError(Exception):
    """Raised when the override file is invalid or unreadable."""


def config_dir(environment: HostEnvironment | None = None) -> Path:
    """Per-user configuration directory.

    ``$DEV_JANITOR_CONFIG_DIR`` wins; otherwise ``<home>/.config/dev-janitor``.
    Both come from ``environment`` (a fresh process snapshot if omitted).
    """
    env = environment or HostEnvironment.from_process()
    override = env.variables.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    base = Path(env.home) if env.home else Path.home()
    return base / ".config" / APP_DIR_NAME


def find_config_file(environment: HostEnvironment | None = None) -> Path | None:
    """Locate the override file, or None if there isn't one."""
    directory = config_dir(environment)
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def read_custom_config(path: Path) -> CustomConfig:
    """Load and validate an override file.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading custom config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    data = _parse(raw, path)

    if data is None:
        return CustomConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    try:
        config = CustomConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info(
        "Loaded custom config: %d path override(s), %d disabled",
        len(config.custom_paths),
        len(config.disabled),
    )
    return config


def load_custom_config(
    path: Path | None = None,
    environment: HostEnvironment | None = None,
) -> CustomConfig | None:
    """Load overrides if present; None when absent or invalid."""
    if path is None:
        path = find_config_file(environment)
    if path is None:
        logger.debug("No custom config file in %s", config_dir(environment))
        return None

    try:
        return read_custom_config(path)
    except ConfigError as e:
        logger.warning("Ignoring custom config: %s", e)
        return None


def _parse(raw: str, path: Path) -> Any:
    if path.suffix.lower() in (".yml", ".yaml"):
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
