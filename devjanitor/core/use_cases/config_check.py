"""
Config check use case — validate the override file and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devjanitor.core.config.loader import ConfigError, config_dir, find_config_file, read_custom_config
from devjanitor.core.models.config import CustomConfig
from devjanitor.core.models.package import ManagerId


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: CustomConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config": self.config.model_dump(mode="json", by_alias=True) if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the override file and report issues.

    No file at all is valid: discovery simply runs without overrides.

    Args:
        config_path: Optional explicit path to the override file.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.valid = True
        result.warnings.append(f"No override file in {config_dir()}; using defaults.")
        return result

    result.config_path = config_path

    try:
        config = read_custom_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    known = {m.value for m in ManagerId}

    unknown_disabled = sorted(set(config.disabled) - known)
    if unknown_disabled:
        result.warnings.append(f"Unknown managers in 'disabled': {', '.join(unknown_disabled)}")

    for executable, paths in config.custom_paths.items():
        if not paths:
            result.warnings.append(f"No paths listed for '{executable}' in 'customPaths'.")
        for raw in paths:
            if not raw.strip():
                result.errors.append(f"Empty path in 'customPaths.{executable}'.")

    result.valid = not result.errors
    return result
