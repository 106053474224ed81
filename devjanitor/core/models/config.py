"""
User configuration models — overrides read from package-managers.json.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CustomConfig(BaseModel):
    """User-supplied discovery overrides.

    File keys use the camelCase spelling (``customPaths``); Python code
    uses snake_case.  Unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    custom_paths: dict[str, list[str]] = Field(default_factory=dict, alias="customPaths")
    disabled: list[str] = Field(default_factory=list)
    timeout: float | None = Field(default=None, gt=0)   # milliseconds per command

    def paths_for(self, executable: str) -> list[str]:
        """Custom candidate paths for an executable (``.exe`` suffix ignored)."""
        key = executable[:-4] if executable.lower().endswith(".exe") else executable
        return list(self.custom_paths.get(key, []))

    @property
    def timeout_seconds(self) -> float | None:
        """``timeout`` converted for the process runner."""
        return self.timeout / 1000 if self.timeout else None

    def is_disabled(self, manager: str) -> bool:
        return manager in self.disabled


class UninstallOptions(BaseModel):
    """Extra switches for an uninstall request."""

    cask: bool = False          # Homebrew: target a cask, not a formula
    force: bool = False
    flags: list[str] = Field(default_factory=list)
