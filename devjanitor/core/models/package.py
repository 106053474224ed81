"""
Discovery models — what the resolver finds and what handlers report.

These are plain data: consumers (CLI, GUI) receive them as
``model_dump(mode="json")`` dictionaries with no behavior attached.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ManagerId(StrEnum):
    """Stable identifiers of the supported package managers."""

    BREW = "brew"
    CONDA = "conda"
    PIPX = "pipx"
    POETRY = "poetry"
    PYENV = "pyenv"
    NPM = "npm"
    PIP = "pip"
    COMPOSER = "composer"

    @classmethod
    def parse(cls, value: str | ManagerId) -> ManagerId | None:
        """Coerce a string into a ManagerId, or None if unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class DiscoveryMethod(StrEnum):
    """Which resolution tier located an executable."""

    DIRECT_COMMAND = "direct_command"
    PATH_SCAN = "path_scan"
    COMMON_PATH = "common_path"
    CUSTOM_PATH = "custom_path"

    @property
    def in_path(self) -> bool:
        """Whether executables found this way are reachable via PATH."""
        return self in (DiscoveryMethod.DIRECT_COMMAND, DiscoveryMethod.PATH_SCAN)


class ExecutableSearchResult(BaseModel):
    """Where an executable was found, and how."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: DiscoveryMethod
    in_path: bool

    @model_validator(mode="after")
    def _in_path_matches_method(self) -> ExecutableSearchResult:
        if self.in_path != self.method.in_path:
            raise ValueError(
                f"in_path={self.in_path} is inconsistent with method '{self.method}'"
            )
        return self

    @classmethod
    def found(cls, path: str, method: DiscoveryMethod) -> ExecutableSearchResult:
        """Build a result with ``in_path`` derived from the method."""
        return cls(path=path, method=method, in_path=method.in_path)


class PackageRecord(BaseModel):
    """One installed package (or runtime) reported by a manager.

    ``name`` and ``version`` are stripped and must be non-empty; anything
    else fails validation and is dropped by the parsers.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    location: str
    manager: str
    channel: str | None = None       # conda
    environment: str | None = None   # pipx / poetry venv
    description: str | None = None   # composer


ManagerAvailability = Literal["available", "path_missing", "not_installed"]


class ManagerStatus(BaseModel):
    """Result of probing one package manager."""

    manager: str
    status: ManagerAvailability = "not_installed"
    discovery_method: DiscoveryMethod | None = None
    found_path: str | None = None
    in_path: bool = False
    message: str | None = None

    @property
    def usable(self) -> bool:
        """Whether the manager can be listed (found by any tier)."""
        return self.status in ("available", "path_missing")

    @classmethod
    def not_installed(cls, manager: str, message: str | None = None) -> ManagerStatus:
        return cls(manager=manager, status="not_installed", in_path=False, message=message)
