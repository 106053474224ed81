"""
Host environment — the single source of truth for "what machine are we probing."

Discovery never reads ``os.environ``, ``Path.home()`` or ``sys.platform``
directly.  The entry point captures a snapshot ONCE and threads it through
every component that needs it:

    - CLI:          main.py  → HostEnvironment.from_process()
    - Orchestrator: PackageDiscovery(environment=...)
    - Tests:        HostEnvironment(path=..., home=..., platform=...)

Design notes:
    - Frozen dataclass.  A snapshot, not a live view; PATH edits made
      after startup are only seen by a fresh snapshot.
    - ``platform`` uses ``sys.platform`` spelling (linux, darwin, win32).
"""

from __future__ import annotations

import ntpath
import os
import posixpath
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

_DEFAULT_PATHEXT = ".COM;.EXE;.BAT;.CMD"


@dataclass(frozen=True)
class HostEnvironment:
    """Snapshot of the process environment used for executable resolution."""

    path: str = ""
    home: str = ""
    platform: str = "linux"
    variables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_process(cls) -> HostEnvironment:
        """Capture the current process environment."""
        return cls(
            path=os.environ.get("PATH", ""),
            home=str(Path.home()),
            platform=sys.platform,
            variables=dict(os.environ),
        )

    @property
    def is_windows(self) -> bool:
        return self.platform == "win32"

    @property
    def is_macos(self) -> bool:
        return self.platform == "darwin"

    @property
    def path_separator(self) -> str:
        """Separator between entries of the PATH variable."""
        return ";" if self.is_windows else ":"

    @property
    def pathmod(self) -> ModuleType:
        """``os.path`` flavour matching the target platform."""
        return ntpath if self.is_windows else posixpath

    def path_dirs(self) -> list[str]:
        """Non-blank PATH entries, in order."""
        return [d for d in self.path.split(self.path_separator) if d.strip()]

    def getenv(self, name: str, default: str | None = None) -> str | None:
        """Look up a variable in the snapshot (case-insensitive on Windows)."""
        if name in self.variables:
            return self.variables[name]
        if self.is_windows:
            upper = name.upper()
            for key, value in self.variables.items():
                if key.upper() == upper:
                    return value
        return default

    def join(self, *parts: str) -> str:
        return self.pathmod.join(*parts)

    def executable_suffixes(self) -> list[str]:
        """Lower-cased ``PATHEXT`` entries on Windows; empty elsewhere."""
        if not self.is_windows:
            return []
        raw = self.getenv("PATHEXT") or _DEFAULT_PATHEXT
        return [ext.strip().lower() for ext in raw.split(";") if ext.strip()]

    def command(self, program: str, *args: str) -> list[str]:
        """Argv for running ``program`` on this host.

        Windows process creation only resolves ``.exe`` on its own, so bare
        names and ``.cmd``/``.bat`` shims (npm, composer, pyenv-win) go
        through ``cmd /c``.
        """
        if self.is_windows:
            suffix = self.pathmod.splitext(program)[1].lower()
            if suffix in ("", ".cmd", ".bat"):
                return ["cmd", "/c", program, *args]
        return [program, *args]
