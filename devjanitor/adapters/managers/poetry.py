"""
Poetry handler — project virtualenvs under Poetry's data directory.

Poetry has no global "list installed" command, so discovery walks
``<data-dir>/virtualenvs`` instead.  Directory names follow

    <project>-<hash>-<pyversion>      e.g. myproject-a1b2C3d4-py3.11

and the project's own version is read from its ``.dist-info`` folder in
the venv's site-packages, falling back to "unknown".

There is no global uninstall; ``uninstall_package`` always returns False.
"""

from __future__ import annotations

import logging
import re

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, resilient_parser
from devjanitor.adapters.shell import filesystem
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"

_DIST_INFO = re.compile(r"^(.+)-([^-]+)\.dist-info$", re.IGNORECASE)
_ACTIVATED_SUFFIX = re.compile(r"\s*\(Activated\)\s*$", re.IGNORECASE)
_NAME_NORMALIZE = re.compile(r"[-_.]+")


class PoetryHandler(ManagerHandler):
    """Poetry dependency manager (virtualenv discovery)."""

    id = ManagerId.POETRY
    display_name = "Poetry"
    executable = "poetry"
    common_paths = (
        "~/.local/bin/poetry",
        "~/.poetry/bin/poetry",
        "/usr/local/bin/poetry",
        "/opt/homebrew/bin/poetry",
        "%APPDATA%\\Python\\Scripts\\poetry.exe",
        "%APPDATA%\\pypoetry\\venv\\Scripts\\poetry.exe",
        "%USERPROFILE%\\.local\\bin\\poetry.exe",
    )
    location = "poetry-env"

    async def list_packages(self) -> list[PackageRecord]:
        data_dir = await self.data_dir()
        venvs_dir = self.environment.join(data_dir, "virtualenvs")
        if not await filesystem.is_dir(venvs_dir):
            logger.debug("No Poetry virtualenvs directory at %s", venvs_dir)
            return []

        packages: list[PackageRecord] = []
        for venv_name in await filesystem.list_dir(venvs_dir, dirs_only=True):
            project = project_name_from_venv(venv_name)
            if not project:
                continue
            venv_path = self.environment.join(venvs_dir, venv_name)
            version = await self._installed_version(venv_path, project)
            record = self.record(project, version or UNKNOWN_VERSION, environment=venv_name)
            if record:
                packages.append(record)
        return packages

    async def uninstall_package(
        self,
        name: str,
        options: UninstallOptions | None = None,
    ) -> bool:
        return False

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        """Parse a list of virtualenv names (``poetry env list`` style)."""
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            venv_name = _ACTIVATED_SUFFIX.sub("", line)
            project = project_name_from_venv(venv_name)
            if not project:
                continue
            record = self.record(project, UNKNOWN_VERSION, environment=venv_name)
            if record:
                packages.append(record)
        return packages

    # ── Data directory ──────────────────────────────────────────

    async def data_dir(self) -> str:
        """Poetry's data dir: ``poetry config data-dir``, else the OS default."""
        result = await self.run("config", "data-dir")
        lines = result.stdout.strip().splitlines() if result.ok else []
        if lines and lines[-1].strip():
            return lines[-1].strip()
        return self.default_data_dir()

    def default_data_dir(self) -> str:
        env = self.environment
        if env.is_windows:
            appdata = env.getenv("APPDATA") or env.join(env.home, "AppData", "Roaming")
            return env.join(appdata, "pypoetry")
        if env.is_macos:
            return env.join(env.home, "Library", "Application Support", "pypoetry")
        xdg = env.getenv("XDG_DATA_HOME") or env.join(env.home, ".local", "share")
        return env.join(xdg, "pypoetry")

    # ── Version lookup ──────────────────────────────────────────

    async def _installed_version(self, venv_path: str, project: str) -> str | None:
        site_packages = await self._site_packages(venv_path)
        if not site_packages:
            return None

        wanted = _normalize(project)
        for entry in await filesystem.list_dir(site_packages):
            match = _DIST_INFO.match(entry)
            if match and _normalize(match.group(1)) == wanted:
                return match.group(2)
        return None

    async def _site_packages(self, venv_path: str) -> str | None:
        env = self.environment
        if env.is_windows:
            return env.join(venv_path, "Lib", "site-packages")
        lib = env.join(venv_path, "lib")
        for entry in await filesystem.list_dir(lib, dirs_only=True):
            if entry.startswith("python"):
                return env.join(lib, entry, "site-packages")
        return None


def project_name_from_venv(venv_name: str) -> str | None:
    """``myproject-a1b2c3d4-py3.11`` → ``myproject`` (None if malformed)."""
    parts = venv_name.strip().split("-")
    if len(parts) < 3:
        return None
    project = "-".join(parts[:-2])
    if not project or not all(parts[-2:]):
        return None
    return project


def _normalize(name: str) -> str:
    return _NAME_NORMALIZE.sub("_", name).lower()
