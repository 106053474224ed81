"""
Pipx handler — Python CLI applications in isolated virtualenvs.

``pipx list --json`` shape (only the fields we read)::

    {"venvs": {"black": {"metadata": {"main_package":
        {"package": "black", "package_version": "23.1.0"}}}}}

Each venv contributes one record; the venv name goes in ``environment``.
"""

from __future__ import annotations

import logging
import re

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, load_json, resilient_parser
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

logger = logging.getLogger(__name__)

# Banner lines printed by plain ``pipx list``.
_HEADER_PREFIXES = ("venvs are", "apps are", "manual pages are", "nothing has been installed")

# "package black 23.1.0, installed using Python 3.11.4"
_PACKAGE_LINE = re.compile(r"^package\s+(\S+)\s+([^\s,]+)")
_NAME_VERSION = re.compile(r"^(\S+)\s+(\S+)")


class PipxHandler(ManagerHandler):
    """pipx application installer."""

    id = ManagerId.PIPX
    display_name = "Pipx"
    executable = "pipx"
    common_paths = (
        "~/.local/bin/pipx",
        "/usr/local/bin/pipx",
        "/opt/homebrew/bin/pipx",
        "/usr/bin/pipx",
        "%USERPROFILE%\\.local\\bin\\pipx.exe",
        "%LOCALAPPDATA%\\Programs\\Python\\Python*\\Scripts\\pipx.exe",
    )
    location = "pipx-venv"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("list", "--json")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        return ["uninstall", *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        try:
            data = load_json(output)
        except ValueError:
            return self._parse_text(output)

        venvs = data.get("venvs") if isinstance(data, dict) else None
        if not isinstance(venvs, dict):
            return []

        packages: list[PackageRecord] = []
        for venv_name, venv in venvs.items():
            try:
                main = venv["metadata"]["main_package"]
                record = self.record(
                    main["package"],
                    main["package_version"],
                    environment=venv_name,
                )
            except (KeyError, TypeError):
                logger.debug("Skipping malformed pipx venv: %s", venv_name)
                continue
            if record:
                packages.append(record)
        return packages

    def _parse_text(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            lowered = line.lower()
            if lowered.startswith(_HEADER_PREFIXES) or line.startswith("-"):
                continue
            match = _PACKAGE_LINE.match(line) or _NAME_VERSION.match(line)
            if not match:
                continue
            record = self.record(match.group(1), match.group(2).rstrip(","))
            if record:
                packages.append(record)
        return packages
