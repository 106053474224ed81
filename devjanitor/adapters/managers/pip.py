"""
pip handler — packages in the user's default Python installation.

``pip list --format=json`` returns ``[{"name": ..., "version": ...}]``;
the text fallback reads the column layout::

    Package    Version
    ---------- -------
    requests   2.31.0

The bootstrap trio (pip, setuptools, wheel) is not reported.
"""

from __future__ import annotations

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, load_json, resilient_parser, split_columns
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

BOOTSTRAP_PACKAGES = frozenset({"pip", "setuptools", "wheel"})


class PipHandler(ManagerHandler):
    """pip (the default interpreter's site-packages)."""

    id = ManagerId.PIP
    display_name = "pip"
    executable = "pip"
    # many systems only ship the versioned name
    common_paths = (
        "/usr/local/bin/pip3",
        "/opt/homebrew/bin/pip3",
        "/usr/bin/pip3",
        "~/.local/bin/pip",
        "~/.local/bin/pip3",
        "%LOCALAPPDATA%\\Programs\\Python\\Python*\\Scripts\\pip.exe",
    )
    location = "site-packages"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("list", "--format=json", "--disable-pip-version-check")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        return ["uninstall", "-y", *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        try:
            data = load_json(output)
        except ValueError:
            return self._parse_columns(output)

        if not isinstance(data, list):
            return []

        packages: list[PackageRecord] = []
        for entry in data:
            if not isinstance(entry, dict) or _is_bootstrap(entry.get("name")):
                continue
            record = self.record(entry.get("name"), entry.get("version"))
            if record:
                packages.append(record)
        return packages

    def _parse_columns(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            parts = split_columns(line)
            if len(parts) < 2 or line.startswith("-") or parts[:2] == ["Package", "Version"]:
                continue
            if _is_bootstrap(parts[0]):
                continue
            record = self.record(parts[0], parts[1])
            if record:
                packages.append(record)
        return packages


def _is_bootstrap(name: object) -> bool:
    return isinstance(name, str) and name.lower() in BOOTSTRAP_PACKAGES
