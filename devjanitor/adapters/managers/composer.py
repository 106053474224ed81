"""
Composer handler — globally required PHP packages.

``composer global show --format=json`` returns
``{"installed": [{"name": ..., "version": ..., "description": ...}]}``.
Plain ``composer global show`` prints ``name version description...``.
"""

from __future__ import annotations

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, load_json, resilient_parser, split_columns
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

# Composer prefixes global commands with this notice on stderr/stdout.
_NOTICE_PREFIX = "Changed current directory to"


class ComposerHandler(ManagerHandler):
    """Composer global packages."""

    id = ManagerId.COMPOSER
    display_name = "Composer"
    executable = "composer"
    common_paths = (
        "/usr/local/bin/composer",
        "/opt/homebrew/bin/composer",
        "/usr/bin/composer",
        "~/.composer/vendor/bin/composer",
        "%ProgramData%\\ComposerSetup\\bin\\composer.bat",
    )
    location = "composer-global"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("global", "show", "--format=json", "--no-interaction")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        return ["global", "remove", "--no-interaction", *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        try:
            data = load_json(output)
        except ValueError:
            return self._parse_text(output)

        installed = data.get("installed") if isinstance(data, dict) else None
        if not isinstance(installed, list):
            return []

        packages: list[PackageRecord] = []
        for entry in installed:
            if not isinstance(entry, dict):
                continue
            record = self.record(
                entry.get("name"),
                entry.get("version"),
                description=entry.get("description"),
            )
            if record:
                packages.append(record)
        return packages

    def _parse_text(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            if line.startswith(_NOTICE_PREFIX):
                continue
            parts = split_columns(line)
            # vendor/package names always contain a slash
            if len(parts) < 2 or "/" not in parts[0]:
                continue
            description = " ".join(parts[2:]) or None
            record = self.record(parts[0], parts[1], description=description)
            if record:
                packages.append(record)
        return packages
