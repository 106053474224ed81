"""
npm handler — globally installed Node.js packages.

``npm list -g --depth=0 --json`` returns ``{"dependencies": {name: {"version": ...}}}``.
Without JSON, the tree output is parsed instead:

    /usr/local/lib
    ├── corepack@0.20.0
    └── @vue/cli@5.0.8
"""

from __future__ import annotations

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, load_json, resilient_parser
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

_TREE_MARKERS = ("├──", "└──", "+--", "`--")


class NpmHandler(ManagerHandler):
    """npm global packages."""

    id = ManagerId.NPM
    display_name = "npm"
    executable = "npm"
    common_paths = (
        "/usr/local/bin/npm",
        "/opt/homebrew/bin/npm",
        "/usr/bin/npm",
        "~/.volta/bin/npm",
        "%APPDATA%\\npm\\npm.cmd",
        "%ProgramFiles%\\nodejs\\npm.cmd",
    )
    location = "npm-global"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("list", "-g", "--depth=0", "--json")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        args = ["uninstall", "-g"]
        if options.force:
            args.append("--force")
        return [*args, *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        try:
            data = load_json(output)
        except ValueError:
            return self._parse_tree(output)

        deps = data.get("dependencies") if isinstance(data, dict) else None
        if not isinstance(deps, dict):
            return []

        packages: list[PackageRecord] = []
        for name, info in deps.items():
            if name == "npm" or not isinstance(info, dict):
                continue
            record = self.record(name, info.get("version"))
            if record:
                packages.append(record)
        return packages

    def _parse_tree(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            for marker in _TREE_MARKERS:
                line = line.replace(marker, "")
            entry = line.strip()
            # scoped packages start with "@"; the version separator is the last "@"
            name, _, rest = entry.rpartition("@")
            if not name or name == "npm" or " " in name:
                continue
            version = rest.split()[0] if rest.strip() else ""
            record = self.record(name, version)
            if record:
                packages.append(record)
        return packages
