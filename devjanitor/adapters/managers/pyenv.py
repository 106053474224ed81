"""
Pyenv handler — Python runtimes installed by pyenv.

``pyenv versions --bare`` prints one version per line.  Every runtime
becomes a record named ``python``, so several coexist under one name.
"""

from __future__ import annotations

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, resilient_parser
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

RUNTIME_NAME = "python"


class PyenvHandler(ManagerHandler):
    """pyenv Python version manager."""

    id = ManagerId.PYENV
    display_name = "Pyenv"
    executable = "pyenv"
    common_paths = (
        "~/.pyenv/bin/pyenv",
        "/opt/pyenv/bin/pyenv",
        "/usr/local/bin/pyenv",
        "/opt/homebrew/bin/pyenv",
        "%USERPROFILE%\\.pyenv\\pyenv-win\\bin\\pyenv.bat",
    )
    location = "pyenv-version"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("versions", "--bare")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        # -f: never prompt, the call has no stdin
        return ["uninstall", "-f", *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            record = self.record(RUNTIME_NAME, line)
            if record:
                packages.append(record)
        return packages
