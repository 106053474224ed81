"""
Homebrew handler — formulae (CLI tools) and casks (applications).

``brew list --versions`` prints one line per package:

    node 18.17.0 19.0.0
    python@3.11 3.11.4

Only the first version token is kept; it is the active one.
"""

from __future__ import annotations

import asyncio
import logging

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, resilient_parser, split_columns
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

logger = logging.getLogger(__name__)

FORMULA = "formula"
CASK = "cask"


class HomebrewHandler(ManagerHandler):
    """Homebrew package manager (macOS / Linuxbrew)."""

    id = ManagerId.BREW
    display_name = "Homebrew"
    executable = "brew"
    common_paths = (
        "/opt/homebrew/bin/brew",                 # Apple Silicon
        "/usr/local/bin/brew",                    # Intel
        "/home/linuxbrew/.linuxbrew/bin/brew",    # Linuxbrew
        "~/.linuxbrew/bin/brew",
        "~/.homebrew/bin/brew",
    )
    location = FORMULA

    async def list_packages(self) -> list[PackageRecord]:
        """List formulae and casks; both listings run concurrently."""
        formulas, casks = await asyncio.gather(
            self._list(FORMULA, "list", "--formula", "--versions"),
            self._list(CASK, "list", "--cask", "--versions"),
        )
        return formulas + casks

    async def _list(self, location: str, *args: str) -> list[PackageRecord]:
        result = await self.run(*args)
        if not result.ok or not result.stdout:
            logger.debug("brew %s listing failed: %s", location, result.error)
            return []
        return self.parse_listing(result.stdout, location)

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        args = ["uninstall"]
        if options.cask:
            args.append("--cask")
        if options.force:
            args.append("--force")
        return [*args, *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        return self.parse_listing(output, FORMULA)

    @resilient_parser
    def parse_listing(self, output: str, location: str) -> list[PackageRecord]:
        """Parse ``name version [version...]`` lines for one location."""
        packages: list[PackageRecord] = []
        for line in iter_lines(output):
            parts = split_columns(line)
            if len(parts) < 2:
                continue
            record = self.record(parts[0], parts[1], location=location)
            if record:
                packages.append(record)
        return packages
