"""
Manager handler base — the contract between discovery and one package manager.

The orchestrator only talks to package managers through this interface,
never directly to their command lines.

To add a package manager:
    1. Subclass ManagerHandler
    2. Set id, display_name, executable, common_paths, location
    3. Implement list_packages and parse_output
    4. Add it to ``ALL_HANDLERS`` in adapters/managers/__init__.py
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from devjanitor.adapters.parsing import make_record
from devjanitor.adapters.shell.command import CommandResult, CommandRunner
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ExecutableSearchResult, ManagerId, PackageRecord

if TYPE_CHECKING:
    from devjanitor.core.context import HostEnvironment
    from devjanitor.core.discovery.path_search import TieredPathSearch

logger = logging.getLogger(__name__)


class ManagerHandler(ABC):
    """Abstract base class for package manager handlers.

    A handler resolves its executable through the shared
    TieredPathSearch, remembers the resolved path, and runs every later
    command through it.  ``parse_output`` must never raise.
    """

    id: ClassVar[ManagerId]
    display_name: ClassVar[str]
    executable: ClassVar[str]
    common_paths: ClassVar[tuple[str, ...]] = ()
    location: ClassVar[str]

    def __init__(
        self,
        path_search: TieredPathSearch | None = None,
        runner: CommandRunner | None = None,
    ):
        if path_search is None:
            from devjanitor.core.discovery.path_cache import PathCache
            from devjanitor.core.discovery.path_search import TieredPathSearch

            path_search = TieredPathSearch(PathCache(), runner=runner)
        self.path_search = path_search
        self.runner = runner or path_search.runner
        self.resolved_path: str | None = None
        self.search_result: ExecutableSearchResult | None = None

    @property
    def environment(self) -> HostEnvironment:
        return self.path_search.environment

    # ── Contract ────────────────────────────────────────────────

    async def check_availability(self) -> bool:
        """Resolve the executable; remember where it was found."""
        result = await self.path_search.find_executable(self.executable, self.common_paths)
        self.search_result = result
        if result is None:
            self.resolved_path = None
            return False
        self.resolved_path = result.path
        return True

    @abstractmethod
    async def list_packages(self) -> list[PackageRecord]:
        """List installed packages.  Returns [] when the tool fails."""

    async def uninstall_package(
        self,
        name: str,
        options: UninstallOptions | None = None,
    ) -> bool:
        """Remove a package.  True only if the tool reports success."""
        if not name or not name.strip() or name.startswith("-"):
            return False
        args = self.uninstall_args(name, options or UninstallOptions())
        if args is None:
            return False
        result = await self.run(*args)
        if not result.ok:
            logger.debug("%s uninstall of %s failed: %s", self.id, name, result.error)
        return result.ok

    @abstractmethod
    def parse_output(self, output: str) -> list[PackageRecord]:
        """Turn raw tool output into records.  MUST never raise."""

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str] | None:
        """Arguments for the uninstall command (None = unsupported)."""
        return None

    # ── Helpers ─────────────────────────────────────────────────

    def command(self, *args: str) -> list[str]:
        """Full argv using the resolved executable when known."""
        return self.environment.command(self.resolved_path or self.executable, *args)

    async def run(self, *args: str) -> CommandResult:
        """Run a subcommand of this manager with the configured timeout."""
        return await self.runner.run(self.command(*args), timeout=self.path_search.timeout)

    async def run_and_parse(self, *args: str) -> list[PackageRecord]:
        """Run a listing subcommand and parse its stdout."""
        result = await self.run(*args)
        if not result.ok or not result.stdout:
            logger.debug("%s listing failed: %s", self.id, result.error)
            return []
        return self.parse_output(result.stdout)

    def record(self, name: object, version: object, **extras: object) -> PackageRecord | None:
        """Validated record tagged with this handler's manager and location."""
        extras.setdefault("location", self.location)
        return make_record(name, version, manager=str(self.id), **extras)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"
