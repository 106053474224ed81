"""
Mock runner and handler — test doubles for the process boundary.

Used to exercise discovery without touching real package managers.
Responses are configured per command line; anything unconfigured
fails like a missing binary.
"""

from __future__ import annotations

from collections.abc import Sequence

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.shell.command import CommandResult, CommandRunner
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import (
    DiscoveryMethod,
    ExecutableSearchResult,
    ManagerId,
    PackageRecord,
)


class MockCommandRunner(CommandRunner):
    """CommandRunner that answers from a table instead of spawning processes.

    Keys are full command lines (``"brew --version"``).  A key ending in
    ``*`` matches any command line that starts with the rest of it.
    """

    def __init__(self, default_error: str = "command not found"):
        super().__init__()
        self._default_error = default_error
        self._responses: dict[str, CommandResult] = {}
        self._call_log: list[list[str]] = []
        self._timeouts: list[float | None] = []

    @property
    def call_log(self) -> list[list[str]]:
        """Every argv this runner has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def timeouts(self) -> list[float | None]:
        """Timeout passed with each call, parallel to ``call_log``."""
        return self._timeouts

    def set_response(self, command: str, stdout: str = "", stderr: str = "") -> None:
        """Make ``command`` succeed with the given output."""
        self._responses[command] = CommandResult.success(command.split(), stdout=stdout, stderr=stderr)

    def set_failure(self, command: str, error: str = "Mock failure", returncode: int = 1) -> None:
        """Make ``command`` exit non-zero."""
        self._responses[command] = CommandResult.failure(
            command.split(), error=error, returncode=returncode
        )

    def set_result(self, command: str, result: CommandResult) -> None:
        self._responses[command] = result

    def calls_matching(self, prefix: str) -> list[list[str]]:
        return [args for args in self._call_log if " ".join(args).startswith(prefix)]

    async def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        argv = [str(a) for a in args]
        self._call_log.append(argv)
        self._timeouts.append(timeout)

        line = " ".join(argv)
        if line in self._responses:
            return self._responses[line]
        for key, result in self._responses.items():
            if key.endswith("*") and line.startswith(key[:-1]):
                return result
        return CommandResult.failure(argv, error=self._default_error)

    def reset(self) -> None:
        """Clear call log and configured responses."""
        self._call_log.clear()
        self._timeouts.clear()
        self._responses.clear()


class MockHandler(ManagerHandler):
    """Handler with canned availability and packages.

    By default it is available in PATH and lists nothing.  ``method``
    picks the tier it pretends to have been found by; ``error`` is raised
    from the availability check and ``list_error`` from listing.
    """

    executable = "mock"
    display_name = "Mock"
    location = "mock"

    def __init__(
        self,
        manager: ManagerId = ManagerId.BREW,
        available: bool = True,
        packages: list[PackageRecord] | None = None,
        error: Exception | None = None,
        list_error: Exception | None = None,
        uninstall_ok: bool = True,
        method: DiscoveryMethod = DiscoveryMethod.DIRECT_COMMAND,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.id = manager
        self.display_name = manager.value.capitalize()
        self._available = available
        self._packages = packages or []
        self._error = error
        self._list_error = list_error
        self._uninstall_ok = uninstall_ok
        self._method = method
        self.uninstalled: list[tuple[str, UninstallOptions | None]] = []
        self.list_calls = 0

    async def check_availability(self) -> bool:
        if self._error is not None:
            raise self._error
        if self._available:
            self.resolved_path = f"/mock/bin/{self.id}"
            self.search_result = ExecutableSearchResult.found(self.resolved_path, self._method)
        else:
            self.resolved_path = None
            self.search_result = None
        return self._available

    async def list_packages(self) -> list[PackageRecord]:
        self.list_calls += 1
        if self._list_error is not None:
            raise self._list_error
        return list(self._packages)

    async def uninstall_package(
        self,
        name: str,
        options: UninstallOptions | None = None,
    ) -> bool:
        self.uninstalled.append((name, options))
        return self._uninstall_ok

    def parse_output(self, output: str) -> list[PackageRecord]:
        return []
