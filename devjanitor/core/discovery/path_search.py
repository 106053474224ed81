"""
Tiered path search — find a working copy of an executable.

Strategies run strictly in order; the first success wins and the rest
are skipped:

    0. cache          previously resolved (or confirmed absent)
    1. direct_command ``<name> --version`` succeeds as-is
    2. path_scan      ``<dir>/<name>`` is a file in a PATH dir and runs
    3. common_path    a well-known install location runs
    4. custom_path    a user-configured location runs

Tiers 1-2 mean the executable is reachable via PATH; tiers 3-4 mean it
is installed but PATH is missing it.  Every candidate is checked with
one file probe and, only if that passes, one ``--version`` process.

``find_executable`` never raises.  A failing tier logs at debug and
falls through to the next.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from devjanitor.adapters.shell import filesystem
from devjanitor.adapters.shell.command import CommandRunner
from devjanitor.core.config.loader import load_custom_config
from devjanitor.core.context import HostEnvironment
from devjanitor.core.discovery.path_cache import MISS, PathCache
from devjanitor.core.models.config import CustomConfig
from devjanitor.core.models.package import DiscoveryMethod, ExecutableSearchResult

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"%([^%]+)%")
_WILDCARDS = ("*", "?")


class TieredPathSearch:
    """Resolve executables through cache → command → PATH → common → custom.

    Args:
        cache: Shared path cache (owned by the orchestrator).
        runner: Process runner used for ``--version`` probes.
        environment: Host snapshot (PATH, home, platform).
        custom_config: Optional user overrides.
    """

    def __init__(
        self,
        cache: PathCache,
        runner: CommandRunner | None = None,
        environment: HostEnvironment | None = None,
        custom_config: CustomConfig | None = None,
    ):
        self.cache = cache
        self.runner = runner or CommandRunner()
        self.environment = environment or HostEnvironment.from_process()
        self.custom_config = custom_config

    @property
    def timeout(self) -> float | None:
        """Per-probe timeout in seconds from config, else the runner's default."""
        if self.custom_config and self.custom_config.timeout:
            return self.custom_config.timeout_seconds
        return None

    def set_custom_config(self, config: CustomConfig | None) -> None:
        """Install (or clear) user overrides for subsequent searches."""
        self.custom_config = config

    @staticmethod
    def load_custom_config(
        path: Path | None = None,
        environment: HostEnvironment | None = None,
    ) -> CustomConfig | None:
        """Read the on-disk override file; None if absent or invalid."""
        return load_custom_config(path, environment)

    # ── Search ──────────────────────────────────────────────────

    async def find_executable(
        self,
        executable: str,
        common_paths: Sequence[str],
    ) -> ExecutableSearchResult | None:
        """Locate ``executable``, consulting and populating the cache.

        Returns:
            ExecutableSearchResult, or None if no tier found it.
        """
        cached = self.cache.get_path(executable)
        if cached is not MISS:
            if cached is None:
                logger.debug("Cache hit (absent): %s", executable)
                return None
            method = self.cache.get_method(executable) or DiscoveryMethod.DIRECT_COMMAND
            logger.debug("Cache hit: %s → %s (%s)", executable, cached, method)
            return ExecutableSearchResult.found(cached, method)

        tiers = (
            (DiscoveryMethod.DIRECT_COMMAND, self._check_direct_command, ()),
            (DiscoveryMethod.PATH_SCAN, self._scan_path_environment, ()),
            (DiscoveryMethod.COMMON_PATH, self._search_paths, (common_paths,)),
            (DiscoveryMethod.CUSTOM_PATH, self._search_custom_paths, ()),
        )

        for method, tier, extra in tiers:
            try:
                path = await tier(executable, *extra)
            except Exception as e:
                logger.debug("Tier %s failed for %s: %s", method, executable, e)
                continue
            if path:
                logger.debug("Found %s via %s: %s", executable, method, path)
                self.cache.set_path(executable, path, method)
                return ExecutableSearchResult.found(path, method)

        logger.debug("Not found by any tier: %s", executable)
        self.cache.set_path(executable, None)
        return None

    # ── Tiers ───────────────────────────────────────────────────

    async def _check_direct_command(self, executable: str) -> str | None:
        """Tier 1: the bare name runs."""
        argv = self.environment.command(executable, "--version")
        result = await self.runner.run(argv, timeout=self.timeout)
        return executable if result.ok else None

    async def _scan_path_environment(self, executable: str) -> str | None:
        """Tier 2: walk PATH entries looking for a runnable file."""
        env = self.environment
        names = [executable]
        suffixes = env.executable_suffixes()
        if suffixes and not executable.lower().endswith(tuple(suffixes)):
            # Windows only runs files with a PATHEXT suffix.
            names = [executable + ext for ext in suffixes]

        for directory in env.path_dirs():
            for name in names:
                candidate = env.join(directory, name)
                if not await filesystem.is_file(candidate):
                    continue
                if await self._run_version(candidate):
                    return candidate
                break  # structural match failed verification; next dir
        return None

    async def _search_paths(self, executable: str, paths: Sequence[str]) -> str | None:
        """Tier 3 (and 4): expand and verify each candidate in order."""
        for raw in paths:
            for candidate in await self._candidates(raw):
                if await self._verify_executable(candidate):
                    return candidate
        return None

    async def _search_custom_paths(self, executable: str) -> str | None:
        """Tier 4: user-configured locations for this executable."""
        if not self.custom_config:
            return None
        paths = self.custom_config.paths_for(executable)
        if not paths:
            return None
        return await self._search_paths(executable, paths)

    # ── Helpers ─────────────────────────────────────────────────

    async def _candidates(self, raw: str) -> list[str]:
        expanded = self.expand_path(raw)
        if any(ch in expanded for ch in _WILDCARDS):
            return await filesystem.glob_paths(expanded)
        return [expanded]

    async def _verify_executable(self, path: str) -> bool:
        """File check first; spawn ``--version`` only for real files."""
        if not await filesystem.is_file(path):
            return False
        return await self._run_version(path)

    async def _run_version(self, path: str) -> bool:
        argv = self.environment.command(path, "--version")
        result = await self.runner.run(argv, timeout=self.timeout)
        if not result.ok:
            logger.debug("Verification failed for %s: %s", path, result.error)
        return result.ok

    def expand_path(self, raw: str) -> str:
        """Expand a leading ``~`` and, on Windows, ``%VAR%`` references.

        Unknown ``%VAR%`` tokens are left intact.
        """
        env = self.environment
        path = raw

        if path == "~":
            path = env.home
        elif path.startswith(("~/", "~\\")):
            path = env.join(env.home, path[2:])

        if env.is_windows:
            path = _ENV_REF.sub(
                lambda m: env.getenv(m.group(1)) or m.group(0),
                path,
            )

        return path
