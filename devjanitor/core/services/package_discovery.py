"""
Package discovery — the one entry point the CLI (or any UI) talks to.

Owns the shared PathCache, one TieredPathSearch built on it, and the
handler registry.  Every public method is total: handler exceptions are
caught here and turned into ``not_installed`` statuses, empty lists or
``False``, with the detail kept in the status message or progress text.

Manager states are recomputed on every discovery call:

    unknown ──▶ available      found by direct command or PATH scan
            ├─▶ path_missing   found at a common / custom path only
            └─▶ not_installed  not found, disabled, unregistered, or errored
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.registry import HandlerRegistry, default_handlers
from devjanitor.adapters.shell.command import CommandRunner
from devjanitor.core.context import HostEnvironment
from devjanitor.core.discovery.path_cache import PathCache
from devjanitor.core.discovery.path_search import TieredPathSearch
from devjanitor.core.models.config import CustomConfig, UninstallOptions
from devjanitor.core.models.package import ManagerId, ManagerStatus, PackageRecord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]


class PackageDiscovery:
    """Discover package managers and inventory what they installed.

    Args:
        cache: Shared path cache (a fresh one by default).
        runner: Process runner shared by the search and every handler.
        environment: Host snapshot; the live process by default.
        handlers: Handlers to register instead of the built-in set.
            They should share this instance's ``path_search``.
        custom_config: Initial user overrides.
    """

    def __init__(
        self,
        cache: PathCache | None = None,
        runner: CommandRunner | None = None,
        environment: HostEnvironment | None = None,
        handlers: list[ManagerHandler] | None = None,
        custom_config: CustomConfig | None = None,
    ):
        self.cache = cache or PathCache()
        self.path_search = TieredPathSearch(
            self.cache,
            runner=runner,
            environment=environment,
            custom_config=custom_config,
        )
        if handlers is None:
            handlers = default_handlers(self.path_search, runner=self.path_search.runner)
        self.registry = HandlerRegistry(handlers)

    @property
    def custom_config(self) -> CustomConfig | None:
        return self.path_search.custom_config

    def get_handler(self, manager: ManagerId | str) -> ManagerHandler | None:
        return self.registry.get(manager)

    def registered_managers(self) -> list[ManagerId]:
        return self.registry.list_managers()

    def clear_cache(self) -> None:
        """Forget every resolved path so the next scan probes again."""
        self.cache.clear()
        for handler in self.registry:
            handler.resolved_path = None
            handler.search_result = None

    # ── Configuration ───────────────────────────────────────────

    async def load_custom_config(self, path: Path | None = None) -> CustomConfig | None:
        """Read the override file and apply it to every later search.

        A missing or invalid file leaves the current configuration alone.
        """
        config = await asyncio.to_thread(
            TieredPathSearch.load_custom_config, path, self.path_search.environment
        )
        if config is not None:
            self.path_search.set_custom_config(config)
        return config

    def _is_disabled(self, manager: ManagerId) -> bool:
        config = self.path_search.custom_config
        return config is not None and config.is_disabled(str(manager))

    # ── Discovery ───────────────────────────────────────────────

    async def discover_available_managers(self) -> list[ManagerStatus]:
        """Probe every registered manager concurrently.

        Returns one status per registered manager, in registration order.
        """
        managers = self.registry.list_managers()
        results = await asyncio.gather(
            *(self.get_manager_status(m) for m in managers),
            return_exceptions=True,
        )

        statuses: list[ManagerStatus] = []
        for manager, result in zip(managers, results):
            if isinstance(result, BaseException):
                logger.warning("Status check for %s failed: %s", manager, result)
                statuses.append(
                    ManagerStatus.not_installed(str(manager), f"Error checking {manager}: {result}")
                )
            else:
                statuses.append(result)
        return statuses

    async def get_manager_status(self, manager: ManagerId | str) -> ManagerStatus:
        """Resolve one manager and classify it."""
        handler = self.registry.get(manager)
        if handler is None:
            return ManagerStatus.not_installed(str(manager), f"Unknown package manager: {manager}")

        key = str(handler.id)
        name = handler.display_name

        if self._is_disabled(handler.id):
            return ManagerStatus.not_installed(key, f"{name} is disabled in configuration")

        try:
            found = await handler.check_availability()
        except Exception as e:
            logger.warning("Error checking %s: %s", key, e)
            self.cache.set_availability(key, False)
            return ManagerStatus.not_installed(key, f"Error checking {name}: {e}")

        result = handler.search_result
        self.cache.set_availability(key, bool(found and result))
        if not found or result is None:
            return ManagerStatus.not_installed(key, f"{name} is not installed on this system")

        if result.in_path:
            return ManagerStatus(
                manager=key,
                status="available",
                discovery_method=result.method,
                found_path=result.path,
                in_path=True,
            )

        return ManagerStatus(
            manager=key,
            status="path_missing",
            discovery_method=result.method,
            found_path=result.path,
            in_path=False,
            message=(
                f"{name} is installed at {result.path} but not in PATH. "
                "Consider adding it to your PATH environment variable."
            ),
        )

    # ── Inventory ───────────────────────────────────────────────

    async def list_packages(self, manager: ManagerId | str) -> list[PackageRecord]:
        """Packages of one manager; [] if unavailable or failing."""
        handler = self.registry.get(manager)
        if handler is None or self._is_disabled(handler.id):
            return []

        try:
            if not await handler.check_availability():
                return []
            return await handler.list_packages()
        except Exception as e:
            logger.warning("Listing %s failed: %s", handler.id, e)
            return []

    async def list_all_packages(
        self,
        on_progress: ProgressCallback | None = None,
    ) -> list[PackageRecord]:
        """Discover managers, then list each usable one in turn.

        ``on_progress(manager, text)`` is called once before and once
        after each manager is listed.
        """
        statuses = await self.discover_available_managers()
        packages: list[PackageRecord] = []

        for status in statuses:
            if not status.usable:
                continue
            handler = self.registry.get(status.manager)
            if handler is None:
                continue

            _notify(on_progress, status.manager, f"Scanning {handler.display_name} packages...")
            try:
                found = await handler.list_packages()
            except Exception as e:
                logger.warning("Listing %s failed: %s", status.manager, e)
                _notify(on_progress, status.manager, f"Error listing {handler.display_name}: {e}")
                continue

            packages.extend(found)
            _notify(
                on_progress, status.manager, f"Found {len(found)} {handler.display_name} packages"
            )

        return packages

    async def uninstall_package(
        self,
        name: str,
        manager: ManagerId | str,
        options: UninstallOptions | None = None,
    ) -> bool:
        """Remove a package through its manager.  False on any failure."""
        handler = self.registry.get(manager)
        if handler is None:
            logger.warning("Cannot uninstall %s: unknown package manager %s", name, manager)
            return False

        try:
            if handler.resolved_path is None and not await handler.check_availability():
                return False
            removed = await handler.uninstall_package(name, options)
        except Exception as e:
            logger.warning("Uninstalling %s via %s failed: %s", name, handler.id, e)
            return False

        if removed:
            logger.info("Uninstalled %s via %s", name, handler.id)
        return removed


def _notify(callback: ProgressCallback | None, manager: str, text: str) -> None:
    if callback is None:
        return
    try:
        callback(manager, text)
    except Exception as e:
        logger.debug("Progress callback failed: %s", e)
