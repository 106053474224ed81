"""
Inventory use cases — discover managers, list packages, uninstall.

Synchronous wrappers over PackageDiscovery for the CLI.  Each builds
(or accepts) a discovery instance, applies the override file, runs one
coroutine with ``asyncio.run`` and returns a plain result object.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, ManagerStatus, PackageRecord
from devjanitor.core.services.package_discovery import PackageDiscovery, ProgressCallback


@dataclass
class DiscoverResult:
    """Status of every registered package manager."""

    statuses: list[ManagerStatus] = field(default_factory=list)
    config_loaded: bool = False

    @property
    def available_count(self) -> int:
        return sum(1 for s in self.statuses if s.status == "available")

    @property
    def path_missing_count(self) -> int:
        return sum(1 for s in self.statuses if s.status == "path_missing")

    def to_dict(self) -> dict:
        return {
            "managers": [s.model_dump(mode="json") for s in self.statuses],
            "available": self.available_count,
            "path_missing": self.path_missing_count,
            "config_loaded": self.config_loaded,
        }


@dataclass
class InventoryResult:
    """Packages found across one or all managers."""

    packages: list[PackageRecord] = field(default_factory=list)
    manager: str | None = None
    error: str | None = None

    def counts(self) -> dict[str, int]:
        """Package count per manager, in first-seen order."""
        return dict(Counter(p.manager for p in self.packages))

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["manager"] = self.manager
        result["total"] = len(self.packages)
        result["counts"] = self.counts()
        result["packages"] = [p.model_dump(mode="json", exclude_none=True) for p in self.packages]
        return result


@dataclass
class UninstallResult:
    name: str
    manager: str
    removed: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "manager": self.manager,
            "removed": self.removed,
            "error": self.error,
        }


def _prepare(
    discovery: PackageDiscovery | None,
    config_path: Path | None,
) -> tuple[PackageDiscovery, bool]:
    discovery = discovery or PackageDiscovery()
    config = asyncio.run(discovery.load_custom_config(config_path))
    return discovery, config is not None


def run_discover(
    config_path: Path | None = None,
    discovery: PackageDiscovery | None = None,
) -> DiscoverResult:
    """Probe every registered package manager.

    Args:
        config_path: Optional explicit override file.
        discovery: Pre-built orchestrator (tests inject mocks here).

    Returns:
        DiscoverResult with one status per manager.
    """
    discovery, loaded = _prepare(discovery, config_path)
    statuses = asyncio.run(discovery.discover_available_managers())
    return DiscoverResult(statuses=statuses, config_loaded=loaded)


def run_inventory(
    config_path: Path | None = None,
    manager: str | None = None,
    on_progress: ProgressCallback | None = None,
    discovery: PackageDiscovery | None = None,
) -> InventoryResult:
    """List installed packages of one manager, or of all of them.

    An unknown ``manager`` id is reported as an error, not raised.
    """
    if manager is not None and ManagerId.parse(manager) is None:
        valid = ", ".join(m.value for m in ManagerId)
        return InventoryResult(
            manager=manager,
            error=f"Unknown package manager '{manager}' (expected one of: {valid})",
        )

    discovery, _ = _prepare(discovery, config_path)

    if manager is None:
        packages = asyncio.run(discovery.list_all_packages(on_progress))
        return InventoryResult(packages=packages)

    manager_id = ManagerId.parse(manager)
    packages = asyncio.run(discovery.list_packages(manager_id))
    return InventoryResult(packages=packages, manager=str(manager_id))


def run_uninstall(
    name: str,
    manager: str,
    options: UninstallOptions | None = None,
    config_path: Path | None = None,
    discovery: PackageDiscovery | None = None,
) -> UninstallResult:
    """Remove ``name`` through ``manager``."""
    manager_id = ManagerId.parse(manager)
    if manager_id is None:
        return UninstallResult(
            name=name, manager=manager, error=f"Unknown package manager '{manager}'"
        )

    discovery, _ = _prepare(discovery, config_path)
    handler = discovery.get_handler(manager_id)
    if handler is None:
        return UninstallResult(
            name=name, manager=str(manager_id), error=f"No handler registered for '{manager_id}'"
        )

    removed = asyncio.run(discovery.uninstall_package(name, manager_id, options))
    result = UninstallResult(name=name, manager=str(manager_id), removed=removed)
    if not removed:
        result.error = f"{handler.display_name} did not remove {name}"
    return result
