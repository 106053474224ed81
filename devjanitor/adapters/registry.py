"""
Handler registry — one handler per package manager.

The registry is the single point of handler management.  The
discovery orchestrator never instantiates handlers itself; it asks
the registry for them by ManagerId.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.managers import ALL_HANDLERS
from devjanitor.adapters.shell.command import CommandRunner
from devjanitor.core.models.package import ManagerId

if TYPE_CHECKING:
    from devjanitor.core.discovery.path_search import TieredPathSearch

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Registry of package manager handlers, keyed by ManagerId."""

    def __init__(self, handlers: list[ManagerHandler] | None = None):
        self._handlers: dict[ManagerId, ManagerHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: ManagerHandler) -> None:
        """Register a handler, replacing any existing one for the same manager."""
        manager = handler.id
        if manager in self._handlers:
            logger.warning("Overwriting existing handler: %s", manager)
        self._handlers[manager] = handler
        logger.debug("Registered handler: %s", manager)

    def unregister(self, manager: ManagerId | str) -> None:
        """Remove a handler from the registry."""
        key = ManagerId.parse(manager)
        if key is not None:
            self._handlers.pop(key, None)

    def get(self, manager: ManagerId | str) -> ManagerHandler | None:
        """Look up a handler by id ("brew", ManagerId.BREW, ...)."""
        key = ManagerId.parse(manager)
        if key is None:
            return None
        return self._handlers.get(key)

    def list_managers(self) -> list[ManagerId]:
        """Registered manager ids, in registration order."""
        return list(self._handlers.keys())

    def handlers(self) -> list[ManagerHandler]:
        return list(self._handlers.values())

    def __contains__(self, manager: object) -> bool:
        if not isinstance(manager, str):
            return False
        key = ManagerId.parse(manager)
        return key is not None and key in self._handlers

    def __iter__(self) -> Iterator[ManagerHandler]:
        return iter(self.handlers())

    def __len__(self) -> int:
        return len(self._handlers)


def default_handlers(
    path_search: TieredPathSearch,
    runner: CommandRunner | None = None,
) -> list[ManagerHandler]:
    """One instance of every built-in handler sharing ``path_search``."""
    return [cls(path_search=path_search, runner=runner) for cls in ALL_HANDLERS]
