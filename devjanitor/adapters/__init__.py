"""Adapters — bindings to the package managers and the host OS.

Public re-exports for convenient access.
"""

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.mock import MockCommandRunner, MockHandler
from devjanitor.adapters.registry import HandlerRegistry, default_handlers

__all__ = [
    "HandlerRegistry",
    "ManagerHandler",
    "MockCommandRunner",
    "MockHandler",
    "default_handlers",
]
