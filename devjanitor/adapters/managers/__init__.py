"""Concrete package manager handlers."""

from devjanitor.adapters.managers.composer import ComposerHandler
from devjanitor.adapters.managers.conda import CondaHandler
from devjanitor.adapters.managers.homebrew import HomebrewHandler
from devjanitor.adapters.managers.npm import NpmHandler
from devjanitor.adapters.managers.pip import PipHandler
from devjanitor.adapters.managers.pipx import PipxHandler
from devjanitor.adapters.managers.poetry import PoetryHandler
from devjanitor.adapters.managers.pyenv import PyenvHandler

# Registration order is reporting order.
ALL_HANDLERS = (
    HomebrewHandler,
    CondaHandler,
    PipxHandler,
    PoetryHandler,
    PyenvHandler,
    NpmHandler,
    PipHandler,
    ComposerHandler,
)

__all__ = [
    "ALL_HANDLERS",
    "ComposerHandler",
    "CondaHandler",
    "HomebrewHandler",
    "NpmHandler",
    "PipHandler",
    "PipxHandler",
    "PoetryHandler",
    "PyenvHandler",
]
