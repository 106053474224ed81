"""Executable discovery — session path cache and tiered path search."""

from devjanitor.core.discovery.path_cache import MISS, PathCache
from devjanitor.core.discovery.path_search import TieredPathSearch

__all__ = [
    "MISS",
    "PathCache",
    "TieredPathSearch",
]
