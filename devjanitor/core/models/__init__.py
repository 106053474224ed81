"""
Domain models — Pydantic types for package discovery.

All models are re-exported here for convenient access:

    from devjanitor.core.models import PackageRecord, ManagerStatus, CustomConfig
"""

from devjanitor.core.models.config import CustomConfig, UninstallOptions
from devjanitor.core.models.package import (
    DiscoveryMethod,
    ExecutableSearchResult,
    ManagerAvailability,
    ManagerId,
    ManagerStatus,
    PackageRecord,
)

__all__ = [
    # config.py
    "CustomConfig",
    # package.py
    "DiscoveryMethod",
    "ExecutableSearchResult",
    "ManagerAvailability",
    "ManagerId",
    "ManagerStatus",
    "PackageRecord",
    "UninstallOptions",
]
