"""
Path cache — session memo of resolved executable locations.

Two logical stores share one timestamp per key:

    paths         key → resolved path, or None for "confirmed absent"
    availability  key → bool

plus the discovery method that produced each path, so a cache hit can
report the tier that originally found it.

Expiry:
    ttl = math.inf  → entries live for the whole session (default)
    ttl = N seconds → any read first evicts the key if now - stamp > N

No locking: all access happens on one event loop, and no method
awaits, so every operation is atomic with respect to the others.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from devjanitor.core.models.package import DiscoveryMethod

logger = logging.getLogger(__name__)


class _Miss:
    """Sentinel for "never resolved" — distinct from a cached None."""

    _instance: _Miss | None = None

    def __new__(cls) -> _Miss:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


class PathCache:
    """Per-key cache of executable paths and availability flags.

    Args:
        ttl: Time-to-live in seconds (``math.inf`` disables expiry).
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, ttl: float = math.inf, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._paths: dict[str, str | None] = {}
        self._methods: dict[str, DiscoveryMethod] = {}
        self._availability: dict[str, bool] = {}
        self._timestamps: dict[str, float] = {}

    # ── Paths ───────────────────────────────────────────────────

    def get_path(self, key: str) -> str | None | _Miss:
        """Cached path, None if cached as absent, MISS if never resolved."""
        if key not in self._paths or self._evict_if_expired(key):
            return MISS
        return self._paths[key]

    def set_path(
        self,
        key: str,
        path: str | None,
        method: DiscoveryMethod | None = None,
    ) -> None:
        """Record a resolution (None = absent).  Last write wins."""
        self._paths[key] = path
        if method is not None and path is not None:
            self._methods[key] = method
        else:
            self._methods.pop(key, None)
        self._touch(key)

    def get_method(self, key: str) -> DiscoveryMethod | None:
        """Tier that produced the cached path, if recorded."""
        if key not in self._paths or self._evict_if_expired(key):
            return None
        return self._methods.get(key)

    # ── Availability ────────────────────────────────────────────

    def get_availability(self, key: str) -> bool | None:
        """Cached availability flag, or None if never recorded."""
        if key not in self._availability or self._evict_if_expired(key):
            return None
        return self._availability[key]

    def set_availability(self, key: str, available: bool) -> None:
        self._availability[key] = available
        self._touch(key)

    # ── Housekeeping ────────────────────────────────────────────

    def invalidate(self, key: str) -> None:
        """Drop every store's entry for ``key``."""
        self._paths.pop(key, None)
        self._methods.pop(key, None)
        self._availability.pop(key, None)
        self._timestamps.pop(key, None)

    def clear(self) -> None:
        self._paths.clear()
        self._methods.clear()
        self._availability.clear()
        self._timestamps.clear()

    def has(self, key: str) -> bool:
        """Whether a live path entry (including a cached None) exists."""
        return key in self._paths and not self._evict_if_expired(key)

    def size(self) -> int:
        """Number of keys holding any entry (expired ones until next read)."""
        return len(self._timestamps)

    def list_keys(self) -> list[str]:
        """Keys with a live path entry, in insertion order."""
        return [key for key in list(self._paths) if not self._evict_if_expired(key)]

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    # ── Internals ───────────────────────────────────────────────

    def _touch(self, key: str) -> None:
        self._timestamps[key] = self._clock()

    def _evict_if_expired(self, key: str) -> bool:
        if math.isinf(self.ttl):
            return False
        stamp = self._timestamps.get(key)
        if stamp is not None and self._clock() - stamp <= self.ttl:
            return False
        logger.debug("Cache entry expired: %s", key)
        self.invalidate(key)
        return True
