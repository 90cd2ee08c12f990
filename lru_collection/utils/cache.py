"""Expiring LRU cache utility.

This module provides a thin, typed wrapper over :class:`cachetools.TLRUCache`
exposing the small set of primitives the keyed collection is built on:
`get`/`peek`/`set`/`delete`/`values` and a live length. The wrapper isolates
the dependency and adds the policies the raw cache does not have: per-entry
max age, sliding expiration on read, and stale reads of entries that expired
but have not been purged yet.

Expiry is pull-based. Nothing runs in the background; expired entries are
purged by the next write, length query or explicit :meth:`prune`.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Hashable
from typing import Callable, Generic, List, NamedTuple, Optional, Tuple, TypeVar

from cachetools import Cache, TLRUCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_MAX_AGE_SECONDS = 5 * 60.0


class _Entry(NamedTuple):
    value: object
    max_age: float


class ExpiringLRUCache(Generic[K, V]):
    """LRU cache with sliding, per-entry expiration.

    Parameters
    ----------
    max_size: Optional[int]
        Maximum number of entries to retain. ``None`` or ``0`` means
        unbounded.
        When the cache is full, the least-recently-used entry is discarded.
    max_age: float
        Default time-to-live in seconds for entries stored without an
        explicit ``max_age``.
    update_age_on_get: bool
        Reset an entry's age each time it is read with :meth:`get`.
    stale: bool
        Allow an expired entry that has not been purged yet to be returned
        once by :meth:`get` or :meth:`peek`; either read purges it.
    timer: Callable[[], float]
        Clock used for expiry, ``time.monotonic`` by default.
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        max_age: float = DEFAULT_MAX_AGE_SECONDS,
        update_age_on_get: bool = True,
        stale: bool = True,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size is not None and max_size < 0:
            raise ValueError("max_size must be non-negative")
        if max_age <= 0:
            raise ValueError("max_age must be positive")
        self.max_size = max_size
        self.max_age = max_age
        self.update_age_on_get = update_age_on_get
        self.stale = stale
        self._cache: TLRUCache = TLRUCache(
            maxsize=max_size or math.inf,
            ttu=self._time_to_use,
            timer=timer,
        )

    @staticmethod
    def _time_to_use(_key: object, entry: _Entry, now: float) -> float:
        return now + entry.max_age

    def _raw(self, key: K) -> Optional[_Entry]:
        # Bypasses TLRUCache's expiry check and recency update.
        if not Cache.__contains__(self._cache, key):
            return None
        return Cache.__getitem__(self._cache, key)

    def get(self, key: K) -> Optional[V]:
        """Return value for `key` or None if missing.

        A live entry becomes the most recently used one and, with
        ``update_age_on_get``, starts a fresh max-age window.
        """
        try:
            entry: _Entry = self._cache[key]
        except KeyError:
            # Missing, or expired since the last timer read.
            return self._stale(key)
        if self.update_age_on_get:
            self._cache[key] = entry
        return entry.value  # type: ignore[return-value]

    def peek(self, key: K) -> Optional[V]:
        """Return value for `key` without touching its recency or age.

        An expired entry is handled as in :meth:`get`: purged, and returned
        this one last time only when ``stale`` is enabled.
        """
        entry = self._raw(key)
        if entry is None:
            return None
        if key in self._cache:
            return entry.value  # type: ignore[return-value]
        return self._stale(key)

    def _stale(self, key: K) -> Optional[V]:
        entry = self._raw(key)
        if entry is None:
            return None
        self._cache.expire()
        if not self.stale:
            return None
        logger.debug("cache.stale_read", extra={"key": key})
        return entry.value  # type: ignore[return-value]

    def set(self, key: K, value: V, max_age: Optional[float] = None) -> None:
        """Insert or update `key` with `value`.

        ``max_age`` overrides the default age for this entry only; ``None``
        or ``0`` keeps the default.
        """
        if max_age is not None and max_age < 0:
            raise ValueError("max_age must be non-negative")
        self._cache[key] = _Entry(value, max_age or self.max_age)

    def delete(self, key: K) -> bool:
        """Remove `key`; return True if a live entry was removed."""
        if not Cache.__contains__(self._cache, key):
            return False
        try:
            del self._cache[key]
        except KeyError:
            # TLRUCache removes expired keys but reports them as missing.
            return False
        return True

    def has(self, key: K) -> bool:
        """Return True if `key` holds a live entry; recency is untouched."""
        return key in self._cache

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def keys(self) -> List[K]:
        return list(self._cache)

    def values(self) -> List[V]:
        """Snapshot of live values in the cache's iteration order."""
        return [entry.value for _, entry in self._live_entries()]  # type: ignore

    def items(self) -> List[Tuple[K, V]]:
        return [(key, entry.value) for key, entry in self._live_entries()]  # type: ignore

    def _live_entries(self) -> List[Tuple[K, _Entry]]:
        return [
            (key, Cache.__getitem__(self._cache, key)) for key in list(self._cache)
        ]

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def length(self) -> int:
        """Number of live entries."""
        return len(self._cache)

    def prune(self) -> int:
        """Purge expired entries now and return how many were dropped."""
        expired = self._cache.expire()
        if expired:
            logger.debug("cache.pruned", extra={"count": len(expired)})
        return len(expired)

    def clear(self) -> None:
        self._cache.clear()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_size={self.max_size!r}, "
            f"max_age={self.max_age!r}, length={len(self)})"
        )
