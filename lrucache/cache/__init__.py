"""Cache interface and construction helpers."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple, TypeVar, Union, runtime_checkable

from ..config.models import CacheConfig
from .errors import CacheConsistencyError, CacheError, CacheKeyNotFoundError, ErrorCode
from .lru import BoundedLRUCache

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


@runtime_checkable
class Cache(Protocol[K, V]):
    """Protocol for key/value caches.

    Implementations bound their size and decide which entry to discard when
    full. :class:`BoundedLRUCache` is the reference implementation.
    """

    def set(self, key: K, value: V) -> None:
        """Insert or update the entry for ``key``."""
        raise NotImplementedError

    def remove(self, key: K) -> None:
        """Remove the entry for ``key``; raise ``CacheKeyNotFoundError`` if absent."""
        raise NotImplementedError

    def get(self, key: K, default: Optional[V] = None) -> Tuple[Optional[V], bool]:
        """Return ``(value, found)`` for ``key``."""
        raise NotImplementedError

    def exists(self, key: K) -> bool:
        """Return whether an entry exists for ``key``."""
        raise NotImplementedError

    def size(self) -> int:
        """Return the current number of entries."""
        raise NotImplementedError


def build_cache(config: Union[CacheConfig, int]) -> BoundedLRUCache:
    """Create a cache from a :class:`CacheConfig` or a bare capacity.

    Parameters
    ----------
    config: CacheConfig | int
        Validated cache configuration, or the capacity itself.

    Returns
    -------
    BoundedLRUCache
        An empty cache satisfying the :class:`Cache` protocol.
    """
    if isinstance(config, CacheConfig):
        capacity = config.capacity
    else:
        capacity = config
    cache: BoundedLRUCache = BoundedLRUCache(capacity)
    logger.info("cache.created", extra={"capacity": capacity})
    return cache


__all__ = [
    "BoundedLRUCache",
    "Cache",
    "CacheConsistencyError",
    "CacheError",
    "CacheKeyNotFoundError",
    "ErrorCode",
    "build_cache",
]
