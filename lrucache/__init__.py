"""
Bounded LRU cache package.

Provides a thread-safe, fixed-capacity key/value cache with least-recently-used
eviction, plus configuration, logging setup and a trace replay CLI.
"""

from .__version__ import __version__
from .cache import (
    BoundedLRUCache,
    Cache,
    CacheConsistencyError,
    CacheError,
    CacheKeyNotFoundError,
    ErrorCode,
    build_cache,
)

__all__ = [
    "BoundedLRUCache",
    "Cache",
    "CacheConsistencyError",
    "CacheError",
    "CacheKeyNotFoundError",
    "ErrorCode",
    "__version__",
    "build_cache",
]
