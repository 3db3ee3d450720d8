"""Cache error taxonomy.

Errors are returned to callers by raising; the cache never retries or logs.
Each error carries a stable :class:`ErrorCode` so outer layers (the replay
CLI, application code) can report failures without matching on types.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Standardized error codes"""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CacheError(Exception):
    """Base class for errors raised by cache operations."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, key: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        return self.message


class CacheKeyNotFoundError(CacheError, KeyError):
    """Raised by ``remove`` when the key is not cached.

    Expected and recoverable; the caller decides how to react.
    """

    code = ErrorCode.NOT_FOUND

    def __init__(self, key: Any) -> None:
        super().__init__(f"no entry for key: {key!r} found", key=key)


class CacheConsistencyError(CacheError, RuntimeError):
    """Raised when eviction is required but the recency order is empty.

    Signals a broken internal invariant. Unreachable in a correct cache.
    """

    code = ErrorCode.INTERNAL_ERROR
