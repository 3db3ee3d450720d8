"""Thread-safe bounded LRU cache.

The cache keeps two structures that always describe the same key set:

- an *index* (``dict``) mapping each key to the arena slot holding its entry;
- a *recency order*, a doubly linked list threaded through a contiguous arena
  of slots by integer ``prev``/``next`` fields. ``head`` is the most recently
  used slot and ``tail`` the eviction candidate.

Reclaimed slots go on a free list and are reused before the arena grows, so
the arena never holds more than ``capacity`` slots. A single exclusive lock
guards both structures for the full duration of every public operation:
``get`` reorders the list, so there is no shared "reader" path.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from .errors import CacheConsistencyError, CacheKeyNotFoundError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_NIL = -1


@dataclass(slots=True)
class _Slot:
    """Arena node: entry payload plus its links in the recency order."""

    key: Any = None
    value: Any = None
    prev: int = _NIL
    next: int = _NIL


class BoundedLRUCache(Generic[K, V]):
    """Fixed-capacity key/value cache with least-recently-used eviction.

    Parameters
    ----------
    capacity: int
        Maximum number of distinct keys retained. Must be a positive integer.
        When a new key is inserted at capacity, the least recently used entry
        is evicted first.

    Raises
    ------
    ValueError
        If ``capacity`` is not a positive integer.
    """

    def __init__(self, capacity: int) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(
                f"capacity must be a positive integer, got {capacity!r}"
            )
        if capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity}")

        self._capacity = capacity
        self._lock = threading.Lock()
        self._index: Dict[K, int] = {}
        self._slots: List[_Slot] = []
        self._free: List[int] = []
        self._head = _NIL
        self._tail = _NIL

    @property
    def capacity(self) -> int:
        """Maximum number of entries; fixed at construction."""
        return self._capacity

    # ---------------- Public contract ----------------

    def set(self, key: K, value: V) -> None:
        """Insert or update ``key`` with ``value`` and mark it most recent.

        Updating an existing key never evicts. Inserting a new key into a full
        cache evicts exactly one entry, the least recently used.

        Raises
        ------
        CacheConsistencyError
            If an eviction is required but the recency order is empty. The
            cache is left unchanged.
        """
        with self._lock:
            idx = self._index.get(key)
            if idx is not None:
                self._slots[idx].value = value
                self._move_to_front(idx)
                return

            if len(self._index) >= self._capacity:
                self._evict()

            idx = self._alloc(key, value)
            self._link_front(idx)
            self._index[key] = idx

    def remove(self, key: K) -> None:
        """Remove ``key`` from the cache.

        Raises
        ------
        CacheKeyNotFoundError
            If ``key`` is not cached.
        """
        with self._lock:
            idx = self._index.pop(key, None)
            if idx is None:
                raise CacheKeyNotFoundError(key)
            self._unlink(idx)
            self._release(idx)

    def get(self, key: K, default: Optional[V] = None) -> Tuple[Optional[V], bool]:
        """Return ``(value, True)`` and promote ``key``, or ``(default, False)``.

        A miss has no side effects.
        """
        with self._lock:
            idx = self._index.get(key)
            if idx is None:
                return default, False
            self._move_to_front(idx)
            return self._slots[idx].value, True

    def exists(self, key: K) -> bool:
        """Return whether ``key`` is cached without touching its recency."""
        with self._lock:
            return key in self._index

    def size(self) -> int:
        """Return the number of cached keys."""
        with self._lock:
            return len(self._index)

    # ---------------- Python protocol helpers ----------------

    def keys(self) -> List[K]:
        """Snapshot of cached keys, most recently used first."""
        with self._lock:
            out: List[K] = []
            idx = self._head
            while idx != _NIL:
                slot = self._slots[idx]
                out.append(slot.key)
                idx = slot.next
            return out

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._index

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size()}, capacity={self._capacity})"
        )

    # ---------------- Arena and order (lock held by caller) ----------------

    def _alloc(self, key: K, value: V) -> int:
        if self._free:
            idx = self._free.pop()
            slot = self._slots[idx]
            slot.key = key
            slot.value = value
            return idx
        self._slots.append(_Slot(key=key, value=value))
        return len(self._slots) - 1

    def _release(self, idx: int) -> None:
        # Drop references so the evicted value is no longer held by the cache.
        slot = self._slots[idx]
        slot.key = None
        slot.value = None
        self._free.append(idx)

    def _link_front(self, idx: int) -> None:
        slot = self._slots[idx]
        slot.prev = _NIL
        slot.next = self._head
        if self._head != _NIL:
            self._slots[self._head].prev = idx
        else:
            self._tail = idx
        self._head = idx

    def _unlink(self, idx: int) -> None:
        slot = self._slots[idx]
        if slot.prev != _NIL:
            self._slots[slot.prev].next = slot.next
        else:
            self._head = slot.next
        if slot.next != _NIL:
            self._slots[slot.next].prev = slot.prev
        else:
            self._tail = slot.prev
        slot.prev = _NIL
        slot.next = _NIL

    def _move_to_front(self, idx: int) -> None:
        if idx == self._head:
            return
        self._unlink(idx)
        self._link_front(idx)

    def _evict(self) -> None:
        victim = self._tail
        if victim == _NIL:
            raise CacheConsistencyError(
                "no elements to evict: recency order is empty "
                f"while index holds {len(self._index)} of {self._capacity}"
            )
        key = self._slots[victim].key
        self._unlink(victim)
        del self._index[key]
        self._release(victim)
