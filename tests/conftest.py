"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like ``import lrucache``
resolve correctly regardless of the working directory pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def clear_lrucache_env(monkeypatch):
    """Keep ambient LRUCACHE_* variables out of settings-driven tests."""
    monkeypatch.delenv("LRUCACHE_CAPACITY", raising=False)
    monkeypatch.delenv("LRUCACHE_LOG_LEVEL", raising=False)
    yield


@pytest.fixture
def check_invariants():
    """Return a checker asserting index and recency order agree.

    Walks the linked list forwards and backwards through the arena and
    compares it against the index.
    """

    def _check(cache) -> None:
        index = cache._index
        slots = cache._slots

        forward = []
        prev = -1
        idx = cache._head
        while idx != -1:
            slot = slots[idx]
            assert slot.prev == prev
            assert index[slot.key] == idx
            forward.append(slot.key)
            prev = idx
            idx = slot.next
        assert cache._tail == prev

        backward = []
        idx = cache._tail
        while idx != -1:
            backward.append(slots[idx].key)
            idx = slots[idx].prev

        assert backward == list(reversed(forward))
        assert set(forward) == set(index)
        assert len(forward) == len(index) == cache.size()
        assert cache.size() <= cache.capacity
        assert len(slots) <= cache.capacity
        for free_idx in cache._free:
            assert slots[free_idx].key is None
            assert slots[free_idx].value is None
        assert len(slots) == len(index) + len(cache._free)

    return _check
