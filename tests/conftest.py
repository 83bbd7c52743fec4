"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like ``import tiny_lru``
resolve correctly regardless of the working directory pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def cache():
    """A fresh cache holding at most two entries."""
    from tiny_lru import lru

    return lru(2)


def _walk(cache) -> List:
    """Check list/index consistency and return keys from first to last."""
    forward = []
    entry = cache.first
    if entry is not None:
        assert entry.prev is None
    while entry is not None:
        forward.append(entry.key)
        entry = entry.next

    backward = []
    entry = cache.last
    if entry is not None:
        assert entry.next is None
    while entry is not None:
        backward.append(entry.key)
        entry = entry.prev

    assert backward == list(reversed(forward))
    assert len(forward) == cache.size == len(cache)
    assert all(cache.has(key) for key in forward)
    if cache.size == 0:
        assert cache.first is None and cache.last is None
    if cache.max > 0:
        assert cache.size <= cache.max
    return forward


@pytest.fixture
def walk():
    """Invariant checker: walks the recency list both ways, returns keys LRU->MRU."""
    return _walk
