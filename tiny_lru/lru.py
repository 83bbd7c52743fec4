"""Least-recently-used cache with optional per-entry time-to-live.

The cache keeps two structures in step: a dict index from key to
:class:`CacheEntry`, and a doubly linked list threaded through those same
entries, ordered from least recently used (``first``) to most recently used
(``last``). The index owns the entries; ``prev``/``next`` are positional links
only. Access, insertion, update, removal and eviction are all O(1).

Expiration is lazy. A stale entry is removed only when ``get`` reaches it, so
an expired entry keeps occupying a capacity slot until it is read or evicted.

The cache is not thread-safe; callers sharing an instance across threads must
serialize access themselves.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any, Generic, List, Optional, Tuple, TypeVar

from pydantic import ValidationError

from .config.models import CacheConfig, InvalidConfigError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

NEVER_EXPIRES = 0


def _now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(eq=False)
class CacheEntry(Generic[K, V]):
    """A resident key/value pair and its place in recency order.

    Attributes
    ----------
    key: K
        Lookup key.
    value: V
        Stored payload.
    expiry: int
        Epoch milliseconds at which the entry becomes stale, or
        ``NEVER_EXPIRES``.
    prev: Optional[CacheEntry]
        Neighbour towards the least recently used end.
    next: Optional[CacheEntry]
        Neighbour towards the most recently used end.
    """

    key: K
    value: V
    expiry: int = NEVER_EXPIRES
    prev: Optional[CacheEntry[K, V]] = field(default=None, repr=False)
    next: Optional[CacheEntry[K, V]] = field(default=None, repr=False)


def _validated(  # pylint: disable=redefined-builtin
    max: int, ttl: int, reset_ttl: bool
) -> CacheConfig:
    try:
        return CacheConfig(max=max, ttl=ttl, reset_ttl=reset_ttl)
    except ValidationError as exc:
        name = exc.errors()[0]["loc"][0]
        raise InvalidConfigError(f"Invalid {name} value") from exc


class LRU(Generic[K, V]):
    """Bounded key-value cache with LRU eviction and optional TTL.

    Parameters
    ----------
    max: int
        Maximum number of entries. ``0`` means unbounded.
    ttl: int
        Default entry lifetime in milliseconds. ``0`` means entries never
        expire.
    reset_ttl: bool
        Whether ``get`` and ``set`` on an existing key push its expiry out to
        now + ``ttl``.

    Raises
    ------
    InvalidConfigError
        If ``max`` or ``ttl`` is negative or not a number, or ``reset_ttl`` is
        not a bool.
    """

    def __init__(  # pylint: disable=redefined-builtin
        self, max: int = 0, ttl: int = 0, reset_ttl: bool = False
    ) -> None:
        config = _validated(max, ttl, reset_ttl)
        self._max = config.max
        self._ttl = config.ttl
        self._reset_ttl = config.reset_ttl
        self._items: dict[K, CacheEntry[K, V]] = {}
        self._first: Optional[CacheEntry[K, V]] = None
        self._last: Optional[CacheEntry[K, V]] = None
        logger.debug(
            "lru.init",
            extra={"max": self._max, "ttl": self._ttl, "reset_ttl": self._reset_ttl},
        )

    @classmethod
    def from_config(cls, config: CacheConfig) -> LRU[Any, Any]:
        """Build a cache from a :class:`CacheConfig`."""
        return cls(config.max, config.ttl, config.reset_ttl)

    @property
    def max(self) -> int:
        return self._max

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def reset_ttl(self) -> bool:
        return self._reset_ttl

    @property
    def size(self) -> int:
        return len(self._items)

    @property
    def first(self) -> Optional[CacheEntry[K, V]]:
        """Least recently used entry, or None when empty."""
        return self._first

    @property
    def last(self) -> Optional[CacheEntry[K, V]]:
        """Most recently used entry, or None when empty."""
        return self._last

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max={self._max}, ttl={self._ttl}, "
            f"reset_ttl={self._reset_ttl}, size={len(self._items)})"
        )

    def has(self, key: K) -> bool:
        """Return True if `key` is resident. Does not check expiry or reorder."""
        return key in self._items

    def get(self, key: K, default: Any = None) -> Any:
        """Return the value for `key`, or `default` if absent or expired.

        A hit makes `key` the most recently used entry. A stale hit deletes
        the entry instead.
        """
        entry = self._items.get(key)
        if entry is None:
            return default

        if self._ttl > 0 and entry.expiry <= _now_ms():
            logger.debug("lru.expired", extra={"key": key, "expiry": entry.expiry})
            self.delete(key)
            return default

        if self._reset_ttl:
            entry.expiry = self._next_expiry()
        self._promote(entry)
        return entry.value

    def set(self, key: K, value: V, reset_ttl: Optional[bool] = None) -> LRU[K, V]:
        """Insert or update `key` and make it the most recently used entry.

        Parameters
        ----------
        key: K
            Key to store.
        value: V
            Value to store.
        reset_ttl: Optional[bool]
            Refresh the expiry of an existing key. Defaults to the cache's
            ``reset_ttl``. New keys always get a fresh expiry.

        Returns
        -------
        LRU
            The cache itself, for chaining.
        """
        self._store(key, value, reset_ttl)
        return self

    def set_with_evicted(
        self, key: K, value: V, reset_ttl: Optional[bool] = None
    ) -> Optional[CacheEntry[K, V]]:
        """Like :meth:`set`, but return the entry displaced by capacity.

        Returns
        -------
        Optional[CacheEntry]
            A detached copy of the evicted entry (``prev`` and ``next`` are
            None), or None when nothing was evicted.
        """
        return self._store(key, value, reset_ttl)

    def delete(self, key: K) -> LRU[K, V]:
        """Remove `key` if present. Absent keys are ignored."""
        entry = self._items.pop(key, None)
        if entry is not None:
            self._unlink(entry)
        return self

    def evict(self, force: bool = False) -> LRU[K, V]:
        """Remove the least recently used entry.

        An empty cache is left alone unless `force` is set, in which case the
        caller must guarantee the cache is non-empty.
        """
        if force or self._items:
            entry = self._first
            del self._items[entry.key]
            self._first = entry.next
            if self._first is None:
                self._last = None
            else:
                self._first.prev = None
            entry.next = None
            logger.debug(
                "lru.evict", extra={"key": entry.key, "size": len(self._items)}
            )
        return self

    def clear(self) -> LRU[K, V]:
        """Drop every entry."""
        size = len(self._items)
        self._items = {}
        self._first = None
        self._last = None
        logger.debug("lru.clear", extra={"size": size})
        return self

    def expires_at(self, key: K) -> Optional[int]:
        """Return the stored expiry for `key`, or None if absent.

        ``NEVER_EXPIRES`` means the entry is resident and never goes stale.
        Staleness is not checked and order is not changed.
        """
        entry = self._items.get(key)
        if entry is None:
            return None
        return entry.expiry

    def keys(self) -> List[K]:
        """Return resident keys from least to most recently used."""
        result = []
        entry = self._first
        while entry is not None:
            result.append(entry.key)
            entry = entry.next
        return result

    def values(self, keys: Optional[Iterable[K]] = None) -> List[Any]:
        """Return ``get(key)`` for each key, defaulting to a ``keys()`` snapshot.

        Every hit is promoted to most recently used as it is read. The default
        snapshot is taken before any promotion, so each key is visited once.
        """
        if keys is None:
            keys = self.keys()
        return [self.get(key) for key in keys]

    def entries(self, keys: Optional[Iterable[K]] = None) -> List[Tuple[K, Any]]:
        """Return ``(key, get(key))`` pairs. Promotes keys like :meth:`values`."""
        if keys is None:
            keys = self.keys()
        return [(key, self.get(key)) for key in keys]

    def _next_expiry(self) -> int:
        if self._ttl > 0:
            return _now_ms() + self._ttl
        return NEVER_EXPIRES

    def _store(
        self, key: K, value: V, reset_ttl: Optional[bool]
    ) -> Optional[CacheEntry[K, V]]:
        entry = self._items.get(key)
        if entry is not None:
            entry.value = value
            if self._reset_ttl if reset_ttl is None else reset_ttl:
                entry.expiry = self._next_expiry()
            self._promote(entry)
            return None

        evicted = None
        if self._max > 0 and len(self._items) == self._max:
            evicted = replace(self._first, prev=None, next=None)
            self.evict(force=True)

        entry = CacheEntry(key, value, self._next_expiry(), prev=self._last)
        self._items[key] = entry
        if self._last is None:
            self._first = entry
        else:
            self._last.next = entry
        self._last = entry
        return evicted

    def _promote(self, entry: CacheEntry[K, V]) -> None:
        """Move a resident entry to the most recently used end."""
        if entry is self._last:
            return

        # entry is not last, so it has a next neighbour and the list has a tail
        prev, nxt = entry.prev, entry.next
        if prev is None:
            self._first = nxt
        else:
            prev.next = nxt
        nxt.prev = prev

        entry.prev = self._last
        entry.next = None
        self._last.next = entry
        self._last = entry

    def _unlink(self, entry: CacheEntry[K, V]) -> None:
        if entry.prev is None:
            self._first = entry.next
        else:
            entry.prev.next = entry.next

        if entry.next is None:
            self._last = entry.prev
        else:
            entry.next.prev = entry.prev

        entry.prev = None
        entry.next = None


def lru(  # pylint: disable=redefined-builtin
    max: int = 1000, ttl: int = 0, reset_ttl: bool = False
) -> LRU[Any, Any]:
    """Create a validated :class:`LRU`.

    Parameters
    ----------
    max: int
        Maximum number of entries; ``0`` means unbounded. Defaults to 1000.
    ttl: int
        Entry lifetime in milliseconds; ``0`` disables expiry.
    reset_ttl: bool
        Whether reads and updates refresh an entry's expiry.

    Raises
    ------
    InvalidConfigError
        If any parameter is invalid.

    Examples
    --------
    >>> cache = lru(2)
    >>> cache.set("a", 1).set("b", 2).set("c", 3).keys()
    ['b', 'c']
    """
    return LRU(max, ttl, reset_ttl)
