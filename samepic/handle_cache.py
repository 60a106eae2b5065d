"""
Bounded handle cache for interactive review.

A fixed-capacity least-recently-used store mapping keys minted by the
cache to decoded or rendered image handles. Keys come from a monotonic
counter and are never reused, so a stale key is recognized only by its
absence from the cache. A key is meaningless outside the cache instance
that issued it.

Not thread-safe: callers sharing a cache across threads must lock.
"""

from __future__ import annotations

import itertools
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar('T')

_cache_ids = itertools.count(1)


@dataclass(frozen=True)
class HandleKey:
    """
    Opaque key issued by a HandleCache.

    Attributes:
        owner: Identity of the issuing cache
        value: Monotonically increasing counter value
    """
    owner: int
    value: int

    def __repr__(self) -> str:
        return f"HandleKey({self.owner}:{self.value})"


class HandleCache(Generic[T]):
    """
    Fixed-capacity LRU cache from HandleKey to handle.

    Examples:
        >>> cache = HandleCache(2)
        >>> key = cache.push("thumb")
        >>> cache.get_or_insert(key, lambda: "re-rendered")
        'thumb'
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"HandleCache capacity must be at least 1 (got {capacity})")
        self._capacity = capacity
        self._id = next(_cache_ids)
        self._counter = itertools.count()
        self._data: OrderedDict[HandleKey, T] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    @property
    def capacity(self) -> int:
        return self._capacity

    def keys(self) -> Iterator[HandleKey]:
        """Resident keys from least to most recently used."""
        return iter(list(self._data))

    def _check_key(self, key: HandleKey) -> None:
        if not isinstance(key, HandleKey) or key.owner != self._id:
            raise ValueError(f"{key!r} was not issued by this cache")

    def _insert(self, key: HandleKey, value: T) -> None:
        while len(self._data) >= self._capacity:
            self._data.popitem(last=False)
        self._data[key] = value

    def new_key(self) -> HandleKey:
        """Mint a fresh key without storing anything under it."""
        return HandleKey(self._id, next(self._counter))

    def push(self, value: T) -> HandleKey:
        """
        Store a value under a freshly minted key.

        Evicts the least-recently-used entry first when full.

        Returns:
            The new key
        """
        key = self.new_key()
        self._insert(key, value)
        return key

    def get(self, key: HandleKey) -> Optional[T]:
        """Return the cached value for key (marking it most recent), or None."""
        self._check_key(key)
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def get_or_insert(self, key: HandleKey, factory: Callable[[], T]) -> T:
        """
        Return the cached value for key, producing it on a miss.

        Args:
            key: Key previously issued by this cache
            factory: Called with no arguments to build the value on a miss

        Returns:
            The cached or newly produced value

        Raises:
            ValueError: If the key was issued by another cache
        """
        self._check_key(key)
        if key in self._data:
            self._data.move_to_end(key)
            return self._data[key]

        value = factory()
        self._insert(key, value)
        return value

    def clear(self) -> None:
        self._data.clear()


__all__ = ['HandleKey', 'HandleCache']
