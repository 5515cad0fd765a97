"""A least-recently-used cache with a fixed capacity."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable
from typing import Generic, TypeVar

V = TypeVar("V")


class LRUCache(Generic[V]):
    """Maps keys to values and evicts the least recently used entry when full."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("cache capacity must be positive")
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, V] = OrderedDict()
        self._last_id = 0

    def new_cache_id(self) -> int:
        """Return an id unique to this cache, for partitioning it among several users."""
        self._last_id += 1
        return self._last_id

    def insert(self, key: Hashable, value: V) -> None:
        """Store value under key, evicting the least recently used entry if full."""
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[key] = value

    def get(self, key: Hashable) -> V | None:
        """Return the value for key and mark it as recently used, or None if absent."""
        try:
            self._entries.move_to_end(key)
        except KeyError:
            return None
        return self._entries[key]

    def remove(self, key: Hashable) -> V | None:
        """Remove key from the cache and return its value, or None if absent."""
        return self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries